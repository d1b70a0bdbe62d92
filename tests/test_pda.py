import unittest
from unittest.mock import patch

from solders.pubkey import Pubkey

from ebalts import pda
from ebalts.errors import AddressDerivationExhausted, InvalidSeeds
from ebalts.pda import create_program_address, find_program_address

PROGRAM_ID = Pubkey.from_string("BPFLoaderUpgradeab1e11111111111111111111111")


class FindProgramAddressTests(unittest.TestCase):
    def test_matches_solders_reference(self) -> None:
        seed_sets = [
            [],
            [b""],
            [b"Talking", b"Squirrels"],
            [b"thaw_extra_account_metas", bytes(Pubkey.new_unique())],
            [b"wallet_entry", bytes(Pubkey.new_unique()), b"\x02"],
            [b"x" * 32] * 15,
        ]
        for seeds in seed_sets:
            with self.subTest(seeds=seeds):
                self.assertEqual(
                    find_program_address(seeds, PROGRAM_ID),
                    Pubkey.find_program_address(seeds, PROGRAM_ID),
                )

    def test_is_deterministic(self) -> None:
        seeds = [b"flag", bytes(Pubkey.new_unique())]
        self.assertEqual(find_program_address(seeds, PROGRAM_ID), find_program_address(seeds, PROGRAM_ID))

    def test_single_byte_change_moves_address(self) -> None:
        base = bytearray(b"gating-seed-0123456789")
        address, _ = find_program_address([bytes(base)], PROGRAM_ID)
        for idx in range(len(base)):
            changed = bytearray(base)
            changed[idx] ^= 0x01
            other, _ = find_program_address([bytes(changed)], PROGRAM_ID)
            self.assertNotEqual(address, other)

    def test_program_id_changes_address(self) -> None:
        seeds = [b"config"]
        self.assertNotEqual(
            find_program_address(seeds, PROGRAM_ID)[0],
            find_program_address(seeds, Pubkey.new_unique())[0],
        )

    def test_bump_reproduces_address(self) -> None:
        seeds = [b"mint", bytes(Pubkey.new_unique())]
        address, bump = find_program_address(seeds, PROGRAM_ID)
        self.assertEqual(create_program_address(seeds + [bytes([bump])], PROGRAM_ID), address)
        self.assertFalse(address.is_on_curve())

    def test_rejects_too_many_seeds(self) -> None:
        with self.assertRaises(InvalidSeeds):
            find_program_address([b"a"] * 16, PROGRAM_ID)
        with self.assertRaises(InvalidSeeds):
            create_program_address([b"a"] * 17, PROGRAM_ID)

    def test_rejects_long_seed(self) -> None:
        with self.assertRaises(InvalidSeeds):
            find_program_address([b"a" * 33], PROGRAM_ID)

    def test_exhausted_search(self) -> None:
        with patch("ebalts.pda._hash_address", side_effect=pda._OnCurve) as hash_mock:
            with self.assertRaises(AddressDerivationExhausted):
                find_program_address([b"never"], PROGRAM_ID)
        self.assertEqual(hash_mock.call_count, 256)
        bumps = [call.args[0][-1] for call in hash_mock.call_args_list]
        self.assertEqual(bumps[0], b"\xff")
        self.assertEqual(bumps[-1], b"\x00")


class CreateProgramAddressTests(unittest.TestCase):
    def test_matches_solders_reference(self) -> None:
        seeds = [b"Talking", b"Squirrels"]
        self.assertEqual(
            create_program_address(seeds, PROGRAM_ID),
            Pubkey.create_program_address(seeds, PROGRAM_ID),
        )

    def test_on_curve_result_is_rejected(self) -> None:
        with patch("ebalts.pda._hash_address", side_effect=pda._OnCurve):
            with self.assertRaises(InvalidSeeds):
                create_program_address([b"seed"], PROGRAM_ID)


if __name__ == "__main__":
    unittest.main()
