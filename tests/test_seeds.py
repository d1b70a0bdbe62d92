import unittest

from solders.pubkey import Pubkey

from ebalts.accounts import AccountCache, AccountRole, FetchedAccount, KnownAccounts, ResolvedAccountMeta
from ebalts.errors import (
    AccountDataOutOfBounds,
    AccountNotFound,
    SeedOutOfBounds,
    UnresolvedSeedReference,
)
from ebalts.seeds import resolve_pubkey_data, resolve_seed, resolve_seeds
from ebalts.tlv import (
    AccountDataPubkey,
    AccountDataSeed,
    AccountKeySeed,
    InstructionDataPubkey,
    InstructionDataSeed,
    LiteralSeed,
)


class CountingFetcher:
    def __init__(self, accounts: dict) -> None:
        self.accounts = accounts
        self.calls: list = []

    async def __call__(self, address: Pubkey):
        self.calls.append(address)
        return self.accounts.get(address)


class SeedResolutionTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.a = Pubkey.new_unique()
        self.b = Pubkey.new_unique()
        self.data_b = bytes(range(100))
        self.fetcher = CountingFetcher({self.b: self.data_b})
        self.cache = AccountCache(self.fetcher)
        self.known = KnownAccounts([ResolvedAccountMeta(self.a), ResolvedAccountMeta(self.b, AccountRole.WRITABLE)])

    async def test_literal_is_verbatim(self) -> None:
        value = await resolve_seed(LiteralSeed(b"wallet_entry"), self.known, b"", self.cache)
        self.assertEqual(value, b"wallet_entry")

    async def test_instruction_data_slice(self) -> None:
        value = await resolve_seed(InstructionDataSeed(2, 3), self.known, b"\x00\x01\x02\x03\x04", self.cache)
        self.assertEqual(value, b"\x02\x03\x04")

    async def test_instruction_data_too_short(self) -> None:
        with self.assertRaises(SeedOutOfBounds):
            await resolve_seed(InstructionDataSeed(2, 4), self.known, b"\x00\x01\x02\x03\x04", self.cache)

    async def test_account_key_uses_raw_address(self) -> None:
        value = await resolve_seed(AccountKeySeed(0), self.known, b"", self.cache)
        self.assertEqual(value, bytes(self.a))
        self.assertEqual(self.fetcher.calls, [])

    async def test_forward_reference_fails(self) -> None:
        for index in (2, 3, 255):
            with self.subTest(index=index):
                with self.assertRaises(UnresolvedSeedReference):
                    await resolve_seed(AccountKeySeed(index), self.known, b"", self.cache)
                with self.assertRaises(UnresolvedSeedReference):
                    await resolve_seed(AccountDataSeed(index, 0, 1), self.known, b"", self.cache)

    async def test_account_data_slice(self) -> None:
        value = await resolve_seed(AccountDataSeed(1, 64, 1), self.known, b"", self.cache)
        self.assertEqual(value, bytes([64]))

    async def test_account_data_missing_account(self) -> None:
        with self.assertRaises(AccountNotFound):
            await resolve_seed(AccountDataSeed(0, 0, 1), self.known, b"", self.cache)

    async def test_account_data_too_short(self) -> None:
        with self.assertRaises(AccountDataOutOfBounds):
            await resolve_seed(AccountDataSeed(1, 90, 11), self.known, b"", self.cache)

    async def test_seeds_keep_order_and_fetch_once(self) -> None:
        seeds = [
            LiteralSeed(b"x"),
            AccountDataSeed(1, 0, 2),
            AccountKeySeed(1),
            AccountDataSeed(1, 10, 1),
        ]
        resolved = await resolve_seeds(seeds, self.known, b"", self.cache)
        self.assertEqual(resolved, [b"x", b"\x00\x01", bytes(self.b), b"\x0a"])
        self.assertEqual(self.fetcher.calls, [self.b])

    async def test_pubkey_from_instruction_data(self) -> None:
        target = Pubkey.new_unique()
        data = b"\xaa" * 8 + bytes(target)
        value = await resolve_pubkey_data(InstructionDataPubkey(8), self.known, data, self.cache)
        self.assertEqual(value, target)
        with self.assertRaises(SeedOutOfBounds):
            await resolve_pubkey_data(InstructionDataPubkey(9), self.known, data, self.cache)

    async def test_pubkey_from_account_data(self) -> None:
        value = await resolve_pubkey_data(AccountDataPubkey(1, 32), self.known, b"", self.cache)
        self.assertEqual(bytes(value), self.data_b[32:64])
        with self.assertRaises(AccountDataOutOfBounds):
            await resolve_pubkey_data(AccountDataPubkey(1, 80), self.known, b"", self.cache)


class AccountCacheTests(unittest.IsolatedAsyncioTestCase):
    async def test_accepts_sync_fetchers_and_account_objects(self) -> None:
        address = Pubkey.new_unique()

        class Account:
            data = b"\x01\x02"

        cache = AccountCache(lambda _: Account())
        self.assertEqual(await cache.data(address), b"\x01\x02")
        self.assertIn(address, cache)

    async def test_missing_accounts_are_cached(self) -> None:
        fetcher = CountingFetcher({})
        cache = AccountCache(fetcher)
        address = Pubkey.new_unique()
        self.assertFalse((await cache.get(address)).exists)
        self.assertFalse((await cache.get(address)).exists)
        self.assertEqual(len(fetcher.calls), 1)

    async def test_rejects_unknown_return_values(self) -> None:
        cache = AccountCache(lambda _: 42)
        with self.assertRaises(TypeError):
            await cache.get(Pubkey.new_unique())

    async def test_accepts_record_mappings(self) -> None:
        present, absent = Pubkey.new_unique(), Pubkey.new_unique()
        records = {
            present: {"exists": True, "data": b"\x05"},
            absent: {"exists": False, "data": b""},
        }
        cache = AccountCache(records.get)
        self.assertEqual(await cache.data(present), b"\x05")
        self.assertFalse((await cache.get(absent)).exists)

    async def test_not_existing_object_without_data_is_missing(self) -> None:
        class MaybeAccount:
            exists = False

        cache = AccountCache(lambda _: MaybeAccount())
        with self.assertRaises(AccountNotFound):
            await cache.data(Pubkey.new_unique())

    async def test_explicit_missing_account(self) -> None:
        cache = AccountCache(lambda _: FetchedAccount(exists=False))
        with self.assertRaises(AccountNotFound):
            await cache.data(Pubkey.new_unique())


class KnownAccountsTests(unittest.TestCase):
    def test_bounds_checked(self) -> None:
        known = KnownAccounts([ResolvedAccountMeta(Pubkey.new_unique())])
        with self.assertRaises(UnresolvedSeedReference):
            known.get(-1)
        with self.assertRaises(UnresolvedSeedReference):
            known.get(1)
        added = ResolvedAccountMeta(Pubkey.new_unique(), AccountRole.WRITABLE_SIGNER)
        known.append(added)
        self.assertEqual(known.get(1), added)
        self.assertEqual(len(known), 2)

    def test_role_flags(self) -> None:
        self.assertEqual(AccountRole.from_flags(False, False), AccountRole.READONLY)
        self.assertEqual(AccountRole.from_flags(False, True), AccountRole.WRITABLE)
        self.assertEqual(AccountRole.from_flags(True, False), AccountRole.READONLY_SIGNER)
        self.assertEqual(AccountRole.from_flags(True, True), AccountRole.WRITABLE_SIGNER)
        for role in AccountRole:
            self.assertEqual(AccountRole.from_flags(role.is_signer, role.is_writable), role)

    def test_account_meta_conversion(self) -> None:
        meta = ResolvedAccountMeta(Pubkey.new_unique(), AccountRole.READONLY_SIGNER)
        converted = meta.to_account_meta()
        self.assertTrue(converted.is_signer)
        self.assertFalse(converted.is_writable)
        self.assertEqual(ResolvedAccountMeta.from_account_meta(converted), meta)


if __name__ == "__main__":
    unittest.main()
