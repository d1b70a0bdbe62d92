"""Program-derived address search."""

from __future__ import annotations

import hashlib
from typing import Sequence, Tuple

from solders.pubkey import Pubkey

from .constants import MAX_SEED_LEN, MAX_SEEDS, PDA_MARKER
from .errors import AddressDerivationExhausted, InvalidSeeds


class _OnCurve(Exception):
    pass


def _check_seeds(seeds: Sequence[bytes]) -> None:
    if len(seeds) > MAX_SEEDS:
        raise InvalidSeeds(f"{len(seeds)} seeds exceed the limit of {MAX_SEEDS}")
    for idx, seed in enumerate(seeds):
        if len(seed) > MAX_SEED_LEN:
            raise InvalidSeeds(f"seed {idx} is {len(seed)} bytes, more than {MAX_SEED_LEN}")


def _hash_address(seeds: Sequence[bytes], program_id: Pubkey) -> Pubkey:
    hasher = hashlib.sha256()
    for seed in seeds:
        hasher.update(seed)
    hasher.update(bytes(program_id))
    hasher.update(PDA_MARKER)
    address = Pubkey.from_bytes(hasher.digest())
    if address.is_on_curve():
        raise _OnCurve
    return address


def create_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> Pubkey:
    """Hash ``seeds`` under ``program_id``; raises InvalidSeeds if the result is on the curve."""
    seeds = [bytes(seed) for seed in seeds]
    _check_seeds(seeds)
    try:
        return _hash_address(seeds, program_id)
    except _OnCurve:
        raise InvalidSeeds("derived address lies on the ed25519 curve") from None


def find_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> Tuple[Pubkey, int]:
    """Return the first off-curve (address, bump), trying bumps 255 down to 0."""
    seeds = [bytes(seed) for seed in seeds]
    _check_seeds(seeds + [b""])
    for bump in range(255, -1, -1):
        try:
            return _hash_address(seeds + [bytes([bump])], program_id), bump
        except _OnCurve:
            continue
    raise AddressDerivationExhausted(f"no off-curve address for {len(seeds)} seeds under {program_id}")
