"""Resolve packed seed configs into raw seed bytes."""

from __future__ import annotations

from typing import Iterable, List

from solders.pubkey import Pubkey

from .accounts import AccountCache, KnownAccounts
from .constants import PUBKEY_LEN
from .errors import AccountDataOutOfBounds, SeedOutOfBounds
from .tlv import (
    AccountDataPubkey,
    AccountDataSeed,
    AccountKeySeed,
    InstructionDataPubkey,
    InstructionDataSeed,
    LiteralSeed,
    PubkeyData,
    Seed,
)
from .util import slice_exact


def _instruction_slice(instruction_data: bytes, index: int, length: int) -> bytes:
    value = slice_exact(instruction_data, index, length)
    if value is None:
        raise SeedOutOfBounds(
            f"instruction data is {len(instruction_data)} bytes, need {index + length}"
        )
    return value


async def _account_slice(
    known: KnownAccounts,
    cache: AccountCache,
    account_index: int,
    data_index: int,
    length: int,
) -> bytes:
    address = known.key(account_index)
    data = await cache.data(address)
    value = slice_exact(data, data_index, length)
    if value is None:
        raise AccountDataOutOfBounds(
            f"account {address} holds {len(data)} bytes, need {data_index + length}"
        )
    return value


async def resolve_seed(
    seed: Seed,
    known: KnownAccounts,
    instruction_data: bytes,
    cache: AccountCache,
) -> bytes:
    if isinstance(seed, LiteralSeed):
        return bytes(seed.value)
    if isinstance(seed, InstructionDataSeed):
        return _instruction_slice(instruction_data, seed.index, seed.length)
    if isinstance(seed, AccountKeySeed):
        return bytes(known.key(seed.index))
    if isinstance(seed, AccountDataSeed):
        return await _account_slice(known, cache, seed.account_index, seed.data_index, seed.length)
    raise TypeError(f"unsupported seed: {seed!r}")


async def resolve_seeds(
    seeds: Iterable[Seed],
    known: KnownAccounts,
    instruction_data: bytes,
    cache: AccountCache,
) -> List[bytes]:
    """Resolve seeds in order; each one is a separate PDA seed."""
    resolved: List[bytes] = []
    for seed in seeds:
        resolved.append(await resolve_seed(seed, known, instruction_data, cache))
    return resolved


async def resolve_pubkey_data(
    source: PubkeyData,
    known: KnownAccounts,
    instruction_data: bytes,
    cache: AccountCache,
) -> Pubkey:
    if isinstance(source, InstructionDataPubkey):
        raw = _instruction_slice(instruction_data, source.index, PUBKEY_LEN)
    elif isinstance(source, AccountDataPubkey):
        raw = await _account_slice(known, cache, source.account_index, source.data_index, PUBKEY_LEN)
    else:
        raise TypeError(f"unsupported pubkey data: {source!r}")
    return Pubkey.from_bytes(raw)
