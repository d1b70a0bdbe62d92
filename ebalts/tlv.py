"""Extra account metas TLV layout: types, decoder and encoder.

The descriptor account holds one TLV record::

    [0:8)    discriminator of the gated instruction
    [8:12)   u32 length of the value
    [12:16)  u32 entry count
    [16:..)  count x 35-byte entries

Each entry is a 1-byte discriminator, a 32-byte address config and the
signer/writable flag bytes. Seeds are packed back to back into the address
config; the first zero tag ends the list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from solders.pubkey import Pubkey

from .constants import (
    ADDRESS_CONFIG_LEN,
    COUNT_LEN,
    DISCRIMINATOR_LEN,
    ENTRY_EXTERNAL_PROGRAM_FLAG,
    ENTRY_LEN,
    ENTRY_LITERAL,
    ENTRY_PUBKEY_DATA,
    ENTRY_SELF_PROGRAM_SEEDS,
    MAX_EXTRA_ACCOUNT_METAS,
    MAX_LITERAL_SEED_LEN,
    PUBKEY_DATA_ACCOUNT_DATA,
    PUBKEY_DATA_INSTRUCTION_DATA,
    SEED_ACCOUNT_DATA,
    SEED_ACCOUNT_KEY,
    SEED_END,
    SEED_INSTRUCTION_DATA,
    SEED_LITERAL,
    TLV_HEADER_LEN,
)
from .errors import MalformedExtraMetas
from .util import ensure_u8, read_u32_le, write_u32_le


# ── Seeds ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LiteralSeed:
    value: bytes


@dataclass(frozen=True)
class InstructionDataSeed:
    index: int
    length: int


@dataclass(frozen=True)
class AccountKeySeed:
    index: int


@dataclass(frozen=True)
class AccountDataSeed:
    account_index: int
    data_index: int
    length: int


Seed = Union[LiteralSeed, InstructionDataSeed, AccountKeySeed, AccountDataSeed]


# ── Pubkey data sources ────────────────────────────────────────────


@dataclass(frozen=True)
class InstructionDataPubkey:
    index: int


@dataclass(frozen=True)
class AccountDataPubkey:
    account_index: int
    data_index: int


PubkeyData = Union[InstructionDataPubkey, AccountDataPubkey]


# ── Entries ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LiteralAddress:
    address: Pubkey
    is_signer: bool = False
    is_writable: bool = False


@dataclass(frozen=True)
class SelfProgramSeeds:
    seeds: Tuple[Seed, ...]
    is_signer: bool = False
    is_writable: bool = False


@dataclass(frozen=True)
class ExternalProgramSeeds:
    program_index: int
    seeds: Tuple[Seed, ...]
    is_signer: bool = False
    is_writable: bool = False


@dataclass(frozen=True)
class PubkeyDataAddress:
    source: PubkeyData
    is_signer: bool = False
    is_writable: bool = False


ExtraAccountMeta = Union[LiteralAddress, SelfProgramSeeds, ExternalProgramSeeds, PubkeyDataAddress]


@dataclass(frozen=True)
class ExtraAccountMetaList:
    discriminator: bytes
    length: int
    entries: Tuple[ExtraAccountMeta, ...]

    @property
    def count(self) -> int:
        return len(self.entries)


def extra_account_meta_list_size(count: int) -> int:
    """Total TLV bytes for a list holding ``count`` entries."""
    return TLV_HEADER_LEN + COUNT_LEN + ENTRY_LEN * count


# ── Decoding ───────────────────────────────────────────────────────


def unpack_seeds(config: bytes) -> Tuple[Seed, ...]:
    if len(config) != ADDRESS_CONFIG_LEN:
        raise MalformedExtraMetas("address config must be 32 bytes")
    seeds: List[Seed] = []
    offset = 0
    while offset < ADDRESS_CONFIG_LEN:
        tag = config[offset]
        if tag == SEED_END:
            break
        if tag == SEED_LITERAL:
            if offset + 2 > ADDRESS_CONFIG_LEN:
                raise MalformedExtraMetas("literal seed length byte missing")
            length = config[offset + 1]
            end = offset + 2 + length
            if end > ADDRESS_CONFIG_LEN:
                raise MalformedExtraMetas(f"literal seed of {length} bytes overruns address config")
            seeds.append(LiteralSeed(bytes(config[offset + 2 : end])))
            offset = end
        elif tag == SEED_INSTRUCTION_DATA:
            if offset + 3 > ADDRESS_CONFIG_LEN:
                raise MalformedExtraMetas("instruction data seed overruns address config")
            seeds.append(InstructionDataSeed(config[offset + 1], config[offset + 2]))
            offset += 3
        elif tag == SEED_ACCOUNT_KEY:
            if offset + 2 > ADDRESS_CONFIG_LEN:
                raise MalformedExtraMetas("account key seed overruns address config")
            seeds.append(AccountKeySeed(config[offset + 1]))
            offset += 2
        elif tag == SEED_ACCOUNT_DATA:
            if offset + 4 > ADDRESS_CONFIG_LEN:
                raise MalformedExtraMetas("account data seed overruns address config")
            seeds.append(AccountDataSeed(config[offset + 1], config[offset + 2], config[offset + 3]))
            offset += 4
        else:
            raise MalformedExtraMetas(f"unknown seed tag {tag}")
    return tuple(seeds)


def unpack_pubkey_data(config: bytes) -> PubkeyData:
    tag = config[0]
    if tag == PUBKEY_DATA_INSTRUCTION_DATA:
        return InstructionDataPubkey(config[1])
    if tag == PUBKEY_DATA_ACCOUNT_DATA:
        return AccountDataPubkey(config[1], config[2])
    raise MalformedExtraMetas(f"unknown pubkey data tag {tag}")


def unpack_entry(raw: bytes) -> ExtraAccountMeta:
    if len(raw) != ENTRY_LEN:
        raise MalformedExtraMetas(f"entry must be {ENTRY_LEN} bytes")
    discriminator = raw[0]
    config = bytes(raw[1 : 1 + ADDRESS_CONFIG_LEN])
    is_signer = raw[1 + ADDRESS_CONFIG_LEN] != 0
    is_writable = raw[2 + ADDRESS_CONFIG_LEN] != 0

    if discriminator == ENTRY_LITERAL:
        return LiteralAddress(Pubkey.from_bytes(config), is_signer, is_writable)
    if discriminator == ENTRY_SELF_PROGRAM_SEEDS:
        return SelfProgramSeeds(unpack_seeds(config), is_signer, is_writable)
    if discriminator == ENTRY_PUBKEY_DATA:
        return PubkeyDataAddress(unpack_pubkey_data(config), is_signer, is_writable)
    if discriminator >= ENTRY_EXTERNAL_PROGRAM_FLAG:
        return ExternalProgramSeeds(
            discriminator - ENTRY_EXTERNAL_PROGRAM_FLAG,
            unpack_seeds(config),
            is_signer,
            is_writable,
        )
    raise MalformedExtraMetas(f"unknown entry discriminator {discriminator}")


def decode_extra_account_meta_list(
    data: bytes,
    discriminators: Optional[Iterable[bytes]] = None,
) -> ExtraAccountMetaList:
    """Decode a descriptor account.

    ``discriminators`` restricts the accepted leading type tag; None accepts any.
    Every structural violation raises MalformedExtraMetas and nothing partial
    is returned.
    """
    data = bytes(data)
    if len(data) < TLV_HEADER_LEN + COUNT_LEN:
        raise MalformedExtraMetas(f"descriptor is {len(data)} bytes, shorter than the TLV header")

    discriminator = data[:DISCRIMINATOR_LEN]
    if discriminators is not None and discriminator not in set(discriminators):
        raise MalformedExtraMetas(f"unexpected discriminator {discriminator.hex()}")

    length = read_u32_le(data, DISCRIMINATOR_LEN)
    if TLV_HEADER_LEN + length > len(data):
        raise MalformedExtraMetas(
            f"declared length {length} exceeds the {len(data) - TLV_HEADER_LEN} available bytes"
        )
    if length < COUNT_LEN:
        raise MalformedExtraMetas(f"declared length {length} too short for the entry count")

    value = data[TLV_HEADER_LEN : TLV_HEADER_LEN + length]
    count = read_u32_le(value, 0)
    if count > MAX_EXTRA_ACCOUNT_METAS:
        raise MalformedExtraMetas(f"entry count {count} exceeds {MAX_EXTRA_ACCOUNT_METAS}")
    expected = COUNT_LEN + ENTRY_LEN * count
    if length != expected:
        raise MalformedExtraMetas(f"declared length {length} does not match {count} entries ({expected})")

    entries: List[ExtraAccountMeta] = []
    for idx in range(count):
        start = COUNT_LEN + idx * ENTRY_LEN
        entries.append(unpack_entry(value[start : start + ENTRY_LEN]))
    return ExtraAccountMetaList(discriminator=discriminator, length=length, entries=tuple(entries))


# ── Encoding ───────────────────────────────────────────────────────


def pack_seed(seed: Seed) -> bytes:
    if isinstance(seed, LiteralSeed):
        if len(seed.value) > MAX_LITERAL_SEED_LEN:
            raise ValueError(f"literal seed must be at most {MAX_LITERAL_SEED_LEN} bytes")
        return bytes([SEED_LITERAL, len(seed.value)]) + bytes(seed.value)
    if isinstance(seed, InstructionDataSeed):
        return bytes(
            [SEED_INSTRUCTION_DATA, ensure_u8(seed.index, "seed.index"), ensure_u8(seed.length, "seed.length")]
        )
    if isinstance(seed, AccountKeySeed):
        return bytes([SEED_ACCOUNT_KEY, ensure_u8(seed.index, "seed.index")])
    if isinstance(seed, AccountDataSeed):
        return bytes(
            [
                SEED_ACCOUNT_DATA,
                ensure_u8(seed.account_index, "seed.account_index"),
                ensure_u8(seed.data_index, "seed.data_index"),
                ensure_u8(seed.length, "seed.length"),
            ]
        )
    raise TypeError(f"unsupported seed: {seed!r}")


def pack_seeds(seeds: Iterable[Seed]) -> bytes:
    packed = b"".join(pack_seed(seed) for seed in seeds)
    if len(packed) > ADDRESS_CONFIG_LEN:
        raise ValueError(f"packed seeds take {len(packed)} bytes, more than {ADDRESS_CONFIG_LEN}")
    return packed.ljust(ADDRESS_CONFIG_LEN, b"\x00")


def pack_pubkey_data(source: PubkeyData) -> bytes:
    if isinstance(source, InstructionDataPubkey):
        packed = bytes([PUBKEY_DATA_INSTRUCTION_DATA, ensure_u8(source.index, "source.index")])
    elif isinstance(source, AccountDataPubkey):
        packed = bytes(
            [
                PUBKEY_DATA_ACCOUNT_DATA,
                ensure_u8(source.account_index, "source.account_index"),
                ensure_u8(source.data_index, "source.data_index"),
            ]
        )
    else:
        raise TypeError(f"unsupported pubkey data: {source!r}")
    return packed.ljust(ADDRESS_CONFIG_LEN, b"\x00")


def pack_entry(meta: ExtraAccountMeta) -> bytes:
    if isinstance(meta, LiteralAddress):
        head = bytes([ENTRY_LITERAL]) + bytes(meta.address)
    elif isinstance(meta, SelfProgramSeeds):
        head = bytes([ENTRY_SELF_PROGRAM_SEEDS]) + pack_seeds(meta.seeds)
    elif isinstance(meta, ExternalProgramSeeds):
        if meta.program_index < 0 or meta.program_index >= ENTRY_EXTERNAL_PROGRAM_FLAG:
            raise ValueError("program_index must be within 0..127")
        head = bytes([ENTRY_EXTERNAL_PROGRAM_FLAG + meta.program_index]) + pack_seeds(meta.seeds)
    elif isinstance(meta, PubkeyDataAddress):
        head = bytes([ENTRY_PUBKEY_DATA]) + pack_pubkey_data(meta.source)
    else:
        raise TypeError(f"unsupported extra account meta: {meta!r}")
    return head + bytes([int(meta.is_signer), int(meta.is_writable)])


def encode_extra_account_meta_list(discriminator: bytes, entries: Iterable[ExtraAccountMeta]) -> bytes:
    if len(discriminator) != DISCRIMINATOR_LEN:
        raise ValueError(f"discriminator must be {DISCRIMINATOR_LEN} bytes")
    entries = list(entries)
    if len(entries) > MAX_EXTRA_ACCOUNT_METAS:
        raise ValueError(f"at most {MAX_EXTRA_ACCOUNT_METAS} entries are allowed")
    body = b"".join(pack_entry(meta) for meta in entries)
    value = write_u32_le(len(entries)) + body
    return bytes(discriminator) + write_u32_le(len(value)) + value
