"""Assemble the ordered account metas a gating program requires."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional

from solders.pubkey import Pubkey

from .accounts import (
    AccountCache,
    AccountFetcher,
    AccountRole,
    KnownAccounts,
    MetaLike,
    ResolvedAccountMeta,
)
from .constants import DEFAULT_DISCRIMINATORS
from .pda import find_program_address
from .seeds import resolve_pubkey_data, resolve_seeds
from .tlv import (
    ExternalProgramSeeds,
    ExtraAccountMeta,
    LiteralAddress,
    PubkeyDataAddress,
    SelfProgramSeeds,
    decode_extra_account_meta_list,
)

logger = logging.getLogger(__name__)


async def resolve_extra_account_meta(
    meta: ExtraAccountMeta,
    known: KnownAccounts,
    instruction_data: bytes,
    program_address: Pubkey,
    cache: AccountCache,
) -> ResolvedAccountMeta:
    """Resolve a single entry against the accounts known so far."""
    if isinstance(meta, LiteralAddress):
        address = meta.address
    elif isinstance(meta, SelfProgramSeeds):
        seeds = await resolve_seeds(meta.seeds, known, instruction_data, cache)
        address, _ = find_program_address(seeds, program_address)
    elif isinstance(meta, ExternalProgramSeeds):
        program_id = known.key(meta.program_index)
        seeds = await resolve_seeds(meta.seeds, known, instruction_data, cache)
        address, _ = find_program_address(seeds, program_id)
    elif isinstance(meta, PubkeyDataAddress):
        address = await resolve_pubkey_data(meta.source, known, instruction_data, cache)
    else:
        raise TypeError(f"unsupported extra account meta: {meta!r}")
    return ResolvedAccountMeta(address, AccountRole.from_flags(meta.is_signer, meta.is_writable))


async def resolve_extra_metas(
    fetch: AccountFetcher,
    descriptor_address: Pubkey,
    base_metas: Iterable[MetaLike],
    instruction_data: bytes,
    program_address: Pubkey,
    *,
    discriminators: Optional[Iterable[bytes]] = DEFAULT_DISCRIMINATORS,
) -> List[ResolvedAccountMeta]:
    """Return ``base_metas`` followed by one resolved meta per descriptor entry.

    A missing descriptor account means the gating program needs no extra
    accounts, so the base metas come back unchanged. Errors from decoding,
    seed resolution or derivation propagate as raised.
    """
    cache = AccountCache(fetch)
    known = KnownAccounts(base_metas)
    instruction_data = bytes(instruction_data)

    descriptor = await cache.get(descriptor_address)
    if not descriptor.exists:
        logger.debug("descriptor %s not found; no extra accounts", descriptor_address)
        return known.to_list()

    extra_metas = decode_extra_account_meta_list(descriptor.data, discriminators)
    logger.debug("descriptor %s declares %d extra accounts", descriptor_address, extra_metas.count)

    for meta in extra_metas.entries:
        resolved = await resolve_extra_account_meta(meta, known, instruction_data, program_address, cache)
        logger.debug("resolved extra account %d: %s (%s)", len(known), resolved.address, resolved.role.name)
        known.append(resolved)
    return known.to_list()


def resolve_extra_metas_sync(
    fetch: AccountFetcher,
    descriptor_address: Pubkey,
    base_metas: Iterable[MetaLike],
    instruction_data: bytes,
    program_address: Pubkey,
    *,
    discriminators: Optional[Iterable[bytes]] = DEFAULT_DISCRIMINATORS,
) -> List[ResolvedAccountMeta]:
    return asyncio.run(
        resolve_extra_metas(
            fetch,
            descriptor_address,
            base_metas,
            instruction_data,
            program_address,
            discriminators=discriminators,
        )
    )
