"""Off-chain helpers for permissionless freeze/thaw instructions.

The permissionless instruction forwards its trailing accounts to the gating
program's can-thaw/can-freeze check. These helpers build that check's base
accounts, resolve the gating program's extra metas and return the accounts the
caller appends after the instruction's own accounts.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from solders.pubkey import Pubkey

from .accounts import AccountCache, AccountFetcher, AccountRole, ResolvedAccountMeta
from .constants import (
    CAN_FREEZE_PERMISSIONLESS_DISCRIMINATOR,
    CAN_THAW_PERMISSIONLESS_DISCRIMINATOR,
    FREEZE_EXTRA_ACCOUNT_METAS_SEED,
    THAW_EXTRA_ACCOUNT_METAS_SEED,
)
from .errors import AccountNotFound, PermissionlessDisabled
from .pda import find_program_address
from .resolve import resolve_extra_metas
from .state import MintConfig

logger = logging.getLogger(__name__)

# Accounts of the gating check that the permissionless instruction already carries.
_FORWARDED_FROM = 3

THAW = "thaw"
FREEZE = "freeze"

_OPERATIONS = {
    THAW: (THAW_EXTRA_ACCOUNT_METAS_SEED, CAN_THAW_PERMISSIONLESS_DISCRIMINATOR),
    FREEZE: (FREEZE_EXTRA_ACCOUNT_METAS_SEED, CAN_FREEZE_PERMISSIONLESS_DISCRIMINATOR),
}


def find_thaw_extra_metas_address(mint: Pubkey, gating_program: Pubkey) -> Tuple[Pubkey, int]:
    return find_program_address([THAW_EXTRA_ACCOUNT_METAS_SEED, bytes(mint)], gating_program)


def find_freeze_extra_metas_address(mint: Pubkey, gating_program: Pubkey) -> Tuple[Pubkey, int]:
    return find_program_address([FREEZE_EXTRA_ACCOUNT_METAS_SEED, bytes(mint)], gating_program)


def _gating_check_metas(
    authority: Pubkey,
    token_account: Pubkey,
    mint: Pubkey,
    token_account_owner: Pubkey,
    extra_metas: Pubkey,
) -> List[ResolvedAccountMeta]:
    return [
        ResolvedAccountMeta(authority, AccountRole.READONLY),
        ResolvedAccountMeta(token_account, AccountRole.READONLY),
        ResolvedAccountMeta(mint, AccountRole.READONLY),
        ResolvedAccountMeta(token_account_owner, AccountRole.READONLY),
        ResolvedAccountMeta(extra_metas, AccountRole.READONLY),
    ]


def can_thaw_permissionless_metas(
    authority: Pubkey,
    token_account: Pubkey,
    mint: Pubkey,
    token_account_owner: Pubkey,
    extra_metas: Pubkey,
) -> Tuple[List[ResolvedAccountMeta], bytes]:
    """Base accounts and instruction data of the gating can-thaw check."""
    metas = _gating_check_metas(authority, token_account, mint, token_account_owner, extra_metas)
    return metas, CAN_THAW_PERMISSIONLESS_DISCRIMINATOR


def can_freeze_permissionless_metas(
    authority: Pubkey,
    token_account: Pubkey,
    mint: Pubkey,
    token_account_owner: Pubkey,
    extra_metas: Pubkey,
) -> Tuple[List[ResolvedAccountMeta], bytes]:
    """Base accounts and instruction data of the gating can-freeze check."""
    metas = _gating_check_metas(authority, token_account, mint, token_account_owner, extra_metas)
    return metas, CAN_FREEZE_PERMISSIONLESS_DISCRIMINATOR


async def _load_mint_config(cache: AccountCache, mint_config_address: Pubkey) -> MintConfig:
    account = await cache.get(mint_config_address)
    if not account.exists:
        raise AccountNotFound(f"mint config {mint_config_address} not found")
    return MintConfig.from_bytes(account.data)


async def _add_extra_account_metas(
    operation: str,
    fetch: AccountFetcher,
    mint_config_address: Pubkey,
    authority: Pubkey,
    token_account: Pubkey,
    mint: Pubkey,
    token_account_owner: Pubkey,
) -> List[ResolvedAccountMeta]:
    seed, discriminator = _OPERATIONS[operation]
    # Shared so the mint config, descriptor and seed accounts are fetched once.
    cache = AccountCache(fetch)
    config = await _load_mint_config(cache, mint_config_address)
    enabled = config.enable_permissionless_thaw if operation == THAW else config.enable_permissionless_freeze
    if not enabled:
        raise PermissionlessDisabled(f"permissionless {operation} is not enabled for mint {config.mint}")
    if not config.has_gating_program:
        logger.debug("mint %s has no gating program; no extra accounts", config.mint)
        return []

    gating_program = config.gating_program
    extra_metas, _ = find_program_address([seed, bytes(mint)], gating_program)
    base_metas = _gating_check_metas(authority, token_account, mint, token_account_owner, extra_metas)
    resolved = await resolve_extra_metas(
        cache.get,
        extra_metas,
        base_metas,
        discriminator,
        gating_program,
        discriminators=[discriminator],
    )
    return resolved[_FORWARDED_FROM:] + [
        ResolvedAccountMeta(gating_program, AccountRole.READONLY),
        ResolvedAccountMeta(extra_metas, AccountRole.READONLY),
    ]


async def add_extra_account_metas_for_thaw(
    fetch: AccountFetcher,
    mint_config_address: Pubkey,
    authority: Pubkey,
    token_account: Pubkey,
    mint: Pubkey,
    token_account_owner: Pubkey,
) -> List[ResolvedAccountMeta]:
    """Accounts to append to a permissionless thaw instruction.

    Returns an empty list when the mint has no gating program. Raises
    PermissionlessDisabled if the mint config does not allow permissionless thaw;
    this is a client-side check that fails early, the program enforces the same
    flag on chain.
    """
    return await _add_extra_account_metas(
        THAW, fetch, mint_config_address, authority, token_account, mint, token_account_owner
    )


async def add_extra_account_metas_for_freeze(
    fetch: AccountFetcher,
    mint_config_address: Pubkey,
    authority: Pubkey,
    token_account: Pubkey,
    mint: Pubkey,
    token_account_owner: Pubkey,
) -> List[ResolvedAccountMeta]:
    """Accounts to append to a permissionless freeze instruction.

    Same contract as add_extra_account_metas_for_thaw, checked against the
    freeze flag.
    """
    return await _add_extra_account_metas(
        FREEZE, fetch, mint_config_address, authority, token_account, mint, token_account_owner
    )
