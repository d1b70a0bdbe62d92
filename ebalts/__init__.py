"""Resolve the extra accounts a gating program requires for permissionless freeze/thaw."""

from __future__ import annotations

from .accounts import AccountRole, FetchedAccount, ResolvedAccountMeta
from .config import Settings, load_settings
from .errors import (
    AccountDataOutOfBounds,
    AccountNotFound,
    AddressDerivationExhausted,
    ExtraMetasError,
    InvalidSeeds,
    MalformedExtraMetas,
    PermissionlessDisabled,
    SeedOutOfBounds,
    UnresolvedSeedReference,
)
from .offchain import add_extra_account_metas_for_freeze, add_extra_account_metas_for_thaw
from .pda import create_program_address, find_program_address
from .resolve import resolve_extra_metas, resolve_extra_metas_sync
from .rpc import RpcAccountFetcher
from .tlv import decode_extra_account_meta_list, encode_extra_account_meta_list

__all__ = [
    "AccountDataOutOfBounds",
    "AccountNotFound",
    "AccountRole",
    "AddressDerivationExhausted",
    "ExtraMetasError",
    "FetchedAccount",
    "InvalidSeeds",
    "MalformedExtraMetas",
    "PermissionlessDisabled",
    "ResolvedAccountMeta",
    "RpcAccountFetcher",
    "SeedOutOfBounds",
    "Settings",
    "UnresolvedSeedReference",
    "add_extra_account_metas_for_freeze",
    "add_extra_account_metas_for_thaw",
    "create_program_address",
    "decode_extra_account_meta_list",
    "encode_extra_account_meta_list",
    "find_program_address",
    "load_settings",
    "resolve_extra_metas",
    "resolve_extra_metas_sync",
]
