"""Account metas, the fetch port and per-call account bookkeeping."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
import inspect
from typing import Any, Awaitable, Callable, Dict, Iterable, Iterator, List, Mapping, Union

from solders.instruction import AccountMeta
from solders.pubkey import Pubkey

from .errors import AccountNotFound, UnresolvedSeedReference


class AccountRole(IntEnum):
    READONLY = 0b00
    WRITABLE = 0b01
    READONLY_SIGNER = 0b10
    WRITABLE_SIGNER = 0b11

    @classmethod
    def from_flags(cls, is_signer: bool, is_writable: bool) -> "AccountRole":
        return cls((0b10 if is_signer else 0) | (0b01 if is_writable else 0))

    @property
    def is_signer(self) -> bool:
        return bool(self & 0b10)

    @property
    def is_writable(self) -> bool:
        return bool(self & 0b01)


@dataclass(frozen=True)
class ResolvedAccountMeta:
    address: Pubkey
    role: AccountRole = AccountRole.READONLY

    @classmethod
    def from_account_meta(cls, meta: AccountMeta) -> "ResolvedAccountMeta":
        return cls(meta.pubkey, AccountRole.from_flags(meta.is_signer, meta.is_writable))

    def to_account_meta(self) -> AccountMeta:
        return AccountMeta(self.address, self.role.is_signer, self.role.is_writable)


MetaLike = Union[ResolvedAccountMeta, AccountMeta]


def as_resolved_meta(meta: MetaLike) -> ResolvedAccountMeta:
    if isinstance(meta, ResolvedAccountMeta):
        return meta
    if isinstance(meta, AccountMeta):
        return ResolvedAccountMeta.from_account_meta(meta)
    raise TypeError(f"expected an account meta, got {type(meta).__name__}")


@dataclass(frozen=True)
class FetchedAccount:
    exists: bool
    data: bytes = b""

    @classmethod
    def missing(cls) -> "FetchedAccount":
        return cls(exists=False)

    @classmethod
    def coerce(cls, value: Any) -> "FetchedAccount":
        """Normalize what a fetch port returned.

        Accepts None (missing), raw bytes, a FetchedAccount, an ``{exists, data}``
        mapping, or any object with ``exists`` and/or ``data`` attributes such as
        ``solders.account.Account``. A false ``exists`` means missing whatever
        else is present.
        """
        if value is None:
            return cls.missing()
        if isinstance(value, FetchedAccount):
            return value
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(exists=True, data=bytes(value))
        if isinstance(value, Mapping):
            exists = value.get("exists", True)
            data = value.get("data")
        else:
            exists = getattr(value, "exists", True)
            data = getattr(value, "data", None)
        if not exists:
            return cls.missing()
        if data is None:
            raise TypeError(f"fetch port returned unsupported value: {type(value).__name__}")
        return cls(exists=True, data=bytes(data))


AccountFetcher = Callable[[Pubkey], Union[Any, Awaitable[Any]]]


class AccountCache:
    """Fetches each address at most once for the lifetime of one resolution."""

    def __init__(self, fetch: AccountFetcher) -> None:
        self._fetch = fetch
        self._accounts: Dict[Pubkey, FetchedAccount] = {}

    def __contains__(self, address: Pubkey) -> bool:
        return address in self._accounts

    async def get(self, address: Pubkey) -> FetchedAccount:
        cached = self._accounts.get(address)
        if cached is not None:
            return cached
        result = self._fetch(address)
        if inspect.isawaitable(result):
            result = await result
        account = FetchedAccount.coerce(result)
        self._accounts[address] = account
        return account

    async def data(self, address: Pubkey) -> bytes:
        account = await self.get(address)
        if not account.exists:
            raise AccountNotFound(f"account {address} not found")
        return account.data


class KnownAccounts:
    """Append-only list of the accounts resolved so far.

    Index lookups past the end raise UnresolvedSeedReference: a seed may only
    refer to base accounts or to entries resolved earlier in the same pass.
    """

    def __init__(self, metas: Iterable[MetaLike] = ()) -> None:
        self._metas: List[ResolvedAccountMeta] = [as_resolved_meta(meta) for meta in metas]

    def __len__(self) -> int:
        return len(self._metas)

    def __iter__(self) -> Iterator[ResolvedAccountMeta]:
        return iter(self._metas)

    def get(self, index: int) -> ResolvedAccountMeta:
        if index < 0 or index >= len(self._metas):
            raise UnresolvedSeedReference(
                f"account index {index} is not resolved ({len(self._metas)} accounts known)"
            )
        return self._metas[index]

    def key(self, index: int) -> Pubkey:
        return self.get(index).address

    def append(self, meta: ResolvedAccountMeta) -> None:
        self._metas.append(meta)

    def to_list(self) -> List[ResolvedAccountMeta]:
        return list(self._metas)
