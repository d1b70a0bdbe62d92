"""Account fetch port backed by a JSON-RPC node."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.pubkey import Pubkey

from .accounts import FetchedAccount
from .config import Settings

logger = logging.getLogger(__name__)

DEFAULT_RETRIES = 6
DEFAULT_BACKOFF = 0.25


class RpcAccountFetcher:
    """Awaitable ``fetch(address)`` over ``getAccountInfo``.

    Transport failures are retried with exponential backoff; RPC error
    responses and cancellation propagate to the caller.
    """

    def __init__(
        self,
        client: AsyncClient,
        commitment: Optional[str] = None,
        retries: int = DEFAULT_RETRIES,
        backoff: float = DEFAULT_BACKOFF,
    ) -> None:
        if retries < 0:
            raise ValueError("retries must be >= 0")
        if backoff < 0:
            raise ValueError("backoff must be >= 0")
        self._client = client
        self._commitment = Commitment(commitment) if commitment else None
        self._retries = retries
        self._backoff = backoff

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "RpcAccountFetcher":
        client = AsyncClient(settings.rpc_url, commitment=Commitment(settings.commitment))
        return cls(client, commitment=settings.commitment, **kwargs)

    async def __call__(self, address: Pubkey) -> FetchedAccount:
        return await self.fetch(address)

    async def fetch(self, address: Pubkey) -> FetchedAccount:
        for attempt in range(self._retries + 1):
            try:
                resp = await self._client.get_account_info(
                    address, commitment=self._commitment, encoding="base64"
                )
            except SolanaRpcException as exc:
                if attempt < self._retries:
                    delay = self._backoff * (2**attempt)
                    logger.warning(
                        "getAccountInfo %s failed (attempt %d/%d): %s; retrying in %.2fs",
                        address,
                        attempt + 1,
                        self._retries + 1,
                        exc,
                        delay,
                    )
                    await asyncio.sleep(delay)
                    continue
                raise
            account = resp.value
            if account is None:
                return FetchedAccount.missing()
            return FetchedAccount(exists=True, data=bytes(account.data))

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> "RpcAccountFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
