"""Mint config record owned by the freeze/thaw program."""

from __future__ import annotations

from dataclasses import dataclass

from solders.pubkey import Pubkey

from .constants import MINT_CONFIG_DISCRIMINATOR, MINT_CONFIG_LEN


@dataclass(frozen=True)
class MintConfig:
    mint: Pubkey
    freeze_authority: Pubkey
    gating_program: Pubkey
    bump: int
    enable_permissionless_thaw: bool
    enable_permissionless_freeze: bool

    @classmethod
    def from_bytes(cls, data: bytes) -> "MintConfig":
        data = bytes(data)
        if len(data) != MINT_CONFIG_LEN:
            raise ValueError(f"mint config must be {MINT_CONFIG_LEN} bytes, got {len(data)}")
        if data[0] != MINT_CONFIG_DISCRIMINATOR:
            raise ValueError(f"unexpected mint config discriminator {data[0]}")
        return cls(
            mint=Pubkey.from_bytes(data[1:33]),
            freeze_authority=Pubkey.from_bytes(data[33:65]),
            gating_program=Pubkey.from_bytes(data[65:97]),
            bump=data[97],
            enable_permissionless_thaw=data[98] != 0,
            enable_permissionless_freeze=data[99] != 0,
        )

    def to_bytes(self) -> bytes:
        return (
            bytes([MINT_CONFIG_DISCRIMINATOR])
            + bytes(self.mint)
            + bytes(self.freeze_authority)
            + bytes(self.gating_program)
            + bytes([self.bump, int(self.enable_permissionless_thaw), int(self.enable_permissionless_freeze)])
        )

    @property
    def has_gating_program(self) -> bool:
        return self.gating_program != Pubkey.default()
