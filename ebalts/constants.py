"""Protocol constants for extra-account-metas resolution."""

import hashlib


def _discriminator(hash_input: bytes) -> bytes:
    return hashlib.sha256(hash_input).digest()[:8]


# Gated instruction discriminators (first 8 bytes of sha256 of the hash input).
CAN_THAW_PERMISSIONLESS_DISCRIMINATOR = _discriminator(
    b"efficient-allow-block-list-standard:can-thaw-permissionless"
)
CAN_FREEZE_PERMISSIONLESS_DISCRIMINATOR = _discriminator(
    b"efficient-allow-block-list-standard:can-freeze-permissionless"
)
DEFAULT_DISCRIMINATORS = frozenset(
    {CAN_THAW_PERMISSIONLESS_DISCRIMINATOR, CAN_FREEZE_PERMISSIONLESS_DISCRIMINATOR}
)

# TLV header layout.
DISCRIMINATOR_LEN = 8
LENGTH_LEN = 4
COUNT_LEN = 4
TLV_HEADER_LEN = DISCRIMINATOR_LEN + LENGTH_LEN

# Entry layout: discriminator, 32-byte address config, signer, writable.
ADDRESS_CONFIG_LEN = 32
ENTRY_LEN = 1 + ADDRESS_CONFIG_LEN + 1 + 1
MAX_EXTRA_ACCOUNT_METAS = 32

# Entry discriminators.
ENTRY_LITERAL = 0
ENTRY_SELF_PROGRAM_SEEDS = 1
ENTRY_PUBKEY_DATA = 2
ENTRY_EXTERNAL_PROGRAM_FLAG = 0x80

# Seed tags.
SEED_END = 0
SEED_LITERAL = 1
SEED_INSTRUCTION_DATA = 2
SEED_ACCOUNT_KEY = 3
SEED_ACCOUNT_DATA = 4
MAX_LITERAL_SEED_LEN = ADDRESS_CONFIG_LEN - 2

# Pubkey-data tags.
PUBKEY_DATA_INSTRUCTION_DATA = 1
PUBKEY_DATA_ACCOUNT_DATA = 2

# Program-derived address limits.
PUBKEY_LEN = 32
MAX_SEEDS = 16
MAX_SEED_LEN = 32
PDA_MARKER = b"ProgramDerivedAddress"

# Descriptor account seeds published by gating programs.
THAW_EXTRA_ACCOUNT_METAS_SEED = b"thaw_extra_account_metas"
FREEZE_EXTRA_ACCOUNT_METAS_SEED = b"freeze_extra_account_metas"

# Mint config record.
MINT_CONFIG_DISCRIMINATOR = 1
MINT_CONFIG_LEN = 1 + 32 + 32 + 32 + 1 + 1 + 1
