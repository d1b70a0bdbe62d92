"""Errors raised while resolving extra account metas."""


class ExtraMetasError(Exception):
    """Base class for every resolution failure."""


class AccountNotFound(ExtraMetasError):
    """An account whose data is needed does not exist."""


class MalformedExtraMetas(ExtraMetasError):
    """The descriptor account violates the TLV layout."""


class SeedOutOfBounds(ExtraMetasError):
    """A seed slices past the end of the instruction data."""


class AccountDataOutOfBounds(ExtraMetasError):
    """A seed slices past the end of an account's data."""


class UnresolvedSeedReference(ExtraMetasError):
    """A seed refers to an account index that is not resolved yet."""


class AddressDerivationExhausted(ExtraMetasError):
    """No bump produced an off-curve program-derived address."""


class InvalidSeeds(ExtraMetasError):
    """Too many seeds, or a seed longer than the runtime allows."""


class PermissionlessDisabled(ExtraMetasError):
    """The mint config does not enable the permissionless operation."""
