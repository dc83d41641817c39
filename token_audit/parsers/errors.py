"""Run-level errors raised by the audit pipeline.

Acquisition failures never show up here: they degrade a single check to
UNKNOWN. These exceptions cover bad caller input and runs that cannot
produce any report at all.
"""


class TokenAuditError(Exception):
    """Base class for all audit errors."""


class InvalidAddressError(TokenAuditError):
    """Address is missing, malformed, or holds no contract code."""


class ChainUnavailableError(TokenAuditError):
    """The chain RPC endpoint could not be reached at all."""


class AggregationError(TokenAuditError):
    """Not a single metadata field or chain probe could be read."""


class InvalidPegInputError(TokenAuditError, ValueError):
    """Peg ratio inputs that cannot produce a finite, positive ratio."""
