"""Tri-state result model for risk checks.

Every check resolves to POSITIVE (condition detected), NEGATIVE (condition
absent) or UNKNOWN with a reason. A check that could not be evaluated is
never reported as NEGATIVE.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Final

SOURCE_NOT_VERIFIED: Final = "source not verified"
CALL_FAILED: Final = "call failed"


class Outcome(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class ProbeResult:
    """Outcome of a single check. Use the ``positive``/``negative``/``unknown``
    constructors rather than building one by hand."""

    outcome: Outcome
    reason: str | None = None

    def __post_init__(self) -> None:
        if self.outcome is Outcome.UNKNOWN:
            if not self.reason:
                raise ValueError("UNKNOWN result requires a non-empty reason")
        elif self.reason is not None:
            raise ValueError(f"{self.outcome.value} result cannot carry a reason")

    @classmethod
    def positive(cls) -> ProbeResult:
        return _POSITIVE

    @classmethod
    def negative(cls) -> ProbeResult:
        return _NEGATIVE

    @classmethod
    def unknown(cls, reason: str) -> ProbeResult:
        return cls(Outcome.UNKNOWN, reason)

    @classmethod
    def from_bool(cls, detected: bool) -> ProbeResult:
        return _POSITIVE if detected else _NEGATIVE

    @property
    def is_positive(self) -> bool:
        return self.outcome is Outcome.POSITIVE

    @property
    def is_negative(self) -> bool:
        return self.outcome is Outcome.NEGATIVE

    @property
    def is_unknown(self) -> bool:
        return self.outcome is Outcome.UNKNOWN

    def render(self) -> str:
        """Human-readable form: Yes / No / the unknown reason verbatim."""
        if self.outcome is Outcome.POSITIVE:
            return "Yes"
        if self.outcome is Outcome.NEGATIVE:
            return "No"
        return self.reason  # type: ignore[return-value]

    def to_json(self) -> bool | str:
        """Booleans for known outcomes, the reason string for UNKNOWN."""
        if self.outcome is Outcome.UNKNOWN:
            return self.reason  # type: ignore[return-value]
        return self.outcome is Outcome.POSITIVE

    @classmethod
    def from_json(cls, value: Any) -> ProbeResult:
        if isinstance(value, bool):
            return cls.from_bool(value)
        if isinstance(value, str) and value:
            return cls.unknown(value)
        raise ValueError(f"Cannot decode probe result from {value!r}")


_POSITIVE: Final = ProbeResult(Outcome.POSITIVE)
_NEGATIVE: Final = ProbeResult(Outcome.NEGATIVE)


class CallFailed:
    """Marker for a chain probe whose call reverted, was absent or timed out."""

    _instance: CallFailed | None = None

    def __new__(cls) -> CallFailed:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CALL_FAILED"

    def __bool__(self) -> bool:
        return False


CALL_FAILED_VALUE: Final = CallFailed()


def is_call_failed(value: object) -> bool:
    return isinstance(value, CallFailed)
