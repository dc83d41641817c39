"""Peg ratio between a token's derived USD value and a reference unit."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from token_audit.parsers.errors import InvalidPegInputError

_FOUR_PLACES = Decimal("0.0001")


@dataclass(frozen=True)
class PegRatio:
    decimal: Decimal
    percentage: str  # "50.0000%"
    ratio_format: str  # "1:2" below peg, "3:1" above

    def to_dict(self) -> dict[str, float | str]:
        return {
            "decimal": float(self.decimal),
            "percentage": self.percentage,
            "ratioFormat": self.ratio_format,
        }


def _to_decimal(value: Decimal | float | int | str, label: str) -> Decimal:
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise InvalidPegInputError(f"{label} is not a number: {value!r}") from e
    if not result.is_finite():
        raise InvalidPegInputError(f"{label} must be finite, got {value!r}")
    return result


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_peg_ratio(
    value: Decimal | float | int | str,
    reference: Decimal | float | int | str = 1,
) -> PegRatio:
    """Express ``value / reference`` as decimal, percentage and N:M ratio.

    Below peg the ratio reads ``1:round(1/ratio)``, at or above it
    ``round(ratio):1``. A zero reference, a zero or negative ratio, and
    non-finite inputs are rejected with InvalidPegInputError. Any other
    magnitude is formatted in full.
    """
    val = _to_decimal(value, "value")
    ref = _to_decimal(reference, "reference")
    if ref == 0:
        raise InvalidPegInputError("reference value must be non-zero")

    ratio = val / ref
    if ratio <= 0:
        raise InvalidPegInputError(f"ratio must be positive, got {ratio}")

    # quantize needs room for every integer digit plus the 4 decimal places
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, abs(ratio.adjusted()) + 10)
        if ratio < 1:
            ratio_format = f"1:{_round_half_up(1 / ratio)}"
        else:
            ratio_format = f"{_round_half_up(ratio)}:1"
        percentage = (ratio * 100).quantize(_FOUR_PLACES, rounding=ROUND_HALF_UP)

    return PegRatio(
        decimal=ratio,
        percentage=f"{percentage:f}%",
        ratio_format=ratio_format,
    )
