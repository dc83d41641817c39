"""Security report assembly, serialization and console rendering."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from token_audit.parsers.ownership import OwnershipSummary
from token_audit.parsers.peg_ratio import PegRatio
from token_audit.parsers.probe_result import Outcome, ProbeResult

DEFAULT_NAME = "Unknown"
DEFAULT_SYMBOL = "Unknown"
DEFAULT_DECIMALS = 18
DEFAULT_TOTAL_SUPPLY = 0


def format_units(raw: int, decimals: int) -> str:
    """Scale an integer token amount down by ``decimals``.

    Always keeps at least one fractional digit: 10**18 with 18 decimals
    gives ``"1.0"``.
    """
    sign = "-" if raw < 0 else ""
    whole, frac = divmod(abs(raw), 10**decimals)
    frac_str = str(frac).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{frac_str}"


@dataclass(frozen=True)
class TokenMetadata:
    address: str
    name: str = DEFAULT_NAME
    symbol: str = DEFAULT_SYMBOL
    decimals: int = DEFAULT_DECIMALS
    total_supply: str = "0.0"

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "totalSupply": self.total_supply,
        }


@dataclass(frozen=True)
class SecurityReport:
    token: TokenMetadata
    ownership: OwnershipSummary
    checks: Mapping[str, ProbeResult] = field(default_factory=dict)
    peg_ratio: PegRatio | None = None

    @property
    def unknown_checks(self) -> list[str]:
        return [name for name, result in self.checks.items() if result.is_unknown]

    @property
    def positive_checks(self) -> list[str]:
        return [name for name, result in self.checks.items() if result.is_positive]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "token": self.token.to_dict(),
            "ownership": self.ownership.to_dict(),
            "securityChecks": {name: r.to_json() for name, r in self.checks.items()},
        }
        if self.peg_ratio is not None:
            data["pegRatio"] = self.peg_ratio.ratio_format
        return data


def build_report(
    metadata: TokenMetadata,
    ownership: OwnershipSummary,
    checks: Mapping[str, ProbeResult],
    peg_ratio: PegRatio | None = None,
) -> SecurityReport:
    """Merge the pieces of one run into a report.

    ``checks`` must already hold every registered rule in registry order;
    the copy keeps the report independent of the caller's mapping.
    """
    return SecurityReport(
        token=metadata,
        ownership=ownership,
        checks=dict(checks),
        peg_ratio=peg_ratio,
    )


# --- Console rendering ---

_GOOD_WHEN_POSITIVE = {"ownershipRenounced"}
_BAD_WHEN_POSITIVE = {"hiddenOwner"}


def _title(check: str) -> str:
    spaced = re.sub(r"([A-Z])", r" \1", check)
    return spaced[:1].upper() + spaced[1:]


def _icon(check: str, result: ProbeResult) -> str:
    if result.outcome is Outcome.UNKNOWN:
        return "❔"
    if check in _GOOD_WHEN_POSITIVE:
        return "✅" if result.is_positive else "❌"
    if check in _BAD_WHEN_POSITIVE:
        return "❌" if result.is_positive else "✅"
    return "⚠️" if result.is_positive else "✅"


def format_report_text(report: SecurityReport) -> str:
    token = report.token
    lines = [
        "=== TOKEN SECURITY ANALYSIS ===",
        f"Token: {token.name} ({token.symbol})",
        f"Address: {token.address}",
        f"Decimals: {token.decimals}",
        f"Total Supply: {token.total_supply}",
    ]
    if report.ownership.owner_address:
        lines.append(f"Owner: {report.ownership.owner_address}")
    if report.peg_ratio is not None:
        lines.append(
            f"Peg Ratio: {report.peg_ratio.ratio_format} ({report.peg_ratio.percentage})"
        )

    lines.append("")
    lines.append("=== SECURITY CHECKS ===")
    for check, result in report.checks.items():
        lines.append(f"{_title(check)}: {_icon(check, result)} {result.render()}")
    return "\n".join(lines)


def save_report(report: SecurityReport, path: str | Path) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")
    logger.info(f"[AUDIT] Results saved to {target}")
    return target
