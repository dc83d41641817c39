"""Raw chain reads for one token, before any fallback is applied."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from token_audit.parsers.probe_result import CALL_FAILED_VALUE, is_call_failed
from token_audit.parsers.report import (
    DEFAULT_DECIMALS,
    DEFAULT_NAME,
    DEFAULT_SYMBOL,
    DEFAULT_TOTAL_SUPPLY,
    TokenMetadata,
    format_units,
)

# uint256 max is 78 digits; anything past that is a broken decimals() getter
MAX_SANE_DECIMALS = 77


@dataclass(frozen=True)
class MetadataReads:
    """Each field holds the decoded value or CALL_FAILED_VALUE."""

    name: Any = CALL_FAILED_VALUE
    symbol: Any = CALL_FAILED_VALUE
    decimals: Any = CALL_FAILED_VALUE
    total_supply: Any = CALL_FAILED_VALUE

    @property
    def all_failed(self) -> bool:
        return all(
            is_call_failed(v)
            for v in (self.name, self.symbol, self.decimals, self.total_supply)
        )

    def to_token_metadata(self, address: str) -> TokenMetadata:
        """Apply per-field fallbacks: "Unknown" name/symbol, 18 decimals, 0 supply."""
        name = DEFAULT_NAME if is_call_failed(self.name) else str(self.name)
        symbol = DEFAULT_SYMBOL if is_call_failed(self.symbol) else str(self.symbol)

        decimals = DEFAULT_DECIMALS
        if not is_call_failed(self.decimals) and 0 <= int(self.decimals) <= MAX_SANE_DECIMALS:
            decimals = int(self.decimals)

        supply = DEFAULT_TOTAL_SUPPLY
        if not is_call_failed(self.total_supply):
            supply = int(self.total_supply)

        return TokenMetadata(
            address=address,
            name=name,
            symbol=symbol,
            decimals=decimals,
            total_supply=format_units(supply, decimals),
        )
