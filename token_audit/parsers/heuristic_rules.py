"""Registry of named risk heuristics.

Each rule is either a set of textual signatures matched against verified
source (SOURCE_ONLY), a predicate over one chain probe (CHAIN_ONLY), or
both (HYBRID). Detection is best-effort signature matching over raw text,
not static analysis: a hit means "this marker is present", never "this
contract is malicious".

The registry is built once at import time and never mutated, so concurrent
audits share it without locking.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class RuleKind(str, Enum):
    SOURCE_ONLY = "source_only"
    CHAIN_ONLY = "chain_only"
    HYBRID = "hybrid"


class ProbeKey(str, Enum):
    """Chain probe slots a rule can be fed from."""

    OWNER = "owner"
    PAUSED = "paused"


@dataclass(frozen=True)
class HeuristicRule:
    name: str
    kind: RuleKind
    description: str
    patterns: tuple[re.Pattern[str], ...] = ()
    probe: ProbeKey | None = None
    predicate: Callable[[Any], bool] | None = None

    def __post_init__(self) -> None:
        needs_source = self.kind in (RuleKind.SOURCE_ONLY, RuleKind.HYBRID)
        needs_probe = self.kind in (RuleKind.CHAIN_ONLY, RuleKind.HYBRID)
        if needs_source and not self.patterns:
            raise ValueError(f"Rule {self.name} ({self.kind.value}) needs source patterns")
        if needs_probe and (self.probe is None or self.predicate is None):
            raise ValueError(f"Rule {self.name} ({self.kind.value}) needs a probe and predicate")
        if not needs_probe and self.probe is not None:
            raise ValueError(f"Rule {self.name} is source-only but names a probe")

    def matches_source(self, source: str) -> bool:
        """Any pattern hit wins; patterns never cancel each other."""
        return any(p.search(source) for p in self.patterns)


class RuleRegistry:
    """Ordered, immutable collection of rules with unique names."""

    def __init__(self, rules: tuple[HeuristicRule, ...]) -> None:
        seen: set[str] = set()
        for rule in rules:
            if rule.name in seen:
                raise ValueError(f"Duplicate rule name: {rule.name}")
            seen.add(rule.name)
        self._rules = tuple(rules)
        self._by_name = {r.name: r for r in self._rules}

    def __iter__(self) -> Iterator[HeuristicRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> HeuristicRule:
        return self._by_name[name]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(r.name for r in self._rules)


def _patterns(*raw: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in raw)


def is_zero_address(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        return int(value, 16) == 0
    except ValueError:
        return False


RULE_REGISTRY = RuleRegistry((
    HeuristicRule(
        name="ownershipRenounced",
        kind=RuleKind.CHAIN_ONLY,
        description="Owner slot is the zero address",
        probe=ProbeKey.OWNER,
        predicate=is_zero_address,
    ),
    HeuristicRule(
        name="hiddenOwner",
        kind=RuleKind.SOURCE_ONLY,
        description="Privileged-access backdoor patterns",
        patterns=_patterns(
            r"onlyOwner\s*\{\s*if\s*\(msg\.sender\s*!=\s*([^)]+)\)",
            r"require\s*\(\s*msg\.sender\s*==\s*([^)]+)\s*,",
            r"selfdestruct\s*\(\s*payable\s*\(\s*([^)]+)\s*\)",
            r"delegatecall\s*\(",
            r"assembly\s*\{",
        ),
    ),
    HeuristicRule(
        name="honeypot",
        kind=RuleKind.SOURCE_ONLY,
        description="Transfer-blocking conditions or fee/tax logic",
        patterns=_patterns(
            r"require\s*\(\s*balanceOf\s*\(\s*msg\.sender\s*\)\s*[<>=]=\s*[^)]+\s*\)",
            r"require\s*\(\s*block\.timestamp\s*[<>=]=\s*[^)]+\s*\)",
            r"require\s*\(\s*msg\.sender\s*==\s*tx\.origin\s*\)",
            r"require\s*\(\s*_balances\s*\[\s*msg\.sender\s*\]\s*[<>=]=\s*[^)]+\s*\)",
            r"require\s*\(\s*[^)]+\s*!=\s*address\s*\(\s*[^)]+\s*\)\s*\)",
            r"tax|fee",
        ),
    ),
    HeuristicRule(
        name="mintable",
        kind=RuleKind.SOURCE_ONLY,
        description="Mint entry point present",
        patterns=_patterns(
            r"function\s+mint\s*\(",
            r"function\s+_mint\s*\(",
            r"ERC20Mintable",
        ),
    ),
    HeuristicRule(
        name="proxyContract",
        kind=RuleKind.SOURCE_ONLY,
        description="Delegatecall-based upgradeability markers",
        patterns=_patterns(
            r"delegatecall\s*\(",
            r"proxy",
            r"upgradeable",
            r"implementation\s*\(",
            r"StorageSlot",
            r"ERC1967Upgrade",
        ),
    ),
    HeuristicRule(
        name="hasSuspiciousFunctions",
        kind=RuleKind.SOURCE_ONLY,
        description="Admin functions that alter fees, limits or trading state",
        patterns=_patterns(
            r"selfdestruct\s*\(",
            r"delegatecall\s*\(",
            r"setTaxFeePercent",
            r"setMaxTxAmount",
            r"excludeFromFee",
            r"setBlacklistEnabled",
            r"setCanTransfer",
            r"setRouterAddress",
            r"setSwapEnabled",
            r"updateFee",
        ),
    ),
    HeuristicRule(
        name="hasBlacklist",
        kind=RuleKind.SOURCE_ONLY,
        description="Address deny-list mechanism",
        patterns=_patterns(
            r"blacklist",
            r"blocked",
            r"banned",
            r"isBlacklisted",
            r"_blacklist",
            r"blacklistAddress",
        ),
    ),
    HeuristicRule(
        name="hasWhitelist",
        kind=RuleKind.SOURCE_ONLY,
        description="Address allow-list mechanism",
        patterns=_patterns(
            r"whitelist",
            r"whitelisted",
            r"isWhitelisted",
            r"_whitelist",
            r"whitelistAddress",
        ),
    ),
    HeuristicRule(
        name="transferCooldown",
        kind=RuleKind.SOURCE_ONLY,
        description="Time-gated transfer restrictions",
        patterns=_patterns(
            r"cooldown",
            r"cooldownTime",
            r"lockTime",
            r"lastTrade",
            r"block\.timestamp",
            r"timeLimit",
            r"tradingCooldown",
        ),
    ),
    HeuristicRule(
        name="transferPausable",
        kind=RuleKind.HYBRID,
        description="Currently paused, or pausability markers in source",
        patterns=_patterns(
            r"Pausable",
            r"paused\s*\(",
            r"whenNotPaused",
            r"pause\s*\(",
            r"unpause\s*\(",
            r"isPaused",
        ),
        probe=ProbeKey.PAUSED,
        predicate=bool,
    ),
))
