"""Evaluate the rule registry against one (source, chain probes) snapshot.

Pure functions: all I/O has already happened by the time these run, and
the result depends only on the inputs, never on probe arrival order.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from token_audit.parsers.heuristic_rules import (
    RULE_REGISTRY,
    HeuristicRule,
    ProbeKey,
    RuleKind,
    RuleRegistry,
)
from token_audit.parsers.probe_result import (
    CALL_FAILED,
    SOURCE_NOT_VERIFIED,
    ProbeResult,
    is_call_failed,
)


def _has_source(source: str | None) -> bool:
    return bool(source)


def _probe_signal(rule: HeuristicRule, probes: Mapping[ProbeKey, Any]) -> bool | None:
    """Predicate over the rule's probe value, None when the call failed."""
    value = probes.get(rule.probe) if rule.probe is not None else None
    if value is None or is_call_failed(value):
        return None
    return bool(rule.predicate(value))  # type: ignore[misc]


def evaluate_rule(
    rule: HeuristicRule,
    source: str | None,
    probes: Mapping[ProbeKey, Any],
) -> ProbeResult:
    if rule.kind is RuleKind.SOURCE_ONLY:
        if not _has_source(source):
            return ProbeResult.unknown(SOURCE_NOT_VERIFIED)
        return ProbeResult.from_bool(rule.matches_source(source))  # type: ignore[arg-type]

    signal = _probe_signal(rule, probes)

    if rule.kind is RuleKind.CHAIN_ONLY:
        if signal is None:
            return ProbeResult.unknown(CALL_FAILED)
        return ProbeResult.from_bool(signal)

    # HYBRID: either positive signal wins; unknown only if both are missing
    if signal:
        return ProbeResult.positive()
    if _has_source(source):
        return ProbeResult.from_bool(rule.matches_source(source))  # type: ignore[arg-type]
    if signal is None:
        return ProbeResult.unknown(CALL_FAILED)
    return ProbeResult.negative()


def evaluate_rules(
    source: str | None,
    probes: Mapping[ProbeKey, Any],
    registry: RuleRegistry = RULE_REGISTRY,
) -> dict[str, ProbeResult]:
    """Evaluate every rule; keys follow registry order.

    A probe missing from ``probes`` counts as a failed call.
    """
    return {rule.name: evaluate_rule(rule, source, probes) for rule in registry}
