"""Ownership sub-check.

Unlike the other rules this one also yields the concrete owner address
when ownership is still held. Outcomes:

- owner is the zero address  -> renounced POSITIVE, no owner address
- owner is any other address -> renounced NEGATIVE, owner address attached
- neither accessor answered  -> UNKNOWN("call failed"), no owner address

The third case is kept distinct from renouncement: a contract without an
``owner()``/``getOwner()`` accessor is not the same as one whose owner
gave up control.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from token_audit.parsers.heuristic_engine import evaluate_rule
from token_audit.parsers.heuristic_rules import RULE_REGISTRY, ProbeKey
from token_audit.parsers.probe_result import ProbeResult, is_call_failed

OWNERSHIP_RULE = "ownershipRenounced"


@dataclass(frozen=True)
class OwnershipSummary:
    renounced: ProbeResult
    owner_address: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"renounced": self.renounced.to_json()}
        if self.owner_address is not None:
            data["ownerAddress"] = self.owner_address
        return data


def summarize_ownership(owner_value: Any) -> OwnershipSummary:
    """Build the ownership summary from the resolved owner probe slot."""
    renounced = evaluate_rule(
        RULE_REGISTRY.get(OWNERSHIP_RULE), None, {ProbeKey.OWNER: owner_value}
    )
    if renounced.is_negative and not is_call_failed(owner_value):
        return OwnershipSummary(renounced=renounced, owner_address=str(owner_value))
    return OwnershipSummary(renounced=renounced)
