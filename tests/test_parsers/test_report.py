"""Tests for report assembly, serialization and rendering."""

import json

from token_audit.parsers.heuristic_engine import evaluate_rules
from token_audit.parsers.heuristic_rules import RULE_REGISTRY, ProbeKey
from token_audit.parsers.ownership import summarize_ownership
from token_audit.parsers.peg_ratio import format_peg_ratio
from token_audit.parsers.probe_result import CALL_FAILED_VALUE, ProbeResult
from token_audit.parsers.report import (
    TokenMetadata,
    build_report,
    format_report_text,
    format_units,
    save_report,
)

ADDRESS = "0xAbCdEf0000000000000000000000000000000001"
OWNER = "0x1234567890123456789012345678901234567890"


def _report(source=None, owner=OWNER, paused=False, peg=None):
    probes = {ProbeKey.OWNER: owner, ProbeKey.PAUSED: paused}
    return build_report(
        metadata=TokenMetadata(ADDRESS, "Test Token", "TST", 18, "1000000.0"),
        ownership=summarize_ownership(owner),
        checks=evaluate_rules(source, probes),
        peg_ratio=peg,
    )


class TestFormatUnits:
    def test_whole(self) -> None:
        assert format_units(10**24, 18) == "1000000.0"

    def test_fraction(self) -> None:
        assert format_units(1_500_000, 6) == "1.5"
        assert format_units(1, 18) == "0.000000000000000001"

    def test_zero_and_no_decimals(self) -> None:
        assert format_units(0, 18) == "0.0"
        assert format_units(42, 0) == "42.0"


class TestSerialization:
    def test_nested_shape(self) -> None:
        data = _report(peg=format_peg_ratio("0.5")).to_dict()
        assert data["token"] == {
            "address": ADDRESS,
            "name": "Test Token",
            "symbol": "TST",
            "decimals": 18,
            "totalSupply": "1000000.0",
        }
        assert data["ownership"] == {"renounced": False, "ownerAddress": OWNER}
        assert data["pegRatio"] == "1:2"

    def test_every_rule_in_registry_order(self) -> None:
        data = _report().to_dict()
        assert tuple(data["securityChecks"]) == RULE_REGISTRY.names

    def test_unknown_serialized_as_reason_string(self) -> None:
        checks = _report(source=None).to_dict()["securityChecks"]
        assert checks["hiddenOwner"] == "source not verified"
        assert checks["ownershipRenounced"] is False
        assert checks["transferPausable"] is False

    def test_peg_ratio_omitted(self) -> None:
        assert "pegRatio" not in _report().to_dict()

    def test_zero_owner_has_no_owner_field(self) -> None:
        data = _report(owner="0x0000000000000000000000000000000000000000").to_dict()
        assert data["securityChecks"]["ownershipRenounced"] is True
        assert "ownerAddress" not in data["ownership"]

    def test_report_copies_checks(self) -> None:
        checks = {"mintable": ProbeResult.positive()}
        report = build_report(
            TokenMetadata(ADDRESS), summarize_ownership(CALL_FAILED_VALUE), checks
        )
        checks["mintable"] = ProbeResult.negative()
        assert report.checks["mintable"].is_positive


class TestTextRendering:
    def test_header_and_lines(self) -> None:
        text = format_report_text(_report(source="function mint("))
        assert "=== TOKEN SECURITY ANALYSIS ===" in text
        assert "Token: Test Token (TST)" in text
        assert f"Owner: {OWNER}" in text
        assert "Ownership Renounced: ❌ No" in text
        assert "Hidden Owner: ✅ No" in text
        assert "Mintable: ⚠️ Yes" in text

    def test_unknown_shows_reason(self) -> None:
        text = format_report_text(_report(source=None))
        assert "Honeypot: ❔ source not verified" in text

    def test_save_report(self, tmp_path) -> None:
        path = save_report(_report(), tmp_path / "out" / "report.json")
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["token"]["symbol"] == "TST"
        assert len(data["securityChecks"]) == len(RULE_REGISTRY)
