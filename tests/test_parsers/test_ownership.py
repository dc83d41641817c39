"""Tests for the ownership sub-check."""

from token_audit.parsers.ownership import summarize_ownership
from token_audit.parsers.probe_result import CALL_FAILED, CALL_FAILED_VALUE, ProbeResult

OWNER = "0x1234567890123456789012345678901234567890"
ZERO = "0x0000000000000000000000000000000000000000"


def test_zero_owner_is_renounced_without_address():
    summary = summarize_ownership(ZERO)
    assert summary.renounced.is_positive
    assert summary.owner_address is None
    assert summary.to_dict() == {"renounced": True}


def test_live_owner_attached():
    summary = summarize_ownership(OWNER)
    assert summary.renounced.is_negative
    assert summary.owner_address == OWNER
    assert summary.to_dict() == {"renounced": False, "ownerAddress": OWNER}


def test_no_accessor_is_unknown_not_renounced():
    summary = summarize_ownership(CALL_FAILED_VALUE)
    assert summary.renounced == ProbeResult.unknown(CALL_FAILED)
    assert summary.owner_address is None
    assert summary.to_dict() == {"renounced": "call failed"}
