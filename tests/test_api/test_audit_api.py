"""Tests for the HTTP API."""

from decimal import Decimal

import httpx
import pytest
from web3 import Web3

from token_audit.api.app import create_app

TOKEN = "0x" + "ab" * 20
OWNER = "0x1234567890123456789012345678901234567890"
SOURCE = "contract T is Pausable { function mint(address a, uint256 b) external {} }"


def _client(auditor) -> httpx.AsyncClient:
    app = create_app(auditor)
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_root(auditor_factory):
    async with _client(auditor_factory()) as client:
        resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.text == "api is running"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


@pytest.mark.asyncio
async def test_audit_report(auditor_factory, probe_factory):
    auditor = auditor_factory(
        probe=probe_factory(owner=OWNER, paused=False),
        source=SOURCE,
        price=Decimal("0.25"),
    )
    async with _client(auditor) as client:
        resp = await client.get("/audit", params={"tokenAddress": TOKEN})

    assert resp.status_code == 200
    data = resp.json()
    assert data["token"]["address"] == Web3.to_checksum_address(TOKEN)
    assert data["token"]["symbol"] == "TST"
    assert data["ownership"] == {"renounced": False, "ownerAddress": OWNER}
    assert data["securityChecks"]["mintable"] is True
    assert data["securityChecks"]["transferPausable"] is True
    assert data["securityChecks"]["hasBlacklist"] is False
    assert data["pegRatio"] == "1:4"


@pytest.mark.asyncio
async def test_audit_unknowns_are_strings(auditor_factory, probe_factory):
    auditor = auditor_factory(probe=probe_factory(owner=OWNER))
    async with _client(auditor) as client:
        resp = await client.get("/audit", params={"tokenAddress": TOKEN})

    checks = resp.json()["securityChecks"]
    assert checks["honeypot"] == "source not verified"
    assert checks["transferPausable"] == "call failed"
    assert "pegRatio" not in resp.json()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("params", "kwargs", "status", "detail"),
    [
        ({}, {}, 400, "Token address is required"),
        ({"tokenAddress": "0x123"}, {}, 400, "Invalid token address"),
        ({"tokenAddress": TOKEN}, {"has_code": False}, 400, "Invalid address is not a contract"),
        ({"tokenAddress": TOKEN}, {"reachable": False}, 503, "Chain RPC unavailable"),
    ],
)
async def test_audit_errors(auditor_factory, params, kwargs, status, detail):
    async with _client(auditor_factory(**kwargs)) as client:
        resp = await client.get("/audit", params=params)
    assert resp.status_code == status
    assert resp.json()["detail"] == detail


@pytest.mark.asyncio
async def test_audit_aggregation_failure(auditor_factory, probe_factory):
    from token_audit.parsers.chain.models import MetadataReads

    auditor = auditor_factory(probe=probe_factory(metadata=MetadataReads()))
    async with _client(auditor) as client:
        resp = await client.get("/audit", params={"tokenAddress": TOKEN})
    assert resp.status_code == 502


@pytest.mark.asyncio
async def test_peg_ratio_endpoint(auditor_factory):
    async with _client(auditor_factory()) as client:
        ok = await client.get("/api/v1/peg-ratio", params={"value": "0.5", "reference": "1"})
        bad = await client.get("/api/v1/peg-ratio", params={"value": "1", "reference": "0"})

    assert ok.status_code == 200
    assert ok.json()["ratioFormat"] == "1:2"
    assert bad.status_code == 400


@pytest.mark.asyncio
async def test_health(auditor_factory):
    async with _client(auditor_factory()) as client:
        resp = await client.get("/api/v1/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["rules"][0] == "ownershipRenounced"
    assert len(data["rules"]) == 10
