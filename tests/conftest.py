"""Shared test fixtures: in-memory stand-ins for chain, explorer and subgraph."""

from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Any

import pytest

from token_audit.parsers.auditor import TokenAuditor
from token_audit.parsers.chain.models import MetadataReads
from token_audit.parsers.errors import ChainUnavailableError
from token_audit.parsers.metrics import AuditMetrics
from token_audit.parsers.probe_result import CALL_FAILED_VALUE


class FakeProbe:
    def __init__(
        self,
        metadata: MetadataReads | None = None,
        owner: Any = CALL_FAILED_VALUE,
        paused: Any = CALL_FAILED_VALUE,
        delay: float = 0.0,
    ) -> None:
        self._metadata = metadata or MetadataReads(
            name="Test Token", symbol="TST", decimals=18, total_supply=10**24
        )
        self._owner = owner
        self._paused = paused
        self._delay = delay

    async def read_metadata(self) -> MetadataReads:
        await asyncio.sleep(self._delay)
        return self._metadata

    async def read_owner(self) -> Any:
        await asyncio.sleep(self._delay)
        return self._owner

    async def read_paused(self) -> Any:
        await asyncio.sleep(self._delay)
        return self._paused


class FakeChain:
    def __init__(
        self, probe: FakeProbe | None = None, *, has_code: bool = True, reachable: bool = True
    ) -> None:
        self._probe = probe or FakeProbe()
        self._has_code = has_code
        self._reachable = reachable
        self.probed: list[str] = []
        self.closed = False

    def probe(self, address: str) -> FakeProbe:
        self.probed.append(address)
        return self._probe

    async def is_contract(self, address: str) -> bool:
        if not self._reachable:
            raise ChainUnavailableError("connection refused")
        return self._has_code

    async def close(self) -> None:
        self.closed = True


class FakeExplorer:
    def __init__(self, source: str | None = None, delay: float = 0.0) -> None:
        self._source = source
        self._delay = delay
        self.calls = 0
        self.closed = False

    async def fetch_verified_source(self, address: str) -> str | None:
        self.calls += 1
        await asyncio.sleep(self._delay)
        return self._source

    async def close(self) -> None:
        self.closed = True


class FakeSubgraph:
    def __init__(self, price: Decimal | None = None, delay: float = 0.0) -> None:
        self._price = price
        self._delay = delay

    async def fetch_derived_usd(self, address: str) -> Decimal | None:
        await asyncio.sleep(self._delay)
        return self._price

    async def close(self) -> None:
        pass


def make_auditor(
    *,
    probe: FakeProbe | None = None,
    source: str | None = None,
    price: Decimal | None = None,
    has_code: bool = True,
    reachable: bool = True,
    explorer_delay: float = 0.0,
    subgraph_delay: float = 0.0,
    **kwargs: Any,
) -> TokenAuditor:
    return TokenAuditor(
        chain=FakeChain(probe, has_code=has_code, reachable=reachable),  # type: ignore[arg-type]
        explorer=FakeExplorer(source, delay=explorer_delay),  # type: ignore[arg-type]
        subgraph=FakeSubgraph(price, delay=subgraph_delay),  # type: ignore[arg-type]
        audit_metrics=kwargs.pop("audit_metrics", AuditMetrics()),
        **kwargs,
    )


@pytest.fixture
def auditor_factory():
    return make_auditor


@pytest.fixture
def probe_factory():
    return FakeProbe
