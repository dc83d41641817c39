"""Token audit orchestration.

One audit = validate the address, issue every acquisition call
concurrently into its own slot, then run the pure ``analyze`` step over the
joined snapshot. Slots fail independently: a timeout or error in one only
degrades the checks fed by it.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, TypeVar

from loguru import logger

from token_audit.parsers.chain.client import ChainClient, normalize_address
from token_audit.parsers.chain.models import MetadataReads
from token_audit.parsers.errors import (
    AggregationError,
    InvalidAddressError,
    InvalidPegInputError,
    TokenAuditError,
)
from token_audit.parsers.explorer.client import ExplorerClient
from token_audit.parsers.heuristic_engine import evaluate_rules
from token_audit.parsers.heuristic_rules import ProbeKey
from token_audit.parsers.metrics import AuditMetrics
from token_audit.parsers.metrics import metrics as default_metrics
from token_audit.parsers.ownership import summarize_ownership
from token_audit.parsers.peg_ratio import PegRatio, format_peg_ratio
from token_audit.parsers.probe_result import CALL_FAILED_VALUE, is_call_failed
from token_audit.parsers.report import SecurityReport, build_report
from token_audit.parsers.source_cache import SourceCache
from token_audit.parsers.subgraph.client import SubgraphClient

T = TypeVar("T")


@dataclass(frozen=True)
class ProbeSnapshot:
    """Joined acquisition results for one audit; one field per slot."""

    metadata: MetadataReads = field(default_factory=MetadataReads)
    owner: Any = CALL_FAILED_VALUE
    paused: Any = CALL_FAILED_VALUE
    source: str | None = None
    derived_usd: Decimal | None = None

    @property
    def chain_unreadable(self) -> bool:
        return (
            self.metadata.all_failed
            and is_call_failed(self.owner)
            and is_call_failed(self.paused)
        )

    def probes(self) -> dict[ProbeKey, Any]:
        return {ProbeKey.OWNER: self.owner, ProbeKey.PAUSED: self.paused}


def _peg_ratio(derived_usd: Decimal | None, reference: Decimal | float) -> PegRatio | None:
    if derived_usd is None:
        return None
    try:
        return format_peg_ratio(derived_usd, reference)
    except InvalidPegInputError as e:
        logger.debug(f"[AUDIT] Peg ratio omitted: {e}")
        return None


def analyze(
    address: str,
    snapshot: ProbeSnapshot,
    peg_reference: Decimal | float = 1,
) -> SecurityReport:
    """Turn one acquisition snapshot into a report. No I/O.

    Raises AggregationError only when nothing at all could be read from the
    chain; every other gap shows up as an UNKNOWN check.
    """
    if snapshot.chain_unreadable:
        raise AggregationError(f"No metadata or chain probe could be read for {address}")

    checks = evaluate_rules(snapshot.source, snapshot.probes())
    return build_report(
        metadata=snapshot.metadata.to_token_metadata(address),
        ownership=summarize_ownership(snapshot.owner),
        checks=checks,
        peg_ratio=_peg_ratio(snapshot.derived_usd, peg_reference),
    )


async def _bounded(aw: Awaitable[T], timeout: float, fallback: T, label: str) -> T:
    """Await ``aw`` with its own timeout, degrading to ``fallback``."""
    try:
        return await asyncio.wait_for(aw, timeout=timeout)
    except TimeoutError:
        logger.debug(f"[AUDIT] {label} timed out after {timeout}s")
        return fallback
    except Exception as e:
        logger.warning(f"[AUDIT] {label} failed: {type(e).__name__}: {e}")
        return fallback


class TokenAuditor:
    """Runs audits against one configured set of collaborators."""

    def __init__(
        self,
        chain: ChainClient,
        explorer: ExplorerClient,
        subgraph: SubgraphClient | None = None,
        *,
        source_cache: SourceCache | None = None,
        chain_timeout: float = 10.0,
        source_timeout: float = 15.0,
        peg_timeout: float = 10.0,
        peg_reference: Decimal | float = 1,
        audit_metrics: AuditMetrics | None = None,
    ) -> None:
        self._chain = chain
        self._explorer = explorer
        self._subgraph = subgraph
        self._source_cache = source_cache
        self._chain_timeout = chain_timeout
        self._source_timeout = source_timeout
        self._peg_timeout = peg_timeout
        self._peg_reference = peg_reference
        self._metrics = audit_metrics or default_metrics

    async def validate(self, address: str | None) -> str:
        """Checksum ``address`` and make sure it holds contract code."""
        checksummed = normalize_address(address)
        if not await self._chain.is_contract(checksummed):
            raise InvalidAddressError("Invalid address is not a contract")
        return checksummed

    async def _fetch_source(self, address: str) -> str | None:
        if self._source_cache is not None:
            cached = await self._source_cache.get(address)
            if cached:
                return cached

        source = await self._explorer.fetch_verified_source(address)
        if source and self._source_cache is not None:
            await self._source_cache.put(address, source)
        return source

    async def _fetch_derived_usd(self, address: str) -> Decimal | None:
        if self._subgraph is None:
            return None
        return await self._subgraph.fetch_derived_usd(address)

    async def gather_snapshot(self, address: str) -> ProbeSnapshot:
        probe = self._chain.probe(address)
        # owner() + getOwner() run back to back inside one slot
        chain_slot_timeout = self._chain_timeout * 2 + 1

        metadata, owner, paused, source, derived_usd = await asyncio.gather(
            _bounded(probe.read_metadata(), chain_slot_timeout, MetadataReads(), "metadata"),
            _bounded(probe.read_owner(), chain_slot_timeout, CALL_FAILED_VALUE, "owner"),
            _bounded(probe.read_paused(), chain_slot_timeout, CALL_FAILED_VALUE, "paused"),
            _bounded(self._fetch_source(address), self._source_timeout, None, "source"),
            _bounded(self._fetch_derived_usd(address), self._peg_timeout, None, "peg"),
        )
        return ProbeSnapshot(
            metadata=metadata,
            owner=owner,
            paused=paused,
            source=source,
            derived_usd=derived_usd,
        )

    async def audit(self, address: str | None) -> SecurityReport:
        """Validate, acquire and analyze one token."""
        started = time.monotonic()
        try:
            checksummed = await self.validate(address)
            logger.info(f"[AUDIT] Analyzing token {checksummed}")
            snapshot = await self.gather_snapshot(checksummed)
            report = analyze(checksummed, snapshot, self._peg_reference)
        except TokenAuditError as e:
            self._metrics.record_failure(type(e).__name__)
            raise

        latency_ms = (time.monotonic() - started) * 1000
        unknown = report.unknown_checks
        self._metrics.record_run(
            latency_ms, [report.checks[name].reason or "" for name in unknown]
        )
        if unknown:
            logger.info(
                f"[AUDIT] {checksummed}: {len(unknown)} checks unknown "
                f"({', '.join(unknown)}) in {latency_ms:.0f}ms"
            )
        else:
            logger.info(f"[AUDIT] {checksummed}: complete in {latency_ms:.0f}ms")
        return report

    async def close(self) -> None:
        await self._chain.close()
        await self._explorer.close()
        if self._subgraph is not None:
            await self._subgraph.close()


async def create_auditor() -> TokenAuditor:
    """Build a TokenAuditor from application settings."""
    from config.settings import settings
    from token_audit.db.redis import get_redis

    source_cache = None
    if settings.source_cache_enabled:
        source_cache = SourceCache(
            await get_redis(settings.redis_url),
            settings.explorer_url,
            settings.source_cache_ttl_sec,
            rpc_url=settings.rpc_url,
        )

    return TokenAuditor(
        chain=ChainClient(settings.rpc_url, call_timeout=settings.chain_call_timeout_sec),
        explorer=ExplorerClient(
            settings.explorer_url,
            max_rps=settings.explorer_max_rps,
            timeout=settings.source_fetch_timeout_sec,
        ),
        subgraph=SubgraphClient(
            settings.subgraph_url,
            max_rps=settings.subgraph_max_rps,
            timeout=settings.peg_lookup_timeout_sec,
        ),
        source_cache=source_cache,
        chain_timeout=settings.chain_call_timeout_sec,
        source_timeout=settings.source_fetch_timeout_sec,
        peg_timeout=settings.peg_lookup_timeout_sec,
        peg_reference=settings.peg_reference_value,
    )
