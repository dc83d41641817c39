"""Health check: process uptime and audit counters."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from token_audit.parsers.heuristic_rules import RULE_REGISTRY
from token_audit.parsers.metrics import metrics

router = APIRouter(prefix="/api/v1", tags=["health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_sec: int
    total_audits: int
    rules: list[str]
    failures: dict[str, int]
    unknown_checks: dict[str, int]


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    summary = metrics.get_summary()
    return HealthResponse(
        status="ok",
        version="0.1.0",
        uptime_sec=summary["uptime_sec"],
        total_audits=summary["total_audits"],
        rules=list(RULE_REGISTRY.names),
        failures=summary["failures"],
        unknown_checks=summary["unknown_checks"],
    )
