"""Audit endpoints: token report and peg-ratio utility."""

from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse
from loguru import logger

from config.settings import settings
from token_audit.api.dependencies import get_auditor
from token_audit.api.limiter import limiter
from token_audit.parsers.auditor import TokenAuditor
from token_audit.parsers.errors import (
    AggregationError,
    ChainUnavailableError,
    InvalidAddressError,
    InvalidPegInputError,
)
from token_audit.parsers.peg_ratio import format_peg_ratio

router = APIRouter(tags=["audit"])


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "api is running"


@router.get("/audit")
@limiter.limit(settings.api_rate_limit)
async def audit_token(
    request: Request,
    token_address: str | None = Query(None, alias="tokenAddress", max_length=64),
    auditor: TokenAuditor = Depends(get_auditor),
) -> dict[str, Any]:
    """Run a full security audit for one token contract."""
    try:
        report = await auditor.audit(token_address)
    except InvalidAddressError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except ChainUnavailableError as e:
        logger.warning(f"[API] Chain unavailable for {token_address}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Chain RPC unavailable",
        ) from e
    except AggregationError as e:
        logger.warning(f"[API] Aggregation failed for {token_address}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e
    return report.to_dict()


@router.get("/api/v1/peg-ratio")
async def peg_ratio(
    value: Decimal = Query(..., description="Measured unit value"),
    reference: Decimal = Query(Decimal(1), description="Reference unit value"),
) -> dict[str, Any]:
    """Format a value/reference pair as decimal, percentage and N:M ratio."""
    try:
        return format_peg_ratio(value, reference).to_dict()
    except InvalidPegInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
