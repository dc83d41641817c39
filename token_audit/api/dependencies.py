"""FastAPI dependency injection: the shared TokenAuditor."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from token_audit.parsers.auditor import TokenAuditor


def get_auditor(request: Request) -> TokenAuditor:
    """Return the auditor created during app startup."""
    auditor: TokenAuditor | None = getattr(request.app.state, "auditor", None)
    if auditor is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Auditor not initialized",
        )
    return auditor
