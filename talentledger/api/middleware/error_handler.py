"""
Error Handling for TalentLedger

Centralized error handling:
- Structured error responses
- Logging of errors
- Exception translation
"""

import traceback
from datetime import datetime, timezone

from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger

from talentledger.errors import TalentLedgerError


def create_error_response(
    error: str,
    code: str,
    status_code: int,
    detail: str = None,
) -> JSONResponse:
    """Create standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "code": code,
            "detail": detail,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


def setup_exception_handlers(app):
    """Register exception handlers with FastAPI app."""

    @app.exception_handler(TalentLedgerError)
    async def talentledger_exception_handler(request: Request, exc: TalentLedgerError):
        if exc.status_code >= 500:
            logger.error(f"TalentLedger error: {exc.code} - {exc.message} ({request.url.path})")
        else:
            logger.warning(f"TalentLedger error: {exc.code} - {exc.message} ({request.url.path})")
        return create_error_response(
            error=exc.message,
            code=exc.code,
            status_code=exc.status_code,
            detail=exc.detail,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}\n{traceback.format_exc()}"
        )
        # Don't expose internal error details
        return create_error_response(
            error="Internal Server Error",
            code="INTERNAL_ERROR",
            status_code=500,
            detail="An unexpected error occurred",
        )
