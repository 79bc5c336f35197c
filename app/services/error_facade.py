from __future__ import annotations

import logging
import sqlite3

from fastapi import HTTPException

from games.errors import (
    DRAFT_INVARIANT_VIOLATED,
    INCOMPLETE_REPORT,
    INVALID_CARD,
    INVALID_DRAFT,
    INVALID_LINEUP,
    INVALID_STATUS,
    NOT_FOUND,
    GameEngineError,
)

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    INVALID_STATUS: 409,
    INCOMPLETE_REPORT: 422,
    INVALID_LINEUP: 422,
    INVALID_DRAFT: 400,
    INVALID_CARD: 400,
    NOT_FOUND: 404,
    DRAFT_INVARIANT_VIOLATED: 500,
}


def _http_error(exc: Exception, *, op: str) -> HTTPException:
    """Map an engine/storage exception to an HTTPException with a structured detail."""
    if isinstance(exc, HTTPException):
        return exc
    if isinstance(exc, GameEngineError):
        if exc.code == DRAFT_INVARIANT_VIOLATED:
            logger.error("API_DRAFT_INVARIANT_VIOLATED op=%s details=%s", op, exc.details)
        return HTTPException(
            status_code=STATUS_BY_CODE.get(exc.code, 400),
            detail={"code": exc.code, "message": exc.message, "details": dict(exc.details or {})},
        )
    if isinstance(exc, sqlite3.OperationalError):
        # Lock contention / busy database: transient, safe to retry.
        logger.warning("API_STORE_BUSY op=%s", op, exc_info=True)
        return HTTPException(
            status_code=503,
            detail={"code": "STORE_UNAVAILABLE", "message": str(exc), "details": {}},
        )
    if isinstance(exc, KeyError):
        return HTTPException(status_code=404, detail={"code": NOT_FOUND, "message": str(exc), "details": {}})
    if isinstance(exc, ValueError):
        return HTTPException(status_code=400, detail={"code": "BAD_REQUEST", "message": str(exc), "details": {}})
    logger.error("API_UNHANDLED op=%s", op, exc_info=exc)
    return HTTPException(
        status_code=500,
        detail={"code": "INTERNAL_ERROR", "message": f"{op} failed: {exc}", "details": {}},
    )
