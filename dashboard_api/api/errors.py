"""Error conversion shared by the resource routers.

Store failures become a 500 carrying a fixed, entity-specific message;
missing rows become a 404. Handlers never retry.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger(__name__)


def not_found(entity: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity} not found")


@asynccontextmanager
async def store_errors(message: str) -> AsyncIterator[None]:
    """Translate database and connection failures inside the block into ``message``."""
    try:
        yield
    except (SQLAlchemyError, OSError) as exc:
        logger.exception("store.error", message=message, error=str(exc))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message) from exc
