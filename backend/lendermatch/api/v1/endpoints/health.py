"""Health check endpoint."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from lendermatch.deps import get_session, reference_cache

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(db: Annotated[AsyncSession, Depends(get_session)]) -> dict:
    """
    Report API, reference-data database and match cache status.

    A database failure degrades the status instead of failing the request.
    """
    try:
        await db.execute(text("SELECT 1"))
        database = "healthy"
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Health check could not reach the database: {str(e)}")
        database = f"unhealthy: {str(e)}"

    return {
        "status": "healthy" if database == "healthy" else "degraded",
        "api": "healthy",
        "database": database,
        "reference_cache_entries": len(reference_cache),
    }
