"""Health check endpoints."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
import logging

from ..core.config import settings
from ..core.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Service and database health"""
    try:
        await db.execute(text("SELECT 1"))
        database = "healthy"
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        database = "unhealthy"

    status_code = 200 if database == "healthy" else 503
    return JSONResponse(
        status_code=status_code,
        content={
            "success": status_code == 200,
            "status": database,
            "service": "Campus API",
            "version": settings.app_version,
            "environment": settings.environment,
        }
    )
