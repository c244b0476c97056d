import asyncio
import logging

from celery import Celery
from celery.schedules import crontab
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from campus.core.config import settings
from campus.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

# Celery configuration
celery_app = Celery(
    "campus",
    broker=settings.redis_url,
    backend=settings.redis_url,
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        "purge-expired-notifications": {
            "task": "campus.purge_expired_notifications",
            "schedule": crontab(hour=3, minute=0),
        },
    },
)


async def _purge_expired_notifications() -> int:
    # Each task run owns its event loop, so it gets its own unpooled engine
    engine = create_async_engine(settings.database_url, poolclass=NullPool)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with session_factory() as session:
            return await NotificationService(session).purge_expired()
    finally:
        await engine.dispose()


@celery_app.task(name="campus.purge_expired_notifications")
def purge_expired_notifications() -> int:
    """Delete notifications older than the retention window"""
    purged = asyncio.run(_purge_expired_notifications())
    logger.info(f"Notification retention task removed {purged} rows")
    return purged
