# campus/services/base_service.py
"""Base service with common CRUD operations."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Type, Any, Dict, Optional, TypeVar, Generic
import logging

from ..core.exceptions import ConflictError, NotFoundError, PersistenceError

logger = logging.getLogger(__name__)

# Define generic type
T = TypeVar('T')

class BaseService(Generic[T]):
    def __init__(self, model: Type[T], db: AsyncSession):
        self.model = model
        self.db = db

    async def get(self, id: Any, *options) -> Optional[T]:
        stmt = select(self.model).where(self.model.id == id)
        if options:
            stmt = stmt.options(*options)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_404(self, id: Any, *options) -> T:
        obj = await self.get(id, *options)
        if obj is None:
            raise NotFoundError(self.model.__name__, id)
        return obj

    async def create(self, obj_in: Dict) -> T:
        obj = self.model(**obj_in)
        self.db.add(obj)
        await self.commit()
        await self.db.refresh(obj)
        return obj

    async def count(self, *criteria) -> int:
        stmt = select(func.count()).select_from(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        result = await self.db.execute(stmt)
        return result.scalar()

    async def commit(self, translate_integrity: bool = True):
        """Commit, translating store failures into the domain taxonomy.

        With translate_integrity=False an IntegrityError is re-raised after
        the rollback so the caller can inspect which constraint failed.
        """
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if not translate_integrity:
                raise
            logger.warning(f"Integrity error on {self.model.__name__}: {e.orig}")
            raise ConflictError(f"{self.model.__name__} violates a uniqueness or integrity constraint")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Database error on {self.model.__name__}: {e}")
            raise PersistenceError(str(e))
