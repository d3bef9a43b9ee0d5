"""
Base Repository
Common CRUD operations for all entities
"""

from typing import Generic, TypeVar, Type, Optional, List, Dict, Any
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from ...core.errors import RepositoryError, ConflictError
from ..connection import Base

# Type variable for generic repository
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with common CRUD operations"""

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def create(self, obj_data: Dict[str, Any]) -> ModelType:
        """Create a new entity"""
        try:
            db_obj = self.model(**obj_data)
            self.session.add(db_obj)
            await self.session.flush()
            await self.session.refresh(db_obj)
            return db_obj

        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(f"Data conflict: {str(e.orig)}")

    async def get(self, id: int) -> Optional[ModelType]:
        """Get entity by ID"""
        try:
            result = await self.session.execute(
                select(self.model).where(self.model.id == id)
            )
            return result.scalar_one_or_none()
        except Exception as e:
            raise RepositoryError(f"Error getting entity: {str(e)}")

    async def find(self, **filters: Any) -> List[ModelType]:
        """Get all entities matching equality filters, in creation order"""
        try:
            query = select(self.model)
            for field, value in filters.items():
                query = query.where(getattr(self.model, field) == value)
            query = query.order_by(self.model.id)

            result = await self.session.execute(query)
            return list(result.scalars().all())

        except Exception as e:
            raise RepositoryError(f"Error getting entities: {str(e)}")

    async def update(self, db_obj: ModelType, fields: Dict[str, Any]) -> ModelType:
        """Apply a partial update to a loaded entity"""
        try:
            for field, value in fields.items():
                setattr(db_obj, field, value)

            await self.session.flush()
            await self.session.refresh(db_obj)
            return db_obj

        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(f"Data conflict: {str(e.orig)}")

    async def delete(self, id: int) -> bool:
        """Delete entity by ID; False when nothing was deleted"""
        try:
            result = await self.session.execute(
                delete(self.model).where(self.model.id == id)
            )
            await self.session.flush()
            return result.rowcount > 0

        except Exception as e:
            await self.session.rollback()
            raise RepositoryError(f"Error deleting entity: {str(e)}")
