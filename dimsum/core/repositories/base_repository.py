from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def create(self, db: AsyncSession, obj_in: dict) -> ModelType:
        """Create new record"""
        db_obj = self.model(**obj_in)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def get(self, db: AsyncSession, id: int) -> Optional[ModelType]:
        """Get record by ID"""
        result = await db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def get_multi(self, db: AsyncSession) -> List[ModelType]:
        """Get all records, newest id first"""
        result = await db.execute(
            select(self.model).order_by(self.model.id.desc())
        )
        return list(result.scalars().all())

    async def update(
        self, db: AsyncSession, db_obj: ModelType, obj_in: dict
    ) -> ModelType:
        """Update loaded record in place"""
        for field, value in obj_in.items():
            setattr(db_obj, field, value)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def delete(self, db: AsyncSession, id: int) -> bool:
        """Delete record"""
        result = await db.execute(
            delete(self.model).where(self.model.id == id)
        )
        await db.flush()
        return result.rowcount > 0

    async def count(self, db: AsyncSession) -> int:
        """Count records"""
        result = await db.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()
