"""Base repository with scope-aware queries."""

from typing import Generic, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with scope-restricted query methods.

    ``scope_field`` names the column that bounds visibility (``tenant_id``,
    ``project_id``, ...). Passing ``None`` as the scope value skips the
    restriction, for lookups that are already scoped through a parent.
    """

    scope_field: str | None = None

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """Initialize repository with model and session."""
        self.model = model
        self.session = session

    def _scoped(self, stmt, scope_id: int | None):
        if scope_id is not None and self.scope_field is not None:
            stmt = stmt.where(getattr(self.model, self.scope_field) == scope_id)
        return stmt

    async def get_by_id(self, scope_id: int | None, id: int) -> ModelType | None:
        """Get entity by ID, restricted to the scope."""
        stmt = self._scoped(select(self.model).where(self.model.id == id), scope_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, scope_id: int | None, id: int, **data) -> ModelType | None:
        """Update entity, restricted to the scope."""
        instance = await self.get_by_id(scope_id, id)
        if instance is None:
            return None

        for key, value in data.items():
            setattr(instance, key, value)

        await self.session.commit()
        return instance
