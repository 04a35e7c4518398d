"""AI model repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from promptops.persistence.models.ai_model import AIModel
from promptops.persistence.repositories.base import BaseRepository


class AIModelRepository(BaseRepository[AIModel]):
    """Repository for AIModel entities, scoped to a project."""

    scope_field = "project_id"

    def __init__(self, session: AsyncSession):
        """Initialize AI model repository."""
        super().__init__(AIModel, session)
