"""Prompt and prompt version repositories."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.persistence.models.prompt import Prompt, PromptVersion
from promptops.persistence.repositories.base import BaseRepository


class PromptRepository(BaseRepository[Prompt]):
    """Repository for Prompt entities, scoped to a project."""

    scope_field = "project_id"

    def __init__(self, session: AsyncSession):
        """Initialize prompt repository."""
        super().__init__(Prompt, session)


class PromptVersionRepository(BaseRepository[PromptVersion]):
    """Repository for PromptVersion entities.

    Versions are reached through their prompt, so there is no scope column.
    """

    def __init__(self, session: AsyncSession):
        """Initialize prompt version repository."""
        super().__init__(PromptVersion, session)

    async def get_by_tag(self, prompt_id: int, version_tag: str) -> PromptVersion | None:
        """Get a version by its unique (prompt, tag) key."""
        stmt = select(PromptVersion).where(
            PromptVersion.prompt_id == prompt_id,
            PromptVersion.version_tag == version_tag,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_in_project(self, project_id: int, version_id: int) -> PromptVersion | None:
        """Get a version by id, only if its prompt belongs to the project."""
        stmt = (
            select(PromptVersion)
            .join(Prompt, Prompt.id == PromptVersion.prompt_id)
            .where(
                PromptVersion.id == version_id,
                Prompt.project_id == project_id,
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_latest(self, prompt_id: int) -> PromptVersion | None:
        """Get the most recently created version of a prompt."""
        stmt = (
            select(PromptVersion)
            .where(PromptVersion.prompt_id == prompt_id)
            .order_by(PromptVersion.created_at.desc(), PromptVersion.id.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_prompt(self, prompt_id: int) -> list[PromptVersion]:
        """List a prompt's versions, newest first."""
        stmt = (
            select(PromptVersion)
            .where(PromptVersion.prompt_id == prompt_id)
            .order_by(PromptVersion.created_at.desc(), PromptVersion.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_by_id(self, version_id: int) -> int:
        """Delete a version row and commit. Returns the number of rows removed."""
        result = await self.session.execute(
            delete(PromptVersion).where(PromptVersion.id == version_id)
        )
        await self.session.commit()
        return result.rowcount
