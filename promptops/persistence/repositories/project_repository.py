"""Project and environment repositories."""

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.persistence.models.asset import PromptAsset
from promptops.persistence.models.project import (
    Environment,
    Project,
    environment_active_asset_versions,
    environment_active_prompt_versions,
)
from promptops.persistence.models.prompt import Prompt
from promptops.persistence.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project entities, scoped to a tenant."""

    scope_field = "tenant_id"

    def __init__(self, session: AsyncSession):
        """Initialize project repository."""
        super().__init__(Project, session)

    async def get_tenant_id_for_prompt(self, prompt_id: int) -> int | None:
        """Resolve the tenant owning a prompt (prompt -> project -> tenant)."""
        stmt = (
            select(Project.tenant_id)
            .join(Prompt, Prompt.project_id == Project.id)
            .where(Prompt.id == prompt_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_tenant_id_for_asset(self, asset_id: int) -> int | None:
        """Resolve the tenant owning an asset (asset -> prompt -> project -> tenant)."""
        stmt = (
            select(Project.tenant_id)
            .join(Prompt, Prompt.project_id == Project.id)
            .join(PromptAsset, PromptAsset.prompt_id == Prompt.id)
            .where(PromptAsset.id == asset_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()


class EnvironmentRepository(BaseRepository[Environment]):
    """Repository for Environment entities and their active-version pointers.

    The activation methods only flush; the caller owns the transaction.
    """

    scope_field = "project_id"

    def __init__(self, session: AsyncSession):
        """Initialize environment repository."""
        super().__init__(Environment, session)

    async def connect_prompt_version(self, environment_id: int, prompt_version_id: int) -> None:
        """Mark a prompt version active in an environment (no-op if already active)."""
        if prompt_version_id in await self.list_active_prompt_version_ids(environment_id):
            return
        await self.session.execute(
            insert(environment_active_prompt_versions).values(
                environment_id=environment_id, prompt_version_id=prompt_version_id
            )
        )
        await self.session.flush()

    async def connect_asset_version(self, environment_id: int, asset_version_id: int) -> None:
        """Mark an asset version active in an environment (no-op if already active)."""
        if asset_version_id in await self.list_active_asset_version_ids(environment_id):
            return
        await self.session.execute(
            insert(environment_active_asset_versions).values(
                environment_id=environment_id, asset_version_id=asset_version_id
            )
        )
        await self.session.flush()

    async def disconnect_prompt_version(self, environment_id: int, prompt_version_id: int) -> bool:
        """Remove a prompt version from an environment's actives."""
        result = await self.session.execute(
            delete(environment_active_prompt_versions).where(
                environment_active_prompt_versions.c.environment_id == environment_id,
                environment_active_prompt_versions.c.prompt_version_id == prompt_version_id,
            )
        )
        return result.rowcount > 0

    async def disconnect_asset_version(self, environment_id: int, asset_version_id: int) -> bool:
        """Remove an asset version from an environment's actives."""
        result = await self.session.execute(
            delete(environment_active_asset_versions).where(
                environment_active_asset_versions.c.environment_id == environment_id,
                environment_active_asset_versions.c.asset_version_id == asset_version_id,
            )
        )
        return result.rowcount > 0

    async def list_active_prompt_version_ids(self, environment_id: int) -> list[int]:
        """IDs of prompt versions currently active in an environment."""
        stmt = (
            select(environment_active_prompt_versions.c.prompt_version_id)
            .where(environment_active_prompt_versions.c.environment_id == environment_id)
            .order_by(environment_active_prompt_versions.c.prompt_version_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_active_asset_version_ids(self, environment_id: int) -> list[int]:
        """IDs of asset versions currently active in an environment."""
        stmt = (
            select(environment_active_asset_versions.c.asset_version_id)
            .where(environment_active_asset_versions.c.environment_id == environment_id)
            .order_by(environment_active_asset_versions.c.asset_version_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
