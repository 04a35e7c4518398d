"""Deployment repository."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.persistence.models.deployment import (
    Deployment,
    DeploymentItem,
    DeploymentItemStatus,
    DeploymentStatus,
)
from promptops.persistence.repositories.base import BaseRepository


class DeploymentRepository(BaseRepository[Deployment]):
    """Repository for Deployment aggregates (deployment plus its items).

    The ``set_*`` / ``mark_*`` methods only flush so that a deploy run can
    group them into one transaction; the service commits or rolls back.
    """

    scope_field = "project_id"

    def __init__(self, session: AsyncSession):
        """Initialize deployment repository."""
        super().__init__(Deployment, session)

    async def get_in_project(
        self,
        project_id: int,
        deployment_id: int,
        environment_id: int | None = None,
    ) -> Deployment | None:
        """Get a deployment by id inside a project, optionally pinned to an environment."""
        stmt = select(Deployment).where(
            Deployment.id == deployment_id,
            Deployment.project_id == project_id,
        )
        if environment_id is not None:
            stmt = stmt.where(Deployment.environment_id == environment_id)
        # Re-read even if the deployment is already in the identity map
        stmt = stmt.execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def list_for_project(
        self,
        project_id: int,
        environment_id: int | None = None,
        status: str | None = None,
    ) -> list[Deployment]:
        """List deployments for a project, newest request first."""
        stmt = select(Deployment).where(Deployment.project_id == project_id)
        if environment_id is not None:
            stmt = stmt.where(Deployment.environment_id == environment_id)
        if status is not None:
            stmt = stmt.where(Deployment.status == status)
        stmt = stmt.order_by(Deployment.requested_at.desc(), Deployment.id.desc())
        result = await self.session.execute(stmt)
        return list(result.unique().scalars().all())

    async def create_with_items(
        self,
        project_id: int,
        environment_id: int,
        name: str,
        description: str | None,
        requested_by_id: int,
        items: list[dict],
    ) -> Deployment:
        """Persist a PENDING deployment with its items in one commit."""
        deployment = Deployment(
            project_id=project_id,
            environment_id=environment_id,
            name=name,
            description=description,
            requested_by_id=requested_by_id,
            status=DeploymentStatus.PENDING.value,
            requested_at=datetime.utcnow(),
            items=[
                DeploymentItem(status=DeploymentItemStatus.PENDING.value, **item)
                for item in items
            ],
        )
        self.session.add(deployment)
        await self.session.commit()
        return await self.get_in_project(project_id, deployment.id)

    async def set_status(self, deployment: Deployment, status: DeploymentStatus, **fields) -> Deployment:
        """Set a deployment's status and any accompanying fields, then flush."""
        deployment.status = status.value
        for key, value in fields.items():
            setattr(deployment, key, value)
        await self.session.flush()
        return deployment

    async def mark_item_deployed(self, item: DeploymentItem) -> None:
        """Mark an item as activated."""
        item.status = DeploymentItemStatus.DEPLOYED.value
        item.deployed_at = datetime.utcnow()
        item.error_message = None
        await self.session.flush()

    async def mark_item_failed(self, item: DeploymentItem, error_message: str) -> None:
        """Mark an item as failed with the captured error."""
        item.status = DeploymentItemStatus.FAILED.value
        item.error_message = error_message
        await self.session.flush()
