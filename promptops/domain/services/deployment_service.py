"""Deployment orchestration: create, approve, deploy and roll back."""

import logging
from datetime import datetime
from typing import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from promptops.core.context import RequestContext
from promptops.domain.exceptions import BadRequestError, ForbiddenError, NotFoundError
from promptops.domain.models.deployment import DeploymentDraft, DeploymentItemDraft
from promptops.domain.services.audit_service import AuditService
from promptops.domain.services.environment_service import (
    EnvironmentActivationService,
    parse_entity_type,
)
from promptops.persistence.models.audit_log import AuditAction
from promptops.persistence.models.deployment import (
    Deployment,
    DeploymentEntityType,
    DeploymentStatus,
    RiskLevel,
)
from promptops.persistence.repositories.ai_model_repository import AIModelRepository
from promptops.persistence.repositories.asset_repository import AssetVersionRepository
from promptops.persistence.repositories.deployment_repository import DeploymentRepository
from promptops.persistence.repositories.project_repository import EnvironmentRepository, ProjectRepository
from promptops.persistence.repositories.prompt_repository import PromptVersionRepository

logger = logging.getLogger(__name__)

ItemValidator = Callable[[RequestContext, DeploymentItemDraft], Awaitable[None]]

# States from which a deployment may be marked rolled back
_ROLLBACK_SOURCE_STATES = frozenset({
    DeploymentStatus.APPROVED.value,
    DeploymentStatus.DEPLOYING.value,
    DeploymentStatus.DEPLOYED.value,
})


class DeploymentService:
    """Moves deployments through PENDING -> APPROVED -> DEPLOYING -> DEPLOYED (-> ROLLED_BACK)."""

    def __init__(
        self,
        session: AsyncSession,
        activation: EnvironmentActivationService | None = None,
    ) -> None:
        """Initialize deployment service."""
        self.session = session
        self.deployment_repo = DeploymentRepository(session)
        self.project_repo = ProjectRepository(session)
        self.environment_repo = EnvironmentRepository(session)
        self.prompt_version_repo = PromptVersionRepository(session)
        self.asset_version_repo = AssetVersionRepository(session)
        self.ai_model_repo = AIModelRepository(session)
        self.activation = activation or EnvironmentActivationService(session)
        self.audit = AuditService(session)

        self._validators: dict[DeploymentEntityType, ItemValidator] = {
            DeploymentEntityType.PROMPT_VERSION: self._validate_prompt_version,
            DeploymentEntityType.PROMPT_ASSET_VERSION: self._validate_asset_version,
            DeploymentEntityType.AI_MODEL: self._validate_ai_model,
        }
        missing = set(DeploymentEntityType) - set(self._validators)
        if missing:
            raise RuntimeError(f"No item validator for entity types: {sorted(m.value for m in missing)}")

    async def _get_deployment(self, ctx: RequestContext, deployment_id: int) -> Deployment:
        deployment = await self.deployment_repo.get_in_project(ctx.project_id, deployment_id)
        if deployment is None:
            raise NotFoundError(
                f"Deployment with ID {deployment_id} not found in project {ctx.project_id}"
            )
        return deployment

    async def create_deployment(self, ctx: RequestContext, draft: DeploymentDraft) -> Deployment:
        """Create a PENDING deployment after validating project, environment and items.

        Raises:
            NotFoundError: If the project or environment is not found
            BadRequestError: If any item is invalid
        """
        project = await self.project_repo.get_by_id(ctx.tenant_id, ctx.project_id)
        if project is None:
            raise NotFoundError(f"Project with ID {ctx.project_id} not found")

        environment = await self.environment_repo.get_by_id(ctx.project_id, draft.environment_id)
        if environment is None:
            raise NotFoundError(
                f"Environment with ID {draft.environment_id} not found in project {ctx.project_id}"
            )

        for item in draft.items:
            await self._validators[parse_entity_type(item.entity_type)](ctx, item)

        deployment = await self.deployment_repo.create_with_items(
            project_id=ctx.project_id,
            environment_id=environment.id,
            name=draft.name,
            description=draft.description,
            requested_by_id=ctx.user_id,
            items=[
                {
                    "entity_type": item.entity_type,
                    "entity_id": item.entity_id,
                    "version_tag": item.version_tag,
                    "change_message": item.change_message,
                    "risk_level": (item.risk_level or RiskLevel.LOW).value,
                }
                for item in draft.items
            ],
        )

        logger.info(
            f"Deployment {deployment.id} created for environment {deployment.environment_id}",
            extra={"deployment_id": deployment.id, "items_count": len(deployment.items)},
        )
        await self.audit.log(
            ctx,
            AuditAction.DEPLOYMENT_CREATED,
            "deployment",
            deployment.id,
            {
                "environment_id": deployment.environment_id,
                "requested_by": ctx.user_id,
                "items_count": len(deployment.items),
            },
        )
        return deployment

    async def _validate_prompt_version(self, ctx: RequestContext, item: DeploymentItemDraft) -> None:
        version = await self.prompt_version_repo.get_in_project(ctx.project_id, item.entity_id)
        if version is None:
            raise BadRequestError(f"PromptVersion with ID {item.entity_id} not found in project {ctx.project_id}")
        if version.version_tag != item.version_tag:
            raise BadRequestError(
                f"Version tag mismatch for PromptVersion {item.entity_id}: "
                f"expected {version.version_tag!r}, got {item.version_tag!r}"
            )

    async def _validate_asset_version(self, ctx: RequestContext, item: DeploymentItemDraft) -> None:
        version = await self.asset_version_repo.get_in_project(ctx.project_id, item.entity_id)
        if version is None:
            raise BadRequestError(f"PromptAssetVersion with ID {item.entity_id} not found in project {ctx.project_id}")
        if version.version_tag != item.version_tag:
            raise BadRequestError(
                f"Version tag mismatch for PromptAssetVersion {item.entity_id}: "
                f"expected {version.version_tag!r}, got {item.version_tag!r}"
            )

    async def _validate_ai_model(self, ctx: RequestContext, item: DeploymentItemDraft) -> None:
        if await self.ai_model_repo.get_by_id(ctx.project_id, item.entity_id) is None:
            raise BadRequestError(f"AIModel with ID {item.entity_id} not found in project {ctx.project_id}")

    async def find_all_deployments(
        self,
        ctx: RequestContext,
        environment_id: int | None = None,
        status: DeploymentStatus | None = None,
    ) -> list[Deployment]:
        """List the project's deployments, newest request first."""
        return await self.deployment_repo.list_for_project(
            ctx.project_id,
            environment_id=environment_id,
            status=status.value if status else None,
        )

    async def find_deployment_by_id(self, ctx: RequestContext, deployment_id: int) -> Deployment:
        """Get one deployment in the project or raise NotFoundError."""
        return await self._get_deployment(ctx, deployment_id)

    async def approve_deployment(self, ctx: RequestContext, deployment_id: int) -> Deployment:
        """Approve a PENDING deployment on behalf of a user other than its requester.

        Raises:
            NotFoundError: If the deployment is not in the project
            ForbiddenError: If the approver requested the deployment
            BadRequestError: If the deployment is not PENDING
        """
        deployment = await self._get_deployment(ctx, deployment_id)

        if deployment.requested_by_id == ctx.user_id:
            raise ForbiddenError("Cannot approve your own deployment")
        if deployment.status != DeploymentStatus.PENDING.value:
            raise BadRequestError(
                f"Deployment is not in PENDING status. Current status: {deployment.status}"
            )

        await self.deployment_repo.set_status(
            deployment,
            DeploymentStatus.APPROVED,
            approved_by_id=ctx.user_id,
            approved_at=datetime.utcnow(),
        )
        await self.session.commit()

        logger.info(f"Deployment {deployment.id} approved by user {ctx.user_id}")
        await self.audit.log(
            ctx,
            AuditAction.DEPLOYMENT_APPROVED,
            "deployment",
            deployment.id,
            {"approved_by": ctx.user_id, "requested_by": deployment.requested_by_id},
        )
        return deployment

    async def deploy_deployment(self, ctx: RequestContext, deployment_id: int) -> Deployment:
        """Activate every item of an APPROVED deployment in one transaction.

        Items are activated strictly in creation order. If any item fails the
        whole attempt is rolled back, including the DEPLOYING status and the
        item statuses, and the error is re-raised.

        Raises:
            NotFoundError: If the deployment is not in the project
            BadRequestError: If the deployment is not APPROVED
        """
        deployment = await self._get_deployment(ctx, deployment_id)
        if deployment.status != DeploymentStatus.APPROVED.value:
            raise BadRequestError(
                f"Deployment must be APPROVED to deploy. Current status: {deployment.status}"
            )

        environment_id = deployment.environment_id
        items = list(deployment.items)
        try:
            await self.deployment_repo.set_status(deployment, DeploymentStatus.DEPLOYING)

            for item in items:
                try:
                    await self.activation.activate(
                        environment_id, DeploymentEntityType(item.entity_type), item.entity_id
                    )
                    await self.deployment_repo.mark_item_deployed(item)
                except Exception as e:
                    logger.error(
                        f"Deployment {deployment_id} item {item.id} ({item.entity_type} {item.entity_id}) failed: {e}"
                    )
                    await self.deployment_repo.mark_item_failed(item, str(e))
                    raise

            await self.deployment_repo.set_status(
                deployment, DeploymentStatus.DEPLOYED, deployed_at=datetime.utcnow()
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            logger.warning(f"Deployment {deployment_id} rolled back; no item activation was kept")
            raise

        logger.info(f"Deployment {deployment.id} deployed by user {ctx.user_id}")
        await self.audit.log(
            ctx,
            AuditAction.DEPLOYMENT_DEPLOYED,
            "deployment",
            deployment.id,
            {"deployed_by": ctx.user_id, "items_count": len(items)},
        )
        return deployment

    async def rollback_deployment(
        self, ctx: RequestContext, deployment_id: int, rollback_to_deployment_id: int
    ) -> Deployment:
        """Mark a deployment rolled back to an earlier one in the same environment.

        Only lineage and status are recorded; active environment bindings are
        left untouched (see EnvironmentActivationService.deactivate).

        Raises:
            NotFoundError: If either deployment is missing, or the target is in another environment
            BadRequestError: If the deployment was never approved, is already rolled back,
                or targets itself
        """
        deployment = await self._get_deployment(ctx, deployment_id)

        target = await self.deployment_repo.get_in_project(
            ctx.project_id, rollback_to_deployment_id, environment_id=deployment.environment_id
        )
        if target is None:
            raise NotFoundError(f"Rollback deployment with ID {rollback_to_deployment_id} not found")
        if target.id == deployment.id:
            raise BadRequestError("A deployment cannot be rolled back to itself")
        if deployment.status not in _ROLLBACK_SOURCE_STATES:
            raise BadRequestError(
                f"Deployment cannot be rolled back from status {deployment.status}"
            )

        await self.deployment_repo.set_status(
            deployment,
            DeploymentStatus.ROLLED_BACK,
            rolled_back_at=datetime.utcnow(),
            rollback_to_deployment_id=target.id,
        )
        await self.session.commit()

        logger.info(f"Deployment {deployment.id} rolled back to {target.id} by user {ctx.user_id}")
        await self.audit.log(
            ctx,
            AuditAction.DEPLOYMENT_ROLLED_BACK,
            "deployment",
            deployment.id,
            {"rolled_back_by": ctx.user_id, "rollback_to_deployment_id": target.id},
        )
        return deployment
