"""Environment activation bindings: which versions are live in an environment."""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from promptops.core.context import RequestContext
from promptops.domain.exceptions import BadRequestError, NotFoundError
from promptops.domain.services.audit_service import AuditService
from promptops.persistence.models.audit_log import AuditAction
from promptops.persistence.models.deployment import DeploymentEntityType
from promptops.persistence.models.project import Environment
from promptops.persistence.repositories.asset_repository import AssetVersionRepository
from promptops.persistence.repositories.project_repository import EnvironmentRepository
from promptops.persistence.repositories.prompt_repository import PromptVersionRepository

logger = logging.getLogger(__name__)

ActivationHandler = Callable[[int, int], Awaitable[None]]


@dataclass(frozen=True)
class ActiveVersions:
    """Snapshot of an environment's active pointers."""

    environment_id: int
    prompt_version_ids: list[int]
    asset_version_ids: list[int]


def parse_entity_type(value: str) -> DeploymentEntityType:
    """Parse an entity type string, raising BadRequestError for unknown values."""
    try:
        return DeploymentEntityType(value)
    except ValueError:
        raise BadRequestError(f"Invalid entity type: {value}")


class EnvironmentActivationService:
    """Connects and disconnects versions from an environment's active set.

    Activation never replaces what is already active; several versions of
    the same prompt or asset may be active at once.

    ``activate`` only flushes so it can run inside the deploy transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize environment activation service."""
        self.session = session
        self.environment_repo = EnvironmentRepository(session)
        self.prompt_version_repo = PromptVersionRepository(session)
        self.asset_version_repo = AssetVersionRepository(session)
        self.audit = AuditService(session)

        self._activators: dict[DeploymentEntityType, ActivationHandler] = {
            DeploymentEntityType.PROMPT_VERSION: self._activate_prompt_version,
            DeploymentEntityType.PROMPT_ASSET_VERSION: self._activate_asset_version,
            DeploymentEntityType.AI_MODEL: self._activate_ai_model,
        }
        missing = set(DeploymentEntityType) - set(self._activators)
        if missing:
            raise RuntimeError(f"No activation handler for entity types: {sorted(m.value for m in missing)}")

    async def get_environment(self, ctx: RequestContext, environment_id: int) -> Environment:
        """Resolve an environment inside the project or raise NotFoundError."""
        environment = await self.environment_repo.get_by_id(ctx.project_id, environment_id)
        if environment is None:
            raise NotFoundError(
                f"Environment with ID {environment_id} not found in project {ctx.project_id}"
            )
        return environment

    async def activate(
        self, environment_id: int, entity_type: DeploymentEntityType, entity_id: int
    ) -> None:
        """Make one entity active in the environment."""
        await self._activators[entity_type](environment_id, entity_id)

    async def _activate_prompt_version(self, environment_id: int, entity_id: int) -> None:
        if await self.prompt_version_repo.get_by_id(None, entity_id) is None:
            raise NotFoundError(f"PromptVersion with ID {entity_id} no longer exists")
        await self.environment_repo.connect_prompt_version(environment_id, entity_id)

    async def _activate_asset_version(self, environment_id: int, entity_id: int) -> None:
        if await self.asset_version_repo.get_by_id(None, entity_id) is None:
            raise NotFoundError(f"PromptAssetVersion with ID {entity_id} no longer exists")
        await self.environment_repo.connect_asset_version(environment_id, entity_id)

    async def _activate_ai_model(self, environment_id: int, entity_id: int) -> None:
        # AI models carry no per-environment activation; recorded for information only
        logger.debug(f"AI model {entity_id} recorded for environment {environment_id}")

    async def list_active(self, ctx: RequestContext, environment_id: int) -> ActiveVersions:
        """Return the prompt and asset versions currently active in an environment."""
        environment = await self.get_environment(ctx, environment_id)
        return ActiveVersions(
            environment_id=environment.id,
            prompt_version_ids=await self.environment_repo.list_active_prompt_version_ids(environment.id),
            asset_version_ids=await self.environment_repo.list_active_asset_version_ids(environment.id),
        )

    async def deactivate(
        self, ctx: RequestContext, environment_id: int, entity_type: str, entity_id: int
    ) -> bool:
        """Explicitly remove one active pointer. Returns False if it was not active.

        Raises:
            NotFoundError: If the environment is not in the project
            BadRequestError: If the entity type has no activation binding
        """
        environment = await self.get_environment(ctx, environment_id)
        kind = parse_entity_type(entity_type)

        if kind is DeploymentEntityType.PROMPT_VERSION:
            removed = await self.environment_repo.disconnect_prompt_version(environment.id, entity_id)
        elif kind is DeploymentEntityType.PROMPT_ASSET_VERSION:
            removed = await self.environment_repo.disconnect_asset_version(environment.id, entity_id)
        else:
            raise BadRequestError(f"{kind.value} entities are never active in an environment")
        await self.session.commit()

        if removed:
            logger.info(f"Deactivated {kind.value} {entity_id} in environment {environment.id}")
            await self.audit.log(
                ctx,
                AuditAction.ENVIRONMENT_DEACTIVATED,
                "environment",
                environment.id,
                {"entity_type": kind.value, "entity_id": entity_id},
            )
        return removed
