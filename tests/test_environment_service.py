"""Tests for environment activation bindings."""

import pytest

from promptops.domain.exceptions import BadRequestError, NotFoundError
from promptops.domain.models.version import AssetVersionDraft, PromptVersionDraft
from promptops.domain.services.asset_version_service import AssetVersionService
from promptops.domain.services.environment_service import EnvironmentActivationService
from promptops.domain.services.prompt_version_service import PromptVersionService
from promptops.persistence.models.audit_log import AuditAction
from promptops.persistence.models.deployment import DeploymentEntityType
from promptops.persistence.repositories.audit_log_repository import AuditLogRepository


@pytest.fixture
async def prompt_version_id(db_session, seed) -> int:
    version = await PromptVersionService(db_session).create(
        seed.requester, seed.prompt_id, PromptVersionDraft(version_tag="v1", prompt_text="Be brief.")
    )
    return version.id


async def test_activate_is_idempotent(db_session, seed, prompt_version_id):
    service = EnvironmentActivationService(db_session)

    await service.activate(seed.environment_id, DeploymentEntityType.PROMPT_VERSION, prompt_version_id)
    await service.activate(seed.environment_id, DeploymentEntityType.PROMPT_VERSION, prompt_version_id)
    await db_session.commit()

    active = await service.list_active(seed.requester, seed.environment_id)
    assert active.prompt_version_ids == [prompt_version_id]
    assert active.asset_version_ids == []


async def test_activation_is_per_environment(db_session, seed, prompt_version_id):
    service = EnvironmentActivationService(db_session)

    await service.activate(seed.environment_id, DeploymentEntityType.PROMPT_VERSION, prompt_version_id)
    await db_session.commit()

    staging = await service.list_active(seed.requester, seed.other_environment_id)
    assert staging.prompt_version_ids == []


async def test_activate_missing_version_is_not_found(db_session, seed):
    service = EnvironmentActivationService(db_session)

    with pytest.raises(NotFoundError):
        await service.activate(seed.environment_id, DeploymentEntityType.PROMPT_ASSET_VERSION, 9999)


async def test_activate_ai_model_has_no_binding(db_session, seed):
    service = EnvironmentActivationService(db_session)

    await service.activate(seed.environment_id, DeploymentEntityType.AI_MODEL, seed.ai_model_id)

    active = await service.list_active(seed.requester, seed.environment_id)
    assert active.prompt_version_ids == []
    assert active.asset_version_ids == []


async def test_deactivate_removes_binding_once(db_session, seed):
    version = await AssetVersionService(db_session).create(
        seed.requester, seed.prompt_id, seed.asset_key, AssetVersionDraft(version_tag="1.0.0", value="Hi")
    )
    version_id = version.id
    service = EnvironmentActivationService(db_session)
    await service.activate(seed.environment_id, DeploymentEntityType.PROMPT_ASSET_VERSION, version_id)
    await db_session.commit()

    removed = await service.deactivate(seed.approver, seed.environment_id, "PROMPT_ASSET_VERSION", version_id)
    removed_again = await service.deactivate(seed.approver, seed.environment_id, "PROMPT_ASSET_VERSION", version_id)

    assert removed is True
    assert removed_again is False
    active = await service.list_active(seed.requester, seed.environment_id)
    assert active.asset_version_ids == []

    logs = await AuditLogRepository(db_session).list_by_project(
        seed.project_id, action=AuditAction.ENVIRONMENT_DEACTIVATED.value
    )
    assert len(logs) == 1
    assert logs[0].risk_level == "HIGH"


async def test_deactivate_rejects_unknown_and_unbound_types(db_session, seed):
    service = EnvironmentActivationService(db_session)

    with pytest.raises(BadRequestError):
        await service.deactivate(seed.requester, seed.environment_id, "WORKFLOW", 1)
    with pytest.raises(BadRequestError):
        await service.deactivate(seed.requester, seed.environment_id, "AI_MODEL", seed.ai_model_id)


async def test_environment_of_other_project_is_not_found(db_session, seed, make_tenant):
    other = await make_tenant("Globex")
    service = EnvironmentActivationService(db_session)

    with pytest.raises(NotFoundError):
        await service.list_active(seed.requester, other.environment_id)
