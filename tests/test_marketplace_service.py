"""Tests for the marketplace publication state machine."""

import pytest

from promptops.domain.exceptions import ForbiddenError
from promptops.domain.models.version import AssetVersionDraft, PromptVersionDraft
from promptops.domain.services.asset_version_service import AssetVersionService
from promptops.domain.services.prompt_version_service import PromptVersionService
from promptops.domain.services.tenant_policy_service import TenantPolicyService
from promptops.persistence.models.marketplace import MarketplaceStatus

TAG = "1.0.0"


@pytest.fixture
async def asset_version(db_session, seed):
    service = AssetVersionService(db_session)
    await service.create(
        seed.requester, seed.prompt_id, seed.asset_key, AssetVersionDraft(version_tag=TAG, value="Hello")
    )
    return service


async def test_request_with_approval_required_goes_pending(db_session, seed, asset_version):
    version = await asset_version.request_publish(seed.requester, seed.prompt_id, seed.asset_key, TAG)

    assert version.marketplace_status == MarketplaceStatus.PENDING_APPROVAL.value
    assert version.marketplace_requester_id == seed.requester_id
    assert version.marketplace_requested_at is not None
    assert version.marketplace_published_at is None


async def test_request_without_approval_publishes_immediately(db_session, seed, asset_version):
    await TenantPolicyService(db_session).set_marketplace_requires_approval(seed.tenant_id, False)

    version = await asset_version.request_publish(seed.requester, seed.prompt_id, seed.asset_key, TAG)

    assert version.marketplace_status == MarketplaceStatus.PUBLISHED.value
    assert version.marketplace_published_at == version.marketplace_requested_at
    assert version.marketplace_approver_id is None


async def test_approve_pending_request(db_session, seed, asset_version):
    await asset_version.request_publish(seed.requester, seed.prompt_id, seed.asset_key, TAG)

    version = await asset_version.approve_publish(seed.approver, seed.prompt_id, seed.asset_key, TAG)

    assert version.marketplace_status == MarketplaceStatus.PUBLISHED.value
    assert version.marketplace_approver_id == seed.approver_id
    assert version.marketplace_approved_at is not None
    assert version.marketplace_published_at is not None


async def test_reject_pending_request(db_session, seed, asset_version):
    await asset_version.request_publish(seed.requester, seed.prompt_id, seed.asset_key, TAG)

    version = await asset_version.reject_publish(
        seed.approver, seed.prompt_id, seed.asset_key, TAG, "Contains a customer name"
    )

    assert version.marketplace_status == MarketplaceStatus.REJECTED.value
    assert version.marketplace_rejection_reason == "Contains a customer name"
    assert version.marketplace_approver_id == seed.approver_id
    assert version.marketplace_published_at is None


@pytest.mark.parametrize("transition", ["approve_publish", "reject_publish"])
async def test_decisions_require_pending_status(db_session, seed, asset_version, transition):
    args = (seed.approver, seed.prompt_id, seed.asset_key, TAG)
    if transition == "reject_publish":
        args += ("no",)

    with pytest.raises(ForbiddenError):
        await getattr(asset_version, transition)(*args)

    version = await asset_version.find_by_tag(seed.requester, seed.prompt_id, seed.asset_key, TAG)
    assert version.marketplace_status == MarketplaceStatus.NOT_PUBLISHED.value


async def test_cannot_approve_after_rejection(db_session, seed, asset_version):
    await asset_version.request_publish(seed.requester, seed.prompt_id, seed.asset_key, TAG)
    await asset_version.reject_publish(seed.approver, seed.prompt_id, seed.asset_key, TAG, "no")

    with pytest.raises(ForbiddenError):
        await asset_version.approve_publish(seed.approver, seed.prompt_id, seed.asset_key, TAG)


async def test_rerequest_after_rejection_clears_decision(db_session, seed, asset_version):
    await asset_version.request_publish(seed.requester, seed.prompt_id, seed.asset_key, TAG)
    await asset_version.reject_publish(seed.approver, seed.prompt_id, seed.asset_key, TAG, "no")

    version = await asset_version.request_publish(seed.requester, seed.prompt_id, seed.asset_key, TAG)

    assert version.marketplace_status == MarketplaceStatus.PENDING_APPROVAL.value
    assert version.marketplace_rejection_reason is None
    assert version.marketplace_approver_id is None


async def test_unpublish_clears_every_field(db_session, seed, asset_version):
    await asset_version.request_publish(seed.requester, seed.prompt_id, seed.asset_key, TAG)
    await asset_version.approve_publish(seed.approver, seed.prompt_id, seed.asset_key, TAG)

    version = await asset_version.unpublish(seed.approver, seed.prompt_id, seed.asset_key, TAG)

    assert version.marketplace_status == MarketplaceStatus.NOT_PUBLISHED.value
    assert version.marketplace_requested_at is None
    assert version.marketplace_requester_id is None
    assert version.marketplace_approved_at is None
    assert version.marketplace_approver_id is None
    assert version.marketplace_published_at is None
    assert version.marketplace_rejection_reason is None


async def test_unpublish_is_a_noop_when_not_published(db_session, seed, asset_version):
    before = await asset_version.find_by_tag(seed.requester, seed.prompt_id, seed.asset_key, TAG)
    updated_at = before.updated_at

    version = await asset_version.unpublish(seed.requester, seed.prompt_id, seed.asset_key, TAG)

    assert version.marketplace_status == MarketplaceStatus.NOT_PUBLISHED.value
    assert version.updated_at == updated_at


async def test_prompt_versions_follow_the_same_machine(db_session, seed):
    await TenantPolicyService(db_session).set_marketplace_requires_approval(seed.tenant_id, False)
    service = PromptVersionService(db_session)
    await service.create(seed.requester, seed.prompt_id, PromptVersionDraft(version_tag="v1", prompt_text="Hi"))

    version = await service.request_publish(seed.requester, seed.prompt_id, "latest")
    assert version.marketplace_status == MarketplaceStatus.PUBLISHED.value

    version = await service.unpublish(seed.requester, seed.prompt_id, "v1")
    assert version.marketplace_status == MarketplaceStatus.NOT_PUBLISHED.value
