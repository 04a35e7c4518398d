"""Marketplace publication state machine for prompt and asset versions.

    NOT_PUBLISHED --request--> PENDING_APPROVAL --approve--> PUBLISHED
                  +--request (tenant needs no approval)----> PUBLISHED
    PENDING_APPROVAL --reject--> REJECTED
    PUBLISHED | PENDING_APPROVAL | REJECTED --unpublish--> NOT_PUBLISHED

Requests carry no status precondition: a repeated request resets the
audit fields and the last write wins.
"""

import logging
from datetime import datetime
from typing import Union

from sqlalchemy.ext.asyncio import AsyncSession

from promptops.core.context import RequestContext
from promptops.domain.exceptions import ForbiddenError, NotFoundError
from promptops.domain.services.audit_service import AuditService
from promptops.domain.services.tenant_policy_service import TenantPolicyService
from promptops.persistence.models.asset import PromptAssetVersion
from promptops.persistence.models.audit_log import AuditAction
from promptops.persistence.models.marketplace import MarketplaceStatus
from promptops.persistence.models.prompt import PromptVersion
from promptops.persistence.repositories.project_repository import ProjectRepository

logger = logging.getLogger(__name__)

PublishableVersion = Union[PromptVersion, PromptAssetVersion]


def _resource_type(version: PublishableVersion) -> str:
    return "prompt_asset_version" if isinstance(version, PromptAssetVersion) else "prompt_version"


class MarketplaceService:
    """Drives a version's marketplace status through its allowed transitions."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize marketplace service."""
        self.session = session
        self.project_repo = ProjectRepository(session)
        self.tenant_policy = TenantPolicyService(session)
        self.audit = AuditService(session)

    async def resolve_tenant_id(self, version: PublishableVersion) -> int:
        """Find the tenant that owns a version through its prompt and project."""
        if isinstance(version, PromptAssetVersion):
            tenant_id = await self.project_repo.get_tenant_id_for_asset(version.asset_id)
        else:
            tenant_id = await self.project_repo.get_tenant_id_for_prompt(version.prompt_id)
        if tenant_id is None:
            raise NotFoundError(
                f"Project not found for version {version.version_tag!r} (ID: {version.id}) "
                "to determine tenant configuration."
            )
        return tenant_id

    async def request_publish(
        self, ctx: RequestContext, version: PublishableVersion
    ) -> PublishableVersion:
        """Ask to publish a version; publishes at once if the tenant needs no approval."""
        tenant_id = await self.resolve_tenant_id(version)
        requires_approval = await self.tenant_policy.get_marketplace_requires_approval(tenant_id)
        now = datetime.utcnow()

        version.marketplace_requested_at = now
        version.marketplace_requester_id = ctx.user_id
        version.marketplace_approved_at = None
        version.marketplace_approver_id = None
        version.marketplace_rejection_reason = None
        if requires_approval:
            version.marketplace_status = MarketplaceStatus.PENDING_APPROVAL.value
            version.marketplace_published_at = None
        else:
            version.marketplace_status = MarketplaceStatus.PUBLISHED.value
            version.marketplace_published_at = now
        await self.session.commit()

        logger.info(
            f"Version {version.id} marketplace status set to {version.marketplace_status}",
            extra={"tenant_id": tenant_id, "requires_approval": requires_approval},
        )
        await self.audit.log(
            ctx,
            AuditAction.PUBLISH_REQUESTED,
            _resource_type(version),
            version.id,
            {
                "version_tag": version.version_tag,
                "requires_approval": requires_approval,
                "status": version.marketplace_status,
            },
        )
        return version

    async def approve_publish(
        self, ctx: RequestContext, version: PublishableVersion
    ) -> PublishableVersion:
        """Approve a pending publish request.

        Raises:
            ForbiddenError: If the version is not pending approval
        """
        if version.marketplace_status != MarketplaceStatus.PENDING_APPROVAL.value:
            raise ForbiddenError(
                f"Cannot approve version {version.version_tag!r}: it is not pending approval "
                f"(current status: {version.marketplace_status})."
            )

        now = datetime.utcnow()
        version.marketplace_status = MarketplaceStatus.PUBLISHED.value
        version.marketplace_approved_at = now
        version.marketplace_approver_id = ctx.user_id
        version.marketplace_published_at = now
        version.marketplace_rejection_reason = None
        await self.session.commit()

        logger.info(f"Version {version.id} publish approved by user {ctx.user_id}")
        await self.audit.log(
            ctx,
            AuditAction.PUBLISH_APPROVED,
            _resource_type(version),
            version.id,
            {"version_tag": version.version_tag, "requester_id": version.marketplace_requester_id},
        )
        return version

    async def reject_publish(
        self, ctx: RequestContext, version: PublishableVersion, reason: str
    ) -> PublishableVersion:
        """Reject a pending publish request.

        Raises:
            ForbiddenError: If the version is not pending approval
        """
        if version.marketplace_status != MarketplaceStatus.PENDING_APPROVAL.value:
            raise ForbiddenError(
                f"Cannot reject version {version.version_tag!r}: it is not pending approval "
                f"(current status: {version.marketplace_status})."
            )

        version.marketplace_status = MarketplaceStatus.REJECTED.value
        version.marketplace_rejection_reason = reason
        version.marketplace_approver_id = ctx.user_id
        version.marketplace_approved_at = None
        version.marketplace_published_at = None
        await self.session.commit()

        logger.info(f"Version {version.id} publish rejected by user {ctx.user_id}")
        await self.audit.log(
            ctx,
            AuditAction.PUBLISH_REJECTED,
            _resource_type(version),
            version.id,
            {"version_tag": version.version_tag, "rejection_reason": reason},
        )
        return version

    async def unpublish(
        self, ctx: RequestContext, version: PublishableVersion
    ) -> PublishableVersion:
        """Withdraw a version from the marketplace, clearing every marketplace field.

        A version that is already NOT_PUBLISHED is returned unchanged.
        """
        if version.marketplace_status == MarketplaceStatus.NOT_PUBLISHED.value:
            logger.info(f"Version {version.id} is already NOT_PUBLISHED. No action taken.")
            return version

        previous_status = version.marketplace_status
        version.marketplace_status = MarketplaceStatus.NOT_PUBLISHED.value
        version.marketplace_requested_at = None
        version.marketplace_requester_id = None
        version.marketplace_approved_at = None
        version.marketplace_approver_id = None
        version.marketplace_published_at = None
        version.marketplace_rejection_reason = None
        await self.session.commit()

        logger.info(f"Version {version.id} unpublished (was {previous_status})")
        await self.audit.log(
            ctx,
            AuditAction.UNPUBLISHED,
            _resource_type(version),
            version.id,
            {"version_tag": version.version_tag, "previous_status": previous_status},
        )
        return version
