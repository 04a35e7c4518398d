"""Tenant-level marketplace policy."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from promptops.core.context import RequestContext
from promptops.domain.exceptions import NotFoundError
from promptops.domain.services.audit_service import AuditService
from promptops.persistence.models.audit_log import AuditAction
from promptops.persistence.repositories.tenant_repository import TenantRepository

logger = logging.getLogger(__name__)


class TenantPolicyService:
    """Reads and updates the tenant flags that gate marketplace publication."""

    def __init__(self, session: AsyncSession) -> None:
        self.tenant_repo = TenantRepository(session)
        self.audit = AuditService(session)

    async def get_marketplace_requires_approval(self, tenant_id: int) -> bool:
        """Whether publish requests in this tenant need a second user's approval.

        Raises:
            NotFoundError: If the tenant does not exist
        """
        tenant = await self.tenant_repo.get_by_id(None, tenant_id)
        if tenant is None:
            logger.warning(f"Tenant {tenant_id} not found when checking marketplace approval")
            raise NotFoundError(f'Tenant with ID "{tenant_id}" not found.')
        return bool(tenant.marketplace_requires_approval)

    async def set_marketplace_requires_approval(
        self, tenant_id: int, required: bool, ctx: RequestContext | None = None
    ) -> bool:
        """Update the approval flag and return the stored value.

        When ``ctx`` is given the change is recorded in the audit log.
        """
        tenant = await self.tenant_repo.update(
            None, tenant_id, marketplace_requires_approval=required
        )
        if tenant is None:
            raise NotFoundError(f'Tenant with ID "{tenant_id}" not found.')
        logger.info(f"Tenant {tenant_id} marketplace_requires_approval set to {required}")

        if ctx is not None:
            await self.audit.log(
                ctx,
                AuditAction.TENANT_POLICY_UPDATED,
                "tenant",
                tenant_id,
                {"marketplace_requires_approval": required},
            )
        return bool(tenant.marketplace_requires_approval)
