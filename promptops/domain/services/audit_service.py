"""Audit logging service for mutating operations."""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from promptops.core.context import RequestContext
from promptops.persistence.models.audit_log import AuditAction
from promptops.persistence.repositories.audit_log_repository import AuditLogRepository

logger = logging.getLogger(__name__)

_MEDIUM_RISK_ACTIONS = frozenset({
    AuditAction.PUBLISH_REQUESTED,
    AuditAction.PUBLISH_APPROVED,
    AuditAction.PUBLISH_REJECTED,
    AuditAction.DEPLOYMENT_APPROVED,
    AuditAction.DEPLOYMENT_DEPLOYED,
    AuditAction.TENANT_POLICY_UPDATED,
})

_HIGH_RISK_ACTIONS = frozenset({
    AuditAction.VERSION_DELETED,
    AuditAction.DEPLOYMENT_ROLLED_BACK,
    AuditAction.ENVIRONMENT_DEACTIVATED,
})


def risk_level_for(action: AuditAction) -> str:
    """Classify an action: deletes and reversals are HIGH, approvals and publishes MEDIUM."""
    if action in _HIGH_RISK_ACTIONS:
        return "HIGH"
    if action in _MEDIUM_RISK_ACTIONS:
        return "MEDIUM"
    return "LOW"


class AuditService:
    """Service for creating audit log entries.

    Audit writes are best-effort: a failure is logged and never propagates
    into the operation that triggered it.

    Usage:
        audit = AuditService(db)
        await audit.log(ctx, AuditAction.DEPLOYMENT_CREATED, "deployment", deployment.id, {...})
    """

    def __init__(self, session: AsyncSession):
        """Initialize audit service."""
        self.repo = AuditLogRepository(session)

    async def log(
        self,
        ctx: RequestContext,
        action: AuditAction,
        resource_type: str,
        resource_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Create an audit log entry.

        Args:
            ctx: Acting user and their tenant/project scope
            action: The action being logged
            resource_type: Type of resource affected
            resource_id: ID of the specific resource
            details: Additional action-specific details
        """
        try:
            await self.repo.create(
                action=action,
                user_id=ctx.user_id,
                tenant_id=ctx.tenant_id,
                project_id=ctx.project_id,
                resource_type=resource_type,
                resource_id=resource_id,
                risk_level=risk_level_for(action),
                details=details,
            )
        except Exception as e:
            # Don't let audit logging failures break the application
            logger.error(
                f"Failed to create audit log: {e}",
                extra={"audit_action": action.value, "resource_type": resource_type, "resource_id": resource_id},
            )
