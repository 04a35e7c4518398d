"""Audit log repository."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.persistence.models.audit_log import AuditAction, AuditLog


class AuditLogRepository:
    """Repository for audit log operations.

    Note: This repository intentionally does NOT extend BaseRepository
    because audit queries cut across projects for tenant-level review.
    """

    def __init__(self, session: AsyncSession):
        """Initialize audit log repository."""
        self.session = session

    async def create(
        self,
        action: str | AuditAction,
        user_id: int | None = None,
        tenant_id: int | None = None,
        project_id: int | None = None,
        resource_type: str | None = None,
        resource_id: int | None = None,
        risk_level: str = "LOW",
        details: dict[str, Any] | None = None,
    ) -> AuditLog:
        """Create a new audit log entry.

        Args:
            action: The action being logged (AuditAction enum or string)
            user_id: ID of user performing the action
            tenant_id: ID of tenant affected
            project_id: ID of project affected
            resource_type: Type of resource affected (e.g., "deployment")
            resource_id: ID of the specific resource
            risk_level: LOW / MEDIUM / HIGH / CRITICAL
            details: Additional action-specific details as JSON

        Returns:
            The created AuditLog entry
        """
        action_str = action.value if isinstance(action, AuditAction) else action

        audit_log = AuditLog(
            action=action_str,
            user_id=user_id,
            tenant_id=tenant_id,
            project_id=project_id,
            resource_type=resource_type,
            resource_id=resource_id,
            risk_level=risk_level,
            details=details,
        )

        self.session.add(audit_log)
        await self.session.commit()
        return audit_log

    async def list_by_project(
        self,
        project_id: int,
        limit: int = 100,
        action: str | None = None,
    ) -> list[AuditLog]:
        """List audit logs for a specific project, newest first."""
        stmt = select(AuditLog).where(AuditLog.project_id == project_id)

        if action:
            stmt = stmt.where(AuditLog.action == action)

        stmt = stmt.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
