"""Audit log model for tracking mutating operations."""

from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, Column, DateTime, Integer, String

from promptops.persistence.database import Base


class AuditAction(str, Enum):
    """Types of auditable actions."""

    # Versions
    VERSION_CREATED = "version_created"
    VERSION_UPDATED = "version_updated"
    VERSION_DELETED = "version_deleted"

    # Marketplace
    PUBLISH_REQUESTED = "publish_requested"
    PUBLISH_APPROVED = "publish_approved"
    PUBLISH_REJECTED = "publish_rejected"
    UNPUBLISHED = "unpublished"

    # Deployments
    DEPLOYMENT_CREATED = "deployment_created"
    DEPLOYMENT_APPROVED = "deployment_approved"
    DEPLOYMENT_DEPLOYED = "deployment_deployed"
    DEPLOYMENT_ROLLED_BACK = "deployment_rolled_back"

    # Environments
    ENVIRONMENT_DEACTIVATED = "environment_deactivated"

    # Tenant policy
    TENANT_POLICY_UPDATED = "tenant_policy_updated"


class AuditLog(Base):
    """Audit log row: who did what, when, to which resource.

    Ids are stored without foreign keys so entries outlive the rows they
    describe.
    """

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    action = Column(String(100), nullable=False, index=True)
    user_id = Column(Integer, nullable=True, index=True)
    tenant_id = Column(Integer, nullable=True, index=True)
    project_id = Column(Integer, nullable=True, index=True)
    resource_type = Column(String(100), nullable=True)
    resource_id = Column(Integer, nullable=True)
    risk_level = Column(String(20), nullable=False, default="LOW")
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def __repr__(self) -> str:
        return (
            f"<AuditLog(id={self.id}, action={self.action}, "
            f"user_id={self.user_id}, tenant_id={self.tenant_id})>"
        )
