"""Marketplace publication columns shared by prompt and asset versions."""

import enum

from sqlalchemy import Column, DateTime, Integer, String, Text


class MarketplaceStatus(str, enum.Enum):
    """Publication lifecycle of a version for cross-tenant sharing."""
    NOT_PUBLISHED = "NOT_PUBLISHED"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"


class MarketplaceMixin:
    """Marketplace status plus its audit fields."""

    marketplace_status = Column(
        String(30), default=MarketplaceStatus.NOT_PUBLISHED.value, nullable=False, index=True
    )
    marketplace_requested_at = Column(DateTime, nullable=True)
    marketplace_requester_id = Column(Integer, nullable=True)
    marketplace_approved_at = Column(DateTime, nullable=True)
    marketplace_approver_id = Column(Integer, nullable=True)
    marketplace_published_at = Column(DateTime, nullable=True)
    marketplace_rejection_reason = Column(Text, nullable=True)
