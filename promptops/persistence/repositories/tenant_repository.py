"""Tenant and user repositories."""

from sqlalchemy.ext.asyncio import AsyncSession

from promptops.persistence.models.tenant import Tenant, User
from promptops.persistence.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Repository for Tenant entities."""

    def __init__(self, session: AsyncSession):
        """Initialize tenant repository."""
        super().__init__(Tenant, session)


class UserRepository(BaseRepository[User]):
    """Repository for User entities."""

    scope_field = "tenant_id"

    def __init__(self, session: AsyncSession):
        """Initialize user repository."""
        super().__init__(User, session)
