"""Pytest configuration and fixtures."""

from dataclasses import dataclass

import httpx
import pytest
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from promptops.core.context import RequestContext
from promptops.persistence.database import Base, get_db
from promptops.persistence.models import *  # noqa: F401, F403
from promptops.persistence.models import (
    AIModel,
    Environment,
    Project,
    Prompt,
    PromptAsset,
    Tenant,
    User,
)
from promptops.settings import settings


@dataclass(frozen=True)
class Seed:
    """Ids of a ready-made tenant with one project.

    Plain ints only: ORM rows are expired by any rollback a test provokes.
    """

    tenant_id: int
    project_id: int
    requester_id: int
    approver_id: int
    environment_id: int
    other_environment_id: int
    prompt_id: int
    asset_key: str
    asset_id: int
    ai_model_id: int

    def ctx(self, user_id: int | None = None) -> RequestContext:
        return RequestContext(
            tenant_id=self.tenant_id,
            project_id=self.project_id,
            user_id=user_id if user_id is not None else self.requester_id,
        )

    @property
    def requester(self) -> RequestContext:
        return self.ctx(self.requester_id)

    @property
    def approver(self) -> RequestContext:
        return self.ctx(self.approver_id)


@pytest.fixture
async def db_session():
    """Create a test database session."""
    # Use in-memory SQLite for testing
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


async def seed_tenant(
    session: AsyncSession,
    name: str = "Acme",
    marketplace_requires_approval: bool = True,
) -> Seed:
    """Insert a tenant with two users, a project, two environments, a prompt, an asset and an AI model."""
    tenant = Tenant(name=name, marketplace_requires_approval=marketplace_requires_approval)
    session.add(tenant)
    await session.flush()

    requester = User(tenant_id=tenant.id, email=f"requester@{name.lower()}.test", name="Requester")
    approver = User(tenant_id=tenant.id, email=f"approver@{name.lower()}.test", name="Approver", role="tenant_admin")
    session.add_all([requester, approver])
    await session.flush()

    project = Project(tenant_id=tenant.id, name=f"{name} Support Bot", owner_user_id=requester.id)
    session.add(project)
    await session.flush()

    production = Environment(project_id=project.id, name="production")
    staging = Environment(project_id=project.id, name="staging")
    prompt = Prompt(project_id=project.id, name="greeting", owner_user_id=requester.id)
    model = AIModel(project_id=project.id, name="gpt-4o", provider="openai", api_identifier="gpt-4o")
    session.add_all([production, staging, prompt, model])
    await session.flush()

    asset = PromptAsset(project_id=project.id, prompt_id=prompt.id, key="welcome_message", name="Welcome")
    session.add(asset)
    await session.commit()

    return Seed(
        tenant_id=tenant.id,
        project_id=project.id,
        requester_id=requester.id,
        approver_id=approver.id,
        environment_id=production.id,
        other_environment_id=staging.id,
        prompt_id=prompt.id,
        asset_key=asset.key,
        asset_id=asset.id,
        ai_model_id=model.id,
    )


@pytest.fixture
async def seed(db_session) -> Seed:
    return await seed_tenant(db_session)


@pytest.fixture
def make_tenant(db_session):
    """Factory for additional tenants, e.g. to check cross-tenant isolation."""

    async def _make(name: str, marketplace_requires_approval: bool = True) -> Seed:
        return await seed_tenant(db_session, name=name, marketplace_requires_approval=marketplace_requires_approval)

    return _make


def make_token(user_id: int) -> str:
    """Sign an access token the API will accept."""
    return jwt.encode({"sub": str(user_id)}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def bearer_headers(user_id: int) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def auth_headers():
    """Build Authorization headers for a user id."""
    return bearer_headers


@pytest.fixture
async def client(db_session):
    """Create a test API client bound to the test session."""
    from promptops.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()
