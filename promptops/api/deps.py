"""FastAPI dependencies for auth and request scoping."""

from typing import Annotated

from fastapi import Depends, HTTPException, Path, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.core.auth import decode_access_token
from promptops.core.context import RequestContext
from promptops.core.log_context import bind_actor
from promptops.persistence.database import get_db
from promptops.persistence.models.tenant import User
from promptops.persistence.repositories.project_repository import ProjectRepository
from promptops.persistence.repositories.tenant_repository import UserRepository

security = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get current authenticated user from JWT token.

    Raises:
        HTTPException: If authentication fails
    """
    payload = decode_access_token(credentials.credentials)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    user_repo = UserRepository(db)
    user = await user_repo.get_by_id(None, user_id)  # No tenant scoping for user lookup

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    bind_actor(user.tenant_id, user.id)
    return user


async def get_project_context(
    project_id: Annotated[int, Path()],
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RequestContext:
    """Build the tenant/project/user scope for a project route.

    A project outside the caller's tenant is reported as missing.
    """
    if current_user.tenant_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is not assigned to a tenant",
        )
    project_repo = ProjectRepository(db)
    project = await project_repo.get_by_id(current_user.tenant_id, project_id)
    if project is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Project with ID {project_id} not found",
        )
    return RequestContext(
        tenant_id=current_user.tenant_id,
        project_id=project.id,
        user_id=current_user.id,
    )


DbSession = Annotated[AsyncSession, Depends(get_db)]
Context = Annotated[RequestContext, Depends(get_project_context)]
