"""Explicit request scope passed into every service operation."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    """Who is acting, and in which tenant/project.

    Built by the API dependency layer after authentication and project
    ownership checks. Services trust it and never consult ambient state.
    """

    tenant_id: int
    project_id: int
    user_id: int
