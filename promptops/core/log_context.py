"""Context variables feeding the structured log filter.

These values are for log enrichment only. Service operations receive their
tenant/project/user scope explicitly through ``RequestContext``.
"""

from contextvars import ContextVar
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
tenant_id_var: ContextVar[Optional[int]] = ContextVar("tenant_id", default=None)
user_id_var: ContextVar[Optional[int]] = ContextVar("user_id", default=None)


def set_request_id(request_id: str | None) -> None:
    """Set the current request id."""
    request_id_var.set(request_id)


def bind_actor(tenant_id: int | None, user_id: int | None) -> None:
    """Record the authenticated tenant and user for log records."""
    tenant_id_var.set(tenant_id)
    user_id_var.set(user_id)


def get_log_context() -> tuple[str | None, int | None, int | None]:
    """Return (request_id, tenant_id, user_id) for the current task."""
    return request_id_var.get(), tenant_id_var.get(), user_id_var.get()


def clear_log_context() -> None:
    """Clear all log context variables."""
    request_id_var.set(None)
    tenant_id_var.set(None)
    user_id_var.set(None)
