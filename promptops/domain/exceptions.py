"""Domain errors raised by services and mapped to HTTP statuses by the API."""


class DomainError(Exception):
    """Base class for expected, caller-visible failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    """A referenced entity does not exist or is outside the caller's scope."""


class ConflictError(DomainError):
    """A uniqueness violation, or a delete blocked by a live reference."""


class BadRequestError(DomainError):
    """Structurally invalid input, or an operation attempted from the wrong state."""


class ForbiddenError(DomainError):
    """The actor may not perform this transition."""
