"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainError):
    """Input is missing or violates a business validation rule."""


class ConflictError(DomainError):
    """Entity with the same unique key already exists."""


class AuthenticationError(DomainError):
    """Credentials were rejected or the account cannot sign in."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class InternalError(DomainError):
    """Unexpected failure that must not leak details to the caller."""
