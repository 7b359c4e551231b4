"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class FieldError(ValidationError):
    """A required field is missing or holds an unusable value."""


class RuleError(ValidationError):
    """A profit or discount rule was violated."""


class RequestError(ValidationError):
    """A bulk update request is malformed."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""
