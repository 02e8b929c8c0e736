"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the application layer can catch them uniformly and turn them into
user-facing result messages.  Storage failures raise InfrastructureError,
which sits outside that hierarchy.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Malformed input or an invalid value object."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class BusinessRuleViolation(DomainException):
    """A well-formed request that the current state does not allow."""


class ConcurrencyConflictError(DomainException):
    """A conditional write lost a race against another writer."""


class InfrastructureError(Exception):
    """A repository or storage operation failed."""
