"""
Domain errors raised by use cases and repositories.

The API layer maps each one to an HTTP status (see cndes.api.errors).
"""


class RegistryError(Exception):
    """Base class for registry errors."""


class DocumentValidationError(RegistryError):
    def __init__(self, violations):
        self.violations = list(violations)
        details = "; ".join(v.detail for v in self.violations)
        super().__init__(f"Invalid document: {details}")


class InvalidInputError(RegistryError):
    """A scalar input (catalog name, password) was rejected."""


class AuthenticationError(RegistryError):
    pass


class PermissionDeniedError(RegistryError):
    pass


class NotFoundError(RegistryError):
    pass


class DuplicateEntryError(RegistryError):
    pass


class SequenceConflictError(RegistryError):
    """Could not reserve a sequence value after the allowed attempts."""
