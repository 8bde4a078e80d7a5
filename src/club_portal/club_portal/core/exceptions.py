class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a member lacks permission for an action."""


class StorageError(DomainError):
    """Raised when the database cannot complete a lookup or write.

    Recoverable: callers keep their in-memory state so the operator can retry.
    """


class IngestionError(ValidationError):
    """Base class for attendance sheet errors. Fatal to the upload."""


class MissingColumnError(IngestionError):
    """The sheet has no identifier (QID) column."""


class EmptyFileError(IngestionError):
    """The sheet has a header but no data rows."""


class ParseError(IngestionError):
    """The sheet is not well-formed CSV."""
