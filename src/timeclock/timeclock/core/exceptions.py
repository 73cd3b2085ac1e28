class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class IdentityRequiredError(DomainError):
    """Raised when an operation needs a name, company and date first."""

    def __init__(self, message: str = "Fill in Name, Company, and Date first."):
        super().__init__(message)


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class PersistenceError(DomainError):
    """Raised when the record store cannot be read or written."""


class ExportUnavailableError(DomainError):
    """Raised when the spreadsheet engine cannot be loaded."""

    def __init__(self, message: str = "Spreadsheet export is not available yet. Try again in a second."):
        super().__init__(message)
