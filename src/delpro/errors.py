from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""


class ValidationError(UserError):
    """Raised when user input fails validation."""


class InvalidCategoryError(ValidationError):
    """Raised when a FastTrack category is not one of the fixed labels."""

    def __init__(self, value: str, valid: list[str]) -> None:
        super().__init__(f"Invalid FastTrack type '{value}'. Must be one of: {', '.join(valid)}")
        self.value = value


class DuplicateValueError(ValidationError):
    """Raised when a unique identifier is already taken by another record."""

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"{field} already exists")
        self.field = field


class ExhaustionError(Exception):
    """Raised when identifier allocation runs out of attempts.

    Not a UserError: the caller did nothing wrong, the server could not
    find a free value within its retry budget.
    """

    def __init__(self, message: str = "Failed to generate unique short code") -> None:
        super().__init__(message)
