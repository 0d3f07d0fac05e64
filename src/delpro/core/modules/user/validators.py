from delpro.errors import ValidationError
from delpro.utils import is_email


def normalize_email(email: str) -> str:
    """Trim and lowercase an email address, raising ValidationError if malformed."""
    normalized = email.strip().lower()
    if not is_email(normalized):
        raise ValidationError("Valid email is required")
    return normalized


def validate_name(name: str) -> str:
    """Return the trimmed name if it is 2 to 100 characters long."""
    name = name.strip()
    if not 2 <= len(name) <= 100:
        raise ValidationError("Name must be between 2 and 100 characters")
    return name


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - Minimum length of 6 characters
    - At least one lowercase letter, one uppercase letter and one digit
    - No whitespace characters

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < 6:
        raise ValidationError("Password must be at least 6 characters long")

    if any(char.isspace() for char in password):
        raise ValidationError("Password cannot contain whitespace characters")

    if not (
        any(char.islower() for char in password)
        and any(char.isupper() for char in password)
        and any(char.isdigit() for char in password)
    ):
        raise ValidationError("Password must contain at least one uppercase letter, one lowercase letter, and one number")
