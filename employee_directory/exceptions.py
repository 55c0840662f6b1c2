"""Domain exceptions raised by directory services."""


class DirectoryError(Exception):
    """Base exception for employee directory failures."""


class ResourceNotFoundError(DirectoryError):
    """Raised when a requested employee, registration or currency does not exist."""


class UsernameExistsError(DirectoryError):
    """Raised when creating an employee whose username is already taken."""


class InvalidCurrencyError(DirectoryError):
    """Raised when a registration names an unknown or malformed currency code."""


class NotificationError(DirectoryError):
    """Raised when an alert email cannot be rendered or delivered."""
