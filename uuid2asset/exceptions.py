"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class Uuid2AssetError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(Uuid2AssetError):
    """Raised for issues related to configuration loading or validation."""


class ManifestError(Uuid2AssetError):
    """Raised when a bundle manifest cannot be read or lacks required data."""


class InvalidIdentifierError(Uuid2AssetError, ValueError):
    """Raised when an encoded identifier contains symbols outside the alphabet."""


class RetryExhaustedError(Uuid2AssetError):
    """
    Raised when an operation still fails after the retry policy's maximum
    number of attempts. Never raised with the default (unbounded) policy.
    """
