class LinkSnapError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'InternalError'


class ValidationError(LinkSnapError):
    """Base exception for user-correctable input errors."""

    error_code = 'ValidationError'


class InvalidUrlError(ValidationError):
    """Raised when a URL is not an absolute http(s) URL."""

    error_code = 'InvalidUrl'


class AliasInvalidError(ValidationError):
    """Raised when a custom alias is malformed or reserved."""

    error_code = 'AliasInvalid'


class AliasError(LinkSnapError):
    """Base exception for alias allocation failures."""

    error_code = 'AliasError'


class AliasTakenError(AliasError):
    """Raised when a custom alias is already in use."""

    error_code = 'AliasTaken'


class GenerationExhaustedError(AliasError):
    """Raised when every generated alias candidate collided with an existing link.

    Transient: retrying the whole request draws fresh random candidates.
    """

    error_code = 'GenerationExhausted'


class ConfigurationError(LinkSnapError):
    """Base exception for all configuration errors."""

    error_code = 'ConfigurationError'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'MissingEnvironmentVariable'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'BadConfiguration'
