from enum import StrEnum


class Defaults:
    """Default tuning values (overridable through configuration)."""

    ALIAS_LENGTH = 7  # Random alias length in base62 characters
    ALIAS_MAX_ATTEMPTS = 5  # Random alias collisions tolerated before giving up
    CLICK_MAX_ATTEMPTS = 3  # Click record retries on data store errors
    STORE_TIMEOUT = 2.0  # Redis socket timeout in seconds
    RECENT_LINKS_LIMIT = 20
    RECENT_LINKS_MAX_LIMIT = 100


class TTL:
    """TTL durations in seconds."""

    # Click idempotency token lifetime (covers every retry of a single redirect)
    CLICK_TOKEN = 300


class AliasRules:
    """Constraints for user-supplied and generated aliases."""

    CUSTOM_MIN_LENGTH = 3
    CUSTOM_MAX_LENGTH = 32
    GENERATED_MIN_LENGTH = 6
    GENERATED_MAX_LENGTH = 8
    # Single path segments routed to the API instead of redirects
    RESERVED = frozenset({'api'})


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'

    class Process(StrEnum):
        # Direct configuration, bypasses AppConfig when REDIS_URL is set
        REDIS_URL = 'REDIS_URL'
        STORE_TIMEOUT = 'STORE_TIMEOUT'
        ALIAS_LENGTH = 'ALIAS_LENGTH'
        ALIAS_MAX_ATTEMPTS = 'ALIAS_MAX_ATTEMPTS'
        CLICK_MAX_ATTEMPTS = 'CLICK_MAX_ATTEMPTS'
        SHORT_BASE_URL = 'SHORT_BASE_URL'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
BAD_REQUEST = 'BadRequest'
