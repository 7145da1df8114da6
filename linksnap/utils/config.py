"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to access
configuration data stored in **AWS AppConfig**. Each environment (`APP_ENV`) has
a dedicated AppConfig *Environment* within the shared AppConfig *Application*
identified by `APP_NAME`. Configuration data is stored as a JSON document under
a configuration profile (typically `backend-config`) and deployed to the
corresponding environment.

The configuration JSON follows this structure:

    {
        "active_backend": "redis",
        "configs": {
            "shorten_url": {
                "redis": {"url": "rediss://...", "timeout": 2.0},
                "shortener": {"alias_length": 7, "alias_max_attempts": 5, "base_url": "https://short.example"}
            },
            "redirect_url": {
                "redis": {"host": "...", "port": 6379, "db": 0},
                "shortener": {"click_max_attempts": 3}
            }
        }
    }

Each Lambda loads its own section (e.g., `"shorten_url"`) from this AppConfig
document, determined by the current application environment.

When `REDIS_URL` is present in the process environment, configuration is built
from environment variables instead and AppConfig is never contacted.

Typical usage inside a Lambda handler:
    >>> from linksnap.utils.config import load_config, ShortenerSettings
    >>> app_config = load_config('shorten_url')
    >>> app_config['redis']['url']
    'rediss://linksnap.cache.amazonaws.com:6379/0'
    >>> ShortenerSettings.from_config(app_config).alias_length
    7
"""

import os
import json
import functools
import urllib.parse
import urllib.request
import logging
from dataclasses import dataclass
from collections.abc import Callable

import boto3

from linksnap.types import LambdaConfiguration
from linksnap.constants import ENV, Defaults, AliasRules
from linksnap.exceptions import BadConfigurationError
from linksnap.utils.helpers import require_environment
from linksnap.utils.runtime import running_locally


logger = logging.getLogger(__name__)


SETTINGS_SECTION = 'shortener'


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    return None if app_name() is None else f'{app_name()}:{app_env()}'


@dataclass(frozen=True)
class ShortenerSettings:
    """Validated tuning knobs of the shortening core.

    Attributes:
        alias_length (int):
            Length of randomly generated aliases (6-8 base62 characters).
        alias_max_attempts (int):
            Random alias candidates tried before giving up with GenerationExhausted.
        click_max_attempts (int):
            Attempts to record a click on data store errors.
        base_url (str | None):
            Public base URL of short links. Falls back to the request's domain.
    """

    alias_length: int = Defaults.ALIAS_LENGTH
    alias_max_attempts: int = Defaults.ALIAS_MAX_ATTEMPTS
    click_max_attempts: int = Defaults.CLICK_MAX_ATTEMPTS
    base_url: str | None = None

    def __post_init__(self):
        if not AliasRules.GENERATED_MIN_LENGTH <= self.alias_length <= AliasRules.GENERATED_MAX_LENGTH:
            raise BadConfigurationError(
                f'alias_length must be between {AliasRules.GENERATED_MIN_LENGTH} and '
                f'{AliasRules.GENERATED_MAX_LENGTH} (given value: {self.alias_length}).'
            )
        if self.alias_max_attempts < 1:
            raise BadConfigurationError(f'alias_max_attempts must be at least 1 (given value: {self.alias_max_attempts}).')
        if self.click_max_attempts < 1:
            raise BadConfigurationError(f'click_max_attempts must be at least 1 (given value: {self.click_max_attempts}).')

    @classmethod
    def from_config(cls, app_config: LambdaConfiguration) -> 'ShortenerSettings':
        section = app_config.get(SETTINGS_SECTION) or {}
        try:
            return cls(
                alias_length=int(section.get('alias_length', Defaults.ALIAS_LENGTH)),
                alias_max_attempts=int(section.get('alias_max_attempts', Defaults.ALIAS_MAX_ATTEMPTS)),
                click_max_attempts=int(section.get('click_max_attempts', Defaults.CLICK_MAX_ATTEMPTS)),
                base_url=section.get('base_url') or None,
            )
        except (TypeError, ValueError) as e:
            raise BadConfigurationError(f'Invalid {SETTINGS_SECTION!r} configuration: {e}') from e


def redis_kwargs(app_config: LambdaConfiguration) -> dict:
    """Map the 'redis' config section onto RedisClientMixin keyword arguments

    Example:
        >>> redis_kwargs({'redis': {'host': 'redis.test', 'port': 6379}})
        {'redis_host': 'redis.test', 'redis_port': 6379}
    """
    return {f'redis_{k}': v for k, v in app_config['redis'].items()}


def _extract_lambda_config(document: dict, lambda_name: str) -> LambdaConfiguration:
    backend = document['active_backend']
    lambda_config = document['configs'][lambda_name]
    return {backend: lambda_config[backend], SETTINGS_SECTION: lambda_config.get(SETTINGS_SECTION, {})}


def _load_from_environment(func: Callable) -> Callable:
    """Decorator: build configuration from process environment when REDIS_URL is set.

    Environment variables used:
        REDIS_URL           – Redis connection string (required to activate this path).
        STORE_TIMEOUT       – Redis socket timeout in seconds.
        ALIAS_LENGTH        – Random alias length.
        ALIAS_MAX_ATTEMPTS  – Random alias candidates per request.
        CLICK_MAX_ATTEMPTS  – Click record attempts.
        SHORT_BASE_URL      – Public base URL of short links.
    """

    @functools.wraps(func)
    def wrapper(lambda_name: str, *args, **kwargs) -> LambdaConfiguration:
        redis_url = os.getenv(ENV.Process.REDIS_URL)
        if not redis_url:
            return func(lambda_name, *args, **kwargs)

        try:
            timeout = float(os.getenv(ENV.Process.STORE_TIMEOUT, Defaults.STORE_TIMEOUT))
        except ValueError as e:
            raise BadConfigurationError(f'{ENV.Process.STORE_TIMEOUT} must be a number.') from e

        # fmt: off
        settings = {
            key: value for key, value in {
                'alias_length': os.getenv(ENV.Process.ALIAS_LENGTH),
                'alias_max_attempts': os.getenv(ENV.Process.ALIAS_MAX_ATTEMPTS),
                'click_max_attempts': os.getenv(ENV.Process.CLICK_MAX_ATTEMPTS),
                'base_url': os.getenv(ENV.Process.SHORT_BASE_URL),
            }.items() if value
        }
        # fmt: on

        logger.debug('Loaded configuration from process environment.', extra={'lambdaName': lambda_name})
        return {'redis': {'url': redis_url, 'timeout': timeout}, SETTINGS_SECTION: settings}

    return wrapper


def _sam_load_local_appconfig(func: Callable) -> Callable:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM.

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the app configuration JSON from the local AppConfig agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Environment variables used:
        APPCONFIG_AGENT_URL     – Base URL of the local AppConfig Agent (e.g., http://host.docker.internal:2772).
        APPCONFIG_PROFILE_NAME  – Optional profile name (default: "backend-config").
    """

    def __validate_appconfig_url(url: str | None) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise BadConfigurationError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal'}:
            raise BadConfigurationError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise BadConfigurationError(f'Bad port {url}')
        return url

    @functools.wraps(func)
    def wrapper(lambda_name: str, *args, **kwargs) -> LambdaConfiguration:
        agent_url = __validate_appconfig_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not running_locally() or not agent_url:
            return func(lambda_name, *args, **kwargs)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            document = json.load(r)

        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
        return _extract_lambda_config(document, lambda_name)

    return wrapper


@_load_from_environment
@_sam_load_local_appconfig
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load configuration for a given Lambda from AWS AppConfig

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'shorten_url', 'redirect_url').

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        lambda_name (str):
            Name of the Lambda (e.g., "shorten_url" or "redirect_url").

    Returns:
        dict: {'<backend>': {...}, 'shortener': {...}} for this Lambda.

    Raises:
        MissingEnvironmentVariableError:
            If any of the AppConfig identifiers is missing.
        botocore.exceptions.ClientError:
            If AppConfig rejects the request.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
    return _extract_lambda_config(document, lambda_name)
