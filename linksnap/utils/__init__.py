from linksnap.utils.config import app_env, app_name, app_prefix, load_config, redis_kwargs, ShortenerSettings
from linksnap.utils.helpers import base_url, get_short_url, isoformat, require_environment, guarantee_500_response
from linksnap.utils.validators import validate_url
from linksnap.utils.logging import initialize_logging


__all__ = [
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'redis_kwargs',
    'ShortenerSettings',
    'base_url',
    'get_short_url',
    'isoformat',
    'require_environment',
    'guarantee_500_response',
    'validate_url',
    'initialize_logging',
]
