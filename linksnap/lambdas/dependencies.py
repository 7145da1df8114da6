"""Factories wiring Lambda handlers to their collaborators.

Handlers import these functions by name, so tests replace them on the handler
module (e.g. `monkeypatch.setattr(app, 'make_link_dao', ...)`).
"""

import logging

from linksnap.types import LambdaConfiguration
from linksnap.dao.base import LinkBaseDAO
from linksnap.dao.redis import LinkRedisDAO
from linksnap.services import AnalyticsClient, LoggingAnalyticsClient
from linksnap.utils import app_prefix, redis_kwargs


logger = logging.getLogger(__name__)


def make_link_dao(app_config: LambdaConfiguration) -> LinkBaseDAO:
    logger.debug('Assuming Redis as the backend database for links.')
    return LinkRedisDAO(**redis_kwargs(app_config), prefix=app_prefix())


def make_analytics_client() -> AnalyticsClient:
    return LoggingAnalyticsClient()
