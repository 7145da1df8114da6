from unittest.mock import patch

from linksnap.lambdas import dependencies
from linksnap.services import LoggingAnalyticsClient


def test_make_link_dao(monkeypatch):
    monkeypatch.setenv('APP_NAME', 'linksnap')
    monkeypatch.setenv('APP_ENV', 'test')

    with patch.object(dependencies, 'LinkRedisDAO') as dao_cls:
        dao = dependencies.make_link_dao({'redis': {'url': 'redis://cache:6379/0', 'timeout': 1.0}})

    dao_cls.assert_called_once_with(redis_url='redis://cache:6379/0', redis_timeout=1.0, prefix='linksnap:test')
    assert dao is dao_cls.return_value


def test_make_analytics_client():
    assert isinstance(dependencies.make_analytics_client(), LoggingAnalyticsClient)
