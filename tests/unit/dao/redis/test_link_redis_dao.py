"""Unit tests for the LinkRedisDAO

Test coverage includes:

1. Creation behavior
   - Validates creating a link writes the hash and the recent index in one transaction.
   - Ensures invalid types raise TypeError or BeartypeCallHintParamViolation.
   - Confirms existing aliases and lost races raise LinkAlreadyExistsError.
   - Confirms Redis connection errors raise DataStoreError.

2. Retrieval behavior
   - Ensures fetching a stored alias returns a populated LinkModel.
   - Confirms missing keys raise LinkNotFoundError.
   - Confirms Redis timeouts raise StoreTimeoutError.

3. Click counter operations
   - Ensures hit() increments and fetches in a single transaction.
   - Validates click tokens make retried hits idempotent.
   - Confirms missing links raise LinkNotFoundError.
   - Confirms Redis connectivity issues and rejected writes raise DataStoreError.

4. Listing operations
   - Ensures recent() returns the newest links first and skips vanished ones.
   - Ensures count() reports the size of the recent links index.
"""

import re
from datetime import datetime, UTC
from unittest.mock import MagicMock, call, ANY

import pytest
import redis
from beartype.roar import BeartypeCallHintParamViolation
from freezegun import freeze_time

from linksnap.constants import TTL
from linksnap.models import LinkModel
from linksnap.dao.exceptions import DataStoreError, StoreTimeoutError, LinkAlreadyExistsError, LinkNotFoundError
from linksnap.dao.redis import RedisKeySchema, LinkRedisDAO


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def app_prefix():
    """Provide a consistent Redis key prefix for testing."""
    return 'linksnap:test'


@pytest.fixture
def redis_client():
    """Mock a Redis pipeline-compatible client."""
    _redis_client = MagicMock(spec=redis.client.Pipeline)
    _redis_client.exists.return_value = False
    _redis_client.pipeline.return_value = _redis_client
    _redis_client.__enter__.return_value = _redis_client
    _redis_client.__exit__.return_value = None
    _redis_client.connection_pool = MagicMock()
    _redis_client.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}
    return _redis_client


@pytest.fixture
def key_schema():
    """Mock RedisKeySchema to return predictable key values."""
    mock = MagicMock(spec=RedisKeySchema)
    mock.link_key.side_effect = lambda alias: f'linksnap:test:links:{alias}'
    mock.click_token_key.side_effect = lambda alias, click_id: f'linksnap:test:links:{alias}:clicks:{click_id}'
    mock.recent_links_key.return_value = 'linksnap:test:recent_links'
    return mock


@pytest.fixture
def dao(redis_client, key_schema, app_prefix):
    """Create a LinkRedisDAO instance with mocked dependencies."""
    _dao = LinkRedisDAO(redis_client=redis_client, prefix=app_prefix)
    _dao.keys = key_schema
    return _dao


@pytest.fixture
def stored_link():
    """Redis hash of a link clicked once."""
    return {
        'url': 'https://example.com/page',
        'created_at': '2025-10-15T12:00:00+00:00',
        'clicks': '1',
        'last_clicked_at': '2025-10-15T12:05:00+00:00',
    }


# -------------------------------
# 1. Creation behavior
# -------------------------------


@freeze_time('2025-10-15 12:00:00')
def test_create_link(dao, redis_client):
    """Ensure link creation writes the hash and the index atomically."""
    link = dao.create('abc123', 'https://example.com/page')

    assert link == LinkModel(
        alias='abc123',
        original_url='https://example.com/page',
        created_at=datetime(2025, 10, 15, 12, 0, tzinfo=UTC),
    )
    redis_client.watch.assert_called_once_with('linksnap:test:links:abc123')
    redis_client.exists.assert_called_once_with('linksnap:test:links:abc123')
    redis_client.multi.assert_called_once()
    redis_client.hset.assert_called_once_with(
        'linksnap:test:links:abc123',
        mapping={'url': 'https://example.com/page', 'created_at': '2025-10-15T12:00:00+00:00', 'clicks': 0},
    )
    redis_client.zadd.assert_called_once_with('linksnap:test:recent_links', {'abc123': link.created_at.timestamp()})
    redis_client.execute.assert_called_once()


@pytest.mark.parametrize('alias, original_url', [(123, 'https://example.com'), ('abc123', None)])
def test_create_link_with_invalid_type(dao, alias, original_url):
    """Ensure creating with invalid types raises TypeError or Beartype error."""
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.create(alias, original_url)


def test_create_link_which_already_exists(dao, redis_client):
    """Ensure an existing alias raises LinkAlreadyExistsError without writing."""
    redis_client.exists.return_value = True

    with pytest.raises(LinkAlreadyExistsError, match=re.escape("Link with alias 'abc123' already exists.")):
        dao.create('abc123', 'https://example.com/duplicate')

    redis_client.multi.assert_not_called()
    redis_client.hset.assert_not_called()
    redis_client.execute.assert_not_called()


def test_create_link_losing_a_race(dao, redis_client):
    """Ensure an aborted transaction (alias created meanwhile) raises LinkAlreadyExistsError."""
    redis_client.execute.side_effect = redis.exceptions.WatchError('Watched variable changed.')

    with pytest.raises(LinkAlreadyExistsError):
        dao.create('abc123', 'https://example.com/race')


def test_create_link_with_redis_connection_error(dao, redis_client):
    """Ensure Redis connection errors during create raise DataStoreError."""
    redis_client.execute.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        dao.create('abc123', 'https://example.com/failure')


# -------------------------------
# 2. Retrieval behavior
# -------------------------------


def test_get_link(dao, redis_client, stored_link):
    """Ensure a stored alias is returned as a complete LinkModel."""
    redis_client.hgetall.return_value = stored_link

    link = dao.get('abc123')

    assert link == LinkModel(
        alias='abc123',
        original_url='https://example.com/page',
        created_at=datetime(2025, 10, 15, 12, 0, tzinfo=UTC),
        click_count=1,
        last_clicked_at=datetime(2025, 10, 15, 12, 5, tzinfo=UTC),
    )
    redis_client.hgetall.assert_called_once_with('linksnap:test:links:abc123')


def test_get_link_never_clicked(dao, redis_client):
    """Ensure a link without clicks has no last click timestamp."""
    redis_client.hgetall.return_value = {'url': 'https://example.com', 'created_at': '2025-10-15T12:00:00+00:00', 'clicks': '0'}

    link = dao.get('abc123')

    assert link.click_count == 0
    assert link.last_clicked_at is None


def test_get_link_with_invalid_type(dao):
    """Ensure invalid alias types raise TypeError or Beartype error."""
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.get(12345)


def test_get_link_which_does_not_exist(dao, redis_client):
    """Ensure missing aliases raise LinkNotFoundError."""
    redis_client.hgetall.return_value = {}

    with pytest.raises(LinkNotFoundError, match="Link with alias 'abc123' not found."):
        dao.get('abc123')


def test_get_link_with_redis_timeout(dao, redis_client):
    """Ensure Redis timeouts during get raise StoreTimeoutError."""
    redis_client.hgetall.side_effect = redis.exceptions.TimeoutError('Timeout reading from socket')

    with pytest.raises(StoreTimeoutError, match='Redis at 203.0.113.1:18000/5 timed out.'):
        dao.get('abc123')


# -------------------------------
# 3. Click counter operations
# -------------------------------


@freeze_time('2025-10-15 12:05:00')
def test_hit_link(dao, redis_client, stored_link):
    """Ensure hit() increments and fetches the link in one transaction."""
    redis_client.exists.return_value = True
    redis_client.execute.return_value = [1, 1, stored_link]

    link = dao.hit('abc123')

    assert link.click_count == 1
    assert link.last_clicked_at == datetime(2025, 10, 15, 12, 5, tzinfo=UTC)
    redis_client.pipeline.assert_called_once_with(transaction=True)
    redis_client.hincrby.assert_called_once_with('linksnap:test:links:abc123', 'clicks', 1)
    redis_client.hset.assert_called_once_with('linksnap:test:links:abc123', 'last_clicked_at', '2025-10-15T12:05:00+00:00')
    redis_client.hgetall.assert_called_once_with('linksnap:test:links:abc123')


def test_hit_link_which_does_not_exist(dao, redis_client):
    """Ensure hitting a missing alias raises LinkNotFoundError without side effects."""
    redis_client.exists.return_value = False

    with pytest.raises(LinkNotFoundError, match="Link with alias 'abc123' not found."):
        dao.hit('abc123')

    redis_client.hincrby.assert_not_called()
    redis_client.hset.assert_not_called()


def test_hit_link_with_click_token(dao, redis_client, stored_link):
    """Ensure the click token is written in the same transaction as the increment."""
    token_key = 'linksnap:test:links:abc123:clicks:f3a9'
    redis_client.exists.side_effect = [True, False]  # link exists, token doesn't
    redis_client.execute.return_value = [True, 1, 1, stored_link]

    link = dao.hit('abc123', click_id='f3a9')

    assert link.click_count == 1
    redis_client.watch.assert_called_once_with(token_key)
    redis_client.exists.assert_has_calls([call('linksnap:test:links:abc123'), call(token_key)])
    redis_client.multi.assert_called_once()
    redis_client.set.assert_called_once_with(token_key, 1, ex=TTL.CLICK_TOKEN)
    redis_client.hincrby.assert_called_once_with('linksnap:test:links:abc123', 'clicks', 1)
    redis_client.hset.assert_called_once_with('linksnap:test:links:abc123', 'last_clicked_at', ANY)


def test_hit_link_with_already_counted_click_token(dao, redis_client, stored_link):
    """Ensure a retried click token returns the snapshot without incrementing again."""
    redis_client.exists.side_effect = [True, True]  # link exists, token already counted
    redis_client.hgetall.return_value = stored_link

    link = dao.hit('abc123', click_id='f3a9')

    assert link.click_count == 1
    redis_client.multi.assert_not_called()
    redis_client.hincrby.assert_not_called()
    redis_client.execute.assert_not_called()


def test_hit_link_with_click_token_counted_concurrently(dao, redis_client, stored_link):
    """Ensure a token counted by a concurrent attempt is not counted twice."""
    redis_client.exists.side_effect = [True, False]
    redis_client.execute.side_effect = redis.exceptions.WatchError('Watched variable changed.')
    redis_client.hgetall.return_value = stored_link

    link = dao.hit('abc123', click_id='f3a9')

    assert link.click_count == 1
    redis_client.execute.assert_called_once()


def test_hit_link_with_click_token_which_does_not_exist(dao, redis_client):
    """Ensure click tokens of missing links are never written."""
    redis_client.exists.return_value = False

    with pytest.raises(LinkNotFoundError):
        dao.hit('abc123', click_id='f3a9')

    redis_client.set.assert_not_called()


def test_hit_link_with_redis_connection_error(dao, redis_client):
    """Ensure Redis connectivity issues during hit raise DataStoreError."""
    redis_client.exists.side_effect = redis.exceptions.ConnectionError('Connection error')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
        dao.hit('abc123', click_id='f3a9')


@pytest.mark.parametrize(
    'error',
    [
        redis.exceptions.ReadOnlyError("You can't write against a read only replica."),
        redis.exceptions.OutOfMemoryError("command not allowed when used memory > 'maxmemory'."),
    ],
)
def test_hit_link_with_rejected_write(dao, redis_client, error):
    """Ensure a write rejected by Redis (failover replica, maxmemory) raises DataStoreError."""
    redis_client.exists.side_effect = [True, False]
    redis_client.execute.side_effect = error

    with pytest.raises(DataStoreError, match='Redis at 203.0.113.1:18000/5 rejected the command') as exc_info:
        dao.hit('abc123', click_id='f3a9')
    assert exc_info.value.__cause__ is error


def test_hit_link_with_invalid_type(dao):
    """Ensure invalid parameter types raise TypeError or Beartype error."""
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.hit('abc123', click_id=42)


# -------------------------------
# 4. Listing operations
# -------------------------------


def test_recent_links(dao, redis_client, stored_link):
    """Ensure recent() returns links newest first and skips vanished hashes."""
    redis_client.zrevrange.return_value = ['newest', 'vanished', 'older']
    redis_client.execute.return_value = [stored_link, {}, {**stored_link, 'clicks': '7'}]

    links = dao.recent(3)

    assert [link.alias for link in links] == ['newest', 'older']
    assert [link.click_count for link in links] == [1, 7]
    redis_client.zrevrange.assert_called_once_with('linksnap:test:recent_links', 0, 2)
    redis_client.pipeline.assert_called_once_with(transaction=False)


def test_recent_links_when_empty(dao, redis_client):
    """Ensure an empty index yields an empty list without a pipeline round trip."""
    redis_client.zrevrange.return_value = []

    assert dao.recent() == []
    redis_client.execute.assert_not_called()


def test_recent_links_with_non_positive_limit(dao, redis_client):
    """Ensure a non-positive limit never hits Redis."""
    assert dao.recent(0) == []
    redis_client.zrevrange.assert_not_called()


def test_count_links(dao, redis_client):
    """Ensure count() reports the size of the recent links index."""
    redis_client.zcard.return_value = 42

    assert dao.count() == 42
    redis_client.zcard.assert_called_once_with('linksnap:test:recent_links')
