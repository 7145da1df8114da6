import os

import pytest
import redis
import fakeredis


TEST_REDIS_URL_ENV = 'LINKSNAP_TEST_REDIS_URL'


@pytest.fixture
def live_redis() -> redis.Redis:
    """Redis client speaking real transactions.

    Uses the server at `LINKSNAP_TEST_REDIS_URL` when set (its database is
    flushed before and after the test), otherwise an in-process fakeredis server.
    """
    url = os.getenv(TEST_REDIS_URL_ENV)
    if url:
        client = redis.Redis.from_url(url, decode_responses=True)
        client.flushdb()
        yield client
        client.flushdb()
        client.close()
    else:
        yield fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
