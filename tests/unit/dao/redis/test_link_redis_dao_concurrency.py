"""Concurrency tests for the LinkRedisDAO against a Redis speaking real transactions

Test coverage includes:
    1. Alias uniqueness
       - Concurrent creations of the same alias yield exactly one success.
    2. Click counter correctness
       - N concurrent hits of one alias increase its counter by exactly N.
       - Hits of different aliases never interfere.
    3. Click token idempotency
       - Retrying a hit with the same token counts one click, even concurrently.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from linksnap.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError
from linksnap.dao.redis import LinkRedisDAO


WORKERS = 8


@pytest.fixture
def dao(live_redis):
    return LinkRedisDAO(redis_client=live_redis, prefix='linksnap:test')


def _create(dao, alias, url):
    try:
        return dao.create(alias, url)
    except LinkAlreadyExistsError as e:
        return e


# -------------------------------
# 1. Alias uniqueness
# -------------------------------


def test_concurrent_creations_of_same_alias(dao):
    """Ensure exactly one of many racing creations wins."""
    urls = [f'https://example.com/{i}' for i in range(20)]

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        results = list(pool.map(lambda url: _create(dao, 'contested', url), urls))

    winners = [r for r in results if not isinstance(r, LinkAlreadyExistsError)]
    assert len(winners) == 1
    assert sum(isinstance(r, LinkAlreadyExistsError) for r in results) == len(urls) - 1

    # The stored link is the winner's and was never overwritten
    stored = dao.get('contested')
    assert stored.original_url == winners[0].original_url
    assert dao.count() == 1


# -------------------------------
# 2. Click counter correctness
# -------------------------------


@pytest.mark.parametrize('use_tokens', [False, True])
def test_concurrent_hits_are_never_lost(dao, use_tokens):
    """Ensure N concurrent hits increase the counter by exactly N."""
    created = dao.create('popular', 'https://example.com/popular')
    clicks = 50

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        snapshots = list(pool.map(lambda i: dao.hit('popular', click_id=f'click-{i}' if use_tokens else None), range(clicks)))

    link = dao.get('popular')
    assert link.click_count == clicks
    assert link.last_clicked_at is not None
    # Every caller observed the snapshot of its own increment
    assert sorted(s.click_count for s in snapshots) == list(range(1, clicks + 1))
    # Clicks never touch the immutable fields
    assert link.original_url == created.original_url
    assert link.created_at == created.created_at


def test_concurrent_hits_of_different_aliases(dao):
    """Ensure increments on unrelated aliases don't interfere."""
    aliases = ['first', 'second', 'third']
    for alias in aliases:
        dao.create(alias, f'https://example.com/{alias}')

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        list(pool.map(lambda i: dao.hit(aliases[i % 3]), range(30)))

    assert [dao.get(alias).click_count for alias in aliases] == [10, 10, 10]


def test_hit_unknown_alias_has_no_side_effects(dao, live_redis):
    """Ensure hitting a missing alias creates nothing."""
    with pytest.raises(LinkNotFoundError):
        dao.hit('missing', click_id='f3a9')

    assert live_redis.keys('*') == []


# -------------------------------
# 3. Click token idempotency
# -------------------------------


def test_retried_click_token_counts_once(dao):
    """Ensure a retry with the same token doesn't double count."""
    dao.create('abc123', 'https://example.com/page')

    first = dao.hit('abc123', click_id='f3a9')
    retry = dao.hit('abc123', click_id='f3a9')

    assert first.click_count == retry.click_count == 1
    assert dao.hit('abc123', click_id='b7c1').click_count == 2


def test_concurrent_retries_of_same_click_token(dao):
    """Ensure racing attempts with one token count a single click."""
    dao.create('abc123', 'https://example.com/page')

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        snapshots = list(pool.map(lambda _: dao.hit('abc123', click_id='f3a9'), range(10)))

    assert dao.get('abc123').click_count == 1
    assert all(s.click_count == 1 for s in snapshots)
