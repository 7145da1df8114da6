"""Data Access Object (DAO) implementation for managing shortened links in Redis

This module provides a Redis-based implementation of LinkBaseDAO for create,
read and click-counting operations with LinkModel instances.

Responsibilities:
    - Atomically create links (alias uniqueness enforced inside a transaction);
    - Retrieve consistent link snapshots;
    - Atomically increment click counters (optionally idempotent per click);
    - Maintain the recent links index;
    - Raise appropriate DAO exceptions on missing links and Redis failures.

Redis layout:
    <prefix>:links:<alias>                      -> hash {url, created_at, clicks, last_clicked_at}
    <prefix>:recent_links                       -> sorted set {alias: created_at timestamp}
    <prefix>:links:<alias>:clicks:<click_id>    -> click idempotency token (short TTL)

Classes:
    LinkRedisDAO:
        DAO for storing and retrieving LinkModel in a Redis datastore.

Example:
    >>> from linksnap.dao.redis import LinkRedisDAO

    >>> dao = LinkRedisDAO(redis_url="redis://localhost:6379/0", prefix="linksnap:dev")

    >>> dao.create("abc123", "https://example.com/page")
    LinkModel(alias='abc123', original_url='https://example.com/page', ...)

    >>> dao.hit("abc123").click_count
    1
    >>> dao.get("abc123").click_count
    1
"""

from datetime import datetime, UTC

import redis
from beartype import beartype

from linksnap.constants import TTL
from linksnap.models import LinkModel
from linksnap.dao.base import LinkBaseDAO
from linksnap.dao.redis.mixins import RedisClientMixin
from linksnap.dao.redis.helpers import handle_redis_connection_error
from linksnap.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError


# Hash field names of a link record
URL_FIELD = 'url'
CREATED_AT_FIELD = 'created_at'
CLICKS_FIELD = 'clicks'
LAST_CLICKED_AT_FIELD = 'last_clicked_at'


class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing shortened links

    This class implements the LinkBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        create(alias: str, original_url: str, **kwargs) -> LinkModel:
            Create a link inside an optimistic transaction.
            Raises LinkAlreadyExistsError when the alias is taken (including lost races).

        get(alias: str, **kwargs) -> LinkModel:
            Retrieve a link snapshot with a single HGETALL.
            Raises LinkNotFoundError when the alias doesn't exist.

        hit(alias: str, click_id: str | None = None, **kwargs) -> LinkModel:
            Increment-and-fetch the click counter in one transaction.
            Raises LinkNotFoundError when the alias doesn't exist.

        recent(limit: int = 20, **kwargs) -> list[LinkModel]:
            Retrieve the newest links.

        count(**kwargs) -> int:
            Retrieve the total number of links.

        All methods raise DataStoreError (StoreTimeoutError on timeouts) on
        connectivity issues with Redis.
    """

    @handle_redis_connection_error
    @beartype
    def create(self, alias: str, original_url: str, **kwargs) -> LinkModel:
        """Create a link in Redis

        The link key is WATCHed before checking for its existence, and the link
        hash plus its index entry are written in a MULTI/EXEC block. If another
        client creates the same alias between WATCH and EXEC, Redis aborts the
        transaction and this call reports the alias as taken. Two concurrent
        creations can therefore never both succeed, and an existing link is
        never overwritten.

        Args:
            alias (str):
                Alias of the new link.
            original_url (str):
                Destination URL (validated by the caller).
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            LinkModel: the created link.

        Raises:
            LinkAlreadyExistsError:
                If a link with the same alias already exists.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.

        Example:
            >>> dao.create('abc123', 'https://example.com')
            LinkModel(alias='abc123', original_url='https://example.com', ...)
        """
        link_key = self.keys.link_key(alias)
        created_at = datetime.now(UTC)

        with self.redis.pipeline() as pipe:
            try:
                pipe.watch(link_key)
                if pipe.exists(link_key):
                    raise LinkAlreadyExistsError(f"Link with alias '{alias}' already exists.")

                pipe.multi()
                # fmt: off
                pipe.hset(link_key, mapping={
                    URL_FIELD: original_url,
                    CREATED_AT_FIELD: created_at.isoformat(),
                    CLICKS_FIELD: 0,
                })
                # fmt: on
                pipe.zadd(self.keys.recent_links_key(), {alias: created_at.timestamp()})
                pipe.execute()
            except redis.exceptions.WatchError as e:
                raise LinkAlreadyExistsError(f"Link with alias '{alias}' already exists.") from e

        return LinkModel(alias=alias, original_url=original_url, created_at=created_at)

    @handle_redis_connection_error
    @beartype
    def get(self, alias: str, **kwargs) -> LinkModel:
        """Retrieve a stored link by alias

        HGETALL reads the whole hash atomically, so the click counter and the
        last click timestamp always belong to the same increment.

        Args:
            alias (str):
                The alias of the link.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            LinkModel: the retrieved link.

        Raises:
            LinkNotFoundError:
                If the link does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('abc123')
            LinkModel(alias='abc123', original_url='https://example.com', ...)
        """
        mapping = self.redis.hgetall(self.keys.link_key(alias))
        if not mapping:
            raise LinkNotFoundError(f"Link with alias '{alias}' not found.")
        return self._to_model(alias, mapping)

    @handle_redis_connection_error
    @beartype
    def hit(self, alias: str, click_id: str | None = None, **kwargs) -> LinkModel:
        """Record one click of a link

        HINCRBY, HSET and HGETALL run in one MULTI/EXEC block, so concurrent
        hits never lose an increment and each caller gets the snapshot produced
        by its own increment.

        NOTE: links are never deleted, so the existence check ahead of the
              transaction cannot race with a removal.
        NOTE: with a `click_id`, an idempotency token is WATCHed and written in
              the same transaction. Retrying with the same token (e.g. after a
              timeout with an unknown outcome) returns the current snapshot
              without counting the click twice.

        Args:
            alias (str):
                The alias of the clicked link.
            click_id (str | None):
                Optional idempotency token for this click.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            LinkModel: the link right after the increment.

        Raises:
            LinkNotFoundError:
                If no link with the given alias exists.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.hit('abc123').click_count
            1
            >>> dao.hit('abc123', click_id='f3a9').click_count
            2
            >>> dao.hit('abc123', click_id='f3a9').click_count
            2
        """
        link_key = self.keys.link_key(alias)
        clicked_at = datetime.now(UTC).isoformat()

        if click_id is None:
            if not self.redis.exists(link_key):
                raise LinkNotFoundError(f"Link with alias '{alias}' not found.")

            with self.redis.pipeline(transaction=True) as pipe:
                pipe.hincrby(link_key, CLICKS_FIELD, 1)
                pipe.hset(link_key, LAST_CLICKED_AT_FIELD, clicked_at)
                pipe.hgetall(link_key)
                _, _, mapping = pipe.execute()
            return self._to_model(alias, mapping)

        token_key = self.keys.click_token_key(alias, click_id)
        with self.redis.pipeline() as pipe:
            try:
                pipe.watch(token_key)
                if not pipe.exists(link_key):
                    raise LinkNotFoundError(f"Link with alias '{alias}' not found.")
                if pipe.exists(token_key):
                    # Already counted by a previous attempt
                    return self._to_model(alias, pipe.hgetall(link_key))

                pipe.multi()
                pipe.set(token_key, 1, ex=TTL.CLICK_TOKEN)
                pipe.hincrby(link_key, CLICKS_FIELD, 1)
                pipe.hset(link_key, LAST_CLICKED_AT_FIELD, clicked_at)
                pipe.hgetall(link_key)
                _, _, _, mapping = pipe.execute()
            except redis.exceptions.WatchError:
                # A concurrent attempt with the same token counted the click
                return self.get(alias)

        return self._to_model(alias, mapping)

    @handle_redis_connection_error
    @beartype
    def recent(self, limit: int = 20, **kwargs) -> list[LinkModel]:
        """Retrieve the most recently created links, newest first

        Args:
            limit (int):
                Maximum number of links to return.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            list[LinkModel]: up to `limit` links.
        """
        if limit <= 0:
            return []

        aliases = self.redis.zrevrange(self.keys.recent_links_key(), 0, limit - 1)
        if not aliases:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for alias in aliases:
                pipe.hgetall(self.keys.link_key(alias))
            mappings = pipe.execute()

        return [self._to_model(alias, mapping) for alias, mapping in zip(aliases, mappings) if mapping]

    @handle_redis_connection_error
    @beartype
    def count(self, **kwargs) -> int:
        """Retrieve the total number of links

        Example:
            >>> dao.count()
            123
        """
        return int(self.redis.zcard(self.keys.recent_links_key()))

    @staticmethod
    def _to_model(alias: str, mapping: dict) -> LinkModel:
        last_clicked_at = mapping.get(LAST_CLICKED_AT_FIELD)
        return LinkModel(
            alias=alias,
            original_url=mapping[URL_FIELD],
            created_at=datetime.fromisoformat(mapping[CREATED_AT_FIELD]),
            click_count=int(mapping.get(CLICKS_FIELD, 0)),
            last_clicked_at=datetime.fromisoformat(last_clicked_at) if last_clicked_at else None,
        )
