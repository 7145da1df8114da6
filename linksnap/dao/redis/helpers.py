import functools
import redis
from typing import TypeVar, Any
from collections.abc import Callable

from linksnap.dao.exceptions import DataStoreError, StoreTimeoutError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def _redis_location(client: redis.Redis) -> str:
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_connection_error[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors, timeouts and rejected commands

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise
            redis.exceptions.ConnectionError, redis.exceptions.TimeoutError or
            any other redis.exceptions.RedisError (e.g. ReadOnlyError after a
            failover, OutOfMemoryError under maxmemory).

    Returns:
        Callable[..., Any]:
            Wrapped method which raises StoreTimeoutError on timeouts and
            DataStoreError on connectivity issues or commands rejected by Redis.
            WatchError is left for the DAO method itself to handle.

    Example:
        >>> @handle_redis_connection_error
        ... def get_count(self):
        ...     return self.redis.zcard('recent_links')
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.exceptions.TimeoutError as e:
            raise StoreTimeoutError(f'Redis at {_redis_location(self.redis)} timed out.') from e
        except redis.exceptions.ConnectionError as e:
            raise DataStoreError(f"Can't connect to Redis at {_redis_location(self.redis)}.") from e
        except redis.exceptions.WatchError:
            raise
        except redis.exceptions.RedisError as e:
            raise DataStoreError(f'Redis at {_redis_location(self.redis)} rejected the command: {e}') from e

    return wrapper
