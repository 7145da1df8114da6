from linksnap.dao.redis.redis_key_schema import RedisKeySchema
from linksnap.dao.redis.mixins import RedisClientMixin
from linksnap.dao.redis.link_redis_dao import LinkRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'LinkRedisDAO',
]
