"""
Инфраструктурный слой: хранилище записей и клиент Redis.
"""

from travel_pool.infra.redis_client import CorruptCollectionError, RedisClient, init_redis
from travel_pool.infra.record_store import (
    Collection,
    InMemoryCollection,
    RedisCollection,
    RecordStore,
    build_record_store,
)

__all__ = [
    "CorruptCollectionError",
    "RedisClient",
    "init_redis",
    "Collection",
    "InMemoryCollection",
    "RedisCollection",
    "RecordStore",
    "build_record_store",
]
