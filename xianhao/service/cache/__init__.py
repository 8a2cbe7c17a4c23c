"""
缓存服务模块
"""

from .cache_service import RestrictionCache
from .kv_store import KeyValueStore, MemoryStore, RedisStore, create_store

__all__ = [
    "RestrictionCache",
    "KeyValueStore",
    "MemoryStore",
    "RedisStore",
    "create_store",
]
