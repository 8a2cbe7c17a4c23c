"""
键值存储抽象

缓存层只依赖 get/set/delete/keys 四个操作，便于替换存储后端和测试
"""

import copy
import fnmatch
import logging
from typing import Any, Dict, List, Optional

from xianhao.base.error_handler import ConfigurationError
from xianhao.config import get_cache_config
from xianhao.config.redis.operations import RedisOperations


class KeyValueStore:
    """键值存储接口"""

    async def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    async def set(self, key: str, value: Any) -> bool:
        raise NotImplementedError

    async def delete(self, *keys: str) -> int:
        raise NotImplementedError

    async def keys(self, pattern: str = "*") -> List[str]:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """进程内存储，读写都做深拷贝，行为与序列化存储保持一致"""

    def __init__(self):
        self._data: Dict[str, Any] = {}

    async def get(self, key: str) -> Optional[Any]:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    async def set(self, key: str, value: Any) -> bool:
        self._data[key] = copy.deepcopy(value)
        return True

    async def delete(self, *keys: str) -> int:
        deleted = 0
        for key in keys:
            if self._data.pop(key, None) is not None:
                deleted += 1
        return deleted

    async def keys(self, pattern: str = "*") -> List[str]:
        return [key for key in self._data if fnmatch.fnmatchcase(key, pattern)]


class RedisStore(KeyValueStore):
    """基于Redis的存储，值以JSON保存"""

    def __init__(self, redis_ops: Optional[RedisOperations] = None):
        self.redis_ops = redis_ops or RedisOperations()

    async def get(self, key: str) -> Optional[Any]:
        return await self.redis_ops.get(key)

    async def set(self, key: str, value: Any) -> bool:
        # 永久保存，按日期新鲜度判断是否使用
        return await self.redis_ops.set(key, value)

    async def delete(self, *keys: str) -> int:
        return await self.redis_ops.delete(*keys)

    async def keys(self, pattern: str = "*") -> List[str]:
        return await self.redis_ops.keys(pattern)


def create_store(backend: Optional[str] = None) -> KeyValueStore:
    """根据配置创建存储后端"""
    backend = (backend or get_cache_config().backend).lower()
    if backend == "redis":
        return RedisStore()
    if backend == "memory":
        logging.info("使用内存缓存，进程退出后缓存数据将丢失")
        return MemoryStore()
    raise ConfigurationError(f"不支持的缓存后端: {backend}", {"backend": backend})
