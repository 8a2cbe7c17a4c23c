"""
Redis基础操作模块

提供JSON序列化的键值读写封装
"""

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, List, Optional

import redis.asyncio as aioredis

from xianhao.config.redis.connection import get_redis_client


class RedisOperations:
    """Redis基础操作类"""

    def __init__(self, client: Optional[aioredis.Redis] = None):
        self._client = client

    async def _get_client(self) -> aioredis.Redis:
        """获取Redis客户端"""
        if self._client is None:
            return await get_redis_client()
        return self._client

    async def set(self, key: str, value: Any) -> bool:
        """设置键值对，不设置过期时间"""
        try:
            client = await self._get_client()
            serialized_value = self._serialize_value(value)
            result = await client.set(key, serialized_value)
            return bool(result)

        except Exception as e:
            logging.error(f"Redis SET操作失败: key={key}, error={e}")
            return False

    async def get(self, key: str, default: Any = None) -> Any:
        """获取键值，失败时短暂等待后重试"""
        max_retries = 2
        for attempt in range(max_retries + 1):
            try:
                client = await self._get_client()
                value = await client.get(key)

                if value is None:
                    return default

                return self._deserialize_value(value)

            except Exception as e:
                if attempt < max_retries:
                    logging.warning(
                        f"Redis GET操作失败，重试 {attempt + 1}/{max_retries}: key={key}, error={e}"
                    )
                    await asyncio.sleep(0.1)
                else:
                    logging.error(f"Redis GET操作失败: key={key}, error={e}")
                    return default

    async def delete(self, *keys: str) -> int:
        """删除键"""
        if not keys:
            return 0
        try:
            client = await self._get_client()
            return await client.delete(*keys)
        except Exception as e:
            logging.error(f"Redis DELETE操作失败: keys={keys}, error={e}")
            return 0

    async def keys(self, pattern: str = "*") -> List[str]:
        """获取匹配模式的键列表"""
        try:
            client = await self._get_client()
            keys = await client.keys(pattern)
            return [
                key.decode("utf-8") if isinstance(key, bytes) else str(key)
                for key in keys
            ]
        except Exception as e:
            logging.error(f"Redis KEYS操作失败: pattern={pattern}, error={e}")
            return []

    async def ping(self) -> bool:
        """测试Redis连接"""
        try:
            client = await self._get_client()
            result = await client.ping()
            return result is True or result in (b"PONG", "PONG")
        except Exception as e:
            logging.error(f"Redis PING失败: {e}")
            return False

    def _serialize_value(self, value: Any) -> str:
        """序列化值"""
        if isinstance(value, datetime):
            return json.dumps(value.isoformat(), ensure_ascii=False)
        return json.dumps(value, ensure_ascii=False, default=str)

    def _deserialize_value(self, value: Any) -> Any:
        """反序列化值"""
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        try:
            return json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return value
