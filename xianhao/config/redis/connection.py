"""
Redis连接管理模块

提供Redis连接池和健康检查
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import redis.asyncio as aioredis

from xianhao.config.config import RedisConfig, get_redis_config
from xianhao.config.redis.redis_errors import RedisConnectionError


class RedisConnectionManager:
    """Redis连接管理器"""

    def __init__(self, config: Optional[RedisConfig] = None):
        self._config = config
        self._pool: Optional[aioredis.ConnectionPool] = None
        self._client: Optional[aioredis.Redis] = None
        self._connection_lock = asyncio.Lock()

    @property
    def config(self) -> RedisConfig:
        # 延迟读取配置，避免导入时就加载配置文件
        if self._config is None:
            self._config = get_redis_config()
        return self._config

    async def initialize(self) -> bool:
        """初始化Redis连接"""
        try:
            async with self._connection_lock:
                if self._client is not None:
                    return True

                self._pool = aioredis.ConnectionPool(
                    host=self.config.host,
                    port=self.config.port,
                    db=self.config.db,
                    password=self.config.password,
                    max_connections=self.config.connection_pool_size,
                    retry_on_timeout=True,
                    socket_timeout=5,
                    socket_connect_timeout=5,
                    health_check_interval=30,
                    decode_responses=True,
                )
                self._client = aioredis.Redis(connection_pool=self._pool)

                await self._test_connection()

                logging.info(
                    f"Redis连接初始化成功: {self.config.host}:{self.config.port}/{self.config.db}"
                )
                return True

        except Exception as e:
            logging.error(f"Redis连接初始化失败: {e}")
            await self.close()
            return False

    async def _test_connection(self):
        """测试Redis连接"""
        try:
            await self._client.ping()
            logging.debug("Redis连接测试成功")
        except Exception as e:
            raise RedisConnectionError(f"Redis连接测试失败: {e}")

    async def close(self):
        """关闭Redis连接"""
        try:
            if self._client:
                await self._client.aclose()
                self._client = None

            if self._pool:
                await self._pool.disconnect()
                self._pool = None

            logging.info("Redis连接已关闭")

        except Exception as e:
            logging.error(f"关闭Redis连接时发生错误: {e}")

    @property
    def client(self) -> aioredis.Redis:
        """获取异步Redis客户端"""
        if self._client is None:
            raise RedisConnectionError("Redis连接未初始化")
        return self._client

    async def health_check(self) -> Dict[str, Any]:
        """Redis健康检查"""
        try:
            if self._client is None:
                return {"status": "disconnected", "error": "Redis客户端未初始化"}

            start_time = asyncio.get_running_loop().time()
            await self._client.ping()
            ping_time = (asyncio.get_running_loop().time() - start_time) * 1000

            return {
                "status": "healthy",
                "ping_ms": round(ping_time, 2),
                "config": {
                    "host": self.config.host,
                    "port": self.config.port,
                    "db": self.config.db,
                },
            }

        except Exception as e:
            return {"status": "unhealthy", "error": str(e)}


# 全局Redis连接管理器实例
redis_manager = RedisConnectionManager()


async def get_redis_client() -> aioredis.Redis:
    """获取Redis客户端的快捷函数"""
    if redis_manager._client is None:
        if not await redis_manager.initialize():
            raise RedisConnectionError("无法连接Redis")
    return redis_manager.client


async def close_redis():
    """关闭Redis连接的快捷函数"""
    await redis_manager.close()
