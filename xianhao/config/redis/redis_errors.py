"""
Redis 异常定义
"""

from xianhao.base.error_handler import RedisError


class RedisConnectionError(RedisError):
    """Redis连接错误"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, details)
