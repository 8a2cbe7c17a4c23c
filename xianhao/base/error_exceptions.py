"""
限号查询系统异常定义
"""

from datetime import datetime
from typing import Any, Dict, Optional


class XianhaoError(Exception):
    """系统基础异常"""

    def __init__(
        self, message: str, error_code: str = None, details: Dict[str, Any] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "UNKNOWN_ERROR"
        self.details = details or {}
        self.timestamp = datetime.now()


class ConfigurationError(XianhaoError):
    """配置错误"""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(message, "CONFIG_ERROR", details)


class NetworkError(XianhaoError):
    """网络错误：请求不可达或重试耗尽"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Dict[str, Any] = None,
    ):
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, "NETWORK_ERROR", details)

    @property
    def status_code(self) -> Optional[int]:
        return self.details.get("status_code")


class RetryableError(XianhaoError):
    """可重试的错误"""

    def __init__(
        self,
        message: str,
        retry_after: int = 0,
        details: Dict[str, Any] = None,
        error_code: str = "RETRYABLE_ERROR",
    ):
        details = details or {}
        details["retry_after"] = retry_after
        super().__init__(message, error_code, details)


class RedirectDetectedError(RetryableError):
    """搜索引擎返回了跳转/过渡页，只在抓取器内部使用"""

    def __init__(self, message: str, url: str = "", body_length: int = 0):
        super().__init__(
            message,
            details={"url": url, "body_length": body_length},
            error_code="REDIRECT_DETECTED",
        )


class CacheError(XianhaoError):
    """缓存操作错误"""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(message, "CACHE_ERROR", details)


class RedisError(XianhaoError):
    """Redis操作错误"""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(message, "REDIS_ERROR", details)
