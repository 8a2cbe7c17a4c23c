"""
错误处理工具模块

统一导出异常、错误分类、错误收集器和装饰器
"""

from xianhao.base.error_category import ErrorCategory
from xianhao.base.error_collector import ErrorCollector, error_collector
from xianhao.base.error_decorators import with_error_handling
from xianhao.base.error_enums import ErrorSeverity
from xianhao.base.error_exceptions import (
    XianhaoError,
    ConfigurationError,
    NetworkError,
    RetryableError,
    RedirectDetectedError,
    CacheError,
    RedisError,
)


def get_error_handling_status():
    """获取错误处理系统状态"""
    summary = error_collector.get_error_summary()
    return {
        "status": "healthy",
        "total_errors": summary.get("total_errors", 0),
        "error_types": summary.get("error_counts", {}),
        "recent_errors": len(summary.get("recent_errors", [])),
    }


__all__ = [
    # 异常类
    "XianhaoError",
    "ConfigurationError",
    "NetworkError",
    "RetryableError",
    "RedirectDetectedError",
    "CacheError",
    "RedisError",
    # 枚举类
    "ErrorSeverity",
    # 工具类
    "ErrorCategory",
    "ErrorCollector",
    # 装饰器
    "with_error_handling",
    # 工具函数
    "get_error_handling_status",
    # 全局实例
    "error_collector",
]
