"""
错误处理装饰器
"""

import logging
from functools import wraps
from typing import Any, Type, Union

from xianhao.base.error_category import ErrorCategory
from xianhao.base.error_collector import error_collector


def with_error_handling(
    exceptions: Union[Type[Exception], tuple] = Exception,
    default_return: Any = None,
    log_level: str = "auto",  # auto表示根据错误级别自动确定
):
    """
    异步函数的错误处理装饰器：捕获异常后记录日志、收集错误并返回兜底值

    Args:
        exceptions: 需要捕获的异常类型，其余异常照常抛出
        default_return: 异常时的默认返回值
        log_level: 日志级别，"auto"表示根据错误严重性自动确定
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except exceptions as e:
                logger = logging.getLogger(func.__module__)
                context = f"{func.__module__}.{func.__name__}"
                actual_log_level = (
                    ErrorCategory.get_log_level(e) if log_level == "auto" else log_level
                )
                getattr(logger, actual_log_level, logger.warning)(f"{context} 执行失败: {e}")
                error_collector.record_error(e, context)
                return default_return

        return wrapper

    return decorator
