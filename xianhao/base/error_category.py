"""
错误分类管理
"""

from xianhao.base.error_enums import ErrorSeverity
from xianhao.base.error_exceptions import (
    CacheError,
    ConfigurationError,
    NetworkError,
    RedisError,
    RetryableError,
)


class ErrorCategory:
    """错误分类管理"""

    SEVERITY_MAPPING = {
        ConfigurationError: ErrorSeverity.HIGH,
        NetworkError: ErrorSeverity.MEDIUM,
        RetryableError: ErrorSeverity.LOW,
        CacheError: ErrorSeverity.MEDIUM,
        RedisError: ErrorSeverity.HIGH,
    }

    @classmethod
    def get_severity(cls, error: Exception) -> ErrorSeverity:
        """获取错误严重级别，子类沿继承链查找"""
        for error_type in type(error).__mro__:
            if error_type in cls.SEVERITY_MAPPING:
                return cls.SEVERITY_MAPPING[error_type]
        return ErrorSeverity.MEDIUM

    @classmethod
    def get_log_level(cls, error: Exception) -> str:
        """根据严重级别确定日志级别"""
        return {
            ErrorSeverity.CRITICAL: "critical",
            ErrorSeverity.HIGH: "error",
            ErrorSeverity.MEDIUM: "warning",
            ErrorSeverity.LOW: "info",
        }[cls.get_severity(error)]
