"""
错误处理相关枚举定义
"""

from enum import Enum


class ErrorSeverity(Enum):
    """错误严重级别"""

    LOW = "low"  # 轻微错误，记录但不影响结果
    MEDIUM = "medium"  # 可降级处理，返回兜底值
    HIGH = "high"  # 影响主要功能，需要关注
    CRITICAL = "critical"  # 系统无法正常运行
