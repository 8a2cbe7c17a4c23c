"""
错误收集器
"""

from datetime import datetime
from typing import Any, Dict, List

from xianhao.base.error_exceptions import XianhaoError


class ErrorCollector:
    """错误收集器，用于监控和统计错误"""

    def __init__(self, max_records: int = 100):
        self.max_records = max_records
        self.errors: List[Dict[str, Any]] = []
        self.error_counts: Dict[str, int] = {}

    def record_error(self, error: Exception, context: str = ""):
        """记录错误"""
        error_info = {
            "timestamp": datetime.now().isoformat(),
            "type": type(error).__name__,
            "message": str(error),
            "context": context,
        }

        if isinstance(error, XianhaoError):
            error_info.update(
                {"error_code": error.error_code, "details": error.details}
            )

        self.errors.append(error_info)

        error_type = error_info["type"]
        self.error_counts[error_type] = self.error_counts.get(error_type, 0) + 1

        if len(self.errors) > self.max_records:
            self.errors = self.errors[-self.max_records :]

    def get_error_summary(self) -> Dict[str, Any]:
        """获取错误统计摘要"""
        return {
            "total_errors": len(self.errors),
            "error_counts": self.error_counts.copy(),
            "recent_errors": self.errors[-10:] if self.errors else [],
        }

    def clear_errors(self):
        """清除错误记录"""
        self.errors.clear()
        self.error_counts.clear()


# 全局错误收集器实例
error_collector = ErrorCollector()
