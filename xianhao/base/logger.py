"""日志初始化工具

- 读取 `config.yaml` 中的 `global.log.level` 字段，动态设置日志级别。
- 支持结构化日志记录，便于检索抓取和解析过程。
- 统一格式：`[LEVEL] YYYY-MM-DD HH:MM:SS 模块名: 消息`。

使用方法：只需在程序入口 `import xianhao.base.logger`，即可完成全局初始化。
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

from xianhao.base.log_category import LogCategory


class StructuredLogger:
    """结构化日志记录器"""

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)

    def log_structured(
        self,
        level: int,
        message: str,
        category: LogCategory = LogCategory.SYSTEM,
        extra_data: Optional[Dict[str, Any]] = None,
        city: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        """记录结构化日志"""
        structured_data = {
            "timestamp": datetime.now().isoformat(),
            "category": category.value,
            "message": message,
            "level": logging.getLevelName(level),
        }

        if city:
            structured_data["city"] = city
        if operation:
            structured_data["operation"] = operation
        if extra_data:
            structured_data["extra"] = extra_data

        self.logger.log(
            level, f"STRUCTURED: {json.dumps(structured_data, ensure_ascii=False)}"
        )

    def log_api_call(
        self,
        method: str,
        endpoint: str,
        status_code: int,
        response_time_ms: float,
        extra_data: Optional[Dict[str, Any]] = None,
    ):
        """记录外部请求/接口调用日志"""
        api_data = {
            "method": method,
            "endpoint": endpoint,
            "status_code": status_code,
            "response_time_ms": response_time_ms,
        }

        if extra_data:
            api_data.update(extra_data)

        level = logging.INFO if 200 <= status_code < 400 else logging.WARNING

        self.log_structured(
            level=level,
            message=f"API调用: {method} {endpoint} -> {status_code} ({response_time_ms}ms)",
            category=LogCategory.API,
            extra_data=api_data,
            operation="api_call",
        )

    def log_business_operation(
        self,
        operation: str,
        city: str,
        success: bool,
        duration_ms: Optional[float] = None,
        extra_data: Optional[Dict[str, Any]] = None,
    ):
        """记录业务操作日志"""
        business_data = {"success": success, "operation": operation}

        if duration_ms is not None:
            business_data["duration_ms"] = duration_ms
        if extra_data:
            business_data.update(extra_data)

        level = logging.INFO if success else logging.WARNING
        message = f"业务操作{'成功' if success else '失败'}: {operation}"

        self.log_structured(
            level=level,
            message=message,
            category=LogCategory.BUSINESS,
            extra_data=business_data,
            city=city,
            operation=operation,
        )


def get_structured_logger(name: str) -> StructuredLogger:
    """获取结构化日志记录器"""
    return StructuredLogger(name)


def _get_level_from_config() -> int:
    """从配置文件读取日志等级，默认 INFO。"""
    try:
        from xianhao.config.config import config_manager

        config = config_manager.load_config()
        level_str: str = config.global_config.log.level.upper()
    except Exception:
        level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    return {
        "CRITICAL": logging.CRITICAL,
        "ERROR": logging.ERROR,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "INFO": logging.INFO,
        "DEBUG": logging.DEBUG,
        "NOTSET": logging.NOTSET,
    }.get(level_str, logging.INFO)


logging.basicConfig(
    level=_get_level_from_config(),
    format="[%(levelname)s] %(asctime)s %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    force=True,
)
