"""
限号解析模块

提供限号数据模型、页面抓取以及当日/一周解析。
查询服务位于 restriction_service 模块。
"""

from .restriction_enums import OutcomeKind, Parity
from .restriction_models import (
    WEEK_DAYS,
    CacheEntry,
    DailyLimitResult,
    RestrictionOutcome,
    RestrictionRecord,
    WeekdayLimit,
    WeeklyLimitResult,
    WeeklySchedule,
)
from .restriction_parse import PageText, short_limit_info
from .page_fetcher import PageFetcher
from .daily_extractor import extract_daily
from .weekly_extractor import extract_weekly

__all__ = [
    "OutcomeKind",
    "Parity",
    "WEEK_DAYS",
    "CacheEntry",
    "DailyLimitResult",
    "RestrictionOutcome",
    "RestrictionRecord",
    "WeekdayLimit",
    "WeeklyLimitResult",
    "WeeklySchedule",
    "PageText",
    "short_limit_info",
    "PageFetcher",
    "extract_daily",
    "extract_weekly",
]
