"""
限号业务服务模块

对外提供当日限号和一周限号两个查询，任何情况下都返回可展示的结果
"""

import logging
import time
from dataclasses import replace
from datetime import date
from typing import Callable, Optional

from xianhao.base.error_handler import NetworkError, error_collector
from xianhao.base.logger import get_structured_logger
from xianhao.config import CityConfig, SearchConfig, get_city_config, get_search_config
from xianhao.service.cache.cache_service import RestrictionCache
from xianhao.service.city.city_resolver import (
    CityResolver,
    ConfiguredCityResolver,
    is_weekend_unrestricted,
    resolve_city_with_timeout,
)
from xianhao.service.restriction.daily_extractor import extract_daily
from xianhao.service.restriction.page_fetcher import PageFetcher
from xianhao.service.restriction.restriction_models import (
    WEEK_DAYS,
    CacheEntry,
    DailyLimitResult,
    RestrictionOutcome,
    RestrictionRecord,
    WeekdayLimit,
    WeeklyLimitResult,
    WeeklySchedule,
)
from xianhao.service.restriction.restriction_parse import PageText
from xianhao.service.restriction.weekly_extractor import extract_weekly

structured_logger = get_structured_logger(__name__)


class RestrictionService:
    """限号查询服务"""

    def __init__(
        self,
        cache: Optional[RestrictionCache] = None,
        fetcher: Optional[PageFetcher] = None,
        city_resolver: Optional[CityResolver] = None,
        search_config: Optional[SearchConfig] = None,
        city_config: Optional[CityConfig] = None,
        today_provider: Callable[[], date] = date.today,
        clock: Callable[[], float] = time.time,
    ):
        self.search_config = search_config or get_search_config()
        self.city_config = city_config or get_city_config()
        self.cache = cache or RestrictionCache()
        self.fetcher = fetcher or PageFetcher(self.search_config)
        self.city_resolver = city_resolver or ConfiguredCityResolver(self.city_config)
        self._today = today_provider
        self._clock = clock

    def _weekend_rule(self, city: str) -> bool:
        return is_weekend_unrestricted(city, self.city_config.weekend_rules)

    async def _resolve_city(self, city: Optional[str], force_refresh: bool) -> str:
        if city:
            return city.strip()
        return await resolve_city_with_timeout(
            self.city_resolver,
            force_refresh=force_refresh,
            timeout=self.city_config.resolve_timeout,
            default_city=self.city_config.default_city,
        )

    def _failed_record(self, city: str, reason: str) -> RestrictionRecord:
        return RestrictionRecord(
            city, self._today(), RestrictionOutcome.extraction_failed(reason)
        )

    async def _refresh(
        self, city: str, today: date, previous: Optional[CacheEntry]
    ) -> CacheEntry:
        """抓取页面并解析当日与一周数据，合并后写入缓存"""
        start_time = time.perf_counter()
        page = PageText.from_html(await self.fetcher.fetch(city))
        fetched_at = self._clock()

        record = extract_daily(
            city,
            page,
            today,
            self._weekend_rule,
            weekly_table_cities=self.city_config.weekly_table_cities,
        )
        weekly = extract_weekly(city, page)
        entry = self.cache.build_entry(
            city, record, weekly, previous, today, fetched_at=fetched_at
        )
        await self.cache.store(city, entry)

        structured_logger.log_business_operation(
            "refresh_restriction",
            city,
            success=not entry.today.outcome.is_failed,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            extra_data={
                "limit_info": entry.today.encode(),
                "weekly_days": entry.weekly.workday_count,
            },
        )
        return entry

    async def get_daily(
        self, city: Optional[str] = None, force_refresh: bool = False
    ) -> DailyLimitResult:
        """获取当日限号，同一天内只抓取一次（除非强制刷新）"""
        resolved_city = None
        try:
            resolved_city = await self._resolve_city(city, force_refresh)
            today = self._today()
            previous = await self.cache.lookup(resolved_city)

            if not force_refresh and self.cache.is_fresh(previous, today):
                logging.info(f"使用{resolved_city}当日缓存: {previous.today.encode()}")
                return DailyLimitResult(resolved_city, previous.today)

            entry = await self._refresh(resolved_city, today, previous)
            return DailyLimitResult(resolved_city, entry.today)

        except NetworkError as e:
            # 网络失败不写缓存，下次调用会重新抓取
            logging.error(f"获取{resolved_city}限号页面失败: {e.message}")
            error_collector.record_error(e, "restriction_service.get_daily")
            return DailyLimitResult(
                resolved_city, self._failed_record(resolved_city, e.message)
            )

        except Exception as e:
            default_city = self.city_config.default_city
            logging.error(f"获取限号信息异常，回退默认城市{default_city}: {e}")
            error_collector.record_error(e, "restriction_service.get_daily")
            return DailyLimitResult(default_city, self._failed_record(default_city, str(e)))

    async def _fetch_weekly(self, city: str, entry: CacheEntry, today: date) -> CacheEntry:
        """一周安排仍为空时，用一周关键词再抓取一次，每个日期只抓一次"""
        try:
            page = await self.fetcher.fetch(city, keyword=self.search_config.weekly_keyword)
        except NetworkError as e:
            logging.warning(f"获取{city}一周限行页面失败: {e.message}")
            return entry

        weekly = extract_weekly(city, page)
        if weekly.is_complete():
            updated = self.cache.build_entry(
                city, entry.today, weekly, entry, today, fetched_at=entry.fetched_at
            )
        else:
            logging.info(f"{city}页面没有完整的一周安排，今天不再抓取")
            updated = entry
        updated = replace(updated, weekly_checked=today)
        await self.cache.store(city, updated)
        return updated

    def _build_weekly_view(
        self, city: str, today_record: RestrictionRecord, weekly: WeeklySchedule, today: date
    ) -> WeeklyLimitResult:
        today_index = today.weekday()
        items = []
        for index, day in enumerate(WEEK_DAYS):
            if index == today_index:
                # 今天以当日记录为准
                items.append(
                    WeekdayLimit(
                        day,
                        index,
                        today_record.outcome,
                        is_today=True,
                        time_window=today_record.time_window,
                    )
                )
            else:
                items.append(WeekdayLimit(day, index, weekly.get(day)))
        return WeeklyLimitResult(city, items)

    async def get_weekly(
        self, city: Optional[str] = None, force_refresh: bool = False
    ) -> WeeklyLimitResult:
        """获取一周限号，先保证当日数据新鲜，再补全一周安排"""
        try:
            daily = await self.get_daily(city, force_refresh)
            resolved_city = daily.city
            today = self._today()

            entry = await self.cache.lookup(resolved_city)
            if not self.cache.is_fresh(entry, today):
                # 当日抓取失败未写缓存，用已有的一周安排兜底
                weekly = entry.weekly if entry else WeeklySchedule(resolved_city)
                return self._build_weekly_view(resolved_city, daily.limit_info, weekly, today)

            if entry.weekly.is_empty() and entry.weekly_checked != today:
                entry = await self._fetch_weekly(resolved_city, entry, today)

            return self._build_weekly_view(resolved_city, entry.today, entry.weekly, today)

        except Exception as e:
            default_city = self.city_config.default_city
            logging.error(f"获取一周限号信息异常，回退默认城市{default_city}: {e}")
            error_collector.record_error(e, "restriction_service.get_weekly")
            failed = RestrictionOutcome.extraction_failed(str(e))
            today_index = self._today().weekday()
            return WeeklyLimitResult(
                default_city,
                [
                    WeekdayLimit(day, index, failed, is_today=index == today_index)
                    for index, day in enumerate(WEEK_DAYS)
                ],
            )

    async def clear_cache(self, city: Optional[str] = None):
        """清除缓存"""
        return await self.cache.clear(city)


_restriction_service: Optional[RestrictionService] = None


def get_restriction_service() -> RestrictionService:
    """获取全局限号服务实例"""
    global _restriction_service
    if _restriction_service is None:
        _restriction_service = RestrictionService()
    return _restriction_service
