"""
限号缓存服务模块

按城市保存带日期戳的缓存条目，负责新鲜度判断和当日/一周数据的合并
"""

import logging
import time
from datetime import date
from typing import Dict, Optional

from xianhao.base.error_handler import CacheError, RedisError, with_error_handling
from xianhao.config import get_cache_config
from xianhao.service.cache.kv_store import KeyValueStore, create_store
from xianhao.service.restriction.restriction_models import (
    WEEK_DAYS,
    CacheEntry,
    RestrictionRecord,
    WeeklySchedule,
)


class RestrictionCache:
    """限号缓存"""

    def __init__(
        self, kv_store: Optional[KeyValueStore] = None, key_prefix: Optional[str] = None
    ):
        self.kv_store = kv_store or create_store()
        self.key_prefix = (
            key_prefix if key_prefix is not None else get_cache_config().key_prefix
        )

    def _key(self, city: str) -> str:
        return f"{self.key_prefix}{city}"

    @with_error_handling(
        exceptions=(CacheError, RedisError, Exception),
        default_return=None,
    )
    async def lookup(self, city: str) -> Optional[CacheEntry]:
        """读取城市的缓存条目，未命中或数据损坏时返回None"""
        data = await self.kv_store.get(self._key(city))
        if not data:
            logging.debug(f"限号缓存未命中: {city}")
            return None

        try:
            entry = CacheEntry.from_dict(data)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logging.warning(f"限号缓存数据损坏，按未命中处理: {city}, error={e}")
            return None

        logging.debug(f"限号缓存命中: {city} ({entry.stamp_date})")
        return entry

    @with_error_handling(
        exceptions=(CacheError, RedisError, Exception),
        default_return=False,
    )
    async def store(self, city: str, entry: CacheEntry) -> bool:
        """整体覆盖写入缓存条目，重复写入结果相同"""
        success = await self.kv_store.set(self._key(city), entry.to_dict())
        if success:
            logging.debug(f"限号缓存已更新: {city} -> {entry.today.encode()}")
        else:
            logging.warning(f"限号缓存写入失败: {city}")
        return success

    @staticmethod
    def is_fresh(entry: Optional[CacheEntry], today: Optional[date] = None) -> bool:
        """日期戳为今天的条目才是新鲜的"""
        if entry is None:
            return False
        return entry.stamp_date == (today or date.today())

    def build_entry(
        self,
        city: str,
        today_record: RestrictionRecord,
        fresh_weekly: Optional[WeeklySchedule],
        previous: Optional[CacheEntry],
        today: Optional[date] = None,
        fetched_at: Optional[float] = None,
    ) -> CacheEntry:
        """
        合并新的当日结果与一周安排

        - 一周安排从旧条目继承，即使旧条目已过期
        - 新解析的完整一周安排替换继承值，不完整的直接忽略
        - 新一周安排中今天不是不限行时，以它为准覆盖当日结果，保留当日的时段
        """
        today = today or date.today()

        weekly = WeeklySchedule(city)
        if previous and previous.weekly.is_complete():
            weekly = WeeklySchedule(city, dict(previous.weekly.entries))

        record = today_record
        if fresh_weekly is not None and fresh_weekly.is_complete():
            weekly = fresh_weekly
            weekly_today = fresh_weekly.get(WEEK_DAYS[today.weekday()])
            if (
                weekly_today is not None
                and not weekly_today.is_unrestricted
                and weekly_today != today_record.outcome
            ):
                logging.info(
                    f"{city}使用一周安排中今天的数据: {today_record.outcome} -> {weekly_today}"
                )
                time_window = None if today_record.outcome.is_failed else today_record.time_window
                record = RestrictionRecord(city, today, weekly_today, time_window)
        elif fresh_weekly is not None and not fresh_weekly.is_empty():
            logging.warning(
                f"{city}一周安排不完整({fresh_weekly.workday_count}个工作日)，不予保存"
            )

        return CacheEntry(
            city=city,
            stamp_date=today,
            today=record,
            weekly=weekly,
            fetched_at=fetched_at if fetched_at is not None else time.time(),
        )

    @with_error_handling(
        exceptions=(CacheError, RedisError, Exception),
        default_return={"deleted": 0},
    )
    async def clear(self, city: Optional[str] = None) -> Dict[str, int]:
        """清除指定城市或全部城市的缓存"""
        if city:
            keys = [self._key(city)]
        else:
            keys = await self.kv_store.keys(f"{self.key_prefix}*")

        deleted = await self.kv_store.delete(*keys) if keys else 0
        logging.info(f"已清除限号缓存: {city or '全部城市'}，共{deleted}条")
        return {"deleted": deleted}
