"""
限号缓存服务单元测试
"""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from xianhao.base.error_handler import ConfigurationError
from xianhao.config.redis.operations import RedisOperations
from xianhao.service.cache.cache_service import RestrictionCache
from xianhao.service.cache.kv_store import MemoryStore, RedisStore, create_store
from xianhao.service.restriction.restriction_models import (
    CacheEntry,
    RestrictionOutcome,
    RestrictionRecord,
    WeeklySchedule,
)

WEDNESDAY = date(2025, 8, 13)
TUESDAY = date(2025, 8, 12)


def _weekly(city="北京", pairs=((4, 9), (5, 0), (1, 6), (2, 7), (3, 8))):
    return WeeklySchedule.from_workdays(
        city, [RestrictionOutcome.digit_pair(*pair) for pair in pairs]
    )


def _entry(stamp_date=WEDNESDAY, outcome=None, weekly=None):
    return CacheEntry(
        city="北京",
        stamp_date=stamp_date,
        today=RestrictionRecord(
            "北京",
            stamp_date,
            outcome or RestrictionOutcome.digit_pair(1, 6),
            "07:00-20:00",
        ),
        weekly=weekly if weekly is not None else _weekly(),
        fetched_at=1755043200.0,
    )


@pytest.mark.unit
class TestRestrictionCacheStorage:
    """缓存读写测试类"""

    @pytest.mark.asyncio
    async def test_store_and_lookup(self, restriction_cache, memory_store):
        entry = _entry()

        assert await restriction_cache.store("北京", entry) is True
        assert await restriction_cache.lookup("北京") == entry
        assert "test:limit:北京" in memory_store._data

    @pytest.mark.asyncio
    async def test_lookup_miss(self, restriction_cache):
        assert await restriction_cache.lookup("上海") is None

    @pytest.mark.asyncio
    async def test_lookup_corrupt_payload(self, restriction_cache, memory_store):
        """测试缓存数据损坏时按未命中处理"""
        await memory_store.set("test:limit:北京", {"city": "北京", "stamp_date": "bad"})

        assert await restriction_cache.lookup("北京") is None

    @pytest.mark.asyncio
    async def test_lookup_store_error_returns_none(self):
        store = MemoryStore()
        store.get = AsyncMock(side_effect=RuntimeError("存储不可用"))
        cache = RestrictionCache(kv_store=store, key_prefix="test:")

        assert await cache.lookup("北京") is None

    @pytest.mark.asyncio
    async def test_clear_single_and_all(self, restriction_cache):
        await restriction_cache.store("北京", _entry())
        await restriction_cache.store("上海", _entry())
        await restriction_cache.store("广州", _entry())

        assert await restriction_cache.clear("北京") == {"deleted": 1}
        assert await restriction_cache.lookup("北京") is None

        assert await restriction_cache.clear() == {"deleted": 2}
        assert await restriction_cache.lookup("上海") is None

    @pytest.mark.asyncio
    async def test_redis_store_roundtrip(self, fake_redis):
        """测试Redis后端以JSON保存条目"""
        cache = RestrictionCache(
            kv_store=RedisStore(RedisOperations(client=fake_redis)),
            key_prefix="xianhao:limit:",
        )
        entry = _entry()

        await cache.store("北京", entry)

        assert await fake_redis.exists("xianhao:limit:北京")
        assert await fake_redis.ttl("xianhao:limit:北京") == -1
        assert await cache.lookup("北京") == entry
        assert await cache.clear() == {"deleted": 1}

    def test_create_store(self):
        assert isinstance(create_store("memory"), MemoryStore)
        assert isinstance(create_store("redis"), RedisStore)
        with pytest.raises(ConfigurationError):
            create_store("sqlite")


@pytest.mark.unit
class TestRestrictionCacheMerge:
    """新鲜度与合并规则测试类"""

    def test_is_fresh(self):
        assert RestrictionCache.is_fresh(_entry(), WEDNESDAY)
        assert not RestrictionCache.is_fresh(_entry(TUESDAY), WEDNESDAY)
        assert not RestrictionCache.is_fresh(None, WEDNESDAY)

    def test_build_entry_carries_previous_weekly(self, restriction_cache):
        """测试一周安排从过期条目继承"""
        previous = _entry(TUESDAY)
        record = RestrictionRecord("北京", WEDNESDAY, RestrictionOutcome.digit_pair(1, 6))

        entry = restriction_cache.build_entry(
            "北京", record, WeeklySchedule("北京"), previous, WEDNESDAY
        )

        assert entry.stamp_date == WEDNESDAY
        assert entry.today is record
        assert entry.weekly.encode() == previous.weekly.encode()

    def test_build_entry_fresh_weekly_overrides_today(self, restriction_cache):
        """测试新一周安排中今天的数据覆盖当日结果并保留时段"""
        record = RestrictionRecord(
            "北京", WEDNESDAY, RestrictionOutcome.digit_pair(3, 8), "07:00-20:00"
        )

        entry = restriction_cache.build_entry("北京", record, _weekly(), None, WEDNESDAY)

        assert entry.today.outcome == RestrictionOutcome.digit_pair(1, 6)
        assert entry.today.encode() == "1和6 (07:00-20:00)"

    def test_build_entry_fresh_weekly_fills_failed_today(self, restriction_cache):
        record = RestrictionRecord(
            "北京", WEDNESDAY, RestrictionOutcome.extraction_failed("未匹配到限号信息")
        )

        entry = restriction_cache.build_entry("北京", record, _weekly(), None, WEDNESDAY)

        assert entry.today.encode() == "1和6"

    def test_build_entry_unrestricted_weekly_slot_keeps_today(self, restriction_cache):
        weekly = WeeklySchedule.from_workdays(
            "北京",
            [
                RestrictionOutcome.digit_pair(4, 9),
                RestrictionOutcome.digit_pair(5, 0),
                RestrictionOutcome.unrestricted(),
                RestrictionOutcome.digit_pair(2, 7),
                RestrictionOutcome.digit_pair(3, 8),
            ],
        )
        record = RestrictionRecord("北京", WEDNESDAY, RestrictionOutcome.digit_pair(1, 6))

        entry = restriction_cache.build_entry("北京", record, weekly, None, WEDNESDAY)

        assert entry.today is record
        assert entry.weekly.get("周三").is_unrestricted

    def test_build_entry_partial_weekly_ignored(self, restriction_cache):
        """测试不完整的一周安排不覆盖已有安排"""
        previous = _entry(TUESDAY)
        partial = WeeklySchedule(
            "北京",
            {
                "周一": RestrictionOutcome.digit_pair(9, 9),
                "周二": RestrictionOutcome.digit_pair(9, 9),
            },
        )
        record = RestrictionRecord("北京", WEDNESDAY, RestrictionOutcome.digit_pair(1, 6))

        entry = restriction_cache.build_entry("北京", record, partial, previous, WEDNESDAY)

        assert entry.weekly.encode() == previous.weekly.encode()
        assert entry.today is record

    @pytest.mark.asyncio
    async def test_build_entry_applied_twice_is_idempotent(self, restriction_cache):
        """测试同一抓取结果重复写入两次，缓存状态不变"""
        record = RestrictionRecord(
            "北京", WEDNESDAY, RestrictionOutcome.digit_pair(1, 6), "07:00-20:00"
        )
        previous = _entry(TUESDAY)

        first = restriction_cache.build_entry(
            "北京", record, _weekly(), previous, WEDNESDAY, fetched_at=1755043200.0
        )
        await restriction_cache.store("北京", first)
        stored_once = await restriction_cache.lookup("北京")

        second = restriction_cache.build_entry(
            "北京", record, _weekly(), stored_once, WEDNESDAY, fetched_at=1755043200.0
        )
        await restriction_cache.store("北京", second)

        assert second == first
        assert (await restriction_cache.lookup("北京")).to_dict() == stored_once.to_dict()
