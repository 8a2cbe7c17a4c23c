"""
限号数据模型单元测试
"""

from datetime import date

import pytest

from xianhao.service.restriction.restriction_enums import OutcomeKind, Parity
from xianhao.service.restriction.restriction_models import (
    CacheEntry,
    DailyLimitResult,
    RestrictionOutcome,
    RestrictionRecord,
    WeekdayLimit,
    WeeklySchedule,
    encode_limit_info,
    weekday_name,
)

WEDNESDAY = date(2025, 8, 13)


@pytest.mark.unit
class TestRestrictionOutcome:
    """RestrictionOutcome 测试类"""

    @pytest.mark.parametrize(
        "outcome, text",
        [
            (RestrictionOutcome.unrestricted(), "不限行"),
            (RestrictionOutcome.digit_pair(3, 8), "3和8"),
            (RestrictionOutcome.digit_pair(5), "5"),
            (RestrictionOutcome.odd_even(Parity.ODD), "单号限行"),
            (RestrictionOutcome.odd_even(Parity.ALTERNATING), "单双号限行"),
            (RestrictionOutcome.unknown(), "未知"),
            (RestrictionOutcome.extraction_failed(), "获取限号信息失败"),
            (
                RestrictionOutcome.extraction_failed("超时"),
                "获取限号信息失败: 超时",
            ),
        ],
    )
    def test_encode_and_decode(self, outcome, text):
        """测试编码文本与还原"""
        assert outcome.encode() == text
        assert RestrictionOutcome.decode(text) == outcome

    def test_digit_pair_out_of_range(self):
        """测试尾号超出0-9时报错"""
        with pytest.raises(ValueError):
            RestrictionOutcome.digit_pair(3, 10)

    def test_decode_unknown_text(self):
        """测试无法识别的文本"""
        with pytest.raises(ValueError):
            RestrictionOutcome.decode("随便写的")

    def test_flags(self):
        assert RestrictionOutcome.unrestricted().is_unrestricted
        assert RestrictionOutcome.extraction_failed("x").is_failed
        assert not RestrictionOutcome.digit_pair(1, 6).is_failed


@pytest.mark.unit
class TestRestrictionRecord:
    """RestrictionRecord 测试类"""

    def test_encode_with_window(self):
        record = RestrictionRecord(
            "北京", WEDNESDAY, RestrictionOutcome.digit_pair(3, 8), "07:00-20:00"
        )
        assert record.encode() == "3和8 (07:00-20:00)"

    def test_unrestricted_window_marked_as_workday(self):
        """测试不限行时时段标注为工作日"""
        text = encode_limit_info(RestrictionOutcome.unrestricted(), "07:00-20:00")
        assert text == "不限行 (工作日07:00-20:00)"

    def test_failed_outcome_never_carries_window(self):
        text = encode_limit_info(
            RestrictionOutcome.extraction_failed("网络错误"), "07:00-20:00"
        )
        assert text == "获取限号信息失败: 网络错误"

    @pytest.mark.parametrize(
        "text",
        [
            "3和8 (07:00-20:00)",
            "不限行 (工作日07:00-20:00)",
            "双号限行",
            "获取限号信息失败: 页面异常 (重定向)",
        ],
    )
    def test_decode_restores_encoded_text(self, text):
        """测试还原后重新编码得到相同文本"""
        record = RestrictionRecord.decode("北京", WEDNESDAY, text)
        assert record.encode() == text

    def test_decode_failure_keeps_parenthesis_in_reason(self):
        record = RestrictionRecord.decode(
            "北京", WEDNESDAY, "获取限号信息失败: 页面异常 (重定向)"
        )
        assert record.outcome.kind == OutcomeKind.EXTRACTION_FAILED
        assert record.outcome.reason == "页面异常 (重定向)"
        assert record.time_window is None


@pytest.mark.unit
class TestWeeklySchedule:
    """WeeklySchedule 测试类"""

    def _workdays(self):
        return [
            RestrictionOutcome.digit_pair(4, 9),
            RestrictionOutcome.digit_pair(5, 0),
            RestrictionOutcome.digit_pair(1, 6),
            RestrictionOutcome.digit_pair(2, 7),
            RestrictionOutcome.digit_pair(3, 8),
        ]

    def test_from_workdays_fills_weekend(self):
        """测试周末自动填充为不限行"""
        schedule = WeeklySchedule.from_workdays("北京", self._workdays())

        assert schedule.is_complete()
        assert schedule.get("周三") == RestrictionOutcome.digit_pair(1, 6)
        assert schedule.get("周六").is_unrestricted
        assert schedule.get("周日").is_unrestricted

    def test_from_workdays_incomplete_is_empty(self):
        schedule = WeeklySchedule.from_workdays("北京", self._workdays()[:4])

        assert schedule.is_empty()
        assert not schedule.is_complete()

    def test_decode_rejects_unknown_day(self):
        with pytest.raises(ValueError):
            WeeklySchedule.decode("北京", {"周八": "3和8"})


@pytest.mark.unit
class TestCacheEntry:
    """CacheEntry 测试类"""

    def test_to_dict_and_back(self):
        entry = CacheEntry(
            city="北京",
            stamp_date=WEDNESDAY,
            today=RestrictionRecord(
                "北京", WEDNESDAY, RestrictionOutcome.digit_pair(1, 6), "07:00-20:00"
            ),
            weekly=WeeklySchedule.from_workdays(
                "北京", [RestrictionOutcome.digit_pair(d, d + 5) for d in range(5)]
            ),
            fetched_at=1755043200.0,
        )

        data = entry.to_dict()
        assert data["stamp_date"] == "2025-08-13"
        assert data["today"] == "1和6 (07:00-20:00)"
        assert data["weekly"]["周一"] == "0和5"

        assert CacheEntry.from_dict(data) == entry

    def test_weekly_checked_roundtrip(self):
        entry = CacheEntry(
            city="北京",
            stamp_date=WEDNESDAY,
            today=RestrictionRecord("北京", WEDNESDAY, RestrictionOutcome.digit_pair(1, 6)),
            weekly=WeeklySchedule("北京"),
            fetched_at=1755043200.0,
            weekly_checked=WEDNESDAY,
        )

        data = entry.to_dict()

        assert data["weekly_checked"] == "2025-08-13"
        assert CacheEntry.from_dict(data) == entry
        del data["weekly_checked"]
        assert CacheEntry.from_dict(data).weekly_checked is None

    def test_from_dict_missing_field(self):
        with pytest.raises(KeyError):
            CacheEntry.from_dict({"city": "北京"})


@pytest.mark.unit
class TestResultViews:
    """查询结果视图测试类"""

    def test_weekday_name(self):
        assert weekday_name(WEDNESDAY) == "周三"

    def test_weekday_limit_without_data(self):
        item = WeekdayLimit("周二", 1, None)
        assert item.to_dict() == {
            "day": "周二",
            "dayIndex": 1,
            "limitInfo": "暂无信息",
            "isToday": False,
        }

    def test_daily_result_to_dict(self):
        result = DailyLimitResult(
            "北京",
            RestrictionRecord(
                "北京", WEDNESDAY, RestrictionOutcome.digit_pair(1, 6), "07:00-20:00"
            ),
        )
        assert result.to_dict() == {
            "city": "北京",
            "limitInfo": "1和6 (07:00-20:00)",
            "shortLimitInfo": "1,6",
        }
