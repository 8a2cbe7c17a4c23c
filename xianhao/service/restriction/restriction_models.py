"""
限号服务数据模型

所有模型都可以编码为字符串/字典持久化，并能无损还原。
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from xianhao.service.restriction.restriction_enums import OutcomeKind, Parity

# date.weekday() 的返回值（周一为0）直接作为下标
WEEK_DAYS = ["周一", "周二", "周三", "周四", "周五", "周六", "周日"]
WORK_DAYS = WEEK_DAYS[:5]

UNRESTRICTED_TEXT = "不限行"
UNKNOWN_TEXT = "未知"
FAILED_TEXT = "获取限号信息失败"
NO_INFO_TEXT = "暂无信息"

_DIGITS_RE = re.compile(r"^(\d)(?:和(\d))?$")
_WINDOW_SUFFIX_RE = re.compile(r"^(?P<outcome>.+?) \((?P<workday>工作日)?(?P<window>[^()]+)\)$")


def weekday_name(target_date: date) -> str:
    """获取日期对应的星期文本"""
    return WEEK_DAYS[target_date.weekday()]


@dataclass(frozen=True)
class RestrictionOutcome:
    """单日限号结果"""

    kind: OutcomeKind
    digits: Tuple[int, ...] = ()
    parity: Optional[Parity] = None
    reason: Optional[str] = None

    @classmethod
    def unrestricted(cls) -> "RestrictionOutcome":
        return cls(OutcomeKind.UNRESTRICTED)

    @classmethod
    def digit_pair(cls, first: int, second: Optional[int] = None) -> "RestrictionOutcome":
        digits = (first,) if second is None else (first, second)
        for digit in digits:
            if not 0 <= digit <= 9:
                raise ValueError(f"尾号必须为0-9: {digit}")
        return cls(OutcomeKind.DIGIT_PAIR, digits=digits)

    @classmethod
    def odd_even(cls, parity: Parity) -> "RestrictionOutcome":
        return cls(OutcomeKind.ODD_EVEN, parity=parity)

    @classmethod
    def unknown(cls) -> "RestrictionOutcome":
        return cls(OutcomeKind.UNKNOWN)

    @classmethod
    def extraction_failed(cls, reason: Optional[str] = None) -> "RestrictionOutcome":
        return cls(OutcomeKind.EXTRACTION_FAILED, reason=reason or None)

    @property
    def is_unrestricted(self) -> bool:
        return self.kind == OutcomeKind.UNRESTRICTED

    @property
    def is_failed(self) -> bool:
        return self.kind == OutcomeKind.EXTRACTION_FAILED

    def encode(self) -> str:
        """编码为持久化文本"""
        if self.kind == OutcomeKind.UNRESTRICTED:
            return UNRESTRICTED_TEXT
        if self.kind == OutcomeKind.DIGIT_PAIR:
            return "和".join(str(d) for d in self.digits)
        if self.kind == OutcomeKind.ODD_EVEN:
            return self.parity.value
        if self.kind == OutcomeKind.UNKNOWN:
            return UNKNOWN_TEXT
        if self.reason:
            return f"{FAILED_TEXT}: {self.reason}"
        return FAILED_TEXT

    @classmethod
    def decode(cls, text: str) -> "RestrictionOutcome":
        """从持久化文本还原，无法识别时抛出 ValueError"""
        if text == UNRESTRICTED_TEXT:
            return cls.unrestricted()
        if text == UNKNOWN_TEXT:
            return cls.unknown()
        if text == FAILED_TEXT:
            return cls.extraction_failed()
        if text.startswith(f"{FAILED_TEXT}: "):
            return cls.extraction_failed(text[len(FAILED_TEXT) + 2 :])

        match = _DIGITS_RE.match(text)
        if match:
            second = match.group(2)
            return cls.digit_pair(int(match.group(1)), int(second) if second else None)

        return cls.odd_even(Parity.from_text(text))

    def __str__(self) -> str:
        return self.encode()


def encode_limit_info(outcome: RestrictionOutcome, time_window: Optional[str]) -> str:
    """组合结果与限行时段，如 `3和8 (07:00-20:00)`、`不限行 (工作日07:00-20:00)`"""
    text = outcome.encode()
    if not time_window or outcome.is_failed:
        return text
    if outcome.is_unrestricted:
        return f"{text} (工作日{time_window})"
    return f"{text} ({time_window})"


@dataclass
class RestrictionRecord:
    """某城市某一天的限号记录"""

    city: str
    calendar_date: date
    outcome: RestrictionOutcome
    time_window: Optional[str] = None

    def encode(self) -> str:
        return encode_limit_info(self.outcome, self.time_window)

    @classmethod
    def decode(cls, city: str, calendar_date: date, text: str) -> "RestrictionRecord":
        # 失败原因是自由文本，可能带括号，不拆分时段
        if not text.startswith(FAILED_TEXT):
            match = _WINDOW_SUFFIX_RE.match(text)
            if match:
                return cls(
                    city=city,
                    calendar_date=calendar_date,
                    outcome=RestrictionOutcome.decode(match.group("outcome")),
                    time_window=match.group("window"),
                )
        return cls(city, calendar_date, RestrictionOutcome.decode(text))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "city": self.city,
            "date": self.calendar_date.isoformat(),
            "outcome": self.outcome.kind.value,
            "time_window": self.time_window,
            "limit_info": self.encode(),
        }


@dataclass
class WeeklySchedule:
    """一周限号安排，键为星期文本"""

    city: str
    entries: Dict[str, RestrictionOutcome] = field(default_factory=dict)

    @property
    def workday_count(self) -> int:
        return sum(1 for day in WORK_DAYS if day in self.entries)

    def is_complete(self) -> bool:
        """周一至周五齐全才视为有效的一周安排"""
        return self.workday_count >= len(WORK_DAYS)

    def is_empty(self) -> bool:
        return not self.entries

    def get(self, day: str) -> Optional[RestrictionOutcome]:
        return self.entries.get(day)

    @classmethod
    def from_workdays(
        cls, city: str, workdays: List[RestrictionOutcome]
    ) -> "WeeklySchedule":
        """由周一至周五的结果构建完整安排，周末按不限行处理"""
        if len(workdays) < len(WORK_DAYS):
            return cls(city)
        entries = dict(zip(WORK_DAYS, workdays[: len(WORK_DAYS)]))
        entries["周六"] = RestrictionOutcome.unrestricted()
        entries["周日"] = RestrictionOutcome.unrestricted()
        return cls(city, entries)

    def encode(self) -> Dict[str, str]:
        return {
            day: self.entries[day].encode() for day in WEEK_DAYS if day in self.entries
        }

    @classmethod
    def decode(cls, city: str, data: Optional[Dict[str, str]]) -> "WeeklySchedule":
        entries = {}
        for day, text in (data or {}).items():
            if day not in WEEK_DAYS:
                raise ValueError(f"未知的星期: {day}")
            entries[day] = RestrictionOutcome.decode(text)
        return cls(city, entries)


@dataclass
class CacheEntry:
    """按城市持久化的缓存条目"""

    city: str
    stamp_date: date
    today: RestrictionRecord
    weekly: WeeklySchedule
    fetched_at: float
    # 已为该日期单独抓取过一周安排
    weekly_checked: Optional[date] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "city": self.city,
            "stamp_date": self.stamp_date.isoformat(),
            "today": self.today.encode(),
            "weekly": self.weekly.encode(),
            "fetched_at": self.fetched_at,
            "weekly_checked": (
                self.weekly_checked.isoformat() if self.weekly_checked else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheEntry":
        """还原缓存条目，数据损坏时抛出 KeyError/ValueError/TypeError"""
        city = data["city"]
        stamp_date = date.fromisoformat(data["stamp_date"])
        weekly_checked = data.get("weekly_checked")
        return cls(
            city=city,
            stamp_date=stamp_date,
            today=RestrictionRecord.decode(city, stamp_date, data["today"]),
            weekly=WeeklySchedule.decode(city, data.get("weekly")),
            fetched_at=float(data["fetched_at"]),
            weekly_checked=date.fromisoformat(weekly_checked) if weekly_checked else None,
        )


@dataclass
class WeekdayLimit:
    """一周视图中的单日条目"""

    day: str
    day_index: int
    outcome: Optional[RestrictionOutcome]
    is_today: bool = False
    time_window: Optional[str] = None

    @property
    def limit_info(self) -> str:
        if self.outcome is None:
            return NO_INFO_TEXT
        return encode_limit_info(self.outcome, self.time_window)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day,
            "dayIndex": self.day_index,
            "limitInfo": self.limit_info,
            "isToday": self.is_today,
        }


@dataclass
class DailyLimitResult:
    """当日限号查询结果"""

    city: str
    limit_info: RestrictionRecord

    def to_dict(self) -> Dict[str, Any]:
        from xianhao.service.restriction.restriction_parse import short_limit_info

        return {
            "city": self.city,
            "limitInfo": self.limit_info.encode(),
            "shortLimitInfo": short_limit_info(self.limit_info),
        }


@dataclass
class WeeklyLimitResult:
    """一周限号查询结果，周一至周日共7项"""

    city: str
    weekly_limit_info: List[WeekdayLimit]

    @property
    def today(self) -> Optional[WeekdayLimit]:
        for item in self.weekly_limit_info:
            if item.is_today:
                return item
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "city": self.city,
            "weeklyLimitInfo": [item.to_dict() for item in self.weekly_limit_info],
        }
