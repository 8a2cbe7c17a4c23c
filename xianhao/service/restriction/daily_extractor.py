"""
当日限号解析模块

按优先级依次尝试一组解析策略，命中第一个即停止：
周末规则 -> 搜索卡片 -> 明确不限行 -> 今日星期尾号 -> 一周轮换表 -> 通用尾号 -> 单双号。
全部落空时返回「获取限号信息失败」，该结果是数据而不是异常。
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional, Sequence, Tuple, Union

from xianhao.service.restriction.restriction_enums import Parity
from xianhao.service.restriction.restriction_models import (
    WEEK_DAYS,
    RestrictionOutcome,
    RestrictionRecord,
)
from xianhao.service.restriction.restriction_parse import (
    CARD_NUM_SELECTOR,
    PageText,
    extract_time_window,
    node_text,
    parse_digits,
    parse_outcome_text,
)
from xianhao.service.restriction.weekly_extractor import match_declarative_block

logger = logging.getLogger(__name__)

NO_PATTERN_MATCHED = "未匹配到限号信息"
DEFAULT_WEEKLY_TABLE_CITIES = ("北京", "北京市")

_PAIR_BODY = r"\d\s*[和与]\s*\d"
_PAIR = rf"({_PAIR_BODY})(?!\d)"
# 单个尾号后面不能是时刻，如「7:00」「7点」
_NOT_CLOCK = r"(?![\d和与:：点时\-–~～至到])"
_SINGLE = rf"(?<!\d)(\d){_NOT_CLOCK}"


@dataclass
class ExtractionContext:
    """单次解析的上下文"""

    city: str
    calendar_date: date
    weekend_unrestricted: bool = True
    weekly_table_cities: Sequence[str] = field(
        default_factory=lambda: list(DEFAULT_WEEKLY_TABLE_CITIES)
    )

    @property
    def weekday_index(self) -> int:
        return self.calendar_date.weekday()

    @property
    def weekday(self) -> str:
        return WEEK_DAYS[self.weekday_index]

    @property
    def is_weekend(self) -> bool:
        return self.weekday_index >= 5


class RestrictionStrategy:
    """解析策略基类，match 为纯函数，未命中返回 None"""

    name = "base"

    def match(
        self, page: PageText, context: ExtractionContext
    ) -> Optional[RestrictionOutcome]:
        raise NotImplementedError


class WeekendStrategy(RestrictionStrategy):
    """周末且城市规则为周末不限行时，直接判定不限行"""

    name = "周末规则"

    def match(self, page, context):
        if context.is_weekend and context.weekend_unrestricted:
            return RestrictionOutcome.unrestricted()
        return None


class ResultCardStrategy(RestrictionStrategy):
    """百度限行卡片 op_limited_num，上下文需提到今日或今天的星期"""

    name = "搜索卡片"

    _CONTEXT_CHARS = 100
    _CONTEXT_STRINGS = 20

    def _surrounding(self, card) -> str:
        before = "".join(
            reversed(card.find_all_previous(string=True, limit=self._CONTEXT_STRINGS))
        )
        after = "".join(card.find_all_next(string=True, limit=self._CONTEXT_STRINGS))
        return before[-self._CONTEXT_CHARS :] + after[: self._CONTEXT_CHARS * 2]

    def match(self, page, context):
        for card in page.select(CARD_NUM_SELECTOR):
            value = node_text(card)
            if not value:
                continue

            surrounding = self._surrounding(card)
            if not any(
                marker in surrounding for marker in ("今日", "today", context.weekday)
            ):
                logger.debug(f"限行卡片不是今日信息，跳过: {value}")
                continue

            # 卡片确认是今日信息但内容无法识别，归为未知
            return parse_outcome_text(value) or RestrictionOutcome.unknown()
        return None


class NotRestrictedStrategy(RestrictionStrategy):
    """明确的今日不限行表述，跳过节假日除外之类的条款"""

    name = "明确不限行"

    _HOLIDAY_EXCEPTION_RE = re.compile(r"节假日\s*除外")
    _HOLIDAY_RE = re.compile(r"节假日")
    _CLAUSE_DELIMITERS = re.compile(r"[，,。；;！!]")

    def _patterns(self, context: ExtractionContext) -> List[re.Pattern]:
        weekday = re.escape(context.weekday)
        city = re.escape(context.city)
        return [
            re.compile(rf"今日\s*[（(]?{weekday}[）)]?\s*(?:限行|限号)(?:尾号)?[:：]?\s*不限行?"),
            re.compile(r"今日\s*(?:限行|限号)?(?:尾号)?\s*[:：]?\s*不限行?"),
            re.compile(rf"{city}\s*今日\s*不限行?"),
            re.compile(rf"{city}\s*{weekday}\s*不限行?"),
            re.compile(rf"本周{weekday}\s*不限行?"),
            re.compile(
                rf"{weekday}(?:\s*[、和及与]\s*(?:周[一二三四五六日天]|(?:法定)?节假日))*"
                r"\s*[:：]?\s*不限行?"
            ),
        ]

    def _clause_of(self, text: str, start: int, end: int) -> Tuple[str, int]:
        """返回匹配所在的分句，以及匹配在分句中的起始位置"""
        left = start
        while left > 0 and not self._CLAUSE_DELIMITERS.match(text[left - 1]):
            left -= 1
        right = end
        while right < len(text) and not self._CLAUSE_DELIMITERS.match(text[right]):
            right += 1
        return text[left:right], start - left

    def match(self, page, context):
        for pattern in self._patterns(context):
            for found in pattern.finditer(page.text):
                clause, offset = self._clause_of(page.text, found.start(), found.end())
                # 「节假日除外」或「节假日期间周三不限行」说的是节假日，不是今天
                if self._HOLIDAY_EXCEPTION_RE.search(clause) or self._HOLIDAY_RE.search(
                    clause[:offset]
                ):
                    logger.debug(f"检测到节假日条款，不判定为不限行: {clause[:50]}")
                    continue
                return RestrictionOutcome.unrestricted()
        return None


class WeekdayPairStrategy(RestrictionStrategy):
    """以今天星期为锚点的尾号，如「今日周三限行尾号：3和8」，完整的一对优先于单个数字"""

    name = "今日星期尾号"

    def _patterns(self, context: ExtractionContext) -> List[re.Pattern]:
        weekday = re.escape(context.weekday)
        value = rf"({_PAIR_BODY}(?!\d)|\d{_NOT_CLOCK})"
        return [
            re.compile(rf"今日\s*[（(]?{weekday}[）)]?\s*(?:限行|限号)(?:尾号)?[:：]?\s*{value}"),
            re.compile(rf"今日\s*(?:限行|限号)(?:尾号)?\s*[（(]{weekday}[）)]\s*[:：]?\s*{value}"),
            re.compile(rf"{weekday}\s*(?:限行|限号)(?:尾号)?[:：]?\s*{value}"),
        ]

    def match(self, page, context):
        fallback = None
        for pattern in self._patterns(context):
            for found in pattern.finditer(page.text):
                digits = parse_digits(found.group(1))
                if not digits:
                    continue
                if len(digits) == 2:
                    return RestrictionOutcome.digit_pair(*digits)
                if fallback is None:
                    fallback = RestrictionOutcome.digit_pair(*digits)
        return fallback


class WeeklyTableStrategy(RestrictionStrategy):
    """页面内嵌周一至周五轮换表的城市，按星期取今天的一项"""

    name = "一周轮换表"

    def match(self, page, context):
        if context.city not in context.weekly_table_cities or context.is_weekend:
            return None
        workdays = match_declarative_block(page.text)
        if not workdays:
            return None
        return workdays[context.weekday_index]


class GenericDigitStrategy(RestrictionStrategy):
    """通用尾号匹配：先卡片标签格式，再「限行：N和M」类表述，最后单个数字"""

    name = "通用尾号"

    TEXT_PATTERNS = [
        re.compile(rf"限[行号]\s*[:：]?\s*{_PAIR}"),
        re.compile(rf"尾号\s*(?:限行)?\s*[:：]?\s*{_PAIR}"),
        re.compile(rf"(?<!\d){_PAIR}\s*号?\s*限行"),
        re.compile(rf"(?<!\d){_PAIR}\s*尾号"),
        re.compile(rf"[为是]\s*{_PAIR}"),
        re.compile(rf"限行\s*{_SINGLE}\s*号"),
        re.compile(rf"尾号限行\s*{_SINGLE}"),
        re.compile(rf"尾号\s*{_SINGLE}\s*限行"),
        re.compile(rf"限[行号]\s*[:：]?\s*{_SINGLE}"),
        re.compile(rf"{_SINGLE}\s*号限行"),
    ]

    def _first_in(self, pattern: re.Pattern, text: str) -> Optional[RestrictionOutcome]:
        single = None
        for found in pattern.finditer(text):
            digits = parse_digits(found.group(1))
            if not digits:
                continue
            if len(digits) == 2:
                return RestrictionOutcome.digit_pair(*digits)
            if single is None:
                single = RestrictionOutcome.digit_pair(*digits)
        return single

    def match(self, page, context):
        for card_text in page.select_texts(CARD_NUM_SELECTOR):
            digits = parse_digits(card_text)
            if digits:
                return RestrictionOutcome.digit_pair(*digits)
        for pattern in self.TEXT_PATTERNS:
            outcome = self._first_in(pattern, page.text)
            if outcome:
                return outcome
        return None


class OddEvenStrategy(RestrictionStrategy):
    """单双号限行表述"""

    name = "单双号"

    PATTERNS = [
        (re.compile(r"单双号限行"), Parity.ALTERNATING),
        (re.compile(r"单号\s*[和与]\s*双号"), Parity.ALTERNATING),
        (re.compile(r"限\s*单\s*双\s*号"), Parity.ALTERNATING),
        (re.compile(r"(?<!双)单号限行"), Parity.ODD),
        (re.compile(r"(?<!单)双号限行"), Parity.EVEN),
    ]

    def match(self, page, context):
        for pattern, parity in self.PATTERNS:
            if pattern.search(page.text):
                return RestrictionOutcome.odd_even(parity)
        return None


DEFAULT_STRATEGIES: List[RestrictionStrategy] = [
    WeekendStrategy(),
    ResultCardStrategy(),
    NotRestrictedStrategy(),
    WeekdayPairStrategy(),
    WeeklyTableStrategy(),
    GenericDigitStrategy(),
    OddEvenStrategy(),
]


def extract_daily(
    city: str,
    page_text: Union[str, PageText],
    calendar_date: date,
    weekend_rule: Callable[[str], bool],
    weekly_table_cities: Sequence[str] = DEFAULT_WEEKLY_TABLE_CITIES,
    strategies: Optional[Sequence[RestrictionStrategy]] = None,
) -> RestrictionRecord:
    """解析当日限号记录"""
    page = page_text if isinstance(page_text, PageText) else PageText.from_html(page_text)
    context = ExtractionContext(
        city=city,
        calendar_date=calendar_date,
        weekend_unrestricted=weekend_rule(city),
        weekly_table_cities=list(weekly_table_cities),
    )

    outcome = None
    for strategy in strategies or DEFAULT_STRATEGIES:
        outcome = strategy.match(page, context)
        if outcome is not None:
            logger.info(f"{city} {context.weekday} 限号解析命中[{strategy.name}]: {outcome}")
            break
        logger.debug(f"{city} 限号解析策略[{strategy.name}]未命中")

    if outcome is None:
        logger.warning(f"{city} {context.weekday} 所有限号解析策略均未命中")
        return RestrictionRecord(
            city, calendar_date, RestrictionOutcome.extraction_failed(NO_PATTERN_MATCHED)
        )

    # 周末规则判定不限行时，仍展示工作日的限行时段作为参考
    time_window = None
    if not outcome.is_unrestricted or isinstance(strategy, WeekendStrategy):
        time_window = extract_time_window(page)

    return RestrictionRecord(city, calendar_date, outcome, time_window)
