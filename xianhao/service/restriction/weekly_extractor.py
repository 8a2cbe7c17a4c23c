"""
一周限号安排解析模块

从搜索结果中识别「周一至周五限行尾号分别为…」之类的声明式轮换表。
解析不足5个工作日时整体丢弃，不产生残缺的一周安排。
"""

import logging
import re
from typing import List, Optional, Union

from xianhao.service.restriction.restriction_models import (
    WORK_DAYS,
    RestrictionOutcome,
    WeeklySchedule,
)
from xianhao.service.restriction.restriction_parse import PageText, parse_outcome_text

logger = logging.getLogger(__name__)

_ENTRY = r"(\d\s*和\s*\d|\d|不限行?)"
_LIST_CHARS = r"([\d和、，,\s不限行]+)"
_DAY_NUMERALS = "一二三四五"

# 声明式轮换表，单分组为列表文本，五分组为逐日取值
DECLARATIVE_PATTERNS = [
    re.compile(r"星期一至星期五限行机动车车牌尾号分别为[:：]?\s*" + _LIST_CHARS),
    re.compile(r"周一至周五限行(?:机动车车牌)?尾号(?:分别为)?[:：]?\s*" + _LIST_CHARS),
    re.compile(
        r"尾号限行规则[:：]\s*((?:周[一二三四五]\s*[:：]?\s*(?:\d\s*和\s*\d|不限行?)\s*[，,、；;]?\s*){5})"
    ),
    re.compile(
        r"\s*[,，、]?\s*".join(
            rf"周{numeral}限行尾号[:：]\s*{_ENTRY}" for numeral in _DAY_NUMERALS
        )
    ),
    re.compile(
        r".{0,30}?".join(rf"周{numeral}\s*[:：]?\s*{_ENTRY}" for numeral in _DAY_NUMERALS)
    ),
]

_RESPECTIVELY_MARKER = re.compile(r"分别为[:：]")
_SEGMENT_DELIMITERS = (".", "。", "；", ";", "，", ",", "\n")
_TOKEN_SPLIT_RE = re.compile(r"[、，,\s]+")
_TOKEN_RE = re.compile(r"^(\d和\d|\d|不限行?)(?!\d)")
_PER_DAY_RE = re.compile(r"周([一二三四五])\s*[:：]?\s*(\d\s*和\s*\d|不限行?)")

SCHEDULE_KEYWORDS = ("限行尾号", "尾号限行", "限号规则")
_KEYWORD_WINDOW = 200
_PAIR_RE = re.compile(r"(?<!\d)\d\s*和\s*\d(?!\d)")


def parse_workday_list(text: str) -> List[RestrictionOutcome]:
    """拆分以顿号/逗号/空格分隔的工作日列表"""
    outcomes = []
    for token in _TOKEN_SPLIT_RE.split(text):
        match = _TOKEN_RE.match(token)
        if not match:
            continue
        outcome = parse_outcome_text(match.group(1))
        if outcome:
            outcomes.append(outcome)
    return outcomes


def _parse_per_day(text: str) -> List[RestrictionOutcome]:
    found = {}
    for numeral, value in _PER_DAY_RE.findall(text):
        outcome = parse_outcome_text(value)
        if outcome and numeral not in found:
            found[numeral] = outcome
    if len(found) < len(WORK_DAYS):
        return []
    return [found[numeral] for numeral in _DAY_NUMERALS]


def match_declarative_block(text: str) -> Optional[List[RestrictionOutcome]]:
    """按声明式轮换表格式匹配，返回周一至周五的结果，不足5天时返回None"""
    for index, pattern in enumerate(DECLARATIVE_PATTERNS, start=1):
        match = pattern.search(text)
        if not match:
            continue

        if pattern.groups >= len(WORK_DAYS):
            workdays = [parse_outcome_text(group) for group in match.groups()]
            workdays = [outcome for outcome in workdays if outcome]
        elif "周" in match.group(1):
            workdays = _parse_per_day(match.group(1))
        else:
            workdays = parse_workday_list(match.group(1))

        logger.debug(f"一周规则模式{index}匹配: {match.group(0)[:60]}，解析出{len(workdays)}天")
        if len(workdays) >= len(WORK_DAYS):
            return workdays[: len(WORK_DAYS)]

    return None


def scan_respectively(text: str) -> Optional[List[RestrictionOutcome]]:
    """定位「分别为：」后逐段截取到首个分隔符，再拆分列表"""
    for marker in _RESPECTIVELY_MARKER.finditer(text):
        segment = re.sub(r"[（）()]", "", text[marker.end() :]).strip()

        end_index = len(segment)
        for delimiter in _SEGMENT_DELIMITERS:
            position = segment.find(delimiter)
            if 0 < position < end_index:
                end_index = position
        workdays = parse_workday_list(segment[:end_index])

        if len(workdays) >= len(WORK_DAYS):
            return workdays[: len(WORK_DAYS)]
    return None


def scan_keyword_pairs(text: str) -> Optional[List[RestrictionOutcome]]:
    """在限行关键词之后的一段文本内寻找至少5组「N和M」"""
    for keyword in SCHEDULE_KEYWORDS:
        start = text.find(keyword)
        if start < 0:
            continue
        window = text[start + len(keyword) : start + len(keyword) + _KEYWORD_WINDOW]
        window = re.sub(r"[（）()]", "", window)
        pairs = _PAIR_RE.findall(window)
        if len(pairs) >= len(WORK_DAYS):
            return [parse_outcome_text(pair) for pair in pairs[: len(WORK_DAYS)]]
    return None


def extract_weekly(city: str, page_text: Union[str, PageText]) -> WeeklySchedule:
    """
    解析一周限号安排，任何情况下都不抛出异常

    依次尝试声明式轮换表、「分别为：」扫描和关键词后的尾号组扫描，
    成功时周一至周五按顺序填充，周六、周日为不限行；失败返回空安排。
    """
    try:
        page = page_text if isinstance(page_text, PageText) else PageText.from_html(page_text)

        for name, finder in (
            ("声明式轮换表", match_declarative_block),
            ("分别为扫描", scan_respectively),
            ("关键词尾号组扫描", scan_keyword_pairs),
        ):
            workdays = finder(page.text)
            if workdays:
                schedule = WeeklySchedule.from_workdays(city, workdays)
                logger.info(
                    f"{city}一周限行信息({name}): "
                    + "，".join(f"{day} {value}" for day, value in schedule.encode().items())
                )
                return schedule

        logger.info(f"未从搜索结果中提取到{city}完整的一周限行信息")
        return WeeklySchedule(city)

    except Exception as e:
        logger.error(f"解析{city}一周限行信息失败: {e}")
        return WeeklySchedule(city)
