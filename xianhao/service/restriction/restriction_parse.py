"""
限号页面文本解析工具

把搜索结果HTML清洗成纯文本，并提供尾号、时段等片段的解析函数
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup

from xianhao.service.restriction.restriction_enums import OutcomeKind, Parity
from xianhao.service.restriction.restriction_models import (
    NO_INFO_TEXT,
    UNRESTRICTED_TEXT,
    RestrictionOutcome,
    RestrictionRecord,
)

logger = logging.getLogger(__name__)

_SPACE_RE = re.compile(r"\s+")

# 限号尾号片段: "3和8"、"3与8"、"3、8"、"3"
_DIGITS_FRAGMENT_RE = re.compile(r"^(\d)(?:\s*[和与、,，]\s*(\d))?$")
_UNRESTRICTED_FRAGMENT_RE = re.compile(r"^不限(?:行|号)?$")

# 时段: "7:00-20:00"、"07:00至20:00"、"7-20"
_WINDOW_RANGE = r"(\d{1,2}(?::\d{1,2})?)\s*[-–~～至到]\s*(\d{1,2}(?::\d{1,2})?)"
_WINDOW_PATTERNS = [
    re.compile(r"限行时(?:间段?|段)为?[:：]?\s*" + _WINDOW_RANGE),
    re.compile(r"(\d{1,2}:\d{1,2})\s*[-–~～至到]\s*(\d{1,2}:\d{1,2})\s*限行"),
    re.compile(r"(\d{1,2}:\d{2})\s*[-–~～至到]\s*(\d{1,2}:\d{2})"),
    re.compile(r"(\d{1,2})\s*[点时]\s*至\s*(\d{1,2})\s*[点时]"),
]
CARD_NUM_SELECTOR = ".op_limited_num"
CARD_TIME_SELECTOR = ".op_limited_time"


def parse_html(raw: Optional[str]) -> BeautifulSoup:
    """解析HTML并移除脚本和样式"""
    soup = BeautifulSoup(raw or "", "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return soup


def node_text(node) -> str:
    """节点的可读文本，连续空白合并为一个空格"""
    return _SPACE_RE.sub(" ", node.get_text(" ")).strip()


def clean_html(raw: Optional[str]) -> str:
    """去除脚本、标签和多余空白，保留可读文本"""
    return node_text(parse_html(raw))


@dataclass(frozen=True)
class PageText:
    """抓取到的页面，同时保留原始HTML、解析树和清洗后的文本"""

    raw: str
    text: str
    soup: Optional[BeautifulSoup] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_html(cls, raw: Optional[str]) -> "PageText":
        soup = parse_html(raw)
        return cls(raw=raw or "", text=node_text(soup), soup=soup)

    def select(self, selector: str) -> List:
        """按CSS选择器查找元素，没有解析树时返回空列表"""
        if self.soup is None:
            return []
        return self.soup.select(selector)

    def select_texts(self, selector: str) -> List[str]:
        return [node_text(tag) for tag in self.select(selector)]


def parse_digits(fragment: str) -> Optional[Tuple[int, ...]]:
    """解析1~2个0-9的尾号，结构不合法时返回None"""
    match = _DIGITS_FRAGMENT_RE.match(fragment.strip())
    if not match:
        return None
    digits = [int(match.group(1))]
    if match.group(2) is not None:
        digits.append(int(match.group(2)))
    return tuple(digits)


def parse_outcome_text(fragment: Optional[str]) -> Optional[RestrictionOutcome]:
    """将页面中截取的片段解析为限号结果，无法识别时返回None"""
    if not fragment:
        return None

    fragment = _SPACE_RE.sub("", fragment).strip("。.，,；;：:")
    if not fragment:
        return None

    if _UNRESTRICTED_FRAGMENT_RE.match(fragment):
        return RestrictionOutcome.unrestricted()

    digits = parse_digits(fragment)
    if digits:
        return RestrictionOutcome.digit_pair(*digits)

    for parity in (Parity.ALTERNATING, Parity.ODD, Parity.EVEN):
        if parity.value in fragment:
            return RestrictionOutcome.odd_even(parity)

    return None


def _normalize_clock(value: str) -> Optional[str]:
    hour, _, minute = value.partition(":")
    hour_num = int(hour)
    minute_num = int(minute) if minute else 0
    if hour_num > 24 or minute_num > 59:
        return None
    return f"{hour_num:02d}:{minute_num:02d}"


def normalize_time_window(start: str, end: str) -> Optional[str]:
    """统一时段格式为 HH:MM-HH:MM"""
    start_clock = _normalize_clock(start)
    end_clock = _normalize_clock(end)
    if not start_clock or not end_clock:
        return None
    return f"{start_clock}-{end_clock}"


def extract_time_window(page: PageText) -> Optional[str]:
    """尽力提取限行时段，找不到时返回None"""
    for card_text in page.select_texts(CARD_TIME_SELECTOR):
        match = re.search(_WINDOW_RANGE, card_text)
        if match:
            window = normalize_time_window(match.group(1), match.group(2))
            if window:
                return window

    for pattern in _WINDOW_PATTERNS:
        for match in pattern.finditer(page.text):
            window = normalize_time_window(match.group(1), match.group(2))
            if window:
                logger.debug(f"提取到限行时段: {window}")
                return window

    return None


def short_limit_info(record: RestrictionRecord) -> str:
    """
    生成简短的限号展示文本

    尾号返回 `3,8`，不限行返回 `不限行`，单号返回 `1`，双号返回 `2`，
    单双号轮换返回 `单双号`，其余情况返回 `暂无信息`
    """
    outcome = record.outcome
    if outcome.kind == OutcomeKind.UNRESTRICTED:
        return UNRESTRICTED_TEXT
    if outcome.kind == OutcomeKind.DIGIT_PAIR:
        return ",".join(str(d) for d in outcome.digits)
    if outcome.kind == OutcomeKind.ODD_EVEN:
        return {
            Parity.ODD: "1",
            Parity.EVEN: "2",
            Parity.ALTERNATING: "单双号",
        }[outcome.parity]
    return NO_INFO_TEXT
