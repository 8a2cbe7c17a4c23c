"""
限号结果枚举定义
"""

from enum import Enum


class OutcomeKind(str, Enum):
    """限号结果类型"""

    UNRESTRICTED = "unrestricted"
    DIGIT_PAIR = "digit_pair"
    ODD_EVEN = "odd_even"
    UNKNOWN = "unknown"
    EXTRACTION_FAILED = "extraction_failed"

    def __str__(self) -> str:
        return self.value


class Parity(str, Enum):
    """单双号限行类型，值即持久化文本"""

    ODD = "单号限行"
    EVEN = "双号限行"
    ALTERNATING = "单双号限行"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_text(cls, text: str) -> "Parity":
        for parity in cls:
            if parity.value == text:
                return parity
        raise ValueError(f"未知的单双号限行文本: {text}")
