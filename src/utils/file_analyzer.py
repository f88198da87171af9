"""
File analyzer utilities for detecting statement formats based on content inspection.

Each detector is a conservative predicate over the logical lines of a statement:
a match means the corresponding parser is run by auto-detection, so a false
positive leads to a mis-parse.
"""
import logging
from typing import Optional, Sequence, Tuple

from utils.import_config import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

# Label groups; a header must contain at least one label from every group.
BANK_A_SIGNATURE = (("取引日",), ("入出金",), ("残高", "入出金先"))
BANK_B_SIGNATURE = (
    ("日付", "取引日"),
    ("摘要", "お取引内容"),
    ("お支払", "お預り", "出金", "入金"),
)
CARD_SIGNATURE = (
    ("利用日", "ご利用日"),
    ("利用店", "ご利用店"),
    ("利用金額", "ご利用金額"),
)
CARD_B_KEYWORDS = ("支払区分", "今回お支払", "ご請求")
CARD_A_BRAND_TOKENS = ("楽天", "e-navi")


def _has_signature(line: str, signature: Sequence[Tuple[str, ...]]) -> bool:
    lowered = line.lower()
    return all(any(label in lowered for label in group) for group in signature)


def _contains_any(line: str, tokens: Sequence[str]) -> bool:
    lowered = line.lower()
    return any(token in lowered for token in tokens)


def find_bank_format_b_header(lines: Sequence[str], scan_limit: Optional[int] = None) -> Optional[int]:
    """
    Locate the header row of a bank format B statement.

    These exports may open with account metadata rows, so the first
    `scan_limit` lines are searched for the header signature.
    """
    limit = scan_limit if scan_limit is not None else DEFAULT_CONFIG.header_scan_limit
    for index, line in enumerate(lines[:limit]):
        if _has_signature(line, BANK_B_SIGNATURE):
            if index > 0:
                logger.debug(f"Skipped {index} preamble lines before the header row")
            return index
    return None


def is_bank_format_a(lines: Sequence[str]) -> bool:
    if not lines:
        return False
    return _has_signature(lines[0], BANK_A_SIGNATURE)


def is_bank_format_b(lines: Sequence[str], scan_limit: Optional[int] = None) -> bool:
    return find_bank_format_b_header(lines, scan_limit) is not None


def is_card_format_a(lines: Sequence[str]) -> bool:
    # Format B headers carry the same core labels, so its keywords rule a match out
    if not lines:
        return False
    header = lines[0]
    return _has_signature(header, CARD_SIGNATURE) and not _contains_any(header, CARD_B_KEYWORDS)


def is_card_format_b(lines: Sequence[str]) -> bool:
    if not lines:
        return False
    header = lines[0]
    return (
        _has_signature(header, CARD_SIGNATURE)
        and not _contains_any(header, CARD_A_BRAND_TOKENS)
        and _contains_any(header, CARD_B_KEYWORDS)
    )

