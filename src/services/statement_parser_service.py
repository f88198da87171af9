"""
Statement parser dispatch.

Auto-detection tries the registered parsers in a fixed priority order
(format A before format B) and runs the first one whose detector matches.
Explicit parsing skips detection when the caller already knows the institution.
"""
import logging
from typing import Dict, List, Optional, Union

from models.statement import BankType, CardType, ParseResult, CardParseResult
from services.statement_parsers import (
    BankStatementParser,
    CardStatementParser,
    bank_format_a_parser,
    bank_format_b_parser,
    card_format_a_parser,
    card_format_b_parser,
)
from utils.transaction_parser import split_csv_lines

logger = logging.getLogger(__name__)

BANK_PARSERS: List[BankStatementParser] = [bank_format_a_parser, bank_format_b_parser]
CARD_PARSERS: List[CardStatementParser] = [card_format_a_parser, card_format_b_parser]

UNKNOWN_BANK_MESSAGE = (
    "対応する銀行フォーマットを検出できませんでした。"
    "対応している銀行のCSVファイルをご使用ください。"
)
UNKNOWN_CARD_MESSAGE = (
    "対応するカードフォーマットを検出できませんでした。"
    "対応しているカードのCSVファイルをご使用ください。"
)


def get_bank_parser(bank_type: Union[BankType, str]) -> Optional[BankStatementParser]:
    for parser in BANK_PARSERS:
        if parser.bank_type.value == _tag_value(bank_type):
            return parser
    return None


def get_card_parser(card_type: Union[CardType, str]) -> Optional[CardStatementParser]:
    for parser in CARD_PARSERS:
        if parser.card_type.value == _tag_value(card_type):
            return parser
    return None


def _tag_value(tag: Union[BankType, CardType, str]) -> str:
    return tag.value if isinstance(tag, (BankType, CardType)) else str(tag)


def auto_parse_bank_csv(content: str) -> ParseResult:
    """Detect the bank format and parse; unknown content yields a failed result."""
    lines = split_csv_lines(content)
    for parser in BANK_PARSERS:
        if parser.detect(lines):
            logger.info(f"Auto-detected bank format {parser.bank_type.value}")
            return parser.parse(content)

    logger.warning("No bank statement parser matched the uploaded content")
    return ParseResult.failure(BankType.UNKNOWN, UNKNOWN_BANK_MESSAGE)


def parse_bank_csv(content: str, bank_type: Union[BankType, str]) -> ParseResult:
    """Parse with an explicitly selected bank format."""
    parser = get_bank_parser(bank_type)
    if not parser:
        logger.warning(f"Unsupported bank type requested: {_tag_value(bank_type)}")
        return ParseResult.failure(
            _coerce_bank_type(bank_type),
            f"未対応の銀行タイプ: {_tag_value(bank_type)}"
        )
    return parser.parse(content)


def auto_parse_card_csv(content: str) -> CardParseResult:
    """Detect the card format and parse; unknown content yields a failed result."""
    lines = split_csv_lines(content)
    for parser in CARD_PARSERS:
        if parser.detect(lines):
            logger.info(f"Auto-detected card format {parser.card_type.value}")
            return parser.parse(content)

    logger.warning("No card statement parser matched the uploaded content")
    return CardParseResult.failure(CardType.UNKNOWN, UNKNOWN_CARD_MESSAGE)


def parse_card_csv(content: str, card_type: Union[CardType, str]) -> CardParseResult:
    """Parse with an explicitly selected card format."""
    parser = get_card_parser(card_type)
    if not parser:
        logger.warning(f"Unsupported card type requested: {_tag_value(card_type)}")
        return CardParseResult.failure(
            _coerce_card_type(card_type),
            f"未対応のカードタイプ: {_tag_value(card_type)}"
        )
    return parser.parse(content)


def _coerce_bank_type(bank_type: Union[BankType, str]) -> BankType:
    try:
        return BankType(_tag_value(bank_type))
    except ValueError:
        return BankType.UNKNOWN


def _coerce_card_type(card_type: Union[CardType, str]) -> CardType:
    try:
        return CardType(_tag_value(card_type))
    except ValueError:
        return CardType.UNKNOWN


def available_banks() -> List[Dict[str, str]]:
    return [{"type": p.bank_type.value, "name": p.display_name} for p in BANK_PARSERS]


def available_cards() -> List[Dict[str, str]]:
    return [{"type": p.card_type.value, "name": p.display_name} for p in CARD_PARSERS]
