"""
Card format A: one amount column, negative amounts are refunds.

Header example: 利用日,利用店名・商品名,利用者,支払方法,利用金額,支払手数料,支払総額
"""
import logging
from typing import List, Sequence

from models.statement import (
    CARD_DESCRIPTION_PLACEHOLDER,
    CardType,
    CardTransactionType,
    ColumnRole,
    ParsedCardTransaction,
)
from services.statement_parsers.base import CardStatementParser, RowParseError, StatementRow
from utils.file_analyzer import is_card_format_a
from utils.transaction_parser import ColumnRolePattern, parse_amount

logger = logging.getLogger(__name__)


class CardFormatAParser(CardStatementParser):
    card_type = CardType.FORMAT_A
    display_name = "楽天カード"
    # 利用金額 is matched before 支払総額 so the usage amount is used, not the billed total
    role_patterns = {
        ColumnRole.DATE: ColumnRolePattern(("利用日", "ご利用日")),
        ColumnRole.DESCRIPTION: ColumnRolePattern(("利用店", "ご利用店", "商品名")),
        ColumnRole.USER: ColumnRolePattern(("利用者", "ご利用者")),
        ColumnRole.PAYMENT_METHOD: ColumnRolePattern(("支払方法", "お支払方法")),
        ColumnRole.AMOUNT: ColumnRolePattern(("利用金額", "ご利用金額")),
    }

    def detect(self, lines: Sequence[str]) -> bool:
        return is_card_format_a(lines)

    def parse_row(self, row: StatementRow) -> List[ParsedCardTransaction]:
        amount_str = row.value(ColumnRole.AMOUNT)
        amount = parse_amount(amount_str)
        if amount == 0 and amount_str.strip() not in ('0', ''):
            raise RowParseError(f"無効な金額: {amount_str}")
        if amount == 0:
            return []

        return [ParsedCardTransaction(
            date=row.date,
            description=row.value(ColumnRole.DESCRIPTION) or CARD_DESCRIPTION_PLACEHOLDER,
            amount=abs(amount),
            type=CardTransactionType.REFUND if amount < 0 else CardTransactionType.EXPENSE,
            payment_method=row.value(ColumnRole.PAYMENT_METHOD) or None,
            raw_data=row.raw_data,
        )]


card_format_a_parser = CardFormatAParser()
