"""
Card format B: separate usage amount and refund columns.

Header example: ご利用日,ご利用店名,ご利用金額,支払区分,今回お支払金額,返金金額

A single row can carry both a usage amount and a refund, so one row yields
zero, one or two records.
"""
import datetime
import logging
from typing import Dict, List, Optional, Sequence

from models.statement import (
    CARD_DESCRIPTION_PLACEHOLDER,
    CardType,
    CardTransactionType,
    ColumnRole,
    ParsedCardTransaction,
)
from services.statement_parsers.base import CardStatementParser, StatementRow
from utils.file_analyzer import is_card_format_b
from utils.transaction_parser import ColumnRolePattern, parse_amount

logger = logging.getLogger(__name__)


def split_usage_and_refund(
    txn_date: datetime.date,
    description: str,
    amount: int,
    refund: int,
    payment_method: Optional[str],
    raw_data: Dict[str, str]
) -> List[ParsedCardTransaction]:
    """
    Produce the records for one row: a refund when the refund is positive,
    then an expense when the usage amount is positive.
    """
    records: List[ParsedCardTransaction] = []
    if refund > 0:
        records.append(ParsedCardTransaction(
            date=txn_date,
            description=description,
            amount=refund,
            type=CardTransactionType.REFUND,
            payment_method=payment_method,
            raw_data=raw_data,
        ))
    if amount > 0:
        records.append(ParsedCardTransaction(
            date=txn_date,
            description=description,
            amount=amount,
            type=CardTransactionType.EXPENSE,
            payment_method=payment_method,
            raw_data=raw_data,
        ))
    return records


class CardFormatBParser(CardStatementParser):
    card_type = CardType.FORMAT_B
    display_name = "セゾンカード"
    role_patterns = {
        ColumnRole.DATE: ColumnRolePattern(("利用日", "ご利用日")),
        ColumnRole.DESCRIPTION: ColumnRolePattern(("利用店", "ご利用店")),
        ColumnRole.AMOUNT: ColumnRolePattern(("利用金額", "ご利用金額"), excluded=("返金",)),
        ColumnRole.REFUND: ColumnRolePattern(("返金",)),
        ColumnRole.PAYMENT_METHOD: ColumnRolePattern(("支払区分", "お支払区分")),
    }

    def detect(self, lines: Sequence[str]) -> bool:
        return is_card_format_b(lines)

    def parse_row(self, row: StatementRow) -> List[ParsedCardTransaction]:
        amount = parse_amount(row.value(ColumnRole.AMOUNT))
        refund = parse_amount(row.value(ColumnRole.REFUND))
        if amount == 0 and refund == 0:
            return []

        return split_usage_and_refund(
            row.date,
            row.value(ColumnRole.DESCRIPTION) or CARD_DESCRIPTION_PLACEHOLDER,
            amount,
            refund,
            row.value(ColumnRole.PAYMENT_METHOD) or None,
            row.raw_data,
        )


card_format_b_parser = CardFormatBParser()
