"""
Bank format A: a single signed amount column plus running balance.

Header example: 取引日,入出金(円),残高(円),入出金先内容
"""
import logging
from typing import List, Optional, Sequence

from models.statement import (
    BANK_DESCRIPTION_PLACEHOLDER,
    BankType,
    ColumnMapping,
    ColumnRole,
    ParsedTransaction,
    TransactionType,
)
from services.statement_parsers.base import BankStatementParser, RowParseError, StatementRow
from utils.file_analyzer import is_bank_format_a
from utils.transaction_parser import ColumnRolePattern, parse_amount

logger = logging.getLogger(__name__)


class BankFormatAParser(BankStatementParser):
    bank_type = BankType.FORMAT_A
    display_name = "楽天銀行"
    role_patterns = {
        ColumnRole.DATE: ColumnRolePattern(("取引日", "日付")),
        ColumnRole.AMOUNT: ColumnRolePattern(("入出金",), excluded=("先",)),
        ColumnRole.BALANCE: ColumnRolePattern(("残高",)),
        ColumnRole.DESCRIPTION: ColumnRolePattern(("入出金先", "摘要", "内容")),
    }

    def detect(self, lines: Sequence[str]) -> bool:
        return is_bank_format_a(lines)

    def missing_roles_message(self, mapping: ColumnMapping) -> Optional[str]:
        if ColumnRole.DATE not in mapping or ColumnRole.AMOUNT not in mapping:
            return "必須カラム（取引日、入出金）が見つかりません"
        return None

    def parse_row(self, row: StatementRow) -> List[ParsedTransaction]:
        amount_str = row.value(ColumnRole.AMOUNT)
        amount = parse_amount(amount_str)
        if amount == 0 and amount_str.strip() != '0':
            raise RowParseError(f"無効な金額: {amount_str}")

        balance_str = row.value(ColumnRole.BALANCE)
        return [ParsedTransaction(
            date=row.date,
            description=row.value(ColumnRole.DESCRIPTION) or BANK_DESCRIPTION_PLACEHOLDER,
            amount=abs(amount),
            type=TransactionType.INCOME if amount >= 0 else TransactionType.EXPENSE,
            balance=parse_amount(balance_str) if balance_str else None,
            raw_data=row.raw_data,
        )]


bank_format_a_parser = BankFormatAParser()
