"""
Bank format B: separate withdrawal and deposit columns.

Header example: 日付,摘要,お支払金額,お預り金額,残高

Downloads may start with account metadata rows (customer number, period),
so the header is searched for instead of assumed to be the first line.
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
from services.statement_parsers.base import BankStatementParser, StatementRow
from utils.file_analyzer import find_bank_format_b_header, is_bank_format_b
from utils.import_config import DEFAULT_CONFIG
from utils.transaction_parser import ColumnRolePattern, parse_amount

logger = logging.getLogger(__name__)


class BankFormatBParser(BankStatementParser):
    bank_type = BankType.FORMAT_B
    display_name = "みずほ銀行"
    role_patterns = {
        ColumnRole.DATE: ColumnRolePattern(("日付", "取引日")),
        ColumnRole.DESCRIPTION: ColumnRolePattern(("摘要", "お取引内容", "内容")),
        ColumnRole.WITHDRAWAL: ColumnRolePattern(("お支払", "出金", "支払")),
        ColumnRole.DEPOSIT: ColumnRolePattern(("お預り", "入金", "預入")),
        ColumnRole.BALANCE: ColumnRolePattern(("残高",)),
    }

    def __init__(self, header_scan_limit: Optional[int] = None):
        self.header_scan_limit = header_scan_limit or DEFAULT_CONFIG.header_scan_limit

    def detect(self, lines: Sequence[str]) -> bool:
        return is_bank_format_b(lines, self.header_scan_limit)

    def locate_header(self, lines: Sequence[str]) -> Optional[int]:
        return find_bank_format_b_header(lines, self.header_scan_limit)

    def missing_roles_message(self, mapping: ColumnMapping) -> Optional[str]:
        if ColumnRole.DATE not in mapping:
            return "必須カラム（日付）が見つかりません"
        if ColumnRole.WITHDRAWAL not in mapping and ColumnRole.DEPOSIT not in mapping:
            return "入金・出金カラムが見つかりません"
        return None

    def parse_row(self, row: StatementRow) -> List[ParsedTransaction]:
        withdrawal = parse_amount(row.value(ColumnRole.WITHDRAWAL))
        deposit = parse_amount(row.value(ColumnRole.DEPOSIT))

        # Neither side filled in: not a transaction row
        if withdrawal == 0 and deposit == 0:
            return []

        if deposit > 0:
            amount, txn_type = deposit, TransactionType.INCOME
        elif withdrawal != 0:
            amount, txn_type = abs(withdrawal), TransactionType.EXPENSE
        else:
            # Negative deposit is a reversal
            amount, txn_type = abs(deposit), TransactionType.EXPENSE

        balance_str = row.value(ColumnRole.BALANCE)
        return [ParsedTransaction(
            date=row.date,
            description=row.value(ColumnRole.DESCRIPTION) or BANK_DESCRIPTION_PLACEHOLDER,
            amount=amount,
            type=txn_type,
            balance=parse_amount(balance_str) if balance_str else None,
            raw_data=row.raw_data,
        )]


bank_format_b_parser = BankFormatBParser()
