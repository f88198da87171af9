"""
Base statement parser.

Implements the algorithm shared by every supported institution: split the text
into logical lines, locate the header, resolve the column mapping, then hand each
data row to a format-specific classifier that yields zero or more records.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Dict, Generic, List, Optional, Sequence, TypeVar

from models.statement import (
    BankType,
    CardType,
    ColumnMapping,
    ColumnRole,
    ParseError,
    ParsedTransaction,
    ParsedCardTransaction,
    ParseResult,
    CardParseResult,
)
from utils.transaction_parser import (
    ColumnRolePattern,
    build_column_mapping,
    parse_csv_line,
    parse_date,
    split_csv_lines,
)

logger = logging.getLogger(__name__)

TRecord = TypeVar('TRecord')
TResult = TypeVar('TResult')

COMMENT_PREFIX = '#'


class RowParseError(ValueError):
    """Raised by a row classifier for a recoverable, row-level failure."""
    pass


@dataclass
class StatementRow:
    """One data row with its resolved date and column mapping."""
    row_number: int
    line: str
    fields: List[str]
    mapping: ColumnMapping
    date: date
    raw_data: Dict[str, str]

    def value(self, role: ColumnRole) -> str:
        """Return the field for a role, or "" when the role is unmapped or the row is short."""
        index = self.mapping.get(role)
        if index is None or index >= len(self.fields):
            return ''
        return self.fields[index]


def _field_at(fields: Sequence[str], index: Optional[int]) -> str:
    if index is None or index >= len(fields):
        return ''
    return fields[index]


class StatementParser(ABC, Generic[TRecord, TResult]):
    """
    Abstract base class for institution-specific statement parsers.

    Subclasses declare their column role table and implement `detect`,
    `parse_row` and the result constructors.
    """

    display_name: str = ''
    role_patterns: Dict[ColumnRole, ColumnRolePattern] = {}

    @abstractmethod
    def detect(self, lines: Sequence[str]) -> bool:
        """Return True when the logical lines look like this institution's export."""
        pass

    @abstractmethod
    def parse_row(self, row: StatementRow) -> List[TRecord]:
        """
        Classify one data row.

        Returns:
            Zero or more records; an empty list marks a non-data row

        Raises:
            RowParseError: If the row is malformed
        """
        pass

    @abstractmethod
    def missing_roles_message(self, mapping: ColumnMapping) -> Optional[str]:
        """Return a diagnostic when required roles are unresolved, otherwise None."""
        pass

    @abstractmethod
    def build_result(self, records: List[TRecord], errors: List[ParseError]) -> TResult:
        pass

    @abstractmethod
    def failure(self, message: str, raw_line: Optional[str] = None) -> TResult:
        pass

    @property
    @abstractmethod
    def format_tag(self) -> str:
        pass

    def locate_header(self, lines: Sequence[str]) -> Optional[int]:
        """Index of the header line; most exports start with it."""
        return 0

    def parse(self, content: str) -> TResult:
        lines = split_csv_lines(content)
        if not lines:
            return self.failure("CSVファイルが空です")

        header_index = self.locate_header(lines)
        if header_index is None:
            return self.failure("ヘッダー行が見つかりません")

        header_line = lines[header_index]
        headers = parse_csv_line(header_line)
        mapping = build_column_mapping(headers, self.role_patterns)
        missing = self.missing_roles_message(mapping)
        if missing:
            logger.warning(f"{self.format_tag}: {missing} (header: {header_line})")
            return self.failure(missing, raw_line=header_line)

        records: List[TRecord] = []
        errors: List[ParseError] = []

        for i in range(header_index + 1, len(lines)):
            line = lines[i]
            row_number = i + 1

            if not line.strip() or line.startswith(COMMENT_PREFIX):
                continue

            fields = parse_csv_line(line)
            try:
                date_str = _field_at(fields, mapping.get(ColumnRole.DATE))
                txn_date = parse_date(date_str)
                if txn_date is None:
                    # Rows without a date are totals/footer rows
                    if not date_str.strip():
                        continue
                    raise RowParseError(f"無効な日付形式: {date_str}")

                row = StatementRow(
                    row_number=row_number,
                    line=line,
                    fields=fields,
                    mapping=mapping,
                    date=txn_date,
                    raw_data={header: _field_at(fields, index) for index, header in enumerate(headers)},
                )
                records.extend(self.parse_row(row))
            except RowParseError as e:
                logger.warning(f"{self.format_tag}: row {row_number}: {str(e)}")
                errors.append(ParseError(row=row_number, message=str(e), raw_line=line))
            except Exception as e:
                logger.error(f"{self.format_tag}: unexpected error in row {row_number}: {str(e)}")
                errors.append(ParseError(row=row_number, message=f"パースエラー: {str(e)}", raw_line=line))

        logger.info(
            f"{self.format_tag}: parsed {len(records)} transactions with {len(errors)} errors "
            f"from {len(lines) - header_index - 1} data lines"
        )
        return self.build_result(records, errors)


class BankStatementParser(StatementParser[ParsedTransaction, ParseResult]):
    """Base class for bank statement parsers."""

    bank_type: BankType = BankType.UNKNOWN

    @property
    def format_tag(self) -> str:
        return self.bank_type.value

    def build_result(self, records: List[ParsedTransaction], errors: List[ParseError]) -> ParseResult:
        return ParseResult.build(self.bank_type, records, errors)

    def failure(self, message: str, raw_line: Optional[str] = None) -> ParseResult:
        return ParseResult.failure(self.bank_type, message, raw_line)


class CardStatementParser(StatementParser[ParsedCardTransaction, CardParseResult]):
    """Base class for card statement parsers."""

    card_type: CardType = CardType.UNKNOWN

    @property
    def format_tag(self) -> str:
        return self.card_type.value

    def missing_roles_message(self, mapping: ColumnMapping) -> Optional[str]:
        if ColumnRole.DATE not in mapping or ColumnRole.AMOUNT not in mapping:
            return "必須カラム（利用日、利用金額）が見つかりません"
        return None

    def build_result(self, records: List[ParsedCardTransaction], errors: List[ParseError]) -> CardParseResult:
        return CardParseResult.build(self.card_type, records, errors)

    def failure(self, message: str, raw_line: Optional[str] = None) -> CardParseResult:
        return CardParseResult.failure(self.card_type, message, raw_line)
