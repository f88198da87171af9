"""
Institution-specific statement parsers.

Public API:
    - StatementParser: shared parse algorithm (header, column mapping, row loop)
    - BankStatementParser / CardStatementParser: result-type specific bases
    - bank_format_a_parser, bank_format_b_parser: bank statement parsers
    - card_format_a_parser, card_format_b_parser: card statement parsers
"""

from services.statement_parsers.base import (
    StatementParser,
    BankStatementParser,
    CardStatementParser,
    StatementRow,
    RowParseError,
)
from services.statement_parsers.bank_format_a import BankFormatAParser, bank_format_a_parser
from services.statement_parsers.bank_format_b import BankFormatBParser, bank_format_b_parser
from services.statement_parsers.card_format_a import CardFormatAParser, card_format_a_parser
from services.statement_parsers.card_format_b import (
    CardFormatBParser,
    card_format_b_parser,
    split_usage_and_refund,
)

__all__ = [
    'StatementParser',
    'BankStatementParser',
    'CardStatementParser',
    'StatementRow',
    'RowParseError',
    'BankFormatAParser',
    'BankFormatBParser',
    'CardFormatAParser',
    'CardFormatBParser',
    'bank_format_a_parser',
    'bank_format_b_parser',
    'card_format_a_parser',
    'card_format_b_parser',
    'split_usage_and_refund',
]
