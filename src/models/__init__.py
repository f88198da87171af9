"""
Models package for the household statement import backend.
"""

from .statement import (
    BankType,
    CardType,
    TransactionType,
    CardTransactionType,
    ColumnRole,
    ColumnMapping,
    ParseError,
    ParsedTransaction,
    ParsedCardTransaction,
    ParseResult,
    CardParseResult,
    LedgerEntry,
    ImportResult,
    CardImportResult,
    BANK_DESCRIPTION_PLACEHOLDER,
    CARD_DESCRIPTION_PLACEHOLDER,
)

__all__ = [
    'BankType',
    'CardType',
    'TransactionType',
    'CardTransactionType',
    'ColumnRole',
    'ColumnMapping',
    'ParseError',
    'ParsedTransaction',
    'ParsedCardTransaction',
    'ParseResult',
    'CardParseResult',
    'LedgerEntry',
    'ImportResult',
    'CardImportResult',
    'BANK_DESCRIPTION_PLACEHOLDER',
    'CARD_DESCRIPTION_PLACEHOLDER',
]
