"""
Statement import service.

Turns uploaded bank/card statements into ledger entries: decode the upload,
parse it (auto-detected or with an explicit format), then persist the extracted
transactions through the injected ledger repository.
"""
import logging
from typing import List, Optional, Union

from models.statement import (
    BankType,
    CardType,
    CardImportResult,
    CardParseResult,
    ImportResult,
    LedgerEntry,
    ParseError,
    ParseResult,
)
from services.statement_parser_service import (
    auto_parse_bank_csv,
    auto_parse_card_csv,
    parse_bank_csv,
    parse_card_csv,
)
from utils.import_config import DEFAULT_CONFIG, ImportConfig
from utils.ledger_repository import LedgerRepository, default_repository
from utils.transaction_parser import decode_content

logger = logging.getLogger(__name__)

PARSE_FAILED_MESSAGE = "CSVのパースに失敗しました"
IMPORT_FAILED_MESSAGE = "インポート処理中にエラーが発生しました"


class StatementImportService:
    def __init__(self, repository: Optional[LedgerRepository] = None, config: Optional[ImportConfig] = None):
        self.repository = repository if repository is not None else default_repository()
        self.config = config or DEFAULT_CONFIG

    def decode_upload(self, content: bytes) -> str:
        """
        Decode an uploaded statement file.

        Raises:
            ValueError: If the upload is empty or exceeds the configured size limit
        """
        if not content:
            raise ValueError("Uploaded file is empty")
        if len(content) > self.config.max_file_bytes:
            raise ValueError(
                f"Uploaded file is {len(content)} bytes, limit is {self.config.max_file_bytes} bytes"
            )
        return decode_content(content)

    def preview_bank_csv(self, content: str, bank_type: Optional[Union[BankType, str]] = None) -> ParseResult:
        if bank_type and bank_type != BankType.UNKNOWN:
            return parse_bank_csv(content, bank_type)
        return auto_parse_bank_csv(content)

    def preview_card_csv(self, content: str, card_type: Optional[Union[CardType, str]] = None) -> CardParseResult:
        if card_type and card_type != CardType.UNKNOWN:
            return parse_card_csv(content, card_type)
        return auto_parse_card_csv(content)

    def import_bank_csv(
        self,
        user_id: str,
        content: str,
        bank_type: Optional[Union[BankType, str]] = None
    ) -> ImportResult:
        """Parse a bank statement and persist its transactions for the user."""
        result = self.preview_bank_csv(content, bank_type)
        errors = self._format_errors(result.errors)

        if not result.success and not result.transactions:
            logger.warning(f"Bank statement parse failed for user {user_id}: {len(result.errors)} errors")
            return ImportResult(success=False, message=PARSE_FAILED_MESSAGE, errors=errors)

        try:
            entries = [
                LedgerEntry.from_bank_transaction(user_id, transaction, result.bank_type)
                for transaction in result.transactions
            ]
            imported = self.repository.add_entries(entries)
        except Exception as e:
            logger.error(f"Error saving bank statement entries for user {user_id}: {str(e)}")
            return ImportResult(success=False, message=IMPORT_FAILED_MESSAGE, errors=[str(e)])

        logger.info(f"Imported {imported} {result.bank_type.value} transactions for user {user_id}")
        return ImportResult(
            success=True,
            message=f"{imported}件の取引をインポートしました",
            imported_count=imported,
            total_income=result.total_income,
            total_expense=result.total_expense,
            errors=errors,
        )

    def import_card_csv(
        self,
        user_id: str,
        content: str,
        card_type: Optional[Union[CardType, str]] = None
    ) -> CardImportResult:
        """Parse a card statement and persist its transactions for the user."""
        result = self.preview_card_csv(content, card_type)
        errors = self._format_errors(result.errors)

        if not result.success and not result.transactions:
            logger.warning(f"Card statement parse failed for user {user_id}: {len(result.errors)} errors")
            return CardImportResult(success=False, message=PARSE_FAILED_MESSAGE, errors=errors)

        try:
            entries = [
                LedgerEntry.from_card_transaction(user_id, transaction, result.card_type)
                for transaction in result.transactions
            ]
            imported = self.repository.add_entries(entries)
        except Exception as e:
            logger.error(f"Error saving card statement entries for user {user_id}: {str(e)}")
            return CardImportResult(success=False, message=IMPORT_FAILED_MESSAGE, errors=[str(e)])

        logger.info(f"Imported {imported} {result.card_type.value} transactions for user {user_id}")
        return CardImportResult(
            success=True,
            message=f"{imported}件のカード明細をインポートしました（{result.card_type.value}）",
            imported_count=imported,
            total_expense=result.total_expense,
            total_refund=result.total_refund,
            errors=errors,
        )

    def _format_errors(self, errors: List[ParseError]) -> List[str]:
        return [error.format() for error in errors[:self.config.max_error_messages]]
