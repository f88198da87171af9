"""
Statement import models: parsed bank/card rows, parse results and ledger entries.
"""
import enum
import uuid
import datetime
from typing import Dict, List, Optional, Any

from pydantic import BaseModel, Field, ConfigDict

BANK_DESCRIPTION_PLACEHOLDER = "（摘要なし）"
CARD_DESCRIPTION_PLACEHOLDER = "（利用店名なし）"


class BankType(str, enum.Enum):
    """Enum for supported bank statement formats"""
    FORMAT_A = "bank-format-a"  # Single signed amount column with balance
    FORMAT_B = "bank-format-b"  # Separate withdrawal and deposit columns
    UNKNOWN = "unknown"


class CardType(str, enum.Enum):
    """Enum for supported card statement formats"""
    FORMAT_A = "card-format-a"  # Single amount column, negatives are refunds
    FORMAT_B = "card-format-b"  # Separate usage and refund columns
    UNKNOWN = "unknown-card"


class TransactionType(str, enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"


class CardTransactionType(str, enum.Enum):
    EXPENSE = "expense"
    REFUND = "refund"


class ColumnRole(str, enum.Enum):
    """Semantic meaning of a statement column, resolved from header labels."""
    DATE = "date"
    DESCRIPTION = "description"
    WITHDRAWAL = "withdrawal"
    DEPOSIT = "deposit"
    AMOUNT = "amount"
    BALANCE = "balance"
    PAYMENT_METHOD = "payment_method"
    REFUND = "refund"
    USER = "user"


ColumnMapping = Dict[ColumnRole, int]


class ParseError(BaseModel):
    """
    A parse diagnostic. Row is the 1-based position among non-blank logical
    lines, or 0 when the error is not tied to a row.
    """
    row: int = Field(ge=0)
    message: str
    raw_line: Optional[str] = Field(default=None, alias="rawLine")

    model_config = ConfigDict(populate_by_name=True)

    def format(self) -> str:
        return f"行{self.row}: {self.message}"


class ParsedTransaction(BaseModel):
    """A bank statement row. Amount is absolute, direction is carried by type."""
    date: datetime.date
    description: str
    amount: int = Field(ge=0)
    type: TransactionType
    balance: Optional[int] = None
    raw_data: Dict[str, str] = Field(default_factory=dict, alias="rawData")

    model_config = ConfigDict(populate_by_name=True)


class ParsedCardTransaction(BaseModel):
    """A card statement record. One source row may produce up to two of these."""
    date: datetime.date
    description: str
    amount: int = Field(ge=0)
    type: CardTransactionType
    payment_method: Optional[str] = Field(default=None, alias="paymentMethod")
    raw_data: Dict[str, str] = Field(default_factory=dict, alias="rawData")

    model_config = ConfigDict(populate_by_name=True)


class ParseResult(BaseModel):
    """Outcome of parsing a bank statement."""
    success: bool
    transactions: List[ParsedTransaction] = Field(default_factory=list)
    errors: List[ParseError] = Field(default_factory=list)
    bank_type: BankType = Field(alias="bankType")
    total_income: int = Field(default=0, alias="totalIncome")
    total_expense: int = Field(default=0, alias="totalExpense")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def build(
        cls,
        bank_type: BankType,
        transactions: List[ParsedTransaction],
        errors: List[ParseError]
    ) -> "ParseResult":
        """Create a result whose totals and success flag are derived from its contents."""
        return cls(
            success=not errors or bool(transactions),
            transactions=transactions,
            errors=errors,
            bank_type=bank_type,
            total_income=sum(t.amount for t in transactions if t.type == TransactionType.INCOME),
            total_expense=sum(t.amount for t in transactions if t.type == TransactionType.EXPENSE),
        )

    @classmethod
    def failure(cls, bank_type: BankType, message: str, raw_line: Optional[str] = None) -> "ParseResult":
        """Create a structural failure carrying a single row-0 error."""
        return cls(
            success=False,
            errors=[ParseError(row=0, message=message, raw_line=raw_line)],
            bank_type=bank_type,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)


class CardParseResult(BaseModel):
    """Outcome of parsing a card statement."""
    success: bool
    transactions: List[ParsedCardTransaction] = Field(default_factory=list)
    errors: List[ParseError] = Field(default_factory=list)
    card_type: CardType = Field(alias="cardType")
    total_expense: int = Field(default=0, alias="totalExpense")
    total_refund: int = Field(default=0, alias="totalRefund")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def build(
        cls,
        card_type: CardType,
        transactions: List[ParsedCardTransaction],
        errors: List[ParseError]
    ) -> "CardParseResult":
        """Create a result whose totals and success flag are derived from its contents."""
        return cls(
            success=not errors or bool(transactions),
            transactions=transactions,
            errors=errors,
            card_type=card_type,
            total_expense=sum(t.amount for t in transactions if t.type == CardTransactionType.EXPENSE),
            total_refund=sum(t.amount for t in transactions if t.type == CardTransactionType.REFUND),
        )

    @classmethod
    def failure(cls, card_type: CardType, message: str, raw_line: Optional[str] = None) -> "CardParseResult":
        """Create a structural failure carrying a single row-0 error."""
        return cls(
            success=False,
            errors=[ParseError(row=0, message=message, raw_line=raw_line)],
            card_type=card_type,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)


class LedgerEntry(BaseModel):
    """
    A ledger row produced from an imported statement, handed to the ledger
    repository for persistence.
    """
    entry_id: uuid.UUID = Field(default_factory=uuid.uuid4, alias="entryId")
    user_id: str = Field(alias="userId", min_length=1)
    transaction_date: datetime.date = Field(alias="transactionDate")
    description: str
    amount: int = Field(ge=0)
    transaction_type: TransactionType = Field(alias="transactionType")
    source: str
    memo: Optional[str] = None

    model_config = ConfigDict(
        populate_by_name=True,
        json_encoders={
            uuid.UUID: str
        }
    )

    @classmethod
    def from_bank_transaction(
        cls, user_id: str, transaction: ParsedTransaction, bank_type: BankType
    ) -> "LedgerEntry":
        return cls(
            user_id=user_id,
            transaction_date=transaction.date,
            description=transaction.description,
            amount=transaction.amount,
            transaction_type=transaction.type,
            source=bank_type.value,
        )

    @classmethod
    def from_card_transaction(
        cls, user_id: str, transaction: ParsedCardTransaction, card_type: CardType
    ) -> "LedgerEntry":
        """Card refunds flow back into the ledger as income."""
        transaction_type = (
            TransactionType.INCOME
            if transaction.type == CardTransactionType.REFUND
            else TransactionType.EXPENSE
        )
        memo = f"支払方法: {transaction.payment_method}" if transaction.payment_method else None
        return cls(
            user_id=user_id,
            transaction_date=transaction.date,
            description=transaction.description,
            amount=transaction.amount,
            transaction_type=transaction_type,
            source=card_type.value,
            memo=memo,
        )

    def to_dynamodb_item(self) -> Dict[str, Any]:
        """Serializes the entry to a flat dictionary for DynamoDB."""
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)

    @classmethod
    def from_dynamodb_item(cls, data: Dict[str, Any]) -> "LedgerEntry":
        converted_data = data.copy()
        # DynamoDB returns numbers as Decimal
        if 'amount' in converted_data:
            converted_data['amount'] = int(converted_data['amount'])
        return cls.model_validate(converted_data)


class ImportResult(BaseModel):
    """Outcome of importing a bank statement into the ledger."""
    success: bool
    message: str
    imported_count: int = Field(default=0, alias="importedCount")
    total_income: int = Field(default=0, alias="totalIncome")
    total_expense: int = Field(default=0, alias="totalExpense")
    errors: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode='json', by_alias=True)


class CardImportResult(BaseModel):
    """Outcome of importing a card statement into the ledger."""
    success: bool
    message: str
    imported_count: int = Field(default=0, alias="importedCount")
    total_expense: int = Field(default=0, alias="totalExpense")
    total_refund: int = Field(default=0, alias="totalRefund")
    errors: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode='json', by_alias=True)
