from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TransactionType(str, Enum):
    """
    Direction of money movement reported by a bank notification.
    """
    INCOME = "income"
    EXPENSE = "expense"


class ImportSource(str, Enum):
    """Where the text of an import came from."""
    SMS = "sms"
    CSV = "csv"


class ParsedTransaction(BaseModel):
    """
    A transaction record extracted from one bank notification.

    Records are frozen: once a parser emits one it is handed to storage as-is.
    Dates are ISO strings (YYYY-MM-DD) when the parser could resolve them; the
    CSV importer passes through date cells it could not interpret.
    """
    type: TransactionType
    amount: Decimal = Field(gt=0)
    balance: Optional[Decimal] = None
    from_person: Optional[str] = None
    description: str = Field(min_length=1)
    transaction_date: str
    transaction_time: str
    ref_no: Optional[str] = None
    sms_content: str

    model_config = ConfigDict(
        frozen=True,
        json_encoders={
            Decimal: str
        },
        use_enum_values=False
    )

    @field_validator('amount', 'balance', mode='before')
    @classmethod
    def ensure_decimal(cls, v: Any) -> Optional[Decimal]:
        if v is None or isinstance(v, Decimal):
            return v
        try:
            return Decimal(str(v))
        except Exception as e:
            raise ValueError(f"Invalid amount value: {v}. Could not convert to Decimal.") from e

    @field_validator('amount')
    @classmethod
    def check_finite_amount(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("Amount must be a finite number")
        return v

    def to_document(self) -> Dict[str, Any]:
        """
        Flatten the record into the field layout the transaction store expects.
        Absent optional fields are kept as None so every document has the same keys.
        """
        data = self.model_dump()
        data['type'] = self.type.value
        return data


class ImportResult(BaseModel):
    """Outcome of a single SMS or CSV import call."""
    source: ImportSource
    transactions: List[ParsedTransaction] = Field(default_factory=list)
    candidate_count: int = Field(default=0, ge=0)
    skipped_count: int = Field(default=0, ge=0)

    model_config = ConfigDict(
        frozen=True,
        use_enum_values=False
    )

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)

    @property
    def is_empty(self) -> bool:
        return not self.transactions

    def to_response_body(self) -> Dict[str, Any]:
        count = self.transaction_count
        return {
            "success": True,
            "message": f"{count} transaction(s) parsed",
            "count": count,
            "skipped": self.skipped_count,
            "source": self.source.value,
            "transactions": [tx.to_document() for tx in self.transactions],
        }
