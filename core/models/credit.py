"""WhatsApp credit ledger models."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from core.models.base import StudioModel


class CreditTransactionType(str, Enum):
    """Kind of credit movement."""

    CREDIT = "credit"
    DEBIT = "debit"
    PURCHASE = "purchase"
    REFUND = "refund"


class CreditPurchase(StudioModel):
    """Request to top up the studio's message credits."""

    credits: int = Field(..., gt=0)
    price: int = Field(..., ge=0)


class CreditTransaction(StudioModel):
    """Append-only audit row for a credit movement."""

    id: str
    customer_id: str | None = None
    type: CreditTransactionType
    amount: int
    event_id: str | None = None
    description: str
    date: datetime


class CreditAudit(StudioModel):
    """Running counter compared against purchases and message spend."""

    opening_balance: int
    purchased: int
    spent: int
    balance: int

    @property
    def expected_balance(self) -> int:
        return self.opening_balance + self.purchased - self.spent

    @property
    def is_consistent(self) -> bool:
        return self.balance == self.expected_balance
