"""Payment domain models.

Payments are append-only: recorded once, never edited or removed. Amounts are
whole rupees.
"""

from datetime import date
from enum import Enum

from pydantic import Field

from core.models.base import StudioModel


class PaymentMethod(str, Enum):
    """How the customer paid."""

    CASH = "Cash"
    UPI = "UPI"
    CARD = "Card"
    BANK_TRANSFER = "Bank Transfer"
    CHEQUE = "Cheque"


class PaymentCreate(StudioModel):
    """Data required to record a payment against an event."""

    event_id: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0)
    method: PaymentMethod
    transaction_id: str | None = Field(None, max_length=100)
    date: date
    notes: str | None = Field(None, max_length=2000)
    invoice_generated: bool = False


class Payment(StudioModel):
    """Full payment entity as stored."""

    id: str
    event_id: str
    customer_id: str
    amount: int
    method: PaymentMethod
    transaction_id: str | None = None
    date: date
    notes: str | None = None
    invoice_generated: bool = False


class Invoice(StudioModel):
    """Printable receipt for a single payment. Derived, never stored."""

    invoice_number: str
    date: date
    customer_name: str
    customer_phone: str
    event_type: str
    event_date: date
    amount: int
    method: PaymentMethod
    transaction_id: str | None = None
    balance_due: int
    studio_name: str
    gst_number: str | None = None
