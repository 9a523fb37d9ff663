"""
Domain events for the studio ledger.

Immutable records of something that already happened and was saved.
Services publish them after the store write; handlers react without the
publisher knowing who's listening.

Events carry the full domain object so handlers don't need to re-fetch it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from utils.ids import generate_id
from utils.timezone import now_utc


@dataclass(frozen=True, kw_only=True)
class StudioEvent:
    """Base class for all studio domain events."""
    event_id: str = field(default_factory=generate_id)
    occurred_at: datetime = field(default_factory=now_utc)


# =============================================================================
# CUSTOMER EVENTS
# =============================================================================


@dataclass(frozen=True)
class CustomerCreated(StudioEvent):
    """A new customer was added."""
    customer: Any = None  # Customer

    @classmethod
    def create(cls, customer: Any) -> "CustomerCreated":
        return cls(customer=customer)


# =============================================================================
# BOOKING EVENTS
# =============================================================================


@dataclass(frozen=True)
class EventBooked(StudioEvent):
    """A shoot was booked for a customer."""
    event: Any = None  # Event

    @classmethod
    def create(cls, event: Any) -> "EventBooked":
        return cls(event=event)


@dataclass(frozen=True)
class EventStatusChanged(StudioEvent):
    """A booking moved through the pipeline (in either direction)."""
    event: Any = None
    old_status: str = ""

    @classmethod
    def create(cls, event: Any, old_status: str) -> "EventStatusChanged":
        return cls(event=event, old_status=old_status)


# =============================================================================
# LEDGER EVENTS
# =============================================================================


@dataclass(frozen=True)
class PaymentRecorded(StudioEvent):
    """Money was received against an event."""
    payment: Any = None  # Payment
    event: Any = None  # Event with the recomputed balance

    @classmethod
    def create(cls, payment: Any, event: Any) -> "PaymentRecorded":
        return cls(payment=payment, event=event)


@dataclass(frozen=True)
class MessageSent(StudioEvent):
    """A WhatsApp message was recorded and its credits debited."""
    message: Any = None  # WhatsAppMessage

    @classmethod
    def create(cls, message: Any) -> "MessageSent":
        return cls(message=message)


@dataclass(frozen=True)
class CreditsPurchased(StudioEvent):
    """WhatsApp credits were topped up."""
    transaction: Any = None  # CreditTransaction

    @classmethod
    def create(cls, transaction: Any) -> "CreditsPurchased":
        return cls(transaction=transaction)
