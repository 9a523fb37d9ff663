"""Event (booking) domain models.

Amounts are whole rupees. balance_due is never set by callers; it is always
produced by core.balance.recompute_balance.
"""

from datetime import date, datetime
from enum import Enum

from pydantic import Field

from core.models.base import StudioModel
from core.models.payment import PaymentMethod


class EventType(str, Enum):
    """Kind of shoot being booked."""

    WEDDING = "Wedding"
    BIRTHDAY = "Birthday"
    CORPORATE = "Corporate"
    ANNIVERSARY = "Anniversary"
    PRE_WEDDING = "Pre-Wedding"
    BABY_SHOWER = "Baby Shower"
    ENGAGEMENT = "Engagement"
    OTHER = "Other"


class EventStatus(str, Enum):
    """Booking pipeline status. Any status may move to any other."""

    BOOKED = "booked"
    CONFIRMED = "confirmed"
    SHOT = "shot"
    EDITING = "editing"
    READY = "ready"
    DELIVERED = "delivered"


# Statuses still occupying the studio's calendar or editing desk
ACTIVE_STATUSES = frozenset({
    EventStatus.BOOKED, EventStatus.CONFIRMED, EventStatus.SHOT, EventStatus.EDITING,
})


class EventCreate(StudioModel):
    """Data required to book an event."""

    customer_id: str = Field(..., min_length=1)
    event_type: EventType
    event_date: date
    venue: str = Field("", max_length=500)
    status: EventStatus = EventStatus.BOOKED
    total_amount: int = Field(0, ge=0)
    advance_paid: int = Field(0, ge=0)
    advance_method: PaymentMethod = PaymentMethod.CASH
    assigned_photographer: str = Field("", max_length=255)
    package_type: str = Field("", max_length=255)
    notes: str | None = Field(None, max_length=10000)


class EventUpdate(StudioModel):
    """Data that can be updated on an event. All fields optional.

    advance_paid is fixed at booking; later money goes through payments.
    """

    event_type: EventType | None = None
    event_date: date | None = None
    venue: str | None = Field(None, max_length=500)
    status: EventStatus | None = None
    total_amount: int | None = Field(None, ge=0)
    assigned_photographer: str | None = Field(None, max_length=255)
    package_type: str | None = Field(None, max_length=255)
    notes: str | None = Field(None, max_length=10000)


class Event(StudioModel):
    """Full event entity as stored."""

    id: str
    customer_id: str
    customer_name: str
    event_type: EventType
    event_date: date
    venue: str = ""
    status: EventStatus = EventStatus.BOOKED
    total_amount: int = 0
    advance_paid: int = 0
    balance_due: int = 0
    assigned_photographer: str = ""
    package_type: str = ""
    notes: str | None = None
    created_at: datetime

    @property
    def amount_paid(self) -> int:
        """Everything received so far, advance included."""
        return self.total_amount - self.balance_due

    @property
    def is_overpaid(self) -> bool:
        """Payments exceed the agreed total."""
        return self.balance_due < 0

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES
