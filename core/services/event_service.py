"""
Event service for the booking pipeline.

An advance taken at booking is recorded as the event's first payment, in the
same store write that creates the event. From then on an event's balance is
always total_amount minus every payment recorded against it, computed by
core.balance.recompute_balance on every path that could change it.
"""

import logging
from datetime import date

from core.audit import AuditLogger, AuditAction, compute_changes
from core.balance import apply_balance
from core.event_bus import EventBus
from core.events import EventBooked, EventStatusChanged, PaymentRecorded
from core.models import Event, EventCreate, EventStatus, EventUpdate, Payment
from core.store import StudioStore
from utils.ids import generate_id
from utils.timezone import local_today, now_utc

logger = logging.getLogger(__name__)

ADVANCE_NOTE = "Advance at booking"


class EventService:
    """Service for event (booking) operations."""

    def __init__(
        self,
        store: StudioStore,
        audit: AuditLogger,
        event_bus: EventBus | None = None,
        tz_name: str = "Asia/Kolkata",
    ):
        self.store = store
        self.audit = audit
        self.event_bus = event_bus
        self.tz_name = tz_name

    def create(self, data: EventCreate) -> Event:
        """
        Book an event for an existing customer.

        Args:
            data: Event booking data

        Returns:
            Created event with balance_due = total_amount - advance_paid

        Raises:
            ValueError: If the customer does not exist
        """
        advance: Payment | None = None

        with self.store.mutate() as studio:
            customer = studio.find_customer(data.customer_id)
            if customer is None:
                raise ValueError(f"Customer {data.customer_id} not found")

            event = Event(
                id=generate_id(),
                customer_name=customer.name,
                created_at=now_utc(),
                **data.model_dump(exclude={"advance_method"}),
            )

            if data.advance_paid > 0:
                advance = Payment(
                    id=generate_id(),
                    event_id=event.id,
                    customer_id=customer.id,
                    amount=data.advance_paid,
                    method=data.advance_method,
                    date=local_today(self.tz_name),
                    notes=ADVANCE_NOTE,
                )
                studio.payments.append(advance)

            apply_balance(event, studio.payments)
            studio.events.append(event)

        self.audit.log_change(
            entity_type="event",
            entity_id=event.id,
            action=AuditAction.CREATE,
            changes={"created": event.model_dump(mode="json", exclude_none=True)}
        )
        if advance is not None:
            self.audit.log_change(
                entity_type="payment",
                entity_id=advance.id,
                action=AuditAction.CREATE,
                changes={"created": advance.model_dump(mode="json", exclude_none=True)}
            )

        if self.event_bus is not None:
            self.event_bus.publish(EventBooked.create(event=event))
            if advance is not None:
                self.event_bus.publish(PaymentRecorded.create(payment=advance, event=event))

        return event

    def get_by_id(self, event_id: str) -> Event | None:
        """
        Get event by ID.

        Returns:
            Event if found, None otherwise.
        """
        return self.store.load().find_event(event_id)

    def update(self, event_id: str, data: EventUpdate) -> Event | None:
        """
        Update event fields and re-derive its balance.

        Args:
            event_id: Event ID
            data: Fields to update (only non-None fields are changed)

        Returns:
            Updated event, or None if no such event
        """
        updates = data.model_dump(exclude_none=True)

        with self.store.mutate() as studio:
            for index, current in enumerate(studio.events):
                if current.id == event_id:
                    break
            else:
                return None

            updated = current.model_copy(update=updates)
            apply_balance(updated, studio.payments)
            studio.events[index] = updated

        changes = compute_changes(
            current.model_dump(mode="json"),
            updated.model_dump(mode="json")
        )
        if changes:
            self.audit.log_change(
                entity_type="event",
                entity_id=event_id,
                action=AuditAction.UPDATE,
                changes=changes
            )

        if self.event_bus is not None and updated.status != current.status:
            self.event_bus.publish(
                EventStatusChanged.create(event=updated, old_status=current.status.value)
            )

        return updated

    def list_all(
        self,
        status: EventStatus | None = None,
        search: str | None = None,
    ) -> list[Event]:
        """
        List events ordered by event date.

        Args:
            status: Only events in this pipeline status
            search: Case-insensitive match on customer name, event type or venue
        """
        events = self.store.load().events

        if status is not None:
            events = [e for e in events if e.status == status]

        if search:
            needle = search.casefold()
            events = [
                e for e in events
                if needle in e.customer_name.casefold()
                or needle in e.event_type.value.casefold()
                or needle in e.venue.casefold()
            ]

        return sorted(events, key=lambda e: e.event_date)

    def list_for_customer(self, customer_id: str) -> list[Event]:
        """Events booked by one customer, ordered by event date."""
        events = self.store.load().events
        return sorted(
            (e for e in events if e.customer_id == customer_id),
            key=lambda e: e.event_date,
        )

    def list_upcoming(self, today: date | None = None, limit: int = 5) -> list[Event]:
        """
        Events on or after today, soonest first.

        Args:
            today: Reference date (defaults to today in the studio timezone)
            limit: Maximum results
        """
        today = today or local_today(self.tz_name)
        events = self.store.load().events
        upcoming = sorted(
            (e for e in events if e.event_date >= today),
            key=lambda e: e.event_date,
        )
        return upcoming[:limit]
