"""
Payment service: the ledger of money received against events.

Payments are append-only. Recording one recomputes the owning event's
balance from its full payment history in the same store write.
"""

import logging
from datetime import date, timedelta

from core.audit import AuditLogger, AuditAction
from core.balance import apply_balance, is_overdue, revenue_for_month
from core.event_bus import EventBus
from core.events import PaymentRecorded
from core.models import Event, Invoice, Payment, PaymentCreate
from core.store import StudioStore
from utils.ids import generate_id
from utils.timezone import local_today

logger = logging.getLogger(__name__)

FILTERS = {"all", "recent", "overdue"}


def invoice_number(payment_id: str) -> str:
    return f"INV-{payment_id.upper()}"


class PaymentService:
    """Service for payment operations."""

    def __init__(
        self,
        store: StudioStore,
        audit: AuditLogger,
        event_bus: EventBus | None = None,
        tz_name: str = "Asia/Kolkata",
        recent_days: int = 7,
    ):
        self.store = store
        self.audit = audit
        self.event_bus = event_bus
        self.tz_name = tz_name
        self.recent_days = recent_days

    def create(self, data: PaymentCreate) -> Payment:
        """
        Record a payment and update the event's balance.

        Args:
            data: Payment data

        Returns:
            Recorded payment

        Raises:
            ValueError: If the event does not exist
        """
        with self.store.mutate() as studio:
            event = studio.find_event(data.event_id)
            if event is None:
                raise ValueError(f"Event {data.event_id} not found")

            payment = Payment(
                id=generate_id(),
                customer_id=event.customer_id,
                **data.model_dump(),
            )
            studio.payments.append(payment)
            old_balance = event.balance_due
            apply_balance(event, studio.payments)

        if event.is_overpaid:
            logger.warning(
                f"Event {event.id} overpaid by {-event.balance_due} after payment {payment.id}"
            )

        self.audit.log_change(
            entity_type="payment",
            entity_id=payment.id,
            action=AuditAction.CREATE,
            changes={"created": payment.model_dump(mode="json", exclude_none=True)}
        )
        self.audit.log_change(
            entity_type="event",
            entity_id=event.id,
            action=AuditAction.UPDATE,
            changes={"balance_due": {"old": old_balance, "new": event.balance_due}}
        )

        if self.event_bus is not None:
            self.event_bus.publish(PaymentRecorded.create(payment=payment, event=event))

        return payment

    def get_by_id(self, payment_id: str) -> Payment | None:
        studio = self.store.load()
        return next((p for p in studio.payments if p.id == payment_id), None)

    def list_all(
        self,
        filter_by: str = "all",
        search: str | None = None,
        today: date | None = None,
    ) -> list[Payment]:
        """
        List payments, newest first.

        Args:
            filter_by: all, recent (dated within the last recent_days) or
                overdue (the owning event still owes money)
            search: Case-insensitive match on customer name, transaction ID
                or payment method
            today: Reference date for the recent filter

        Raises:
            ValueError: On an unknown filter
        """
        if filter_by not in FILTERS:
            raise ValueError(f"Unknown filter '{filter_by}'. Valid: {', '.join(sorted(FILTERS))}")

        studio = self.store.load()
        payments = studio.payments

        if filter_by == "recent":
            today = today or local_today(self.tz_name)
            cutoff = today - timedelta(days=self.recent_days)
            payments = [p for p in payments if p.date >= cutoff]
        elif filter_by == "overdue":
            owing = {e.id for e in studio.events if e.balance_due > 0}
            payments = [p for p in payments if p.event_id in owing]

        if search:
            needle = search.casefold()
            names = {c.id: c.name.casefold() for c in studio.customers}
            payments = [
                p for p in payments
                if needle in names.get(p.customer_id, "")
                or needle in (p.transaction_id or "").casefold()
                or needle in p.method.value.casefold()
            ]

        return sorted(payments, key=lambda p: p.date, reverse=True)

    def list_for_event(self, event_id: str) -> list[Payment]:
        """Payments against one event, oldest first."""
        return sorted(self.store.load().payments_for_event(event_id), key=lambda p: p.date)

    def list_pending_events(self) -> list[Event]:
        """Events that still owe money."""
        return [e for e in self.store.load().events if e.balance_due > 0]

    def list_overdue_events(self, today: date | None = None) -> list[Event]:
        """Events whose date has passed with money still owed."""
        today = today or local_today(self.tz_name)
        return [e for e in self.store.load().events if is_overdue(e, today)]

    def total_revenue(self) -> int:
        return sum(p.amount for p in self.store.load().payments)

    def monthly_revenue(self, today: date | None = None) -> int:
        """Money collected in the current calendar month."""
        today = today or local_today(self.tz_name)
        return revenue_for_month(self.store.load().payments, today.year, today.month)

    def generate_invoice(self, payment_id: str) -> Invoice | None:
        """
        Build a printable invoice for one payment.

        Returns:
            Invoice, or None if the payment, its event or its customer is gone
        """
        studio = self.store.load()
        payment = next((p for p in studio.payments if p.id == payment_id), None)
        if payment is None:
            return None

        event = studio.find_event(payment.event_id)
        customer = studio.find_customer(payment.customer_id)
        if event is None or customer is None:
            logger.warning(f"Cannot invoice payment {payment_id}: event or customer missing")
            return None

        invoice = Invoice(
            invoice_number=invoice_number(payment.id),
            date=payment.date,
            customer_name=customer.name,
            customer_phone=customer.phone,
            event_type=event.event_type.value,
            event_date=event.event_date,
            amount=payment.amount,
            method=payment.method,
            transaction_id=payment.transaction_id,
            balance_due=event.balance_due,
            studio_name=studio.settings.studio_name,
            gst_number=studio.settings.gst_number,
        )
        logger.info(f"Generated invoice {invoice.invoice_number}")
        return invoice
