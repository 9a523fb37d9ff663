"""
Balance and revenue arithmetic over the payment ledger.

recompute_balance is the only place an event's balance_due is derived.
Event creation, event edits and payment insertion all call it. It always
sums the full payment history rather than adjusting incrementally.
"""

from datetime import date
from typing import Iterable

from core.models import Event, Payment


def amount_received(event_id: str, payments: Iterable[Payment]) -> int:
    """Sum of every payment recorded against the event."""
    return sum(p.amount for p in payments if p.event_id == event_id)


def recompute_balance(event: Event, payments: Iterable[Payment]) -> int:
    """
    Compute balance_due = total_amount - sum(payments for this event).

    Overpayment yields a negative balance; it is not clamped.
    """
    return event.total_amount - amount_received(event.id, payments)


def apply_balance(event: Event, payments: Iterable[Payment]) -> Event:
    """Store the recomputed balance on the event and return it."""
    event.balance_due = recompute_balance(event, payments)
    return event


def revenue_for_month(payments: Iterable[Payment], year: int, month: int) -> int:
    """Total collected in one calendar month."""
    return sum(
        p.amount for p in payments
        if p.date.year == year and p.date.month == month
    )


def pending_total(events: Iterable[Event]) -> int:
    """Outstanding money across events that still owe something."""
    return sum(e.balance_due for e in events if e.balance_due > 0)


def is_overdue(event: Event, today: date) -> bool:
    """Event date has passed and money is still owed."""
    return event.balance_due > 0 and event.event_date < today
