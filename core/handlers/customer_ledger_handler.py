"""
Handlers that keep a customer's booking history and lifetime spend current.

Both run after the booking or payment has been saved. If the customer was
deleted in the meantime there is nothing to update and the event is dropped.
"""

import logging
from typing import Callable

from core.events import EventBooked, PaymentRecorded

logger = logging.getLogger(__name__)


def handle_event_booked(customer_service) -> Callable:
    """
    Factory that returns an EventBooked handler.

    Args:
        customer_service: CustomerService instance

    Returns:
        Handler callable that appends the event to the customer's history
    """

    def handler(event: EventBooked):
        booking = event.event
        if not customer_service.record_event(booking.customer_id, booking.id):
            logger.warning(
                f"Event {booking.id} booked for missing customer {booking.customer_id}"
            )

    return handler


def handle_payment_recorded(customer_service) -> Callable:
    """
    Factory that returns a PaymentRecorded handler.

    Args:
        customer_service: CustomerService instance

    Returns:
        Handler callable that adds the payment to the customer's total_spent
    """

    def handler(event: PaymentRecorded):
        payment = event.payment
        if not customer_service.add_spend(payment.customer_id, payment.amount):
            logger.warning(
                f"Payment {payment.id} recorded for missing customer {payment.customer_id}"
            )

    return handler
