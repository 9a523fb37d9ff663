"""
Message service: WhatsApp wishes and reminders paid for with credits.

Every message costs one credit per started 160 characters of its rendered
text. The credit check, the message record and the debit all happen inside
one locked store mutation, so the counter can never go below zero.

Nothing is actually delivered from here. A message is recorded as sent and
whatsapp_link() builds the wa.me deep link the operator opens to send it.
"""

import logging
import math
import re
from datetime import date, datetime, timezone
from urllib.parse import quote

from core.audit import AuditLogger, AuditAction
from core.event_bus import EventBus
from core.events import CreditsPurchased, MessageSent
from core.exceptions import InsufficientCreditsError
from core.models import (
    CreditAudit,
    CreditTransaction,
    CreditTransactionType,
    Customer,
    MessageStatus,
    MessageType,
    WhatsAppMessage,
)
from core.store import StudioStore
from utils.ids import generate_id
from utils.timezone import falls_within, local_today, next_anniversary, now_utc

logger = logging.getLogger(__name__)

# Sort position for legacy records with neither sent_at nor scheduled_for
_UNDATED = datetime.min.replace(tzinfo=timezone.utc)

# Characters covered by one credit (one SMS-sized segment)
CREDIT_CHARS = 160

MESSAGE_TEMPLATES = {
    "birthday": (
        "🎉 Happy Birthday {name}! 🎂 Hope your special day is filled with joy and "
        "amazing memories! Thank you for choosing PhotoStudio Pro for your precious "
        "moments. 📸"
    ),
    "anniversary": (
        "💕 Happy Anniversary {name}! 🥳 Wishing you both a lifetime of love and "
        "happiness. It was our pleasure capturing your beautiful moments! 📸✨"
    ),
    "reminder": (
        "📸 Hi {name}! This is a friendly reminder about your upcoming photo session. "
        "We're excited to capture your special moments! Contact us if you have any "
        "questions."
    ),
    "thank_you": (
        "🙏 Thank you {name} for choosing PhotoStudio Pro! We loved capturing your "
        "special moments. Don't forget to share your favorite photos with us! 📸"
    ),
}

# (credits, price in rupees)
CREDIT_PACKAGES = [
    (100, 120),
    (500, 550),
    (1000, 1000),
    (2000, 1800),
]


def compute_cost(text: str) -> int:
    """Credits needed for a message: one per started 160 characters."""
    return math.ceil(len(text) / CREDIT_CHARS)


def render_template(template: str, name: str) -> str:
    """Replace every {name} token; other braces are left as written."""
    return template.replace("{name}", name)


def whatsapp_link(phone: str, text: str) -> str:
    """wa.me deep link that opens a chat with the text pre-filled."""
    digits = re.sub(r"\D", "", phone)
    return f"https://wa.me/{digits}?text={quote(text, safe='')}"


class MessageService:
    """Service for WhatsApp messages and the credit ledger."""

    def __init__(
        self,
        store: StudioStore,
        audit: AuditLogger,
        event_bus: EventBus | None = None,
        tz_name: str = "Asia/Kolkata",
        initial_credits: int = 500,
    ):
        self.store = store
        self.audit = audit
        self.event_bus = event_bus
        self.tz_name = tz_name
        self.initial_credits = initial_credits

    def _publish_sent(self, messages: list[WhatsAppMessage]) -> None:
        for message in messages:
            self.audit.log_change(
                entity_type="message",
                entity_id=message.id,
                action=AuditAction.CREATE,
                changes={"created": message.model_dump(mode="json", exclude_none=True)}
            )
            if self.event_bus is not None:
                self.event_bus.publish(MessageSent.create(message=message))

    def send(
        self,
        customer_id: str,
        customer_name: str,
        customer_phone: str,
        message_type: MessageType,
        template: str,
    ) -> WhatsAppMessage:
        """
        Personalise a template, charge for it and record it as sent.

        Args:
            customer_id: Recipient ID (not looked up)
            customer_name: Substituted for {name}
            customer_phone: Recipient number
            message_type: Why the message is sent
            template: Message text, may contain {name}

        Returns:
            Recorded message with status sent

        Raises:
            ValueError: If the rendered text is empty
            InsufficientCreditsError: If the cost exceeds the credit balance
        """
        content = render_template(template, customer_name)
        if not content.strip():
            raise ValueError("Message text must not be empty")

        cost = compute_cost(content)

        with self.store.mutate() as studio:
            if cost > studio.whatsapp_credits:
                raise InsufficientCreditsError(cost, studio.whatsapp_credits)

            message = WhatsAppMessage(
                id=generate_id(),
                customer_id=customer_id,
                customer_name=customer_name,
                customer_phone=customer_phone,
                message_type=message_type,
                content=content,
                status=MessageStatus.SENT,
                credits_used=cost,
                sent_at=now_utc(),
            )
            studio.messages.append(message)
            studio.whatsapp_credits -= cost
            remaining = studio.whatsapp_credits

        logger.info(f"Message {message.id} to {customer_id}: {cost} credits, {remaining} left")
        self._publish_sent([message])
        return message

    def send_to_customer(
        self,
        customer_id: str,
        message_type: MessageType,
        template: str,
    ) -> WhatsAppMessage:
        """
        Send to a stored customer.

        Raises:
            ValueError: If the customer does not exist or the text is empty
            InsufficientCreditsError: If the cost exceeds the credit balance
        """
        customer = self.store.load().find_customer(customer_id)
        if customer is None:
            raise ValueError(f"Customer {customer_id} not found")
        return self.send(customer.id, customer.name, customer.phone, message_type, template)

    def send_bulk(
        self,
        customer_ids: list[str],
        message_type: MessageType,
        template: str,
    ) -> list[WhatsAppMessage]:
        """
        Send one template to many customers, all or nothing.

        The total cost of every personalised copy is checked against the
        balance before anything is recorded. Unknown customer IDs are skipped.

        Raises:
            ValueError: If any rendered text is empty
            InsufficientCreditsError: If the total cost exceeds the balance
        """
        with self.store.mutate() as studio:
            recipients = []
            for customer_id in dict.fromkeys(customer_ids):
                customer = studio.find_customer(customer_id)
                if customer is None:
                    logger.warning(f"Bulk send: skipping unknown customer {customer_id}")
                    continue
                content = render_template(template, customer.name)
                if not content.strip():
                    raise ValueError("Message text must not be empty")
                recipients.append((customer, content, compute_cost(content)))

            total = sum(cost for _, _, cost in recipients)
            if total > studio.whatsapp_credits:
                raise InsufficientCreditsError(total, studio.whatsapp_credits)

            sent_at = now_utc()
            messages = [
                WhatsAppMessage(
                    id=generate_id(),
                    customer_id=customer.id,
                    customer_name=customer.name,
                    customer_phone=customer.phone,
                    message_type=message_type,
                    content=content,
                    status=MessageStatus.SENT,
                    credits_used=cost,
                    sent_at=sent_at,
                )
                for customer, content, cost in recipients
            ]
            studio.messages.extend(messages)
            studio.whatsapp_credits -= total

        logger.info(f"Bulk send: {len(messages)} messages, {total} credits")
        self._publish_sent(messages)
        return messages

    def send_birthday_wish(self, customer_id: str) -> WhatsAppMessage:
        return self.send_to_customer(
            customer_id, MessageType.BIRTHDAY, MESSAGE_TEMPLATES["birthday"]
        )

    def send_anniversary_wish(self, customer_id: str) -> WhatsAppMessage:
        return self.send_to_customer(
            customer_id, MessageType.ANNIVERSARY, MESSAGE_TEMPLATES["anniversary"]
        )

    def purchase_credits(self, amount: int, price: int) -> CreditTransaction:
        """
        Top up the credit balance.

        Args:
            amount: Credits bought
            price: Rupees paid, only recorded in the description

        Returns:
            The purchase transaction
        """
        if amount <= 0:
            raise ValueError("Credits purchased must be positive")

        transaction = CreditTransaction(
            id=generate_id(),
            type=CreditTransactionType.PURCHASE,
            amount=amount,
            description=f"Purchased {amount} WhatsApp credits for ₹{price}",
            date=now_utc(),
        )

        with self.store.mutate() as studio:
            studio.whatsapp_credits += amount
            studio.credit_transactions.append(transaction)

        self.audit.log_change(
            entity_type="credit_transaction",
            entity_id=transaction.id,
            action=AuditAction.CREATE,
            changes={"created": transaction.model_dump(mode="json", exclude_none=True)}
        )

        if self.event_bus is not None:
            self.event_bus.publish(CreditsPurchased.create(transaction=transaction))

        return transaction

    def get_credits(self) -> int:
        return self.store.load().whatsapp_credits

    def credit_audit(self) -> CreditAudit:
        """Compare the credit counter with purchases and message spend."""
        studio = self.store.load()
        audit = CreditAudit(
            opening_balance=self.initial_credits,
            purchased=sum(
                t.amount for t in studio.credit_transactions
                if t.type == CreditTransactionType.PURCHASE
            ),
            spent=sum(m.credits_used for m in studio.messages),
            balance=studio.whatsapp_credits,
        )
        if not audit.is_consistent:
            logger.warning(
                f"Credit counter {audit.balance} differs from ledger {audit.expected_balance}"
            )
        return audit

    def list_messages(
        self,
        customer_id: str | None = None,
        message_type: MessageType | None = None,
    ) -> list[WhatsAppMessage]:
        """Sent messages, newest first."""
        messages = self.store.load().messages
        if customer_id is not None:
            messages = [m for m in messages if m.customer_id == customer_id]
        if message_type is not None:
            messages = [m for m in messages if m.message_type == message_type]
        return sorted(messages, key=lambda m: m.sent_at or m.scheduled_for or _UNDATED, reverse=True)

    def list_credit_transactions(self) -> list[CreditTransaction]:
        return sorted(self.store.load().credit_transactions, key=lambda t: t.date, reverse=True)

    def _upcoming(self, field: str, days: int, today: date | None) -> list[Customer]:
        today = today or local_today(self.tz_name)
        matches = [
            c for c in self.store.load().customers
            if getattr(c, field) is not None and falls_within(getattr(c, field), today, days)
        ]
        return sorted(matches, key=lambda c: next_anniversary(getattr(c, field), today))

    def upcoming_birthdays(self, days: int = 7, today: date | None = None) -> list[Customer]:
        """Customers whose birthday falls within the next `days` days, soonest first."""
        return self._upcoming("birthday", days, today)

    def upcoming_anniversaries(self, days: int = 7, today: date | None = None) -> list[Customer]:
        """Customers whose anniversary falls within the next `days` days, soonest first."""
        return self._upcoming("anniversary", days, today)
