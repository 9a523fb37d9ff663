"""WhatsApp message domain models."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from core.models.base import StudioModel


class MessageType(str, Enum):
    """Why the message was sent."""

    BIRTHDAY = "birthday"
    ANNIVERSARY = "anniversary"
    REMINDER = "reminder"
    CUSTOM = "custom"
    EVENT_UPDATE = "event_update"


class MessageStatus(str, Enum):
    """Message delivery status.

    Only SENT is ever produced; DELIVERED and FAILED need a delivery
    confirmation channel the studio does not have.
    """

    PENDING = "pending"
    SENT = "sent"
    DELIVERED = "delivered"
    FAILED = "failed"


class MessageSend(StudioModel):
    """Request to message one customer. {name} in the template is personalised."""

    customer_id: str = Field(..., min_length=1)
    message_type: MessageType = MessageType.CUSTOM
    template: str = Field(..., max_length=4096)


class BulkMessageSend(StudioModel):
    """Request to send one template to many customers."""

    customer_ids: list[str] = Field(..., min_length=1)
    message_type: MessageType = MessageType.CUSTOM
    template: str = Field(..., max_length=4096)


class WhatsAppMessage(StudioModel):
    """Full message entity as stored."""

    id: str
    customer_id: str
    customer_name: str
    customer_phone: str
    message_type: MessageType
    content: str
    status: MessageStatus = MessageStatus.PENDING
    credits_used: int = 0
    sent_at: datetime | None = None
    scheduled_for: datetime | None = None
