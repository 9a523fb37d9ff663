"""Core domain models."""

from core.models.customer import Customer, CustomerCreate, CustomerUpdate
from core.models.payment import Payment, PaymentCreate, PaymentMethod, Invoice
from core.models.event import (
    Event, EventCreate, EventUpdate, EventType, EventStatus, ACTIVE_STATUSES,
)
from core.models.message import (
    WhatsAppMessage, MessageSend, BulkMessageSend, MessageStatus, MessageType,
)
from core.models.credit import (
    CreditTransaction, CreditTransactionType, CreditPurchase, CreditAudit,
)
from core.models.processing_job import (
    AIProcessingJob, ProcessingJobCreate, ProcessingJobStatus, ProcessingJobType,
)
from core.models.studio import StudioData, StudioSettings, DashboardStats

__all__ = [
    # Customer
    "Customer", "CustomerCreate", "CustomerUpdate",
    # Payment
    "Payment", "PaymentCreate", "PaymentMethod", "Invoice",
    # Event
    "Event", "EventCreate", "EventUpdate", "EventType", "EventStatus", "ACTIVE_STATUSES",
    # Message
    "WhatsAppMessage", "MessageSend", "BulkMessageSend", "MessageStatus", "MessageType",
    # Credits
    "CreditTransaction", "CreditTransactionType", "CreditPurchase", "CreditAudit",
    # AI processing
    "AIProcessingJob", "ProcessingJobCreate", "ProcessingJobStatus", "ProcessingJobType",
    # Aggregate
    "StudioData", "StudioSettings", "DashboardStats",
]
