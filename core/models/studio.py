"""The studio aggregate: every collection plus credits and settings."""

from pydantic import Field

from core.models.base import StudioModel
from core.models.credit import CreditTransaction
from core.models.customer import Customer
from core.models.event import Event
from core.models.message import WhatsAppMessage
from core.models.payment import Payment
from core.models.processing_job import AIProcessingJob


class StudioSettings(StudioModel):
    """Studio identity printed on invoices and messages."""

    studio_name: str = "PhotoStudio Pro"
    studio_phone: str = "+91-9876543210"
    studio_email: str = "info@photostudiopro.in"
    gst_number: str | None = "27AABCU9603R1ZX"


class StudioData(StudioModel):
    """
    Aggregate root. Loaded and saved as one JSON document.

    Services never hold on to an instance between operations; each mutation
    loads a fresh copy through StudioStore.mutate().
    """

    customers: list[Customer] = Field(default_factory=list)
    events: list[Event] = Field(default_factory=list)
    payments: list[Payment] = Field(default_factory=list)
    credit_transactions: list[CreditTransaction] = Field(default_factory=list)
    messages: list[WhatsAppMessage] = Field(default_factory=list)
    ai_processing_jobs: list[AIProcessingJob] = Field(default_factory=list)
    whatsapp_credits: int = 500
    settings: StudioSettings = Field(default_factory=StudioSettings)

    def find_customer(self, customer_id: str) -> Customer | None:
        return next((c for c in self.customers if c.id == customer_id), None)

    def find_event(self, event_id: str) -> Event | None:
        return next((e for e in self.events if e.id == event_id), None)

    def payments_for_event(self, event_id: str) -> list[Payment]:
        return [p for p in self.payments if p.event_id == event_id]


class DashboardStats(StudioModel):
    """Headline numbers for the dashboard."""

    todays_events: int
    pending_payments: int
    whatsapp_credits: int
    monthly_revenue: int
    total_customers: int
    active_events: int
