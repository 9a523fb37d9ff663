"""Dashboard service: headline numbers computed from one store snapshot."""

import logging
from datetime import date

from core.balance import pending_total, revenue_for_month
from core.models import DashboardStats
from core.store import StudioStore
from utils.timezone import local_today

logger = logging.getLogger(__name__)


class DashboardService:
    """Read-only summaries for the studio dashboard."""

    def __init__(self, store: StudioStore, tz_name: str = "Asia/Kolkata"):
        self.store = store
        self.tz_name = tz_name

    def stats(self, today: date | None = None) -> DashboardStats:
        """
        Compute dashboard statistics.

        Args:
            today: Reference date (defaults to today in the studio timezone)
        """
        today = today or local_today(self.tz_name)
        studio = self.store.load()

        return DashboardStats(
            todays_events=sum(1 for e in studio.events if e.event_date == today),
            pending_payments=pending_total(studio.events),
            whatsapp_credits=studio.whatsapp_credits,
            monthly_revenue=revenue_for_month(studio.payments, today.year, today.month),
            total_customers=len(studio.customers),
            active_events=sum(1 for e in studio.events if e.is_active),
        )
