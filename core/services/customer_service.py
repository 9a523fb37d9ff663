"""
Customer service for CRUD operations.

Handles customer lifecycle: create, read, update, delete.
Deleting a customer never touches their events or payments; those keep the
old customer_id and simply become orphans.
"""

import logging

from core.audit import AuditLogger, AuditAction, compute_changes
from core.event_bus import EventBus
from core.events import CustomerCreated
from core.models import Customer, CustomerCreate, CustomerUpdate
from core.store import StudioStore
from utils.ids import generate_id
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

SORT_KEYS = {"name", "created_at", "total_spent", "credit_balance"}
FILTERS = {"all", "has_credit", "high_value"}


class CustomerService:
    """Service for customer operations."""

    def __init__(
        self,
        store: StudioStore,
        audit: AuditLogger,
        event_bus: EventBus | None = None,
        high_value_threshold: int = 30000,
    ):
        self.store = store
        self.audit = audit
        self.event_bus = event_bus
        self.high_value_threshold = high_value_threshold

    def create(self, data: CustomerCreate) -> Customer:
        """
        Create a new customer.

        Name and phone were already checked by CustomerCreate; an invalid
        request never reaches the store.

        Args:
            data: Customer creation data

        Returns:
            Created customer
        """
        customer = Customer(
            id=generate_id(),
            created_at=now_utc(),
            **data.model_dump(),
        )

        with self.store.mutate() as studio:
            studio.customers.append(customer)

        self.audit.log_change(
            entity_type="customer",
            entity_id=customer.id,
            action=AuditAction.CREATE,
            changes={"created": data.model_dump(mode="json", exclude_none=True)}
        )

        if self.event_bus is not None:
            self.event_bus.publish(CustomerCreated.create(customer=customer))

        return customer

    def get_by_id(self, customer_id: str) -> Customer | None:
        """
        Get customer by ID.

        Returns:
            Customer if found, None otherwise.
        """
        return self.store.load().find_customer(customer_id)

    def update(self, customer_id: str, data: CustomerUpdate) -> Customer | None:
        """
        Update customer fields.

        Args:
            customer_id: Customer ID
            data: Fields to update (only non-None fields are changed)

        Returns:
            Updated customer, or None if no such customer
        """
        updates = data.model_dump(exclude_none=True)

        with self.store.mutate() as studio:
            for index, current in enumerate(studio.customers):
                if current.id == customer_id:
                    break
            else:
                return None

            if not updates:
                return current  # Nothing to update

            updated = current.model_copy(update=updates)
            studio.customers[index] = updated

        changes = compute_changes(
            current.model_dump(mode="json"),
            updated.model_dump(mode="json")
        )
        if changes:
            self.audit.log_change(
                entity_type="customer",
                entity_id=customer_id,
                action=AuditAction.UPDATE,
                changes=changes
            )

        return updated

    def delete(self, customer_id: str) -> bool:
        """
        Delete a customer. Events and payments referencing them are kept.

        Returns:
            True if deleted, False if not found
        """
        with self.store.mutate() as studio:
            current = studio.find_customer(customer_id)
            if current is None:
                return False
            studio.customers = [c for c in studio.customers if c.id != customer_id]

        self.audit.log_change(
            entity_type="customer",
            entity_id=customer_id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json")}
        )

        return True

    def list_all(
        self,
        sort_by: str = "name",
        filter_by: str = "all",
        limit: int | None = None,
    ) -> list[Customer]:
        """
        List customers.

        Args:
            sort_by: name (A-Z), created_at (newest first), total_spent or
                credit_balance (largest first)
            filter_by: all, has_credit (credit_balance > 0) or high_value
                (total_spent above the configured threshold)
            limit: Maximum results (None for all)

        Raises:
            ValueError: On an unknown sort key or filter
        """
        if sort_by not in SORT_KEYS:
            raise ValueError(f"Unknown sort '{sort_by}'. Valid: {', '.join(sorted(SORT_KEYS))}")
        if filter_by not in FILTERS:
            raise ValueError(f"Unknown filter '{filter_by}'. Valid: {', '.join(sorted(FILTERS))}")

        customers = self.store.load().customers

        if filter_by == "has_credit":
            customers = [c for c in customers if c.credit_balance > 0]
        elif filter_by == "high_value":
            customers = [c for c in customers if c.total_spent > self.high_value_threshold]

        if sort_by == "name":
            customers = sorted(customers, key=lambda c: c.name.casefold())
        else:
            customers = sorted(customers, key=lambda c: getattr(c, sort_by), reverse=True)

        return customers[:limit] if limit is not None else customers

    def search(self, query: str, limit: int = 20) -> list[Customer]:
        """
        Search customers by name, phone, or email.

        Case-insensitive partial match on name and email; phone matches
        on the raw text as typed.
        """
        needle = query.casefold()
        matches = [
            c for c in self.store.load().customers
            if needle in c.name.casefold()
            or query in c.phone
            or needle in (c.email or "").casefold()
        ]
        return sorted(matches, key=lambda c: c.name.casefold())[:limit]

    def record_event(self, customer_id: str, event_id: str) -> bool:
        """
        Append an event to the customer's history.

        Returns:
            False if the customer no longer exists.
        """
        with self.store.mutate() as studio:
            customer = studio.find_customer(customer_id)
            if customer is None:
                return False
            if event_id not in customer.event_history:
                customer.event_history.append(event_id)
        return True

    def add_spend(self, customer_id: str, amount: int) -> bool:
        """
        Add a received payment to the customer's lifetime spend.

        Returns:
            False if the customer no longer exists.
        """
        with self.store.mutate() as studio:
            customer = studio.find_customer(customer_id)
            if customer is None:
                return False
            old_total = customer.total_spent
            customer.total_spent += amount

        self.audit.log_change(
            entity_type="customer",
            entity_id=customer_id,
            action=AuditAction.UPDATE,
            changes={"total_spent": {"old": old_total, "new": old_total + amount}}
        )
        return True
