"""Shared test fixtures for the studio ledger test suite."""

import pytest
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
load_dotenv(Path(__file__).parent.parent / ".env")


# =============================================================================
# STORAGE FIXTURES
# =============================================================================


@pytest.fixture
def kv(tmp_path):
    """LocalKVClient on a per-test temp directory."""
    from clients.local_kv_client import LocalKVClient
    return LocalKVClient(tmp_path / "store")


@pytest.fixture
def store(kv):
    """StudioStore with the stock 500 starter credits."""
    from core.store import StudioStore
    return StudioStore(kv)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def audit():
    from core.audit import AuditLogger
    return AuditLogger()


@pytest.fixture
def event_bus():
    from core.event_bus import EventBus
    return EventBus()


@pytest.fixture
def customer_service(store, audit, event_bus):
    from core.services.customer_service import CustomerService
    return CustomerService(store, audit, event_bus)


@pytest.fixture
def event_service(store, audit, event_bus):
    from core.services.event_service import EventService
    return EventService(store, audit, event_bus)


@pytest.fixture
def payment_service(store, audit, event_bus):
    from core.services.payment_service import PaymentService
    return PaymentService(store, audit, event_bus)


@pytest.fixture
def message_service(store, audit, event_bus):
    from core.services.message_service import MessageService
    return MessageService(store, audit, event_bus)


# =============================================================================
# DATA FIXTURES
# =============================================================================


@pytest.fixture
def customer(customer_service):
    """A stored customer with a birthday and an anniversary."""
    from core.models import CustomerCreate

    return customer_service.create(CustomerCreate(
        name="Rajesh Kumar",
        phone="+91-9876543210",
        email="rajesh.kumar@gmail.com",
        birthday=date(1985, 6, 15),
        anniversary=date(2010, 12, 20),
    ))


@pytest.fixture
def wedding(event_service, customer):
    """A wedding worth 10000 booked with a 2000 advance."""
    from core.models import EventCreate, EventType

    return event_service.create(EventCreate(
        customer_id=customer.id,
        event_type=EventType.WEDDING,
        event_date=date(2030, 2, 14),
        venue="Taj Palace, Mumbai",
        total_amount=10000,
        advance_paid=2000,
    ))
