"""Application assembly: store, services, event wiring and routes."""

import logging

from fastapi import FastAPI

from api.actions import create_actions_router
from api.data import create_data_router
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from core.audit import AuditLogger
from core.config import StudioConfig, load_config
from core.event_bus import EventBus
from core.events import EventBooked, PaymentRecorded
from core.handlers.customer_ledger_handler import handle_event_booked, handle_payment_recorded
from core.services.customer_service import CustomerService
from core.services.dashboard_service import DashboardService
from core.services.event_service import EventService
from core.services.message_service import MessageService
from core.services.payment_service import PaymentService
from core.services.processing_service import ProcessingService
from core.store import StudioStore, open_store

logger = logging.getLogger(__name__)


def build_services(config: StudioConfig, store: StudioStore) -> dict:
    """
    Construct every service on one store and wire the event handlers.

    Returns:
        Services dict keyed the way the routers expect
    """
    audit = AuditLogger()
    event_bus = EventBus()

    customer_service = CustomerService(
        store, audit, event_bus, high_value_threshold=config.high_value_threshold
    )
    services = {
        "store": store,
        "config": config,
        "audit": audit,
        "event_bus": event_bus,
        "customer": customer_service,
        "event": EventService(store, audit, event_bus, tz_name=config.timezone),
        "payment": PaymentService(
            store, audit, event_bus,
            tz_name=config.timezone,
            recent_days=config.recent_payment_days,
        ),
        "message": MessageService(
            store, audit, event_bus,
            tz_name=config.timezone,
            initial_credits=config.initial_credits,
        ),
        "processing": ProcessingService(store, audit),
        "dashboard": DashboardService(store, tz_name=config.timezone),
    }

    event_bus.subscribe(EventBooked, handle_event_booked(customer_service))
    event_bus.subscribe(PaymentRecorded, handle_payment_recorded(customer_service))

    return services


def create_app(config: StudioConfig | None = None, store: StudioStore | None = None) -> FastAPI:
    """
    Build the studio API.

    Args:
        config: Studio configuration (read from STUDIO_* variables if omitted)
        store: Store to serve (opened from config if omitted)
    """
    config = config or load_config()
    store = store or open_store(config)
    services = build_services(config, store)

    app = FastAPI(title="Studio Ledger")
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    app.include_router(create_data_router(services), prefix="/api")
    app.include_router(create_actions_router(services), prefix="/api")

    app.state.services = services
    logger.info("Studio API ready")
    return app
