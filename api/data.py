"""GET /api/data - unified read endpoint, plus the dashboard summary."""

from fastapi import APIRouter, Query, Request

from api.base import success_response
from api.middleware import get_request_id
from core.models import EventStatus, ProcessingJobStatus
from core.services.message_service import CREDIT_PACKAGES, MESSAGE_TEMPLATES


VALID_TYPES = {
    "customers", "events", "payments", "messages",
    "credit_transactions", "jobs", "settings",
}


def _dump_all(items) -> list[dict]:
    return [item.model_dump(mode="json") for item in items]


def create_data_router(services: dict) -> APIRouter:
    router = APIRouter()

    customer_svc = services["customer"]
    event_svc = services["event"]
    payment_svc = services["payment"]
    message_svc = services["message"]
    processing_svc = services["processing"]
    dashboard_svc = services["dashboard"]
    store = services["store"]
    config = services["config"]

    # -------------------------------------------------------------------------
    # Convenience routes (must be registered before the generic /data route)
    # -------------------------------------------------------------------------

    @router.get("/data/birthdays/upcoming")
    async def birthdays_upcoming(
        request: Request,
        days: int = Query(config.reminder_window_days, ge=1, le=60),
    ):
        customers = message_svc.upcoming_birthdays(days)
        return success_response(_dump_all(customers), get_request_id(request)).model_dump(mode="json")

    @router.get("/data/anniversaries/upcoming")
    async def anniversaries_upcoming(
        request: Request,
        days: int = Query(config.reminder_window_days, ge=1, le=60),
    ):
        customers = message_svc.upcoming_anniversaries(days)
        return success_response(_dump_all(customers), get_request_id(request)).model_dump(mode="json")

    @router.get("/data/credits")
    async def credits(request: Request):
        audit = message_svc.credit_audit()
        data = {
            **audit.model_dump(mode="json"),
            "expected_balance": audit.expected_balance,
            "is_consistent": audit.is_consistent,
            "packages": [{"credits": c, "price": p} for c, p in CREDIT_PACKAGES],
        }
        return success_response(data, get_request_id(request)).model_dump(mode="json")

    @router.get("/dashboard")
    async def dashboard(request: Request):
        data = {
            "stats": dashboard_svc.stats().model_dump(mode="json"),
            "upcoming_events": _dump_all(event_svc.list_upcoming()),
        }
        return success_response(data, get_request_id(request)).model_dump(mode="json")

    # -------------------------------------------------------------------------
    # Generic data endpoint
    # -------------------------------------------------------------------------

    @router.get("/data")
    async def get_data(
        request: Request,
        type: str | None = Query(None),
        id: str | None = Query(None),
        search: str | None = Query(None),
        customer_id: str | None = Query(None),
        event_id: str | None = Query(None),
        status: str | None = Query(None),
        filter: str | None = Query(None),
        sort: str | None = Query(None),
        limit: int = Query(50, ge=1, le=500),
    ):
        if type is None:
            raise ValueError("'type' query parameter is required")

        if type not in VALID_TYPES:
            raise ValueError(f"Unknown type '{type}'. Valid types: {', '.join(sorted(VALID_TYPES))}")

        if type == "customers":
            data = _handle_customers(customer_svc, event_svc, id, search, filter, sort, limit)
        elif type == "events":
            data = _handle_events(event_svc, payment_svc, id, customer_id, status, search, filter, limit)
        elif type == "payments":
            data = _handle_payments(payment_svc, id, event_id, filter, search, limit)
        elif type == "messages":
            data = _dump_all(message_svc.list_messages(customer_id=customer_id)[:limit])
        elif type == "credit_transactions":
            data = _dump_all(message_svc.list_credit_transactions()[:limit])
        elif type == "jobs":
            job_status = ProcessingJobStatus(status) if status else None
            data = _dump_all(processing_svc.list_all(status=job_status)[:limit])
        else:
            data = {
                **store.load().settings.model_dump(mode="json"),
                "templates": MESSAGE_TEMPLATES,
            }

        return success_response(data, get_request_id(request)).model_dump(mode="json")

    return router


def _handle_customers(customer_svc, event_svc, id, search, filter, sort, limit):
    if id:
        customer = customer_svc.get_by_id(id)
        if customer is None:
            raise ValueError(f"Customer {id} not found")

        data = customer.model_dump(mode="json")
        data["events"] = _dump_all(event_svc.list_for_customer(customer.id))
        return data

    if search:
        return _dump_all(customer_svc.search(search, limit))

    customers = customer_svc.list_all(sort_by=sort or "name", filter_by=filter or "all", limit=limit)
    return _dump_all(customers)


def _handle_events(event_svc, payment_svc, id, customer_id, status, search, filter, limit):
    if id:
        event = event_svc.get_by_id(id)
        if event is None:
            raise ValueError(f"Event {id} not found")

        data = event.model_dump(mode="json")
        data["payments"] = _dump_all(payment_svc.list_for_event(event.id))
        return data

    if customer_id:
        return _dump_all(event_svc.list_for_customer(customer_id)[:limit])

    if filter == "upcoming":
        return _dump_all(event_svc.list_upcoming(limit=limit))
    if filter == "pending":
        return _dump_all(payment_svc.list_pending_events()[:limit])
    if filter == "overdue":
        return _dump_all(payment_svc.list_overdue_events()[:limit])
    if filter not in (None, "all"):
        raise ValueError(f"Unknown event filter '{filter}'. Valid: all, overdue, pending, upcoming")

    event_status = EventStatus(status) if status else None
    return _dump_all(event_svc.list_all(status=event_status, search=search)[:limit])


def _handle_payments(payment_svc, id, event_id, filter, search, limit):
    if id:
        payment = payment_svc.get_by_id(id)
        if payment is None:
            raise ValueError(f"Payment {id} not found")
        return payment.model_dump(mode="json")

    if event_id:
        return _dump_all(payment_svc.list_for_event(event_id)[:limit])

    payments = payment_svc.list_all(filter_by=filter or "all", search=search)
    return {
        "payments": _dump_all(payments[:limit]),
        "total_revenue": payment_svc.total_revenue(),
        "monthly_revenue": payment_svc.monthly_revenue(),
    }
