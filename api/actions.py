"""POST /api/actions - unified mutation endpoint."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from api.base import success_response
from api.middleware import get_request_id
from core.models import (
    BulkMessageSend,
    CreditPurchase,
    CustomerCreate, CustomerUpdate,
    EventCreate, EventUpdate,
    MessageSend,
    PaymentCreate,
    ProcessingJobCreate,
)
from core.services.message_service import whatsapp_link


class ActionRequest(BaseModel):
    domain: str
    action: str
    data: dict


def create_actions_router(services: dict) -> APIRouter:
    router = APIRouter()

    handlers = {
        "customer": CustomerHandler(services["customer"]),
        "event": EventHandler(services["event"]),
        "payment": PaymentHandler(services["payment"]),
        "message": MessageHandler(services["message"]),
        "credits": CreditsHandler(services["message"]),
        "job": JobHandler(services["processing"]),
    }

    @router.post("/actions")
    async def perform_action(request: Request, body: ActionRequest):
        handler = handlers.get(body.domain)
        if handler is None:
            raise ValueError(
                f"Unknown domain '{body.domain}'. "
                f"Valid domains: {', '.join(sorted(handlers.keys()))}"
            )

        if body.action not in handler.ALLOWED_ACTIONS:
            raise ValueError(
                f"Action '{body.action}' not allowed on '{body.domain}'. "
                f"Allowed: {', '.join(sorted(handler.ALLOWED_ACTIONS))}"
            )

        method = getattr(handler, f"_handle_{body.action}")
        result = method(dict(body.data))
        return success_response(result, get_request_id(request)).model_dump(mode="json")

    return router


def _pop_id(data: dict, key: str = "id") -> str:
    value = data.pop(key, None)
    if not value:
        raise ValueError(f"'{key}' is required")
    return str(value)


# =============================================================================
# HANDLER CLASSES
# =============================================================================


class CustomerHandler:
    ALLOWED_ACTIONS = {"create", "update", "delete"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        customer = self.service.create(CustomerCreate(**data))
        return customer.model_dump(mode="json")

    def _handle_update(self, data: dict):
        customer_id = _pop_id(data)
        customer = self.service.update(customer_id, CustomerUpdate(**data))
        if customer is None:
            raise ValueError(f"Customer {customer_id} not found")
        return customer.model_dump(mode="json")

    def _handle_delete(self, data: dict):
        customer_id = _pop_id(data)
        deleted = self.service.delete(customer_id)
        if not deleted:
            raise ValueError(f"Customer {customer_id} not found")
        return {"deleted": True}


class EventHandler:
    ALLOWED_ACTIONS = {"create", "update"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        event = self.service.create(EventCreate(**data))
        return event.model_dump(mode="json")

    def _handle_update(self, data: dict):
        event_id = _pop_id(data)
        event = self.service.update(event_id, EventUpdate(**data))
        if event is None:
            raise ValueError(f"Event {event_id} not found")
        return event.model_dump(mode="json")


class PaymentHandler:
    ALLOWED_ACTIONS = {"create", "invoice"}

    def __init__(self, service):
        self.service = service

    def _handle_create(self, data: dict):
        payment = self.service.create(PaymentCreate(**data))
        return payment.model_dump(mode="json")

    def _handle_invoice(self, data: dict):
        payment_id = _pop_id(data)
        invoice = self.service.generate_invoice(payment_id)
        if invoice is None:
            raise ValueError(f"Payment {payment_id} not found")
        return invoice.model_dump(mode="json")


def _with_link(message) -> dict:
    data = message.model_dump(mode="json")
    data["whatsapp_link"] = whatsapp_link(message.customer_phone, message.content)
    return data


class MessageHandler:
    ALLOWED_ACTIONS = {"send", "send_bulk", "birthday_wish", "anniversary_wish"}

    def __init__(self, service):
        self.service = service

    def _handle_send(self, data: dict):
        request = MessageSend(**data)
        message = self.service.send_to_customer(
            request.customer_id, request.message_type, request.template
        )
        return _with_link(message)

    def _handle_send_bulk(self, data: dict):
        request = BulkMessageSend(**data)
        messages = self.service.send_bulk(
            request.customer_ids, request.message_type, request.template
        )
        return {
            "sent": len(messages),
            "credits_used": sum(m.credits_used for m in messages),
            "messages": [_with_link(m) for m in messages],
        }

    def _handle_birthday_wish(self, data: dict):
        return _with_link(self.service.send_birthday_wish(_pop_id(data, "customer_id")))

    def _handle_anniversary_wish(self, data: dict):
        return _with_link(self.service.send_anniversary_wish(_pop_id(data, "customer_id")))


class CreditsHandler:
    ALLOWED_ACTIONS = {"purchase"}

    def __init__(self, service):
        self.service = service

    def _handle_purchase(self, data: dict):
        request = CreditPurchase(**data)
        transaction = self.service.purchase_credits(request.credits, request.price)
        return {
            "transaction": transaction.model_dump(mode="json"),
            "whatsapp_credits": self.service.get_credits(),
        }


class JobHandler:
    ALLOWED_ACTIONS = {"submit", "progress", "fail"}

    def __init__(self, service):
        self.service = service

    def _handle_submit(self, data: dict):
        request = ProcessingJobCreate(**data)
        jobs = self.service.submit(request.type, request.file_names)
        return [j.model_dump(mode="json") for j in jobs]

    def _handle_progress(self, data: dict):
        job_id = _pop_id(data)
        if "progress" not in data:
            raise ValueError("'progress' is required")
        job = self.service.record_progress(job_id, float(data["progress"]))
        if job is None:
            raise ValueError(f"Job {job_id} not found")
        return job.model_dump(mode="json")

    def _handle_fail(self, data: dict):
        job_id = _pop_id(data)
        job = self.service.mark_failed(job_id)
        if job is None:
            raise ValueError(f"Job {job_id} not found")
        return job.model_dump(mode="json")
