"""Tests for POST /api/actions unified mutation endpoint."""

import pytest


# =============================================================================
# ROUTING & VALIDATION
# =============================================================================


class TestActionsRouting:

    def test_unknown_domain_returns_400(self, act):
        response = act("ticket", "create", {})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "INVALID_REQUEST"
        assert "Unknown domain" in body["error"]["message"]

    def test_disallowed_action_returns_400(self, act):
        response = act("payment", "delete", {"id": "x"})

        assert response.status_code == 400
        assert "not allowed" in response.json()["error"]["message"]

    def test_malformed_body_returns_422(self, client):
        response = client.post("/api/actions", json={"domain": "customer"})

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_response_carries_request_id(self, act):
        response = act("customer", "create", {"name": "A", "phone": "1"})

        assert response.json()["meta"]["request_id"] == response.headers["X-Request-ID"]


# =============================================================================
# CUSTOMER
# =============================================================================


class TestCustomerActions:

    def test_create(self, act):
        response = act("customer", "create", {"name": "Farah Khan", "phone": "+91-9800000001"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Farah Khan"
        assert data["id"]

    def test_blank_name_returns_422(self, act, services):
        response = act("customer", "create", {"name": "  ", "phone": "1"})

        assert response.status_code == 422
        assert "must not be blank" in response.json()["error"]["message"]
        assert services["store"].load().customers == []

    def test_update(self, act, api_customer):
        response = act("customer", "update", {"id": api_customer["id"], "notes": "VIP"})

        assert response.json()["data"]["notes"] == "VIP"

    def test_update_missing_returns_404(self, act):
        response = act("customer", "update", {"id": "ghost", "notes": "x"})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_update_without_id_returns_400(self, act):
        assert act("customer", "update", {"notes": "x"}).status_code == 400

    def test_delete(self, act, api_customer):
        response = act("customer", "delete", {"id": api_customer["id"]})

        assert response.json()["data"] == {"deleted": True}
        assert act("customer", "delete", {"id": api_customer["id"]}).status_code == 404


# =============================================================================
# EVENT & PAYMENT
# =============================================================================


class TestEventAndPaymentActions:

    def test_event_create_computes_balance(self, api_event):
        assert api_event["balance_due"] == 8000
        assert api_event["status"] == "booked"

    def test_event_for_missing_customer_returns_404(self, act):
        response = act("event", "create", {
            "customer_id": "ghost", "event_type": "Birthday", "event_date": "2030-01-01",
        })
        assert response.status_code == 404

    def test_event_update_status(self, act, api_event):
        response = act("event", "update", {"id": api_event["id"], "status": "editing"})

        assert response.json()["data"]["status"] == "editing"

    def test_invalid_status_returns_422(self, act, api_event):
        response = act("event", "update", {"id": api_event["id"], "status": "lost"})
        assert response.status_code == 422

    def test_payment_scenario(self, act, api_event):
        act("payment", "create", {
            "event_id": api_event["id"], "amount": 3000, "method": "UPI", "date": "2030-01-05",
        })
        act("payment", "create", {
            "event_id": api_event["id"], "amount": 5000, "method": "Cash", "date": "2030-02-14",
        })

        response = act("event", "update", {"id": api_event["id"]})
        assert response.json()["data"]["balance_due"] == 0

    def test_payment_updates_customer_spend(self, act, client, api_customer, api_event):
        act("payment", "create", {
            "event_id": api_event["id"], "amount": 3000, "method": "Card", "date": "2030-01-05",
        })

        customer = client.get("/api/data", params={"type": "customers", "id": api_customer["id"]}).json()["data"]
        assert customer["total_spent"] == 5000
        assert customer["event_history"] == [api_event["id"]]

    def test_zero_payment_returns_422(self, act, api_event):
        response = act("payment", "create", {
            "event_id": api_event["id"], "amount": 0, "method": "UPI", "date": "2030-01-05",
        })
        assert response.status_code == 422

    def test_invoice(self, act, api_event):
        payment = act("payment", "create", {
            "event_id": api_event["id"], "amount": 3000, "method": "UPI", "date": "2030-01-05",
        }).json()["data"]

        invoice = act("payment", "invoice", {"id": payment["id"]}).json()["data"]

        assert invoice["invoice_number"] == f"INV-{payment['id'].upper()}"
        assert invoice["balance_due"] == 5000

    def test_invoice_missing_payment_returns_404(self, act):
        assert act("payment", "invoice", {"id": "ghost"}).status_code == 404


# =============================================================================
# MESSAGES & CREDITS
# =============================================================================


class TestMessageActions:

    def test_send_returns_message_and_link(self, act, api_customer):
        response = act("message", "send", {
            "customer_id": api_customer["id"], "message_type": "reminder", "template": "Hi {name}",
        })

        data = response.json()["data"]
        assert data["content"] == "Hi Deepa Nair"
        assert data["credits_used"] == 1
        assert data["whatsapp_link"] == "https://wa.me/919876500000?text=Hi%20Deepa%20Nair"

    def test_insufficient_credits_returns_400(self, act, services, api_customer):
        with services["store"].mutate() as studio:
            studio.whatsapp_credits = 1

        response = act("message", "send", {
            "customer_id": api_customer["id"], "template": "x" * 200,
        })

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INSUFFICIENT_CREDITS"

    def test_empty_message_returns_400(self, act, api_customer):
        response = act("message", "send", {"customer_id": api_customer["id"], "template": "   "})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_send_bulk(self, act, api_customer):
        other = act("customer", "create", {"name": "Om", "phone": "2"}).json()["data"]

        data = act("message", "send_bulk", {
            "customer_ids": [api_customer["id"], other["id"]], "template": "Hello {name}",
        }).json()["data"]

        assert data["sent"] == 2
        assert data["credits_used"] == 2

    def test_birthday_wish(self, act, api_customer):
        data = act("message", "birthday_wish", {"customer_id": api_customer["id"]}).json()["data"]

        assert data["message_type"] == "birthday"
        assert "Deepa Nair" in data["content"]

    def test_purchase_credits(self, act):
        data = act("credits", "purchase", {"credits": 1000, "price": 1000}).json()["data"]

        assert data["whatsapp_credits"] == 1500
        assert data["transaction"]["type"] == "purchase"
        assert data["transaction"]["description"] == "Purchased 1000 WhatsApp credits for ₹1000"


# =============================================================================
# JOBS
# =============================================================================


class TestJobActions:

    @pytest.fixture
    def job(self, act):
        response = act("job", "submit", {"type": "enhancement", "file_names": ["a.jpg"]})
        return response.json()["data"][0]

    def test_submit(self, job):
        assert job["status"] == "processing"
        assert job["progress"] == 0

    def test_progress_to_completion(self, act, job):
        data = act("job", "progress", {"id": job["id"], "progress": 100}).json()["data"]

        assert data["status"] == "completed"
        assert data["completed_at"] is not None

    def test_progress_on_finished_job_returns_400(self, act, job):
        act("job", "fail", {"id": job["id"]})

        assert act("job", "progress", {"id": job["id"], "progress": 10}).status_code == 400

    def test_nan_progress_returns_400_and_keeps_data(self, act, client, api_customer, job):
        response = act("job", "progress", {"id": job["id"], "progress": "nan"})

        assert response.status_code == 400
        act("credits", "purchase", {"credits": 100, "price": 120})

        customers = client.get("/api/data", params={"type": "customers"}).json()["data"]
        assert [c["id"] for c in customers] == [api_customer["id"]]

    def test_missing_job_returns_404(self, act):
        assert act("job", "fail", {"id": "ghost"}).status_code == 404
