"""Tests for GET /api/data unified read endpoint and /api/dashboard."""

from datetime import timedelta

from utils.timezone import local_today


def _get(client, **params):
    return client.get("/api/data", params=params)


class TestDataValidation:

    def test_missing_type_returns_400(self, client):
        response = client.get("/api/data")

        assert response.status_code == 400
        assert "'type' query parameter is required" in response.json()["error"]["message"]

    def test_unknown_type_returns_400(self, client):
        assert _get(client, type="tickets").status_code == 400

    def test_limit_out_of_range_returns_422(self, client):
        assert _get(client, type="customers", limit=0).status_code == 422


class TestCustomersData:

    def test_list_and_search(self, client, act, api_customer):
        act("customer", "create", {"name": "Zubin", "phone": "2", "totalSpent": 40000})

        names = [c["name"] for c in _get(client, type="customers").json()["data"]]
        assert names == ["Deepa Nair", "Zubin"]

        found = _get(client, type="customers", search="zub").json()["data"]
        assert [c["name"] for c in found] == ["Zubin"]

        high_value = _get(client, type="customers", filter="high_value").json()["data"]
        assert [c["name"] for c in high_value] == ["Zubin"]

    def test_by_id_includes_events(self, client, api_customer, api_event):
        data = _get(client, type="customers", id=api_customer["id"]).json()["data"]

        assert [e["id"] for e in data["events"]] == [api_event["id"]]

    def test_missing_id_returns_404(self, client):
        assert _get(client, type="customers", id="ghost").status_code == 404

    def test_unknown_sort_returns_400(self, client):
        assert _get(client, type="customers", sort="age").status_code == 400


class TestEventsData:

    def test_by_id_includes_payments(self, client, api_event):
        data = _get(client, type="events", id=api_event["id"]).json()["data"]

        assert [p["amount"] for p in data["payments"]] == [2000]

    def test_status_filter(self, client, api_event):
        assert len(_get(client, type="events", status="booked").json()["data"]) == 1
        assert _get(client, type="events", status="delivered").json()["data"] == []

    def test_invalid_status_returns_400(self, client):
        assert _get(client, type="events", status="lost").status_code == 400

    def test_pending_filter(self, client, api_event):
        data = _get(client, type="events", filter="pending").json()["data"]
        assert [e["id"] for e in data] == [api_event["id"]]

    def test_unknown_filter_returns_400(self, client):
        assert _get(client, type="events", filter="soon").status_code == 400

    def test_for_customer(self, client, api_customer, api_event):
        data = _get(client, type="events", customer_id=api_customer["id"]).json()["data"]
        assert len(data) == 1


class TestPaymentsData:

    def test_list_with_revenue(self, client, act, api_event):
        act("payment", "create", {
            "event_id": api_event["id"], "amount": 3000, "method": "UPI",
            "date": local_today("Asia/Kolkata").isoformat(),
        })

        data = _get(client, type="payments").json()["data"]

        assert len(data["payments"]) == 2
        assert data["total_revenue"] == 5000
        assert data["monthly_revenue"] == 5000

    def test_for_event(self, client, api_event):
        data = _get(client, type="payments", event_id=api_event["id"]).json()["data"]
        assert [p["amount"] for p in data] == [2000]

    def test_recent_filter(self, client, act, api_event):
        old = (local_today("Asia/Kolkata") - timedelta(days=60)).isoformat()
        act("payment", "create", {"event_id": api_event["id"], "amount": 10, "method": "Cash", "date": old})

        data = _get(client, type="payments", filter="recent").json()["data"]

        assert [p["amount"] for p in data["payments"]] == [2000]


class TestMessagingData:

    def test_messages_and_transactions(self, client, act, api_customer):
        act("message", "send", {"customer_id": api_customer["id"], "template": "Hi"})
        act("credits", "purchase", {"credits": 100, "price": 120})

        assert len(_get(client, type="messages").json()["data"]) == 1
        assert len(_get(client, type="credit_transactions").json()["data"]) == 1

    def test_credits_summary(self, client, act, api_customer):
        act("message", "send", {"customer_id": api_customer["id"], "template": "Hi"})

        data = client.get("/api/data/credits").json()["data"]

        assert data["balance"] == 499
        assert data["spent"] == 1
        assert data["is_consistent"] is True
        assert {"credits": 500, "price": 550} in data["packages"]

    def test_upcoming_birthdays(self, client, act):
        soon = local_today("Asia/Kolkata") + timedelta(days=2)
        act("customer", "create", {
            "name": "Soon", "phone": "3", "birthday": soon.replace(year=1992).isoformat(),
        })

        data = client.get("/api/data/birthdays/upcoming").json()["data"]

        assert [c["name"] for c in data] == ["Soon"]

    def test_settings(self, client):
        data = _get(client, type="settings").json()["data"]

        assert data["studio_name"] == "PhotoStudio Pro"
        assert "birthday" in data["templates"]


class TestJobsData:

    def test_status_filter(self, client, act):
        act("job", "submit", {"type": "face_detection", "file_names": ["a.jpg", "b.jpg"]})

        assert len(_get(client, type="jobs", status="processing").json()["data"]) == 2
        assert _get(client, type="jobs", status="failed").json()["data"] == []


class TestDashboard:

    def test_stats(self, client, api_customer, api_event):
        data = client.get("/api/dashboard").json()["data"]

        assert data["stats"]["total_customers"] == 1
        assert data["stats"]["pending_payments"] == 8000
        assert data["stats"]["whatsapp_credits"] == 500
        assert data["stats"]["active_events"] == 1
        assert [e["id"] for e in data["upcoming_events"]] == [api_event["id"]]
