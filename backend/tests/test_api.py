"""API tests for gymcore."""

import uuid
from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from gymcore.main import app
from gymcore.models.shared import utc_today
from gymcore.repositories.invoice_repository import InvoiceRepository
from gymcore.schemas.invoice import InvoiceCreate, InvoiceLineItem


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


def _create_plan(client: TestClient, **overrides) -> dict:
    payload = {
        "name": "Monthly",
        "plan_type": "duration",
        "duration_value": 1,
        "duration_unit": "months",
        "price": "3100.00",
    }
    payload.update(overrides)
    response = client.post("/v1/plans/", json=payload)
    assert response.status_code == 201
    return response.json()


def _create_member(client: TestClient, code: str = "M001") -> dict:
    response = client.post(
        "/v1/members/",
        json={"member_code": code, "first_name": "Asha", "last_name": "Rao", "phone": "555-0100"},
    )
    assert response.status_code == 201
    return response.json()


def _enrolled_member(client: TestClient, **plan_overrides) -> dict:
    plan = _create_plan(client, **plan_overrides)
    member = _create_member(client)
    response = client.post(f"/v1/members/{member['id']}/enroll", json={"plan_id": plan["id"]})
    assert response.status_code == 200
    return member


class TestRoot:
    def test_root(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["app"] == "gymcore"


class TestPlansAPI:
    def test_create_and_get_plan(self, client: TestClient):
        plan = _create_plan(client)
        assert plan["duration_unit"] == "months"

        response = client.get(f"/v1/plans/{plan['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Monthly"

    def test_duration_plan_requires_unit(self, client: TestClient):
        response = client.post(
            "/v1/plans/",
            json={"name": "Broken", "plan_type": "duration", "duration_value": 1},
        )
        assert response.status_code == 422

    def test_unknown_duration_unit(self, client: TestClient):
        response = client.post(
            "/v1/plans/",
            json={"name": "Broken", "duration_value": 1, "duration_unit": "fortnights"},
        )
        assert response.status_code == 422

    def test_session_plan_requires_quota(self, client: TestClient):
        response = client.post("/v1/plans/", json={"name": "Pack", "plan_type": "sessions"})
        assert response.status_code == 422

    def test_get_missing_plan(self, client: TestClient):
        response = client.get(f"/v1/plans/{uuid.uuid4()}")
        assert response.status_code == 404


class TestMembersAPI:
    def test_new_member_is_pending(self, client: TestClient):
        member = _create_member(client, code="m002")
        assert member["member_code"] == "M002"
        assert member["membership_status"] == "pending"
        assert member["effective_status"] == "pending"
        assert member["current_plan"] is None

    def test_enroll_and_read_back(self, client: TestClient):
        member = _enrolled_member(client)

        response = client.get(f"/v1/members/{member['id']}")
        assert response.status_code == 200
        data = response.json()
        assert data["effective_status"] == "active"
        assert data["current_plan"]["plan_name"] == "Monthly"
        assert data["current_plan"]["start_date"] == utc_today().isoformat()

        check_in = client.get(f"/v1/members/{member['id']}/check_in")
        assert check_in.json() == {"allowed": True, "status": "active", "reason": None}

    def test_enroll_unknown_member(self, client: TestClient):
        plan = _create_plan(client)
        response = client.post(f"/v1/members/{uuid.uuid4()}/enroll", json={"plan_id": plan["id"]})
        assert response.status_code == 404

    def test_member_of_other_organization_is_hidden(self, client: TestClient, other_org_id):
        member = _create_member(client)
        response = client.get(
            f"/v1/members/{member['id']}",
            headers={"X-Organization-Id": str(other_org_id)},
        )
        assert response.status_code == 404

    def test_malformed_organization_header(self, client: TestClient):
        response = client.get(
            f"/v1/members/{uuid.uuid4()}",
            headers={"X-Organization-Id": "not-a-uuid"},
        )
        assert response.status_code == 400

    def test_renew_without_plan_conflicts(self, client: TestClient):
        plan = _create_plan(client)
        member = _create_member(client)
        response = client.post(f"/v1/members/{member['id']}/renew", json={"plan_id": plan["id"]})
        assert response.status_code == 409

    def test_renew_with_start_date(self, client: TestClient):
        plan = _create_plan(client, duration_value=30, duration_unit="days")
        member = _create_member(client)
        response = client.post(
            f"/v1/members/{member['id']}/renew",
            json={"plan_id": plan["id"], "start_date": "2024-01-01"},
        )
        assert response.status_code == 200
        assert response.json()["end_date"] == "2024-01-31"
        assert response.json()["action"] == "renewed"

    def test_freeze_and_unfreeze(self, client: TestClient):
        member = _enrolled_member(client)
        today = utc_today().isoformat()

        response = client.post(
            f"/v1/members/{member['id']}/freeze",
            json={"start_date": today, "reason": "travel", "requested_by": "front-desk"},
        )
        assert response.status_code == 200
        assert response.json()["membership_status"] == "frozen"

        check_in = client.get(f"/v1/members/{member['id']}/check_in").json()
        assert check_in["allowed"] is False
        assert check_in["status"] == "frozen"

        again = client.post(f"/v1/members/{member['id']}/freeze", json={"start_date": today})
        assert again.status_code == 409

        response = client.post(
            f"/v1/members/{member['id']}/unfreeze", json={"approved_by": "manager"}
        )
        assert response.status_code == 200
        assert response.json()["membership_status"] == "active"
        assert response.json()["freeze_days"] == 0

        history = client.get(f"/v1/members/{member['id']}").json()["freeze_history"]
        assert len(history) == 1
        assert history[0]["approved_by"] == "manager"
        assert history[0]["end_date"] == today

    def test_freeze_inverted_range(self, client: TestClient):
        member = _enrolled_member(client)
        today = utc_today()
        response = client.post(
            f"/v1/members/{member['id']}/freeze",
            json={
                "start_date": today.isoformat(),
                "end_date": (today - timedelta(days=1)).isoformat(),
            },
        )
        assert response.status_code == 400

    def test_unfreeze_active_member(self, client: TestClient):
        member = _enrolled_member(client)
        response = client.post(f"/v1/members/{member['id']}/unfreeze", json={})
        assert response.status_code == 409

    def test_change_plan(self, client: TestClient):
        member = _enrolled_member(client)
        premium = _create_plan(client, name="Premium")
        response = client.post(
            f"/v1/members/{member['id']}/change_plan",
            json={"new_plan_id": premium["id"], "proration_method": "daily"},
        )
        assert response.status_code == 200
        assert response.json()["plan_name"] == "Premium"
        assert response.json()["start_date"] == utc_today().isoformat()

    def test_cancel(self, client: TestClient):
        member = _enrolled_member(client)
        response = client.post(f"/v1/members/{member['id']}/cancel")
        assert response.status_code == 200
        assert response.json()["membership_status"] == "cancelled"

        check_in = client.get(f"/v1/members/{member['id']}/check_in").json()
        assert check_in["allowed"] is False
        assert check_in["reason"] == "Membership is cancelled"

    def test_expiring_members(self, client: TestClient):
        member = _enrolled_member(client, duration_value=7, duration_unit="days")
        _create_member(client, code="M999")

        response = client.get("/v1/members/expiring")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["member_id"] == member["id"]
        assert data[0]["days_until_expiry"] == 7
        assert data[0]["member_name"] == "Asha Rao"


class TestInvoiceItemFreezeAPI:
    def _invoice(self, db_session, default_org_id):
        data = InvoiceCreate(
            invoice_number="INV-API-1",
            invoice_date=date(2024, 3, 1),
            line_items=[
                InvoiceLineItem(
                    description="Monthly membership",
                    amount=Decimal("3000"),
                    start_date=date(2024, 3, 1),
                    expiry_date=date(2024, 3, 31),
                )
            ],
        )
        return InvoiceRepository(db_session).create(data, default_org_id)

    def test_freeze_item(self, client: TestClient, db_session, default_org_id):
        invoice = self._invoice(db_session, default_org_id)
        response = client.post(
            f"/v1/invoices/{invoice.id}/items/0/freeze",
            json={"start_date": "2024-03-10", "end_date": "2024-03-14"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["freeze_days"] == 5
        assert data["new_expiry_date"] == "2024-04-05"

    def test_freeze_invalid_item(self, client: TestClient, db_session, default_org_id):
        invoice = self._invoice(db_session, default_org_id)
        response = client.post(
            f"/v1/invoices/{invoice.id}/items/3/freeze", json={"freeze_days": 5}
        )
        assert response.status_code == 400

    def test_freeze_unknown_invoice(self, client: TestClient):
        response = client.post(f"/v1/invoices/{uuid.uuid4()}/items/0/freeze", json={"freeze_days": 5})
        assert response.status_code == 404


class TestRevenueRealizationAPI:
    def test_base_value_report(self, client: TestClient, db_session, default_org_id):
        InvoiceRepository(db_session).create(
            InvoiceCreate(
                invoice_number="INV-REV-1",
                invoice_date=date(2024, 1, 16),
                source="online",
                line_items=[
                    InvoiceLineItem(
                        description="Monthly membership",
                        amount=Decimal("3100"),
                        start_date=date(2024, 1, 16),
                        expiry_date=date(2024, 2, 14),
                    )
                ],
            ),
            default_org_id,
        )

        response = client.get(
            "/v1/reports/revenue_realization",
            params={"mode": "base-value", "group_by": "source"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["months"] == ["2024-01", "2024-02"]
        assert data["rows"][0]["key"] == "online"
        assert Decimal(data["rows"][0]["sale_amount"]) == Decimal("3100.00")
        monthly = data["rows"][0]["monthly_revenue"]
        assert Decimal(monthly["2024-01"]["amount"]) == Decimal("1653.33")
        assert monthly["2024-02"]["label"] == "Feb 2024"
        assert data["lines"][0]["bill_number"] == "INV-REV-1"
        assert data["lines"][0]["end_date"] == "2024-02-14"

    def test_report_survives_inverted_item(self, client: TestClient, db_session, default_org_id):
        InvoiceRepository(db_session).create(
            InvoiceCreate(
                invoice_number="INV-REV-2",
                invoice_date=date(2024, 1, 1),
                line_items=[
                    InvoiceLineItem(
                        description="Monthly membership",
                        amount=Decimal("310"),
                        start_date=date(2024, 1, 1),
                        expiry_date=date(2024, 1, 31),
                    ),
                    InvoiceLineItem(
                        description="Legacy import",
                        amount=Decimal("100"),
                        start_date=date(2024, 2, 1),
                        expiry_date=date(2024, 1, 1),
                    ),
                ],
            ),
            default_org_id,
        )

        response = client.get("/v1/reports/revenue_realization", params={"mode": "paid-amount"})

        assert response.status_code == 200
        data = response.json()
        assert data["months"] == ["2024-01"]
        assert [line["service_name"] for line in data["lines"]] == ["Monthly membership"]

    def test_empty_report(self, client: TestClient):
        response = client.get("/v1/reports/revenue_realization", params={"mode": "paid-amount"})
        assert response.status_code == 200
        assert response.json()["rows"] == []
        assert response.json()["months"] == []

    def test_inverted_range(self, client: TestClient):
        response = client.get(
            "/v1/reports/revenue_realization",
            params={"from_date": "2024-02-01", "to_date": "2024-01-01"},
        )
        assert response.status_code == 400

    def test_unknown_mode(self, client: TestClient):
        response = client.get("/v1/reports/revenue_realization", params={"mode": "cash"})
        assert response.status_code == 422
