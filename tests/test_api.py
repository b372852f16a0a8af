"""
Tests for the HTTP API.

Bodies use the camelCase wire format; amounts come back as JSON numbers.
"""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from finance_tracker.api import create_app
from finance_tracker.models.audit import AuditEventType
from finance_tracker.orchestrator import create_app_components


def open_account(client, name="Checking", balance=1000, account_type="Bank Account", **extra):
    response = client.post("/accounts", json={"name": name, "type": account_type, "balance": balance, **extra})
    assert response.status_code == 201, response.text
    return response.json()


def expense_body(amount, account_id=None, **extra):
    body = {
        "amount": amount,
        "category": "Groceries",
        "date": "2024-05-01",
        "description": "Weekly shop",
        **extra,
    }
    if account_id is not None:
        body["accountId"] = account_id
    return body


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_unknown_route_uses_error_body(self, client):
        response = client.get("/nowhere")
        assert response.status_code == 404
        assert "error" in response.json()


class TestExpenseEndpoints:
    """Expense routes and the balance of the linked account."""

    def test_create_and_delete_round_trip(self, client):
        """1000 -> POST expense 200 -> 800 -> DELETE -> 1000."""
        account = open_account(client, balance=1000.00)

        created = client.post("/expenses", json=expense_body(200, account["id"]))
        assert created.status_code == 201
        assert created.json()["accountId"] == account["id"]
        assert created.json()["amount"] == 200
        assert client.get(f"/accounts/{account['id']}").json()["balance"] == 800

        deleted = client.delete(f"/expenses/{created.json()['id']}")
        assert deleted.status_code == 200
        assert deleted.json() == {"message": "Expense deleted successfully"}
        assert client.get(f"/accounts/{account['id']}").json()["balance"] == 1000

    def test_insufficient_funds(self, client):
        account = open_account(client, balance=50)

        response = client.post("/expenses", json=expense_body(75, account["id"]))

        assert response.status_code == 400
        assert response.json() == {"error": "Insufficient account balance"}
        assert client.get(f"/accounts/{account['id']}").json()["balance"] == 50

    def test_unknown_account(self, client):
        response = client.post("/expenses", json=expense_body(10, 99))
        assert response.status_code == 404
        assert response.json() == {"error": "Account not found"}

    def test_missing_field_is_400(self, client):
        body = expense_body(10)
        del body["description"]
        response = client.post("/expenses", json=body)
        assert response.status_code == 400
        assert "description" in response.json()["error"]

    def test_non_positive_amount_is_400(self, client):
        assert client.post("/expenses", json=expense_body(0)).status_code == 400
        assert client.post("/expenses", json=expense_body(-5)).status_code == 400

    def test_update_moves_between_accounts(self, client):
        checking = open_account(client, "Checking", 1000)
        savings = open_account(client, "Savings", 500, "Savings")
        expense = client.post("/expenses", json=expense_body(200, checking["id"])).json()

        response = client.put(f"/expenses/{expense['id']}", json=expense_body(150, savings["id"]))

        assert response.status_code == 200
        assert response.json()["accountId"] == savings["id"]
        assert client.get(f"/accounts/{checking['id']}").json()["balance"] == 1000
        assert client.get(f"/accounts/{savings['id']}").json()["balance"] == 350

    def test_update_without_account_id_keeps_link(self, client):
        account = open_account(client, balance=1000)
        expense = client.post("/expenses", json=expense_body(200, account["id"])).json()

        response = client.put(f"/expenses/{expense['id']}", json=expense_body(100))

        assert response.json()["accountId"] == account["id"]
        assert client.get(f"/accounts/{account['id']}").json()["balance"] == 900

    def test_update_with_null_account_id_unlinks(self, client):
        account = open_account(client, balance=1000)
        expense = client.post("/expenses", json=expense_body(200, account["id"])).json()

        response = client.put(f"/expenses/{expense['id']}", json={**expense_body(200), "accountId": None})

        assert response.json()["accountId"] is None
        assert client.get(f"/accounts/{account['id']}").json()["balance"] == 1000

    def test_missing_expense(self, client):
        assert client.get("/expenses/5").status_code == 404
        assert client.delete("/expenses/5").json() == {"error": "Expense not found"}

    def test_list_filters_by_date(self, client):
        client.post("/expenses", json=expense_body(1, date="2024-01-01"))
        client.post("/expenses", json=expense_body(2, date="2024-02-01"))

        response = client.get("/expenses", params={"startDate": "2024-01-15"})

        assert [e["amount"] for e in response.json()] == [2]


class TestIncomeEndpoints:
    def test_income_deposits_and_reverses(self, client):
        account = open_account(client, balance=0)
        body = {
            "amount": 1200.50,
            "source": "Salary",
            "date": "2024-05-31",
            "description": "May",
            "accountId": account["id"],
            "state": "ny",
            "filingStatus": "single",
        }

        created = client.post("/incomes", json=body)
        assert created.status_code == 201
        assert created.json()["state"] == "NY"
        assert created.json()["filingStatus"] == "single"
        assert client.get(f"/accounts/{account['id']}").json()["balance"] == 1200.5

        client.delete(f"/incomes/{created.json()['id']}")
        assert client.get(f"/accounts/{account['id']}").json()["balance"] == 0

    def test_invalid_filing_status_on_income(self, client):
        body = {"amount": 1, "source": "S", "date": "2024-01-01", "description": "d", "filingStatus": "joint"}
        assert client.post("/incomes", json=body).status_code == 400


class TestAccountEndpoints:
    def test_credit_limit_only_for_cards(self, client):
        response = client.post("/accounts", json={"name": "Cash", "type": "Cash", "creditLimit": 500})
        assert response.status_code == 400

        card = open_account(client, "Visa", 0, "Credit Card", creditLimit=500)
        assert card["creditLimit"] == 500

    def test_update_and_delete(self, client):
        account = open_account(client, balance=10)

        updated = client.put(f"/accounts/{account['id']}", json={"name": "Main", "balance": 25})
        assert updated.json()["name"] == "Main"
        assert updated.json()["balance"] == 25

        assert client.delete(f"/accounts/{account['id']}").json() == {"message": "Account deleted successfully"}
        assert client.get(f"/accounts/{account['id']}").status_code == 404

    def test_unknown_account_type(self, client):
        response = client.post("/accounts", json={"name": "X", "type": "Piggy Bank"})
        assert response.status_code == 400


class TestTaxEndpoint:
    def test_federal_single(self, client):
        response = client.post(
            "/tax/calculate", json={"income": 50000, "state": "TX", "filingStatus": "single"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["federalTax"] == 4016
        assert data["stateTax"] == 0
        assert data["totalTax"] == 4016
        assert data["takeHome"] == 45984
        assert data["effectiveRate"] == pytest.approx(0.08032)
        assert data["source"] == "local_calculation"
        assert data["taxYear"] == 2024
        assert [b["taxableAmount"] for b in data["breakdown"]["federal"]["brackets"]] == [11600, 23800]

    def test_invalid_filing_status(self, client):
        response = client.post(
            "/tax/calculate", json={"income": 50000, "state": "CA", "filingStatus": "married"}
        )
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid filing status. Must be one of:")

    def test_negative_income(self, client):
        response = client.post("/tax/calculate", json={"income": -10, "filingStatus": "single"})
        assert response.status_code == 400

    def test_unsupported_state_flagged(self, client):
        response = client.post(
            "/tax/calculate", json={"income": 50000, "state": "GA", "filingStatus": "single"}
        )
        assert response.status_code == 200
        assert response.json()["breakdown"]["state"]["supported"] is False
        assert response.json()["stateTax"] == 0


class TestCatalogEndpoints:
    def test_duplicate_category_conflict(self, client):
        assert client.post("/categories", json={"name": "Food"}).status_code == 201
        response = client.post("/categories", json={"name": "food"})
        assert response.status_code == 409
        assert response.json() == {"error": "Category already exists"}

    def test_debt_crud_and_active_filter(self, client):
        debt = client.post(
            "/debts",
            json={"type": "Car Loan", "lender": "Bank", "totalAmount": 9000, "currentBalance": 6000},
        ).json()
        client.post(
            "/debts",
            json={"type": "Other", "lender": "Friend", "totalAmount": 100,
                  "currentBalance": 0, "isActive": False},
        )

        assert len(client.get("/debts").json()) == 2
        assert [d["id"] for d in client.get("/debts", params={"activeOnly": "true"}).json()] == [debt["id"]]

        updated = client.put(
            f"/debts/{debt['id']}",
            json={"type": "Car Loan", "lender": "Bank", "totalAmount": 9000, "currentBalance": 5000},
        )
        assert updated.json()["currentBalance"] == 5000
        assert client.delete(f"/debts/{debt['id']}").json() == {"message": "Debt deleted successfully"}

    def test_subscription_summary_route(self, client):
        today = date(2024, 5, 10)
        client.post(
            "/subscriptions",
            json={"name": "Video", "priceCents": 1599, "billingCycle": "monthly",
                  "nextPaymentDate": (today + timedelta(days=2)).isoformat()},
        )

        response = client.get("/subscriptions/summary", params={"today": today.isoformat()})

        assert response.status_code == 200
        assert response.json()["monthlyTotal"] == 15.99
        assert [s["name"] for s in response.json()["upcoming"]] == ["Video"]

    def test_missing_subscription(self, client):
        assert client.get("/subscriptions/3").json() == {"error": "Subscription not found"}


class TestReportEndpoints:
    def test_report_and_dashboard(self, client):
        account = open_account(client, balance=500)
        client.post("/expenses", json=expense_body(40, account["id"], date="2024-03-03"))

        report = client.get(
            "/reports", params={"type": "expenses", "startDate": "2024-03-01", "endDate": "2024-03-31"}
        )
        assert report.status_code == 200
        assert report.json()["count"] == 1
        assert report.json()["total"] == 40
        assert report.json()["transactions"][0]["account"] == "Checking"

        dashboard = client.get("/dashboard").json()
        assert dashboard["totalAssets"] == 460
        assert dashboard["totalExpenses"] == 40

    def test_report_parameter_errors(self, client):
        assert client.get("/reports", params={"type": "expenses"}).status_code == 400
        response = client.get(
            "/reports", params={"type": "loans", "startDate": "2024-03-01", "endDate": "2024-03-31"}
        )
        assert response.status_code == 400
        assert "Invalid type" in response.json()["error"]


class TestInternalErrors:
    def test_unexpected_error_is_generic_500(self, storage, audit_logger, monkeypatch):
        components = create_app_components(storage=storage)
        components.audit_logger = audit_logger

        async def explode():
            raise RuntimeError("database on fire")

        monkeypatch.setattr(components.ledger, "list_accounts", explode)
        app = create_app(components=components)

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/accounts")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        errors = audit_logger.of_type(AuditEventType.SYSTEM_ERROR)
        assert [e.error_message for e in errors] == ["database on fire"]
        assert errors[0].details == {"path": "/accounts"}
