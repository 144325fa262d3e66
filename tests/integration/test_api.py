"""Integration tests for API endpoints"""

import httpx
import pytest
from datetime import date, datetime
from decimal import Decimal
from fastapi.testclient import TestClient
from finance_gateway.api.dependencies import get_today, get_vision_client
from finance_gateway.api.v1.recurring import get_now
from finance_gateway.infrastructure.clients.vision import VisionClient


@pytest.fixture
def account(client: TestClient) -> dict:
    response = client.post("/v1/accounts", json={"name": "Checking", "type": "checking", "balance": "1000.00"})
    assert response.status_code == 201
    return response.json()


def balance(client: TestClient, account_id: str) -> Decimal:
    return Decimal(str(client.get(f"/v1/accounts/{account_id}").json()["balance"]))


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["backend"] == "sql"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.get("/v1/accounts")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "finance_recurring_materialized_total" in response.text
    assert "http_request_duration_seconds" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_missing_user_header_is_rejected(anonymous_client: TestClient):
    response = anonymous_client.get("/v1/accounts")
    assert response.status_code == 401


def test_unknown_account_is_404(client: TestClient):
    response = client.get("/v1/accounts/does-not-exist")
    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


def test_invalid_body_is_422(client: TestClient):
    response = client.post("/v1/accounts", json={"name": "", "type": "piggy_bank"})
    assert response.status_code == 422


def test_account_crud(client: TestClient, account: dict):
    assert [a["name"] for a in client.get("/v1/accounts").json()] == ["Checking"]

    response = client.patch(f"/v1/accounts/{account['id']}", json={"name": "Main"})
    assert response.status_code == 200
    assert response.json()["name"] == "Main"

    total = client.get("/v1/accounts/total-balance").json()["total_balance"]
    assert Decimal(str(total)) == Decimal("1000.00")

    assert client.delete(f"/v1/accounts/{account['id']}").status_code == 204
    assert client.get(f"/v1/accounts/{account['id']}").status_code == 404


def test_transactions_move_account_balance(client: TestClient, account: dict):
    response = client.post(
        "/v1/transactions",
        json={"account_id": account["id"], "type": "expense", "amount": "120.50", "date": "2024-03-10"},
    )
    assert response.status_code == 201
    txn = response.json()
    assert balance(client, account["id"]) == Decimal("879.50")

    client.patch(f"/v1/transactions/{txn['id']}", json={"amount": "100.00"})
    assert balance(client, account["id"]) == Decimal("900.00")

    listed = client.get("/v1/transactions", params={"start": "2024-03-01", "end": "2024-03-31"}).json()
    assert [t["id"] for t in listed] == [txn["id"]]

    summary = client.get("/v1/transactions/summary/2024/3").json()
    assert Decimal(str(summary["expense"])) == Decimal("100.00")

    assert client.delete(f"/v1/transactions/{txn['id']}").status_code == 204
    assert balance(client, account["id"]) == Decimal("1000.00")


def test_non_positive_amount_is_rejected(client: TestClient, account: dict):
    response = client.post(
        "/v1/transactions",
        json={"account_id": account["id"], "type": "expense", "amount": "0", "date": "2024-03-10"},
    )
    assert response.status_code == 422


def test_budget_copy_without_previous_month(client: TestClient):
    response = client.post("/v1/budgets/copy", json={"year": 2024, "month": 6})
    assert response.status_code == 422


def test_process_recurring(app, client: TestClient, account: dict):
    app.dependency_overrides[get_now] = lambda: datetime(2024, 2, 1, 9, 0)
    client.post(
        "/v1/recurring",
        json={
            "account_id": account["id"],
            "type": "expense",
            "amount": "1200.00",
            "description": "Rent",
            "frequency": "monthly",
            "start_date": "2024-01-31",
        },
    )

    response = client.post("/v1/recurring/process")

    assert response.status_code == 200
    assert response.json() == {"processed": 1, "skipped": 0, "failed": 0, "errors": []}
    [entry] = client.get("/v1/recurring").json()
    assert entry["next_date"] == "2024-02-29"


def test_debt_payment(client: TestClient):
    debt = client.post(
        "/v1/debts",
        json={
            "name": "Car loan",
            "type": "financing",
            "creditor": "Bank",
            "original_amount": "1200.00",
            "interest_rate": "2",
            "start_date": "2024-01-15",
            "total_installments": 12,
        },
    ).json()
    assert Decimal(str(debt["monthly_payment"])) == Decimal("113.47")

    response = client.post(f"/v1/debts/{debt['id']}/payments", json={"amount": "113.47", "date": "2024-02-15"})
    assert response.status_code == 201
    assert Decimal(str(response.json()["interest"])) == Decimal("24.00")

    stored = client.get(f"/v1/debts/{debt['id']}").json()
    assert Decimal(str(stored["current_balance"])) == Decimal("1110.53")


def test_bill_reminders_check(app, client: TestClient):
    app.dependency_overrides[get_today] = lambda: date(2024, 3, 10)
    client.post("/v1/bills", json={"name": "Internet", "amount": "99.90", "due_date": "2024-03-13"})

    response = client.post("/v1/notifications/check")

    assert response.status_code == 200
    assert client.get("/v1/notifications/unread-count").json() == {"count": 1}


def test_statement_import_and_export(client: TestClient, account: dict):
    content = "Data;Descrição;Valor\n05/03/2024;Padaria;-15,00\n06/03/2024;Salário;3.500,00\n".encode("utf-8")

    response = client.post(
        "/v1/statements/import",
        params={"account_id": account["id"]},
        files={"file": ("extrato.csv", content, "text/csv")},
    )

    assert response.status_code == 200
    assert response.json() == {"imported": 2, "failed": 0, "duplicates": 0}
    assert balance(client, account["id"]) == Decimal("4485.00")

    preview = client.post("/v1/statements/preview", files={"file": ("extrato.csv", content, "text/csv")})
    assert preview.json()["duplicates"] == 2

    export = client.get("/v1/exports/transactions", params={"start": "2024-03-01", "end": "2024-03-31"})
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("text/csv")
    assert "transactions_2024-03-01_2024-03-31.csv" in export.headers["content-disposition"]
    assert "Padaria" in export.text


def test_statement_with_unknown_columns_is_422(client: TestClient, account: dict):
    response = client.post(
        "/v1/statements/import",
        params={"account_id": account["id"]},
        files={"file": ("extrato.csv", b"foo;bar\n1;2\n", "text/csv")},
    )
    assert response.status_code == 422


def test_bill_extraction(app, client: TestClient):
    client.post("/v1/categories", json={"name": "Moradia", "type": "expense"})
    reply = '{"name": "Electricity", "amount": 150.5, "dueDate": "10/04/2024", "category": "Housing", "description": null}'

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": [{"message": {"content": reply}}]})

    app.dependency_overrides[get_vision_client] = lambda: VisionClient(
        api_key="sk-test", transport=httpx.MockTransport(handler)
    )

    response = client.post("/v1/bills/extract", files={"file": ("bill.jpg", b"\xff\xd8\xff", "image/jpeg")})

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Electricity"
    assert data["due_date"] == "2024-04-10"
    assert data["category_id"] is not None


def test_bill_extraction_failure_is_502(app, client: TestClient):
    app.dependency_overrides[get_vision_client] = lambda: VisionClient(
        api_key="sk-test", transport=httpx.MockTransport(lambda request: httpx.Response(500))
    )

    response = client.post("/v1/bills/extract", files={"file": ("bill.png", b"\x89PNG", "image/png")})

    assert response.status_code == 502


def test_search_transactions(client: TestClient, account: dict):
    for body in (
        {"type": "expense", "amount": "15.00", "date": "2024-03-05", "description": "Padaria", "tags": ["food"]},
        {"type": "expense", "amount": "250.00", "date": "2024-03-12", "description": "Mercado"},
        {"type": "income", "amount": "3000.00", "date": "2024-03-01", "description": "Salary"},
    ):
        client.post("/v1/transactions", json={"account_id": account["id"], **body})

    response = client.get("/v1/transactions/search", params={"q": "padaria", "tag": ["food", "travel"]})

    assert response.status_code == 200
    data = response.json()
    assert data["total_count"] == 1
    assert data["transactions"][0]["description"] == "Padaria"

    totals = client.get("/v1/transactions/search", params={"date_from": "2024-03-01", "amount_min": "100"}).json()
    assert [t["description"] for t in totals["transactions"]] == ["Mercado", "Salary"]
    assert Decimal(str(totals["net_total"])) == Decimal("2750.00")
