"""Unit tests for the hosted backend REST client"""

import json
import httpx
import pytest
from datetime import date
from decimal import Decimal
from finance_gateway.domain.exceptions import BackendError
from finance_gateway.infrastructure.clients.rest import RestRowStore, build_params


def make_store(handler, access_token=None) -> RestRowStore:
    return RestRowStore(
        base_url="https://backend.test/",
        api_key="anon-key",
        access_token=access_token,
        transport=httpx.MockTransport(handler),
    )


def test_build_params():
    params = build_params(
        eq={"user_id": "u1", "is_paid": False, "parent_id": None},
        gte={"date": date(2024, 1, 1)},
        lte={"date": date(2024, 1, 31)},
        order=[("date", True), ("name", False)],
        limit=10,
    )
    assert params == [
        ("user_id", "eq.u1"),
        ("is_paid", "eq.false"),
        ("parent_id", "is.null"),
        ("date", "gte.2024-01-01"),
        ("date", "lte.2024-01-31"),
        ("order", "date.desc,name.asc"),
        ("limit", "10"),
    ]


async def test_select_sends_filters_and_headers():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=[{"id": "a1", "name": "Checking"}])

    rows = await make_store(handler, access_token="user-jwt").select(
        "accounts", eq={"user_id": "u1"}, order=[("name", False)]
    )

    assert rows == [{"id": "a1", "name": "Checking"}]
    request = requests[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/accounts"
    assert request.url.params["select"] == "*"
    assert request.url.params["user_id"] == "eq.u1"
    assert request.url.params["order"] == "name.asc"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == "Bearer user-jwt"


async def test_authorization_falls_back_to_api_key():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=[])

    await make_store(handler).select("accounts")
    assert requests[0].headers["Authorization"] == "Bearer anon-key"


async def test_insert_serializes_decimals_and_dates():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        assert request.headers["Prefer"] == "return=representation"
        return httpx.Response(201, json=[{"id": "t1", **bodies[-1][0]}])

    row = await make_store(handler).insert("transactions", {"amount": Decimal("12.50"), "date": date(2024, 3, 1)})

    assert bodies[0] == [{"amount": "12.50", "date": "2024-03-01"}]
    assert row["id"] == "t1"


async def test_insert_many_with_no_rows_skips_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert await make_store(handler).insert_many("transactions", []) == []


async def test_update_and_delete():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["id"] == "eq.t1"
        if request.method == "PATCH":
            return httpx.Response(200, json=[{"id": "t1", "amount": "20.00"}])
        return httpx.Response(200, json=[{"id": "t1"}])

    store = make_store(handler)
    assert await store.update("transactions", {"id": "t1"}, {"amount": Decimal("20")}) == [{"id": "t1", "amount": "20.00"}]
    assert await store.delete("transactions", {"id": "t1"}) == 1


async def test_select_one_returns_none_when_missing():
    store = make_store(lambda request: httpx.Response(200, json=[]))
    assert await store.select_one("accounts", {"id": "missing"}) is None


async def test_http_error_becomes_backend_error():
    store = make_store(lambda request: httpx.Response(409, json={"message": "duplicate key"}))

    with pytest.raises(BackendError) as exc_info:
        await store.insert("tags", {"name": "x"})
    assert exc_info.value.status_code == 409


@pytest.mark.parametrize(
    "error",
    [httpx.ReadTimeout("timed out"), httpx.ConnectError("connection refused")],
)
async def test_transport_errors_become_backend_error(error):
    def handler(request: httpx.Request) -> httpx.Response:
        raise error

    with pytest.raises(BackendError):
        await make_store(handler).select("accounts")


async def test_invalid_json_becomes_backend_error():
    store = make_store(lambda request: httpx.Response(200, content=b"<html>oops</html>"))

    with pytest.raises(BackendError):
        await store.select("accounts")
