"""End-to-end tests: services over the REST row store against the mock backend"""

import httpx
import pytest
from datetime import date, datetime
from decimal import Decimal
from finance_gateway.domain.exceptions import BackendError, RecordNotFoundError
from finance_gateway.infrastructure.clients.rest import RestRowStore
from finance_gateway.infrastructure.database.repositories import Repositories
from finance_gateway.services.accounts import AccountService
from finance_gateway.services.recurring import RecurringService
from finance_gateway.services.transactions import TransactionService
from mock.rest_server.main import app as backend_app, reset

pytestmark = pytest.mark.integration


@pytest.fixture
def rest_store() -> RestRowStore:
    reset()
    return RestRowStore(
        base_url="http://backend",
        api_key="test-key",
        transport=httpx.ASGITransport(app=backend_app),
    )


@pytest.fixture
def rest_repos(rest_store: RestRowStore) -> Repositories:
    return Repositories(rest_store, "user-1")


async def test_account_and_transaction_lifecycle(rest_repos: Repositories):
    accounts = AccountService(rest_repos)
    transactions = TransactionService(rest_repos)

    account = await accounts.create({"name": "Checking", "type": "checking", "balance": Decimal("1000.00")})
    txn = await transactions.create(
        {"account_id": account.id, "type": "expense", "amount": Decimal("50.00"), "date": date(2024, 3, 10)}
    )

    assert (await accounts.get(account.id)).balance == Decimal("950.00")
    assert [t.id for t in await transactions.list(start=date(2024, 3, 1), end=date(2024, 3, 31))] == [txn.id]
    assert await accounts.total_balance() == Decimal("950.00")

    await transactions.delete(txn.id)
    assert (await accounts.get(account.id)).balance == Decimal("1000.00")


async def test_rows_are_scoped_to_their_owner(rest_store: RestRowStore, rest_repos: Repositories):
    account = await AccountService(rest_repos).create({"name": "Checking", "type": "checking"})
    stranger = Repositories(rest_store, "user-2")

    assert await stranger.accounts.list() == []
    with pytest.raises(RecordNotFoundError):
        await stranger.accounts.get(account.id)


async def test_recurring_batch(rest_repos: Repositories):
    account = await AccountService(rest_repos).create({"name": "Checking", "type": "checking"})
    service = RecurringService(rest_repos)
    entry = await service.create(
        {
            "account_id": account.id,
            "type": "income",
            "amount": Decimal("3000.00"),
            "description": "Salary",
            "frequency": "monthly",
            "start_date": date(2024, 1, 5),
            "is_active": True,
            "auto_create": True,
        }
    )

    first = await service.process(datetime(2024, 1, 6, 8, 0))
    second = await service.process(datetime(2024, 1, 6, 8, 0))

    assert first.processed == 1
    assert second.processed == 0
    assert (await rest_repos.recurring.get(entry.id)).next_date == date(2024, 2, 5)
    [created] = await rest_repos.transactions.list()
    assert created.recurring_id == entry.id
    assert created.amount == Decimal("3000.00")


async def test_missing_api_key_is_rejected():
    reset()
    store = RestRowStore(base_url="http://backend", api_key="", transport=httpx.ASGITransport(app=backend_app))

    with pytest.raises(BackendError) as exc_info:
        await store.select("accounts")
    assert exc_info.value.status_code == 401
