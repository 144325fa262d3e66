"""Unit tests for optimistic collection writes"""

import pytest
from decimal import Decimal
from finance_gateway.domain.exceptions import BackendError
from finance_gateway.domain.models import Account
from finance_gateway.services.collection import TEMP_PREFIX, EntityCollection


def account_values(**overrides):
    values = {"name": "Checking", "type": "checking", "balance": Decimal("100.00")}
    values.update(overrides)
    return values


async def failing(*args, **kwargs):
    raise BackendError("backend down", status_code=503)


async def test_create_replaces_placeholder_with_stored_record(repos):
    accounts = EntityCollection(repos.accounts)

    created = await accounts.create(account_values())

    assert not created.id.startswith(TEMP_PREFIX)
    assert accounts.items == [created]
    assert isinstance(created, Account)


async def test_failed_create_removes_placeholder(repos, monkeypatch):
    accounts = EntityCollection(repos.accounts)
    monkeypatch.setattr(repos.accounts, "create", failing)

    with pytest.raises(BackendError):
        await accounts.create(account_values())
    assert accounts.items == []


async def test_failed_update_restores_previous_record(repos, monkeypatch):
    accounts = EntityCollection(repos.accounts)
    created = await accounts.create(account_values())
    monkeypatch.setattr(repos.accounts, "update", failing)

    with pytest.raises(BackendError):
        await accounts.update(created.id, {"name": "Renamed"})
    assert accounts.get(created.id).name == "Checking"


async def test_update_applies_stored_values(repos):
    accounts = EntityCollection(repos.accounts)
    created = await accounts.create(account_values())

    updated = await accounts.update(created.id, {"name": "Main"})

    assert updated.name == "Main"
    assert accounts.get(created.id).name == "Main"


async def test_failed_delete_reinserts_at_same_position(repos, monkeypatch):
    accounts = EntityCollection(repos.accounts)
    first = await accounts.create(account_values(name="First"))
    second = await accounts.create(account_values(name="Second"))
    monkeypatch.setattr(repos.accounts, "delete", failing)

    with pytest.raises(BackendError):
        await accounts.delete(first.id)
    assert [a.id for a in accounts.items] == [second.id, first.id]


async def test_refresh_sorts_with_sort_key(repos):
    await repos.accounts.create(account_values(name="Savings"))
    await repos.accounts.create(account_values(name="Cash"))
    accounts = EntityCollection(repos.accounts, sort_key=lambda a: a.name)

    items = await accounts.refresh()

    assert [a.name for a in items] == ["Cash", "Savings"]
