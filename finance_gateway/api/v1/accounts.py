"""Accounts - bank accounts, wallets and credit cards"""

from typing import List

from fastapi import APIRouter, Depends, Query

from finance_gateway.api.dependencies import get_account_service
from finance_gateway.api.v1.schemas import AccountCreate, AccountUpdate, TotalBalanceResponse, changes
from finance_gateway.domain.models import Account
from finance_gateway.services.accounts import AccountService

router = APIRouter()


@router.get("/accounts", response_model=List[Account])
async def list_accounts(
    include_archived: bool = Query(False),
    service: AccountService = Depends(get_account_service),
):
    return await service.list(include_archived)


@router.get("/accounts/total-balance", response_model=TotalBalanceResponse)
async def get_total_balance(service: AccountService = Depends(get_account_service)):
    """Sum of active account balances; credit card balances count as owed"""
    return TotalBalanceResponse(total_balance=await service.total_balance())


@router.get("/accounts/{account_id}", response_model=Account)
async def get_account(account_id: str, service: AccountService = Depends(get_account_service)):
    return await service.get(account_id)


@router.post("/accounts", response_model=Account, status_code=201)
async def create_account(body: AccountCreate, service: AccountService = Depends(get_account_service)):
    return await service.create(body.model_dump())


@router.patch("/accounts/{account_id}", response_model=Account)
async def update_account(account_id: str, body: AccountUpdate, service: AccountService = Depends(get_account_service)):
    return await service.update(account_id, changes(body))


@router.delete("/accounts/{account_id}", status_code=204)
async def delete_account(account_id: str, service: AccountService = Depends(get_account_service)):
    await service.delete(account_id)
