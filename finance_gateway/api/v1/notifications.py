"""Notifications and the checks that raise them"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends

from finance_gateway.api.dependencies import get_notification_service, get_today
from finance_gateway.api.v1.schemas import CountResponse, NotificationCreate
from finance_gateway.domain.models import Notification
from finance_gateway.services.notifications import NotificationService

router = APIRouter()


@router.get("/notifications", response_model=List[Notification])
async def list_notifications(service: NotificationService = Depends(get_notification_service)):
    return await service.list()


@router.get("/notifications/unread-count", response_model=CountResponse)
async def get_unread_count(service: NotificationService = Depends(get_notification_service)):
    return CountResponse(count=await service.unread_count())


@router.post("/notifications", response_model=Notification, status_code=201)
async def create_notification(
    body: NotificationCreate,
    service: NotificationService = Depends(get_notification_service),
):
    return await service.create(body.model_dump())


@router.post("/notifications/read-all", response_model=CountResponse)
async def mark_all_read(service: NotificationService = Depends(get_notification_service)):
    return CountResponse(count=await service.mark_all_read())


@router.post("/notifications/check", response_model=List[Notification])
async def run_notification_checks(
    today: date = Depends(get_today),
    service: NotificationService = Depends(get_notification_service),
):
    """Raise bill reminders and budget alerts for today"""
    return await service.run_checks(today)


@router.post("/notifications/{notification_id}/read", response_model=Notification)
async def mark_read(notification_id: str, service: NotificationService = Depends(get_notification_service)):
    return await service.mark_read(notification_id)


@router.delete("/notifications/{notification_id}", status_code=204)
async def delete_notification(notification_id: str, service: NotificationService = Depends(get_notification_service)):
    await service.delete(notification_id)
