"""In-app notifications and delivery preferences."""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from renobid.api.deps import get_current_user, get_db
from renobid.common.pagination import PaginatedResponse, PaginationParams
from renobid.common.timeutil import ensure_utc
from renobid.core.notifications.inbox import Inbox
from renobid.core.notifications.service import resolve_preferences
from renobid.db.models.notification import Notification
from renobid.db.models.user import User

router = APIRouter(prefix="/notifications", tags=["Notifications"])


class NotificationOut(BaseModel):
    id: uuid.UUID
    project_id: uuid.UUID | None
    type: str
    channel: str
    title: str
    message: str
    is_read: bool
    action_url: str | None
    metadata: dict | None
    created_at: datetime


class InboxPage(PaginatedResponse[NotificationOut]):
    unread_count: int


class ChannelPreferences(BaseModel):
    email_enabled: bool = True
    sms_enabled: bool = True
    in_app_enabled: bool = True
    types: dict[str, bool] = {}


def get_inbox(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Inbox:
    return Inbox(db, current_user)


def _out(n: Notification) -> NotificationOut:
    return NotificationOut(
        id=n.id,
        project_id=n.project_id,
        type=n.type,
        channel=n.channel,
        title=n.title,
        message=n.message,
        is_read=n.is_read,
        action_url=n.action_url,
        metadata=n.metadata_json,
        created_at=ensure_utc(n.created_at),
    )


@router.get("", response_model=InboxPage)
async def list_notifications(
    unread_only: bool = Query(False),
    params: PaginationParams = Depends(),
    inbox: Inbox = Depends(get_inbox),
):
    items, total = await inbox.page(params, unread_only=unread_only)
    return InboxPage(
        items=[_out(n) for n in items],
        total=total, page=params.page, page_size=params.page_size,
        total_pages=params.total_pages(total),
        unread_count=await inbox.unread_count(),
    )


@router.post("/{notification_id}/read", response_model=NotificationOut)
async def mark_read(notification_id: uuid.UUID, inbox: Inbox = Depends(get_inbox)):
    return _out(await inbox.mark_read(notification_id))


@router.post("/read-all")
async def mark_all_read(inbox: Inbox = Depends(get_inbox)):
    return {"updated": await inbox.mark_all_read()}


@router.get("/preferences", response_model=ChannelPreferences)
async def get_preferences(current_user: User = Depends(get_current_user)):
    return ChannelPreferences(**resolve_preferences(current_user))


@router.put("/preferences", response_model=ChannelPreferences)
async def update_preferences(body: ChannelPreferences, inbox: Inbox = Depends(get_inbox)):
    await inbox.save_preferences(body.model_dump())
    return body
