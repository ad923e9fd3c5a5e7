"""A user's in-app notification inbox and channel preferences."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from renobid.common.exceptions import NotFoundError
from renobid.common.logging import get_logger
from renobid.common.pagination import PaginationParams, paginate
from renobid.db.models.notification import Notification
from renobid.db.models.user import User

logger = get_logger("notifications.inbox")


class Inbox:
    def __init__(self, db: AsyncSession, user: User):
        self.db = db
        self.user = user

    def _own(self):
        return select(Notification).where(
            Notification.user_id == self.user.id, Notification.is_deleted.is_(False)
        )

    async def page(
        self, params: PaginationParams, unread_only: bool = False
    ) -> tuple[list[Notification], int]:
        query = self._own()
        if unread_only:
            query = query.where(Notification.is_read.is_(False))
        return await paginate(self.db, query, params, Notification, {"created_at"})

    async def unread_count(self) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(
                self._own().where(Notification.is_read.is_(False)).subquery()
            )
        )
        return result.scalar() or 0

    async def mark_read(self, notification_id: uuid.UUID) -> Notification:
        result = await self.db.execute(self._own().where(Notification.id == notification_id))
        notification = result.scalar_one_or_none()
        if not notification:
            raise NotFoundError("Notification", str(notification_id))

        notification.is_read = True
        await self.db.flush()
        await self.db.refresh(notification)
        return notification

    async def mark_all_read(self) -> int:
        result = await self.db.execute(
            update(Notification)
            .where(
                Notification.user_id == self.user.id,
                Notification.is_read.is_(False),
                Notification.is_deleted.is_(False),
            )
            .values(is_read=True)
        )
        logger.info("Marked %d notifications read for user %s", result.rowcount, self.user.id)
        return result.rowcount

    async def save_preferences(self, notification_prefs: dict[str, Any]) -> None:
        # new dict so the JSON column registers the change
        self.user.preferences = {**(self.user.preferences or {}), "notifications": notification_prefs}
        await self.db.flush()
