"""Hands bid events to the background delivery queue.

The lifecycle engine parks its events on the session with
:meth:`NotificationDispatcher.emit_after_commit`; the request's unit of work
calls :func:`send_pending` once the commit has succeeded, or
:func:`discard_pending` when it rolls back. Delivery happens in a Celery
worker; a failure to even enqueue is reported through ``on_failure`` and the
default hook logs it.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from renobid.common.logging import get_logger

logger = get_logger("notifications.dispatcher")

FailureHook = Callable[[dict[str, Any], BaseException], None]

PENDING_KEY = "pending_notifications"


def log_dispatch_failure(event: dict[str, Any], error: BaseException) -> None:
    context = event.get("context") or {}
    logger.error(
        "Failed to dispatch %s notification | operation=%s bid=%s (%s) project=%s (%s) recipient=%s error=%s",
        event.get("type"),
        context.get("operation"),
        context.get("bid_id"),
        context.get("bid_code"),
        context.get("project_id"),
        context.get("project_code"),
        event.get("user_id"),
        error,
        exc_info=error,
    )


class NotificationDispatcher:
    def __init__(self, on_failure: FailureHook | None = None):
        self.on_failure = on_failure or log_dispatch_failure

    def emit(
        self,
        user_id: uuid.UUID,
        notification_type: str,
        title: str,
        content: str,
        channels: list[str],
        data: dict[str, Any] | None = None,
        context: dict[str, Any] | None = None,
    ) -> bool:
        """Queue delivery of one notification. Returns False if queuing failed."""
        event = {
            "user_id": str(user_id),
            "type": notification_type,
            "title": title,
            "content": content,
            "channels": channels,
            "data": data or {},
            "context": context or {},
        }
        try:
            from renobid.tasks.notification_tasks import deliver_notification

            deliver_notification.delay(event)
        except Exception as e:
            self.on_failure(event, e)
            return False

        logger.info("Queued %s notification for user %s", notification_type, user_id)
        return True

    def emit_after_commit(self, session: AsyncSession, **event: Any) -> None:
        """Hold ``event`` on the session until its transaction commits."""
        session.info.setdefault(PENDING_KEY, []).append((self, event))


def send_pending(session: AsyncSession) -> int:
    """Queue everything held on ``session``. Call only after a successful commit."""
    pending = session.info.pop(PENDING_KEY, [])
    for dispatcher, event in pending:
        dispatcher.emit(**event)
    return len(pending)


def discard_pending(session: AsyncSession) -> None:
    dropped = session.info.pop(PENDING_KEY, [])
    if dropped:
        logger.info("Dropped %d notifications from a rolled back transaction", len(dropped))
