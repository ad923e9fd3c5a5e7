import asyncio
import uuid

from renobid.common.logging import get_logger
from renobid.tasks.celery_app import app

logger = get_logger("tasks.notification")


def _run_async(coro):
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@app.task(
    name="renobid.tasks.notification_tasks.deliver_notification",
    bind=True,
    max_retries=3,
    default_retry_delay=30,
)
def deliver_notification(self, event: dict):
    """Write the in-app notification and fan out to email/SMS."""
    context = event.get("context") or {}
    logger.info(
        "Delivering %s notification to user %s (%s)",
        event["type"], event["user_id"], context.get("operation"),
    )

    async def _deliver():
        from renobid.core.notifications.service import deliver
        from renobid.db.session import async_session_factory

        async with async_session_factory() as db:
            try:
                outcome = await deliver(
                    db,
                    user_id=uuid.UUID(event["user_id"]),
                    notification_type=event["type"],
                    title=event["title"],
                    message=event["content"],
                    channels=event.get("channels") or [],
                    data=event.get("data"),
                )
                await db.commit()
                return outcome
            except Exception:
                await db.rollback()
                raise

    try:
        return _run_async(_deliver())
    except Exception as e:
        logger.error(
            "Notification delivery failed | operation=%s bid=%s (%s) project=%s (%s) recipient=%s attempt=%d error=%s",
            context.get("operation"),
            context.get("bid_id"),
            context.get("bid_code"),
            context.get("project_id"),
            context.get("project_code"),
            event["user_id"],
            self.request.retries + 1,
            e,
            exc_info=True,
        )
        raise self.retry(exc=e, countdown=30 * 2 ** self.request.retries)
