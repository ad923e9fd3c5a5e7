"""Notification delivery: in-app record plus email/SMS per user preferences."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from renobid.common.enums import NotificationChannel
from renobid.common.logging import get_logger
from renobid.config import settings
from renobid.db.models.notification import Notification
from renobid.db.models.user import User
from renobid.integrations.sendgrid import EmailClient
from renobid.integrations.twilio_client import SMSClient

logger = get_logger("notifications.service")

SMS_MAX_LENGTH = 160

DEFAULT_PREFERENCES: dict[str, Any] = {
    "email_enabled": True,
    "sms_enabled": True,
    "in_app_enabled": True,
    "types": {},
}


def resolve_preferences(user: User) -> dict[str, Any]:
    stored = (user.preferences or {}).get("notifications") or {}
    prefs = {**DEFAULT_PREFERENCES, **stored}
    prefs["types"] = {**DEFAULT_PREFERENCES["types"], **(stored.get("types") or {})}
    return prefs


def allowed_channels(prefs: dict[str, Any], notification_type: str, requested: list[str]) -> list[str]:
    """Filter requested external channels down to what the user opted into."""
    if not prefs["types"].get(notification_type, True):
        return []
    switches = {
        NotificationChannel.EMAIL.value: prefs["email_enabled"],
        NotificationChannel.SMS.value: prefs["sms_enabled"],
    }
    return [c for c in requested if switches.get(c, False)]


def render_email(title: str, message: str, action_url: str | None = None) -> str:
    button = ""
    if action_url:
        button = (
            f'<a href="{action_url}" style="display: inline-block; background: #1F7A4D; color: white; '
            'padding: 12px 24px; border-radius: 8px; text-decoration: none; margin-top: 16px;">View details</a>'
        )
    return f"""
    <div style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif; max-width: 600px; margin: 0 auto;">
        <div style="background: #1F7A4D; color: white; padding: 20px; border-radius: 12px 12px 0 0;">
            <h2 style="margin: 0;">Renobid</h2>
        </div>
        <div style="padding: 24px; background: #fff; border: 1px solid #e5e5e5; border-top: none; border-radius: 0 0 12px 12px;">
            <h3 style="margin-top: 0;">{title}</h3>
            <p style="color: #666; line-height: 1.6;">{message}</p>
            {button}
        </div>
    </div>
    """


def render_sms(title: str, message: str) -> str:
    body = f"Renobid: {title} - {message}"
    if len(body) > SMS_MAX_LENGTH:
        body = body[: SMS_MAX_LENGTH - 3] + "..."
    return body


async def deliver(
    db: AsyncSession,
    user_id: uuid.UUID,
    notification_type: str,
    title: str,
    message: str,
    channels: list[str],
    data: dict[str, Any] | None = None,
    email_client: EmailClient | None = None,
    sms_client: SMSClient | None = None,
) -> dict[str, Any]:
    """Deliver one notification and report per-channel outcome.

    Provider failures are recorded in the result, never raised; only
    database errors propagate.
    """
    result = await db.execute(select(User).where(User.id == user_id, User.is_deleted.is_(False)))
    user = result.scalar_one_or_none()
    if not user:
        logger.warning("Notification %s dropped: user %s not found", notification_type, user_id)
        return {"notification_id": None, "channels": {}, "errors": {"user": "not_found"}}

    data = data or {}
    prefs = resolve_preferences(user)
    project_id = data.get("project_id")
    action_url = f"{settings.APP_URL}/projects/{project_id}" if project_id else None

    outcome: dict[str, Any] = {"notification_id": None, "channels": {}, "errors": {}}

    if prefs["in_app_enabled"]:
        notification = Notification(
            user_id=user.id,
            project_id=uuid.UUID(project_id) if project_id else None,
            type=notification_type,
            title=title,
            message=message,
            action_url=action_url,
            channel=NotificationChannel.IN_APP.value,
            metadata_json=data,
        )
        db.add(notification)
        await db.flush()
        outcome["notification_id"] = str(notification.id)
        outcome["channels"][NotificationChannel.IN_APP.value] = True

    for channel in allowed_channels(prefs, notification_type, channels):
        if channel == NotificationChannel.EMAIL.value:
            if not user.email:
                continue
            client = email_client or EmailClient()
            sent = await client.send_email(
                to=user.email,
                subject=f"Renobid: {title}",
                html_body=render_email(title, message, action_url),
            )
        elif channel == NotificationChannel.SMS.value:
            if not user.phone:
                continue
            client = sms_client or SMSClient()
            sent = await client.send_sms(to=user.phone, body=render_sms(title, message))
        else:
            continue

        ok = sent.get("status") == "sent"
        outcome["channels"][channel] = ok
        if not ok:
            outcome["errors"][channel] = sent.get("error", "unknown error")
            logger.error(
                "%s delivery failed for %s notification user=%s: %s",
                channel, notification_type, user_id, outcome["errors"][channel],
            )

    logger.info(
        "Delivered %s notification to user %s via %s",
        notification_type, user_id, ",".join(k for k, v in outcome["channels"].items() if v) or "none",
    )
    return outcome
