"""SendGrid email client.

Talks to the v3 API when a real key is configured; with a ``mock_`` key it
only logs.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

import httpx

from renobid.config import settings
from renobid.integrations.base import BaseIntegration


class EmailClient(BaseIntegration):
    SENDGRID_URL = "https://api.sendgrid.com/v3"

    def __init__(self, timeout: float = 30) -> None:
        super().__init__("sendgrid")
        self.timeout = timeout

    @property
    def is_mock(self) -> bool:
        return settings.SENDGRID_API_KEY.startswith("mock_")

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {settings.SENDGRID_API_KEY}",
            "Content-Type": "application/json",
        }

    async def health_check(self) -> bool:
        if self.is_mock:
            return True
        try:
            async with httpx.AsyncClient(timeout=10) as client:
                resp = await client.get(f"{self.SENDGRID_URL}/scopes", headers=self._headers)
                return resp.status_code == 200
        except httpx.HTTPError as e:
            self.logger.error("SendGrid health check failed: %s", e)
            return False

    async def send_email(
        self, to: str, subject: str, html_body: str, from_email: str | None = None,
    ) -> dict[str, Any]:
        sender = from_email or settings.FROM_EMAIL
        message_id = str(uuid.uuid4())
        sent = {
            "status": "sent",
            "to": to,
            "subject": subject,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        if self.is_mock:
            self.logger.info("Mock email | from=%s | to=%s | subject='%s'", sender, to, subject)
            return {**sent, "message_id": message_id}

        payload = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": sender},
            "subject": subject,
            "content": [{"type": "text/html", "value": html_body}],
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    f"{self.SENDGRID_URL}/mail/send", headers=self._headers, json=payload,
                )
                resp.raise_for_status()
        except httpx.HTTPError as e:
            self.logger.error("SendGrid email to %s failed: %s", to, e)
            return {"status": "failed", "error": str(e), "to": to}

        sg_id = resp.headers.get("X-Message-Id", message_id)
        self.logger.info("Email sent via SendGrid: %s", sg_id)
        return {**sent, "message_id": sg_id}
