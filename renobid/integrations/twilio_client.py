"""Twilio SMS client.

Uses the REST API when real credentials are configured; ``mock_``
credentials only log.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

import httpx

from renobid.config import settings
from renobid.integrations.base import BaseIntegration

TWILIO_API = "https://api.twilio.com/2010-04-01"


class SMSClient(BaseIntegration):
    def __init__(self, timeout: float = 30) -> None:
        super().__init__("twilio")
        self.timeout = timeout

    @property
    def is_mock(self) -> bool:
        return settings.TWILIO_ACCOUNT_SID.startswith("mock_")

    @property
    def _auth(self) -> httpx.BasicAuth:
        return httpx.BasicAuth(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)

    async def health_check(self) -> bool:
        if self.is_mock:
            return True
        try:
            async with httpx.AsyncClient(timeout=10, auth=self._auth) as client:
                resp = await client.get(f"{TWILIO_API}/Accounts/{settings.TWILIO_ACCOUNT_SID}.json")
                return resp.status_code == 200
        except httpx.HTTPError as e:
            self.logger.error("Twilio health check failed: %s", e)
            return False

    async def send_sms(self, to: str, body: str) -> dict[str, Any]:
        sender = settings.TWILIO_FROM_NUMBER

        if self.is_mock:
            self.logger.info("Mock SMS | from=%s | to=%s | len=%d", sender, to, len(body))
            return {
                "status": "sent",
                "sid": f"SM{uuid.uuid4().hex}",
                "to": to,
                "segments": max(1, (len(body) + 159) // 160),
                "date_created": datetime.now(timezone.utc).isoformat(),
            }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, auth=self._auth) as client:
                resp = await client.post(
                    f"{TWILIO_API}/Accounts/{settings.TWILIO_ACCOUNT_SID}/Messages.json",
                    data={"From": sender, "To": to, "Body": body},
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            self.logger.error("Twilio SMS to %s failed: %s", to, e)
            return {"status": "failed", "error": str(e), "to": to}

        self.logger.info("SMS sent via Twilio: sid=%s", data.get("sid"))
        return {"status": "sent", "sid": data.get("sid"), "to": to, "date_created": data.get("date_created")}
