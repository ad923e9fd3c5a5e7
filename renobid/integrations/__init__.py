"""Outbound provider clients used for notification delivery."""

from renobid.integrations.base import BaseIntegration
from renobid.integrations.sendgrid import EmailClient
from renobid.integrations.twilio_client import SMSClient

__all__ = [
    "BaseIntegration",
    "EmailClient",
    "SMSClient",
]
