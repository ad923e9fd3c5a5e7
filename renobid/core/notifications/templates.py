"""Message copy for bid events."""

from renobid.common.enums import NotificationChannel, NotificationType


def bid_received(project_code: str, bid_code: str) -> dict:
    return {
        "type": NotificationType.BID_RECEIVED.value,
        "title": "You received a new bid",
        "content": (
            f"Project {project_code} just received a new bid ({bid_code}). "
            "Review it from your project page."
        ),
        "channels": [NotificationChannel.EMAIL.value],
    }


def bid_approved(project_code: str, bid_code: str) -> dict:
    return {
        "type": NotificationType.BID_APPROVED.value,
        "title": "Your bid was approved",
        "content": (
            f"Your bid {bid_code} for project {project_code} was approved. "
            "The homeowner can now review and select it."
        ),
        "channels": [NotificationChannel.EMAIL.value, NotificationChannel.SMS.value],
    }
