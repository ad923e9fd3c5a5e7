from celery import Celery

from renobid.config import settings

app = Celery(
    "renobid",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
)

app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    # enqueueing happens inside API requests; fail fast when the broker is down
    task_publish_retry_policy={
        "max_retries": 1,
        "interval_start": 0,
        "interval_step": 0.2,
        "interval_max": 0.2,
    },
    task_routes={
        "renobid.tasks.notification_tasks.*": {"queue": "notifications"},
    },
)

app.autodiscover_tasks(["renobid.tasks.notification_tasks"])
