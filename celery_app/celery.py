from celery import Celery
from chatflow.config import settings

GENERATION_QUEUE = "chatflow_generation"

celery_app = Celery(
    "chatflow_tasks",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["celery_app.tasks"]
)

# Two model calls plus the writes
generation_time_limit = int(settings.LLM_TIMEOUT * 2) + 60

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_routes={"generate_chatflow_task": {"queue": GENERATION_QUEUE}},
    task_default_queue=GENERATION_QUEUE,
    worker_prefetch_multiplier=1,
    task_soft_time_limit=generation_time_limit,
    task_time_limit=generation_time_limit + 60,
)
