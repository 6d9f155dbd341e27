"""
Celery application - change batches received over HTTP are indexed by a worker.
A failed batch is retried as a whole, like a redelivered stream batch.
"""

from celery import Celery
from celery.signals import setup_logging

from content_search.config import get_settings
from content_search.core.logging import configure_logging

settings = get_settings()

celery_app = Celery(
    "content_search",
    broker=settings.celery_broker_url,
    backend=settings.redis_url,
    include=["content_search.queue.tasks"],
)

# Task settings: retries, time limits, serialization
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_track_started=True,
    task_time_limit=300,
    task_soft_time_limit=240,
    worker_prefetch_multiplier=1,  # Fair distribution
)


@setup_logging.connect
def _configure_worker_logging(**kwargs):
    configure_logging()
