"""
Celery tasks - index change batches off the request path.
"""

import asyncio

from content_search.core.errors import BatchProcessingError
from content_search.indexing.handler import run_batch
from content_search.queue.celery_app import celery_app


def _run_async(coro):
    """Run async function from sync Celery task."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@celery_app.task(bind=True, max_retries=3)
def process_change_batch(self, event: dict):
    """
    Index one change batch ({"Records": [...]}).
    Any failed event fails the task and the whole batch is retried.
    """
    try:
        return _run_async(run_batch(event))
    except BatchProcessingError as exc:
        raise self.retry(exc=exc, countdown=5)
