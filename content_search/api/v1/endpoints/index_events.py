"""
Change batch intake - queue a batch of stream records for indexing.
"""

from fastapi import APIRouter, status

from content_search.queue.tasks import process_change_batch
from content_search.schemas.events import BatchAccepted, ChangeBatch

router = APIRouter()


@router.post("/events", response_model=BatchAccepted, status_code=status.HTTP_202_ACCEPTED)
async def enqueue_change_batch(batch: ChangeBatch):
    """Hand the batch to the indexing worker; the outcome is only visible in the worker logs."""
    result = process_change_batch.delay({"Records": batch.records})
    return BatchAccepted(task_id=str(result.id), records=len(batch.records))
