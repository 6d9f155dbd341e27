"""
Batch entrypoint for change-event batches.

    {"Records": [<stream record>, ...]}

Builds the per-invocation resources (one search client, one HTTP client, the
transformer registry), routes every record, waits for all of them and reports
the aggregate result. A batch with any failed event raises
BatchProcessingError so the caller can redeliver the whole batch.
"""

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

import httpx

from content_search.config import Settings, get_settings
from content_search.core.errors import BatchProcessingError
from content_search.core.logging import configure_logging
from content_search.indexing.registry import ContentRegistry, build_registry
from content_search.indexing.router import EventRouter
from content_search.indexing.tracker import BatchCompletionTracker, BatchReport
from content_search.search.elasticsearch_client import create_elasticsearch

logger = logging.getLogger(__name__)


async def process_batch(records: Iterable[dict[str, Any]], registry: ContentRegistry) -> BatchReport:
    """Route and settle one batch. Never raises for per-event failures."""
    batch = EventRouter(registry).dispatch(records)
    report = await BatchCompletionTracker().settle(batch.operations, skipped=batch.skipped)
    logger.info("Successfully processed %d/%d events.", report.succeeded, report.total)
    if report.failed:
        logger.error("Failed processing %d/%d events.", report.failed, report.total)
    return report


async def run_batch(event: dict[str, Any], settings: Settings | None = None) -> str:
    """Process one change batch with fresh clients; returns the success message."""
    settings = settings or get_settings()
    es = create_elasticsearch(settings)
    try:
        async with httpx.AsyncClient(timeout=settings.content_api_timeout) as http:
            registry = build_registry(es, http, settings)
            report = await process_batch(event.get("Records") or [], registry)
    finally:
        await es.close()
    if not report.ok:
        raise BatchProcessingError(report.failed, report.total)
    return report.message


def handler(event: dict[str, Any], context: Any = None) -> str:
    """Host entrypoint: runs one batch to completion on its own event loop."""
    configure_logging()
    return asyncio.run(run_batch(event))
