"""
Event router - classifies each change event and starts its pipeline.

Every routed event runs as its own task: token -> fetch -> transform ->
ensure index -> write (or a plain delete). Failures are converted into an
ItemOutcome here so that gathering the batch never short-circuits.
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from content_search.core.errors import MalformedEventError, UnsupportedTypeError
from content_search.indexing.metrics import record_outcome
from content_search.indexing.registry import ContentRegistry
from content_search.schemas.content import ContentType
from content_search.schemas.events import ChangeEvent, IndexAction
from content_search.transformers import ContentTransformer

logger = logging.getLogger(__name__)


@dataclass
class ItemOutcome:
    """Result of one routed event."""

    site: str | None
    content_id: str | None
    content_type: ContentType | None = None
    action: IndexAction | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RoutedBatch:
    operations: list[asyncio.Task] = field(default_factory=list)
    skipped: int = 0


class EventRouter:
    def __init__(self, registry: ContentRegistry):
        self.registry = registry

    def dispatch(self, records: Iterable[dict[str, Any]]) -> RoutedBatch:
        """Start one task per supported event. Must be called with a running event loop."""
        batch = RoutedBatch()
        for record in records:
            operation = self.route(record)
            if operation is None:
                batch.skipped += 1
            else:
                batch.operations.append(asyncio.create_task(operation))
        return batch

    def route(self, record: dict[str, Any]):
        """Coroutine producing the event's ItemOutcome, or None when the event is skipped."""
        try:
            event = ChangeEvent.from_record(record)
        except MalformedEventError as exc:
            logger.warning("Malformed change event: %s", exc)
            return self._rejected(None, exc)

        route = self.registry.route(event.source_table)
        if route is None:
            logger.info("Skipping event from unsupported table %r", event.source_table)
            record_outcome(None, "skipped")
            return None

        try:
            event.validate_keys()
            content_type = route.classify(event)
            transformer = self.registry.transformer(content_type)
        except MalformedEventError as exc:
            logger.warning("Malformed change event: %s", exc)
            return self._rejected(event, exc)
        except UnsupportedTypeError as exc:
            logger.info("Skipping %s event %s/%s: %s", event.source_table, event.site, event.content_id, exc)
            record_outcome(None, "skipped")
            return None

        return self._process(event, content_type, transformer)

    async def _process(
        self, event: ChangeEvent, content_type: ContentType, transformer: ContentTransformer
    ) -> ItemOutcome:
        outcome = ItemOutcome(
            site=event.site,
            content_id=event.content_id,
            content_type=content_type,
            action=event.action,
        )
        try:
            await transformer.index(event.action, event.site, event.content_id, event.image)
        except Exception as exc:
            # One event's failure must not reject the batch gather
            logger.warning(
                "Error processing %s %s for %s/%s: %s",
                event.action.value, content_type.value, event.site, event.content_id, exc,
            )
            outcome.error = exc
        return outcome

    @staticmethod
    async def _rejected(event: ChangeEvent | None, error: Exception) -> ItemOutcome:
        return ItemOutcome(
            site=event.site if event else None,
            content_id=event.content_id if event else None,
            error=error,
        )
