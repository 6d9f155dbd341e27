"""
Batch completion tracker - waits for every dispatched event and counts outcomes.
Success is per item: failed items never roll back or cancel their siblings.
"""

import asyncio
import logging
from collections.abc import Awaitable, Iterable
from dataclasses import dataclass

from content_search.indexing.metrics import record_outcome
from content_search.indexing.router import ItemOutcome

logger = logging.getLogger(__name__)


@dataclass
class BatchReport:
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        """Processed events; skipped events are not part of the batch."""
        return self.succeeded + self.failed

    @property
    def ok(self) -> bool:
        return self.failed == 0

    @property
    def message(self) -> str:
        if self.failed:
            return f"There was an error processing {self.failed} events!"
        return f"Successfully processed all {self.total} events!"


class BatchCompletionTracker:
    async def settle(self, operations: Iterable[Awaitable[ItemOutcome]], skipped: int = 0) -> BatchReport:
        """Wait for all operations regardless of individual failure and count the outcomes."""
        results = await asyncio.gather(*operations, return_exceptions=True)
        report = BatchReport(skipped=skipped)
        for result in results:
            if isinstance(result, ItemOutcome) and result.ok:
                report.succeeded += 1
                record_outcome(result.content_type and result.content_type.value, "succeeded")
                continue
            report.failed += 1
            if isinstance(result, ItemOutcome):
                record_outcome(result.content_type and result.content_type.value, "failed")
                logger.error(
                    "Error processing an event for %s/%s: %r", result.site, result.content_id, result.error
                )
            else:
                record_outcome(None, "failed")
                logger.error("Error processing an event: %r", result)
        logger.info("All records processed!")
        return report
