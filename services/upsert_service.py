"""
Upsert dispatcher.

Insert-or-update keyed on the natural key (ASIN, else brand + name).
Records go one at a time inside fixed-size batches; a failing record
is logged, counted and skipped. There is no atomicity across a batch
and no locking between concurrent runs (last write wins).
"""

import time
from datetime import datetime, timezone
from typing import Callable, Iterator
import structlog

from models.perfume import PerfumeCandidate, PerfumeCreate, PerfumeScrapeUpdate
from models.ingest import (
    UpsertAction,
    UpsertOutcome,
    BatchReport,
    DispatchResult,
)
from services.perfume_service import PerfumeService

logger = structlog.get_logger(__name__)


def _chunks(items: list, size: int) -> Iterator[list]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


class UpsertDispatcher:
    """
    Write validated candidates to the perfume table.

    Usage:
        dispatcher = UpsertDispatcher(PerfumeService(client), batch_size=200)
        result = dispatcher.dispatch(candidates)
        print(result.inserted, result.updated, result.failed)
    """

    def __init__(
        self,
        perfume_service: PerfumeService,
        batch_size: int = 200,
        record_delay_seconds: float = 0.0,
        default_currency: str = "ZAR",
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)
    ):
        self.perfume_service = perfume_service
        self.batch_size = max(1, batch_size)
        self.record_delay_seconds = record_delay_seconds
        self.default_currency = default_currency
        self._sleep = sleep
        self._clock = clock

    def upsert(self, candidate: PerfumeCandidate) -> UpsertOutcome:
        """
        Insert or update one candidate.

        Found by natural key → update mutable fields, keep id.
        Not found → insert with defaults for omitted optional fields.
        A failed lookup or write is logged and returned as a FAILED outcome.
        """
        scraped_at = self._clock()

        try:
            existing = self.perfume_service.find_existing(candidate)

            if existing:
                self.perfume_service.update_scraped_fields(
                    existing.id,
                    PerfumeScrapeUpdate.from_candidate(candidate, scraped_at)
                )
                return UpsertOutcome(action=UpsertAction.UPDATE, perfume_id=existing.id)

            created = self.perfume_service.create(
                PerfumeCreate.from_candidate(candidate, self.default_currency, scraped_at)
            )
            return UpsertOutcome(action=UpsertAction.INSERT, perfume_id=created.id)

        except Exception as e:
            logger.error(
                "upsert_failed",
                brand=candidate.brand,
                name=candidate.name,
                asin=candidate.amazon_asin,
                error=str(e),
                error_type=type(e).__name__
            )
            return UpsertOutcome(action=UpsertAction.FAILED, error=str(e))

    def dispatch(self, candidates: list[PerfumeCandidate]) -> DispatchResult:
        """
        Upsert candidates batch by batch.

        Args:
            candidates: Validated candidates

        Returns:
            DispatchResult with totals and a report per batch
        """
        result = DispatchResult()
        if not candidates:
            return result

        logger.info(
            "dispatch_started",
            records=len(candidates),
            batch_size=self.batch_size
        )

        first = True
        for number, batch in enumerate(_chunks(candidates, self.batch_size), start=1):
            report = BatchReport(batch_number=number, size=len(batch))

            for candidate in batch:
                if not first and self.record_delay_seconds > 0:
                    self._sleep(self.record_delay_seconds)
                first = False

                outcome = self.upsert(candidate)

                if outcome.action == UpsertAction.INSERT:
                    report.inserted += 1
                elif outcome.action == UpsertAction.UPDATE:
                    report.updated += 1
                else:
                    report.failed += 1
                    result.errors.append(f"{candidate.brand} - {candidate.name}: {outcome.error}")

            result.inserted += report.inserted
            result.updated += report.updated
            result.failed += report.failed
            result.batches.append(report)

            logger.info(
                "batch_dispatched",
                batch=number,
                size=report.size,
                inserted=report.inserted,
                updated=report.updated,
                failed=report.failed
            )

        logger.info(
            "dispatch_completed",
            inserted=result.inserted,
            updated=result.updated,
            failed=result.failed
        )
        return result
