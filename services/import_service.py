"""
Catalog import pipeline.

Raw rows → field extraction (+ brand inference) → validation → upsert.
Used directly for spreadsheet imports and by the scrape pipeline for
each parsed result page.
"""

from typing import Any, Callable, Optional
from pathlib import Path
import structlog

from config.settings import Settings, get_settings
from config.database import create_supabase_client
from models.perfume import PerfumeCandidate
from models.ingest import RejectedRecord, ImportSummary
from parsers.field_extractor import build_candidate
from parsers.spreadsheet_parser import read_spreadsheet_rows, SpreadsheetSource
from services.validation_service import partition_candidates
from services.perfume_service import PerfumeService
from services.upsert_service import UpsertDispatcher

logger = structlog.get_logger(__name__)

# Header row is row 1 in the sheet
SPREADSHEET_FIRST_DATA_ROW = 2


class CatalogImportService:
    """
    Map, validate and persist catalog rows.

    The dispatcher is built on first persistent use, so dry runs never
    touch the database and need no credentials.

    Usage:
        service = CatalogImportService(dispatcher_factory=make_dispatcher)
        summary = service.import_rows(rows, source="export.xlsx", dry_run=True)
    """

    def __init__(
        self,
        dispatcher: Optional[UpsertDispatcher] = None,
        dispatcher_factory: Optional[Callable[[], UpsertDispatcher]] = None
    ):
        self._dispatcher = dispatcher
        self._dispatcher_factory = dispatcher_factory

    @property
    def dispatcher(self) -> UpsertDispatcher:
        if self._dispatcher is None:
            if self._dispatcher_factory is None:
                raise RuntimeError("CatalogImportService has no upsert dispatcher configured")
            self._dispatcher = self._dispatcher_factory()
        return self._dispatcher

    @property
    def perfume_service(self) -> PerfumeService:
        return self.dispatcher.perfume_service

    # ===================
    # MAPPING
    # ===================

    def map_rows(
        self,
        rows: list[dict[str, Any]],
        brand_hint: Optional[str] = None,
        first_row: int = 1
    ) -> tuple[list[PerfumeCandidate], list[RejectedRecord]]:
        """
        Turn raw rows into valid candidates.

        Args:
            rows: Raw rows (header/selector name → value)
            brand_hint: Brand for rows with no brand field
            first_row: Source row number of rows[0], for reporting

        Returns:
            (valid candidates, rejected records)
        """
        candidates = [build_candidate(row, brand_hint=brand_hint) for row in rows]
        return partition_candidates(candidates, first_row=first_row)

    # ===================
    # IMPORT
    # ===================

    def import_rows(
        self,
        rows: list[dict[str, Any]],
        source: str,
        dry_run: bool = False,
        brand_hint: Optional[str] = None,
        first_row: int = 1
    ) -> ImportSummary:
        """
        Run rows through the pipeline.

        Args:
            rows: Raw rows
            source: Label for logs and the summary (file name, query/page)
            dry_run: Map and validate only; no persistence calls
            brand_hint: Brand for rows with no brand field
            first_row: Source row number of rows[0]

        Returns:
            ImportSummary; in a dry run it carries the mapped candidates
        """
        summary = ImportSummary(source=source, dry_run=dry_run, found=len(rows))

        valid, rejected = self.map_rows(rows, brand_hint=brand_hint, first_row=first_row)
        summary.mapped = len(valid)
        summary.rejected = len(rejected)
        summary.rejections = rejected

        logger.info(
            "rows_mapped",
            source=source,
            found=summary.found,
            mapped=summary.mapped,
            rejected=summary.rejected,
            dry_run=dry_run
        )

        if dry_run:
            summary.candidates = valid
            return summary

        if valid:
            summary.apply_dispatch(self.dispatcher.dispatch(valid))

        logger.info(
            "import_completed",
            source=source,
            inserted=summary.inserted,
            updated=summary.updated,
            skipped=summary.skipped
        )
        return summary

    def import_spreadsheet(
        self,
        source: SpreadsheetSource,
        dry_run: bool = False,
        clear: bool = False,
        filename: Optional[str] = None
    ) -> ImportSummary:
        """
        Import a spreadsheet export (first sheet, header row).

        Args:
            source: Path or uploaded file content
            dry_run: Map and validate only
            clear: Delete existing perfumes first (ignored in dry run)
            filename: Original name for uploads

        Raises:
            SourceFileNotFoundError: Path does not exist
            SpreadsheetParseError: File cannot be read
            DatabaseError: The clear step fails
        """
        label = filename or (Path(source).name if isinstance(source, (str, Path)) else "upload")
        rows = read_spreadsheet_rows(source, filename=filename)

        if clear:
            if dry_run:
                logger.info("clear_skipped_dry_run", source=label)
            else:
                self.perfume_service.delete_all()

        return self.import_rows(
            rows,
            source=label,
            dry_run=dry_run,
            first_row=SPREADSHEET_FIRST_DATA_ROW,
        )


def build_dispatcher_factory(
    app_settings: Optional[Settings] = None,
    batch_size: Optional[int] = None
) -> Callable[[], UpsertDispatcher]:
    """
    Lazily connect to Supabase and build the upsert dispatcher.

    Raises (when called):
        MissingCredentialsError: Supabase URL or key not configured
    """
    def factory() -> UpsertDispatcher:
        cfg = app_settings or get_settings()
        client = create_supabase_client(cfg)
        return UpsertDispatcher(
            PerfumeService(client, table=cfg.perfumes_table),
            batch_size=batch_size or cfg.import_batch_size,
            record_delay_seconds=cfg.record_delay_seconds,
            default_currency=cfg.default_currency,
        )

    return factory
