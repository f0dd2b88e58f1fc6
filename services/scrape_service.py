"""
Marketplace catalog scrape pipeline.

For each search query and result page: fetch → parse result tiles →
import pipeline (extract, infer brand, validate, upsert). A page that
cannot be fetched or parsed is logged and counted; the run continues
with the next page.
"""

from typing import Optional
import structlog

from exceptions import PageFetchError, PageParseError
from integrations.page_fetcher import PageFetcher
from models.ingest import ImportSummary
from parsers.amazon_parser import build_search_url, parse_search_results
from parsers.brand_inference import brand_hint_from_query
from services.import_service import CatalogImportService

logger = structlog.get_logger(__name__)

# Browser fetcher waits for this before reading the DOM
SEARCH_RESULTS_SELECTOR = "div.s-main-slot"


class CatalogScrapeService:
    """
    Scrape search result pages into the perfume catalog.

    Usage:
        with get_page_fetcher("http") as fetcher:
            service = CatalogScrapeService(fetcher, import_service, base_url)
            summary = service.scrape(["Dior perfume"], pages=2, dry_run=True)
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        import_service: CatalogImportService,
        base_url: str
    ):
        self.fetcher = fetcher
        self.import_service = import_service
        self.base_url = base_url.rstrip("/")

    def scrape_page(
        self,
        query: str,
        page: int,
        dry_run: bool = False,
        brand_hint: Optional[str] = None
    ) -> Optional[ImportSummary]:
        """
        Scrape one result page.

        Returns:
            ImportSummary for the page, or None when the page failed
        """
        url = build_search_url(self.base_url, query, page)

        try:
            html = self.fetcher.fetch(url, wait_for=SEARCH_RESULTS_SELECTOR)
            rows = parse_search_results(html, self.base_url)
        except (PageFetchError, PageParseError) as e:
            logger.warning(
                "page_skipped",
                query=query,
                page=page,
                url=url,
                error=e.message,
                error_code=e.code
            )
            return None

        logger.info("page_parsed", query=query, page=page, items=len(rows))

        return self.import_service.import_rows(
            rows,
            source=f"{query} (page {page})",
            dry_run=dry_run,
            brand_hint=brand_hint,
        )

    def scrape(
        self,
        queries: list[str],
        pages: int = 1,
        dry_run: bool = False
    ) -> ImportSummary:
        """
        Scrape every query for the given number of pages.

        Args:
            queries: Search terms ("Dior perfume" also gives the brand hint "Dior")
            pages: Result pages per query
            dry_run: Parse and map only; no persistence calls

        Returns:
            Run total across all queries and pages
        """
        total = ImportSummary(source=", ".join(queries), dry_run=dry_run)

        for query in queries:
            brand_hint = brand_hint_from_query(query)
            logger.info("scraping_query", query=query, pages=pages, brand_hint=brand_hint)

            for page in range(1, pages + 1):
                page_summary = self.scrape_page(query, page, dry_run, brand_hint)

                if page_summary is None:
                    total.pages_failed += 1
                    continue

                total.add(page_summary)

                if page_summary.found == 0:
                    logger.info("query_exhausted", query=query, page=page)
                    break

        logger.info(
            "scrape_completed",
            queries=len(queries),
            found=total.found,
            mapped=total.mapped,
            inserted=total.inserted,
            updated=total.updated,
            skipped=total.skipped,
            pages_failed=total.pages_failed,
            dry_run=dry_run
        )
        return total
