"""
Perfume image maintenance.

Refreshes image URLs from marketplace product pages and applies
hand-curated overrides (JSON list of {brand, name, image_url}).
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional, Union
import structlog

from exceptions import (
    AppError,
    SourceFileNotFoundError,
    ValidationError,
)
from integrations.page_fetcher import PageFetcher
from models.ingest import ImageRefreshSummary
from models.perfume import PerfumeResponse
from parsers.amazon_parser import (
    build_product_url,
    extract_asin_from_url,
    parse_product_image,
)
from services.perfume_service import PerfumeService

logger = structlog.get_logger(__name__)


def load_image_overrides(path: Union[str, Path]) -> list[dict[str, Any]]:
    """
    Read an overrides file.

    Raises:
        SourceFileNotFoundError: File does not exist
        ValidationError: Not a JSON list of objects
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SourceFileNotFoundError(str(file_path))

    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(
            message="Overrides file is not valid JSON",
            code="INVALID_OVERRIDES_FILE",
            details={"path": str(file_path), "original_error": str(e)}
        )

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValidationError(
            message="Overrides file must contain a list of objects",
            code="INVALID_OVERRIDES_FILE",
            details={"path": str(file_path)}
        )
    return data


class ImageRefreshService:
    """
    Update perfume image URLs.

    Usage:
        service = ImageRefreshService(PerfumeService(client), fetcher, base_url)
        summary = service.refresh_missing_images(limit=100)
    """

    def __init__(
        self,
        perfume_service: PerfumeService,
        fetcher: Optional[PageFetcher] = None,
        base_url: str = "https://www.amazon.co.za",
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)
    ):
        self.perfume_service = perfume_service
        self.fetcher = fetcher
        self.base_url = base_url.rstrip("/")
        self._clock = clock

    # ===================
    # PRODUCT PAGE REFRESH
    # ===================

    def _refresh_one(self, perfume: PerfumeResponse, summary: ImageRefreshSummary) -> None:
        asin = perfume.amazon_asin or extract_asin_from_url(perfume.amazon_url)
        if not asin:
            summary.skipped += 1
            logger.info("image_refresh_skipped", perfume_id=perfume.id, reason="no asin resolved")
            return

        try:
            html = self.fetcher.fetch(build_product_url(self.base_url, asin))
            image_url = parse_product_image(html)
            if not image_url:
                summary.not_found += 1
                logger.info("image_not_found", perfume_id=perfume.id, asin=asin)
                return

            self.perfume_service.update_image(perfume.id, image_url, self._clock())
            summary.updated += 1
            logger.info("image_refreshed", perfume_id=perfume.id, asin=asin, image_url=image_url)

        except AppError as e:
            summary.failed += 1
            logger.error(
                "image_refresh_failed",
                perfume_id=perfume.id,
                asin=asin,
                error=e.message,
                error_code=e.code
            )

    def refresh_missing_images(self, limit: int = 2000) -> ImageRefreshSummary:
        """
        Fetch images for every perfume that has none.

        Per-record failures are logged and counted; the run continues.
        """
        perfumes = self.perfume_service.list_missing_images(limit=limit)
        summary = ImageRefreshSummary(total=len(perfumes))

        for perfume in perfumes:
            self._refresh_one(perfume, summary)

        logger.info(
            "image_refresh_completed",
            total=summary.total,
            updated=summary.updated,
            skipped=summary.skipped,
            not_found=summary.not_found,
            failed=summary.failed
        )
        return summary

    def refresh_asin(self, asin: str) -> ImageRefreshSummary:
        """Refresh the image of the perfume with this ASIN (column or /dp/ URL)."""
        summary = ImageRefreshSummary(total=1)
        perfume = self.perfume_service.find_by_asin_or_url(asin)

        if perfume is None:
            summary.not_found += 1
            logger.warning("perfume_not_found_for_asin", asin=asin)
            return summary

        self._refresh_one(perfume, summary)
        return summary

    # ===================
    # OVERRIDES
    # ===================

    def apply_overrides(self, overrides: list[dict[str, Any]]) -> ImageRefreshSummary:
        """
        Set image URLs matched by brand + name.

        Entries missing brand, name or image_url are skipped.
        """
        summary = ImageRefreshSummary(total=len(overrides))

        for entry in overrides:
            brand = (entry.get("brand") or "").strip()
            name = (entry.get("name") or "").strip()
            image_url = (entry.get("image_url") or "").strip()

            if not (brand and name and image_url):
                summary.skipped += 1
                logger.warning("override_incomplete", entry=entry)
                continue

            try:
                perfume = self.perfume_service.get_by_brand_and_name(brand, name)
                if perfume is None:
                    summary.not_found += 1
                    logger.info("override_no_match", brand=brand, name=name)
                    continue

                self.perfume_service.update_image(perfume.id, image_url, self._clock())
                summary.updated += 1

            except AppError as e:
                summary.failed += 1
                logger.error("override_failed", brand=brand, name=name, error=e.message)

        logger.info(
            "overrides_applied",
            total=summary.total,
            updated=summary.updated,
            not_found=summary.not_found,
            failed=summary.failed
        )
        return summary
