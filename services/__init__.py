"""
Business logic services.

Each service handles one stage of the ingestion pipeline.
"""

from services.validation_service import validate_candidate, partition_candidates
from services.perfume_service import PerfumeService
from services.upsert_service import UpsertDispatcher
from services.import_service import CatalogImportService, build_dispatcher_factory
from services.scrape_service import CatalogScrapeService
from services.image_service import ImageRefreshService, load_image_overrides

__all__ = [
    "validate_candidate",
    "partition_candidates",
    "PerfumeService",
    "UpsertDispatcher",
    "CatalogImportService",
    "build_dispatcher_factory",
    "CatalogScrapeService",
    "ImageRefreshService",
    "load_image_overrides",
]
