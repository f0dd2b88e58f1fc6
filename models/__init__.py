"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    TimestampMixin,
)
from models.perfume import (
    PerfumeCandidate,
    PerfumeCreate,
    PerfumeScrapeUpdate,
    PerfumeResponse,
    RATING_MIN,
    RATING_MAX,
    PRICE_MAX,
)
from models.ingest import (
    Violation,
    RejectedRecord,
    UpsertAction,
    UpsertOutcome,
    BatchReport,
    DispatchResult,
    ImportSummary,
    ImageRefreshSummary,
)

__all__ = [
    # Base
    "BaseSchema",
    "TimestampMixin",

    # Perfume
    "PerfumeCandidate",
    "PerfumeCreate",
    "PerfumeScrapeUpdate",
    "PerfumeResponse",
    "RATING_MIN",
    "RATING_MAX",
    "PRICE_MAX",

    # Ingest
    "Violation",
    "RejectedRecord",
    "UpsertAction",
    "UpsertOutcome",
    "BatchReport",
    "DispatchResult",
    "ImportSummary",
    "ImageRefreshSummary",
]
