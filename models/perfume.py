"""
Perfume schemas for validation and serialization.

PerfumeCandidate is the loose shape produced by the field extractor.
PerfumeCreate / PerfumeScrapeUpdate are the payloads written to Supabase.
"""

from pydantic import Field, field_validator
from typing import Optional, Union
from datetime import datetime

from models.base import BaseSchema, TimestampMixin

# Shared bounds (validation_service reports against the same limits)
RATING_MIN = 1
RATING_MAX = 5
PRICE_MAX = 100000

NaturalKey = Union[tuple[str, str], tuple[str, str, str]]


class PerfumeCandidate(BaseSchema):
    """
    Normalized, not-yet-validated projection of a raw import row.

    Only fields the extractor could map are set; range checks are left
    to validation_service so violations can be reported per field.
    """

    name: Optional[str] = None
    brand: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    amazon_url: Optional[str] = None
    amazon_asin: Optional[str] = None
    image_url: Optional[str] = None
    fragrantica_url: Optional[str] = None
    is_available: Optional[bool] = None
    longevity: Optional[int] = None
    sillage: Optional[int] = None
    projection: Optional[int] = None
    category: Optional[str] = None
    notes: Optional[list[str]] = None
    season: Optional[list[str]] = None
    occasion: Optional[list[str]] = None

    def natural_key(self) -> Optional[NaturalKey]:
        """
        Business key used to detect an existing record.

        Returns:
            ("amazon_asin", asin) when an ASIN is known,
            ("brand_name", brand, name) otherwise, or None if neither.
        """
        if self.amazon_asin:
            return ("amazon_asin", self.amazon_asin)
        if self.brand and self.name:
            return ("brand_name", self.brand, self.name)
        return None


class PerfumeCreate(BaseSchema):
    """
    Insert payload for a new perfume.

    Required: name, brand
    Defaults: currency (regional code), is_available=True
    """

    name: str = Field(..., min_length=1, description="Perfume name")
    brand: str = Field(..., min_length=1, description="Brand name")
    description: Optional[str] = None
    price: Optional[float] = Field(None, gt=0, le=PRICE_MAX)
    currency: str = Field(default="ZAR", pattern="^[A-Z]{3}$")
    amazon_url: Optional[str] = None
    amazon_asin: Optional[str] = None
    image_url: Optional[str] = None
    fragrantica_url: Optional[str] = None
    is_available: bool = True
    longevity: Optional[int] = Field(None, ge=RATING_MIN, le=RATING_MAX)
    sillage: Optional[int] = Field(None, ge=RATING_MIN, le=RATING_MAX)
    projection: Optional[int] = Field(None, ge=RATING_MIN, le=RATING_MAX)
    category: Optional[str] = None
    notes: Optional[list[str]] = None
    season: Optional[list[str]] = None
    occasion: Optional[list[str]] = None
    last_scraped_at: Optional[datetime] = None

    @field_validator("currency", mode="before")
    @classmethod
    def currency_uppercase(cls, v):
        """Currency codes are stored upper-case."""
        return v.strip().upper() if isinstance(v, str) else v

    @classmethod
    def from_candidate(
        cls,
        candidate: PerfumeCandidate,
        default_currency: str,
        scraped_at: datetime
    ) -> "PerfumeCreate":
        """Fill defaults for fields the candidate omitted."""
        data = candidate.model_dump(exclude_none=True)
        data.setdefault("currency", default_currency)
        data.setdefault("is_available", True)
        return cls(**data, last_scraped_at=scraped_at)

    def to_row(self) -> dict:
        """Serialize for Supabase insert (JSON-safe, no None values)."""
        return self.model_dump(mode="json", exclude_none=True)


class PerfumeScrapeUpdate(BaseSchema):
    """
    Fields refreshed when an existing perfume is seen again.

    Identifier, name and brand are never touched.
    """

    price: Optional[float] = Field(None, gt=0, le=PRICE_MAX)
    is_available: Optional[bool] = None
    image_url: Optional[str] = None
    last_scraped_at: datetime

    @classmethod
    def from_candidate(
        cls,
        candidate: PerfumeCandidate,
        scraped_at: datetime
    ) -> "PerfumeScrapeUpdate":
        return cls(
            price=candidate.price,
            is_available=True if candidate.is_available is None else candidate.is_available,
            image_url=candidate.image_url,
            last_scraped_at=scraped_at,
        )

    def to_row(self) -> dict:
        """Serialize for Supabase update; unset values are left alone."""
        return self.model_dump(mode="json", exclude_none=True)


class PerfumeResponse(BaseSchema, TimestampMixin):
    """
    Persisted perfume row.

    Used for lookups during upsert and image refresh.
    """

    id: str = Field(..., description="Perfume UUID")
    name: str
    brand: str
    description: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    amazon_url: Optional[str] = None
    amazon_asin: Optional[str] = None
    image_url: Optional[str] = None
    fragrantica_url: Optional[str] = None
    is_available: Optional[bool] = None
    longevity: Optional[int] = None
    sillage: Optional[int] = None
    projection: Optional[int] = None
    category: Optional[str] = None
    notes: Optional[list[str]] = None
    season: Optional[list[str]] = None
    occasion: Optional[list[str]] = None
    last_scraped_at: Optional[datetime] = None
