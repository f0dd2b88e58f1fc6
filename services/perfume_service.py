"""
Perfume repository on top of the Supabase table API.

The client is passed in explicitly and lives for one import run.
All Supabase failures are logged and re-raised as DatabaseError.
"""

from datetime import datetime
from typing import Optional
import structlog

from supabase import Client

from models.perfume import (
    PerfumeCandidate,
    PerfumeCreate,
    PerfumeScrapeUpdate,
    PerfumeResponse,
)
from exceptions import PerfumeNotFoundError, DatabaseError

logger = structlog.get_logger(__name__)

# PostgREST refuses unfiltered deletes; no row has this id
_NIL_UUID = "00000000-0000-0000-0000-000000000000"


class PerfumeService:
    """
    Perfume persistence.

    Lookups by natural key (ASIN, brand + name), inserts, and the
    mutable-field updates used by the upsert dispatcher.
    """

    def __init__(self, client: Client, table: str = "perfumes"):
        self.db = client
        self.table = table

    # ===================
    # READ OPERATIONS
    # ===================

    def get_by_asin(self, asin: str) -> Optional[PerfumeResponse]:
        """
        Get a perfume by marketplace ASIN.

        Returns:
            PerfumeResponse or None if not found
        """
        logger.debug("getting_perfume_by_asin", asin=asin)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("amazon_asin", asin)
                .limit(1)
                .execute()
            )

            if not result.data:
                return None
            return PerfumeResponse(**result.data[0])

        except Exception as e:
            logger.error("get_perfume_by_asin_failed", asin=asin, error=str(e))
            raise DatabaseError("select", str(e))

    def get_by_brand_and_name(self, brand: str, name: str) -> Optional[PerfumeResponse]:
        """
        Get a perfume by its brand + name business key.

        Returns:
            PerfumeResponse or None if not found
        """
        logger.debug("getting_perfume_by_brand_name", brand=brand, name=name)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("brand", brand)
                .eq("name", name)
                .limit(1)
                .execute()
            )

            if not result.data:
                return None
            return PerfumeResponse(**result.data[0])

        except Exception as e:
            logger.error(
                "get_perfume_by_brand_name_failed",
                brand=brand,
                name=name,
                error=str(e)
            )
            raise DatabaseError("select", str(e))

    def find_existing(self, candidate: PerfumeCandidate) -> Optional[PerfumeResponse]:
        """
        Look up a candidate by natural key.

        ASIN first; brand + name when there is no ASIN match.
        """
        key = candidate.natural_key()
        if key is None:
            return None

        if key[0] == "amazon_asin":
            existing = self.get_by_asin(key[1])
            if existing or not (candidate.brand and candidate.name):
                return existing
            return self.get_by_brand_and_name(candidate.brand, candidate.name)

        _, brand, name = key
        return self.get_by_brand_and_name(brand, name)

    def find_by_asin_or_url(self, asin: str) -> Optional[PerfumeResponse]:
        """Match on the ASIN column or an /dp/<ASIN> marketplace URL."""
        logger.debug("getting_perfume_by_asin_or_url", asin=asin)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .or_(f"amazon_asin.eq.{asin},amazon_url.ilike.*/dp/{asin}*")
                .limit(1)
                .execute()
            )

            if not result.data:
                return None
            return PerfumeResponse(**result.data[0])

        except Exception as e:
            logger.error("get_perfume_by_asin_or_url_failed", asin=asin, error=str(e))
            raise DatabaseError("select", str(e))

    def list_missing_images(self, limit: int = 2000) -> list[PerfumeResponse]:
        """Perfumes with no image URL yet."""
        logger.info("listing_perfumes_missing_images", limit=limit)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .is_("image_url", "null")
                .limit(limit)
                .execute()
            )
            return [PerfumeResponse(**row) for row in result.data]

        except Exception as e:
            logger.error("list_missing_images_failed", error=str(e))
            raise DatabaseError("select", str(e))

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create(self, data: PerfumeCreate) -> PerfumeResponse:
        """
        Insert a new perfume.

        Returns:
            Created PerfumeResponse (with server-generated id)
        """
        logger.debug("creating_perfume", brand=data.brand, name=data.name)

        try:
            result = (
                self.db.table(self.table)
                .insert(data.to_row())
                .execute()
            )

            perfume = PerfumeResponse(**result.data[0])

            logger.info(
                "perfume_created",
                perfume_id=perfume.id,
                brand=perfume.brand,
                asin=perfume.amazon_asin
            )
            return perfume

        except Exception as e:
            logger.error(
                "create_perfume_failed",
                brand=data.brand,
                name=data.name,
                error=str(e)
            )
            raise DatabaseError("insert", str(e))

    def update_scraped_fields(
        self,
        perfume_id: str,
        data: PerfumeScrapeUpdate
    ) -> PerfumeResponse:
        """
        Refresh price, availability, image and last-scraped timestamp.

        The identifier and descriptive fields are left unchanged.
        """
        update_data = data.to_row()
        logger.debug("updating_perfume", perfume_id=perfume_id, fields=list(update_data.keys()))

        try:
            result = (
                self.db.table(self.table)
                .update(update_data)
                .eq("id", perfume_id)
                .execute()
            )
        except Exception as e:
            logger.error("update_perfume_failed", perfume_id=perfume_id, error=str(e))
            raise DatabaseError("update", str(e))

        if not result.data:
            raise PerfumeNotFoundError(perfume_id)

        logger.info(
            "perfume_updated",
            perfume_id=perfume_id,
            fields=list(update_data.keys())
        )
        return PerfumeResponse(**result.data[0])

    def update_image(
        self,
        perfume_id: str,
        image_url: str,
        scraped_at: datetime
    ) -> None:
        """Set a perfume's image URL."""
        try:
            self.db.table(self.table).update({
                "image_url": image_url,
                "last_scraped_at": scraped_at.isoformat()
            }).eq("id", perfume_id).execute()

            logger.info("perfume_image_updated", perfume_id=perfume_id)

        except Exception as e:
            logger.error("update_image_failed", perfume_id=perfume_id, error=str(e))
            raise DatabaseError("update", str(e))

    def delete_all(self) -> None:
        """Remove every perfume (spreadsheet import with --clear)."""
        logger.warning("deleting_all_perfumes", table=self.table)

        try:
            self.db.table(self.table).delete().neq("id", _NIL_UUID).execute()
        except Exception as e:
            logger.error("delete_perfumes_failed", error=str(e))
            raise DatabaseError("delete", str(e))
