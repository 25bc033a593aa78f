"""
Boat catalog refresh.

Re-fetches the full search results for a country/category and upserts each
boat into boats_list. Individual boats that fail are logged and skipped.
"""

import structlog
from pydantic import ValidationError as PydanticValidationError

from integrations.boataround import BoatAroundClient
from models.boat_listing import (
    BOATS_LIST_TABLE,
    FOREIGN_KEY_VIOLATION,
    BoatListing,
    ListingSyncSummary,
)
from services.storage_service import StorageService

logger = structlog.get_logger(__name__)


class ListingService:
    """Keeps boats_list in step with the upstream catalog."""

    def __init__(self, boataround: BoatAroundClient, storage: StorageService):
        self.boataround = boataround
        self.storage = storage

    def sync_boat_listing(self, country: str, category: str) -> ListingSyncSummary:
        """
        Fetch every boat for a country/category and upsert it.

        Args:
            country: Search country (e.g. "croatia")
            category: Boat category (e.g. "catamaran")

        Returns:
            ListingSyncSummary with per-boat counts
        """
        logger.info("listing_sync_started", country=country, category=category)

        boats = self.boataround.get_boats(country, category)
        summary = ListingSyncSummary(fetched=len(boats))

        for raw in boats:
            try:
                listing = BoatListing.model_validate(raw)
            except PydanticValidationError:
                summary.skipped += 1
                logger.warning("listing_skipped_invalid", boat=str(raw)[:200])
                continue

            result = self.storage.upsert_data(BOATS_LIST_TABLE, listing.to_db(), on_conflict="slug")

            if result.ok:
                summary.upserted += 1
            elif result.error_code == FOREIGN_KEY_VIOLATION:
                summary.skipped += 1
                summary.skipped_slugs.append(listing.slug)
                logger.warning("listing_skipped_deleted_boat", slug=listing.slug)
            else:
                summary.failed += 1
                logger.error("listing_upsert_failed", slug=listing.slug, error=result.error)

        logger.info(
            "listing_sync_complete",
            country=country,
            category=category,
            fetched=summary.fetched,
            upserted=summary.upserted,
            skipped=summary.skipped,
            failed=summary.failed
        )
        return summary
