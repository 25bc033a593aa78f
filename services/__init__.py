"""
Business logic services.

Each service handles one step of the sync pipeline.
"""

from services.storage_service import StorageService, StorageResult
from services.rate_limiter import RateLimiter, FixedDelayRateLimiter
from services.free_week_service import compute_free_weeks, is_attributed_to_year
from services.history_merge_service import WeeklyHistoryMerger
from services.history_query_service import HistoryQueryService
from services.sync_service import SyncOrchestrator, SyncSummary
from services.listing_service import ListingService

__all__ = [
    "StorageService",
    "StorageResult",
    "RateLimiter",
    "FixedDelayRateLimiter",
    "compute_free_weeks",
    "is_attributed_to_year",
    "WeeklyHistoryMerger",
    "HistoryQueryService",
    "SyncOrchestrator",
    "SyncSummary",
    "ListingService",
]
