"""
Boat Price Sync: batch entry point.

Run by an external scheduler:
    python main.py listing            # weekly: refresh boats_list
    python main.py sync               # daily: availability/price sync
    python main.py sync --slug bali-41-avaler --end-year 2027
"""

import argparse
import logging
import sys
from datetime import date
from typing import Optional

import requests
import structlog
from pydantic import ValidationError as PydanticValidationError

from config import Settings, get_settings, get_supabase_client, check_connection
from config.database import DatabaseConnectionError
from integrations.http_client import ResilientHttpClient
from integrations.boataround import BoatAroundClient
from models.boat_listing import TrackedBoat
from services.storage_service import StorageService
from services.rate_limiter import FixedDelayRateLimiter
from services.history_merge_service import WeeklyHistoryMerger
from services.history_query_service import HistoryQueryService
from services.sync_service import SyncOrchestrator, utc_now
from services.listing_service import ListingService
from exceptions import AppError

logger = structlog.get_logger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure structured logging."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if settings.is_production
                else structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# ===================
# WIRING
# ===================

def build_boataround_client(settings: Settings) -> BoatAroundClient:
    http = ResilientHttpClient(
        base_url=settings.boataround_api_url,
        timeout=settings.http_timeout_seconds,
        max_retries=settings.http_max_retries,
        base_delay=settings.http_retry_base_delay_seconds,
    )
    return BoatAroundClient(
        http,
        price_path=settings.boataround_price_path,
        search_path=settings.boataround_search_path,
        availability_path=settings.boataround_availability_path,
    )


def build_storage(settings: Settings) -> StorageService:
    return StorageService(get_supabase_client(settings))


def build_sync_service(
    settings: Settings,
    storage: StorageService,
    boataround: BoatAroundClient
) -> SyncOrchestrator:
    return SyncOrchestrator(
        boataround=boataround,
        storage=storage,
        merger=WeeklyHistoryMerger(storage),
        rate_limiter=FixedDelayRateLimiter(settings.boat_request_delay_seconds),
        max_workers=settings.price_fetch_max_workers,
    )


def resolve_end_year(
    settings: Settings,
    override: Optional[int] = None,
    today: Optional[date] = None
) -> int:
    """
    CLI flag, then SYNC_END_YEAR, then next calendar year.

    "Next year" is taken from the UTC clock the sync run itself uses.
    """
    if override is not None:
        return override
    if settings.sync_end_year is not None:
        return settings.sync_end_year
    today = today or utc_now().date()
    return today.year + 1


# ===================
# COMMANDS
# ===================

def run_listing(settings: Settings, args: argparse.Namespace) -> int:
    storage = build_storage(settings)
    service = ListingService(build_boataround_client(settings), storage)
    summary = service.sync_boat_listing(
        args.country or settings.listing_country,
        args.category or settings.listing_category,
    )
    logger.info("listing_job_summary", upserted=summary.upserted, failed=summary.failed)
    return 0


def run_sync(settings: Settings, args: argparse.Namespace) -> int:
    storage = build_storage(settings)

    if args.slug:
        boats = [TrackedBoat(slug=slug) for slug in args.slug]
    else:
        boats = HistoryQueryService(storage).get_tracked_boats()

    orchestrator = build_sync_service(settings, storage, build_boataround_client(settings))
    orchestrator.run(boats, resolve_end_year(settings, args.end_year))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Boat availability and price sync")
    sub = parser.add_subparsers(dest="command", required=True)

    listing = sub.add_parser("listing", help="Refresh the boat catalog")
    listing.add_argument("--country", help="Override LISTING_COUNTRY")
    listing.add_argument("--category", help="Override LISTING_CATEGORY")
    listing.set_defaults(handler=run_listing)

    sync = sub.add_parser("sync", help="Sync availability and prices")
    sync.add_argument("--end-year", type=int, help="Last year to sync (inclusive)")
    sync.add_argument("--slug", action="append", help="Only sync this boat (repeatable)")
    sync.set_defaults(handler=run_sync)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
    except PydanticValidationError as e:
        logger.error("job_failed", command=args.command, error=str(e), error_type=type(e).__name__)
        return 1
    configure_logging(settings)

    logger.info("job_starting", command=args.command, environment=settings.environment)

    try:
        db_status = check_connection(get_supabase_client(settings))
        if db_status["status"] != "healthy":
            logger.error("database_connection_failed", error=db_status.get("error"))
            return 1
        return args.handler(settings, args)
    except (DatabaseConnectionError, AppError, requests.exceptions.RequestException) as e:
        logger.error("job_failed", command=args.command, error=str(e), error_type=type(e).__name__)
        return 1
    finally:
        logger.info("job_finished", command=args.command)


if __name__ == "__main__":
    sys.exit(main())
