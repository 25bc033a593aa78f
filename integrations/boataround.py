"""
BoatAround API integration.

Reads reservations, weekly price quotes and the paginated boat catalog.
A "no data" answer (non-Success status, empty payload, 4xx) is returned as
None; transient failures that survive the HTTP client's retries raise.
"""

from typing import Any, Optional

import requests
import structlog

from integrations.http_client import ResilientHttpClient
from models.availability import BoatAvailability, FreeSlot
from models.price_history import PriceQuote
from exceptions import UpstreamPayloadError

logger = structlog.get_logger(__name__)


RESPONSE_STATUS_SUCCESS = "Success"

DEFAULT_PRICE_PATH = "/v1/price"
DEFAULT_SEARCH_PATH = "/v1/search"
DEFAULT_AVAILABILITY_PATH = "/v1/availability"


def _first(items: Any) -> Optional[dict]:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return None


class BoatAroundClient:
    """
    BoatAround availability, price and search endpoints.

    Thread-safe as long as the underlying HTTP session is; the sync
    service calls get_price from a thread pool.
    """

    def __init__(
        self,
        http: ResilientHttpClient,
        price_path: str = DEFAULT_PRICE_PATH,
        search_path: str = DEFAULT_SEARCH_PATH,
        availability_path: str = DEFAULT_AVAILABILITY_PATH,
    ):
        self.http = http
        self.price_path = price_path
        self.search_path = search_path
        self.availability_path = availability_path

    def _get_or_miss(self, path: str, params: Optional[dict] = None) -> Optional[dict]:
        """GET a JSON object; 4xx responses become None."""
        try:
            body = self.http.get(path, params=params)
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            if status_code is not None and 400 <= status_code < 500:
                logger.warning("boataround_not_found", path=path, status_code=status_code)
                return None
            raise

        if not isinstance(body, dict):
            return None
        return body

    # ===================
    # AVAILABILITY
    # ===================

    def get_availability(self, slug: str) -> Optional[BoatAvailability]:
        """
        Get reserved intervals for one boat.

        Returns:
            BoatAvailability, or None if the API has nothing for this slug
        """
        path = f"{self.availability_path}/{slug}"
        body = self._get_or_miss(path)

        if body is None or body.get("status") != RESPONSE_STATUS_SUCCESS:
            logger.info(
                "availability_missing",
                slug=slug,
                status=body.get("status") if body else None
            )
            return None

        row = _first(body.get("data"))
        if row is None:
            logger.info("availability_empty", slug=slug)
            return None

        availability = BoatAvailability.from_api(row, slug=slug)
        logger.debug(
            "availability_fetched",
            slug=slug,
            reservations=len(availability.intervals)
        )
        return availability

    # ===================
    # PRICE
    # ===================

    def get_price(self, slug: str, slot: FreeSlot) -> Optional[PriceQuote]:
        """
        Get the price and discount for one free slot.

        Returns:
            PriceQuote, or None if the boat cannot be quoted for this slot

        Raises:
            UpstreamPayloadError: Success response without price fields
        """
        path = f"{self.price_path}/{slug}"
        params = {
            "slug": slug,
            "checkIn": slot.check_in_str,
            "checkOut": slot.check_out_str,
        }
        body = self._get_or_miss(path, params=params)

        if body is None or body.get("status") != RESPONSE_STATUS_SUCCESS:
            return None

        outer = _first(body.get("data"))
        offer = _first(outer.get("data")) if outer else None
        if offer is None:
            return None

        if offer.get("price") is None:
            raise UpstreamPayloadError(path, "price missing")

        return PriceQuote(
            price=offer["price"],
            discount=offer.get("discount") or 0
        )

    # ===================
    # SEARCH
    # ===================

    def get_boats(self, country: str, category: str) -> list[dict]:
        """
        Fetch the full catalog for a country/category.

        Walks pages from 1 until the accumulated rows reach totalBoats or a
        page comes back empty.
        """
        params: dict[str, Any] = {"country": country, "category": category}
        boats: list[dict] = []
        total: Optional[int] = None
        page = 1

        while total is None or len(boats) < total:
            body = self._get_or_miss(self.search_path, params={**params, "page": page})
            result = _first(body.get("data")) if body else None
            if result is None:
                logger.warning("boat_search_page_missing", page=page, fetched=len(boats))
                break

            if total is None:
                total = int(result.get("totalBoats") or 0)

            rows = result.get("data") or []
            if not rows:
                logger.info("boat_search_page_empty", page=page, fetched=len(boats), total=total)
                break

            boats.extend(rows)
            logger.debug("boat_search_page_fetched", page=page, rows=len(rows), fetched=len(boats), total=total)
            page += 1

        logger.info("boat_search_complete", country=country, category=category, fetched=len(boats), total=total)
        return boats
