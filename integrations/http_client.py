"""
HTTP client with timeout, retry and exponential backoff.

Retries connection failures (aborted, reset, DNS, refused), timeouts and
5xx responses. Everything else, including 4xx responses and the last
failure once retries are exhausted, is re-raised unchanged so callers can
tell a miss from an outage.
"""

import time
from typing import Any, Callable, Optional

import requests
import structlog

logger = structlog.get_logger(__name__)


# Defaults
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY_SECONDS = 1.0

RETRYABLE_EXCEPTIONS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
)


def is_retryable_status(status_code: int) -> bool:
    return status_code >= 500


class ResilientHttpClient:
    """
    Thin wrapper over requests.Session adding timeout and retries.

    Usage:
        client = ResilientHttpClient("https://api.boataround.com")
        body = client.get("/v1/availability/bali-41-avaler")
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = DEFAULT_BASE_DELAY_SECONDS,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.session = session or requests.Session()
        self._sleep = sleep

    def backoff_delay(self, attempt: int) -> float:
        """Delay before retry number `attempt` (0-based)."""
        return self.base_delay * (2 ** attempt)

    def get(self, path: str, params: Optional[dict] = None, **kwargs) -> Any:
        return self.request("GET", self.base_url + path, params=params, **kwargs)

    def request(self, method: str, url: str, params: Optional[dict] = None, **kwargs) -> Any:
        """
        Send a request, retrying transient failures.

        Args:
            method: HTTP method
            url: Absolute URL
            params: Query string parameters

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            requests.HTTPError: 4xx response, or 5xx after the last retry
            requests.ConnectionError / requests.Timeout: after the last retry
        """
        attempt = 0
        while True:
            logger.debug(
                "http_request_attempt",
                method=method,
                url=url,
                params=params,
                attempt=attempt + 1
            )

            try:
                response = self.session.request(
                    method,
                    url,
                    params=params,
                    timeout=self.timeout,
                    **kwargs
                )
                response.raise_for_status()

            except requests.exceptions.HTTPError as e:
                status_code = e.response.status_code if e.response is not None else 0
                if not is_retryable_status(status_code) or attempt >= self.max_retries:
                    logger.warning(
                        "http_request_failed",
                        method=method,
                        url=url,
                        status_code=status_code,
                        attempts=attempt + 1
                    )
                    raise
                error = f"HTTP {status_code}"

            except RETRYABLE_EXCEPTIONS as e:
                if attempt >= self.max_retries:
                    logger.error(
                        "http_request_failed",
                        method=method,
                        url=url,
                        error=str(e),
                        error_type=type(e).__name__,
                        attempts=attempt + 1
                    )
                    raise
                error = type(e).__name__

            else:
                logger.debug(
                    "http_request_succeeded",
                    method=method,
                    url=url,
                    status_code=response.status_code,
                    attempts=attempt + 1
                )
                if not response.content:
                    return None
                return response.json()

            delay = self.backoff_delay(attempt)
            logger.warning(
                "http_request_retrying",
                method=method,
                url=url,
                error=error,
                attempt=attempt + 1,
                delay_seconds=delay
            )
            self._sleep(delay)
            attempt += 1
