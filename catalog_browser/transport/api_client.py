# catalog_browser/transport/api_client.py

"""HTTP client for the catalog API with a single transient retry."""

import logging
from dataclasses import dataclass
from typing import Any

from curl_cffi import requests as curl_requests

from catalog_browser.config.settings import Settings
from catalog_browser.errors import (
    ClientError,
    TransientNetworkError,
    TransportError,
)

logger = logging.getLogger("catalog_browser.transport")


@dataclass
class TransportResult:
    """Uniform outcome of an API call, successful or not."""

    data: Any = None
    status: int = 200
    error: TransportError | None = None

    @property
    def ok(self) -> bool:
        """True when the call produced a usable JSON body."""
        return self.error is None

    @classmethod
    def failure(cls, error: TransportError) -> "TransportResult":
        """Wrap a transport error into a failed result."""
        return cls(data=None, status=error.status, error=error)


def _error_message(
    resp: curl_requests.Response, fallback: str,
) -> str:
    """Prefer the API's own ``message`` field over a generic description."""
    try:
        body = resp.json()
    except Exception:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback


class ApiClient:
    """Issues JSON requests against ``Settings.API_BASE_URL``.

    Transient failures (request exceptions, timeouts, HTTP 5xx) are
    retried ``Settings.MAX_RETRIES`` times; everything else is
    surfaced immediately.  Callers never see an exception, only a
    :class:`TransportResult`.
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: curl_requests.Session | None = None,
    ) -> None:
        self.settings = Settings()
        self.base_url = (base_url or self.settings.API_BASE_URL).rstrip("/")
        self.session = session or curl_requests.Session(
            headers=self.settings.DEFAULT_HEADERS,
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    # ── Core call ────────────────────────────────────────

    def call(
        self,
        endpoint: str,
        method: str = "GET",
        body: dict[str, Any] | None = None,
    ) -> TransportResult:
        """Issue a request and normalise the outcome."""
        attempts = 1 + self.settings.MAX_RETRIES
        for attempt in range(attempts):
            try:
                data, status = self._send(endpoint, method, body)
            except TransientNetworkError as exc:
                if attempt + 1 < attempts:
                    logger.warning(
                        "Transient failure on %s %s (attempt %d): %s, retrying",
                        method,
                        endpoint,
                        attempt + 1,
                        exc.message,
                    )
                    continue
                logger.error(
                    "API call to %s failed: %r", endpoint, exc,
                )
                return TransportResult.failure(exc)
            except ClientError as exc:
                logger.error(
                    "API call to %s failed: %r", endpoint, exc,
                )
                return TransportResult.failure(exc)
            return TransportResult(data=data, status=status)

        # Unreachable: the loop always returns on its last attempt
        return TransportResult.failure(
            TransportError("Unknown error occurred")
        )

    def _send(
        self,
        endpoint: str,
        method: str,
        body: dict[str, Any] | None,
    ) -> tuple[Any, int]:
        """Perform one attempt, raising a classified TransportError."""
        url = f"{self.base_url}{endpoint}"
        try:
            resp = self.session.request(
                method,
                url,
                json=body,
                timeout=self._request_timeout,
            )
        except Exception as exc:
            raise TransientNetworkError(
                str(exc) or type(exc).__name__
            ) from exc

        status = resp.status_code
        if status >= 500:
            raise TransientNetworkError(
                _error_message(resp, f"HTTP {status} from {endpoint}"),
                status=status,
            )
        if status != 200:
            raise ClientError(
                _error_message(resp, f"HTTP {status} from {endpoint}"),
                status=status,
            )
        try:
            return resp.json(), status
        except ValueError as exc:
            raise ClientError(
                f"Malformed JSON body from {endpoint}: {exc}",
                status=status,
            ) from exc

    # ── Endpoints ────────────────────────────────────────

    def get_all_categories(self) -> TransportResult:
        """``GET /api/categories`` → ``{"categories": [...]}``."""
        return self.call("/api/categories")

    def get_all_products(self) -> TransportResult:
        """``GET /api/products`` → ``{"products": [...]}``."""
        return self.call("/api/products")

    def get_product_by_id(self, product_id: str) -> TransportResult:
        """``GET /api/products/{id}`` → a single product."""
        return self.call(f"/api/products/{product_id}")
