"""HTTP client for the public Google Drive v3 REST API."""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING, Any
from urllib import request as urllib_request
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode

if TYPE_CHECKING:
    from drive_image_import.config import AppConfig

logger = logging.getLogger(__name__)

DRIVE_BASE_URL = "https://www.googleapis.com/drive/v3"

# Statuses worth another attempt when retries are enabled
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class DriveApiError(Exception):
    """Raised when the Drive API or download endpoint returns a non-2xx response."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Drive API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class DriveClient:
    """Unauthenticated client for publicly shared Drive content."""

    def __init__(
        self,
        base_url: str = DRIVE_BASE_URL,
        timeout: float = 30.0,
        max_retries: int = 0,
        retry_delay: float = 1.0,
    ) -> None:
        """Initialise the client.

        Args:
            base_url: Drive API base URL; relative paths are resolved against it.
            timeout: Socket timeout in seconds for every request.
            max_retries: Extra attempts for 429/5xx responses and connection errors.
            retry_delay: Base delay in seconds, doubled after each failed attempt.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_retries = max_retries
        self._retry_delay = retry_delay

    def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Perform a GET request to the Drive API and decode the JSON body.

        Args:
            path: URL path relative to the base URL (must start with '/').
            params: Optional query parameters, URL-encoded onto the path.

        Returns:
            Parsed JSON response body as a dict.

        Raises:
            DriveApiError: If the API returns a non-2xx status code.
        """
        url = f"{self._base_url}{path}"
        if params:
            url = f"{url}?{urlencode(params)}"
        body = self._send(url, accept="application/json")
        return json.loads(body)  # type: ignore[no-any-return]

    def get_content(self, url: str) -> bytes:
        """Download raw bytes from an absolute URL.

        Args:
            url: Fully qualified download URL.

        Returns:
            Response body bytes.

        Raises:
            DriveApiError: If the endpoint returns a non-2xx status code.
        """
        return self._send(url, accept="*/*")

    def _send(self, url: str, accept: str) -> bytes:
        attempt = 0
        while True:
            req = urllib_request.Request(url, headers={"Accept": accept}, method="GET")
            try:
                with urllib_request.urlopen(req, timeout=self._timeout) as resp:
                    return resp.read()  # type: ignore[no-any-return]
            except HTTPError as exc:
                error = _api_error(exc)
                if exc.code not in RETRYABLE_STATUS_CODES or attempt >= self._max_retries:
                    raise error from exc
                logger.warning(
                    "[_send] retrying after HTTP error; status:%d;attempt:%d", exc.code, attempt + 1
                )
            except URLError:
                if attempt >= self._max_retries:
                    raise
                logger.warning("[_send] retrying after connection error; attempt:%d", attempt + 1)
            time.sleep(self._retry_delay * (2**attempt))
            attempt += 1


def _api_error(exc: HTTPError) -> DriveApiError:
    """Build a DriveApiError from an HTTPError, preferring the JSON error message."""
    raw = exc.read()
    try:
        detail = json.loads(raw).get("error", {}).get("message", exc.reason)
    except Exception:
        detail = exc.reason
    return DriveApiError(exc.code, str(detail))


def drive_client_from_config(config: AppConfig) -> DriveClient:
    """Construct a DriveClient from application configuration.

    Args:
        config: Application configuration instance.

    Returns:
        Configured DriveClient instance.
    """
    return DriveClient(
        base_url=config.drive_api_base_url,
        timeout=config.request_timeout,
        max_retries=config.max_retries,
        retry_delay=config.retry_delay,
    )
