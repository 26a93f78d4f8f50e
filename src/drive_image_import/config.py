"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass

DEFAULT_DRIVE_API_BASE_URL = "https://www.googleapis.com/drive/v3"
DEFAULT_DOWNLOAD_URL_TEMPLATE = "https://drive.google.com/uc?export=download&id={file_id}"
DEFAULT_MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class AppConfig:
    """Centralized application configuration.

    Only public folders are in scope, so every field has a default and no
    credentials are carried. Values are passed explicitly into the clients
    built by the ``*_from_config`` factories.
    """

    drive_api_base_url: str = DEFAULT_DRIVE_API_BASE_URL
    download_url_template: str = DEFAULT_DOWNLOAD_URL_TEMPLATE
    page_size: int = 100
    max_pages: int = 50
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES
    max_images: int = 50
    request_timeout: float = 30.0

    # No automatic retry unless explicitly configured
    max_retries: int = 0
    retry_delay: float = 1.0


def load_config() -> AppConfig:
    """Construct an AppConfig from environment variables.

    Optional environment variables (with defaults):
        DII_DRIVE_API_BASE_URL: Base URL of the Drive v3 REST API.
        DII_DOWNLOAD_URL_TEMPLATE: Download URL template with a ``{file_id}`` placeholder.
        DII_PAGE_SIZE: Listing page size (default: 100).
        DII_MAX_PAGES: Maximum listing pages fetched per scan (default: 50).
        DII_MAX_FILE_SIZE_BYTES: Largest file accepted for import (default: 10 MiB).
        DII_MAX_IMAGES: Scan result cap when the request omits one (default: 50).
        DII_REQUEST_TIMEOUT: HTTP timeout in seconds (default: 30).
        DII_MAX_RETRIES: Retries for rate-limited or 5xx responses (default: 0).
        DII_RETRY_DELAY: Base delay in seconds between retries (default: 1.0).

    Returns:
        Configured AppConfig instance.
    """
    return AppConfig(
        drive_api_base_url=os.environ.get("DII_DRIVE_API_BASE_URL", DEFAULT_DRIVE_API_BASE_URL),
        download_url_template=os.environ.get(
            "DII_DOWNLOAD_URL_TEMPLATE", DEFAULT_DOWNLOAD_URL_TEMPLATE
        ),
        page_size=int(os.environ.get("DII_PAGE_SIZE", "100")),
        max_pages=int(os.environ.get("DII_MAX_PAGES", "50")),
        max_file_size_bytes=int(
            os.environ.get("DII_MAX_FILE_SIZE_BYTES", str(DEFAULT_MAX_FILE_SIZE_BYTES))
        ),
        max_images=int(os.environ.get("DII_MAX_IMAGES", "50")),
        request_timeout=float(os.environ.get("DII_REQUEST_TIMEOUT", "30")),
        max_retries=int(os.environ.get("DII_MAX_RETRIES", "0")),
        retry_delay=float(os.environ.get("DII_RETRY_DELAY", "1.0")),
    )
