"""Folder scanner — orchestrates URL parsing, listing and image filtering."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from drive_image_import.drive.client import drive_client_from_config
from drive_image_import.drive.filters import filter_images
from drive_image_import.drive.listing import (
    FolderListingClient,
    folder_listing_client_from_config,
)
from drive_image_import.drive.references import extract_folder_id
from drive_image_import.orchestration.models import ProgressCallback, ScanOutcome

if TYPE_CHECKING:
    from drive_image_import.config import AppConfig

logger = logging.getLogger(__name__)

INVALID_URL_MESSAGE = "Invalid Google Drive folder URL. Please check the URL and try again."
FOLDER_NOT_FOUND_MESSAGE = (
    "Folder not found or not accessible. Make sure the folder is publicly shared."
)
UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


class FolderScanner:
    """Scans one public folder for image files."""

    def __init__(self, listing_client: FolderListingClient, default_max_images: int = 50) -> None:
        """Initialise the scanner.

        Args:
            listing_client: Client used to list the folder and fetch its metadata.
            default_max_images: Result cap applied when ``scan`` is given none.
        """
        self._listing = listing_client
        self._default_max_images = default_max_images

    def scan(
        self,
        url: str,
        allowed_types: Sequence[str],
        max_images: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ScanOutcome:
        """Scan the folder behind ``url`` for images.

        Steps, each reported through ``on_progress`` before it runs:
            1. Extract the folder id; an unparseable URL fails immediately.
            2. Fetch the folder name (best-effort).
            3. List the folder's children across all pages.
            4. Filter the children to the allowed image types.
            5. Truncate to ``max_images``, keeping API order.

        Any unexpected exception after step 1 is converted into a failed
        outcome carrying the exception message; nothing is raised to the caller.

        Args:
            url: Shared-folder URL.
            allowed_types: Type tags such as ``"png"`` or ``"jpg"``.
            max_images: Maximum number of records to return.
            on_progress: Optional ``(percent, label)`` callback.

        Returns:
            ScanOutcome describing the matches or the failure.
        """
        limit = self._default_max_images if max_images is None else max(0, max_images)

        def report(percent: float, label: str) -> None:
            if on_progress is not None:
                on_progress(percent, label)

        report(0, "Extracting folder ID...")
        folder_id = extract_folder_id(url)
        if not folder_id:
            return ScanOutcome.failure(INVALID_URL_MESSAGE)

        try:
            report(10, "Connecting to Google Drive...")
            folder_info = self._listing.get_folder_info(folder_id)

            report(20, "Scanning folder contents...")
            contents = self._listing.list_folder(folder_id)
            if contents.inaccessible:
                logger.warning("[scan] folder inaccessible; folder_id:%s", folder_id)
                return ScanOutcome.failure(FOLDER_NOT_FOUND_MESSAGE)

            report(60, "Filtering image files...")
            matches = filter_images(contents.records, allowed_types)

            report(80, "Processing results...")
            images = matches[:limit]

            report(100, f"Found {len(images)} images")
            logger.info(
                "[scan] scan complete; folder_id:%s;listed:%d;matched:%d;returned:%d",
                folder_id,
                len(contents.records),
                len(matches),
                len(images),
            )
            return ScanOutcome(
                success=True,
                images=images,
                total_found=len(matches),
                folder_name=(folder_info.name or None) if folder_info else None,
                incomplete=contents.incomplete,
            )
        except Exception as exc:
            logger.error("[scan] scan failed; folder_id:%s", folder_id, exc_info=True)
            return ScanOutcome.failure(str(exc) or UNKNOWN_ERROR_MESSAGE)


def folder_scanner_from_config(config: AppConfig) -> FolderScanner:
    """Construct a FolderScanner from application configuration.

    Creates a DriveClient and FolderListingClient from the config, then
    wires them into a FolderScanner.

    Args:
        config: Application configuration instance.

    Returns:
        Configured FolderScanner instance.
    """
    client = drive_client_from_config(config)
    listing = folder_listing_client_from_config(client, config)
    return FolderScanner(listing_client=listing, default_max_images=config.max_images)
