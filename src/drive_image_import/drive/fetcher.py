"""Raw content download for single file records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from drive_image_import.config import DEFAULT_MAX_FILE_SIZE_BYTES
from drive_image_import.drive.client import DriveClient

if TYPE_CHECKING:
    from drive_image_import.config import AppConfig
    from drive_image_import.drive.models import FileRecord

logger = logging.getLogger(__name__)


class ContentFetchError(Exception):
    """Raised when a record's content cannot be retrieved for import."""


class MissingDownloadReferenceError(ContentFetchError):
    """Raised when a record carries no download URL."""


class FileTooLargeError(ContentFetchError):
    """Raised when a file exceeds the configured size cap."""

    def __init__(self, name: str, size: int, limit: int) -> None:
        super().__init__(
            f"File is too large to import: {name} ({size} bytes). Maximum size is {limit} bytes."
        )
        self.size = size
        self.limit = limit


class ContentFetcher:
    """Downloads file bytes in a single attempt, bounded by a size cap."""

    def __init__(
        self,
        drive_client: DriveClient,
        max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES,
    ) -> None:
        self._drive = drive_client
        self._max_file_size_bytes = max_file_size_bytes

    def fetch(self, record: FileRecord) -> bytes:
        """Download the content of one file record.

        The declared size is checked before downloading when the listing
        reported one; the downloaded buffer is checked afterwards in any case.

        Args:
            record: File record with a download URL.

        Returns:
            Raw file bytes.

        Raises:
            MissingDownloadReferenceError: If the record has no download URL.
            FileTooLargeError: If the declared or actual size exceeds the cap.
            DriveApiError: If the download endpoint returns a non-2xx status.
        """
        if not record.download_url:
            raise MissingDownloadReferenceError(f"No download URL available for {record.name}")

        declared = record.size_bytes
        if declared is not None and declared > self._max_file_size_bytes:
            raise FileTooLargeError(record.name, declared, self._max_file_size_bytes)

        logger.info("[fetch] downloading file; name:%s;file_id:%s", record.name, record.id)
        data = self._drive.get_content(record.download_url)
        if len(data) > self._max_file_size_bytes:
            raise FileTooLargeError(record.name, len(data), self._max_file_size_bytes)
        return data


def content_fetcher_from_config(drive_client: DriveClient, config: AppConfig) -> ContentFetcher:
    """Construct a ContentFetcher from application configuration."""
    return ContentFetcher(
        drive_client=drive_client,
        max_file_size_bytes=config.max_file_size_bytes,
    )
