"""Unit tests for drive/fetcher.py — single-record downloads and size limits."""

from unittest.mock import MagicMock

import pytest

from drive_image_import.config import AppConfig
from drive_image_import.drive.client import DriveApiError
from drive_image_import.drive.fetcher import (
    ContentFetcher,
    ContentFetchError,
    FileTooLargeError,
    MissingDownloadReferenceError,
    content_fetcher_from_config,
)
from drive_image_import.drive.models import FileRecord


def _record(size: str | None = None, download_url: str | None = "https://dl/f-1") -> FileRecord:
    return FileRecord(
        id="f-1",
        name="photo.jpg",
        mime_type="image/jpeg",
        size=size,
        download_url=download_url,
    )


class TestContentFetcher:
    def test_returns_downloaded_bytes(self) -> None:
        mock_drive = MagicMock()
        mock_drive.get_content.return_value = b"\xff\xd8jpeg"
        fetcher = ContentFetcher(mock_drive)

        assert fetcher.fetch(_record()) == b"\xff\xd8jpeg"
        mock_drive.get_content.assert_called_once_with("https://dl/f-1")

    def test_missing_download_url_raises(self) -> None:
        mock_drive = MagicMock()
        fetcher = ContentFetcher(mock_drive)

        with pytest.raises(MissingDownloadReferenceError, match="photo.jpg"):
            fetcher.fetch(_record(download_url=None))

        mock_drive.get_content.assert_not_called()

    def test_declared_size_over_limit_skips_download(self) -> None:
        mock_drive = MagicMock()
        fetcher = ContentFetcher(mock_drive, max_file_size_bytes=100)

        with pytest.raises(FileTooLargeError) as exc_info:
            fetcher.fetch(_record(size="101"))

        assert exc_info.value.size == 101
        assert exc_info.value.limit == 100
        mock_drive.get_content.assert_not_called()

    def test_oversized_buffer_rejected_after_download(self) -> None:
        mock_drive = MagicMock()
        mock_drive.get_content.return_value = b"x" * 11
        fetcher = ContentFetcher(mock_drive, max_file_size_bytes=10)

        with pytest.raises(FileTooLargeError):
            fetcher.fetch(_record())

    def test_size_at_limit_is_accepted(self) -> None:
        mock_drive = MagicMock()
        mock_drive.get_content.return_value = b"x" * 10
        fetcher = ContentFetcher(mock_drive, max_file_size_bytes=10)

        assert fetcher.fetch(_record(size="10")) == b"x" * 10

    def test_transport_error_propagates(self) -> None:
        mock_drive = MagicMock()
        mock_drive.get_content.side_effect = DriveApiError(404, "Not Found")
        fetcher = ContentFetcher(mock_drive)

        with pytest.raises(DriveApiError) as exc_info:
            fetcher.fetch(_record())

        assert exc_info.value.status_code == 404

    def test_fetch_errors_share_base_class(self) -> None:
        assert issubclass(MissingDownloadReferenceError, ContentFetchError)
        assert issubclass(FileTooLargeError, ContentFetchError)


class TestContentFetcherFromConfig:
    def test_uses_configured_limit(self) -> None:
        fetcher = content_fetcher_from_config(MagicMock(), AppConfig(max_file_size_bytes=42))

        assert fetcher._max_file_size_bytes == 42
