"""Folder listing against the Drive files endpoint, with pagination."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from drive_image_import.config import DEFAULT_DOWNLOAD_URL_TEMPLATE
from drive_image_import.drive.client import DriveApiError, DriveClient
from drive_image_import.drive.models import (
    RESPONSE_FILES,
    RESPONSE_INCOMPLETE_SEARCH,
    RESPONSE_NEXT_PAGE_TOKEN,
    FileRecord,
    FolderContents,
    ListingPage,
)

if TYPE_CHECKING:
    from drive_image_import.config import AppConfig

logger = logging.getLogger(__name__)

LISTING_FIELDS = (
    "files(id,name,mimeType,size,thumbnailLink,webViewLink,createdTime,modifiedTime),"
    "nextPageToken,incompleteSearch"
)
FOLDER_INFO_FIELDS = "id,name,mimeType,webViewLink,createdTime,modifiedTime"

# Authorization failures mean "not found or not public" for unauthenticated access
ACCESS_DENIED_STATUS_CODES = frozenset({401, 403})


class FolderListingClient:
    """Lists the direct children of a public Drive folder."""

    def __init__(
        self,
        drive_client: DriveClient,
        page_size: int = 100,
        max_pages: int = 50,
        download_url_template: str = DEFAULT_DOWNLOAD_URL_TEMPLATE,
    ) -> None:
        """Initialise the listing client.

        Args:
            drive_client: DriveClient used for API calls.
            page_size: Number of entries requested per page.
            max_pages: Upper bound on pages fetched by ``list_folder``.
            download_url_template: Template with a ``{file_id}`` placeholder used to
                derive each record's download URL.
        """
        self._drive = drive_client
        self._page_size = page_size
        self._max_pages = max_pages
        self._download_url_template = download_url_template

    def download_url(self, file_id: str) -> str:
        """Derive the download URL for a file without an extra round-trip."""
        return self._download_url_template.format(file_id=file_id)

    def list_page(self, folder_id: str, page_token: str | None = None) -> ListingPage:
        """Fetch a single page of a folder's non-trashed direct children.

        Args:
            folder_id: Drive identifier of the folder.
            page_token: Token from a previous page, or None for the first page.

        Returns:
            ListingPage with normalized records. ``inaccessible`` is set when the
            API answers 401/403.

        Raises:
            DriveApiError: For any other non-2xx response.
        """
        params: dict[str, Any] = {
            "q": f"'{folder_id}' in parents and trashed=false",
            "fields": LISTING_FIELDS,
            "pageSize": self._page_size,
        }
        if page_token:
            params["pageToken"] = page_token

        try:
            response = self._drive.get("/files", params)
        except DriveApiError as exc:
            if exc.status_code in ACCESS_DENIED_STATUS_CODES:
                logger.warning(
                    "[list_page] folder not accessible; folder_id:%s;status:%d",
                    folder_id,
                    exc.status_code,
                )
                return ListingPage(incomplete=True, inaccessible=True)
            raise

        records = [
            FileRecord.from_api(raw, download_url=self.download_url(raw.get("id", "")))
            for raw in response.get(RESPONSE_FILES, [])
        ]
        return ListingPage(
            records=records,
            next_page_token=response.get(RESPONSE_NEXT_PAGE_TOKEN),
            incomplete=bool(response.get(RESPONSE_INCOMPLETE_SEARCH, False)),
        )

    def list_folder(self, folder_id: str) -> FolderContents:
        """List every direct child of a folder, following ``nextPageToken``.

        Records are kept in API order across pages. Pagination stops when no
        token is returned, when a token repeats, or after ``max_pages`` pages;
        the last two cases mark the result incomplete.

        Args:
            folder_id: Drive identifier of the folder.

        Returns:
            FolderContents aggregating all fetched pages.
        """
        contents = FolderContents(folder_id=folder_id)
        seen_tokens: set[str] = set()
        page_token: str | None = None

        while True:
            page = self.list_page(folder_id, page_token)
            contents.pages_fetched += 1
            if page.inaccessible:
                contents.inaccessible = True
                contents.incomplete = True
                return contents

            contents.records.extend(page.records)
            contents.incomplete = contents.incomplete or page.incomplete

            page_token = page.next_page_token
            if not page_token:
                break
            if page_token in seen_tokens:
                # Malformed response; stop to avoid an infinite loop.
                logger.warning(
                    "[list_folder] repeated page token; stopping; folder_id:%s", folder_id
                )
                contents.incomplete = True
                break
            if contents.pages_fetched >= self._max_pages:
                logger.warning(
                    "[list_folder] page limit reached; folder_id:%s;pages:%d",
                    folder_id,
                    contents.pages_fetched,
                )
                contents.incomplete = True
                break
            seen_tokens.add(page_token)

        logger.info(
            "[list_folder] listed folder; folder_id:%s;record_count:%d;pages:%d",
            folder_id,
            len(contents.records),
            contents.pages_fetched,
        )
        return contents

    def get_folder_info(self, folder_id: str) -> FileRecord | None:
        """Fetch the folder's own metadata, best-effort.

        The folder name is cosmetic, so any failure yields None instead of an error.
        """
        try:
            data = self._drive.get(f"/files/{folder_id}", {"fields": FOLDER_INFO_FIELDS})
        except Exception:
            logger.warning("[get_folder_info] folder metadata unavailable; folder_id:%s", folder_id)
            return None
        return FileRecord.from_api(data)


def folder_listing_client_from_config(
    drive_client: DriveClient, config: AppConfig
) -> FolderListingClient:
    """Construct a FolderListingClient from application configuration.

    Args:
        drive_client: DriveClient instance.
        config: Application configuration instance.

    Returns:
        Configured FolderListingClient instance.
    """
    return FolderListingClient(
        drive_client=drive_client,
        page_size=config.page_size,
        max_pages=config.max_pages,
        download_url_template=config.download_url_template,
    )
