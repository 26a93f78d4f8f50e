"""Data models for Drive file metadata and folder listings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Drive API JSON field names
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_MIME_TYPE = "mimeType"
FIELD_SIZE = "size"
FIELD_THUMBNAIL_LINK = "thumbnailLink"
FIELD_WEB_VIEW_LINK = "webViewLink"
FIELD_DOWNLOAD_URL = "downloadUrl"
FIELD_CREATED_TIME = "createdTime"
FIELD_MODIFIED_TIME = "modifiedTime"

# Listing response keys
RESPONSE_FILES = "files"
RESPONSE_NEXT_PAGE_TOKEN = "nextPageToken"
RESPONSE_INCOMPLETE_SEARCH = "incompleteSearch"


@dataclass(frozen=True)
class FileRecord:
    """Immutable snapshot of one remote file.

    ``id`` and ``mime_type`` are always present; every other field may be
    absent. ``size`` keeps the API's representation, which is a decimal
    string for Drive but may be an int when a record comes back from the UI.
    """

    id: str
    name: str
    mime_type: str
    size: str | int | None = None
    thumbnail_link: str | None = None
    web_view_link: str | None = None
    download_url: str | None = None
    created_time: str | None = None
    modified_time: str | None = None

    @property
    def size_bytes(self) -> int | None:
        """Declared size as an int, or None when absent or unparseable."""
        if self.size is None:
            return None
        try:
            return int(self.size)
        except (TypeError, ValueError):
            return None

    @classmethod
    def from_api(cls, raw: dict[str, Any], download_url: str | None = None) -> FileRecord:
        """Map a raw Drive API file resource to a FileRecord."""
        return cls(
            id=raw.get(FIELD_ID, ""),
            name=raw.get(FIELD_NAME, ""),
            mime_type=raw.get(FIELD_MIME_TYPE, ""),
            size=raw.get(FIELD_SIZE),
            thumbnail_link=raw.get(FIELD_THUMBNAIL_LINK),
            web_view_link=raw.get(FIELD_WEB_VIEW_LINK),
            download_url=download_url,
            created_time=raw.get(FIELD_CREATED_TIME),
            modified_time=raw.get(FIELD_MODIFIED_TIME),
        )

    @classmethod
    def from_message(cls, data: dict[str, Any]) -> FileRecord:
        """Rebuild a FileRecord from its UI message form."""
        return cls.from_api(data, download_url=data.get(FIELD_DOWNLOAD_URL))

    def to_message(self) -> dict[str, Any]:
        """Serialize to the camelCase dict sent to the UI, omitting absent fields."""
        data: dict[str, Any] = {
            FIELD_ID: self.id,
            FIELD_NAME: self.name,
            FIELD_MIME_TYPE: self.mime_type,
            FIELD_SIZE: self.size,
            FIELD_THUMBNAIL_LINK: self.thumbnail_link,
            FIELD_WEB_VIEW_LINK: self.web_view_link,
            FIELD_DOWNLOAD_URL: self.download_url,
            FIELD_CREATED_TIME: self.created_time,
            FIELD_MODIFIED_TIME: self.modified_time,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass
class ListingPage:
    """One page of a folder listing.

    ``inaccessible`` is set instead of raising when the API refuses access,
    which for public-only access means the folder is missing or not shared.
    """

    records: list[FileRecord] = field(default_factory=list)
    next_page_token: str | None = None
    incomplete: bool = False
    inaccessible: bool = False


@dataclass
class FolderContents:
    """All records of a folder after following pagination."""

    folder_id: str
    records: list[FileRecord] = field(default_factory=list)
    pages_fetched: int = 0
    incomplete: bool = False
    inaccessible: bool = False
