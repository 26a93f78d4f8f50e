"""UI message protocol — dispatches inbound messages to the scan and import pipelines."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from drive_image_import.drive.models import FileRecord
from drive_image_import.orchestration.importer import CanvasImporter
from drive_image_import.orchestration.models import ImportSettings
from drive_image_import.orchestration.scanner import FolderScanner

logger = logging.getLogger(__name__)

# Inbound message types
MSG_SCAN_DRIVE = "scan-drive"
MSG_IMPORT_IMAGES = "import-images"

# Outbound message types
MSG_SCAN_PROGRESS = "scan-progress"
MSG_SCAN_COMPLETE = "scan-complete"
MSG_IMPORT_PROGRESS = "import-progress"
MSG_IMPORT_COMPLETE = "import-complete"
MSG_ERROR = "error"

DEFAULT_IMAGE_TYPES = ("jpg", "jpeg", "png", "gif", "svg", "webp")

PostMessage = Callable[[dict[str, Any]], None]


class InvalidMessageError(ValueError):
    """Raised when an inbound message field has the wrong shape."""


class MessageHandler:
    """Routes UI messages to a scanner and an importer.

    Every inbound message results in outbound messages posted through the
    caller's ``post`` callable; pipeline failures and malformed fields become
    ``error`` messages.
    """

    def __init__(self, scanner: FolderScanner, importer: CanvasImporter | None = None) -> None:
        """Initialise the handler.

        Args:
            scanner: FolderScanner serving ``scan-drive`` messages.
            importer: CanvasImporter serving ``import-images`` messages, if the
                host has a canvas to import into.
        """
        self._scanner = scanner
        self._importer = importer

    def handle(self, message: dict[str, Any], post: PostMessage) -> None:
        """Process one inbound message.

        Args:
            message: Inbound message with a ``type`` discriminator.
            post: Callable receiving each outbound message in order.
        """
        msg_type = message.get("type")
        logger.info("[handle] message received; type:%s", msg_type)
        try:
            if msg_type == MSG_SCAN_DRIVE:
                self._handle_scan(message, post)
            elif msg_type == MSG_IMPORT_IMAGES:
                self._handle_import(message, post)
            else:
                logger.warning("[handle] unknown message type; type:%s", msg_type)
                post({"type": MSG_ERROR, "message": f"Unknown message type: {msg_type}"})
        except InvalidMessageError as exc:
            logger.warning("[handle] invalid message; type:%s;error:%s", msg_type, exc)
            post({"type": MSG_ERROR, "message": str(exc)})

    def _handle_scan(self, message: dict[str, Any], post: PostMessage) -> None:
        url = message.get("url", "")
        if not isinstance(url, str):
            raise InvalidMessageError("Invalid url: expected a string")
        allowed_types = _image_types(message.get("imageTypes"))
        max_images = _max_images(message.get("maxImages"))

        def on_progress(progress: float, status: str) -> None:
            post({"type": MSG_SCAN_PROGRESS, "progress": progress, "status": status})

        outcome = self._scanner.scan(
            url=url,
            allowed_types=allowed_types,
            max_images=max_images,
            on_progress=on_progress,
        )
        if not outcome.success:
            post({"type": MSG_ERROR, "message": outcome.error})
            return

        complete: dict[str, Any] = {
            "type": MSG_SCAN_COMPLETE,
            "images": [record.to_message() for record in outcome.images],
            "totalFound": outcome.total_found,
        }
        if outcome.folder_name:
            complete["folderName"] = outcome.folder_name
        post(complete)

    def _handle_import(self, message: dict[str, Any], post: PostMessage) -> None:
        if self._importer is None:
            post({"type": MSG_ERROR, "message": "Import is not available in this context"})
            return

        records = _records(message.get("images"))
        try:
            settings = ImportSettings.from_message(message)
        except (TypeError, ValueError) as exc:
            raise InvalidMessageError(f"Invalid import settings: {exc}") from exc

        def on_progress(progress: float, status: str) -> None:
            post({"type": MSG_IMPORT_PROGRESS, "progress": progress, "status": status})

        outcome = self._importer.import_images(records, settings, on_progress)
        if not outcome.success:
            post({"type": MSG_ERROR, "message": outcome.error})
            return
        post({"type": MSG_IMPORT_COMPLETE, "count": outcome.imported_count})


def _image_types(value: Any) -> list[str] | tuple[str, ...]:
    """Return the requested type tags; only an absent field falls back to the defaults."""
    if value is None:
        return DEFAULT_IMAGE_TYPES
    if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
        raise InvalidMessageError("Invalid imageTypes: expected a list of strings")
    return value


def _max_images(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidMessageError(f"Invalid maxImages: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidMessageError(f"Invalid maxImages: {value!r}") from None


def _records(value: Any) -> list[FileRecord]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidMessageError("Invalid images: expected a list")
    records = []
    for position, item in enumerate(value):
        if not isinstance(item, dict):
            raise InvalidMessageError(f"Invalid image at position {position}: expected an object")
        records.append(FileRecord.from_message(item))
    return records
