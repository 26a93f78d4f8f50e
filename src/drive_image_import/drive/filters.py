"""Image classification of file records by MIME type and extension."""

from __future__ import annotations

from collections.abc import Iterable

from drive_image_import.drive.models import FileRecord

# Known MIME types per file-type tag
FILE_TYPE_MAPPINGS: dict[str, frozenset[str]] = {
    "jpg": frozenset({"image/jpeg", "image/jpg"}),
    "jpeg": frozenset({"image/jpeg", "image/jpg"}),
    "png": frozenset({"image/png"}),
    "gif": frozenset({"image/gif"}),
    "svg": frozenset({"image/svg+xml", "text/xml"}),
    "webp": frozenset({"image/webp"}),
    "bmp": frozenset({"image/bmp", "image/x-ms-bmp"}),
    "tiff": frozenset({"image/tiff", "image/tif"}),
    "ico": frozenset({"image/x-icon", "image/vnd.microsoft.icon"}),
}


def is_image(record: FileRecord, allowed_types: Iterable[str]) -> bool:
    """Return True if the record matches any allowed type tag.

    MIME type is checked for every tag first; the filename extension is
    the fallback. Unknown tags only take part in the extension check.
    """
    tags = [tag.lower() for tag in allowed_types]
    mime_type = record.mime_type.lower()
    for tag in tags:
        if mime_type in FILE_TYPE_MAPPINGS.get(tag, frozenset()):
            return True
    name = record.name.lower()
    return any(name.endswith(f".{tag}") for tag in tags)


def filter_images(records: Iterable[FileRecord], allowed_types: Iterable[str]) -> list[FileRecord]:
    """Keep only the records classified as images, preserving input order.

    Args:
        records: File records from a folder listing.
        allowed_types: Type tags such as ``"png"`` or ``"jpg"``.

    Returns:
        The matching records in their original order.
    """
    tags = list(allowed_types)
    return [record for record in records if is_image(record, tags)]
