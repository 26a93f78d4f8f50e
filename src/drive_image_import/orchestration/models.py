"""Result and settings models for the scan and import pipelines."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from drive_image_import.canvas.models import CanvasNode
from drive_image_import.drive.models import FileRecord

ProgressCallback = Callable[[float, str], None]


@dataclass
class ScanOutcome:
    """Result of scanning a folder for images.

    A successful outcome carries the (possibly empty) truncated record list;
    a failed one carries an error message and no records.

    Attributes:
        success: Whether the scan completed.
        images: Matching records in API order, truncated to the requested maximum.
        total_found: Number of matches before truncation.
        folder_name: Display name of the folder, if its metadata was available.
        error: User-facing error message for a failed scan.
        incomplete: True if the listing could not enumerate every child.
    """

    success: bool
    images: list[FileRecord] = field(default_factory=list)
    total_found: int = 0
    folder_name: str | None = None
    error: str | None = None
    incomplete: bool = False

    @classmethod
    def failure(cls, error: str) -> ScanOutcome:
        return cls(success=False, error=error)


@dataclass
class ImportOutcome:
    """Result of importing records onto a canvas.

    ``imported_count`` can be lower than the number of requested records
    when individual items fail; the batch still succeeds in that case.
    """

    success: bool
    imported_count: int = 0
    nodes: list[CanvasNode] = field(default_factory=list)
    error: str | None = None
    failed: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str) -> ImportOutcome:
        return cls(success=False, error=error)


@dataclass(frozen=True)
class ImportSettings:
    """Layout options for the grid import.

    Attributes:
        image_size: Side length in pixels of each square image region.
        spacing: Gap in pixels between neighbouring regions.
        images_per_row: Number of regions per row before wrapping; values below 1 become 1.
        create_components: Wrap each region in a reusable container.
        preserve_aspect_ratio: Fit the image inside the region instead of filling it.
    """

    image_size: float = 200
    spacing: float = 20
    images_per_row: int = 3
    create_components: bool = False
    preserve_aspect_ratio: bool = True

    def __post_init__(self) -> None:
        if self.images_per_row < 1:
            object.__setattr__(self, "images_per_row", 1)

    @classmethod
    def from_message(cls, data: dict[str, Any]) -> ImportSettings:
        """Build settings from an ``import-images`` message, defaulting absent options."""
        defaults = cls()
        return cls(
            image_size=_option(data, "imageSize", defaults.image_size),
            spacing=_option(data, "spacing", defaults.spacing),
            images_per_row=int(_option(data, "imagesPerRow", defaults.images_per_row)),
            create_components=bool(_option(data, "createComponents", defaults.create_components)),
            preserve_aspect_ratio=bool(
                _option(data, "preserveAspectRatio", defaults.preserve_aspect_ratio)
            ),
        )


def _option(data: dict[str, Any], key: str, default: Any) -> Any:
    value = data.get(key)
    return default if value is None else value
