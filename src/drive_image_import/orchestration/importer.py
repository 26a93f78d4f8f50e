"""Canvas importers — download selected records and place them on a canvas."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

from drive_image_import.canvas.document import EDITOR_DESIGN, EDITOR_SLIDES, EDITOR_WHITEBOARD
from drive_image_import.canvas.models import (
    DEFAULT_SLIDE_HEIGHT,
    DEFAULT_SLIDE_WIDTH,
    SCALE_FILL,
    SCALE_FIT,
    CanvasNode,
)
from drive_image_import.drive.client import drive_client_from_config
from drive_image_import.drive.fetcher import ContentFetcher, content_fetcher_from_config
from drive_image_import.orchestration.models import ImportOutcome, ImportSettings, ProgressCallback

if TYPE_CHECKING:
    from drive_image_import.canvas.sink import CanvasSink
    from drive_image_import.config import AppConfig
    from drive_image_import.drive.models import FileRecord

logger = logging.getLogger(__name__)

# Card layout: a note card per record with its preview above it
CARD_STEP_X = 200
CARD_ROW_LIMIT_X = 1000
CARD_STEP_Y = 250
CARD_IMAGE_SIZE = 150
CARD_IMAGE_OFFSET_Y = 170

# Slide layout: one centered image per slide
SLIDE_IMAGE_MAX_WIDTH = 800
SLIDE_IMAGE_MAX_HEIGHT = 600
SLIDE_IMAGE_RATIO = 0.8


class CanvasImporter(ABC):
    """Base import loop shared by every canvas variant.

    Subclasses decide where and how each record is placed; the base class
    owns the iteration, progress reporting and failure handling. A failure
    while fetching or placing one record is logged and skipped. A failure
    outside the per-record step turns the whole import into a failed outcome.
    """

    start_label = "Starting import..."
    failure_message = "Import failed"

    def __init__(self, fetcher: ContentFetcher, sink: CanvasSink) -> None:
        """Initialise the importer.

        Args:
            fetcher: ContentFetcher used to download each record.
            sink: Canvas that receives the created nodes.
        """
        self._fetcher = fetcher
        self._sink = sink

    def import_images(
        self,
        records: Sequence[FileRecord],
        settings: ImportSettings | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ImportOutcome:
        """Download each record and place it on the canvas, in order.

        Args:
            records: Records selected for import.
            settings: Layout settings; only the grid variant reads them.
            on_progress: Optional ``(percent, label)`` callback.

        Returns:
            ImportOutcome with the created nodes and the number of placed records.
        """
        settings = settings or ImportSettings()
        nodes: list[CanvasNode] = []
        failed: list[str] = []
        placed = 0
        total = len(records)

        def report(percent: float, label: str) -> None:
            if on_progress is not None:
                on_progress(percent, label)

        try:
            report(0, self.start_label)
            for index, record in enumerate(records):
                report(index / total * 100, self.item_label(record))
                try:
                    data = self._fetcher.fetch(record)
                    nodes.extend(self.place(record, data, index, placed, settings))
                    placed += 1
                except Exception as exc:
                    logger.warning(
                        "[import_images] failed to import record; name:%s;error:%s",
                        record.name,
                        exc,
                    )
                    failed.append(record.id)

            if nodes:
                self.focus(nodes)

            count = self.imported_count(nodes)
            report(100, self.summary_label(count))
            logger.info(
                "[import_images] import complete; requested:%d;imported:%d;failed:%d",
                total,
                count,
                len(failed),
            )
            return ImportOutcome(success=True, imported_count=count, nodes=nodes, failed=failed)
        except Exception as exc:
            logger.error("[import_images] import aborted", exc_info=True)
            return ImportOutcome.failure(str(exc) or self.failure_message)

    @abstractmethod
    def place(
        self,
        record: FileRecord,
        data: bytes,
        index: int,
        placed: int,
        settings: ImportSettings,
    ) -> list[CanvasNode]:
        """Create the nodes for one record and return the ones to track."""

    def focus(self, nodes: list[CanvasNode]) -> None:
        self._sink.select(nodes)
        self._sink.scroll_into_view(nodes)

    def imported_count(self, nodes: list[CanvasNode]) -> int:
        return len(nodes)

    def item_label(self, record: FileRecord) -> str:
        return f"Importing {record.name}..."

    def summary_label(self, count: int) -> str:
        return f"Imported {count} images"


class GridImporter(CanvasImporter):
    """Places image regions left-to-right, top-to-bottom in a fixed grid."""

    @staticmethod
    def position(index: int, settings: ImportSettings) -> tuple[float, float]:
        """Return the top-left corner of grid cell ``index``."""
        step = settings.image_size + settings.spacing
        row, column = divmod(index, settings.images_per_row)
        return column * step, row * step

    def place(
        self,
        record: FileRecord,
        data: bytes,
        index: int,
        placed: int,
        settings: ImportSettings,
    ) -> list[CanvasNode]:
        x, y = self.position(index, settings)
        scale_mode = SCALE_FIT if settings.preserve_aspect_ratio else SCALE_FILL
        size = settings.image_size

        if not settings.create_components:
            region = self._sink.create_image_region(record.name, data, x, y, size, size, scale_mode)
            self._sink.append(region)
            return [region]

        container = self._sink.create_container(record.name, x, y)
        region = self._sink.create_image_region(record.name, data, 0, 0, size, size, scale_mode)
        self._sink.append(region, container)
        self._sink.append(container)
        return [container]


class CardImporter(CanvasImporter):
    """Creates a note card per record with a preview image above it."""

    start_label = "Starting FigJam import..."
    failure_message = "FigJam import failed"

    @staticmethod
    def position(placed: int) -> tuple[float, float]:
        """Return the card anchor after ``placed`` successful cards.

        Cards advance by a fixed step and wrap to a new row once the running
        x would pass the row limit.
        """
        per_row = CARD_ROW_LIMIT_X // CARD_STEP_X + 1
        row, column = divmod(placed, per_row)
        return column * CARD_STEP_X, row * CARD_STEP_Y

    def place(
        self,
        record: FileRecord,
        data: bytes,
        index: int,
        placed: int,
        settings: ImportSettings,
    ) -> list[CanvasNode]:
        x, y = self.position(placed)
        card = self._sink.create_note_card(record.name, x, y)
        image = self._sink.create_image_region(
            f"{record.name} (Image)",
            data,
            x,
            y - CARD_IMAGE_OFFSET_Y,
            CARD_IMAGE_SIZE,
            CARD_IMAGE_SIZE,
            SCALE_FIT,
        )
        self._sink.append(card)
        self._sink.append(image)
        return [card, image]

    def imported_count(self, nodes: list[CanvasNode]) -> int:
        return len(nodes) // 2

    def item_label(self, record: FileRecord) -> str:
        return f"Creating sticky note for {record.name}..."

    def summary_label(self, count: int) -> str:
        return f"Created {count} sticky notes"


class SlideImporter(CanvasImporter):
    """Creates one slide per record with the image centered on it."""

    start_label = "Creating slides..."
    failure_message = "Slides import failed"

    @staticmethod
    def image_frame(slide_width: float, slide_height: float) -> tuple[float, float, float, float]:
        """Return ``(x, y, width, height)`` of the image centered on a slide."""
        width = min(SLIDE_IMAGE_MAX_WIDTH, slide_width * SLIDE_IMAGE_RATIO)
        height = min(SLIDE_IMAGE_MAX_HEIGHT, slide_height * SLIDE_IMAGE_RATIO)
        return (slide_width - width) / 2, (slide_height - height) / 2, width, height

    def place(
        self,
        record: FileRecord,
        data: bytes,
        index: int,
        placed: int,
        settings: ImportSettings,
    ) -> list[CanvasNode]:
        slide = self._sink.create_slide(record.name)
        slide_width = slide.width or DEFAULT_SLIDE_WIDTH
        slide_height = slide.height or DEFAULT_SLIDE_HEIGHT
        x, y, width, height = self.image_frame(slide_width, slide_height)
        image = self._sink.create_image_region(record.name, data, x, y, width, height, SCALE_FIT)
        self._sink.append(image, slide)
        return [slide]

    def focus(self, nodes: list[CanvasNode]) -> None:
        self._sink.select(nodes)
        self._sink.set_view_mode("grid")

    def item_label(self, record: FileRecord) -> str:
        return f"Creating slide for {record.name}..."

    def summary_label(self, count: int) -> str:
        return f"Created {count} slides"


IMPORTERS: dict[str, type[CanvasImporter]] = {
    EDITOR_DESIGN: GridImporter,
    EDITOR_WHITEBOARD: CardImporter,
    EDITOR_SLIDES: SlideImporter,
}


def importer_for_editor(
    editor_type: str, fetcher: ContentFetcher, sink: CanvasSink
) -> CanvasImporter:
    """Return the importer variant matching a host editor type.

    Raises:
        ValueError: If the editor type has no importer.
    """
    try:
        importer_cls = IMPORTERS[editor_type]
    except KeyError:
        raise ValueError(f"Unsupported editor type: {editor_type}") from None
    return importer_cls(fetcher=fetcher, sink=sink)


def canvas_importer_from_config(
    config: AppConfig, editor_type: str, sink: CanvasSink
) -> CanvasImporter:
    """Construct the importer for ``editor_type`` from application configuration.

    Args:
        config: Application configuration instance.
        editor_type: Host editor type (``figma``, ``figjam`` or ``slides``).
        sink: Canvas that receives the created nodes.

    Returns:
        Configured CanvasImporter instance.
    """
    client = drive_client_from_config(config)
    fetcher = content_fetcher_from_config(client, config)
    return importer_for_editor(editor_type, fetcher, sink)
