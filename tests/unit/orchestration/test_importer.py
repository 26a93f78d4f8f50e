"""Unit tests for orchestration/importer.py — grid, card and slide importers."""

from unittest.mock import MagicMock, patch

import pytest

from drive_image_import.canvas.document import CanvasDocument
from drive_image_import.canvas.models import KIND_CONTAINER, KIND_IMAGE_REGION, KIND_NOTE_CARD
from drive_image_import.config import AppConfig
from drive_image_import.drive.client import DriveApiError
from drive_image_import.drive.fetcher import FileTooLargeError
from drive_image_import.drive.models import FileRecord
from drive_image_import.orchestration.importer import (
    CanvasImporter,
    CardImporter,
    GridImporter,
    SlideImporter,
    canvas_importer_from_config,
    importer_for_editor,
)
from drive_image_import.orchestration.models import ImportSettings

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _records(count: int) -> list[FileRecord]:
    return [
        FileRecord(
            id=f"f-{i}",
            name=f"photo-{i}.png",
            mime_type="image/png",
            download_url=f"https://dl/f-{i}",
        )
        for i in range(count)
    ]


def _fetcher(fail_ids: tuple[str, ...] = ()) -> MagicMock:
    """Return a fetcher mock that fails for the given record ids."""
    mock_fetcher = MagicMock()

    def fetch(record: FileRecord) -> bytes:
        if record.id in fail_ids:
            raise DriveApiError(404, "Not Found")
        return f"bytes-{record.id}".encode()

    mock_fetcher.fetch.side_effect = fetch
    return mock_fetcher


# ---------------------------------------------------------------------------
# Grid importer tests
# ---------------------------------------------------------------------------


class TestGridPosition:
    def test_fourth_item_starts_new_row(self) -> None:
        settings = ImportSettings(image_size=200, spacing=20, images_per_row=3)

        assert GridImporter.position(3, settings) == (0, 220)

    def test_row_major_positions(self) -> None:
        settings = ImportSettings()

        positions = [GridImporter.position(i, settings) for i in range(5)]

        assert positions == [(0, 0), (220, 0), (440, 0), (0, 220), (220, 220)]


class TestGridImporter:
    def test_places_sized_regions_on_page(self) -> None:
        doc = CanvasDocument("figma")
        importer = GridImporter(_fetcher(), doc)

        outcome = importer.import_images(_records(4), ImportSettings(image_size=100, spacing=10))

        assert outcome.success is True
        assert outcome.imported_count == 4
        assert doc.page == outcome.nodes
        last = outcome.nodes[3]
        assert (last.x, last.y, last.width, last.height) == (0, 110, 100, 100)
        assert all(node.kind == KIND_IMAGE_REGION for node in outcome.nodes)

    def test_partial_failure_keeps_order_and_succeeds(self) -> None:
        doc = CanvasDocument("figma")
        importer = GridImporter(_fetcher(fail_ids=("f-1",)), doc)

        outcome = importer.import_images(_records(3))

        assert outcome.success is True
        assert outcome.imported_count == 2
        assert [node.name for node in outcome.nodes] == ["photo-0.png", "photo-2.png"]
        assert outcome.failed == ["f-1"]

    def test_failed_item_leaves_its_cell_empty(self) -> None:
        doc = CanvasDocument("figma")
        importer = GridImporter(_fetcher(fail_ids=("f-1",)), doc)

        outcome = importer.import_images(_records(3))

        assert (outcome.nodes[1].x, outcome.nodes[1].y) == (440, 0)

    def test_scale_mode_follows_aspect_ratio_setting(self) -> None:
        doc = CanvasDocument("figma")
        importer = GridImporter(_fetcher(), doc)

        fit = importer.import_images(_records(1), ImportSettings(preserve_aspect_ratio=True))
        fill = importer.import_images(_records(1), ImportSettings(preserve_aspect_ratio=False))

        assert fit.nodes[0].scale_mode == "FIT"
        assert fill.nodes[0].scale_mode == "FILL"

    def test_components_wrap_regions(self) -> None:
        doc = CanvasDocument("figma")
        importer = GridImporter(_fetcher(), doc)

        outcome = importer.import_images(_records(2), ImportSettings(create_components=True))

        assert [node.kind for node in outcome.nodes] == [KIND_CONTAINER, KIND_CONTAINER]
        container = outcome.nodes[1]
        assert (container.x, container.y) == (220, 0)
        assert container.children[0].kind == KIND_IMAGE_REGION
        assert doc.page == outcome.nodes

    def test_selects_and_focuses_created_nodes(self) -> None:
        doc = CanvasDocument("figma")
        importer = GridImporter(_fetcher(), doc)

        outcome = importer.import_images(_records(2))

        assert doc.selection == outcome.nodes
        assert doc.viewport == [node.id for node in outcome.nodes]

    def test_no_selection_when_everything_failed(self) -> None:
        sink = MagicMock()
        importer = GridImporter(_fetcher(fail_ids=("f-0", "f-1")), sink)

        outcome = importer.import_images(_records(2))

        assert outcome.success is True
        assert outcome.imported_count == 0
        sink.select.assert_not_called()
        sink.scroll_into_view.assert_not_called()

    def test_size_limit_failure_is_per_item(self) -> None:
        mock_fetcher = MagicMock()
        mock_fetcher.fetch.side_effect = [FileTooLargeError("big.png", 20, 10), b"ok"]
        importer = GridImporter(mock_fetcher, CanvasDocument("figma"))

        outcome = importer.import_images(_records(2))

        assert outcome.imported_count == 1

    def test_placement_failure_is_per_item(self) -> None:
        sink = MagicMock()
        sink.create_image_region.side_effect = [RuntimeError("canvas full"), MagicMock()]
        importer = GridImporter(_fetcher(), sink)

        outcome = importer.import_images(_records(2))

        assert outcome.success is True
        assert outcome.imported_count == 1

    def test_failure_outside_item_loop_aborts(self) -> None:
        sink = MagicMock()
        sink.select.side_effect = RuntimeError("selection locked")
        importer = GridImporter(_fetcher(), sink)

        outcome = importer.import_images(_records(2))

        assert outcome.success is False
        assert outcome.imported_count == 0
        assert outcome.nodes == []
        assert outcome.error == "selection locked"

    def test_zero_images_per_row_places_one_per_row(self) -> None:
        importer = GridImporter(_fetcher(), CanvasDocument("figma"))

        outcome = importer.import_images(_records(2), ImportSettings(images_per_row=0))

        assert outcome.imported_count == 2
        assert [(node.x, node.y) for node in outcome.nodes] == [(0, 0), (0, 220)]

    def test_empty_selection(self) -> None:
        importer = GridImporter(_fetcher(), CanvasDocument("figma"))

        outcome = importer.import_images([])

        assert outcome.success is True
        assert outcome.imported_count == 0


class TestImportProgress:
    def test_progress_before_each_item_and_summary(self) -> None:
        importer = GridImporter(_fetcher(fail_ids=("f-1",)), CanvasDocument("figma"))
        events: list[tuple[float, str]] = []

        importer.import_images(_records(4), on_progress=lambda p, s: events.append((p, s)))

        assert events == [
            (0, "Starting import..."),
            (0, "Importing photo-0.png..."),
            (25, "Importing photo-1.png..."),
            (50, "Importing photo-2.png..."),
            (75, "Importing photo-3.png..."),
            (100, "Imported 3 images"),
        ]


# ---------------------------------------------------------------------------
# Card importer tests
# ---------------------------------------------------------------------------


class TestCardImporter:
    def test_creates_card_and_image_per_record(self) -> None:
        doc = CanvasDocument("figjam")
        importer = CardImporter(_fetcher(), doc)

        outcome = importer.import_images(_records(2))

        assert outcome.success is True
        assert outcome.imported_count == 2
        assert len(outcome.nodes) == 4
        card, image = outcome.nodes[0], outcome.nodes[1]
        assert card.kind == KIND_NOTE_CARD
        assert card.text == "photo-0.png"
        assert image.name == "photo-0.png (Image)"
        assert (image.width, image.height) == (150, 150)
        assert (image.x, image.y) == (card.x, card.y - 170)

    def test_cards_wrap_after_running_x_passes_limit(self) -> None:
        positions = [CardImporter.position(n) for n in range(8)]

        assert positions[:6] == [(0, 0), (200, 0), (400, 0), (600, 0), (800, 0), (1000, 0)]
        assert positions[6:] == [(0, 250), (200, 250)]

    def test_failed_record_does_not_advance_cursor(self) -> None:
        doc = CanvasDocument("figjam")
        importer = CardImporter(_fetcher(fail_ids=("f-0",)), doc)

        outcome = importer.import_images(_records(2))

        assert outcome.imported_count == 1
        assert (outcome.nodes[0].x, outcome.nodes[0].y) == (0, 0)

    def test_progress_labels(self) -> None:
        importer = CardImporter(_fetcher(), CanvasDocument("figjam"))
        events: list[tuple[float, str]] = []

        importer.import_images(_records(2), on_progress=lambda p, s: events.append((p, s)))

        assert events[0] == (0, "Starting FigJam import...")
        assert events[1] == (0, "Creating sticky note for photo-0.png...")
        assert events[-1] == (100, "Created 2 sticky notes")


# ---------------------------------------------------------------------------
# Slide importer tests
# ---------------------------------------------------------------------------


class TestSlideImporter:
    def test_image_frame_on_default_slide(self) -> None:
        assert SlideImporter.image_frame(1920, 1080) == (560, 240, 800, 600)

    def test_image_frame_on_small_slide_uses_ratio(self) -> None:
        x, y, width, height = SlideImporter.image_frame(500, 400)

        assert (width, height) == (400, 320)
        assert (x, y) == (50, 40)

    def test_one_slide_per_record_with_centered_image(self) -> None:
        doc = CanvasDocument("slides")
        importer = SlideImporter(_fetcher(), doc)

        outcome = importer.import_images(_records(2))

        assert outcome.imported_count == 2
        slide = outcome.nodes[0]
        assert slide.name == "photo-0.png"
        image = slide.children[0]
        assert (image.x, image.y, image.width, image.height) == (560, 240, 800, 600)
        assert doc.view_mode == "grid"
        assert doc.selection == outcome.nodes

    def test_unsized_slide_falls_back_to_default_size(self) -> None:
        sink = MagicMock()
        sink.create_slide.return_value = MagicMock(width=0, height=0)
        importer = SlideImporter(_fetcher(), sink)

        importer.import_images(_records(1))

        args = sink.create_image_region.call_args[0]
        assert args[2:6] == (560, 240, 800, 600)

    def test_failed_download_creates_no_slide(self) -> None:
        doc = CanvasDocument("slides")
        importer = SlideImporter(_fetcher(fail_ids=("f-0",)), doc)

        outcome = importer.import_images(_records(2))

        assert outcome.imported_count == 1
        assert [node.name for node in doc.page] == ["photo-1.png"]

    def test_summary_label(self) -> None:
        importer = SlideImporter(_fetcher(), CanvasDocument("slides"))
        events: list[tuple[float, str]] = []

        importer.import_images(_records(1), on_progress=lambda p, s: events.append((p, s)))

        assert events[-1] == (100, "Created 1 slides")


# ---------------------------------------------------------------------------
# Factory tests
# ---------------------------------------------------------------------------


class TestCanvasImporterBase:
    def test_variant_without_place_cannot_be_built(self) -> None:
        class Unplaced(CanvasImporter):
            pass

        with pytest.raises(TypeError):
            Unplaced(MagicMock(), MagicMock())  # type: ignore[abstract]


class TestImporterForEditor:
    @pytest.mark.parametrize(
        ("editor_type", "importer_cls"),
        [("figma", GridImporter), ("figjam", CardImporter), ("slides", SlideImporter)],
    )
    def test_maps_editor_to_variant(self, editor_type: str, importer_cls: type) -> None:
        importer = importer_for_editor(editor_type, MagicMock(), MagicMock())

        assert type(importer) is importer_cls

    def test_unknown_editor_raises(self) -> None:
        with pytest.raises(ValueError, match="Unsupported editor type"):
            importer_for_editor("dev-mode", MagicMock(), MagicMock())

    @patch("drive_image_import.orchestration.importer.content_fetcher_from_config")
    @patch("drive_image_import.orchestration.importer.drive_client_from_config")
    def test_canvas_importer_from_config(self, mock_dcfc: MagicMock, mock_cffc: MagicMock) -> None:
        config = AppConfig()
        sink = MagicMock()

        importer = canvas_importer_from_config(config, "figjam", sink)

        mock_cffc.assert_called_once_with(mock_dcfc.return_value, config)
        assert isinstance(importer, CardImporter)
        assert importer._fetcher is mock_cffc.return_value
        assert importer._sink is sink
