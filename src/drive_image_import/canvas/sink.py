"""Canvas sink contract consumed by the import pipelines."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from drive_image_import.canvas.models import CanvasNode


@runtime_checkable
class CanvasSink(Protocol):
    """Operations the import pipelines need from a host canvas."""

    def create_image_region(
        self,
        name: str,
        image_data: bytes,
        x: float,
        y: float,
        width: float,
        height: float,
        scale_mode: str,
    ) -> CanvasNode:
        """Create a rectangle filled with the given image."""
        ...

    def create_note_card(self, text: str, x: float, y: float) -> CanvasNode:
        """Create a sticky-note card carrying ``text``."""
        ...

    def create_container(self, name: str, x: float, y: float) -> CanvasNode:
        """Create a reusable component-like container."""
        ...

    def create_slide(self, name: str) -> CanvasNode:
        """Create a slide; the sink decides its width and height."""
        ...

    def append(self, node: CanvasNode, parent: CanvasNode | None = None) -> None:
        """Append ``node`` to ``parent``, or to the current page when None."""
        ...

    def select(self, nodes: Sequence[CanvasNode]) -> None:
        """Replace the current selection."""
        ...

    def scroll_into_view(self, nodes: Sequence[CanvasNode]) -> None:
        """Scroll and zoom the viewport to fit ``nodes``."""
        ...

    def set_view_mode(self, mode: str) -> None:
        """Switch the editor view mode (e.g. ``"grid"`` for slides)."""
        ...
