"""In-memory canvas document implementing the canvas sink."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Sequence
from typing import Any

from drive_image_import.canvas.models import (
    DEFAULT_SLIDE_HEIGHT,
    DEFAULT_SLIDE_WIDTH,
    KIND_CONTAINER,
    KIND_IMAGE_REGION,
    KIND_NOTE_CARD,
    KIND_SLIDE,
    CanvasNode,
)

logger = logging.getLogger(__name__)

# Editor types a document can emulate
EDITOR_DESIGN = "figma"
EDITOR_WHITEBOARD = "figjam"
EDITOR_SLIDES = "slides"
EDITOR_TYPES = (EDITOR_DESIGN, EDITOR_WHITEBOARD, EDITOR_SLIDES)

# Size given to new note cards
NOTE_CARD_SIZE = 240.0


class CanvasDocument:
    """A single-page canvas document held in memory.

    Images are stored once per distinct content, keyed by the SHA-256 hash
    of their bytes, the way host editors deduplicate image fills.
    """

    def __init__(
        self,
        editor_type: str = EDITOR_DESIGN,
        slide_width: float = DEFAULT_SLIDE_WIDTH,
        slide_height: float = DEFAULT_SLIDE_HEIGHT,
    ) -> None:
        if editor_type not in EDITOR_TYPES:
            raise ValueError(f"Unknown editor type: {editor_type}")
        self.editor_type = editor_type
        self.slide_width = slide_width
        self.slide_height = slide_height
        self.page: list[CanvasNode] = []
        self.images: dict[str, int] = {}
        self.selection: list[CanvasNode] = []
        self.viewport: list[str] = []
        self.view_mode: str | None = None
        self._next_id = 1

    def _new_id(self) -> str:
        node_id = f"1:{self._next_id}"
        self._next_id += 1
        return node_id

    def _store_image(self, image_data: bytes) -> str:
        image_hash = hashlib.sha256(image_data).hexdigest()
        self.images[image_hash] = len(image_data)
        return image_hash

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
        return CanvasNode(
            id=self._new_id(),
            kind=KIND_IMAGE_REGION,
            name=name,
            x=x,
            y=y,
            width=width,
            height=height,
            image_hash=self._store_image(image_data),
            scale_mode=scale_mode,
        )

    def create_note_card(self, text: str, x: float, y: float) -> CanvasNode:
        return CanvasNode(
            id=self._new_id(),
            kind=KIND_NOTE_CARD,
            name=text,
            x=x,
            y=y,
            width=NOTE_CARD_SIZE,
            height=NOTE_CARD_SIZE,
            text=text,
        )

    def create_container(self, name: str, x: float, y: float) -> CanvasNode:
        return CanvasNode(id=self._new_id(), kind=KIND_CONTAINER, name=name, x=x, y=y)

    def create_slide(self, name: str) -> CanvasNode:
        if self.editor_type != EDITOR_SLIDES:
            raise ValueError(f"Slides cannot be created in a {self.editor_type} document")
        slide = CanvasNode(
            id=self._new_id(),
            kind=KIND_SLIDE,
            name=name,
            width=self.slide_width,
            height=self.slide_height,
        )
        # Host editors attach new slides to the deck immediately.
        self.page.append(slide)
        return slide

    def append(self, node: CanvasNode, parent: CanvasNode | None = None) -> None:
        if parent is None:
            if node not in self.page:
                self.page.append(node)
            return
        if parent.kind not in (KIND_CONTAINER, KIND_SLIDE):
            raise ValueError(f"Cannot append children to a {parent.kind} node")
        parent.children.append(node)
        if parent.kind == KIND_CONTAINER:
            # Containers hug their content.
            parent.width = max(parent.width, node.x + node.width)
            parent.height = max(parent.height, node.y + node.height)

    def select(self, nodes: Sequence[CanvasNode]) -> None:
        self.selection = list(nodes)

    def scroll_into_view(self, nodes: Sequence[CanvasNode]) -> None:
        self.viewport = [node.id for node in nodes]

    def set_view_mode(self, mode: str) -> None:
        self.view_mode = mode

    def to_dict(self) -> dict[str, Any]:
        """Serialize the document for transport back to the caller."""
        return {
            "editorType": self.editor_type,
            "nodes": [node.to_dict() for node in self.page],
            "imageCount": len(self.images),
            "selection": [node.id for node in self.selection],
            "viewport": list(self.viewport),
            "viewMode": self.view_mode,
        }
