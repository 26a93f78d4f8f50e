"""Data models for nodes placed on a canvas."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Node kinds
KIND_IMAGE_REGION = "image-region"
KIND_NOTE_CARD = "note-card"
KIND_CONTAINER = "container"
KIND_SLIDE = "slide"

# Image fill scale modes
SCALE_FIT = "FIT"
SCALE_FILL = "FILL"

DEFAULT_SLIDE_WIDTH = 1920.0
DEFAULT_SLIDE_HEIGHT = 1080.0


@dataclass
class CanvasNode:
    """A node created on the canvas.

    Attributes:
        id: Identifier assigned by the sink.
        kind: One of the ``KIND_*`` constants.
        name: Layer name shown in the host editor.
        x: Horizontal position relative to the parent.
        y: Vertical position relative to the parent.
        width: Node width in pixels (0 when the sink did not size it).
        height: Node height in pixels (0 when the sink did not size it).
        text: Text content of a note card.
        image_hash: Hash of the image filling an image region.
        scale_mode: ``FIT`` or ``FILL`` for image regions.
        children: Nodes nested inside a container or slide.
    """

    id: str
    kind: str
    name: str = ""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    text: str | None = None
    image_hash: str | None = None
    scale_mode: str | None = None
    children: list[CanvasNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the node and its children, omitting unset optional fields."""
        data: dict[str, Any] = {
            "id": self.id,
            "kind": self.kind,
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }
        if self.text is not None:
            data["text"] = self.text
        if self.image_hash is not None:
            data["imageHash"] = self.image_hash
            data["scaleMode"] = self.scale_mode
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data
