"""Composite surfaces the pipeline draws substitute images onto."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from PIL import Image

from photo_mosaic.errors import CompositeFailure, InvalidInput

logger = logging.getLogger(__name__)


class CompositeTarget(Protocol):
    """Output surface sized exactly to the source image."""

    def clear(self, x: int, y: int, w: int, h: int) -> None: ...

    def draw(self, image: Image.Image, x: int, y: int, w: int, h: int) -> None: ...


class PillowCanvas:
    """:class:`CompositeTarget` backed by an RGBA Pillow image."""

    def __init__(
        self,
        width: int,
        height: int,
        background: tuple[int, int, int, int] = (0, 0, 0, 0),
    ) -> None:
        if width <= 0 or height <= 0:
            msg = f"Canvas must have a positive size, got {width}x{height}"
            raise InvalidInput(msg)
        self.width = width
        self.height = height
        self.background = background
        self.image = Image.new("RGBA", (width, height), background)

    def _check_rect(self, x: int, y: int, w: int, h: int) -> None:
        if w <= 0 or h <= 0 or x < 0 or y < 0 or x + w > self.width or y + h > self.height:
            msg = (
                f"Rectangle ({x}, {y}, {w}, {h}) not inside "
                f"{self.width}x{self.height} canvas"
            )
            raise CompositeFailure(msg, rect=(x, y, w, h))

    def clear(self, x: int, y: int, w: int, h: int) -> None:
        self._check_rect(x, y, w, h)
        self.image.paste(self.background, (x, y, x + w, y + h))

    def draw(self, image: Image.Image, x: int, y: int, w: int, h: int) -> None:
        """Scale *image* to ``w`` x ``h`` and paste it at ``(x, y)``."""
        self._check_rect(x, y, w, h)
        tile = image.convert("RGBA")
        if tile.size != (w, h):
            tile = tile.resize((w, h), Image.LANCZOS)
        self.image.paste(tile, (x, y))

    def save(self, path: str | Path) -> None:
        img = self.image
        if Path(path).suffix.lower() in {".jpg", ".jpeg", ".jfif", ".bmp"}:
            img = img.convert("RGB")
        img.save(path)
        logger.debug("Canvas saved: %s", path)
