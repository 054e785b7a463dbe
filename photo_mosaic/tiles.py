"""Grid partitioning of a canvas into rows of tiles."""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral

from photo_mosaic.errors import InvalidInput


@dataclass(frozen=True)
class TileSpec:
    """One grid cell.

    ``width`` / ``height`` are the *actual* extent: edge tiles in the last
    column / row shrink to fit when the canvas is not a multiple of the
    nominal tile size.
    """

    row: int
    col: int
    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def box(self) -> tuple[int, int, int, int]:
        """Pillow-style ``(left, top, right, bottom)``."""
        return self.x, self.y, self.x + self.width, self.y + self.height


def check_positive(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral) or value <= 0:
        msg = f"{name} must be a positive integer, got {value!r}"
        raise InvalidInput(msg)
    return int(value)


def partition_rows(
    width: int,
    height: int,
    tile_width: int,
    tile_height: int,
) -> list[list[TileSpec]]:
    """Split a ``width`` x ``height`` canvas into rows of tiles.

    Rows are ordered top to bottom (``row = y // tile_height``); tiles within
    a row are ordered by ascending ``x``. Together they cover
    ``[0, width) x [0, height)`` exactly once.
    """
    width = check_positive("width", width)
    height = check_positive("height", height)
    tile_width = check_positive("tile_width", tile_width)
    tile_height = check_positive("tile_height", tile_height)

    rows: list[list[TileSpec]] = []
    for row, y in enumerate(range(0, height, tile_height)):
        h = min(tile_height, height - y)
        rows.append([
            TileSpec(row, col, x, y, min(tile_width, width - x), h)
            for col, x in enumerate(range(0, width, tile_width))
        ])
    return rows
