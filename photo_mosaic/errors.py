"""Exception hierarchy shared by the pipeline and its adapters."""

from __future__ import annotations


class MosaicError(Exception):
    """Base class for every error raised by photo_mosaic."""


class InvalidInput(MosaicError, ValueError):
    """Missing or non-positive configuration, zero-area tile, bad key."""


class ResolutionFailure(MosaicError):
    """A substitute-image request for *color_key* failed."""

    def __init__(self, color_key: str, message: str | None = None) -> None:
        self.color_key = color_key
        super().__init__(message or f"Could not resolve substitute for #{color_key}")


class CompositeFailure(MosaicError):
    """A row (or a single draw call) could not be composited.

    Attributes:
        row:  Tile row index, or ``None`` when raised by a surface draw.
        rect: ``(x, y, w, h)`` of the rejected draw, if any.
    """

    def __init__(
        self,
        message: str,
        row: int | None = None,
        rect: tuple[int, int, int, int] | None = None,
    ) -> None:
        self.row = row
        self.rect = rect
        super().__init__(message)
