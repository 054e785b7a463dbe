"""Tile colour reduction and hex colour-key conversion."""

from __future__ import annotations

import string
from collections.abc import Sequence

import numpy as np

from photo_mosaic.errors import InvalidInput

CHANNELS = 4  # interleaved R, G, B, A


def component_to_hex(c: int) -> str:
    """Encode one 0-255 channel as exactly two lowercase hex digits."""
    c = int(c)
    if not 0 <= c <= 255:
        msg = f"Channel value {c} outside [0, 255]"
        raise InvalidInput(msg)
    return f"{c:02x}"


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """``(112, 123, 240)`` → ``"707bf0"``."""
    return component_to_hex(r) + component_to_hex(g) + component_to_hex(b)


def hex_to_rgb(key: str) -> tuple[int, int, int]:
    """Parse ``"rrggbb"`` (optionally ``#``-prefixed) to an RGB triple."""
    h = key.removeprefix("#")
    if len(h) != 6 or not all(ch in string.hexdigits for ch in h):
        msg = f"Colour key must be 6 hex digits, got {key!r}"
        raise InvalidInput(msg)
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def average_color(pixels: Sequence[int] | np.ndarray, sample_count: int) -> str:
    """Reduce one tile's RGBA samples to its colour key.

    Each of R, G and B is summed over every sample and floored-divided by
    *sample_count*. Alpha is read along with the rest of the buffer but does
    not contribute to the key.

    Args:
        pixels: Flat interleaved ``R, G, B, A`` byte samples for exactly one
            tile, in any consistent scan order.
        sample_count: Number of pixels in the tile (width x height).

    Returns:
        Six lowercase hex digits, e.g. ``"825944"``.

    Raises:
        InvalidInput: *sample_count* is not positive, or the buffer does not
            hold exactly *sample_count* RGBA samples.
    """
    if sample_count <= 0:
        msg = f"Tile must have a positive area, got {sample_count} samples"
        raise InvalidInput(msg)

    samples = np.asarray(pixels, dtype=np.int64).reshape(-1)
    if samples.size != sample_count * CHANNELS:
        msg = (
            f"Expected {sample_count * CHANNELS} values for {sample_count} "
            f"RGBA samples, got {samples.size}"
        )
        raise InvalidInput(msg)

    totals = samples.reshape(sample_count, CHANNELS).sum(axis=0)
    r, g, b = (int(t) // sample_count for t in totals[:3])
    return rgb_to_hex(r, g, b)
