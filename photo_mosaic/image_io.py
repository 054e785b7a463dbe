"""Source-image loading, saving, and comparison-grid generation."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from photo_mosaic.errors import InvalidInput


class SourceImage:
    """Read-only RGBA pixel buffer addressed by coordinate.

    Wraps an ``(H, W, 3)`` or ``(H, W, 4)`` uint8 array. Other integer arrays
    are accepted when every value fits in a byte; floats are rejected. RGB
    input gets an opaque alpha channel. The stored array is a non-writeable
    copy, so the pipeline can borrow it without affecting the caller.
    """

    def __init__(self, array: np.ndarray) -> None:
        arr = np.asarray(array)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            msg = f"Expected (H, W, 3|4) pixel array, got shape {arr.shape}"
            raise InvalidInput(msg)
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            msg = f"Image must have a positive size, got {arr.shape[1]}x{arr.shape[0]}"
            raise InvalidInput(msg)

        if arr.dtype != np.uint8:
            if arr.dtype.kind not in "iu":
                msg = f"Expected uint8 pixel values, got dtype {arr.dtype}"
                raise InvalidInput(msg)
            if arr.min() < 0 or arr.max() > 255:
                msg = (
                    f"Pixel values must lie in [0, 255], got "
                    f"[{arr.min()}, {arr.max()}]"
                )
                raise InvalidInput(msg)
            arr = arr.astype(np.uint8)

        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)
        else:
            arr = arr.copy()
        arr.setflags(write=False)
        self._pixels = arr

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def array(self) -> np.ndarray:
        """Read-only ``(H, W, 4)`` view."""
        return self._pixels

    def get_pixels(self, x: int, y: int, w: int, h: int) -> np.ndarray:
        """Return the rectangle as flat interleaved RGBA samples (row-major)."""
        if w <= 0 or h <= 0:
            msg = f"Pixel rectangle must have a positive size, got {w}x{h}"
            raise InvalidInput(msg)
        if x < 0 or y < 0 or x + w > self.width or y + h > self.height:
            msg = (
                f"Rectangle ({x}, {y}, {w}, {h}) outside "
                f"{self.width}x{self.height} image"
            )
            raise InvalidInput(msg)
        return self._pixels[y : y + h, x : x + w].reshape(-1)

    @classmethod
    def from_pil(cls, img: Image.Image) -> SourceImage:
        return cls(np.array(img.convert("RGBA"), dtype=np.uint8))

    def to_pil(self) -> Image.Image:
        return Image.fromarray(self._pixels)


def load_source(path: str | Path) -> SourceImage:
    """Load any Pillow-readable image as an RGBA :class:`SourceImage`."""
    with Image.open(path) as img:
        return SourceImage.from_pil(img)


def make_comparison_grid(
    original: SourceImage,
    mosaic: Image.Image,
    output_path: str | Path,
    max_panel_side: int = 512,
) -> None:
    """Create a 2-panel comparison: Original | Mosaic.

    Both panels are scaled so their longest side is at most
    *max_panel_side*, preserving aspect ratio.
    """
    scale = min(1.0, max_panel_side / max(original.width, original.height))
    panel_w = max(1, round(original.width * scale))
    panel_h = max(1, round(original.height * scale))
    label_height = 36

    panels = [
        original.to_pil().convert("RGB").resize((panel_w, panel_h), Image.LANCZOS),
        mosaic.convert("RGB").resize((panel_w, panel_h), Image.NEAREST),
    ]
    labels = [
        f"Original {original.width}x{original.height}",
        "Mosaic",
    ]

    gap = 8
    total_w = len(panels) * panel_w + (len(panels) - 1) * gap
    total_h = panel_h + label_height

    canvas = Image.new("RGB", (total_w, total_h), (30, 30, 30))
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 18,
        )
    except OSError:
        font = ImageFont.load_default()

    for i, (panel, label) in enumerate(zip(panels, labels, strict=False)):
        x = i * (panel_w + gap)
        canvas.paste(panel, (x, label_height))

        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        tx = x + (panel_w - text_w) // 2
        draw.text((tx, 6), label, fill=(220, 220, 220), font=font)

    canvas.save(output_path)
