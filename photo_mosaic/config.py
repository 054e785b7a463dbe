"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class MosaicConfig:
    """All tuneable parameters for a mosaic run.

    Attributes:
        tile_width:      Nominal tile width in source pixels.
        tile_height:     Nominal tile height in source pixels.
        resolver:        Substitute source - "solid" (local swatch) or "http".
        server_url:      Base URL of the tile server for the "http" resolver.
        request_timeout: Per-request timeout (seconds) for the "http" resolver.
        swatch_size:     Edge length of generated solid swatches.
        background:      RGBA colour the canvas is cleared to.
        output_format:   Image format for saved files.
        save_comparison: Generate an Original | Mosaic comparison image.
        input_dir:       Folder to scan for source images.
        output_dir:      Folder for results.
    """

    # Grid
    tile_width: int = 16
    tile_height: int = 16

    # Substitutes
    resolver: str = "solid"  # "solid" | "http"
    server_url: str = "http://localhost:8765"
    request_timeout: float = 10.0
    swatch_size: int = 16

    # Output
    background: tuple[int, int, int, int] = (0, 0, 0, 0)
    output_format: str = "png"
    save_comparison: bool = True

    # Paths
    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".jfif"}
    )

    RESOLVERS: frozenset[str] = frozenset({"solid", "http"})
