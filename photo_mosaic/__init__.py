"""
Photo Mosaic Generator
======================

Split an image into a grid of tiles, reduce each tile to its average
colour, and redraw it with a substitute image for that colour. Tile
substitutes are requested once per colour and composited row by row.
Ships two substitute sources:

- **Solid** (local flat colour swatches)
- **HTTP** (``GET /color/<rrggbb>`` against a tile server)
"""

__version__ = "1.0.0"

from photo_mosaic.cache import TileCache
from photo_mosaic.canvas import CompositeTarget, PillowCanvas
from photo_mosaic.color_utils import (
    average_color,
    component_to_hex,
    hex_to_rgb,
    rgb_to_hex,
)
from photo_mosaic.config import MosaicConfig
from photo_mosaic.errors import (
    CompositeFailure,
    InvalidInput,
    MosaicError,
    ResolutionFailure,
)
from photo_mosaic.image_io import SourceImage, load_source, make_comparison_grid
from photo_mosaic.pipeline import (
    MosaicPipeline,
    MosaicReport,
    PipelineState,
    render_mosaic,
)
from photo_mosaic.resolvers import HttpResolver, SolidColorResolver, SubstituteResolver
from photo_mosaic.tiles import TileSpec, partition_rows

__all__ = [
    "CompositeFailure",
    "CompositeTarget",
    "HttpResolver",
    "InvalidInput",
    "MosaicConfig",
    "MosaicError",
    "MosaicPipeline",
    "MosaicReport",
    "PillowCanvas",
    "PipelineState",
    "ResolutionFailure",
    "SolidColorResolver",
    "SourceImage",
    "SubstituteResolver",
    "TileCache",
    "TileSpec",
    "average_color",
    "component_to_hex",
    "hex_to_rgb",
    "load_source",
    "make_comparison_grid",
    "partition_rows",
    "render_mosaic",
    "rgb_to_hex",
]
