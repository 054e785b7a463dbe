"""Tile → colour key → substitute → composite, row by row.

:class:`MosaicPipeline` partitions a source image into a grid, reduces every
tile to a colour key, requests one substitute per distinct key through a
:class:`~photo_mosaic.cache.TileCache`, and draws each row onto the target
once all of that row's substitutes have arrived. Rows finish in any order;
a failure only affects the rows whose tiles depend on it.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from PIL import Image

from photo_mosaic.cache import TileCache
from photo_mosaic.canvas import CompositeTarget, PillowCanvas
from photo_mosaic.color_utils import average_color
from photo_mosaic.errors import CompositeFailure, InvalidInput, ResolutionFailure
from photo_mosaic.image_io import SourceImage
from photo_mosaic.resolvers import SubstituteResolver
from photo_mosaic.tiles import TileSpec, check_positive, partition_rows

logger = logging.getLogger(__name__)

RowCallback = Callable[[int, CompositeFailure | None], None]


class PipelineState(enum.Enum):
    IDLE = "idle"
    PARTITIONING = "partitioning"
    REDUCING = "reducing"
    RESOLVING = "resolving"
    COMPOSITING = "compositing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class MosaicReport:
    """Outcome of one :meth:`MosaicPipeline.process_image` run."""

    completed_rows: list[int] = field(default_factory=list)
    failed_rows: dict[int, CompositeFailure] = field(default_factory=dict)
    tile_count: int = 0
    unique_colors: int = 0
    state: PipelineState = PipelineState.IDLE

    @property
    def ok(self) -> bool:
        return not self.failed_rows


class MosaicPipeline:
    """Build a photo mosaic of *image* on *target*.

    Args:
        image:       Source pixels (borrowed, never modified).
        tile_width:  Nominal tile width; edge tiles may be narrower.
        tile_height: Nominal tile height; edge tiles may be shorter.
        target:      Surface sized to the image; receives ``clear``/``draw``.
        resolver:    Supplies a substitute image per colour key.
        on_row:      Optional ``(row, error)`` callback fired once per row
                     as it finishes (``error`` is ``None`` on success). Errors it
                     raises are logged and do not affect the run.

    Raises:
        InvalidInput: a required argument is missing or a tile dimension is
            not a positive integer.
    """

    def __init__(
        self,
        image: SourceImage,
        tile_width: int,
        tile_height: int,
        target: CompositeTarget,
        resolver: SubstituteResolver,
        on_row: RowCallback | None = None,
    ) -> None:
        self.image = image
        self.tile_width = tile_width
        self.tile_height = tile_height
        self.target = target
        self.resolver = resolver
        self.on_row = on_row
        self.state = PipelineState.IDLE
        self.cache: TileCache | None = None
        self._validate()

    def _validate(self) -> None:
        if self.image is None:
            msg = "A source image is required"
            raise InvalidInput(msg)
        if self.target is None:
            msg = "A composite target is required"
            raise InvalidInput(msg)
        if self.resolver is None:
            msg = "A substitute resolver is required"
            raise InvalidInput(msg)
        check_positive("tile_width", self.tile_width)
        check_positive("tile_height", self.tile_height)
        check_positive("image width", self.image.width)
        check_positive("image height", self.image.height)

    def partition(self) -> list[list[TileSpec]]:
        return partition_rows(
            self.image.width, self.image.height, self.tile_width, self.tile_height,
        )

    def reduce_row(self, tiles: list[TileSpec]) -> list[str]:
        """Colour key of every tile in a row, in column order."""
        return [
            average_color(
                self.image.get_pixels(t.x, t.y, t.width, t.height), t.area,
            )
            for t in tiles
        ]

    async def process_image(self) -> MosaicReport:
        """Run the whole pipeline once and report per-row outcomes.

        ``InvalidInput`` propagates before any drawing happens. Resolver and
        draw failures never propagate: they are collected per row in
        :attr:`MosaicReport.failed_rows` while unaffected rows still render.
        """
        self._validate()
        t0 = time.perf_counter()
        w, h = self.image.width, self.image.height
        self.cache = cache = TileCache(self.resolver)

        self.state = PipelineState.PARTITIONING
        rows = self.partition()
        report = MosaicReport(tile_count=sum(len(r) for r in rows))
        logger.info(
            "Mosaic %dx%d  |  %d rows x %d cols  |  tile %dx%d",
            w, h, len(rows), len(rows[0]), self.tile_width, self.tile_height,
        )

        self.state = PipelineState.REDUCING
        try:
            keys = [self.reduce_row(tiles) for tiles in rows]
            self.target.clear(0, 0, w, h)
        except Exception:
            self.state = PipelineState.FAILED
            raise

        self.state = PipelineState.RESOLVING
        row_tasks = [
            asyncio.ensure_future(
                self._run_row(i, tiles, [cache.resolve(k) for k in row_keys]),
            )
            for i, (tiles, row_keys) in enumerate(zip(rows, keys, strict=True))
        ]
        report.unique_colors = len(cache)
        logger.debug(
            "%d tiles share %d colour keys", report.tile_count, report.unique_colors,
        )

        self.state = PipelineState.COMPOSITING
        results = await asyncio.gather(*row_tasks, return_exceptions=True)

        unexpected: BaseException | None = None
        for i, result in enumerate(results):
            if result is None:
                report.completed_rows.append(i)
            elif isinstance(result, CompositeFailure):
                report.failed_rows[i] = result
            elif unexpected is None:
                unexpected = result

        self.state = (
            PipelineState.DONE
            if report.ok and unexpected is None
            else PipelineState.FAILED
        )
        report.state = self.state
        if unexpected is not None:
            raise unexpected

        logger.info(
            "Composited %d/%d rows  (%d substitutes, %.2f s)",
            len(report.completed_rows), len(rows), report.unique_colors,
            time.perf_counter() - t0,
        )
        return report

    async def _run_row(
        self,
        row: int,
        tiles: list[TileSpec],
        futures: list[asyncio.Future[Image.Image]],
    ) -> None:
        try:
            await self._composite_row(row, tiles, futures)
        except CompositeFailure as exc:
            logger.warning("Row %d failed: %s", row, exc)
            self._notify(row, exc)
            raise
        logger.debug("Row %d composited (%d tiles)", row, len(tiles))
        self._notify(row, None)

    def _notify(self, row: int, error: CompositeFailure | None) -> None:
        # Progress callbacks never change a row's outcome.
        if self.on_row is None:
            return
        try:
            self.on_row(row, error)
        except Exception:
            logger.exception("on_row callback failed for row %d", row)

    async def _composite_row(
        self,
        row: int,
        tiles: list[TileSpec],
        futures: list[asyncio.Future[Image.Image]],
    ) -> None:
        # Wait for the whole row, then draw it without yielding: no partial rows.
        images = await asyncio.gather(*futures, return_exceptions=True)
        for result in images:
            if isinstance(result, ResolutionFailure):
                msg = f"Row {row}: no substitute for #{result.color_key}"
                raise CompositeFailure(msg, row=row) from result
            if isinstance(result, BaseException):
                raise result

        for tile, img in zip(tiles, images, strict=True):
            x = tile.col * self.tile_width
            y = tile.row * self.tile_height
            try:
                self.target.draw(img, x, y, tile.width, tile.height)
            except Exception as exc:
                msg = f"Row {row}: draw rejected at ({x}, {y}, {tile.width}, {tile.height})"
                raise CompositeFailure(
                    msg, row=row, rect=(x, y, tile.width, tile.height),
                ) from exc


async def render_mosaic(
    image: SourceImage,
    tile_width: int,
    tile_height: int,
    resolver: SubstituteResolver,
    background: tuple[int, int, int, int] = (0, 0, 0, 0),
    on_row: RowCallback | None = None,
) -> tuple[PillowCanvas, MosaicReport]:
    """Convenience wrapper: run a fresh pipeline onto a new Pillow canvas."""
    if image is None:
        msg = "A source image is required"
        raise InvalidInput(msg)
    canvas = PillowCanvas(image.width, image.height, background)
    pipeline = MosaicPipeline(
        image, tile_width, tile_height, canvas, resolver, on_row=on_row,
    )
    report = await pipeline.process_image()
    return canvas, report
