"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from photo_mosaic.canvas import PillowCanvas
from photo_mosaic.config import MosaicConfig
from photo_mosaic.errors import InvalidInput
from photo_mosaic.image_io import SourceImage, load_source, make_comparison_grid
from photo_mosaic.pipeline import MosaicReport, render_mosaic
from photo_mosaic.resolvers import HttpResolver, SolidColorResolver

app = typer.Typer(
    name="photo-mosaic",
    help="Rebuild any image as a mosaic of colour-matched tile images.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()

# Defaults come from MosaicConfig - single source of truth
_DEFAULTS = MosaicConfig()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


def _collect_images(folder: Path, extensions: frozenset[str]) -> list[Path]:
    if not folder.exists():
        return []
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in extensions
    )


async def _render(
    source: SourceImage, cfg: MosaicConfig,
) -> tuple[PillowCanvas, MosaicReport]:
    if cfg.resolver == "http":
        async with HttpResolver(cfg.server_url, timeout=cfg.request_timeout) as resolver:
            return await render_mosaic(
                source, cfg.tile_width, cfg.tile_height, resolver, cfg.background,
            )
    resolver = SolidColorResolver((cfg.swatch_size, cfg.swatch_size))
    return await render_mosaic(
        source, cfg.tile_width, cfg.tile_height, resolver, cfg.background,
    )


def _check_resolver(name: str) -> str:
    if name not in _DEFAULTS.RESOLVERS:
        available = ", ".join(sorted(_DEFAULTS.RESOLVERS))
        msg = f"Unknown resolver '{name}'. Available: {available}"
        raise typer.BadParameter(msg)
    return name


def _report_failures(report: MosaicReport) -> None:
    for row, err in sorted(report.failed_rows.items()):
        console.print(f"  [red]✗[/red] row {row}: {err}")


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-i", help="Folder with source images",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    tile_width: int = typer.Option(
        _DEFAULTS.tile_width, "--tile-width", help="Tile width in pixels",
    ),
    tile_height: int = typer.Option(
        _DEFAULTS.tile_height, "--tile-height", help="Tile height in pixels",
    ),
    resolver: str = typer.Option(
        _DEFAULTS.resolver, "--resolver", "-r",
        help="'solid' (local swatches) or 'http' (tile server)",
        callback=_check_resolver,
    ),
    server_url: str = typer.Option(
        _DEFAULTS.server_url, "--server", help="Tile server base URL",
    ),
    timeout: float = typer.Option(
        _DEFAULTS.request_timeout, "--timeout", help="HTTP request timeout (s)",
    ),
    comparison: bool = typer.Option(
        _DEFAULTS.save_comparison, "--comparison/--no-comparison",
        help="Save an Original | Mosaic comparison",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Process all images in INPUT_DIR and write results to OUTPUT_DIR."""
    _setup_logging(verbose)
    logger = logging.getLogger("photo_mosaic")

    cfg = MosaicConfig(
        tile_width=tile_width,
        tile_height=tile_height,
        resolver=resolver,
        server_url=server_url,
        request_timeout=timeout,
        save_comparison=comparison,
        input_dir=input_dir,
        output_dir=output_dir,
    )

    input_dir.mkdir(exist_ok=True)
    output_dir.mkdir(exist_ok=True)

    images = _collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place .jpg / .png / ... files there and re-run.\n")
        raise typer.Exit(0)

    console.print(Panel.fit(
        f"[bold]PHOTO MOSAIC GENERATOR[/bold]\n"
        f"Tile: {cfg.tile_width}x{cfg.tile_height}  |  Resolver: {cfg.resolver}\n"
        f"Images: {len(images)}",
        border_style="cyan",
    ))

    failures = 0
    for idx, img_path in enumerate(images, 1):
        stem = img_path.stem
        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        t_total = time.perf_counter()

        source = load_source(img_path)
        logger.info("Source: %dx%d", source.width, source.height)

        try:
            canvas, report = asyncio.run(_render(source, cfg))
        except InvalidInput as exc:
            console.print(f"  [red]✗[/red] {img_path.name}: {exc}")
            failures += 1
            continue

        mosaic_path = output_dir / f"{stem}_mosaic.{cfg.output_format}"
        canvas.save(mosaic_path)

        if cfg.save_comparison:
            comp_path = output_dir / f"{stem}_comparison.{cfg.output_format}"
            make_comparison_grid(source, canvas.image, comp_path)

        elapsed = time.perf_counter() - t_total
        if not report.ok:
            failures += 1
            _report_failures(report)
        mark = "[green]✓[/green]" if report.ok else "[yellow]![/yellow]"
        console.print(
            f"  {mark} {mosaic_path.name}  "
            f"[dim]{report.tile_count} tiles  {report.unique_colors} colours"
            f"  rows={len(report.completed_rows)}/"
            f"{len(report.completed_rows) + len(report.failed_rows)}"
            f"  time={elapsed:.1f}s[/dim]"
        )

    if failures:
        console.print(Panel.fit(
            f"[bold red]{failures} image(s) incomplete[/bold red] - "
            f"results in [bold]{output_dir}/[/bold]",
            border_style="red",
        ))
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - results in [bold]{output_dir}/[/bold]",
        border_style="green",
    ))


# -- single-image command ----------------------------------------------

@app.command()
def single(
    target: Path = typer.Argument(..., help="Path to the source image"),
    output: Path = typer.Option(Path("output/mosaic.png"), "--output", "-o"),
    tile_width: int = typer.Option(_DEFAULTS.tile_width, "--tile-width"),
    tile_height: int = typer.Option(_DEFAULTS.tile_height, "--tile-height"),
    resolver: str = typer.Option(
        _DEFAULTS.resolver, "--resolver", "-r", callback=_check_resolver,
    ),
    server_url: str = typer.Option(_DEFAULTS.server_url, "--server"),
    timeout: float = typer.Option(_DEFAULTS.request_timeout, "--timeout"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Process a single image."""
    _setup_logging(verbose)

    output.parent.mkdir(parents=True, exist_ok=True)

    cfg = MosaicConfig(
        tile_width=tile_width,
        tile_height=tile_height,
        resolver=resolver,
        server_url=server_url,
        request_timeout=timeout,
    )
    source = load_source(target)
    try:
        canvas, report = asyncio.run(_render(source, cfg))
    except InvalidInput as exc:
        console.print(f"[red]✗[/red] {exc}")
        raise typer.Exit(2) from exc

    canvas.save(output)

    mark = "[green]✓[/green]" if report.ok else "[yellow]![/yellow]"
    console.print(
        f"{mark} Saved to {output}  "
        f"[dim]{source.width}x{source.height}  {report.tile_count} tiles"
        f"  {report.unique_colors} colours[/dim]"
    )
    if not report.ok:
        _report_failures(report)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
