"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from puzzle_splitter.config import SplitterConfig
from puzzle_splitter.errors import SplitterError
from puzzle_splitter.export import build_zip, save_tiles
from puzzle_splitter.image_io import load_image_path, make_contact_sheet
from puzzle_splitter.models import GridSpec, ImageSurface, parse_grid_value
from puzzle_splitter.tiler import compute_piece_size, excluded_strip, split_image

app = typer.Typer(
    name="puzzle-splitter",
    help="Cut images into a grid of PNG puzzle pieces.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


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


def _grid(rows: str, cols: str) -> GridSpec:
    return GridSpec(parse_grid_value(rows), parse_grid_value(cols))


def _split_one(
    surface: ImageSurface,
    spec: GridSpec,
    out_dir: Path,
    stem: str,
    cfg: SplitterConfig,
) -> Path:
    """Split *surface* and write pieces (plus optional ZIP / preview)."""
    logger = logging.getLogger("puzzle_splitter")
    t0 = time.perf_counter()

    tiles = split_image(surface, spec, max_workers=cfg.max_workers)
    piece_dir = out_dir / stem
    save_tiles(tiles, piece_dir, bulk=True)

    if cfg.save_zip:
        zip_path = out_dir / f"{stem}_pieces.zip"
        zip_path.write_bytes(build_zip(tiles))
        logger.info("Archive: %s", zip_path)

    if cfg.save_preview:
        preview_path = out_dir / f"{stem}_preview.png"
        make_contact_sheet(tiles, spec.cols, preview_path, cell=cfg.preview_cell)
        logger.info("Preview: %s", preview_path)

    elapsed = time.perf_counter() - t0
    console.print(
        f"  [green]✓[/green] {piece_dir}/  "
        f"[dim]{spec.rows}x{spec.cols} = {len(tiles)} pieces of "
        f"{tiles[0].width}x{tiles[0].height} px  time={elapsed:.1f}s[/dim]"
    )
    return piece_dir


# Defaults come from SplitterConfig - single source of truth
_DEFAULTS = SplitterConfig()


# -- split command -----------------------------------------------------

@app.command()
def split(
    image: Path = typer.Argument(..., help="Path to the source image"),
    rows: str = typer.Option(str(_DEFAULTS.rows), "--rows", "-r", help="Grid rows (1-20)"),
    cols: str = typer.Option(str(_DEFAULTS.cols), "--cols", "-c", help="Grid columns (1-20)"),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    save_zip: bool = typer.Option(
        _DEFAULTS.save_zip, "--zip/--no-zip", help="Also pack pieces into a ZIP",
    ),
    preview: bool = typer.Option(
        _DEFAULTS.save_preview, "--preview/--no-preview", help="Save a contact sheet",
    ),
    workers: int = typer.Option(
        _DEFAULTS.max_workers, "--workers", "-w", help="Threads for cropping / encoding",
    ),
    mime: str | None = typer.Option(
        None, "--mime", help="Override the MIME type guessed from the extension",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Split one image into ROWS x COLS pieces."""
    _setup_logging(verbose)

    cfg = SplitterConfig(
        max_workers=workers,
        save_zip=save_zip,
        save_preview=preview,
        output_dir=output_dir,
    )
    spec = _grid(rows, cols)

    try:
        surface = load_image_path(image, mime)
        output_dir.mkdir(parents=True, exist_ok=True)
        _split_one(surface, spec, output_dir, image.stem, cfg)
    except (SplitterError, OSError) as exc:
        console.print(f"[red]✗ {exc}[/red]")
        raise typer.Exit(1) from exc


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-i", help="Folder with source images",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    rows: str = typer.Option(str(_DEFAULTS.rows), "--rows", "-r", help="Grid rows (1-20)"),
    cols: str = typer.Option(str(_DEFAULTS.cols), "--cols", "-c", help="Grid columns (1-20)"),
    save_zip: bool = typer.Option(_DEFAULTS.save_zip, "--zip/--no-zip"),
    preview: bool = typer.Option(_DEFAULTS.save_preview, "--preview/--no-preview"),
    workers: int = typer.Option(_DEFAULTS.max_workers, "--workers", "-w"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Split every image in INPUT_DIR and write pieces to OUTPUT_DIR."""
    _setup_logging(verbose)

    cfg = SplitterConfig(
        max_workers=workers,
        save_zip=save_zip,
        save_preview=preview,
        input_dir=input_dir,
        output_dir=output_dir,
    )
    spec = _grid(rows, cols)

    images = _collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place .jpg / .png / ... files there and re-run.\n")
        raise typer.Exit(0)

    output_dir.mkdir(parents=True, exist_ok=True)

    console.print(Panel.fit(
        f"[bold]PUZZLE SPLITTER[/bold]\n"
        f"Grid: {spec.rows} x {spec.cols}  |  Pieces per image: {spec.count}\n"
        f"ZIP: {cfg.save_zip}  |  Preview: {cfg.save_preview}  |  Images: {len(images)}",
        border_style="cyan",
    ))

    failures = 0
    for idx, img_path in enumerate(images, 1):
        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        try:
            surface = load_image_path(img_path)
            _split_one(surface, spec, output_dir, img_path.stem, cfg)
        except (SplitterError, OSError) as exc:
            failures += 1
            console.print(f"  [red]✗ {exc}[/red]")

    done = len(images) - failures
    console.print(Panel.fit(
        f"[bold green]ALL DONE[/bold green] - {done}/{len(images)} images "
        f"split into [bold]{output_dir}/[/bold]",
        border_style="green" if not failures else "yellow",
    ))
    if failures:
        raise typer.Exit(1)


# -- info command ------------------------------------------------------

@app.command()
def info(
    image: Path = typer.Argument(..., help="Path to the source image"),
    rows: str = typer.Option(str(_DEFAULTS.rows), "--rows", "-r"),
    cols: str = typer.Option(str(_DEFAULTS.cols), "--cols", "-c"),
    mime: str | None = typer.Option(None, "--mime"),
) -> None:
    """Show how IMAGE would be split, without writing anything."""
    spec = _grid(rows, cols)
    try:
        surface = load_image_path(image, mime)
        spec.validate()
    except (SplitterError, OSError) as exc:
        console.print(f"[red]✗ {exc}[/red]")
        raise typer.Exit(1) from exc

    pw, ph = compute_piece_size(surface.width, surface.height, spec)
    if pw < 1 or ph < 1:
        console.print(f"[red]✗ A {spec.rows}x{spec.cols} grid is finer than the image[/red]")
        raise typer.Exit(1)
    right, bottom = excluded_strip(surface.width, surface.height, spec)
    console.print(Panel.fit(
        f"[bold]{image.name}[/bold]  {surface.width} x {surface.height} px\n"
        f"Grid: {spec.rows} x {spec.cols} = {spec.count} pieces\n"
        f"Piece: {pw} x {ph} px\n"
        f"Excluded: {right} px right, {bottom} px bottom",
        border_style="cyan",
    ))


if __name__ == "__main__":
    app()
