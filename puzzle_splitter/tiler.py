"""Cut a decoded image into a rows x cols grid of PNG tiles."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor

from puzzle_splitter.errors import InvalidGridSpecError
from puzzle_splitter.image_io import encode_png
from puzzle_splitter.models import GridSpec, ImageSurface, Tile, TileRect

logger = logging.getLogger(__name__)


def compute_piece_size(width: int, height: int, spec: GridSpec) -> tuple[int, int]:
    """Floor-divided (piece_width, piece_height).

    Remainder pixels on the right and bottom edges belong to no tile.
    """
    return width // spec.cols, height // spec.rows


def excluded_strip(width: int, height: int, spec: GridSpec) -> tuple[int, int]:
    """Width of the uncovered right strip and height of the bottom strip."""
    pw, ph = compute_piece_size(width, height, spec)
    return width - pw * spec.cols, height - ph * spec.rows


def tile_rects(
    width: int,
    height: int,
    spec: GridSpec,
) -> Iterator[tuple[int, int, int, TileRect]]:
    """Yield ``(row, col, index, rect)`` in row-major order."""
    pw, ph = compute_piece_size(width, height, spec)
    for row in range(spec.rows):
        for col in range(spec.cols):
            yield row, col, row * spec.cols + col + 1, TileRect(col * pw, row * ph, pw, ph)


def _render_tile(surface: ImageSurface, row: int, col: int, index: int, rect: TileRect) -> Tile:
    piece = surface.crop(rect)
    return Tile(
        row=row,
        col=col,
        index=index,
        width=rect.width,
        height=rect.height,
        png=encode_png(piece),
    )


def split_image(
    surface: ImageSurface,
    spec: GridSpec,
    max_workers: int = 1,
) -> list[Tile]:
    """Split *surface* into ``spec.rows * spec.cols`` tiles.

    Tiles are returned in row-major order (index 1 first) once all of
    them are encoded. Each one is a pixel-exact copy of its source
    rectangle, with no scaling or colour conversion.

    Args:
        surface:     Decoded source image.
        spec:        Requested grid.
        max_workers: Threads used for cropping and encoding. Tiles only
            read the shared surface, so they can be built in any order;
            the output order is unaffected.

    Raises:
        InvalidGridSpecError: if the grid is out of range, or finer than
            the image so that a piece would be empty.
    """
    spec.validate()
    pw, ph = compute_piece_size(surface.width, surface.height, spec)
    if pw < 1 or ph < 1:
        raise InvalidGridSpecError(
            f"A {spec.rows}x{spec.cols} grid is finer than the "
            f"{surface.width}x{surface.height} image"
        )

    right, bottom = excluded_strip(surface.width, surface.height, spec)
    logger.info(
        "Splitting %dx%d into %dx%d grid (%d tiles of %dx%d)",
        surface.width, surface.height, spec.rows, spec.cols, spec.count, pw, ph,
    )
    if right or bottom:
        logger.debug("Excluding %d px on the right and %d px at the bottom", right, bottom)

    t0 = time.perf_counter()
    jobs = list(tile_rects(surface.width, surface.height, spec))
    if max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            tiles = list(pool.map(lambda job: _render_tile(surface, *job), jobs))
    else:
        tiles = [_render_tile(surface, *job) for job in jobs]
    logger.info("Split done  (%.2f s)", time.perf_counter() - t0)
    return tiles
