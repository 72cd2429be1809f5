"""Data types shared by the loader, the tiler and the exporters."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any

import numpy as np
from PIL import Image

from puzzle_splitter.config import GRID_MAX, GRID_MIN
from puzzle_splitter.errors import InvalidGridSpecError


@dataclass(frozen=True)
class ImageSurface:
    """A fully decoded RGBA image with known pixel dimensions.

    Created once per successful load and never mutated afterwards; a new
    load replaces the whole surface.
    """

    image: Image.Image
    width: int
    height: int
    mime_type: str = "image/png"
    source_name: str | None = None

    def crop(self, rect: TileRect) -> Image.Image:
        """Copy *rect* into a fresh image of exactly the rectangle's size."""
        return self.image.crop(rect.box)

    def to_array(self) -> np.ndarray:
        """(H, W, 4) uint8 copy of the pixels."""
        return np.array(self.image, dtype=np.uint8)


@dataclass(frozen=True)
class GridSpec:
    """Requested number of rows and columns."""

    rows: int
    cols: int

    @property
    def count(self) -> int:
        return self.rows * self.cols

    def is_valid(self) -> bool:
        return (
            GRID_MIN <= self.rows <= GRID_MAX
            and GRID_MIN <= self.cols <= GRID_MAX
        )

    def validate(self) -> None:
        """Raise :class:`InvalidGridSpecError` unless both counts are in range."""
        if not self.is_valid():
            raise InvalidGridSpecError(
                f"Rows and columns must be between {GRID_MIN} and {GRID_MAX}, "
                f"got {self.rows}x{self.cols}"
            )


def parse_grid_value(raw: Any) -> int:
    """Turn a raw rows / columns entry into an integer.

    Non-numeric or empty input becomes 1 and anything below 1 is raised
    to 1. Values above the maximum pass through unchanged so the tiler
    can reject them.
    """
    if raw is None or isinstance(raw, bool):
        return 1
    try:
        value = int(float(raw.strip())) if isinstance(raw, str) else int(raw)
    except (TypeError, ValueError, OverflowError):
        return 1
    return max(GRID_MIN, value)


@dataclass(frozen=True)
class TileRect:
    """Axis-aligned source rectangle of one tile."""

    left: int
    top: int
    width: int
    height: int

    @property
    def box(self) -> tuple[int, int, int, int]:
        """Pillow crop box ``(left, top, right, bottom)``."""
        return (self.left, self.top, self.left + self.width, self.top + self.height)


@dataclass(frozen=True)
class Tile:
    """One PNG-encoded piece of the grid.

    Attributes:
        row:    Zero-based grid row.
        col:    Zero-based grid column.
        index:  1-based row-major number, ``row * cols + col + 1``.
        width:  Pixel width of the piece.
        height: Pixel height of the piece.
        png:    Standalone PNG bytes, independent of the source surface.
    """

    row: int
    col: int
    index: int
    width: int
    height: int
    png: bytes

    def to_image(self) -> Image.Image:
        img = Image.open(io.BytesIO(self.png))
        img.load()
        return img

    def to_array(self) -> np.ndarray:
        return np.array(self.to_image().convert("RGBA"), dtype=np.uint8)
