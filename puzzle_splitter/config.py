"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

GRID_MIN = 1
GRID_MAX = 20

SINGLE_NAME = "piece_{index}.png"
BULK_NAME = "puzzle_piece_{index}.png"


@dataclass(frozen=True)
class SplitterConfig:
    """All tuneable parameters for a split run.

    Attributes:
        rows:                Default number of grid rows.
        cols:                Default number of grid columns.
        download_stagger_ms: Delay between consecutive bulk browser downloads.
        max_workers:         Threads used to crop and encode tiles (1 = sequential).
        save_zip:            Also pack all tiles into one ZIP archive.
        save_preview:        Render a contact sheet of all tiles.
        preview_cell:        Longest side of a tile cell on the contact sheet.
        input_dir:           Folder to scan for source images.
        output_dir:          Folder for results.
    """

    # Grid
    rows: int = 3
    cols: int = 3

    # Tiling
    max_workers: int = 1

    # Export
    download_stagger_ms: int = 100
    save_zip: bool = False
    save_preview: bool = True
    preview_cell: int = 128

    # Paths
    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".gif", ".tiff", ".tif", ".webp", ".jfif"}
    )
