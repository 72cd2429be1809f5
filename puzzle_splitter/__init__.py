"""
Puzzle Splitter
===============

Cut an image into a rows x columns grid of equally sized PNG pieces.
Pieces are numbered 1..N in row-major order; any remainder strip on the
right or bottom edge that does not fill a whole piece is left out.

Ships three surfaces over the same core:

- **Library** (``split_image`` and friends)
- **CLI** (``puzzle-splitter split / batch / info``)
- **Browser UI** (``streamlit run streamlit_app.py``)
"""

__version__ = "1.0.0"

from puzzle_splitter.config import GRID_MAX, GRID_MIN, SplitterConfig
from puzzle_splitter.errors import (
    DecodeFailureError,
    InvalidFileTypeError,
    InvalidGridSpecError,
    SplitterError,
)
from puzzle_splitter.export import (
    build_zip,
    bulk_filename,
    export_sequentially,
    piece_filename,
    save_tiles,
)
from puzzle_splitter.image_io import (
    encode_png,
    load_image,
    load_image_path,
    make_contact_sheet,
    stitch_tiles,
)
from puzzle_splitter.models import GridSpec, ImageSurface, Tile, TileRect, parse_grid_value
from puzzle_splitter.tiler import compute_piece_size, excluded_strip, split_image, tile_rects

__all__ = [
    "GRID_MAX",
    "GRID_MIN",
    "DecodeFailureError",
    "GridSpec",
    "ImageSurface",
    "InvalidFileTypeError",
    "InvalidGridSpecError",
    "SplitterConfig",
    "SplitterError",
    "Tile",
    "TileRect",
    "build_zip",
    "bulk_filename",
    "compute_piece_size",
    "encode_png",
    "excluded_strip",
    "export_sequentially",
    "load_image",
    "load_image_path",
    "make_contact_sheet",
    "parse_grid_value",
    "piece_filename",
    "save_tiles",
    "split_image",
    "stitch_tiles",
    "tile_rects",
]
