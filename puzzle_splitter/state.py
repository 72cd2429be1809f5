"""UI state and its transitions.

Every transition takes the current :class:`SplitterState` and returns a
new one; rejected actions only change the status message.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field, replace

from puzzle_splitter.config import GRID_MAX, GRID_MIN, SplitterConfig
from puzzle_splitter.errors import DecodeFailureError, InvalidFileTypeError, InvalidGridSpecError
from puzzle_splitter.image_io import load_image
from puzzle_splitter.models import GridSpec, ImageSurface, Tile, parse_grid_value
from puzzle_splitter.tiler import split_image

logger = logging.getLogger(__name__)

_DEFAULTS = SplitterConfig()

MSG_INVALID_FILE = "Please select a valid image file."
MSG_DECODE_FAILED = "Could not decode the image file."
MSG_INVALID_GRID = (
    f"Please enter valid numbers between {GRID_MIN} and "
    f"{GRID_MAX} for rows and columns."
)
MSG_ALL_DOWNLOADED = "All pieces downloaded!"


@dataclass(frozen=True)
class SplitterState:
    """Everything the UI shows.

    Attributes:
        surface:    Currently loaded image, if any.
        tiles:      Tiles from the last successful split of *surface*.
        tiles_spec: Grid the current tiles were cut with.
        spec:       Grid currently entered by the user.
        status:     Message for the status line.
    """

    surface: ImageSurface | None = None
    tiles: tuple[Tile, ...] = ()
    tiles_spec: GridSpec | None = None
    spec: GridSpec = field(default_factory=lambda: GridSpec(_DEFAULTS.rows, _DEFAULTS.cols))
    status: str = ""

    @property
    def can_split(self) -> bool:
        return self.surface is not None


def on_image_loaded(
    state: SplitterState,
    data: bytes,
    mime_type: str | None,
    name: str | None = None,
) -> SplitterState:
    """Replace the surface with a newly loaded image and drop old tiles.

    A rejected or undecodable file leaves the surface and tiles untouched.
    """
    try:
        surface = load_image(data, mime_type, source_name=name)
    except InvalidFileTypeError as exc:
        logger.warning("%s", exc)
        return replace(state, status=MSG_INVALID_FILE)
    except DecodeFailureError as exc:
        logger.warning("%s", exc)
        return replace(state, status=MSG_DECODE_FAILED)

    return replace(
        state,
        surface=surface,
        tiles=(),
        tiles_spec=None,
        status=f"Image loaded: {surface.width}×{surface.height}px",
    )


def on_grid_spec_changed(state: SplitterState, rows: object, cols: object) -> SplitterState:
    """Store the entered grid; raw entries are clamped to at least 1."""
    spec = GridSpec(parse_grid_value(rows), parse_grid_value(cols))
    return replace(state, spec=spec)


def on_tile_requested(state: SplitterState, max_workers: int = 1) -> SplitterState:
    """Split the loaded image with the entered grid."""
    if state.surface is None:
        return state

    spec = state.spec
    try:
        tiles = split_image(state.surface, spec, max_workers=max_workers)
    except InvalidGridSpecError as exc:
        logger.warning("%s", exc)
        if spec.is_valid():
            return replace(
                state,
                status=f"Image is too small for a {spec.rows}×{spec.cols} grid.",
            )
        return replace(state, status=MSG_INVALID_GRID)

    return replace(
        state,
        tiles=tuple(tiles),
        tiles_spec=spec,
        status=(
            f"Successfully split into {spec.rows}×{spec.cols} = {spec.count} "
            "pieces! Click any piece to download it."
        ),
    )


def on_bulk_export(state: SplitterState) -> SplitterState:
    if not state.tiles:
        return state
    return replace(state, status=MSG_ALL_DOWNLOADED)


def on_file_selected(
    state: SplitterState,
    last_digest: str | None,
    data: bytes | None,
    mime_type: str | None = None,
    name: str | None = None,
) -> tuple[SplitterState, str | None]:
    """Track the uploader widget across reruns.

    Only bytes that differ from the last seen upload count as a load.
    A cleared uploader (*data* is ``None``) forgets the digest, so the
    same file picked again is loaded afresh.

    Returns:
        The new state and the digest to remember.
    """
    if data is None:
        return state, None
    digest = hashlib.sha1(data).hexdigest()
    if digest == last_digest:
        return state, last_digest
    return on_image_loaded(state, data, mime_type, name), digest
