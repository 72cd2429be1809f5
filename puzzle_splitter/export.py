"""Hand finished tiles to a download / save target, one by one or in bulk."""

from __future__ import annotations

import io
import logging
import time
import zipfile
from collections.abc import Callable, Sequence
from pathlib import Path

from puzzle_splitter.config import BULK_NAME, SINGLE_NAME, SplitterConfig
from puzzle_splitter.models import Tile

logger = logging.getLogger(__name__)

_DEFAULTS = SplitterConfig()


def piece_filename(index: int) -> str:
    """Name for a tile downloaded on its own."""
    return SINGLE_NAME.format(index=index)


def bulk_filename(index: int) -> str:
    """Name for a tile inside a bulk export."""
    return BULK_NAME.format(index=index)


def export_sequentially(
    tiles: Sequence[Tile],
    trigger: Callable[[str, bytes], object],
    delay_ms: int = _DEFAULTS.download_stagger_ms,
    sleep: Callable[[float], object] = time.sleep,
    naming: Callable[[int], str] = bulk_filename,
) -> list[str]:
    """Call ``trigger(filename, png)`` for every tile in index order.

    Consecutive triggers are *delay_ms* apart; browsers drop programmatic
    downloads that fire at nearly the same instant. Filenames come from
    ``naming(index)``.

    Returns:
        The filenames in the order they were triggered.
    """
    names = []
    for n, tile in enumerate(sorted(tiles, key=lambda t: t.index)):
        if n and delay_ms > 0:
            sleep(delay_ms / 1000)
        name = naming(tile.index)
        trigger(name, tile.png)
        names.append(name)
    logger.debug("Exported %d tiles", len(names))
    return names


def save_tiles(
    tiles: Sequence[Tile],
    output_dir: str | Path,
    bulk: bool = True,
    delay_ms: int = 0,
) -> list[Path]:
    """Write every tile as a PNG file under *output_dir*.

    Bulk exports use ``puzzle_piece_<index>.png``, otherwise
    ``piece_<index>.png``.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    paths: list[Path] = []

    def _write(name: str, data: bytes) -> None:
        path = output_dir / name
        path.write_bytes(data)
        paths.append(path)

    export_sequentially(
        tiles, _write, delay_ms=delay_ms,
        naming=bulk_filename if bulk else piece_filename,
    )
    logger.info("Saved %d tiles to %s", len(paths), output_dir)
    return paths


def build_zip(tiles: Sequence[Tile]) -> bytes:
    """Pack all tiles into one ZIP archive, in index order."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        export_sequentially(tiles, zf.writestr, delay_ms=0)
    return buf.getvalue()
