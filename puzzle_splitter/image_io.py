"""Image loading, PNG encoding, and tile preview generation."""

from __future__ import annotations

import io
import logging
import mimetypes
import struct
from collections.abc import Sequence
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont, ImageOps, UnidentifiedImageError

from puzzle_splitter.errors import DecodeFailureError, InvalidFileTypeError
from puzzle_splitter.models import ImageSurface, Tile

logger = logging.getLogger(__name__)


def is_image_mime(mime_type: str | None) -> bool:
    return bool(mime_type) and mime_type.lower().startswith("image/")


def guess_mime_type(path: str | Path) -> str | None:
    """MIME type from the file extension, ``None`` when unknown."""
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type


def load_image(
    data: bytes,
    mime_type: str | None,
    source_name: str | None = None,
) -> ImageSurface:
    """Decode *data* into an RGBA :class:`ImageSurface`.

    The MIME type is checked before any decoding happens. Decoding is
    eager, so a truncated or malformed file fails here rather than on
    first pixel access. EXIF orientation is applied, so a rotated photo
    has the width and height a browser would show.

    Raises:
        InvalidFileTypeError: if *mime_type* is not ``image/*``.
        DecodeFailureError: if Pillow cannot decode the bytes.
    """
    if not is_image_mime(mime_type):
        raise InvalidFileTypeError(
            f"Not an image file: {source_name or '<bytes>'} ({mime_type or 'unknown type'})"
        )

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            rgba = ImageOps.exif_transpose(img).convert("RGBA")
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
        EOFError,
        struct.error,
    ) as exc:
        raise DecodeFailureError(
            f"Could not decode {source_name or '<bytes>'}: {exc}"
        ) from exc

    logger.debug("Decoded %s: %dx%d", source_name or "<bytes>", rgba.width, rgba.height)
    return ImageSurface(
        image=rgba,
        width=rgba.width,
        height=rgba.height,
        mime_type=mime_type,
        source_name=source_name,
    )


def load_image_path(path: str | Path, mime_type: str | None = None) -> ImageSurface:
    """Read an image file from disk and decode it.

    When *mime_type* is not given it is inferred from the extension.
    """
    path = Path(path)
    data = path.read_bytes()
    return load_image(data, mime_type or guess_mime_type(path), source_name=path.name)


def encode_png(image: Image.Image) -> bytes:
    """Losslessly encode *image* as PNG bytes."""
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def stitch_tiles(tiles: Sequence[Tile], cols: int) -> np.ndarray:
    """Reassemble row-major *tiles* into one (H, W, 4) uint8 array.

    The result covers only the area the tiles were cut from, so any
    remainder strip of the source is absent.
    """
    if not tiles:
        raise ValueError("No tiles to stitch")
    if len(tiles) % cols:
        raise ValueError(f"{len(tiles)} tiles do not fill rows of {cols}")

    ordered = sorted(tiles, key=lambda t: t.index)
    rows = [
        np.concatenate([t.to_array() for t in ordered[i : i + cols]], axis=1)
        for i in range(0, len(ordered), cols)
    ]
    return np.concatenate(rows, axis=0)


def make_contact_sheet(
    tiles: Sequence[Tile],
    cols: int,
    output_path: str | Path | None = None,
    cell: int = 128,
) -> Image.Image:
    """Lay out every tile in its grid position with a ``#index`` label.

    Each tile is scaled to fit a *cell* x *cell* box (nearest neighbour,
    aspect ratio kept). The sheet is saved when *output_path* is given.
    """
    if not tiles:
        raise ValueError("No tiles to preview")

    tw, th = tiles[0].width, tiles[0].height
    scale = cell / max(tw, th)
    panel_w = max(1, round(tw * scale))
    panel_h = max(1, round(th * scale))
    label_height = 22
    gap = 8

    rows = -(-len(tiles) // cols)
    total_w = cols * panel_w + (cols - 1) * gap
    total_h = rows * (panel_h + label_height) + (rows - 1) * gap

    canvas = Image.new("RGB", (total_w, total_h), (30, 30, 30))
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 12,
        )
    except OSError:
        font = ImageFont.load_default()

    for tile in tiles:
        x = tile.col * (panel_w + gap)
        y = tile.row * (panel_h + label_height + gap)
        panel = tile.to_image().convert("RGBA").resize((panel_w, panel_h), Image.NEAREST)
        canvas.paste(panel, (x, y + label_height), panel)

        label = f"#{tile.index}"
        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        draw.text((x + (panel_w - text_w) // 2, y + 4), label, fill=(220, 220, 220), font=font)

    if output_path is not None:
        canvas.save(output_path)
    return canvas
