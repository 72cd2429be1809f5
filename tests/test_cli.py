"""Tests for the Typer command-line interface."""

from __future__ import annotations

import zipfile
from pathlib import Path

import numpy as np
import pytest
from PIL import Image
from typer.testing import CliRunner

from puzzle_splitter.cli import app

runner = CliRunner()


@pytest.fixture
def tmp_image(tmp_path: Path) -> Path:
    """64x48 RGB test image."""
    img = Image.fromarray(
        np.random.default_rng(0).integers(0, 256, (48, 64, 3), dtype=np.uint8),
    )
    p = tmp_path / "photo.png"
    img.save(p)
    return p


class TestSplit:
    def test_writes_pieces(self, tmp_image: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        result = runner.invoke(
            app, ["split", str(tmp_image), "-r", "2", "-c", "3", "-o", str(out), "--zip"],
        )
        assert result.exit_code == 0, result.output
        names = sorted(p.name for p in (out / "photo").iterdir())
        assert names == sorted(f"puzzle_piece_{i}.png" for i in range(1, 7))
        assert Image.open(out / "photo" / "puzzle_piece_1.png").size == (21, 24)
        assert (out / "photo_preview.png").exists()
        with zipfile.ZipFile(out / "photo_pieces.zip") as zf:
            assert len(zf.namelist()) == 6

    def test_no_preview(self, tmp_image: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        result = runner.invoke(app, ["split", str(tmp_image), "-o", str(out), "--no-preview"])
        assert result.exit_code == 0, result.output
        assert not (out / "photo_preview.png").exists()
        assert len(list((out / "photo").iterdir())) == 9

    def test_non_numeric_grid_defaults_to_one(self, tmp_image: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        result = runner.invoke(
            app, ["split", str(tmp_image), "-r", "x", "-c", "0", "-o", str(out)],
        )
        assert result.exit_code == 0, result.output
        assert [p.name for p in (out / "photo").iterdir()] == ["puzzle_piece_1.png"]

    def test_grid_out_of_range(self, tmp_image: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        result = runner.invoke(app, ["split", str(tmp_image), "-r", "21", "-o", str(out)])
        assert result.exit_code == 1
        assert not (out / "photo").exists()

    def test_not_an_image(self, tmp_path: Path) -> None:
        p = tmp_path / "notes.txt"
        p.write_text("hello")
        result = runner.invoke(app, ["split", str(p), "-o", str(tmp_path / "out")])
        assert result.exit_code == 1


class TestBatch:
    def test_empty_folder(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["batch", "-i", str(tmp_path / "missing")])
        assert result.exit_code == 0
        assert "No images found" in result.output

    def test_splits_every_image(self, tmp_image: Path, tmp_path: Path) -> None:
        second = tmp_path / "second.png"
        Image.new("RGB", (10, 10), (255, 0, 0)).save(second)
        out = tmp_path / "out"
        result = runner.invoke(
            app, ["batch", "-i", str(tmp_path), "-o", str(out), "-r", "2", "-c", "2"],
        )
        assert result.exit_code == 0, result.output
        assert len(list((out / "photo").iterdir())) == 4
        assert len(list((out / "second").iterdir())) == 4

    def test_corrupt_file_does_not_abort(self, tmp_image: Path, tmp_path: Path) -> None:
        (tmp_path / "broken.png").write_bytes(b"P6\n\x077 7\n255\n" + b"\0" * 10)
        out = tmp_path / "out"
        result = runner.invoke(app, ["batch", "-i", str(tmp_path), "-o", str(out)])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert not (out / "broken").exists()
        assert len(list((out / "photo").iterdir())) == 9


class TestInfo:
    def test_geometry(self, tmp_image: Path) -> None:
        result = runner.invoke(app, ["info", str(tmp_image)])
        assert result.exit_code == 0, result.output
        assert "64 x 48 px" in result.output
        assert "Piece: 21 x 16 px" in result.output
        assert "Excluded: 1 px right, 0 px bottom" in result.output

    def test_invalid_grid(self, tmp_image: Path) -> None:
        result = runner.invoke(app, ["info", str(tmp_image), "-c", "30"])
        assert result.exit_code == 1
