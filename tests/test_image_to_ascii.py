"""Tests for the image and export commands."""

import pytest
from PIL import Image

from ascii_mosaic import export_ascii, image_to_ascii

# --- Fixtures ---


@pytest.fixture
def black_png(tmp_path):
    path = tmp_path / "black.png"
    Image.new("RGB", (100, 40), (0, 0, 0)).save(path)
    return path


@pytest.fixture
def red_png(tmp_path):
    path = tmp_path / "red.png"
    Image.new("RGB", (10, 10), (255, 0, 0)).save(path)
    return path


# --- image ---


class TestImageCommand:
    def test_prints_text(self, black_png, capsys):
        assert image_to_ascii.main([str(black_png), "-d", "high", "-w", "50"]) == 0
        out = capsys.readouterr().out
        lines = out.splitlines()
        assert len(lines) == 10
        assert all(line == "@" * 50 for line in lines)

    def test_width_is_clamped(self, black_png, capsys):
        image_to_ascii.main([str(black_png), "-w", "5"])
        assert len(capsys.readouterr().out.splitlines()[0]) == 50

    def test_color_preview_uses_ansi(self, red_png, capsys):
        image_to_ascii.main([str(red_png), "-c", "-w", "50"])
        assert "\x1b[38;2;255;0;0m" in capsys.readouterr().out

    def test_writes_text_file(self, black_png, tmp_path):
        out = tmp_path / "art.txt"
        assert image_to_ascii.main([str(black_png), "-w", "60", "-o", str(out)]) == 0
        text = out.read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert "<" not in text

    def test_writes_html_file(self, red_png, tmp_path):
        out = tmp_path / "art.html"
        assert image_to_ascii.main([str(red_png), "-c", "-o", str(out), "--title", "Red"]) == 0
        doc = out.read_text(encoding="utf-8")
        assert "<title>Red</title>" in doc
        assert "rgb(255,0,0)" in doc

    def test_missing_file(self, tmp_path, capsys):
        assert image_to_ascii.main([str(tmp_path / "missing.png")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_bad_detail_exits(self, black_png):
        with pytest.raises(SystemExit):
            image_to_ascii.main([str(black_png), "-d", "ultra"])


# --- export ---


class TestExportCommand:
    def test_monochrome_download_name(self, black_png, tmp_path, capsys):
        assert export_ascii.main([str(black_png), "--dir", str(tmp_path)]) == 0
        written = tmp_path / "ascii-art.txt"
        assert written.exists()
        assert str(written) in capsys.readouterr().out

    def test_colorized_download_name(self, red_png, tmp_path):
        assert export_ascii.main([str(red_png), "-c", "--dir", str(tmp_path)]) == 0
        assert (tmp_path / "ascii-art.html").read_text(encoding="utf-8").startswith("<!DOCTYPE html>")

    def test_missing_directory(self, black_png, tmp_path, capsys):
        assert export_ascii.main([str(black_png), "--dir", str(tmp_path / "nope")]) == 1
        assert "Not a directory" in capsys.readouterr().err

    def test_undecodable_input(self, tmp_path, capsys):
        bad = tmp_path / "bad.png"
        bad.write_bytes(b"not an image")
        assert export_ascii.main([str(bad), "--dir", str(tmp_path)]) == 1
        assert not (tmp_path / "ascii-art.txt").exists()
