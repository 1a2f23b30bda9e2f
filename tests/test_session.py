"""Tests for session module."""

import io

import pytest
from PIL import Image

from ascii_mosaic.export import to_html_body, to_text
from ascii_mosaic.rasterizer import ConversionOptions
from ascii_mosaic.session import LOAD_ERROR_MESSAGE, ConversionSession

# --- Fixtures ---


@pytest.fixture
def png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (40, 20), (0, 0, 0)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def session():
    with ConversionSession(ConversionOptions(detail="high", width=50)) as s:
        yield s


# --- Tests ---


class TestLoad:
    def test_load_converts(self, session, png_bytes):
        grid = session.load(png_bytes)
        assert grid is session.grid
        assert grid.width == 50
        assert grid.height == 12
        assert session.error is None
        assert session.art == to_text(grid)

    def test_bad_image_sets_error(self, session, png_bytes):
        session.load(png_bytes)
        assert session.load(b"garbage") is None
        assert session.grid is None
        assert session.bitmap is None
        assert session.error == LOAD_ERROR_MESSAGE
        assert session.art == ""
        assert session.download() is None

    def test_width_is_clamped_on_creation(self):
        with ConversionSession(ConversionOptions(width=10)) as s:
            assert s.options.width == 50


class TestUpdate:
    def test_update_without_image(self, session):
        assert session.update(detail="low") is None
        assert session.options.detail == "low"

    def test_update_reconverts(self, session, png_bytes):
        session.load(png_bytes)
        grid = session.update(width=100, colorize=True)
        assert grid.width == 100
        assert grid.colorized
        assert session.art == to_html_body(grid)
        assert "rgb(0,0,0)" in session.art

    def test_width_clamped(self, session, png_bytes):
        session.load(png_bytes)
        assert session.update(width=500).width == 200
        assert session.update(width=1).width == 50

    def test_unknown_detail(self, session):
        with pytest.raises(ValueError):
            session.update(detail="extreme")

    def test_download_follows_colorize(self, session, png_bytes):
        session.load(png_bytes)
        assert session.download().filename == "ascii-art.txt"
        session.update(colorize=True)
        assert session.download().filename == "ascii-art.html"


class TestSubmit:
    def test_submit_without_image(self, session):
        assert session.submit(width=80).result() is None

    def test_submit_publishes(self, session, png_bytes):
        session.load(png_bytes)
        grid = session.submit(width=60).result(timeout=10)
        assert grid.width == 60
        assert session.grid == grid

    def test_last_request_wins(self, session, png_bytes):
        session.load(png_bytes)
        futures = [session.submit(width=w) for w in (70, 90, 110, 130)]
        for f in futures:
            f.result(timeout=10)
        assert session.grid.width == 130
        assert session.options.width == 130
