"""Resample a bitmap onto a character grid and pick a glyph per cell."""

import logging
import math
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

import numpy as np
from PIL import Image

from .errors import InvalidDimensions

LOG = logging.getLogger(__name__)

RGB = Tuple[int, int, int]
Bitmap = Union[Image.Image, np.ndarray]

# -----------------------------
# Ramps (darkest -> lightest)
# -----------------------------

HIGH_RAMP = "@%#*+=-:. "
MEDIUM_RAMP = HIGH_RAMP[:7]
LOW_RAMP = "@%#+-. "

RAMPS = {
    "low": LOW_RAMP,
    "medium": MEDIUM_RAMP,
    "high": HIGH_RAMP,
}

# Quality names from the web front end.
DETAIL_ALIASES = {
    "regular": "low",
    "intermediate": "medium",
    "detailed": "high",
}

MIN_WIDTH = 50
MAX_WIDTH = 200

# Glyphs are roughly twice as tall as they are wide.
ROW_ASPECT = 0.5


def normalize_detail(detail: str) -> str:
    key = detail.strip().lower()
    key = DETAIL_ALIASES.get(key, key)
    if key not in RAMPS:
        raise ValueError(f"Unknown detail level: {detail}")
    return key


def ramp_for(detail: str) -> str:
    """Return the glyph ramp for a detail level (aliases accepted)."""
    return RAMPS[normalize_detail(detail)]


def clamp_width(value: int) -> int:
    return max(MIN_WIDTH, min(MAX_WIDTH, int(value)))


def glyph_for(brightness: float, ramp: str, invert: bool = False) -> str:
    """Map a 0..255 brightness to a glyph; dark values land on the heavy end."""
    last = len(ramp) - 1
    level = min(last, max(0, math.floor((brightness / 255) * last)))
    return ramp[last - level] if invert else ramp[level]


# -----------------------------
# Data model
# -----------------------------


@dataclass
class ConversionOptions:
    detail: str = "medium"
    width: int = 100
    colorize: bool = False
    invert: bool = False  # light-on-dark: bright pixels take the heavy glyphs

    def __post_init__(self):
        self.detail = normalize_detail(self.detail)
        if isinstance(self.width, bool) or not isinstance(self.width, int) or self.width < 1:
            raise ValueError(f"width must be a positive integer, got {self.width!r}")

    @property
    def ramp(self) -> str:
        return RAMPS[self.detail]


@dataclass(frozen=True)
class CharacterGrid:
    lines: Tuple[str, ...]
    colors: Optional[Tuple[Tuple[RGB, ...], ...]] = None

    @property
    def height(self) -> int:
        return len(self.lines)

    @property
    def width(self) -> int:
        return len(self.lines[0]) if self.lines else 0

    @property
    def colorized(self) -> bool:
        return self.colors is not None

    def cell(self, row: int, col: int) -> Tuple[str, Optional[RGB]]:
        rgb = self.colors[row][col] if self.colors is not None else None
        return self.lines[row][col], rgb

    def rows(self) -> Iterator[Tuple[Tuple[str, Optional[RGB]], ...]]:
        """Yield each row as (glyph, rgb-or-None) pairs."""
        for r, line in enumerate(self.lines):
            if self.colors is None:
                yield tuple((ch, None) for ch in line)
            else:
                yield tuple(zip(line, self.colors[r]))

    def __iter__(self):
        return self.rows()


# -----------------------------
# Conversion
# -----------------------------


def bitmap_size(bitmap: Bitmap) -> Tuple[int, int]:
    """Return (width, height) of a PIL image or an HxW[xC] array."""
    if isinstance(bitmap, Image.Image):
        return bitmap.size
    arr = np.asarray(bitmap)
    if arr.ndim < 2:
        raise InvalidDimensions(0, 0)
    return int(arr.shape[1]), int(arr.shape[0])


def grid_size(src_w: int, src_h: int, cols: int) -> Tuple[int, int]:
    """Return (cols, rows) of the output grid for a source of src_w x src_h."""
    if src_w <= 0 or src_h <= 0:
        raise InvalidDimensions(src_w, src_h)
    aspect = src_h / src_w
    rows = max(1, math.floor(cols * aspect * ROW_ASPECT))
    return cols, rows


def _to_rgb_image(bitmap: Bitmap) -> Image.Image:
    if isinstance(bitmap, Image.Image):
        return bitmap if bitmap.mode == "RGB" else bitmap.convert("RGB")
    arr = np.clip(np.asarray(bitmap), 0, 255).astype(np.uint8)
    if arr.ndim == 3 and arr.shape[2] == 1:
        arr = arr[:, :, 0]
    if arr.ndim == 2:
        return Image.fromarray(arr).convert("RGB")
    return Image.fromarray(np.ascontiguousarray(arr[:, :, :3])).convert("RGB")


def convert(bitmap: Bitmap, options: ConversionOptions) -> CharacterGrid:
    """Convert a bitmap to a CharacterGrid.

    The bitmap is box-resampled to ``options.width`` columns and
    ``floor(width * h / w * 0.5)`` rows (at least one). Each cell's mean
    channel brightness picks a glyph from the ramp of ``options.detail``;
    with ``options.colorize`` the cell's RGB is kept alongside the glyph.

    Raises InvalidDimensions when the bitmap has no pixels.
    """
    src_w, src_h = bitmap_size(bitmap)
    cols, rows = grid_size(src_w, src_h, options.width)
    LOG.debug("Converting %dx%d bitmap to %dx%d grid (detail=%s)", src_w, src_h, cols, rows, options.detail)

    img = _to_rgb_image(bitmap).resize((cols, rows), Image.Resampling.BOX)
    rgb = np.asarray(img, dtype=np.uint8)

    ramp = options.ramp
    last = len(ramp) - 1
    brightness = rgb.sum(axis=2, dtype=np.float64) / 3
    levels = np.clip(np.floor((brightness / 255) * last), 0, last).astype(np.intp)
    if options.invert:
        levels = last - levels

    glyphs = np.array(list(ramp))[levels]
    lines = tuple("".join(row) for row in glyphs.tolist())

    colors = None
    if options.colorize:
        colors = tuple(tuple(tuple(px) for px in row) for row in rgb.tolist())

    return CharacterGrid(lines=lines, colors=colors)
