#!/usr/bin/env python3
"""Convert an image to ASCII art and print it or write it to a file."""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from .errors import ConversionError
from .export import Artifact, HtmlOptions, save_artifact, to_ansi, to_html, to_text
from .loader import load_bitmap
from .rasterizer import MAX_WIDTH, MIN_WIDTH, RAMPS, CharacterGrid, ConversionOptions, clamp_width, convert

LOG = logging.getLogger(__name__)


# -----------------------------
# Shared argument handling
# -----------------------------

def add_conversion_arguments(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("input", help="Input image path")
    ap.add_argument(
        "-d",
        "--detail",
        choices=sorted(RAMPS),
        default="medium",
        help="Character set: low, medium (default) or high",
    )
    ap.add_argument(
        "-w",
        "--width",
        type=int,
        default=100,
        help=f"Output width in characters, clamped to {MIN_WIDTH}..{MAX_WIDTH} (default: 100)",
    )
    ap.add_argument("-c", "--color", action="store_true", help="Keep the source colors (HTML / ANSI output)")
    ap.add_argument(
        "--invert",
        action="store_true",
        help="Bright pixels get the heavy glyphs (for light-on-dark display)",
    )
    ap.add_argument(
        "--title",
        default=HtmlOptions.title,
        help="HTML document title",
    )
    ap.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: WARNING)",
    )


def setup_logging(level_name: str) -> None:
    numeric_level = getattr(logging, level_name.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING
    logging.basicConfig(stream=sys.stderr, level=numeric_level, format="%(levelname)s: %(message)s")


def options_from_args(args: argparse.Namespace) -> ConversionOptions:
    width = clamp_width(args.width)
    if width != args.width:
        LOG.info("Width %d clamped to %d", args.width, width)
    return ConversionOptions(detail=args.detail, width=width, colorize=args.color, invert=args.invert)


def convert_file(path: str, options: ConversionOptions) -> CharacterGrid:
    t0 = time.perf_counter()
    bitmap = load_bitmap(path)
    grid = convert(bitmap, options)
    LOG.debug("Converted %s to %dx%d in %.3fs", path, grid.width, grid.height, time.perf_counter() - t0)
    return grid


def run(args: argparse.Namespace, write) -> int:
    """Parse-independent driver: convert, then hand the grid to ``write``."""
    setup_logging(args.log_level)
    try:
        options = options_from_args(args)
        grid = convert_file(args.input, options)
    except ConversionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return write(grid)


# -----------------------------
# CLI
# -----------------------------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="ascii-mosaic image", description="Render an image as ASCII art")
    add_conversion_arguments(ap)
    ap.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output file (.html writes a document, anything else plain text; default: stdout)",
    )
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    html_options = HtmlOptions(title=args.title)

    def write(grid: CharacterGrid) -> int:
        if not args.output:
            sys.stdout.write(to_ansi(grid) if grid.colorized else to_text(grid))
            return 0
        if Path(args.output).suffix.lower() == ".html" or grid.colorized:
            artifact = Artifact(Path(args.output).name, to_html(grid, html_options), "text/html")
        else:
            artifact = Artifact(Path(args.output).name, to_text(grid), "text/plain")
        save_artifact(artifact, args.output)
        return 0

    return run(args, write)


if __name__ == "__main__":
    raise SystemExit(main())
