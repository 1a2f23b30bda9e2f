#!/usr/bin/env python3
"""Convert an image and save it under the download name (ascii-art.txt / .html)."""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .export import HtmlOptions, artifact_for, save_artifact
from .image_to_ascii import add_conversion_arguments, run


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="ascii-mosaic export",
        description="Convert an image and save ascii-art.txt (or ascii-art.html with --color)",
    )
    add_conversion_arguments(ap)
    ap.add_argument("--dir", default=".", help="Directory to write into (default: current directory)")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    out_dir = Path(args.dir)
    if not out_dir.is_dir():
        print(f"Not a directory: {out_dir}", file=sys.stderr)
        return 1

    def write(grid) -> int:
        artifact = artifact_for(grid, HtmlOptions(title=args.title))
        print(save_artifact(artifact, out_dir))
        return 0

    return run(args, write)


if __name__ == "__main__":
    raise SystemExit(main())
