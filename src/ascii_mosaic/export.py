import html
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .rasterizer import CharacterGrid

ESC = "\x1b"

LOG = logging.getLogger(__name__)

TEXT_FILENAME = "ascii-art.txt"
HTML_FILENAME = "ascii-art.html"


# -----------------------------
# Options / artifacts
# -----------------------------

@dataclass
class HtmlOptions:
    title: str = "Colorful ASCII Art"
    font_size_px: int = 10


@dataclass(frozen=True)
class Artifact:
    filename: str
    content: str
    media_type: str

    @property
    def extension(self) -> str:
        return Path(self.filename).suffix


# -----------------------------
# Serializers
# -----------------------------

def to_text(grid: CharacterGrid) -> str:
    """Plain text, one newline-terminated line per row."""
    return "".join(line + "\n" for line in grid.lines)


def colorize_lines_html(grid: CharacterGrid) -> List[str]:
    """One string per row: a color span per glyph, no row separator."""
    out_lines = []
    for row in grid.rows():
        parts = []
        for ch, rgb in row:
            glyph = html.escape(ch, quote=False)
            if rgb is None:
                parts.append(glyph)
            else:
                r, g, b = rgb
                parts.append(f'<span style="color:rgb({r},{g},{b})">{glyph}</span>')
        out_lines.append("".join(parts))
    return out_lines


def to_html_body(grid: CharacterGrid) -> str:
    """Markup for the inside of a <pre>.

    Colorized rows end with ``<br>``; monochrome rows are escaped text
    ending with a newline.
    """
    if not grid.colorized:
        return html.escape(to_text(grid), quote=False)
    return "".join(line + "<br>" for line in colorize_lines_html(grid))


def wrap_html(body: str, options: Optional[HtmlOptions] = None) -> str:
    opt = options or HtmlOptions()
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '  <meta charset="UTF-8">\n'
        f"  <title>{html.escape(opt.title)}</title>\n"
        "  <style>\n"
        "    body {\n"
        "      background: #000;\n"
        "      display: flex;\n"
        "      justify-content: center;\n"
        "      align-items: center;\n"
        "      min-height: 100vh;\n"
        "      margin: 0;\n"
        "      padding: 20px;\n"
        "    }\n"
        "    pre {\n"
        "      font-family: monospace;\n"
        "      line-height: 1;\n"
        "      letter-spacing: 0;\n"
        f"      font-size: {opt.font_size_px}px;\n"
        "      white-space: pre-wrap;\n"
        "    }\n"
        "  </style>\n"
        "</head>\n"
        "<body>\n"
        f"  <pre>{body}</pre>\n"
        "</body>\n"
        "</html>"
    )


def to_html(grid: CharacterGrid, options: Optional[HtmlOptions] = None) -> str:
    return wrap_html(to_html_body(grid), options)


def to_ansi(grid: CharacterGrid) -> str:
    """Terminal preview; 24-bit foreground colors when the grid carries them."""
    if not grid.colorized:
        return to_text(grid)

    out_lines = []
    for row in grid.rows():
        prev = None
        parts = []
        for ch, rgb in row:
            if rgb != prev:
                r, g, b = rgb
                parts.append(f"{ESC}[38;2;{r};{g};{b}m")
                prev = rgb
            parts.append(ch)
        parts.append(f"{ESC}[0m")
        out_lines.append("".join(parts))
    return "\n".join(out_lines) + "\n"


# -----------------------------
# Download / save
# -----------------------------

def artifact_for(grid: CharacterGrid, html_options: Optional[HtmlOptions] = None) -> Artifact:
    """Build the downloadable file: HTML when colorized, plain text otherwise."""
    if grid.colorized:
        return Artifact(HTML_FILENAME, to_html(grid, html_options), "text/html")
    return Artifact(TEXT_FILENAME, to_text(grid), "text/plain")


def save_artifact(artifact: Artifact, target: Union[str, Path]) -> Path:
    """Write ``artifact`` into a directory (under its own name) or to a file path."""
    path = Path(target)
    if path.is_dir():
        path = path / artifact.filename
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(artifact.content)
    LOG.debug("Wrote %d chars to %s", len(artifact.content), path)
    return path
