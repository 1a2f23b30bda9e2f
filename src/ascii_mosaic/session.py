"""Conversion state for an interactive front end.

A session holds the decoded source image and the current options. Every
settings change throws away the previous grid and converts again from the
same source. ``submit`` runs the conversion on a worker thread; when several
requests overlap only the most recently submitted one is published.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace
from typing import Optional, Tuple

from PIL import Image

from .errors import ConversionError, DecodeError
from .export import Artifact, HtmlOptions, artifact_for, to_html_body, to_text
from .loader import Source, load_bitmap
from .rasterizer import CharacterGrid, ConversionOptions, clamp_width, convert

LOG = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Error loading image. Please try a different file."


class ConversionSession:
    def __init__(
        self,
        options: Optional[ConversionOptions] = None,
        html_options: Optional[HtmlOptions] = None,
        max_workers: int = 1,
    ):
        options = options or ConversionOptions()
        self.options = replace(options, width=clamp_width(options.width))
        self.html_options = html_options or HtmlOptions()
        self.bitmap: Optional[Image.Image] = None
        self.grid: Optional[CharacterGrid] = None
        self.error: Optional[str] = None

        self._lock = threading.Lock()
        self._generation = 0
        self._executor = ThreadPoolExecutor(max_workers=max_workers)

    # context manager -------------------------------------------------

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    # state -----------------------------------------------------------

    @property
    def art(self) -> str:
        """Rendered output: markup when colorized, plain text otherwise."""
        if self.grid is None:
            return ""
        return to_html_body(self.grid) if self.grid.colorized else to_text(self.grid)

    def _next_options(self, changes) -> ConversionOptions:
        if "width" in changes:
            changes["width"] = clamp_width(changes["width"])
        return replace(self.options, **changes)

    def _publish(self, generation: int, grid: Optional[CharacterGrid], error: Optional[str]) -> bool:
        with self._lock:
            if generation != self._generation:
                LOG.debug("Dropping stale result (generation %d < %d)", generation, self._generation)
                return False
            self.grid = grid
            self.error = error
            return True

    def _run(self, generation: int, bitmap: Image.Image, options: ConversionOptions) -> Optional[CharacterGrid]:
        try:
            grid = convert(bitmap, options)
        except ConversionError as e:
            LOG.error("Conversion failed: %s", e)
            self._publish(generation, None, str(e))
            return None
        self._publish(generation, grid, None)
        return grid

    def _begin(self, changes) -> Tuple[int, ConversionOptions]:
        with self._lock:
            if changes:
                self.options = self._next_options(changes)
            self._generation += 1
            return self._generation, self.options

    # operations ------------------------------------------------------

    def load(self, source: Source) -> Optional[CharacterGrid]:
        """Decode a new source image and convert it with the current options."""
        generation, options = self._begin({})
        try:
            bitmap = load_bitmap(source)
        except DecodeError as e:
            LOG.error("Error loading image for conversion: %s", e)
            self.bitmap = None
            self._publish(generation, None, LOAD_ERROR_MESSAGE)
            return None
        self.bitmap = bitmap
        return self._run(generation, bitmap, options)

    def update(self, **changes) -> Optional[CharacterGrid]:
        """Change options and reconvert the current image synchronously."""
        generation, options = self._begin(changes)
        if self.bitmap is None:
            return None
        return self._run(generation, self.bitmap, options)

    def submit(self, **changes) -> "Future[Optional[CharacterGrid]]":
        """Change options and reconvert on the worker; last request wins."""
        generation, options = self._begin(changes)
        if self.bitmap is None:
            done: Future = Future()
            done.set_result(None)
            return done
        return self._executor.submit(self._run, generation, self.bitmap, options)

    def download(self) -> Optional[Artifact]:
        if self.grid is None:
            return None
        return artifact_for(self.grid, self.html_options)
