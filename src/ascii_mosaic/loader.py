"""Decode image sources into RGB bitmaps."""

import base64
import binascii
import io
import logging
from pathlib import Path
from typing import BinaryIO, Union

from PIL import Image, UnidentifiedImageError

from .errors import DecodeError

LOG = logging.getLogger(__name__)

Source = Union[str, Path, bytes, bytearray, BinaryIO, Image.Image]


def decode_data_uri(uri: str) -> bytes:
    """Return the payload of a ``data:`` URI (base64 or plain)."""
    header, sep, payload = uri.partition(",")
    if not sep or not header.startswith("data:"):
        raise DecodeError("Malformed data URI")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"Malformed base64 payload: {e}") from e
    return payload.encode("latin-1")


def _open(source: Source) -> Image.Image:
    if isinstance(source, Image.Image):
        return source
    if isinstance(source, (bytes, bytearray)):
        return Image.open(io.BytesIO(bytes(source)))
    if isinstance(source, str) and source.startswith("data:"):
        return Image.open(io.BytesIO(decode_data_uri(source)))
    if isinstance(source, (str, Path)):
        return Image.open(Path(source))
    return Image.open(source)


def load_bitmap(source: Source) -> Image.Image:
    """Decode ``source`` and return it as a fully loaded RGB image.

    Accepts a path, raw bytes, a binary file object, a data URI or an
    already-open image. Animated formats yield their first frame.
    """
    try:
        img = _open(source)
        if getattr(img, "is_animated", False):
            img.seek(0)
        rgb = img.convert("RGB")
        rgb.load()
    except DecodeError:
        raise
    except FileNotFoundError as e:
        raise DecodeError(f"File not found: {e.filename}") from e
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as e:
        raise DecodeError(f"Cannot decode image: {e}") from e

    LOG.debug("Decoded %s image %dx%d", img.format or img.mode, rgb.width, rgb.height)
    return rgb
