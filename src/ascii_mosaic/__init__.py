"""ASCII Mosaic - Convert images to character mosaics."""

__version__ = "0.1.0"

"""
Command entry points are lazy wrappers so that running a submodule with
`-m` does not find it already imported through the package `__init__`.
"""


def image_to_ascii_main(*args, **kwargs):
    from .image_to_ascii import main as _m

    return _m(*args, **kwargs)


def export_main(*args, **kwargs):
    from .export_ascii import main as _m

    return _m(*args, **kwargs)


__all__ = [
    "export_main",
    "image_to_ascii_main",
]
