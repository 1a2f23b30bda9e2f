"""Errors raised while turning an image into a character grid."""


class ConversionError(Exception):
    """Base class for failures that leave no grid behind."""


class DecodeError(ConversionError):
    """The source could not be decoded into a bitmap."""


class InvalidDimensions(ConversionError, ValueError):
    """The bitmap has a non-positive width or height."""

    def __init__(self, width: int, height: int):
        super().__init__(f"Invalid bitmap dimensions: {width}x{height}")
        self.width = width
        self.height = height
