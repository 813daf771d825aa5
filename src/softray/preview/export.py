"""Image sinks and PNG export for rendered images.

render() returns an (H, W, 3) uint8 array and, when given a sink, hands
every pixel to it through ``sink.set(x, y, (r, g, b))`` once the whole
image is computed. Two sinks are provided:

    ArraySink: collects pixels into a NumPy buffer
    PillowImageSink: writes pixels into a PIL image

Any failure raised by a sink is wrapped in ImageOutputError.

Example:
    >>> from softray.preview.export import PillowImageSink, save_png
    >>> from softray.core.renderer import render
    >>>
    >>> sink = PillowImageSink(800, 800)
    >>> pixels = render(scene, sink=sink)
    >>> sink.save("output.png")
    >>> save_png(pixels, "copy.png")
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)

RGB8 = tuple[int, int, int]


class ImageOutputError(Exception):
    """Raised when a rendered image cannot be delivered or written."""


@runtime_checkable
class ImageSink(Protocol):
    """Receiver of finished pixels, addressed with y = 0 at the top row."""

    def set(self, x: int, y: int, color: RGB8) -> None: ...


class ArraySink:
    """Image sink backed by a (height, width, 3) uint8 NumPy array."""

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.uint8)

    def set(self, x: int, y: int, color: RGB8) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        self.pixels[y, x] = color


class PillowImageSink:
    """Image sink writing into an RGB Pillow image.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self.image = PILImage.new("RGB", (width, height))

    def set(self, x: int, y: int, color: RGB8) -> None:
        self.image.putpixel((x, y), tuple(int(c) for c in color))

    def save(self, filepath: str) -> None:
        """Write the image to disk.

        Raises:
            ImageOutputError: If the file cannot be written.
        """
        try:
            self.image.save(filepath)
        except (OSError, ValueError) as exc:
            raise ImageOutputError(f"Failed to write image to {filepath}: {exc}") from exc


def write_pixels(pixels: npt.NDArray[np.uint8], sink: ImageSink) -> None:
    """Deliver every pixel of a finished image to a sink.

    Pixels are sent row by row from the top-left corner.

    Args:
        pixels: Image array of shape (H, W, 3), dtype uint8.
        sink: The receiving sink.

    Raises:
        ImageOutputError: If the sink rejects a pixel.
    """
    height, width = pixels.shape[:2]
    try:
        for y in range(height):
            for x in range(width):
                r, g, b = pixels[y, x]
                sink.set(x, y, (int(r), int(g), int(b)))
    except Exception as exc:
        raise ImageOutputError(f"Image sink failed at pixel ({x}, {y}): {exc}") from exc

    logger.debug("Delivered %dx%d pixels to %s", width, height, type(sink).__name__)


def save_png(pixels: npt.NDArray[np.uint8], filepath: str) -> None:
    """Save a rendered image as an 8-bit RGB PNG file.

    Args:
        pixels: Image array of shape (H, W, 3), dtype uint8.
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the array is not an (H, W, 3) image.
        ImageOutputError: If the file cannot be written.
    """
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {pixels.shape}")

    pil_image = PILImage.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
    try:
        pil_image.save(filepath, format="PNG")
    except OSError as exc:
        raise ImageOutputError(f"Failed to write PNG to {filepath}: {exc}") from exc

    logger.info("Saved %dx%d image to %s", pixels.shape[1], pixels.shape[0], filepath)

