"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview display
    export: image sinks and PNG export

Example:
    >>> from softray.preview import save_png, show_preview
    >>> from softray.core.renderer import render
    >>>
    >>> pixels = render(scene)
    >>> show_preview(pixels)
    >>> save_png(pixels, "output.png")
"""

from softray.preview.display import show_preview
from softray.preview.export import (
    ArraySink,
    ImageOutputError,
    ImageSink,
    PillowImageSink,
    save_png,
    write_pixels,
)

__all__ = [
    # Display functions
    "show_preview",
    # Sinks
    "ImageSink",
    "ArraySink",
    "PillowImageSink",
    "ImageOutputError",
    "write_pixels",
    # Export functions
    "save_png",
]
