"""Matplotlib-based preview display for rendered images.

Example:
    >>> from softray.preview.display import show_preview
    >>> from softray.core.renderer import render
    >>>
    >>> pixels = render(scene)
    >>> show_preview(pixels, title="Three spheres")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def show_preview(
    pixels: npt.NDArray[np.uint8],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a rendered image as a Matplotlib figure.

    Args:
        pixels: Image array of shape (H, W, 3), dtype uint8.
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.

    Raises:
        ValueError: If the array is not an (H, W, 3) image.
    """
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {pixels.shape}")

    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    # uint8 data is shown as-is, top row first
    ax.imshow(pixels, interpolation="nearest")
    ax.axis("off")

    if title is None:
        height, width = pixels.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
