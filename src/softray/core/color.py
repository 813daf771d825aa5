"""Linear color constants and the final byte conversion.

Colors are plain (r, g, b) tuples on the host and vec3 values inside
kernels. Channels are linear radiance and may exceed 1.0 while being
accumulated; they are only quantized once, when a pixel is written out.
"""

import taichi as ti
import taichi.math as tm

from softray.core.ray import vec3

Color = tuple[float, float, float]

BLACK: Color = (0.0, 0.0, 0.0)
WHITE: Color = (1.0, 1.0, 1.0)
RED: Color = (1.0, 0.0, 0.0)
GREEN: Color = (0.0, 1.0, 0.0)
BLUE: Color = (0.0, 0.0, 1.0)

# Byte conversion scale: channel * 256, clamped to [0, 255]
BYTE_SCALE = 256.0
BYTE_MAX = 255.0

# 3-channel integer pixel as written by the render kernel
rgb8 = ti.types.vector(3, ti.i32)


def scale_color(color: Color, factor: float) -> Color:
    """Scale a host-side color by a non-negative factor."""
    return (color[0] * factor, color[1] * factor, color[2] * factor)


@ti.func
def color_to_rgb8(color: vec3) -> rgb8:
    """Convert a linear color to three 8-bit channel values.

    Each channel becomes clamp(0, 255, channel * 256), truncated toward
    zero. NaN and infinite channels (a shaded point sitting on a light,
    for instance) are written as 0.

    Args:
        color: Linear color to convert.

    Returns:
        An integer vector with every component in [0, 255].
    """
    result = rgb8(0, 0, 0)
    for c in ti.static(range(3)):
        value = color[c] * BYTE_SCALE
        if tm.isnan(value) or tm.isinf(value):
            value = 0.0
        result[c] = ti.cast(tm.clamp(value, 0.0, BYTE_MAX), ti.i32)
    return result
