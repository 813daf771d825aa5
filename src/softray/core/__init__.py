"""Core rendering module.

Components:
    ray: Ray data structure and reflection helpers
    color: Color constants and the final byte conversion
    sampling: Anti-aliasing grid and light sample spiral
    shading: Lighting, soft shadows and mirror reflection
    renderer: Parallel pixel loop and render()
"""

from .color import BLACK, BLUE, GREEN, RED, WHITE, Color, color_to_rgb8, scale_color
from .ray import Ray, make_ray, offset_ray_origin, reflect, vec3
from .sampling import anti_aliasing_offsets, light_sample_position

# Note: shading and renderer are NOT imported here; they declare Taichi fields
# and depend on softray.scene. Import them directly when needed:
#   from softray.core.renderer import RenderSettings, render

__all__ = [
    "Ray",
    "make_ray",
    "vec3",
    "reflect",
    "offset_ray_origin",
    "Color",
    "BLACK",
    "WHITE",
    "RED",
    "GREEN",
    "BLUE",
    "scale_color",
    "color_to_rgb8",
    "anti_aliasing_offsets",
    "light_sample_position",
]
