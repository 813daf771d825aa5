"""Camera module for primary ray generation.

Components:
    fov: Field-of-view camera with a linear pixel-to-angle mapping

The camera state is stored in Taichi fields by setup_camera() and read by
get_primary_ray() inside the render kernel.
"""

from .fov import get_camera_info, get_primary_ray, setup_camera

__all__ = [
    "setup_camera",
    "get_primary_ray",
    "get_camera_info",
]
