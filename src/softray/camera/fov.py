"""Field-of-view camera for primary ray generation.

The camera maps pixel coordinates linearly to angles: a pixel's horizontal
offset from the image center, as a fraction of the image width, times the
horizontal field of view gives the angle along the camera's right vector;
the vertical angle works the same way with a vertical field of view derived
as hfov * height / width.

This is a small-angle approximation rather than a tangent-based perspective
projection. Straight lines bend noticeably at wide fields of view.

For pixel (x, y), with y = 0 at the top row:
    radians_x = (x - width/2) / width * hfov
    radians_y = (height/2 - y) / height * vfov
    direction = normalize(forward + right * radians_x + up * radians_y)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softray.camera.fov import setup_camera, get_primary_ray
    >>> from softray.scene.model import Camera
    >>> setup_camera(Camera.look_at((-10, 0, 0), (0, 0, 0)), 800, 600)
    >>> # Use get_primary_ray within a Taichi kernel
"""

import math

import numpy as np
import taichi as ti
import taichi.math as tm

from softray.core.ray import Ray, make_ray, vec3
from softray.scene.model import Camera

# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_position = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_forward = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())

# Horizontal and vertical field of view in radians
_camera_hfov = ti.field(dtype=ti.f32, shape=())
_camera_vfov = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: Camera, width: int, height: int) -> None:
    """Initialize camera state for an image of the given size.

    Args:
        camera: Camera configuration with position, orientation and FOV.
        width: Image width in pixels (> 0).
        height: Image height in pixels (> 0).

    Raises:
        ValueError: If the image dimensions are not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    forward = np.array(camera.forward, dtype=np.float64)
    up = np.array(camera.up, dtype=np.float64)

    right = np.cross(forward, up)
    right = right / np.linalg.norm(right)

    hfov = math.radians(camera.fov_degrees)
    vfov = hfov * height / width

    _camera_position[None] = list(camera.position)
    _camera_forward[None] = forward.tolist()
    _camera_right[None] = right.tolist()
    _camera_up[None] = up.tolist()
    _camera_hfov[None] = hfov
    _camera_vfov[None] = vfov


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_primary_ray(px: ti.f32, py: ti.f32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through a (sub-)pixel position.

    Args:
        px: Horizontal pixel coordinate, anti-aliasing offset included.
        py: Vertical pixel coordinate (0 = top row), offset included.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the camera position with a unit direction.
    """
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)

    radians_x = (px - w / 2.0) / w * _camera_hfov[None]
    radians_y = (h / 2.0 - py) / h * _camera_vfov[None]

    direction = tm.normalize(
        _camera_forward[None] + _camera_right[None] * radians_x + _camera_up[None] * radians_y
    )
    return make_ray(_camera_position[None], direction)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, ...]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with position, forward, right, up and fov (hfov, vfov in
        radians).
    """
    position = _camera_position[None]
    forward = _camera_forward[None]
    right = _camera_right[None]
    up = _camera_up[None]

    return {
        "position": (float(position[0]), float(position[1]), float(position[2])),
        "forward": (float(forward[0]), float(forward[1]), float(forward[2])),
        "right": (float(right[0]), float(right[1]), float(right[2])),
        "up": (float(up[0]), float(up[1]), float(up[2])),
        "fov": (float(_camera_hfov[None]), float(_camera_vfov[None])),
    }
