"""Ray data structure and reflection helpers for the Taichi kernels.

This module provides the Ray dataclass and the reflection and origin-offset
helpers used by shading. Plain vector math goes through taichi.math
directly. All functions are Taichi functions and are meant to be called
from inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(1.0, 0.0, 0.0)
    >>> ray = Ray(origin=origin, direction=direction)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and a unit direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3). Every producer in this
            package normalizes it; the sphere test relies on that.
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect a vector about a normal.

    Computes incident - 2 * (incident . normal) * normal. The normal should
    be unit length. The sign convention of ``incident`` is preserved, so a
    direction pointing toward the surface comes back pointing away from it
    and a direction pointing away from the surface (toward a light) comes
    back mirrored through the surface.

    Args:
        incident: The vector to reflect.
        normal: The surface normal (unit length).

    Returns:
        The reflected vector (unit length if incident is).
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def offset_ray_origin(point: vec3, normal: vec3, direction: vec3, epsilon: ti.f32) -> vec3:
    """Offset a ray origin off a surface to avoid self-intersection.

    Pushes the point along the normal, on the side of the surface the new
    ray travels into.

    Args:
        point: The surface point.
        normal: The surface normal at the point.
        direction: Direction of the ray that will leave the point.
        epsilon: Offset distance.

    Returns:
        The offset origin point.
    """
    offset_dir = normal
    if tm.dot(direction, normal) < 0.0:
        offset_dir = -normal
    return point + epsilon * offset_dir
