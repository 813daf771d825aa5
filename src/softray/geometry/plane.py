"""Infinite plane primitive with ray-plane intersection.

A plane is defined by any point P0 on it and a unit normal N. The normal is
part of the plane's identity: hits report N as-is, whichever side the ray
arrives from.

Ray-plane intersection for a ray L0 + t*L:
    t = dot(P0 - L0, N) / dot(L, N)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softray.geometry.plane import Plane, hit_plane
    >>> # Floor plane at z=-1 facing up
    >>> floor = Plane(
    ...     point=ti.math.vec3(0, 0, -1),
    ...     normal=ti.math.vec3(0, 0, 1),
    ... )
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from softray.core.ray import vec3
from softray.geometry.sphere import HitRecord


@ti.dataclass
class Plane:
    """An infinite plane defined by a point and a unit normal.

    Attributes:
        point: Any point on the plane (vec3).
        normal: Unit normal of the plane (vec3).
    """

    point: vec3
    normal: vec3


@ti.func
def hit_plane(ray_origin: vec3, ray_direction: vec3, plane: Plane) -> HitRecord:
    """Test for ray-plane intersection.

    A ray exactly parallel to the plane (dot(direction, normal) == 0) never
    hits it. Hits at t <= 0 are rejected.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction (unit length).
        plane: The plane to test intersection against.

    Returns:
        A HitRecord containing intersection information. Check hit field
        to determine if intersection occurred.
    """
    denom = tm.dot(ray_direction, plane.normal)

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    if denom != 0.0:
        t = tm.dot(plane.point - ray_origin, plane.normal) / denom
        if t > 0.0:
            did_hit = 1
            hit_t = t
            hit_point = ray_origin + t * ray_direction
            hit_normal = plane.normal

    return HitRecord(hit=did_hit, t=hit_t, point=hit_point, normal=hit_normal)

