"""Closed set of shape kinds and the intersection dispatcher.

Every primitive the renderer understands has a ShapeKind tag. Scene storage
keeps one tag per object plus the union of the parameters all kinds need
(an anchor point, a normal and a radius); intersect_shape switches on the
tag and forwards to the primitive's own routine.

Adding a primitive means adding a ShapeKind member, a branch here, and a
case in the scene upload (softray.scene.intersection.add_object).
"""

from enum import IntEnum

import taichi as ti

from softray.core.ray import vec3
from softray.geometry.plane import Plane, hit_plane
from softray.geometry.sphere import HitRecord, Sphere, hit_sphere, miss_record


class ShapeKind(IntEnum):
    """Enumeration of supported primitive shapes."""

    SPHERE = 0
    PLANE = 1


@ti.func
def intersect_shape(
    kind: ti.i32,
    anchor: vec3,
    normal: vec3,
    radius: ti.f32,
    ray_origin: vec3,
    ray_direction: vec3,
) -> HitRecord:
    """Intersect a ray with a tagged shape.

    Args:
        kind: The ShapeKind of the shape as an integer.
        anchor: Sphere center or a point on the plane.
        normal: Plane normal (ignored for spheres).
        radius: Sphere radius (ignored for planes).
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction (unit length).

    Returns:
        The primitive's HitRecord; unknown tags are a miss.
    """
    rec = miss_record()
    if kind == int(ShapeKind.SPHERE):
        rec = hit_sphere(ray_origin, ray_direction, Sphere(center=anchor, radius=radius))
    elif kind == int(ShapeKind.PLANE):
        rec = hit_plane(ray_origin, ray_direction, Plane(point=anchor, normal=normal))
    return rec
