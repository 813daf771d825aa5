"""Sphere primitive with ray-sphere intersection.

This module provides the Sphere dataclass, the HitRecord shared by all
primitives, and the sphere intersection routine.

The intersection solves |O + t*D - C|^2 = R^2 for a unit direction D, which
expands to t^2 + b*t + c = 0 with:
    b = 2 * dot(D, O - C)
    c = dot(O - C, O - C) - R^2

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softray.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, 0), radius=1.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from softray.core.ray import vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: Distance along the ray to the hit point. Never negative.
            Only valid if hit == 1.
        point: The 3D point where the ray met the surface.
            Only valid if hit == 1.
        normal: The unit surface normal at the hit point. Spheres report the
            outward normal, planes their fixed normal; neither is flipped
            toward the ray. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3


@ti.func
def miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> HitRecord:
    """Test for ray-sphere intersection.

    Roots are handled as follows:
        - negative discriminant: no hit
        - zero discriminant (tangent ray): t = -b/2, accepted if t >= 0
        - two roots: negative roots are discarded and the smaller
          non-negative root is returned; both negative means no hit

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction. Must be unit length.
        sphere: The sphere to test intersection against.

    Returns:
        A HitRecord with the nearest hit at distance >= 0, or a miss.
    """
    oc = ray_origin - sphere.center

    b = 2.0 * tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * c

    # Taichi requires outer-scope declaration
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    if discriminant == 0.0:
        t = -b / 2.0
        if t >= 0.0:
            did_hit = 1
            hit_t = t
    elif discriminant > 0.0:
        sqrt_d = ti.sqrt(discriminant)
        # t0 <= t1
        t0 = (-b - sqrt_d) / 2.0
        t1 = (-b + sqrt_d) / 2.0
        if t0 >= 0.0:
            did_hit = 1
            hit_t = t0
        elif t1 >= 0.0:
            # Origin inside the sphere
            did_hit = 1
            hit_t = t1

    if did_hit == 1:
        hit_point = ray_origin + hit_t * ray_direction
        hit_normal = tm.normalize(hit_point - sphere.center)

    return HitRecord(hit=did_hit, t=hit_t, point=hit_point, normal=hit_normal)

