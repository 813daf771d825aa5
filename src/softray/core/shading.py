"""Local lighting with soft shadows and bounded mirror reflection.

This module implements the shading engine run for every ray:

    1. Find the nearest hit; a miss is black.
    2. Start from the ambient color.
    3. For each light, estimate the unblocked fraction with shadow rays
       toward samples on the light's disk, and add the Lambertian and Phong
       terms scaled by the light's intensity, the unblocked fraction and
       the distance falloff.
    4. If the surface is reflective and the bounce budget allows it,
       continue along the mirror direction and add the reflected color
       scaled by the reflectivity.

Reflections are followed by an explicit loop that carries the product of
the reflectivities seen so far; the loop runs at most max_depth + 1 times,
which bounds the work even between two facing mirrors.

Distance falloff:
    "linear" (default) multiplies by the distance to the light, so a
        light gets brighter on surfaces farther away.
    "inverse_square" divides by the squared distance.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softray.core.shading import configure_shading, trace_ray
    >>> configure_shading(ambient=(0.0, 0.0, 0.0), shadow_bias=1e-3,
    ...                   light_samples=16, attenuation="linear")
    >>> # Use trace_ray within a Taichi kernel
"""

from typing import Literal

import taichi as ti
import taichi.math as tm

from softray.core.color import Color
from softray.core.ray import offset_ray_origin, reflect, vec3
from softray.core.sampling import light_sample_position
from softray.scene.intersection import (
    closest_intersection,
    light_colors,
    light_intensities,
    light_positions,
    light_radii,
    material_diffuse,
    material_reflectivity,
    material_shininess,
    material_specular,
    num_lights,
)

AttenuationMode = Literal["linear", "inverse_square"]

ATTENUATION_LINEAR = 0
ATTENUATION_INVERSE_SQUARE = 1

ATTENUATION_MODES: dict[str, int] = {
    "linear": ATTENUATION_LINEAR,
    "inverse_square": ATTENUATION_INVERSE_SQUARE,
}

# =============================================================================
# Shading Configuration
# =============================================================================

_ambient = ti.Vector.field(3, dtype=ti.f32, shape=())
_shadow_bias = ti.field(dtype=ti.f32, shape=())
_light_samples = ti.field(dtype=ti.i32, shape=())
_attenuation_mode = ti.field(dtype=ti.i32, shape=())


def configure_shading(
    ambient: Color,
    shadow_bias: float,
    light_samples: int,
    attenuation: AttenuationMode,
) -> None:
    """Set the shading parameters read by the kernels.

    Args:
        ambient: Color every hit starts from.
        shadow_bias: Distance secondary rays start off the surface (> 0).
        light_samples: Shadow rays per area light (>= 1). Point lights
            always use a single ray.
        attenuation: Distance falloff mode, "linear" or "inverse_square".

    Raises:
        ValueError: If any parameter is out of range.
    """
    if attenuation not in ATTENUATION_MODES:
        raise ValueError(f"Unknown attenuation mode: {attenuation}")
    if light_samples < 1:
        raise ValueError(f"light_samples must be >= 1, got {light_samples}")
    if not shadow_bias > 0.0:
        raise ValueError(f"shadow_bias must be positive, got {shadow_bias}")

    _ambient[None] = list(ambient)
    _shadow_bias[None] = shadow_bias
    _light_samples[None] = light_samples
    _attenuation_mode[None] = ATTENUATION_MODES[attenuation]


# =============================================================================
# Lighting Terms
# =============================================================================


@ti.func
def distance_falloff(distance: ti.f32) -> ti.f32:
    """Scale factor for a light at the given distance."""
    result = distance
    if _attenuation_mode[None] == ATTENUATION_INVERSE_SQUARE:
        result = 1.0 / (distance * distance)
    return result


@ti.func
def shadow_fraction(light_index: ti.i32, point: vec3, normal: vec3) -> ti.f32:
    """Estimate how much of a light is visible from a surface point.

    Casts one shadow ray per light sample from the point (offset off the
    surface) toward the sample. A sample is blocked when the nearest hit
    along its ray is strictly closer than the sample. A light with radius 0
    is sampled once, at its exact position, so the result is either 0 or 1.

    Args:
        light_index: Index of the light in scene storage.
        point: The shaded point.
        normal: Surface normal at the point.

    Returns:
        1 - blocked / total, in [0, 1].
    """
    center = light_positions[light_index]
    radius = light_radii[light_index]

    count = 1
    if radius > 0.0:
        count = _light_samples[None]

    # Spiral basis orientation: from the light toward the shaded point
    direction = tm.normalize(point - center)

    blocked = 0
    for i in range(count):
        sample = center
        if radius > 0.0:
            sample = light_sample_position(center, radius, direction, i, count)

        origin = offset_ray_origin(point, normal, sample - point, _shadow_bias[None])
        to_sample = sample - origin
        sample_distance = tm.length(to_sample)
        rec = closest_intersection(origin, to_sample / sample_distance)
        if rec.hit == 1 and rec.t < sample_distance:
            blocked += 1

    return 1.0 - ti.cast(blocked, ti.f32) / ti.cast(count, ti.f32)


@ti.func
def shade_surface(object_index: ti.i32, point: vec3, normal: vec3, view_direction: vec3) -> vec3:
    """Ambient plus per-light diffuse and specular color at a hit point.

    Args:
        object_index: Index of the hit object (selects the material).
        point: The hit point.
        normal: Unit surface normal at the hit point.
        view_direction: Direction of the ray that hit the surface.

    Returns:
        The local (non-reflected) color; every channel is non-negative.
    """
    color = _ambient[None]

    diffuse_color = material_diffuse[object_index]
    specular_color = material_specular[object_index]
    shininess = material_shininess[object_index]

    for light_index in range(num_lights[None]):
        unblocked = shadow_fraction(light_index, point, normal)
        if unblocked > 0.0:
            to_light = light_positions[light_index] - point
            distance = tm.length(to_light)
            light_dir = to_light / distance

            attenuation = light_intensities[light_index] * unblocked * distance_falloff(distance)
            diffuse = ti.max(0.0, tm.dot(normal, light_dir)) * attenuation

            light_reflect = reflect(light_dir, normal)
            highlight = ti.max(0.0, tm.dot(light_reflect, view_direction))
            specular = attenuation * ti.pow(highlight, shininess)

            color += light_colors[light_index] * (
                diffuse * diffuse_color + specular * specular_color
            )

    return color


# =============================================================================
# Ray Tracing
# =============================================================================


@ti.func
def trace_ray(ray_origin: vec3, ray_direction: vec3, max_depth: ti.i32):
    """Compute the color seen along a ray, following mirror reflections.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction (unit length).
        max_depth: Maximum number of reflection bounces (>= 0).

    Returns:
        A tuple (color, bounces) where bounces is the number of reflection
        rays that were traced, never more than max_depth.
    """
    color = vec3(0.0, 0.0, 0.0)

    # Product of the reflectivities along the bounce chain
    weight = 1.0

    origin = ray_origin
    direction = ray_direction
    bounces = 0

    # Active flag for path continuation
    active = 1

    for depth in range(max_depth + 1):
        if active == 1:
            rec = closest_intersection(origin, direction)

            if rec.hit == 0:
                active = 0
            else:
                index = rec.object_index
                color += weight * shade_surface(index, rec.point, rec.normal, direction)

                reflectivity = material_reflectivity[index]
                if reflectivity > 0.0 and depth < max_depth:
                    weight *= reflectivity
                    direction = tm.normalize(reflect(direction, rec.normal))
                    origin = offset_ray_origin(rec.point, rec.normal, direction, _shadow_bias[None])
                    bounces += 1
                else:
                    active = 0

    return color, bounces
