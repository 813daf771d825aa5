"""Deterministic sample patterns for anti-aliasing and soft shadows.

Two patterns are used by the renderer, neither of them random, so a render
is a pure function of the scene and settings:

    anti_aliasing_offsets: a regular n x n grid of sub-pixel offsets,
        computed on the host and uploaded once per render.
    light_sample_position: points on a spiral covering a light's disk,
        computed inside kernels per shaded point.

Example:
    >>> from softray.core.sampling import anti_aliasing_offsets
    >>> anti_aliasing_offsets(2).tolist()
    [[-0.25, -0.25], [-0.25, 0.25], [0.25, -0.25], [0.25, 0.25]]
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from softray.core.ray import vec3

# Offsets closer to zero than this are snapped to exactly zero
AA_SNAP_EPSILON = 1e-9

# Number of turns the light sample spiral makes over the disk
REVOLUTIONS = 2

# Global up reference for the light sample basis, and the fallback used when
# the light direction is parallel to it
LIGHT_UP_REFERENCE = vec3(0.0, 0.0, 1.0)
LIGHT_UP_FALLBACK = vec3(0.0, 1.0, 0.0)


def anti_aliasing_offsets(grid_size: int) -> npt.NDArray[np.float64]:
    """Build the sub-pixel offset grid used for supersampling.

    The grid has grid_size x grid_size points spaced 1/grid_size apart and
    centered on zero, ordered x-major: (x0, y0), (x0, y1), ... A grid size
    of 1 yields the single offset (0, 0).

    Args:
        grid_size: Number of samples along each pixel axis (>= 1).

    Returns:
        Array of shape (grid_size**2, 2) holding (dx, dy) offsets.

    Raises:
        ValueError: If grid_size is less than 1.
    """
    if grid_size < 1:
        raise ValueError(f"Anti-aliasing grid size must be >= 1, got {grid_size}")

    delta = 1.0 / grid_size
    start = 0.5 * (1.0 - delta)
    steps = np.arange(grid_size, dtype=np.float64) * delta - start

    xs, ys = np.meshgrid(steps, steps, indexing="ij")
    offsets = np.stack([xs.ravel(), ys.ravel()], axis=1)
    offsets[np.abs(offsets) < AA_SNAP_EPSILON] = 0.0
    return offsets


@ti.func
def light_sample_basis(direction: vec3):
    """Build an orthonormal (right, up) pair perpendicular to a direction.

    Args:
        direction: Unit direction from the light toward the shaded point.

    Returns:
        A tuple (right, up) of unit vectors, both perpendicular to direction.
    """
    side = tm.cross(direction, LIGHT_UP_REFERENCE)
    if tm.length(side) < 1e-6:
        side = tm.cross(direction, LIGHT_UP_FALLBACK)
    right = tm.normalize(side)
    up = tm.cross(right, direction)
    return right, up


@ti.func
def light_sample_position(
    center: vec3,
    radius: ti.f32,
    direction: vec3,
    index: ti.i32,
    count: ti.i32,
) -> vec3:
    """Position of one sample on a light's spiral pattern.

    Sample i of n lies at fraction s = i/n along a spiral of REVOLUTIONS
    turns: angle 2*REVOLUTIONS*pi*s, distance s*radius from the center, in
    the plane perpendicular to ``direction``. Sample 0 is the center itself.

    Args:
        center: Light center.
        radius: Light radius.
        direction: Unit direction from the light toward the shaded point.
        index: Sample index in [0, count).
        count: Total number of samples.

    Returns:
        The world-space sample position.
    """
    right, up = light_sample_basis(direction)
    scaler = ti.cast(index, ti.f32) / ti.cast(count, ti.f32)
    theta = 2.0 * REVOLUTIONS * tm.pi * scaler
    sample_radius = scaler * radius
    offset = sample_radius * (ti.cos(theta) * right + ti.sin(theta) * up)
    return center + offset
