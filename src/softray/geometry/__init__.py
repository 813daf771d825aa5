"""Geometry module for shape primitives.

This module provides the closed set of primitives and their intersection
algorithms:

Components:
    sphere: Sphere primitive and the shared HitRecord
    plane: Infinite plane primitive
    shape: ShapeKind tags and the intersect_shape dispatcher

All intersection routines are Taichi functions (@ti.func). They return the
nearest hit at non-negative distance:
    rec = hit_sphere(ray_origin, ray_direction, sphere)
"""

from .plane import Plane, hit_plane
from .shape import ShapeKind, intersect_shape
from .sphere import HitRecord, Sphere, hit_sphere, miss_record

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "miss_record",
    "Plane",
    "hit_plane",
    "ShapeKind",
    "intersect_shape",
]
