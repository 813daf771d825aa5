"""Taichi-based Whitted-style ray tracer.

This package renders spheres and planes with ambient, Lambertian and Phong
lighting, soft shadows from area lights, bounded mirror reflections and
grid supersampling, on the CPU or GPU.

Subpackages:
    core: Ray utilities, sampling patterns, shading and the render loop
    geometry: Shape primitives and intersection algorithms
    scene: Immutable scene description, device storage and example scenes
    camera: Field-of-view camera with primary ray generation
    preview: Image sinks, PNG export and Matplotlib preview
"""

__version__ = "0.1.0"
