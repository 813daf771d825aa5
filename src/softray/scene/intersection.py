"""Scene storage in Taichi fields and the nearest-hit query.

The scene uploaded by the renderer is stored in fixed-capacity Taichi
fields (Structure of Arrays). Each object slot holds its ShapeKind tag, the
shape parameters and its material; each light slot holds the light's
position, color, intensity and radius.

closest_intersection() is shared by primary, reflection and shadow rays. It
is a linear scan over every object.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softray.scene.intersection import upload_scene, closest_intersection
    >>> from softray.scene.presets import create_three_spheres_scene
    >>> upload_scene(create_three_spheres_scene())
    >>> # Use closest_intersection within a Taichi kernel
"""

import logging

import taichi as ti

from softray.core.ray import vec3
from softray.geometry.shape import ShapeKind, intersect_shape
from softray.geometry.sphere import HitRecord
from softray.scene.model import Light, PlaneShape, Scene, SceneObject, SphereShape

logger = logging.getLogger(__name__)


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection.

    Extends HitRecord with the index of the object that was hit.

    Attributes:
        hit: Whether the ray intersected any object (1 if hit, 0 if miss).
        t: Distance along the ray to the hit point (>= 0).
        point: The 3D point where the ray met the surface.
        normal: The unit surface normal at the hit point.
        object_index: Index of the hit object in scene order, -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    object_index: ti.i32


# Maximum number of objects and lights supported in the scene
MAX_OBJECTS = 1024
MAX_LIGHTS = 64

# Object storage: Structure of Arrays layout
# object_anchors holds the sphere center or a point on the plane
object_kinds = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_anchors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
object_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
object_radii = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
num_objects = ti.field(dtype=ti.i32, shape=())

# Per-object material
material_diffuse = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
material_specular = ti.Vector.field(3, dtype=ti.f32, shape=MAX_OBJECTS)
material_shininess = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)
material_reflectivity = ti.field(dtype=ti.f32, shape=MAX_OBJECTS)

# Light storage
light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
light_radii = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all objects and lights.

    Resets the counts to zero. The field data is overwritten when new
    objects are added.
    """
    num_objects[None] = 0
    num_lights[None] = 0


def add_object(obj: SceneObject) -> int:
    """Add an object to the scene storage.

    Args:
        obj: The object to store.

    Returns:
        The index of the added object.

    Raises:
        RuntimeError: If the maximum number of objects is exceeded.
        TypeError: If the shape is not one of the supported kinds.
    """
    idx = num_objects[None]
    if idx >= MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")

    match obj.shape:
        case SphereShape(center=center, radius=radius):
            object_kinds[idx] = int(ShapeKind.SPHERE)
            object_anchors[idx] = list(center)
            object_normals[idx] = [0.0, 0.0, 0.0]
            object_radii[idx] = radius
        case PlaneShape(point=point, normal=normal):
            object_kinds[idx] = int(ShapeKind.PLANE)
            object_anchors[idx] = list(point)
            object_normals[idx] = list(normal)
            object_radii[idx] = 0.0
        case _:
            raise TypeError(f"Unsupported shape: {obj.shape!r}")

    material = obj.material
    material_diffuse[idx] = list(material.diffuse_color)
    material_specular[idx] = list(material.specular_color)
    material_shininess[idx] = material.shininess
    material_reflectivity[idx] = material.reflectivity

    num_objects[None] = idx + 1
    return idx


def add_light(light: Light) -> int:
    """Add a light to the scene storage.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = list(light.position)
    light_colors[idx] = list(light.color)
    light_intensities[idx] = light.intensity
    light_radii[idx] = light.radius
    num_lights[None] = idx + 1
    return idx


def upload_scene(scene: Scene) -> None:
    """Replace the stored objects and lights with those of ``scene``.

    Capacity is checked before anything is written, so a scene that does
    not fit leaves the previous contents untouched.

    Raises:
        RuntimeError: If the scene has more objects or lights than supported.
    """
    if len(scene.objects) > MAX_OBJECTS:
        raise RuntimeError(
            f"Scene has {len(scene.objects)} objects, maximum is {MAX_OBJECTS}"
        )
    if len(scene.lights) > MAX_LIGHTS:
        raise RuntimeError(f"Scene has {len(scene.lights)} lights, maximum is {MAX_LIGHTS}")

    clear_scene()
    for obj in scene.objects:
        add_object(obj)
    for light in scene.lights:
        add_light(light)
    logger.debug("Uploaded %d objects and %d lights", len(scene.objects), len(scene.lights))


def get_object_count() -> int:
    """Get the number of objects in the scene storage."""
    return int(num_objects[None])


def get_light_count() -> int:
    """Get the number of lights in the scene storage."""
    return int(num_lights[None])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        object_index=-1,
    )


@ti.func
def intersect_object(index: ti.i32, ray_origin: vec3, ray_direction: vec3) -> HitRecord:
    """Intersect a ray with one stored object."""
    return intersect_shape(
        object_kinds[index],
        object_anchors[index],
        object_normals[index],
        object_radii[index],
        ray_origin,
        ray_direction,
    )


@ti.func
def closest_intersection(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the nearest object hit by a ray.

    Tests every object and keeps the hit with the smallest distance. An
    object only replaces the current best when it is strictly closer, so
    ties go to the object that comes first in scene order.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction (unit length).

    Returns:
        A SceneHitRecord for the closest hit, or a miss record if no object
        was hit.
    """
    result = _make_miss_record()

    for i in range(num_objects[None]):
        rec = intersect_object(i, ray_origin, ray_direction)
        if rec.hit == 1:
            if result.hit == 0 or rec.t < result.t:
                result = SceneHitRecord(
                    hit=1,
                    t=rec.t,
                    point=rec.point,
                    normal=rec.normal,
                    object_index=i,
                )

    return result
