"""Immutable scene description: camera, objects, materials and lights.

Everything the renderer reads is described here as frozen dataclasses. A
Scene is built once (by hand, by a preset factory, or from a JSON file) and
handed to softray.core.renderer.render(), which uploads it to the Taichi
fields used by the kernels. Nothing in this module touches Taichi state, so
it can be imported before ti.init().

Invalid values (zero radius, negative light radius, non-positive image size,
reflectivity outside [0, 1], ...) raise ValueError at construction, before
any rendering starts.

Example:
    >>> from softray.scene.model import (
    ...     Camera, Light, Material, Scene, SceneObject, SphereShape
    ... )
    >>> red = Material(diffuse_color=(1.0, 0.0, 0.0), specular_color=(0.5, 0.5, 0.5),
    ...                shininess=50.0)
    >>> scene = Scene(
    ...     camera=Camera.look_at((-10, 0, 0), (0, 0, 0), up=(0, 0, 1), fov_degrees=90.0),
    ...     width=320,
    ...     height=240,
    ...     objects=(SceneObject(SphereShape((0, 0, 0), 1.0), red),),
    ...     lights=(Light(position=(-2, -2, 1)),),
    ... )
"""

import json
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from softray.core.color import BLACK, WHITE, Color

Vec3 = tuple[float, float, float]


def _as_vec3(value: Sequence[float], name: str) -> Vec3:
    """Convert a 3-element sequence to a tuple of floats."""
    if len(value) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(value)}")
    x, y, z = (float(v) for v in value)
    if not all(math.isfinite(v) for v in (x, y, z)):
        raise ValueError(f"{name} must be finite, got {(x, y, z)}")
    return (x, y, z)


def _as_color(value: Sequence[float], name: str) -> Color:
    color = _as_vec3(value, name)
    if any(c < 0.0 for c in color):
        raise ValueError(f"{name} channels must be non-negative, got {color}")
    return color


def _normalized(value: Vec3, name: str) -> Vec3:
    length = math.sqrt(value[0] ** 2 + value[1] ** 2 + value[2] ** 2)
    if length == 0.0:
        raise ValueError(f"{name} must be non-zero")
    return (value[0] / length, value[1] / length, value[2] / length)


def _cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


# =============================================================================
# Materials and Shapes
# =============================================================================


@dataclass(frozen=True)
class Material:
    """Surface reflectance parameters.

    Attributes:
        diffuse_color: Lambertian color (non-negative channels).
        specular_color: Phong highlight color (non-negative channels).
        shininess: Phong exponent (>= 0).
        reflectivity: Fraction of the mirror-reflected color added, in [0, 1].
    """

    diffuse_color: Color
    specular_color: Color = BLACK
    shininess: float = 0.0
    reflectivity: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "diffuse_color", _as_color(self.diffuse_color, "diffuse_color"))
        object.__setattr__(
            self, "specular_color", _as_color(self.specular_color, "specular_color")
        )
        object.__setattr__(self, "shininess", float(self.shininess))
        object.__setattr__(self, "reflectivity", float(self.reflectivity))
        if not self.shininess >= 0.0:
            raise ValueError(f"shininess must be >= 0, got {self.shininess}")
        if not 0.0 <= self.reflectivity <= 1.0:
            raise ValueError(f"reflectivity must be in [0, 1], got {self.reflectivity}")


@dataclass(frozen=True)
class SphereShape:
    """A sphere given by its center and a positive radius."""

    center: Vec3
    radius: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", _as_vec3(self.center, "center"))
        object.__setattr__(self, "radius", float(self.radius))
        if not self.radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")


@dataclass(frozen=True)
class PlaneShape:
    """An infinite plane through ``point``; ``normal`` is normalized on creation."""

    point: Vec3
    normal: Vec3

    def __post_init__(self) -> None:
        object.__setattr__(self, "point", _as_vec3(self.point, "point"))
        object.__setattr__(
            self, "normal", _normalized(_as_vec3(self.normal, "normal"), "Plane normal")
        )


Shape = Union[SphereShape, PlaneShape]


@dataclass(frozen=True)
class SceneObject:
    """One shape paired with one material."""

    shape: Shape
    material: Material


# =============================================================================
# Lights and Camera
# =============================================================================


@dataclass(frozen=True)
class Light:
    """A spherical area light (or a point light when radius is 0).

    Attributes:
        position: Center of the light.
        color: Light color (non-negative channels).
        intensity: Brightness multiplier (>= 0).
        radius: Radius of the disk sampled for soft shadows (>= 0).
    """

    position: Vec3
    color: Color = WHITE
    intensity: float = 1.0
    radius: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _as_vec3(self.position, "position"))
        object.__setattr__(self, "color", _as_color(self.color, "color"))
        object.__setattr__(self, "intensity", float(self.intensity))
        object.__setattr__(self, "radius", float(self.radius))
        if not self.intensity >= 0.0:
            raise ValueError(f"Light intensity must be >= 0, got {self.intensity}")
        if not self.radius >= 0.0:
            raise ValueError(f"Light radius must be >= 0, got {self.radius}")


@dataclass(frozen=True)
class Camera:
    """A camera described by its position, view direction and up vector.

    The horizontal field of view is given in degrees; the vertical one is
    derived from the image aspect ratio at render time.

    Attributes:
        position: Eye position.
        forward: View direction (normalized on creation).
        up: Up vector (normalized on creation, must not be parallel to forward).
        fov_degrees: Horizontal field of view in degrees, in (0, 360).
    """

    position: Vec3
    forward: Vec3
    up: Vec3 = (0.0, 0.0, 1.0)
    fov_degrees: float = 90.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _as_vec3(self.position, "position"))
        object.__setattr__(
            self, "forward", _normalized(_as_vec3(self.forward, "forward"), "Camera forward")
        )
        object.__setattr__(self, "up", _normalized(_as_vec3(self.up, "up"), "Camera up"))
        object.__setattr__(self, "fov_degrees", float(self.fov_degrees))
        if not 0.0 < self.fov_degrees < 360.0:
            raise ValueError(f"fov_degrees must be in (0, 360), got {self.fov_degrees}")
        right = _cross(self.forward, self.up)
        if math.sqrt(right[0] ** 2 + right[1] ** 2 + right[2] ** 2) < 1e-9:
            raise ValueError("Camera up vector must not be parallel to forward")

    @classmethod
    def look_at(
        cls,
        eye: Sequence[float],
        target: Sequence[float],
        up: Sequence[float] = (0.0, 0.0, 1.0),
        fov_degrees: float = 90.0,
    ) -> "Camera":
        """Create a camera at ``eye`` looking toward ``target``."""
        eye_v = _as_vec3(eye, "eye")
        target_v = _as_vec3(target, "target")
        forward = (target_v[0] - eye_v[0], target_v[1] - eye_v[1], target_v[2] - eye_v[2])
        return cls(position=eye_v, forward=forward, up=_as_vec3(up, "up"), fov_degrees=fov_degrees)


# =============================================================================
# Scene
# =============================================================================


@dataclass(frozen=True)
class Scene:
    """Everything needed to render one image.

    Attributes:
        camera: The viewing camera.
        width: Image width in pixels (> 0).
        height: Image height in pixels (> 0).
        objects: Objects in scene order; ties in the nearest-hit query go
            to the earlier object.
        lights: Lights illuminating the scene.
    """

    camera: Camera
    width: int
    height: int
    objects: tuple[SceneObject, ...] = field(default_factory=tuple)
    lights: tuple[Light, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if int(self.width) != self.width or int(self.height) != self.height:
            raise ValueError(f"Image dimensions must be integers, got {self.width}x{self.height}")
        object.__setattr__(self, "width", int(self.width))
        object.__setattr__(self, "height", int(self.height))
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        object.__setattr__(self, "objects", tuple(self.objects))
        object.__setattr__(self, "lights", tuple(self.lights))

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        objects = []
        for obj in self.objects:
            objects.append(
                {
                    "shape": _shape_to_dict(obj.shape),
                    "material": {
                        "diffuse_color": list(obj.material.diffuse_color),
                        "specular_color": list(obj.material.specular_color),
                        "shininess": obj.material.shininess,
                        "reflectivity": obj.material.reflectivity,
                    },
                }
            )

        lights = [
            {
                "position": list(light.position),
                "color": list(light.color),
                "intensity": light.intensity,
                "radius": light.radius,
            }
            for light in self.lights
        ]

        return {
            "camera": {
                "position": list(self.camera.position),
                "forward": list(self.camera.forward),
                "up": list(self.camera.up),
                "fov_degrees": self.camera.fov_degrees,
            },
            "width": self.width,
            "height": self.height,
            "objects": objects,
            "lights": lights,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scene":
        """Load a scene from a dictionary.

        Raises:
            ValueError: If the dictionary describes an invalid scene.
            KeyError: If a required key is missing.
        """
        camera_data = data["camera"]
        camera = Camera(
            position=camera_data["position"],
            forward=camera_data["forward"],
            up=camera_data.get("up", (0.0, 0.0, 1.0)),
            fov_degrees=camera_data.get("fov_degrees", 90.0),
        )

        objects = []
        for obj_data in data.get("objects", []):
            material_data = obj_data["material"]
            material = Material(
                diffuse_color=material_data["diffuse_color"],
                specular_color=material_data.get("specular_color", BLACK),
                shininess=material_data.get("shininess", 0.0),
                reflectivity=material_data.get("reflectivity", 0.0),
            )
            objects.append(SceneObject(_shape_from_dict(obj_data["shape"]), material))

        lights = [
            Light(
                position=light_data["position"],
                color=light_data.get("color", WHITE),
                intensity=light_data.get("intensity", 1.0),
                radius=light_data.get("radius", 0.0),
            )
            for light_data in data.get("lights", [])
        ]

        return cls(
            camera=camera,
            width=data["width"],
            height=data["height"],
            objects=tuple(objects),
            lights=tuple(lights),
        )


def _shape_to_dict(shape: Shape) -> dict[str, Any]:
    match shape:
        case SphereShape(center=center, radius=radius):
            return {"type": "sphere", "center": list(center), "radius": radius}
        case PlaneShape(point=point, normal=normal):
            return {"type": "plane", "point": list(point), "normal": list(normal)}
        case _:
            raise TypeError(f"Unsupported shape: {shape!r}")


def _shape_from_dict(data: dict[str, Any]) -> Shape:
    shape_type = data.get("type", "").lower()
    if shape_type == "sphere":
        return SphereShape(center=data["center"], radius=data["radius"])
    if shape_type == "plane":
        return PlaneShape(point=data["point"], normal=data["normal"])
    raise ValueError(f"Unknown shape type: {shape_type}")


def load_scene(path: str | Path) -> Scene:
    """Load a scene from a JSON file."""
    with open(path, encoding="utf-8") as f:
        return Scene.from_dict(json.load(f))


def save_scene(scene: Scene, path: str | Path) -> None:
    """Save a scene to a JSON file."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(scene.to_dict(), f, indent=2)
