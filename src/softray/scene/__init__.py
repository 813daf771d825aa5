"""Scene module for scene description and storage.

Components:
    model: Frozen dataclasses describing a scene, plus JSON load/save
    intersection: Taichi field storage and the nearest-hit query
    presets: Ready-made example scenes

Scene data is organized for efficient GPU access:
    - Structure-of-Arrays layout for geometric data
    - Materials stored per object, indexed like the shapes
"""

from .model import (
    Camera,
    Light,
    Material,
    PlaneShape,
    Scene,
    SceneObject,
    Shape,
    SphereShape,
    load_scene,
    save_scene,
)
from .presets import (
    PRESETS,
    MirrorRoomParams,
    create_mirror_room_scene,
    create_three_spheres_scene,
)

# Note: intersection is NOT imported here because it declares Taichi fields.
# Import it directly: from softray.scene.intersection import upload_scene

__all__ = [
    # Model
    "Camera",
    "Light",
    "Material",
    "PlaneShape",
    "Scene",
    "SceneObject",
    "Shape",
    "SphereShape",
    "load_scene",
    "save_scene",
    # Presets
    "PRESETS",
    "MirrorRoomParams",
    "create_three_spheres_scene",
    "create_mirror_room_scene",
]
