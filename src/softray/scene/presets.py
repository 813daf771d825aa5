"""Ready-made example scenes.

Two scenes are provided, each returned as a Scene value that can be passed
straight to render():

    three-spheres: three small colored spheres in front of a huge white
        backdrop sphere, lit by a white and a dim red point light.
    mirrors: a floor and two facing mirror walls with reflective spheres
        between them, lit by a soft area light.

Coordinates are z-up; both cameras look down the +x axis.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from softray.scene.presets import create_three_spheres_scene
    >>> from softray.core.renderer import render
    >>>
    >>> pixels = render(create_three_spheres_scene())
"""

from collections.abc import Callable
from dataclasses import dataclass

from softray.core.color import BLUE, GREEN, RED, WHITE, Color, scale_color
from softray.scene.model import (
    Camera,
    Light,
    Material,
    PlaneShape,
    Scene,
    SceneObject,
    SphereShape,
)

# =============================================================================
# Three Spheres Constants
# =============================================================================

DEFAULT_IMAGE_SIZE = 800

# Shared Phong highlight for every sphere in the three-spheres scene
HIGHLIGHT_COLOR = scale_color(WHITE, 0.5)
HIGHLIGHT_SHININESS = 50.0

# Backdrop: a sphere large enough to read as a wall behind the scene
BACKDROP_CENTER = (10.0, 0.0, -110.0)
BACKDROP_RADIUS = 100.0


def _glossy(color: Color) -> Material:
    return Material(
        diffuse_color=color,
        specular_color=HIGHLIGHT_COLOR,
        shininess=HIGHLIGHT_SHININESS,
    )


def create_three_spheres_scene(
    width: int = DEFAULT_IMAGE_SIZE,
    height: int = DEFAULT_IMAGE_SIZE,
) -> Scene:
    """Create the three colored spheres scene.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The scene, with a 90 degree camera at (-10, 0, 0) looking at the
        origin.
    """
    objects = (
        SceneObject(SphereShape((0.0, 0.0, 0.0), 0.7), _glossy(BLUE)),
        SceneObject(SphereShape((-0.7, 0.7, -1.0), 1.0), _glossy(RED)),
        SceneObject(SphereShape((1.0, -1.0, 1.0), 0.5), _glossy(GREEN)),
        SceneObject(SphereShape(BACKDROP_CENTER, BACKDROP_RADIUS), _glossy(WHITE)),
    )

    lights = (
        Light(position=(-2.0, -2.0, 1.0), color=WHITE, intensity=1.0),
        Light(position=(-2.0, 2.0, 1.0), color=RED, intensity=0.5),
    )

    camera = Camera.look_at(
        eye=(-10.0, 0.0, 0.0),
        target=(0.0, 0.0, 0.0),
        up=(0.0, 0.0, 1.0),
        fov_degrees=90.0,
    )

    return Scene(camera=camera, width=width, height=height, objects=objects, lights=lights)


# =============================================================================
# Mirror Room
# =============================================================================


@dataclass
class MirrorRoomParams:
    """Parameters for configuring the mirror room scene.

    Attributes:
        wall_distance: Distance of each mirror wall from the x axis.
        mirror_reflectivity: Reflectivity of the two walls.
        light_radius: Radius of the area light (0 gives hard shadows).
        light_intensity: Brightness of the area light.
    """

    wall_distance: float = 3.0
    mirror_reflectivity: float = 0.8
    light_radius: float = 0.5
    light_intensity: float = 0.4


def create_mirror_room_scene(
    width: int = DEFAULT_IMAGE_SIZE,
    height: int = DEFAULT_IMAGE_SIZE,
    params: MirrorRoomParams | None = None,
) -> Scene:
    """Create a floor with two facing mirrors and reflective spheres.

    The mirrors face each other across the y axis, so reflections between
    them are only limited by the render's reflection budget.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        params: Optional MirrorRoomParams; defaults to MirrorRoomParams().

    Returns:
        The mirror room scene.
    """
    if params is None:
        params = MirrorRoomParams()

    d = params.wall_distance

    floor = Material(diffuse_color=(0.6, 0.6, 0.6), specular_color=(0.2, 0.2, 0.2), shininess=10.0)
    mirror = Material(
        diffuse_color=(0.05, 0.05, 0.08),
        specular_color=WHITE,
        shininess=200.0,
        reflectivity=params.mirror_reflectivity,
    )
    chrome = Material(
        diffuse_color=(0.1, 0.1, 0.1),
        specular_color=WHITE,
        shininess=100.0,
        reflectivity=0.6,
    )
    matte_red = Material(
        diffuse_color=(0.7, 0.1, 0.1), specular_color=(0.3, 0.3, 0.3), shininess=30.0
    )

    objects = (
        SceneObject(PlaneShape((0.0, 0.0, -1.0), (0.0, 0.0, 1.0)), floor),
        SceneObject(PlaneShape((0.0, -d, 0.0), (0.0, 1.0, 0.0)), mirror),
        SceneObject(PlaneShape((0.0, d, 0.0), (0.0, -1.0, 0.0)), mirror),
        SceneObject(SphereShape((2.0, -0.8, 0.0), 1.0), chrome),
        SceneObject(SphereShape((3.0, 1.2, -0.4), 0.6), matte_red),
    )

    lights = (
        Light(
            position=(-1.0, 0.0, 4.0),
            color=WHITE,
            intensity=params.light_intensity,
            radius=params.light_radius,
        ),
    )

    camera = Camera.look_at(
        eye=(-6.0, 0.0, 1.0),
        target=(2.0, 0.0, 0.0),
        up=(0.0, 0.0, 1.0),
        fov_degrees=70.0,
    )

    return Scene(camera=camera, width=width, height=height, objects=objects, lights=lights)


# Name -> factory, as accepted by the command line
PRESETS: dict[str, Callable[[int, int], Scene]] = {
    "three-spheres": create_three_spheres_scene,
    "mirrors": create_mirror_room_scene,
}
