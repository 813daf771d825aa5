"""Parallel pixel loop and the render() entry point.

render() uploads a Scene to the Taichi fields, runs one kernel whose
outermost loop covers every pixel, and returns the finished image as an
8-bit array. Each pixel is computed independently:

    for every anti-aliasing offset:
        primary ray through (x + dx, y + dy)
        trace_ray (shading, shadows, reflections)
    mean of the sample colors -> clamp(0, 255, channel * 256)

Pixels read only the uploaded scene and write only their own cell, and no
sampling is random, so the output is identical for any number of threads
or backend lanes.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from softray.core.renderer import RenderSettings, render
    >>> from softray.scene.presets import create_three_spheres_scene
    >>> pixels = render(create_three_spheres_scene(), RenderSettings(aa_grid=2))
    >>> pixels.shape
    (800, 800, 3)
"""

import logging
import time
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

from softray.camera.fov import get_camera_info, get_primary_ray, setup_camera
from softray.core.color import BLACK, Color, color_to_rgb8
from softray.core.ray import vec3
from softray.core.sampling import anti_aliasing_offsets
from softray.core.shading import ATTENUATION_MODES, AttenuationMode, configure_shading, trace_ray
from softray.preview.export import ImageSink, write_pixels
from softray.scene.intersection import upload_scene
from softray.scene.model import Scene

logger = logging.getLogger(__name__)

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Largest anti-aliasing grid (MAX_AA_GRID**2 samples per pixel)
MAX_AA_GRID = 16
MAX_AA_SAMPLES = MAX_AA_GRID * MAX_AA_GRID


@dataclass(frozen=True)
class RenderSettings:
    """Quality and lighting parameters for a render.

    Attributes:
        aa_grid: Anti-aliasing grid size; each pixel averages aa_grid**2
            primary rays (1 = no supersampling).
        light_samples: Shadow rays per area light.
        max_depth: Maximum number of mirror reflection bounces.
        ambient: Color added at every hit before lighting.
        shadow_bias: Distance secondary rays start off a surface.
        attenuation: Light distance falloff, "linear" or "inverse_square".
    """

    aa_grid: int = 1
    light_samples: int = 16
    max_depth: int = 3
    ambient: Color = BLACK
    shadow_bias: float = 1e-3
    attenuation: AttenuationMode = "linear"

    def __post_init__(self) -> None:
        if not 1 <= self.aa_grid <= MAX_AA_GRID:
            raise ValueError(f"aa_grid must be in [1, {MAX_AA_GRID}], got {self.aa_grid}")
        if self.light_samples < 1:
            raise ValueError(f"light_samples must be >= 1, got {self.light_samples}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if not self.shadow_bias > 0.0:
            raise ValueError(f"shadow_bias must be positive, got {self.shadow_bias}")
        if self.attenuation not in ATTENUATION_MODES:
            raise ValueError(f"Unknown attenuation mode: {self.attenuation}")
        if len(self.ambient) != 3 or any(c < 0.0 for c in self.ambient):
            raise ValueError(f"ambient must be 3 non-negative channels, got {self.ambient}")


# =============================================================================
# Render Target
# =============================================================================

_pixels = ti.Vector.field(3, dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))
_aa_offsets = ti.Vector.field(2, dtype=ti.f32, shape=MAX_AA_SAMPLES)
_aa_count = ti.field(dtype=ti.i32, shape=())


def _upload_aa_offsets(grid_size: int) -> int:
    """Store the offset grid in the Taichi field; returns the sample count."""
    offsets = anti_aliasing_offsets(grid_size)
    padded = np.zeros((MAX_AA_SAMPLES, 2), dtype=np.float32)
    padded[: len(offsets)] = offsets
    _aa_offsets.from_numpy(padded)
    _aa_count[None] = len(offsets)
    return len(offsets)


def prepare_render(scene: Scene, settings: RenderSettings) -> None:
    """Upload the scene, camera, shading parameters and offsets.

    Raises:
        ValueError: If the image is larger than the render target.
        RuntimeError: If the scene exceeds object or light capacity.
    """
    if scene.width > MAX_IMAGE_WIDTH or scene.height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({scene.width}x{scene.height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    upload_scene(scene)
    setup_camera(scene.camera, scene.width, scene.height)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Camera: %s", get_camera_info())
    configure_shading(
        ambient=settings.ambient,
        shadow_bias=settings.shadow_bias,
        light_samples=settings.light_samples,
        attenuation=settings.attenuation,
    )
    _upload_aa_offsets(settings.aa_grid)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.func
def render_pixel(x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32, max_depth: ti.i32) -> vec3:
    """Average linear color of one pixel over all anti-aliasing offsets."""
    color = vec3(0.0, 0.0, 0.0)
    count = _aa_count[None]

    for k in range(count):
        offset = _aa_offsets[k]
        px = ti.cast(x, ti.f32) + offset[0]
        py = ti.cast(y, ti.f32) + offset[1]
        ray = get_primary_ray(px, py, width, height)
        sample, _ = trace_ray(ray.origin, ray.direction, max_depth)
        color += sample

    return color / ti.cast(count, ti.f32)


@ti.kernel
def _render_kernel(width: ti.i32, height: ti.i32, max_depth: ti.i32):
    """Render every pixel into the 8-bit pixel buffer.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Maximum number of reflection bounces.
    """
    for x, y in ti.ndrange(width, height):
        color = render_pixel(x, y, width, height, max_depth)
        _pixels[x, y] = color_to_rgb8(color)


@ti.kernel
def _render_single_pixel(
    x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32, max_depth: ti.i32
) -> vec3:
    """Linear color of a single pixel, before byte conversion."""
    return render_pixel(x, y, width, height, max_depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def render(
    scene: Scene,
    settings: RenderSettings | None = None,
    sink: ImageSink | None = None,
) -> npt.NDArray[np.uint8]:
    """Render a scene.

    The whole image is computed before anything is handed to ``sink``.

    Args:
        scene: The scene to render.
        settings: Render settings; defaults to RenderSettings().
        sink: Optional pixel sink; receives sink.set(x, y, (r, g, b)) for
            every pixel once the render is complete.

    Returns:
        Array of shape (height, width, 3), dtype uint8, row 0 at the top.

    Raises:
        ValueError: If the image is larger than the render target.
        RuntimeError: If the scene exceeds object or light capacity.
        ImageOutputError: If the sink fails to accept the pixels.
    """
    if settings is None:
        settings = RenderSettings()

    logger.info(
        "Rendering %dx%d: %d objects, %d lights",
        scene.width,
        scene.height,
        len(scene.objects),
        len(scene.lights),
    )
    logger.debug("Render settings: %s", settings)

    prepare_render(scene, settings)

    start_time = time.perf_counter()
    _render_kernel(scene.width, scene.height, settings.max_depth)
    ti.sync()
    logger.info("Render finished in %.2fs", time.perf_counter() - start_time)

    # (width, height, 3) -> (height, width, 3)
    buffer = _pixels.to_numpy()[: scene.width, : scene.height, :]
    pixels = np.ascontiguousarray(np.transpose(buffer, (1, 0, 2))).astype(np.uint8)

    if sink is not None:
        write_pixels(pixels, sink)

    return pixels


def render_pixel_color(
    scene: Scene,
    x: int,
    y: int,
    settings: RenderSettings | None = None,
) -> tuple[float, float, float]:
    """Linear color of one pixel, for inspection and testing.

    Args:
        scene: The scene to render.
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).
        settings: Render settings; defaults to RenderSettings().

    Returns:
        Tuple of (R, G, B) linear color values.
    """
    if settings is None:
        settings = RenderSettings()
    if not (0 <= x < scene.width and 0 <= y < scene.height):
        raise ValueError(f"Pixel ({x}, {y}) outside {scene.width}x{scene.height} image")

    prepare_render(scene, settings)
    color = _render_single_pixel(x, y, scene.width, scene.height, settings.max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))
