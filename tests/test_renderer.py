"""End-to-end tests for the render loop.

Tests cover:
- RenderSettings validation
- Single-sphere render against the diffuse formula
- Background pixels and orientation
- Determinism across renders and thread counts
- Anti-aliasing
- Delivery to image sinks and sink failures
"""

import os
import subprocess
import sys
import textwrap
from pathlib import Path

import numpy as np
import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"

SINGLE_THREAD_RENDER = textwrap.dedent(
    """
    import sys

    import numpy as np
    import taichi as ti

    ti.init(arch=ti.cpu, cpu_max_num_threads=1)

    from softray.core.renderer import RenderSettings, render
    from softray.scene.presets import create_mirror_room_scene

    scene = create_mirror_room_scene(width=48, height=36)
    settings = RenderSettings(aa_grid=2, light_samples=8, max_depth=2)
    np.save(sys.argv[1], render(scene, settings))
    """
)


def _single_sphere_scene(width=32, height=32, light_radius=0.0):
    """Unit sphere at the origin seen from (-5, 0, 0), lit from behind the camera."""
    from softray.scene.model import Camera, Light, Material, Scene, SceneObject, SphereShape

    return Scene(
        camera=Camera.look_at((-5.0, 0.0, 0.0), (0.0, 0.0, 0.0), up=(0.0, 0.0, 1.0)),
        width=width,
        height=height,
        objects=(SceneObject(SphereShape((0.0, 0.0, 0.0), 1.0), Material((0.8, 0.4, 0.2))),),
        lights=(Light((-6.0, 0.0, 0.0), intensity=0.1, radius=light_radius),),
    )


class TestRenderSettings:
    """Tests for RenderSettings validation."""

    def test_defaults(self):
        from softray.core.renderer import RenderSettings

        settings = RenderSettings()
        assert settings.aa_grid == 1
        assert settings.light_samples == 16
        assert settings.max_depth == 3
        assert settings.ambient == (0.0, 0.0, 0.0)
        assert settings.shadow_bias > 0.0
        assert settings.attenuation == "linear"

    @pytest.mark.parametrize(
        "kwargs,match",
        [
            ({"aa_grid": 0}, "aa_grid"),
            ({"aa_grid": 17}, "aa_grid"),
            ({"light_samples": 0}, "light_samples"),
            ({"max_depth": -1}, "max_depth"),
            ({"shadow_bias": 0.0}, "shadow_bias"),
            ({"attenuation": "cubic"}, "attenuation"),
            ({"ambient": (0.1, -0.1, 0.0)}, "ambient"),
        ],
    )
    def test_invalid_settings(self, kwargs, match):
        from softray.core.renderer import RenderSettings

        with pytest.raises(ValueError, match=match):
            RenderSettings(**kwargs)


class TestRender:
    """End-to-end render tests."""

    def test_annotations_are_evaluated(self):
        """Test that Taichi sees real type objects, not postponed strings."""
        from softray.core import renderer

        assert renderer.render.__annotations__["scene"] is renderer.Scene
        assert not isinstance(renderer.render_pixel_color.__annotations__["x"], str)

    def test_output_shape_and_dtype(self):
        from softray.core.renderer import render

        pixels = render(_single_sphere_scene(width=40, height=24))
        assert pixels.shape == (24, 40, 3)
        assert pixels.dtype == np.uint8

    def test_center_pixel_matches_diffuse_formula(self):
        """Test the pixel facing the light head-on.

        The hit point (-1, 0, 0) is 5 units from the light, so the linear
        falloff gives attenuation 0.1 * 5 = 0.5 and the color is
        0.5 * (0.8, 0.4, 0.2), written as floor(channel * 256).
        """
        from softray.core.renderer import render

        pixels = render(_single_sphere_scene())
        assert tuple(int(c) for c in pixels[16, 16]) == (102, 51, 25)

    def test_center_pixel_linear_color(self):
        from softray.core.renderer import render_pixel_color

        color = render_pixel_color(_single_sphere_scene(), 16, 16)
        assert color == pytest.approx((0.4, 0.2, 0.1), abs=1e-5)

    def test_pixels_outside_silhouette_are_black(self):
        from softray.core.renderer import render

        pixels = render(_single_sphere_scene())
        for x, y in [(0, 0), (31, 0), (0, 31), (31, 31), (2, 16), (16, 2)]:
            assert tuple(int(c) for c in pixels[y, x]) == (0, 0, 0)

    def test_ambient_fills_silhouette_only(self):
        from softray.core.renderer import RenderSettings, render

        settings = RenderSettings(ambient=(0.5, 0.5, 0.5))
        pixels = render(_single_sphere_scene(), settings)
        assert tuple(int(c) for c in pixels[0, 0]) == (0, 0, 0)
        # 0.5 ambient + (0.4, 0.2, 0.1) diffuse
        assert tuple(int(c) for c in pixels[16, 16]) == (230, 179, 153)

    def test_bright_channels_clamp_to_255(self):
        from softray.core.renderer import RenderSettings, render

        settings = RenderSettings(ambient=(10.0, 10.0, 10.0))
        pixels = render(_single_sphere_scene(), settings)
        assert tuple(int(c) for c in pixels[16, 16]) == (255, 255, 255)

    def test_row_zero_is_top(self):
        """Test orientation with a sphere placed above the view axis."""
        from softray.core.renderer import render
        from softray.scene.model import Camera, Light, Material, Scene, SceneObject, SphereShape

        scene = Scene(
            camera=Camera.look_at((-5.0, 0.0, 0.0), (0.0, 0.0, 0.0)),
            width=32,
            height=32,
            objects=(
                SceneObject(SphereShape((0.0, 0.0, 2.5), 0.8), Material((1.0, 1.0, 1.0))),
            ),
            lights=(Light((-6.0, 0.0, 2.5), intensity=0.2),),
        )
        pixels = render(scene)
        lit_rows = np.nonzero(pixels.sum(axis=(1, 2)))[0]
        assert len(lit_rows) > 0
        assert lit_rows.max() < 16

    def test_renders_are_byte_identical(self):
        from softray.core.renderer import RenderSettings, render
        from softray.scene.presets import create_mirror_room_scene

        scene = create_mirror_room_scene(width=48, height=36)
        settings = RenderSettings(aa_grid=2, light_samples=8, max_depth=2)
        first = render(scene, settings)
        second = render(scene, settings)
        np.testing.assert_array_equal(first, second)
        assert first.any()

    def test_single_thread_render_is_byte_identical(self, tmp_path):
        from softray.core.renderer import RenderSettings, render
        from softray.scene.presets import create_mirror_room_scene

        scene = create_mirror_room_scene(width=48, height=36)
        settings = RenderSettings(aa_grid=2, light_samples=8, max_depth=2)
        parallel = render(scene, settings)

        output = tmp_path / "single_thread.npy"
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(
            p for p in (str(SRC_DIR), env.get("PYTHONPATH", "")) if p
        )
        subprocess.run(
            [sys.executable, "-c", SINGLE_THREAD_RENDER, str(output)],
            check=True,
            env=env,
            timeout=600,
        )
        np.testing.assert_array_equal(np.load(output), parallel)

    def test_anti_aliasing_keeps_flat_regions(self):
        """Test that supersampling leaves the interior and background unchanged."""
        from softray.core.renderer import RenderSettings, render

        plain = render(_single_sphere_scene())
        smooth = render(_single_sphere_scene(), RenderSettings(aa_grid=3))
        assert tuple(int(c) for c in smooth[0, 0]) == (0, 0, 0)
        assert abs(int(smooth[16, 16, 0]) - int(plain[16, 16, 0])) <= 2

    def test_soft_shadow_render(self):
        from softray.core.renderer import RenderSettings, render

        pixels = render(_single_sphere_scene(light_radius=0.5), RenderSettings(light_samples=4))
        assert pixels[16, 16].any()

    def test_image_too_large(self):
        from softray.core.renderer import MAX_IMAGE_WIDTH, render

        with pytest.raises(ValueError, match="exceed"):
            render(_single_sphere_scene(width=MAX_IMAGE_WIDTH + 1, height=4))

    def test_pixel_outside_image(self):
        from softray.core.renderer import render_pixel_color

        with pytest.raises(ValueError, match="outside"):
            render_pixel_color(_single_sphere_scene(), 32, 0)


class TestRenderSinks:
    """Tests for delivering rendered pixels to image sinks."""

    def test_array_sink_receives_every_pixel(self):
        from softray.core.renderer import render
        from softray.preview.export import ArraySink

        sink = ArraySink(32, 32)
        pixels = render(_single_sphere_scene(), sink=sink)
        np.testing.assert_array_equal(sink.pixels, pixels)

    def test_pillow_sink_receives_every_pixel(self):
        from softray.core.renderer import render
        from softray.preview.export import PillowImageSink

        sink = PillowImageSink(32, 32)
        pixels = render(_single_sphere_scene(), sink=sink)
        np.testing.assert_array_equal(np.asarray(sink.image), pixels)

    def test_failing_sink_raises_image_output_error(self):
        from softray.core.renderer import render
        from softray.preview.export import ArraySink, ImageOutputError

        # Sink smaller than the image
        sink = ArraySink(8, 8)
        with pytest.raises(ImageOutputError):
            render(_single_sphere_scene(), sink=sink)

    def test_sink_called_after_render_completes(self):
        from softray.core.renderer import render
        from softray.preview.export import ImageOutputError

        calls = []

        class RecordingSink:
            def set(self, x, y, color):
                calls.append((x, y, color))
                if len(calls) == 5:
                    raise OSError("disk full")

        with pytest.raises(ImageOutputError, match="disk full"):
            render(_single_sphere_scene(width=4, height=4), sink=RecordingSink())
        assert calls[0] == (0, 0, (0, 0, 0))
        assert len(calls) == 5

    def test_unexpected_sink_error_is_wrapped(self):
        from softray.core.renderer import render
        from softray.preview.export import ImageOutputError

        class DisconnectedSink:
            def set(self, x, y, color):
                raise RuntimeError("device gone")

        with pytest.raises(ImageOutputError, match="device gone") as excinfo:
            render(_single_sphere_scene(width=4, height=4), sink=DisconnectedSink())
        assert isinstance(excinfo.value.__cause__, RuntimeError)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
