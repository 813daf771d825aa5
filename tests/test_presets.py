"""Tests for the ready-made example scenes."""

import pytest


class TestThreeSpheres:
    """Tests for create_three_spheres_scene."""

    def test_contents(self):
        from softray.scene.model import SphereShape
        from softray.scene.presets import create_three_spheres_scene

        scene = create_three_spheres_scene()
        assert (scene.width, scene.height) == (800, 800)
        assert len(scene.objects) == 4
        assert all(isinstance(obj.shape, SphereShape) for obj in scene.objects)
        assert [obj.shape.radius for obj in scene.objects] == [0.7, 1.0, 0.5, 100.0]
        assert len(scene.lights) == 2
        assert scene.lights[1].color == (1.0, 0.0, 0.0)
        assert scene.lights[1].intensity == 0.5

    def test_shared_highlight(self):
        from softray.scene.presets import create_three_spheres_scene

        scene = create_three_spheres_scene()
        for obj in scene.objects:
            assert obj.material.specular_color == (0.5, 0.5, 0.5)
            assert obj.material.shininess == 50.0
            assert obj.material.reflectivity == 0.0

    def test_camera(self):
        from softray.scene.presets import create_three_spheres_scene

        camera = create_three_spheres_scene(width=320, height=200).camera
        assert camera.position == (-10.0, 0.0, 0.0)
        assert camera.forward == pytest.approx((1.0, 0.0, 0.0))
        assert camera.fov_degrees == 90.0


class TestMirrorRoom:
    """Tests for create_mirror_room_scene."""

    def test_facing_mirrors(self):
        from softray.scene.model import PlaneShape
        from softray.scene.presets import MirrorRoomParams, create_mirror_room_scene

        scene = create_mirror_room_scene(params=MirrorRoomParams(wall_distance=4.0))
        mirrors = [
            obj for obj in scene.objects
            if isinstance(obj.shape, PlaneShape) and obj.material.reflectivity > 0.0
        ]
        assert len(mirrors) == 2
        normals = [m.shape.normal for m in mirrors]
        assert normals[0] == pytest.approx(tuple(-c for c in normals[1]))
        assert sorted(m.shape.point[1] for m in mirrors) == [-4.0, 4.0]

    def test_area_light(self):
        from softray.scene.presets import MirrorRoomParams, create_mirror_room_scene

        scene = create_mirror_room_scene(params=MirrorRoomParams(light_radius=0.25))
        assert scene.lights[0].radius == 0.25

    def test_preset_registry(self):
        from softray.scene.presets import PRESETS

        assert set(PRESETS) == {"three-spheres", "mirrors"}
        for factory in PRESETS.values():
            scene = factory(16, 12)
            assert (scene.width, scene.height) == (16, 12)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
