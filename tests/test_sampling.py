"""Tests for the anti-aliasing grid and the light sample spiral.

Tests cover:
- Offset grid size, spacing, centering and ordering
- Invalid grid sizes
- Light samples lying on the light's disk, perpendicular to the direction
- Basis construction when the direction is parallel to the up reference
"""

import numpy as np
import pytest
import taichi as ti


class TestAntiAliasingOffsets:
    """Tests for anti_aliasing_offsets."""

    def test_single_sample_is_pixel_center(self):
        from softray.core.sampling import anti_aliasing_offsets

        offsets = anti_aliasing_offsets(1)
        assert offsets.shape == (1, 2)
        assert offsets[0, 0] == 0.0
        assert offsets[0, 1] == 0.0

    def test_two_by_two_grid(self):
        from softray.core.sampling import anti_aliasing_offsets

        offsets = anti_aliasing_offsets(2)
        expected = [(-0.25, -0.25), (-0.25, 0.25), (0.25, -0.25), (0.25, 0.25)]
        np.testing.assert_allclose(offsets, expected)

    @pytest.mark.parametrize("n", [1, 2, 3, 4, 5, 8])
    def test_grid_properties(self, n):
        """Test n*n samples, zero mean and 1/n spacing inside the pixel."""
        from softray.core.sampling import anti_aliasing_offsets

        offsets = anti_aliasing_offsets(n)
        assert offsets.shape == (n * n, 2)
        assert abs(offsets[:, 0].mean()) < 1e-5
        assert abs(offsets[:, 1].mean()) < 1e-5
        assert np.all(np.abs(offsets) < 0.5)

        xs = np.unique(offsets[:, 0])
        assert len(xs) == n
        if n > 1:
            np.testing.assert_allclose(np.diff(xs), 1.0 / n)

    def test_odd_grid_has_exact_zero(self):
        from softray.core.sampling import anti_aliasing_offsets

        offsets = anti_aliasing_offsets(3)
        # Middle sample of a 3x3 grid
        assert offsets[4, 0] == 0.0
        assert offsets[4, 1] == 0.0

    @pytest.mark.parametrize("n", [0, -1])
    def test_invalid_grid_size(self, n):
        from softray.core.sampling import anti_aliasing_offsets

        with pytest.raises(ValueError, match="grid size"):
            anti_aliasing_offsets(n)


class TestLightSamples:
    """Tests for the light sample spiral."""

    def _samples(self, direction, count, radius=2.0):
        from softray.core.sampling import light_sample_position, vec3

        result = ti.Vector.field(3, dtype=ti.f32, shape=count)
        dx, dy, dz = direction

        @ti.kernel
        def test_kernel():
            d = vec3(dx, dy, dz).normalized()
            for i in range(count):
                result[i] = light_sample_position(vec3(1.0, 2.0, 3.0), radius, d, i, count)

        test_kernel()
        return result.to_numpy() - np.array([1.0, 2.0, 3.0])

    def test_first_sample_is_center(self):
        offsets = self._samples((1.0, 0.0, 0.0), 16)
        np.testing.assert_allclose(offsets[0], 0.0, atol=1e-6)

    @pytest.mark.parametrize(
        "direction",
        [(1.0, 0.0, 0.0), (0.3, -0.4, 0.8), (0.0, 0.0, 1.0), (0.0, 0.0, -1.0)],
    )
    def test_samples_on_disk_perpendicular_to_direction(self, direction):
        offsets = self._samples(direction, 16)
        d = np.array(direction) / np.linalg.norm(direction)

        distances = np.linalg.norm(offsets, axis=1)
        assert np.all(distances <= 2.0 + 1e-5)
        assert np.all(np.isfinite(offsets))
        np.testing.assert_allclose(offsets @ d, 0.0, atol=1e-5)

    def test_sample_distance_grows_along_spiral(self):
        offsets = self._samples((1.0, 0.0, 0.0), 8, radius=1.0)
        distances = np.linalg.norm(offsets, axis=1)
        np.testing.assert_allclose(distances, np.arange(8) / 8.0, atol=1e-5)

    def test_deterministic(self):
        first = self._samples((0.3, -0.4, 0.8), 16)
        second = self._samples((0.3, -0.4, 0.8), 16)
        np.testing.assert_array_equal(first, second)

    def test_basis_is_orthonormal(self):
        from softray.core.sampling import light_sample_basis, vec3

        right = ti.Vector.field(3, dtype=ti.f32, shape=2)
        up = ti.Vector.field(3, dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            r0, u0 = light_sample_basis(vec3(0.6, 0.0, 0.8))
            right[0] = r0
            up[0] = u0
            # Parallel to the up reference
            r1, u1 = light_sample_basis(vec3(0.0, 0.0, 1.0))
            right[1] = r1
            up[1] = u1

        test_kernel()
        directions = [np.array([0.6, 0.0, 0.8]), np.array([0.0, 0.0, 1.0])]
        for i, d in enumerate(directions):
            r = right.to_numpy()[i]
            u = up.to_numpy()[i]
            assert abs(np.linalg.norm(r) - 1.0) < 1e-5
            assert abs(np.linalg.norm(u) - 1.0) < 1e-5
            assert abs(r @ u) < 1e-5
            assert abs(r @ d) < 1e-5
            assert abs(u @ d) < 1e-5


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
