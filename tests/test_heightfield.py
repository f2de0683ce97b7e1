"""
Tests for the fractal noise height field.
"""

import numpy as np
import pytest

from heightmesh import FractalNoise, GenerationConfig, HeightField


class TestFractalNoise:
    """Test seeded fractal noise."""

    @pytest.fixture
    def noise(self):
        return FractalNoise(seed=42, octaves=3)

    def test_deterministic(self, noise):
        other = FractalNoise(seed=42, octaves=3)
        for fx, fz in [(0.1, 0.2), (1.7, 3.3), (-2.5, 0.75)]:
            assert noise.get(fx, fz) == other.get(fx, fz)

    def test_grid_matches_pointwise(self, noise):
        fx = np.linspace(0.0, 3.0, 7)
        fz = np.linspace(0.5, 2.5, 5)
        lattice = noise.grid(fx, fz)

        assert lattice.shape == (5, 7)
        for j, z in enumerate(fz):
            for i, x in enumerate(fx):
                assert lattice[j, i] == pytest.approx(noise.get(x, z), abs=1e-12)

    def test_values_vary(self, noise):
        lattice = noise.grid(np.linspace(0, 4, 16), np.linspace(0, 4, 16))
        assert np.all(np.isfinite(lattice))
        assert lattice.std() > 0

    def test_single_octave(self):
        noise = FractalNoise(seed=7, octaves=1)
        assert np.isfinite(noise.get(0.3, 0.9))

    def test_rejects_zero_octaves(self):
        with pytest.raises(ValueError):
            FractalNoise(seed=1, octaves=0)

    def test_grid_rejects_2d_input(self, noise):
        with pytest.raises(ValueError):
            noise.grid(np.zeros((2, 2)), np.zeros(2))


class TestHeightField:
    """Test height field sampling."""

    @pytest.fixture
    def config(self):
        return GenerationConfig(size=16.0, resolution=16, seed=3, frequency=4.0, amplitude=10.0)

    @pytest.fixture
    def field(self, config):
        return HeightField.from_config(config)

    def test_sample_is_deterministic(self, config, field):
        other = HeightField.from_config(config)
        for x, z in [(0.0, 0.0), (3.5, 7.25), (15.0, 1.0)]:
            assert field.sample(x, z) == other.sample(x, z)

    def test_sample_scales_noise(self, field):
        fx, fz = 3.0 / 16.0 * 4.0, 5.0 / 16.0 * 4.0
        expected = field.noise.get(fx, fz) * 10.0
        assert field.sample(3.0, 5.0) == pytest.approx(expected, rel=1e-12)

    def test_zero_amplitude_is_flat(self, config):
        flat = HeightField.from_config(config.replace(amplitude=0.0))
        assert flat.sample(2.0, 9.0) == 0.0

    def test_different_seeds_differ(self, config):
        a = HeightField.from_config(config)
        b = HeightField.from_config(config.replace(seed=4))
        xs = np.linspace(0.0, 15.0, 8)
        assert not np.allclose(a.sample_grid(xs, xs), b.sample_grid(xs, xs))

    def test_doubling_frequency_scales_noise_coordinates(self, config):
        base = HeightField.from_config(config)
        doubled = HeightField.from_config(config.replace(frequency=8.0))

        for x, z in [(1.0, 2.0), (3.3, 0.7), (6.0, 6.5)]:
            fx, fz = base.to_noise_space(x, z)
            expected = base.noise.get(2 * fx, 2 * fz) * config.amplitude
            assert doubled.sample(x, z) == pytest.approx(expected, rel=1e-12)
            assert doubled.sample(x, z) == pytest.approx(
                base.sample(2 * x, 2 * z), rel=1e-12
            )

    def test_frequency_independent_of_size(self, config):
        small = HeightField.from_config(config)
        large = HeightField.from_config(config.replace(size=160.0))
        assert small.sample(4.0, 8.0) == pytest.approx(
            large.sample(40.0, 80.0), rel=1e-12
        )

    def test_sample_grid_layout(self, field):
        xs = np.array([0.0, 1.0, 2.0])
        zs = np.array([5.0, 6.0])
        heights = field.sample_grid(xs, zs)

        assert heights.shape == (2, 3)
        assert heights[1, 2] == pytest.approx(field.sample(2.0, 6.0), abs=1e-12)

    def test_callable(self, field):
        assert field(1.0, 2.0) == field.sample(1.0, 2.0)

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            HeightField(FractalNoise(seed=1, octaves=1), 0.0, 1.0, 1.0)
