"""Seeded fractal noise height field using opensimplex."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from opensimplex import OpenSimplex

if TYPE_CHECKING:
    from heightmesh.config import GenerationConfig


class FractalNoise:
    """Fractional Brownian motion over OpenSimplex noise.

    Sums ``octaves`` layers of 2D OpenSimplex noise. Octave ``i`` has its own
    generator seeded with ``seed + i``, is sampled at ``lacunarity**i`` times
    the input frequency and weighted by ``persistence**i``. The sum is divided
    by the total weight, keeping values in roughly [-1, 1].

    Args:
        seed: Base seed.
        octaves: Number of layers (>= 1).
        persistence: Weight ratio between successive octaves. Default: 0.5.
        lacunarity: Frequency ratio between successive octaves. Default: 2.0.

    Example:
        >>> noise = FractalNoise(seed=42, octaves=3)
        >>> value = noise.get(0.5, 1.25)
        >>> lattice = noise.grid(np.linspace(0, 4, 8), np.linspace(0, 4, 8))
        >>> lattice.shape
        (8, 8)
    """

    def __init__(
        self,
        seed: int,
        octaves: int,
        persistence: float = 0.5,
        lacunarity: float = 2.0,
    ):
        if octaves < 1:
            raise ValueError("octaves must be at least 1")
        self._seed = seed
        self._octaves = octaves
        self._persistence = persistence
        self._lacunarity = lacunarity

        self._generators = [OpenSimplex(seed=seed + i) for i in range(octaves)]
        self._frequencies = [lacunarity**i for i in range(octaves)]
        self._weights = [persistence**i for i in range(octaves)]
        self._total_weight = sum(self._weights)

    @property
    def seed(self) -> int:
        """Base seed; octave i uses seed + i."""
        return self._seed

    @property
    def octaves(self) -> int:
        """Number of noise layers."""
        return self._octaves

    def get(self, fx: float, fz: float) -> float:
        """Evaluate the noise at a single noise-space point."""
        total = 0.0
        for generator, freq, weight in zip(
            self._generators, self._frequencies, self._weights
        ):
            total += generator.noise2(fx * freq, fz * freq) * weight
        return total / self._total_weight

    def grid(self, fx_values: np.ndarray, fz_values: np.ndarray) -> np.ndarray:
        """Evaluate the noise over the lattice ``fx_values x fz_values``.

        Args:
            fx_values: 1D noise-space x coordinates.
            fz_values: 1D noise-space z coordinates.

        Returns:
            Array of shape (len(fz_values), len(fx_values)); row ``j`` holds
            the values along x at ``fz_values[j]``.
        """
        fx_values = np.asarray(fx_values, dtype=np.float64)
        fz_values = np.asarray(fz_values, dtype=np.float64)
        if fx_values.ndim != 1 or fz_values.ndim != 1:
            raise ValueError("noise coordinates must be 1D arrays")

        total = np.zeros((fz_values.size, fx_values.size), dtype=np.float64)
        for generator, freq, weight in zip(
            self._generators, self._frequencies, self._weights
        ):
            total += generator.noise2array(fx_values * freq, fz_values * freq) * weight
        return total / self._total_weight

    def __repr__(self) -> str:
        return (
            f"FractalNoise(seed={self._seed}, octaves={self._octaves}, "
            f"persistence={self._persistence}, lacunarity={self._lacunarity})"
        )


class HeightField:
    """Deterministic terrain height as a function of plane coordinates.

    World coordinates are normalised by the terrain size before being scaled
    by ``frequency``, so ``frequency`` sets how many noise features span the
    terrain regardless of ``size``:

        height(x, z) = noise(x / size * frequency, z / size * frequency) * amplitude

    The field holds no mutable state and may be sampled from several threads.

    Args:
        noise: Fractal noise source.
        size: Terrain side length (> 0).
        frequency: Noise features across the terrain.
        amplitude: Height scale.
    """

    def __init__(
        self,
        noise: FractalNoise,
        size: float,
        frequency: float,
        amplitude: float,
    ):
        if size <= 0:
            raise ValueError("size must be positive")
        self._noise = noise
        self._size = size
        self._frequency = frequency
        self._amplitude = amplitude

    @classmethod
    def from_config(cls, config: GenerationConfig) -> HeightField:
        """Create the height field described by a GenerationConfig."""
        noise = FractalNoise(seed=config.seed, octaves=config.octaves)
        return cls(noise, config.size, config.frequency, config.amplitude)

    @property
    def noise(self) -> FractalNoise:
        """Fractal noise source."""
        return self._noise

    @property
    def size(self) -> float:
        """Terrain side length."""
        return self._size

    @property
    def frequency(self) -> float:
        """Noise features across the terrain."""
        return self._frequency

    @property
    def amplitude(self) -> float:
        """Height scale."""
        return self._amplitude

    def to_noise_space(self, x, z):
        """Map world coordinates to noise-space coordinates."""
        fx = x / self._size * self._frequency
        fz = z / self._size * self._frequency
        return fx, fz

    def sample(self, x: float, z: float) -> float:
        """Return the terrain height at world position (x, z)."""
        fx, fz = self.to_noise_space(x, z)
        return self._noise.get(fx, fz) * self._amplitude

    def sample_grid(self, xs: np.ndarray, zs: np.ndarray) -> np.ndarray:
        """Return heights over the lattice ``xs x zs``.

        Args:
            xs: 1D world x coordinates.
            zs: 1D world z coordinates.

        Returns:
            Array of shape (len(zs), len(xs)), rows indexed by z.
        """
        fx, fz = self.to_noise_space(
            np.asarray(xs, dtype=np.float64), np.asarray(zs, dtype=np.float64)
        )
        return self._noise.grid(fx, fz) * self._amplitude

    def __call__(self, x: float, z: float) -> float:
        return self.sample(x, z)

    def __repr__(self) -> str:
        return (
            f"HeightField(noise={self._noise!r}, size={self._size}, "
            f"frequency={self._frequency}, amplitude={self._amplitude})"
        )
