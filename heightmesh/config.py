"""Terrain generation parameters."""

from __future__ import annotations

import enum
import math
import numbers
from typing import Any, Mapping

from heightmesh.exceptions import InvalidConfigError


class TerrainResolution(enum.IntEnum):
    """Named sampling resolutions (vertices per side)."""

    LOW = 256
    MEDIUM = 512
    HIGH = 1024


SEED_LIMIT = 2**32
# resolution**2 vertices must be addressable by uint32 indices
RESOLUTION_LIMIT = 2**16 + 1


def _positive_float(name: str, value: Any, allow_zero: bool = False) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidConfigError(f"{name} must be a real number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidConfigError(f"{name} must be finite, got {value}")
    if allow_zero:
        if value < 0:
            raise InvalidConfigError(f"{name} must be non-negative, got {value}")
    elif value <= 0:
        raise InvalidConfigError(f"{name} must be positive, got {value}")
    return value


def _integer(name: str, value: Any, minimum: int, limit: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidConfigError(f"{name} must be an integer, got {value!r}")
    value = int(value)
    if value < minimum:
        raise InvalidConfigError(f"{name} must be at least {minimum}, got {value}")
    if limit is not None and value >= limit:
        raise InvalidConfigError(f"{name} must be below {limit}, got {value}")
    return value


class GenerationConfig:
    """Immutable parameter set for one terrain generation.

    All values are checked on construction. Out of range values raise
    InvalidConfigError; nothing is clamped, so a config that constructs
    always describes exactly the terrain the caller asked for.

    Args:
        size: Side length of the square terrain in world units.
        resolution: Vertices per side. A TerrainResolution tier or any
            integer in [1, 65536], so every vertex fits a uint32 index.
        seed: Noise seed in [0, 2**32).
        octaves: Number of fractal noise octaves (>= 1).
        frequency: Noise features across the terrain (> 0).
        amplitude: Height scale applied to the noise (>= 0).

    Example:
        >>> config = GenerationConfig(size=32.0, resolution=TerrainResolution.LOW)
        >>> config.n_vertices
        65536
        >>> config.replace(amplitude=0.0).amplitude
        0.0
    """

    DEFAULTS: dict[str, Any] = {
        "size": 32.0,
        "resolution": TerrainResolution.MEDIUM,
        "seed": 42,
        "octaves": 3,
        "frequency": 4.0,
        "amplitude": 24.0,
    }

    def __init__(
        self,
        size: float = DEFAULTS["size"],
        resolution: int = DEFAULTS["resolution"],
        seed: int = DEFAULTS["seed"],
        octaves: int = DEFAULTS["octaves"],
        frequency: float = DEFAULTS["frequency"],
        amplitude: float = DEFAULTS["amplitude"],
    ):
        self._size = _positive_float("size", size)
        self._resolution = _integer(
            "resolution", resolution, minimum=1, limit=RESOLUTION_LIMIT
        )
        self._seed = _integer("seed", seed, minimum=0, limit=SEED_LIMIT)
        self._octaves = _integer("octaves", octaves, minimum=1)
        self._frequency = _positive_float("frequency", frequency)
        self._amplitude = _positive_float("amplitude", amplitude, allow_zero=True)

    @classmethod
    def default(cls) -> GenerationConfig:
        """Return the stock configuration (32 units, MEDIUM, seed 42)."""
        return cls()

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> GenerationConfig:
        """Create configuration from a mapping of field names.

        Missing fields take their defaults.

        Raises:
            InvalidConfigError: On unknown keys or invalid values.
        """
        unknown = set(values) - set(cls.DEFAULTS)
        if unknown:
            raise InvalidConfigError(
                f"Unknown configuration keys: {sorted(unknown)}. "
                f"Supported: {sorted(cls.DEFAULTS)}"
            )
        return cls(**values)

    @property
    def size(self) -> float:
        """Side length of the terrain."""
        return self._size

    @property
    def resolution(self) -> int:
        """Vertices per side."""
        return self._resolution

    @property
    def tier(self) -> TerrainResolution | None:
        """Named tier matching the resolution, or None for custom values."""
        try:
            return TerrainResolution(self._resolution)
        except ValueError:
            return None

    @property
    def seed(self) -> int:
        """Noise seed."""
        return self._seed

    @property
    def octaves(self) -> int:
        """Number of fractal noise octaves."""
        return self._octaves

    @property
    def frequency(self) -> float:
        """Noise features across the terrain."""
        return self._frequency

    @property
    def amplitude(self) -> float:
        """Height scale applied to the noise."""
        return self._amplitude

    @property
    def step(self) -> float:
        """Distance between neighbouring vertices."""
        return self._size / self._resolution

    @property
    def n_vertices(self) -> int:
        """Number of grid vertices (resolution**2)."""
        return self._resolution**2

    @property
    def n_triangles(self) -> int:
        """Number of triangles in the index buffer."""
        return 2 * (self._resolution - 1) ** 2

    @property
    def n_indices(self) -> int:
        """Length of the index buffer."""
        return 3 * self.n_triangles

    def as_dict(self) -> dict[str, Any]:
        """Return the configuration as plain field values."""
        return {
            "size": self._size,
            "resolution": self._resolution,
            "seed": self._seed,
            "octaves": self._octaves,
            "frequency": self._frequency,
            "amplitude": self._amplitude,
        }

    def replace(self, **changes: Any) -> GenerationConfig:
        """Return a new configuration with some fields changed.

        Raises:
            InvalidConfigError: On unknown fields or invalid values.
        """
        values = self.as_dict()
        values.update(changes)
        return self.from_dict(values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GenerationConfig):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __hash__(self) -> int:
        return hash(tuple(self.as_dict().values()))

    def __repr__(self) -> str:
        return (
            f"GenerationConfig(size={self._size}, resolution={self._resolution}, "
            f"seed={self._seed}, octaves={self._octaves}, "
            f"frequency={self._frequency}, amplitude={self._amplitude})"
        )
