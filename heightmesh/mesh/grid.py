"""Regular vertex grid sampled from a height field."""

from __future__ import annotations

import numpy as np
import structlog

from heightmesh.config import GenerationConfig
from heightmesh.fields.heightfield import HeightField

logger = structlog.get_logger()


class VertexGrid:
    """Container for grid vertex positions and planar UVs.

    Vertices are stored row-major: vertex ``(x, z)`` lives at index
    ``z * resolution + x``. The triangulator and normal synthesizer both rely
    on this layout.

    Args:
        positions: Array of shape (resolution**2, 3).
        uvs: Array of shape (resolution**2, 2).
        resolution: Vertices per side.
    """

    def __init__(self, positions: np.ndarray, uvs: np.ndarray, resolution: int):
        self.positions = np.ascontiguousarray(positions, dtype=np.float32)
        self.uvs = np.ascontiguousarray(uvs, dtype=np.float32)
        self.resolution = resolution

        n_vertices = resolution * resolution
        if self.positions.shape != (n_vertices, 3):
            raise ValueError(
                f"positions must have shape ({n_vertices}, 3), "
                f"got {self.positions.shape}"
            )
        if self.uvs.shape != (n_vertices, 2):
            raise ValueError(
                f"uvs must have shape ({n_vertices}, 2), got {self.uvs.shape}"
            )

    @property
    def n_vertices(self) -> int:
        """Number of vertices in the grid."""
        return len(self.positions)

    @property
    def heights(self) -> np.ndarray:
        """Vertex heights as a (resolution, resolution) array, rows indexed by z."""
        return self.positions[:, 1].reshape(self.resolution, self.resolution)

    def index(self, x: int, z: int) -> int:
        """Linear index of grid vertex (x, z)."""
        if not (0 <= x < self.resolution and 0 <= z < self.resolution):
            raise IndexError(f"grid vertex ({x}, {z}) out of range")
        return z * self.resolution + x

    def __len__(self) -> int:
        return self.n_vertices

    def __repr__(self) -> str:
        return f"VertexGrid(resolution={self.resolution}, n_vertices={self.n_vertices})"


def build_vertex_grid(
    config: GenerationConfig,
    height_field: HeightField | None = None,
) -> VertexGrid:
    """Sample the height field on a ``resolution x resolution`` grid.

    Grid coordinates are ``i * step`` with ``step = size / resolution`` for
    ``i`` in ``[0, resolution)``, so the last row and column sit one step
    short of ``size``. UVs are the planar projection ``(x / size, z / size)``.

    Args:
        config: Generation parameters.
        height_field: Field to sample. Built from ``config`` when omitted.

    Returns:
        VertexGrid with ``resolution**2`` vertices.
    """
    if height_field is None:
        height_field = HeightField.from_config(config)

    res = config.resolution
    size = config.size
    coords = np.arange(res, dtype=np.float64) * config.step

    # heights[z, x]
    heights = height_field.sample_grid(coords, coords)

    positions = np.empty((res * res, 3), dtype=np.float32)
    positions[:, 0] = np.tile(coords, res)
    positions[:, 1] = heights.ravel()
    positions[:, 2] = np.repeat(coords, res)

    uv_coords = coords / size
    uvs = np.empty((res * res, 2), dtype=np.float32)
    uvs[:, 0] = np.tile(uv_coords, res)
    uvs[:, 1] = np.repeat(uv_coords, res)

    logger.debug("Vertex grid sampled", resolution=res, n_vertices=res * res)
    return VertexGrid(positions, uvs, res)
