"""Terrain mesh generation pipeline."""

from __future__ import annotations

from typing import Any

import numpy as np
import structlog

from heightmesh.config import GenerationConfig
from heightmesh.exceptions import HeightmeshError, MeshGenerationError
from heightmesh.fields.heightfield import HeightField
from heightmesh.mesh.grid import build_vertex_grid
from heightmesh.mesh.normals import compute_normals
from heightmesh.mesh.triangulate import triangulate

logger = structlog.get_logger()


class TriangleMesh:
    """Renderable triangle mesh buffers.

    The buffers are plain contiguous numpy arrays the caller owns; the
    generator keeps no reference to them.

    Args:
        positions: float32 array of shape (n_vertices, 3).
        uvs: float32 array of shape (n_vertices, 2).
        normals: float32 array of shape (n_vertices, 3).
        indices: uint32 triangle list.
        resolution: Vertices per side of the source grid.
        config: Parameters the mesh was generated from, if known.
    """

    def __init__(
        self,
        positions: np.ndarray,
        uvs: np.ndarray,
        normals: np.ndarray,
        indices: np.ndarray,
        resolution: int,
        config: GenerationConfig | None = None,
    ):
        self.positions = np.ascontiguousarray(positions, dtype=np.float32)
        self.uvs = np.ascontiguousarray(uvs, dtype=np.float32)
        self.normals = np.ascontiguousarray(normals, dtype=np.float32)
        self.indices = np.ascontiguousarray(indices, dtype=np.uint32)
        self.resolution = resolution
        self.config = config

        n_vertices = len(self.positions)
        if len(self.uvs) != n_vertices or len(self.normals) != n_vertices:
            raise MeshGenerationError(
                f"vertex attribute lengths differ: positions={n_vertices}, "
                f"uvs={len(self.uvs)}, normals={len(self.normals)}"
            )

    @property
    def n_vertices(self) -> int:
        """Number of mesh vertices."""
        return len(self.positions)

    @property
    def n_triangles(self) -> int:
        """Number of triangles in the index buffer."""
        return len(self.indices) // 3

    @property
    def triangles(self) -> np.ndarray:
        """Index buffer viewed as (n_triangles, 3)."""
        return self.indices.reshape(-1, 3)

    @property
    def heights(self) -> np.ndarray:
        """Vertex heights as a (resolution, resolution) array, rows indexed by z."""
        return self.positions[:, 1].reshape(self.resolution, self.resolution)

    def as_dict(self) -> dict[str, np.ndarray]:
        """Return the buffers keyed by vertex attribute name."""
        return {
            "positions": self.positions,
            "uvs": self.uvs,
            "normals": self.normals,
            "indices": self.indices,
        }

    def copy(self) -> TriangleMesh:
        return TriangleMesh(
            self.positions.copy(),
            self.uvs.copy(),
            self.normals.copy(),
            self.indices.copy(),
            self.resolution,
            config=self.config,
        )

    def centered(self, offset: tuple[float, float, float] | None = None) -> TriangleMesh:
        """Return a copy translated so the terrain is centred on the origin.

        Args:
            offset: Translation to apply. Defaults to ``(-size/2, 0, -size/2)``
                using the size of the generating config.

        Raises:
            MeshGenerationError: If no offset is given and the mesh has no config.
        """
        if offset is None:
            if self.config is None:
                raise MeshGenerationError(
                    "Mesh has no generation config; pass an explicit offset"
                )
            half = self.config.size / 2.0
            offset = (-half, 0.0, -half)

        mesh = self.copy()
        mesh.positions += np.asarray(offset, dtype=np.float32)
        return mesh

    def __repr__(self) -> str:
        return (
            f"TriangleMesh(resolution={self.resolution}, "
            f"n_vertices={self.n_vertices}, n_triangles={self.n_triangles})"
        )


def generate_terrain(
    config: GenerationConfig | None = None,
    **params: Any,
) -> TriangleMesh:
    """Generate a terrain mesh.

    Runs the four stages in order: height field, vertex grid, triangulation,
    smooth normals.

    Args:
        config: Generation parameters. When omitted, one is built from
            ``params`` (missing fields take the defaults).
        **params: Field overrides applied on top of ``config``.

    Returns:
        TriangleMesh with ``resolution**2`` vertices.

    Raises:
        InvalidConfigError: If the parameters are invalid. Raised before any
            buffer is allocated.
        MeshGenerationError: If a generation stage fails.

    Example:
        >>> mesh = generate_terrain(size=32.0, resolution=64, seed=7)
        >>> mesh.n_vertices, mesh.n_triangles
        (4096, 7938)
    """
    if config is None:
        config = GenerationConfig.from_dict(params)
    elif params:
        config = config.replace(**params)

    logger.info(
        "Generating terrain",
        resolution=config.resolution,
        size=config.size,
        seed=config.seed,
    )

    try:
        height_field = HeightField.from_config(config)
        grid = build_vertex_grid(config, height_field)

        indices = triangulate(config.resolution)
        logger.debug("Triangulated grid", n_triangles=len(indices) // 3)

        normals = compute_normals(grid.positions, indices)
        logger.debug("Computed vertex normals", n_vertices=len(normals))

        mesh = TriangleMesh(
            grid.positions,
            grid.uvs,
            normals,
            indices,
            config.resolution,
            config=config,
        )
    except HeightmeshError:
        raise
    except Exception as e:
        raise MeshGenerationError(f"Terrain generation failed: {e}") from e

    logger.info(
        "Terrain generated",
        n_vertices=mesh.n_vertices,
        n_triangles=mesh.n_triangles,
    )
    return mesh


def validate_mesh(mesh: TriangleMesh, tolerance: float = 1e-4) -> tuple[bool, str]:
    """Validate the structure of a terrain mesh.

    Checks that:
    - Attribute buffers have ``resolution**2`` entries
    - The index buffer has ``6 * (resolution - 1)**2`` entries, all in range
    - Positions are finite
    - Normals have unit length (within tolerance)

    Args:
        mesh: Mesh to check.
        tolerance: Allowed deviation of normal lengths from 1.

    Returns:
        Tuple of (is_valid, message).
    """
    res = mesh.resolution
    n_vertices = res * res

    for name, buffer in (
        ("positions", mesh.positions),
        ("uvs", mesh.uvs),
        ("normals", mesh.normals),
    ):
        if len(buffer) != n_vertices:
            return False, (
                f"{name} has {len(buffer)} entries, expected {n_vertices}"
            )

    expected_indices = 6 * (res - 1) ** 2
    if len(mesh.indices) != expected_indices:
        return False, (
            f"index buffer has {len(mesh.indices)} entries, "
            f"expected {expected_indices}"
        )
    if len(mesh.indices) and int(mesh.indices.max()) >= n_vertices:
        return False, "index buffer references vertices out of range"

    if np.any(~np.isfinite(mesh.positions)):
        n_bad = int(np.sum(~np.all(np.isfinite(mesh.positions), axis=1)))
        logger.warning("Non-finite vertex positions", n_vertices=n_bad)
        return False, f"{n_bad} vertices have NaN or infinite positions"

    lengths = np.linalg.norm(mesh.normals, axis=1)
    if np.any(np.abs(lengths - 1.0) > tolerance):
        worst = float(np.max(np.abs(lengths - 1.0)))
        return False, f"normals are not unit length (max deviation: {worst:.2e})"

    return True, "Mesh is valid"


def mesh_statistics(mesh: TriangleMesh) -> dict:
    """Return summary statistics of a terrain mesh.

    Returns:
        Dictionary with vertex/triangle counts and height range.
    """
    heights = mesh.positions[:, 1].astype(np.float64)
    return {
        "resolution": mesh.resolution,
        "n_vertices": mesh.n_vertices,
        "n_triangles": mesh.n_triangles,
        "min_height": float(heights.min()),
        "max_height": float(heights.max()),
        "mean_height": float(heights.mean()),
    }
