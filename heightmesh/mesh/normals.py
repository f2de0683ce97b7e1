"""Smooth per-vertex normals from triangle faces."""

from __future__ import annotations

import numpy as np

from heightmesh.exceptions import MeshGenerationError

UP = np.array([0.0, 1.0, 0.0])


def face_normals(positions: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """Return the unnormalised ``cross(p1 - p0, p2 - p0)`` of every triangle.

    Args:
        positions: Vertex positions, shape (n_vertices, 3).
        indices: Flat triangle index buffer.

    Returns:
        Array of shape (n_triangles, 3), float64.
    """
    positions = np.asarray(positions, dtype=np.float64)
    triangles = _triangles(indices, len(positions))

    p0 = positions[triangles[:, 0]]
    p1 = positions[triangles[:, 1]]
    p2 = positions[triangles[:, 2]]
    return np.cross(p1 - p0, p2 - p0)


def compute_normals(positions: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """Compute smooth vertex normals.

    Every triangle's unit face normal is added to each of its three vertices
    and the sums are normalised afterwards. Faces are not weighted by area or
    angle. Zero-area faces contribute nothing. A vertex whose sum is exactly
    zero (it belongs to no triangle, or only to zero-area ones) gets the up
    vector (0, 1, 0). Non-finite positions are not sanitised: NaN flows into
    the normals of every vertex sharing a triangle with them.

    Args:
        positions: Vertex positions, shape (n_vertices, 3).
        indices: Flat triangle index buffer, length divisible by 3.

    Returns:
        float32 array of shape (n_vertices, 3).

    Raises:
        MeshGenerationError: If the index buffer is malformed.
    """
    positions = np.asarray(positions, dtype=np.float64)
    if positions.ndim != 2 or positions.shape[1] != 3:
        raise MeshGenerationError(
            f"positions must have shape (n_vertices, 3), got {positions.shape}"
        )

    n_vertices = len(positions)
    triangles = _triangles(indices, n_vertices)
    faces = face_normals(positions, indices)

    lengths = np.linalg.norm(faces, axis=1, keepdims=True)
    with np.errstate(invalid="ignore", divide="ignore"):
        unit_faces = np.where(lengths == 0, 0.0, faces / lengths)

    accumulated = np.zeros((n_vertices, 3), dtype=np.float64)
    for corner in range(3):
        np.add.at(accumulated, triangles[:, corner], unit_faces)

    # NaN sums propagate; only an exactly zero sum falls back to UP
    norms = np.linalg.norm(accumulated, axis=1, keepdims=True)
    with np.errstate(invalid="ignore", divide="ignore"):
        normals = np.where(norms == 0, UP, accumulated / norms)
    return normals.astype(np.float32)


def _triangles(indices: np.ndarray, n_vertices: int) -> np.ndarray:
    """Reshape a flat index buffer to (n_triangles, 3) after checking it."""
    indices = np.asarray(indices)
    if indices.ndim != 1:
        raise MeshGenerationError("indices must be a flat 1D array")
    if len(indices) % 3 != 0:
        raise MeshGenerationError(
            f"index buffer length ({len(indices)}) is not a multiple of 3"
        )
    if len(indices) and (indices.min() < 0 or indices.max() >= n_vertices):
        raise MeshGenerationError(
            f"index buffer references vertices outside [0, {n_vertices})"
        )
    return indices.astype(np.intp).reshape(-1, 3)
