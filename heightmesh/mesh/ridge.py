"""Ridge carving post-process over a generated terrain grid.

Finds high local maxima ("peaks"), links consecutive peaks with shortest
paths over the grid that stay on high ground, and flattens everything off
the path. This pass is independent of terrain generation and never runs as
part of ``generate_terrain``.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import structlog
from scipy import ndimage
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import dijkstra

from heightmesh.exceptions import RidgeError
from heightmesh.mesh.normals import compute_normals
from heightmesh.mesh.terrain import TriangleMesh

logger = structlog.get_logger()

# Forward neighbour offsets (dx, dz); the graph is undirected.
_NEIGHBOUR_OFFSETS = ((1, 0), (0, 1), (1, 1), (1, -1))


def _grid_heights(positions: np.ndarray, resolution: int) -> np.ndarray:
    positions = np.asarray(positions)
    if positions.shape != (resolution * resolution, 3):
        raise ValueError(
            f"positions must have shape ({resolution * resolution}, 3), "
            f"got {positions.shape}"
        )
    return positions[:, 1].astype(np.float64).reshape(resolution, resolution)


def find_peaks(
    positions: np.ndarray,
    resolution: int,
    threshold: float | None = None,
    min_distance: float = 4.0,
) -> np.ndarray:
    """Find well separated high local maxima.

    A vertex is a candidate if its height is at least ``threshold`` and no
    vertex in its 8-neighbourhood is higher. Candidates are accepted highest
    first, skipping any within ``min_distance`` of an accepted peak.

    Args:
        positions: Grid vertex positions, shape (resolution**2, 3).
        resolution: Vertices per side.
        threshold: Minimum peak height. Default: ``0.999 * max_height / 2``.
        min_distance: Minimum 3D distance between accepted peaks.

    Returns:
        Vertex indices of the peaks ordered by planar distance from the origin.
    """
    heights = _grid_heights(positions, resolution)
    positions = np.asarray(positions, dtype=np.float64)

    if threshold is None:
        threshold = 0.999 * heights.max() / 2.0

    local_max = ndimage.maximum_filter(heights, size=3, mode="nearest") == heights
    candidates = np.flatnonzero(local_max & (heights >= threshold))

    flat_heights = heights.ravel()
    order = np.argsort(-flat_heights[candidates], kind="stable")

    accepted: list[int] = []
    for idx in candidates[order]:
        if accepted:
            distances = np.linalg.norm(positions[accepted] - positions[idx], axis=1)
            if np.any(distances < min_distance):
                continue
        accepted.append(int(idx))

    peaks = np.asarray(accepted, dtype=np.intp)
    origin_distance = np.hypot(positions[peaks, 0], positions[peaks, 2])
    return peaks[np.lexsort((peaks, origin_distance))]


def grid_graph(positions: np.ndarray, resolution: int):
    """Build the weighted 8-connected adjacency graph of the grid.

    Edge weights are the planar edge length scaled up by the height
    difference along the edge and by how far the lower endpoint sits below
    the highest vertex, both relative to the terrain's height range.

    Returns:
        scipy.sparse CSR matrix of shape (resolution**2, resolution**2) with
        one entry per undirected edge.
    """
    heights = _grid_heights(positions, resolution)
    positions = np.asarray(positions, dtype=np.float64)

    top = heights.max()
    span = top - heights.min()
    if span <= 0:
        span = 1.0

    index = np.arange(resolution * resolution).reshape(resolution, resolution)
    rows, cols = [], []
    for dx, dz in _NEIGHBOUR_OFFSETS:
        z0, z1 = max(0, -dz), resolution - max(0, dz)
        x0, x1 = 0, resolution - dx
        src = index[z0:z1, x0:x1]
        dst = index[z0 + dz : z1 + dz, x0 + dx : x1 + dx]
        rows.append(src.ravel())
        cols.append(dst.ravel())

    rows = np.concatenate(rows)
    cols = np.concatenate(cols)

    ha = heights.ravel()[rows]
    hb = heights.ravel()[cols]
    planar = np.hypot(
        positions[cols, 0] - positions[rows, 0],
        positions[cols, 2] - positions[rows, 2],
    )
    weights = planar * (
        1.0 + np.abs(ha - hb) / span + (top - np.minimum(ha, hb)) / span
    )

    n = resolution * resolution
    return coo_matrix((weights, (rows, cols)), shape=(n, n)).tocsr()


def ridge_path(
    positions: np.ndarray,
    resolution: int,
    peaks: Sequence[int],
) -> np.ndarray:
    """Connect consecutive peaks with shortest paths over the grid.

    Args:
        positions: Grid vertex positions, shape (resolution**2, 3).
        resolution: Vertices per side.
        peaks: Vertex indices to visit, in order.

    Returns:
        Ordered vertex indices of the path, starting at ``peaks[0]`` and
        ending at ``peaks[-1]``.

    Raises:
        RidgeError: If fewer than two peaks are given or a peak is
            unreachable.
    """
    peaks = [int(p) for p in peaks]
    if len(peaks) < 2:
        raise RidgeError(f"At least two peaks are required, got {len(peaks)}")

    graph = grid_graph(positions, resolution)

    path = [peaks[0]]
    for start, end in zip(peaks[:-1], peaks[1:]):
        if start == end:
            continue
        distances, predecessors = dijkstra(
            graph, directed=False, indices=start, return_predecessors=True
        )
        if not np.isfinite(distances[end]):
            raise RidgeError(f"No path between vertices {start} and {end}")

        segment = []
        node = end
        while node != start:
            segment.append(node)
            node = int(predecessors[node])
        path.extend(reversed(segment))

    logger.debug("Ridge path traced", n_peaks=len(peaks), n_vertices=len(path))
    return np.asarray(path, dtype=np.intp)


def carve_ridge(
    mesh: TriangleMesh,
    peaks: Sequence[int] | None = None,
    floor: float = 0.0,
    min_distance: float = 4.0,
) -> TriangleMesh:
    """Flatten every vertex that is not on the ridge path.

    Args:
        mesh: Terrain mesh to carve. Left unchanged.
        peaks: Vertex indices to link. Found with ``find_peaks`` when omitted.
        floor: Height given to vertices off the ridge.
        min_distance: Peak spacing used when peaks are found automatically.

    Returns:
        New TriangleMesh with recomputed normals.

    Raises:
        RidgeError: If fewer than two peaks are available.
    """
    if peaks is None:
        peaks = find_peaks(mesh.positions, mesh.resolution, min_distance=min_distance)

    if len(peaks) < 2:
        logger.warning("Not enough peaks for a ridge", n_peaks=len(peaks))
        raise RidgeError(f"At least two peaks are required, got {len(peaks)}")

    path = ridge_path(mesh.positions, mesh.resolution, peaks)

    positions = mesh.positions.copy()
    off_ridge = np.ones(len(positions), dtype=bool)
    off_ridge[path] = False
    positions[off_ridge, 1] = floor

    normals = compute_normals(positions, mesh.indices)
    logger.info(
        "Ridge carved",
        n_peaks=len(peaks),
        n_ridge_vertices=int(np.count_nonzero(~off_ridge)),
    )
    return TriangleMesh(
        positions,
        mesh.uvs.copy(),
        normals,
        mesh.indices.copy(),
        mesh.resolution,
        config=mesh.config,
    )
