"""Index buffer for a quad-tessellated vertex grid."""

from __future__ import annotations

import numpy as np


def triangulate(resolution: int) -> np.ndarray:
    """Build the triangle index buffer for a ``resolution x resolution`` grid.

    Each cell ``(x, z)`` with ``root = z * resolution + x`` is split along the
    diagonal ``root -> root + resolution + 1`` into two triangles::

        A = (root, root + resolution, root + resolution + 1)
        B = (root, root + resolution + 1, root + 1)

    Cells are emitted row-major (z outer, x inner), A before B. Both
    triangles wind the same way, so face normals point to +y on a flat grid.

    Args:
        resolution: Vertices per side (>= 1).

    Returns:
        uint32 array of length ``6 * (resolution - 1)**2``; empty when
        ``resolution == 1``.

    Raises:
        ValueError: If resolution is less than 1.
    """
    if resolution < 1:
        raise ValueError(f"resolution must be at least 1, got {resolution}")

    cells = resolution - 1
    if cells == 0:
        return np.empty(0, dtype=np.uint32)

    x = np.arange(cells, dtype=np.uint32)
    z = np.arange(cells, dtype=np.uint32)
    root = (z[:, None] * np.uint32(resolution) + x[None, :]).ravel()

    below = root + np.uint32(resolution)
    diagonal = below + np.uint32(1)
    right = root + np.uint32(1)

    indices = np.empty((root.size, 6), dtype=np.uint32)
    indices[:, 0] = root
    indices[:, 1] = below
    indices[:, 2] = diagonal
    indices[:, 3] = root
    indices[:, 4] = diagonal
    indices[:, 5] = right
    return indices.ravel()
