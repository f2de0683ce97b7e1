"""
Tests for the ridge carving post-process.
"""

import numpy as np
import pytest

from heightmesh import RidgeError, TriangleMesh, carve_ridge, generate_terrain
from heightmesh.mesh import compute_normals, triangulate
from heightmesh.mesh.ridge import find_peaks, grid_graph, ridge_path


def make_mesh(heights):
    """Build a unit-step grid mesh from a (resolution, resolution) height array."""
    heights = np.asarray(heights, dtype=float)
    res = heights.shape[0]
    coords = np.arange(res, dtype=float)
    xs, zs = np.meshgrid(coords, coords)
    positions = np.column_stack([xs.ravel(), heights.ravel(), zs.ravel()])
    uvs = positions[:, [0, 2]] / res
    indices = triangulate(res)
    return TriangleMesh(positions, uvs, compute_normals(positions, indices), indices, res)


@pytest.fixture
def two_peak_mesh():
    """9x9 grid with peaks at (2, 2) height 10 and (6, 6) height 8."""
    heights = np.zeros((9, 9))
    heights[2, 2] = 10.0
    heights[6, 6] = 8.0
    return make_mesh(heights)


class TestFindPeaks:
    """Test peak detection."""

    def test_two_peaks(self, two_peak_mesh):
        peaks = find_peaks(two_peak_mesh.positions, 9)
        np.testing.assert_array_equal(peaks, [2 * 9 + 2, 6 * 9 + 6])

    def test_ordered_by_origin_distance(self):
        heights = np.zeros((9, 9))
        heights[7, 7] = 10.0
        heights[1, 1] = 6.0
        peaks = find_peaks(make_mesh(heights).positions, 9)
        np.testing.assert_array_equal(peaks, [1 * 9 + 1, 7 * 9 + 7])

    def test_close_peaks_suppressed(self):
        heights = np.zeros((9, 9))
        heights[2, 2] = 10.0
        heights[2, 4] = 9.0
        peaks = find_peaks(make_mesh(heights).positions, 9)
        np.testing.assert_array_equal(peaks, [2 * 9 + 2])

    def test_threshold(self, two_peak_mesh):
        peaks = find_peaks(two_peak_mesh.positions, 9, threshold=9.0)
        np.testing.assert_array_equal(peaks, [2 * 9 + 2])

    def test_min_distance(self, two_peak_mesh):
        peaks = find_peaks(two_peak_mesh.positions, 9, min_distance=10.0)
        np.testing.assert_array_equal(peaks, [2 * 9 + 2])

    def test_shape_checked(self, two_peak_mesh):
        with pytest.raises(ValueError):
            find_peaks(two_peak_mesh.positions, 8)


class TestRidgePath:
    """Test shortest-path linking of peaks."""

    def test_graph_edge_count(self):
        graph = grid_graph(make_mesh(np.zeros((3, 3))).positions, 3)
        # 6 horizontal + 6 vertical + 4 + 4 diagonal
        assert graph.nnz == 20

    def test_graph_weights_positive(self, two_peak_mesh):
        graph = grid_graph(two_peak_mesh.positions, 9)
        assert np.all(graph.data > 0)

    def test_diagonal_path(self, two_peak_mesh):
        path = ridge_path(two_peak_mesh.positions, 9, [20, 60])
        np.testing.assert_array_equal(path, [20, 30, 40, 50, 60])

    def test_path_is_connected(self):
        mesh = generate_terrain(size=16.0, resolution=16, seed=9, amplitude=10.0)
        path = ridge_path(mesh.positions, 16, [0, 255, 15])

        assert path[0] == 0
        assert path[-1] == 15
        assert 255 in path
        x, z = path % 16, path // 16
        steps = np.maximum(np.abs(np.diff(x)), np.abs(np.diff(z)))
        assert np.all(steps == 1)

    def test_requires_two_peaks(self, two_peak_mesh):
        with pytest.raises(RidgeError):
            ridge_path(two_peak_mesh.positions, 9, [20])


class TestCarveRidge:
    """Test ridge carving."""

    def test_flattens_off_path(self, two_peak_mesh):
        carved = carve_ridge(two_peak_mesh, floor=-1.0)
        path = [20, 30, 40, 50, 60]

        np.testing.assert_array_equal(
            carved.positions[path, 1], two_peak_mesh.positions[path, 1]
        )
        off = np.setdiff1d(np.arange(81), path)
        assert np.all(carved.positions[off, 1] == -1.0)

    def test_input_untouched(self, two_peak_mesh):
        before = two_peak_mesh.positions.copy()
        carve_ridge(two_peak_mesh)
        np.testing.assert_array_equal(two_peak_mesh.positions, before)

    def test_structure_preserved(self, two_peak_mesh):
        carved = carve_ridge(two_peak_mesh)
        np.testing.assert_array_equal(carved.indices, two_peak_mesh.indices)
        np.testing.assert_array_equal(carved.uvs, two_peak_mesh.uvs)
        np.testing.assert_allclose(np.linalg.norm(carved.normals, axis=1), 1.0, atol=1e-4)

    def test_explicit_peaks(self, two_peak_mesh):
        carved = carve_ridge(two_peak_mesh, peaks=[0, 8])
        assert carved.positions[20, 1] == 0.0
        assert carved.positions[60, 1] == 0.0

    def test_single_peak_raises(self):
        heights = np.zeros((9, 9))
        heights[4, 4] = 5.0
        with pytest.raises(RidgeError):
            carve_ridge(make_mesh(heights))

    def test_single_vertex_raises(self):
        mesh = generate_terrain(size=4.0, resolution=1)
        with pytest.raises(RidgeError):
            carve_ridge(mesh)
