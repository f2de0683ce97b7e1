"""Mesh generation utilities."""

from heightmesh.mesh.builder import TerrainBuilder
from heightmesh.mesh.grid import VertexGrid, build_vertex_grid
from heightmesh.mesh.normals import compute_normals, face_normals
from heightmesh.mesh.ridge import carve_ridge, find_peaks, ridge_path
from heightmesh.mesh.terrain import (
    TriangleMesh,
    generate_terrain,
    mesh_statistics,
    validate_mesh,
)
from heightmesh.mesh.triangulate import triangulate

__all__ = [
    "TerrainBuilder",
    "VertexGrid",
    "build_vertex_grid",
    "triangulate",
    "compute_normals",
    "face_normals",
    "TriangleMesh",
    "generate_terrain",
    "validate_mesh",
    "mesh_statistics",
    "find_peaks",
    "ridge_path",
    "carve_ridge",
]
