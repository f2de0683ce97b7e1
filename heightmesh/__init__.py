"""heightmesh - procedural terrain mesh generation.

Turns a handful of numeric parameters (terrain size, sampling resolution,
noise seed, octaves, frequency and amplitude) into renderable triangle mesh
buffers approximating a heightmapped landscape.

Example:
    >>> from heightmesh import GenerationConfig, TerrainResolution, generate_terrain
    >>> config = GenerationConfig(size=32.0, resolution=TerrainResolution.LOW)
    >>> mesh = generate_terrain(config)
    >>> mesh.positions.shape, mesh.indices.shape
    ((65536, 3), (390150,))
"""

from heightmesh.config import GenerationConfig, TerrainResolution
from heightmesh.exceptions import (
    HeightmeshError,
    InvalidConfigError,
    MeshGenerationError,
    RidgeError,
)
from heightmesh.fields import FractalNoise, HeightField
from heightmesh.mesh import (
    TerrainBuilder,
    TriangleMesh,
    carve_ridge,
    generate_terrain,
    validate_mesh,
)

__version__ = "0.1.0"

__all__ = [
    # Main API
    "generate_terrain",
    "GenerationConfig",
    "TerrainResolution",
    "TerrainBuilder",
    "TriangleMesh",
    "HeightField",
    "FractalNoise",
    "validate_mesh",
    "carve_ridge",
    # Exceptions
    "HeightmeshError",
    "InvalidConfigError",
    "MeshGenerationError",
    "RidgeError",
]
