"""High-level TerrainBuilder API for step-by-step terrain configuration."""

from __future__ import annotations

from heightmesh.config import GenerationConfig
from heightmesh.mesh.terrain import TriangleMesh, generate_terrain, mesh_statistics


class TerrainBuilder:
    """Fluent API for adjusting terrain parameters and generating meshes.

    Every setter validates immediately, so an invalid value is reported at
    the call that introduced it rather than at ``build()``. The builder can
    be reused: change a parameter and call ``build()`` again to regenerate.

    Args:
        config: Starting parameters. Defaults to ``GenerationConfig.default()``.

    Example:
        >>> from heightmesh import TerrainBuilder, TerrainResolution
        >>> mesh = (
        ...     TerrainBuilder()
        ...     .set_size(32.0)
        ...     .set_resolution(TerrainResolution.LOW)
        ...     .set_frequency(4.0)
        ...     .set_amplitude(24.0)
        ...     .build()
        ... )
    """

    def __init__(self, config: GenerationConfig | None = None):
        self._config = config or GenerationConfig.default()
        self._mesh: TriangleMesh | None = None

    @property
    def config(self) -> GenerationConfig:
        """Return the current generation parameters."""
        return self._config

    @property
    def last_mesh(self) -> TriangleMesh | None:
        """Return the mesh from the most recent build, or None."""
        return self._mesh

    def _update(self, **changes) -> TerrainBuilder:
        self._config = self._config.replace(**changes)
        return self

    def set_size(self, size: float) -> TerrainBuilder:
        """Set terrain side length.

        Returns:
            Self for method chaining.
        """
        return self._update(size=size)

    def set_resolution(self, resolution: int) -> TerrainBuilder:
        """Set vertices per side (a TerrainResolution tier or positive int).

        Returns:
            Self for method chaining.
        """
        return self._update(resolution=resolution)

    def set_seed(self, seed: int) -> TerrainBuilder:
        """Set noise seed.

        Returns:
            Self for method chaining.
        """
        return self._update(seed=seed)

    def set_octaves(self, octaves: int) -> TerrainBuilder:
        """Set number of noise octaves.

        Returns:
            Self for method chaining.
        """
        return self._update(octaves=octaves)

    def set_frequency(self, frequency: float) -> TerrainBuilder:
        """Set noise frequency across the terrain.

        Returns:
            Self for method chaining.
        """
        return self._update(frequency=frequency)

    def set_amplitude(self, amplitude: float) -> TerrainBuilder:
        """Set height scale.

        Returns:
            Self for method chaining.
        """
        return self._update(amplitude=amplitude)

    def build(self) -> TriangleMesh:
        """Generate the terrain mesh for the current parameters.

        Returns:
            A new TriangleMesh.

        Raises:
            MeshGenerationError: If generation fails.
        """
        self._mesh = generate_terrain(self._config)
        return self._mesh

    def get_mesh_info(self) -> dict:
        """Return information about the configuration and last built mesh.

        Returns:
            Dictionary with configuration values and, after a build, mesh
            statistics.
        """
        info = self._config.as_dict()
        tier = self._config.tier
        info["tier"] = tier.name if tier is not None else None

        if self._mesh is not None:
            info.update(mesh_statistics(self._mesh))

        return info
