"""Custom exceptions for the heightmesh package."""


class HeightmeshError(Exception):
    """Base exception for heightmesh package."""

    pass


class InvalidConfigError(HeightmeshError, ValueError):
    """Generation parameters are out of range."""

    pass


class MeshGenerationError(HeightmeshError):
    """Mesh generation failed."""

    pass


class RidgeError(HeightmeshError):
    """Ridge carving failed."""

    pass
