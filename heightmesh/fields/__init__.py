"""Height field sampling."""

from heightmesh.fields.heightfield import FractalNoise, HeightField

__all__ = ["FractalNoise", "HeightField"]
