"""
Terrain Generation Demo

Generates the stock terrain (32 x 32 units, MEDIUM resolution, seed 42),
prints its statistics, then carves a ridge through its highest peaks.

Usage:
    python generate_terrain.py
"""

from heightmesh import TerrainBuilder, TerrainResolution, carve_ridge, validate_mesh


def main():
    builder = (
        TerrainBuilder()
        .set_size(32.0)
        .set_resolution(TerrainResolution.MEDIUM)
        .set_frequency(4.0)
        .set_amplitude(24.0)
    )

    print("Generating terrain...")
    mesh = builder.build()

    is_valid, message = validate_mesh(mesh)
    print(f"Validation: {message}")
    if not is_valid:
        return

    for key, value in builder.get_mesh_info().items():
        print(f"  {key}: {value}")

    print("Carving ridge...")
    carved = carve_ridge(mesh)
    ridge_vertices = int((carved.positions[:, 1] != 0.0).sum())
    print(f"  vertices left on ridge: {ridge_vertices}")

    # Renderers place the terrain centred on the world origin
    buffers = mesh.centered().as_dict()
    for name, buffer in buffers.items():
        print(f"  {name}: shape={buffer.shape}, dtype={buffer.dtype}")


if __name__ == "__main__":
    main()
