from worldgen.world import LocalGrid, RegionGrid, TemperatureState, World, WorldSimGrid, local_shape, region_shape


def test_refinement_scales() -> None:
    assert region_shape(2048, 1024) == (16384, 8192)
    assert local_shape(4, 2) == (128, 64)


def test_grids_derive_their_dimensions() -> None:
    region = RegionGrid.for_coarse(16, 8)
    local = LocalGrid.for_region(region)

    assert (region.width, region.height) == (128, 64)
    assert (local.width, local.height) == (4096, 2048)
    assert region.biome == []
    assert local.color.size == 0


def test_world_bundles_unpopulated_grids() -> None:
    sim = WorldSimGrid(width=16, height=8)
    region = RegionGrid.for_coarse(sim.width, sim.height)
    world = World(sim=sim, region=region, local=LocalGrid.for_region(region))

    assert world.sim.pressure.size == 0
    assert world.sim.plate_id.dtype.kind == "i"


def test_temperature_state_defaults_empty() -> None:
    state = TemperatureState()
    assert state.surface.size == 0
    assert state.heat_flux.size == 0
