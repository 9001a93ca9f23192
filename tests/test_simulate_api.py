import numpy as np
import pytest

from OpenUSim import LayerStack, DerivedQuantities, ResultGrid, InvalidConfiguration
from OpenUSim import simulate


def test_simulate_single_point_returns_quantities():
    res = simulate(LayerStack.default(), frequency=5.0, power=50.0)
    assert isinstance(res, DerivedQuantities)
    assert np.isclose(res.weighted_attenuation, 6.74 / 6.8)
    assert np.isclose(res.base_penetration_depth_cm, 100 / (6.74 / 6.8) / 5)
    assert np.isclose(res.penetration_depth_cm, res.base_penetration_depth_cm / 2)
    assert len(res.reflections) == 3


def test_simulate_accepts_plain_layer_list():
    res = simulate([("Skin", 5.0)], 5.0, 50.0)
    assert np.isclose(res.penetration_depth_cm, 12.5)


def test_simulate_sweep_returns_grid():
    grid = simulate(LayerStack.default(), frequency=[2.0, 5.0, 10.0], power=50.0)
    assert isinstance(grid, ResultGrid)
    assert grid.dims == ['frequency']
    assert grid.shape == (3,)
    depth = grid.get('penetration_depth_cm')
    assert depth.shape == (3,)
    assert np.all(np.diff(depth) < 0)


def test_simulate_two_dimensional_sweep():
    grid = simulate(LayerStack.default(), frequency=[2.0, 5.0], power=np.array([25.0, 50.0, 100.0]))
    assert grid.dims == ['frequency', 'power']
    assert grid.shape == (2, 3)
    point = grid.sel(frequency=5.0, power=100.0)
    assert np.isclose(point.penetration_depth_cm, point.base_penetration_depth_cm)


def test_simulate_clamps_when_asked():
    res = simulate([("Skin", 20.0)], frequency=20.0, power=3.0, clamp=True)
    assert res.frequency == 15.0
    assert res.power == 10.0
    assert np.isclose(res.total_thickness, 10.0)

    grid = simulate(LayerStack.default(), frequency=[20.0, 0.2], power=3.0, clamp=True)
    assert grid.coords['frequency'] == [15.0, 1.0]
    assert all(r.power == 10.0 for r in grid)


def test_simulate_raw_sweep_output():
    out = simulate(LayerStack.default(), power=[40.0, 80.0], return_grid=False)
    assert set(out) == {'coords', 'results', 'result_grid'}
    assert len(out['results']) == 2


@pytest.mark.parametrize("kwargs", [
    {'frequency': []},
    {'power': np.array([])},
    {'frequency': 'abc'},
    {'frequency': None},
    {'power': ['a', 'b']},
])
def test_simulate_rejects_unusable_settings(kwargs):
    with pytest.raises(InvalidConfiguration):
        simulate(LayerStack.default(), **kwargs)


def test_simulate_rejects_nan_when_clamping():
    with pytest.raises(InvalidConfiguration):
        simulate(LayerStack.default(), frequency=float('nan'), power=50.0, clamp=True)
    with pytest.raises(InvalidConfiguration):
        simulate(LayerStack.default(), frequency=float('nan'), power=50.0)
