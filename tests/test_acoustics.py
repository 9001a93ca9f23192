import itertools

import numpy as np
import pytest

from usim import (
    AggregateResult, LayerStack, TissueKind, TransducerSettings, InvalidConfiguration,
    aggregate_layers, compute_derived_quantities, compute_reflection, interface_reflections,
)
from usim.core.acoustics import (
    wavelength_m, axial_resolution_mm, base_penetration_depth_cm, penetration_depth_cm, round_trip_time_us,
)


def derive(stack, frequency=5.0, power=50.0):
    return compute_derived_quantities(TransducerSettings(frequency=frequency, power=power), aggregate_layers(stack))


def test_single_skin_layer_reference_scenario():
    res = derive([("Skin", 5.0)], frequency=5.0, power=50.0)
    assert np.isclose(res.wavelength, 0.000308)
    assert np.isclose(res.wavelength_mm, 0.308)
    assert np.isclose(res.axial_resolution_mm, 0.154)
    assert np.isclose(res.base_penetration_depth_cm, 25.0)
    assert np.isclose(res.penetration_depth_cm, 12.5)
    assert np.isclose(res.round_trip_us, 25 / 0.154)
    assert np.isclose(res.round_trip_us, 162.338, atol=1e-3)
    assert res.reflections == ()
    assert res.formatted()['round_trip_us'] == '162.338'
    assert res.formatted()['penetration_depth_cm'] == '12.5'


def test_skin_bone_interface_echoes_strongly():
    res = derive([("Skin", 0.3), ("Bone", 1.5)])
    assert len(res.reflections) == 1
    z_skin, z_bone = 1540 * 1100, 4080 * 1900
    expected = ((z_bone - z_skin) / (z_bone + z_skin)) ** 2 * 100
    assert np.isclose(res.reflections[0], expected)
    assert res.reflections[0] > 40.0


def test_reflection_is_symmetric_and_zero_at_null_interface():
    for a, b in itertools.product(TissueKind, repeat=2):
        assert compute_reflection(a, b) == pytest.approx(compute_reflection(b, a))
        assert 0.0 <= compute_reflection(a, b) < 100.0
    for a in TissueKind:
        assert compute_reflection(a, a) == 0.0


def test_reflections_follow_stack_order():
    stack = LayerStack(("Skin", 0.3), ("Fat", 1.5), ("Bone", 1.0), ("Brain", 4.0))
    res = derive(stack)
    assert len(res.reflections) == len(stack) - 1
    expected = [compute_reflection("Skin", "Fat"), compute_reflection("Fat", "Bone"),
                compute_reflection("Bone", "Brain")]
    np.testing.assert_allclose(res.reflections, expected)

    interfaces = interface_reflections(stack)
    np.testing.assert_allclose([i.depth_cm for i in interfaces], [0.3, 1.8, 2.8])
    assert interfaces[1].label == 'Fat → Bone'
    assert interfaces[1].impedance_difference == abs(1450 * 920 - 4080 * 1900)
    assert np.isclose(interfaces[1].transmission_percent, 100 - interfaces[1].reflection_percent)


def test_penetration_depth_is_linear_in_power():
    stack = LayerStack.default()
    for p in [10, 20, 25, 40, 50]:
        low = derive(stack, power=p)
        high = derive(stack, power=2 * p)
        assert np.isclose(high.penetration_depth_cm, 2 * low.penetration_depth_cm)
        assert np.isclose(high.base_penetration_depth_cm, low.base_penetration_depth_cm)


def test_doubling_frequency_halves_wavelength_and_base_depth():
    stack = LayerStack.default()
    for f in [1.0, 2.5, 5.0, 7.5]:
        low = derive(stack, frequency=f)
        high = derive(stack, frequency=2 * f)
        assert np.isclose(high.wavelength, low.wavelength / 2)
        assert np.isclose(high.base_penetration_depth_cm, low.base_penetration_depth_cm / 2)


def test_outputs_are_finite_over_the_slider_ranges():
    stack = LayerStack(("Skin", 0.3), ("Bone", 10.0), ("Blood", 0.1))
    for f in np.arange(1.0, 15.5, 0.5):
        for p in range(10, 105, 5):
            res = derive(stack, frequency=f, power=p)
            values = [res.wavelength, res.axial_resolution_mm, res.penetration_depth_cm, res.round_trip_us]
            assert np.all(np.isfinite(values))


def test_accepts_stack_instead_of_aggregate():
    stack = LayerStack.default()
    settings = TransducerSettings(frequency=7.5, power=60)
    assert compute_derived_quantities(settings, stack) == compute_derived_quantities(settings, aggregate_layers(stack))


@pytest.mark.parametrize("frequency", [0.0, -5.0])
def test_non_positive_frequency_is_invalid(frequency):
    with pytest.raises(InvalidConfiguration):
        derive([("Skin", 1.0)], frequency=frequency)


def test_non_positive_attenuation_is_invalid():
    agg = AggregateResult(total_thickness=1.0, weighted_speed=1540.0, weighted_attenuation=0.0)
    with pytest.raises(InvalidConfiguration):
        compute_derived_quantities(TransducerSettings(), agg)


def test_negative_power_is_invalid():
    with pytest.raises(InvalidConfiguration):
        derive([("Skin", 1.0)], power=-10)


def test_formula_helpers_broadcast_over_arrays():
    freqs = np.array([1.0, 2.0, 4.0])
    np.testing.assert_allclose(wavelength_m(1540.0, freqs), 1540.0 / (freqs * 1e6))
    np.testing.assert_allclose(axial_resolution_mm(1540.0, freqs), 1540.0 / (freqs * 1e6) * 500)
    np.testing.assert_allclose(base_penetration_depth_cm(1.0, freqs), [100.0, 50.0, 25.0])
    np.testing.assert_allclose(penetration_depth_cm(1.0, 5.0, np.array([50, 100])), [10.0, 20.0])
    assert np.isclose(round_trip_time_us(12.5, 1540.0), 25 / 0.154)


def test_to_dict_is_plain_data():
    res = derive([("Skin", 0.3), ("Bone", 1.5)])
    d = res.to_dict()
    assert d['interfaces'][0]['upper'] == 'Skin'
    assert d['interfaces'][0]['lower'] == 'Bone'
    assert isinstance(d['reflections'], list)
    assert d['frequency'] == 5.0


def test_interface_reflections_accepts_layer_pairs():
    from_pairs = interface_reflections([("Skin", 0.3), ("Bone", 1.5), ("Brain", 4.0)])
    from_stack = interface_reflections(LayerStack(("Skin", 0.3), ("Bone", 1.5), ("Brain", 4.0)))
    assert from_pairs == from_stack
    np.testing.assert_allclose([i.depth_cm for i in from_pairs], [0.3, 1.8])
