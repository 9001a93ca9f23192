import numpy as np
import pytest

from usim import LayerStack, TransducerSettings, InvalidConfiguration, build_layout, simulate
from usim.viz.layout import pulse_timing


def test_default_stack_overlays_only_strong_interfaces():
    layout = build_layout(LayerStack.default())
    assert [o.index for o in layout.overlays] == [0, 1]
    skin_fat = layout.overlays[0]
    assert skin_fat.reflection_percent == pytest.approx(1.4135, abs=1e-3)
    assert skin_fat.label == '1.4% refl.'
    assert np.isclose(skin_fat.opacity, skin_fat.reflection_percent / 30)
    assert np.isclose(skin_fat.glow_blur, skin_fat.reflection_percent / 5)
    assert np.isclose(skin_fat.glow_spread, skin_fat.reflection_percent / 10)


def test_threshold_is_adjustable():
    layout = build_layout(LayerStack.default(), threshold=1.3)
    assert [o.index for o in layout.overlays] == [0]


def test_opacity_is_capped():
    layout = build_layout(LayerStack(("Skin", 0.3), ("Bone", 1.5)))
    assert layout.overlays[0].opacity == 0.8


def test_bands_and_markers_use_display_depth():
    derived = simulate(LayerStack.default(), 5.0, 50.0)
    layout = build_layout(LayerStack.default(), derived)
    depth = derived.penetration_depth_cm
    assert layout.display_depth_cm == depth
    assert [m.top_percent for m in layout.markers] == [0.0, 50.0, 100.0]
    assert layout.markers[2].label == f'{depth:.1f} cm'
    np.testing.assert_allclose([b.depth_cm for b in layout.bands], [0.0, 0.3, 1.8, 4.8])
    np.testing.assert_allclose([b.height_percent for b in layout.bands],
                               np.array([0.3, 1.5, 3.0, 2.0]) / depth * 100)
    assert [b.has_boundary for b in layout.bands] == [True, True, True, False]
    assert layout.bands[0].color == '#ffd6a5'


def test_low_power_hides_deep_layers():
    layout = build_layout(LayerStack.default(), settings=TransducerSettings(power=10.0))
    assert layout.display_depth_cm < 4.8
    assert [b.kind.value for b in layout.visible_bands] == ['Skin', 'Fat', 'Muscle']
    assert layout.bands[3].top_percent > 100


def test_pulse_timing():
    pulses = pulse_timing(5.0, 50.0)
    assert pulses.count == 5
    assert np.isclose(pulses.period_s, 1.4)
    np.testing.assert_allclose(pulses.delays_s, [0.0, 0.2, 0.4, 0.6, 0.8])
    assert pulses.amplitude == 0.5


def test_zero_power_cannot_be_laid_out():
    with pytest.raises(InvalidConfiguration):
        build_layout(LayerStack.default(), settings=TransducerSettings(power=0.0))


def test_layout_accepts_layer_pairs():
    from_pairs = build_layout([("Skin", 0.3), ("Fat", 1.5), ("Muscle", 3.0), ("Other", 2.0)])
    assert from_pairs == build_layout(LayerStack.default())


def test_hidden_bands_do_not_warn():
    import warnings
    with warnings.catch_warnings():
        warnings.simplefilter('error')
        layout = build_layout(LayerStack.default(), settings=TransducerSettings(power=10.0))
    assert not layout.bands[3].visible
