"""
Acoustic quantity calculator.

Derives the display-facing quantities of a pulse travelling through a layer
stack from the transducer settings and the aggregated stack properties:

- wavelength = c / f
- axial resolution = wavelength / 2
- base penetration depth = (100 / alpha) * (1 / f)      [cm]
- penetration depth = base depth * power / 100          [cm]
- round trip = 2 * depth / (c / 10000)                  [us]
- interface reflection = ((Z2 - Z1) / (Z2 + Z1))^2 * 100 [%]

with c the thickness-weighted speed (m/s), alpha the thickness-weighted
attenuation (dB/cm/MHz), f the frequency (MHz) and Z = speed * density.

The scalar formula helpers accept numpy arrays as well as floats.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Sequence, Tuple, Union

import numpy as np
from numpy.typing import ArrayLike

from usim import config
from usim.core.aggregate import AggregateResult, aggregate_layers
from usim.errors import InvalidConfiguration
from usim.model.layer import LayerLike, LayerStack, as_layer
from usim.model.tissue import TissueKind, get_tissue_properties
from usim.model.transducer import TransducerSettings

logger = logging.getLogger(__name__)


def _require_positive(name: str, value: ArrayLike):
    arr = np.asarray(value, dtype=float)
    if not np.all(np.isfinite(arr)) or np.any(arr <= 0):
        raise InvalidConfiguration(f"{name} must be a positive finite number, got {value}")


def wavelength_m(speed: ArrayLike, frequency: ArrayLike) -> Union[float, np.ndarray]:
    """Wavelength in meters for a speed in m/s and a frequency in MHz."""
    _require_positive('frequency', frequency)
    return np.asarray(speed, dtype=float) / (np.asarray(frequency, dtype=float) * 1e6)


def axial_resolution_mm(speed: ArrayLike, frequency: ArrayLike) -> Union[float, np.ndarray]:
    """Axial resolution in mm, half the wavelength."""
    return wavelength_m(speed, frequency) * 1000 / 2


def base_penetration_depth_cm(attenuation: ArrayLike, frequency: ArrayLike) -> Union[float, np.ndarray]:
    """Penetration depth in cm before the power adjustment."""
    _require_positive('attenuation', attenuation)
    _require_positive('frequency', frequency)
    return (100 / np.asarray(attenuation, dtype=float)) * (1 / np.asarray(frequency, dtype=float))


def penetration_depth_cm(attenuation: ArrayLike, frequency: ArrayLike, power: ArrayLike) -> Union[float, np.ndarray]:
    """Effective penetration depth in cm, linear in power (percent)."""
    power_arr = np.asarray(power, dtype=float)
    if not np.all(np.isfinite(power_arr)) or np.any(power_arr < 0):
        raise InvalidConfiguration(f"power must be a non-negative finite percentage, got {power}")
    return base_penetration_depth_cm(attenuation, frequency) * (power_arr / 100)


def round_trip_time_us(depth_cm: ArrayLike, speed: ArrayLike) -> Union[float, np.ndarray]:
    """Time in microseconds for a pulse to reach ``depth_cm`` and return."""
    _require_positive('speed', speed)
    return (np.asarray(depth_cm, dtype=float) * 2) / (np.asarray(speed, dtype=float) / config.SPEED_UNIT_DIVISOR)


def compute_reflection(kind_a: Union[TissueKind, str], kind_b: Union[TissueKind, str]) -> float:
    """
    Percentage of incident energy reflected at the interface between two tissues.

    Symmetric in its arguments and zero for identical tissues.
    """
    z1 = get_tissue_properties(kind_a).impedance
    z2 = get_tissue_properties(kind_b).impedance
    return float(((z2 - z1) / (z2 + z1)) ** 2 * 100)


@dataclass(frozen=True)
class InterfaceReflection:
    """
    Reflection at the boundary between two adjacent layers.

    :param index: Index of the upper layer; the interface lies between layer[index] and layer[index+1]
    :param upper: Tissue kind above the interface (nearer the transducer)
    :param lower: Tissue kind below the interface
    :param depth_cm: Depth of the interface below the transducer in cm
    :param impedance_difference: |Z_upper - Z_lower| in kg/(m^2 s)
    :param reflection_percent: Reflected energy in percent
    """
    index: int
    upper: TissueKind
    lower: TissueKind
    depth_cm: float
    impedance_difference: float
    reflection_percent: float

    @property
    def transmission_percent(self) -> float:
        return 100.0 - self.reflection_percent

    @property
    def label(self) -> str:
        return f'{self.upper.value} → {self.lower.value}'


def interface_reflections(layers: Union[LayerStack, Sequence[LayerLike]]) -> List[InterfaceReflection]:
    """Reflection at every adjacent pair (layer[i], layer[i+1]) in stack order."""
    layer_list = [as_layer(layer) for layer in layers]
    out: List[InterfaceReflection] = []
    depth = 0.0
    for i, (upper, lower) in enumerate(zip(layer_list[:-1], layer_list[1:])):
        depth += upper.thickness
        out.append(InterfaceReflection(
            index=i,
            upper=upper.kind,
            lower=lower.kind,
            depth_cm=depth,
            impedance_difference=abs(upper.properties.impedance - lower.properties.impedance),
            reflection_percent=compute_reflection(upper.kind, lower.kind),
        ))
    return out


@dataclass(frozen=True)
class DerivedQuantities:
    """
    Derived acoustic quantities for one configuration.

    Only ``penetration_depth_cm`` (power adjusted) is meant for display and
    layout; ``base_penetration_depth_cm`` is kept for inspection.
    """
    frequency: float
    power: float
    total_thickness: float
    weighted_speed: float
    weighted_attenuation: float
    wavelength: float
    wavelength_mm: float
    axial_resolution_mm: float
    base_penetration_depth_cm: float
    penetration_depth_cm: float
    round_trip_us: float
    reflections: Tuple[float, ...] = ()
    interfaces: Tuple[InterfaceReflection, ...] = field(default=(), repr=False)

    @property
    def display_depth_cm(self) -> float:
        return self.penetration_depth_cm

    def formatted(self) -> Dict[str, str]:
        """Display strings, rounded the way the simulator panel shows them."""
        return {
            'wavelength_mm': f'{self.wavelength_mm:.3f}',
            'axial_resolution_mm': f'{self.axial_resolution_mm:.3f}',
            'penetration_depth_cm': f'{self.penetration_depth_cm:.1f}',
            'round_trip_us': f'{self.round_trip_us:.3f}',
            'reflections': [f'{r:.1f}' for r in self.reflections],
        }

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d['reflections'] = list(self.reflections)
        d['interfaces'] = [
            {**asdict(i), 'upper': i.upper.value, 'lower': i.lower.value,
             'transmission_percent': i.transmission_percent}
            for i in self.interfaces
        ]
        return d


def compute_derived_quantities(settings: TransducerSettings,
                               aggregate: Union[AggregateResult, LayerStack, Sequence[LayerLike]]) -> DerivedQuantities:
    """Compute every derived quantity for a transducer setting and an aggregated stack.

    Args:
        settings: frequency (MHz) and power (percent).
        aggregate: result of ``aggregate_layers``; a LayerStack or layer
            sequence is aggregated first.

    Raises:
        InvalidConfiguration: frequency or weighted attenuation is not
            positive, power is negative, or the stack cannot be aggregated.
    """
    if not isinstance(aggregate, AggregateResult):
        aggregate = aggregate_layers(aggregate)

    frequency = float(settings.frequency)
    power = float(settings.power)
    _require_positive('frequency', frequency)
    _require_positive('weighted attenuation', aggregate.weighted_attenuation)
    _require_positive('weighted speed', aggregate.weighted_speed)

    wavelength = float(wavelength_m(aggregate.weighted_speed, frequency))
    wavelength_mm = wavelength * 1000
    base_depth = float(base_penetration_depth_cm(aggregate.weighted_attenuation, frequency))
    depth = float(penetration_depth_cm(aggregate.weighted_attenuation, frequency, power))
    round_trip = float(round_trip_time_us(depth, aggregate.weighted_speed))
    interfaces = tuple(interface_reflections(aggregate.layers))

    logger.debug("f=%.2f MHz P=%.0f%%: lambda=%.4f mm depth=%.2f cm round trip=%.3f us",
                 frequency, power, wavelength_mm, depth, round_trip)

    return DerivedQuantities(
        frequency=frequency,
        power=power,
        total_thickness=aggregate.total_thickness,
        weighted_speed=aggregate.weighted_speed,
        weighted_attenuation=aggregate.weighted_attenuation,
        wavelength=wavelength,
        wavelength_mm=wavelength_mm,
        axial_resolution_mm=wavelength_mm / 2,
        base_penetration_depth_cm=base_depth,
        penetration_depth_cm=depth,
        round_trip_us=round_trip,
        reflections=tuple(i.reflection_percent for i in interfaces),
        interfaces=interfaces,
    )
