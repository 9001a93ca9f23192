from .aggregate import AggregateResult, aggregate_layers
from .acoustics import (
    DerivedQuantities, InterfaceReflection, compute_derived_quantities, compute_reflection,
    interface_reflections, wavelength_m, axial_resolution_mm, base_penetration_depth_cm,
    penetration_depth_cm, round_trip_time_us,
)

__all__ = [
    'AggregateResult', 'aggregate_layers',
    'DerivedQuantities', 'InterfaceReflection', 'compute_derived_quantities', 'compute_reflection',
    'interface_reflections', 'wavelength_m', 'axial_resolution_mm', 'base_penetration_depth_cm',
    'penetration_depth_cm', 'round_trip_time_us',
]
