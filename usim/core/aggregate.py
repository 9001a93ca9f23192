"""
Layered-medium aggregation.

Reduces an ordered stack of tissue layers to the thickness-weighted
properties used by the acoustic formulas. Thicker layers dominate the
effective speed and attenuation of the path.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np

from usim.errors import InvalidConfiguration
from usim.model.layer import LayerLike, LayerStack, TissueLayer, as_layer
from usim.model.tissue import get_tissue_properties

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregateResult:
    """
    Stack-wide quantities of a layer stack.

    :param total_thickness: Sum of layer thicknesses in cm
    :param weighted_speed: Thickness-weighted mean speed of sound in m/s
    :param weighted_attenuation: Thickness-weighted mean attenuation in dB/cm/MHz
    :param layers: The layers that were aggregated, in acoustic path order
    """
    total_thickness: float
    weighted_speed: float
    weighted_attenuation: float
    layers: Tuple[TissueLayer, ...] = ()


def _normalize_layers(layers: Union[LayerStack, Sequence[LayerLike]]) -> Tuple[TissueLayer, ...]:
    if isinstance(layers, LayerStack):
        return layers.layers
    if layers is None:
        raise InvalidConfiguration("No layers given")
    return tuple(as_layer(layer) for layer in layers)


def aggregate_layers(layers: Union[LayerStack, Sequence[LayerLike]]) -> AggregateResult:
    """Combine per-layer tissue properties into thickness-weighted stack properties.

    Args:
        layers: LayerStack or sequence of TissueLayer / (kind, thickness) pairs,
            nearest the transducer first.

    Raises:
        InvalidConfiguration: the stack is empty, a layer thickness is not a
            positive finite number, or the total thickness is zero.
    """
    normalized = _normalize_layers(layers)
    if not normalized:
        raise InvalidConfiguration("Layer stack is empty; at least one layer is required")

    thicknesses = np.array([layer.thickness for layer in normalized], dtype=float)
    if not np.all(np.isfinite(thicknesses)):
        raise InvalidConfiguration(f"Layer thicknesses must be finite, got {thicknesses.tolist()}")
    if np.any(thicknesses <= 0):
        bad = [i for i, t in enumerate(thicknesses) if t <= 0]
        raise InvalidConfiguration(f"Layer thickness must be positive (layers {bad})")

    total_thickness = float(np.sum(thicknesses))
    if total_thickness <= 0:
        raise InvalidConfiguration("Total thickness of the stack is zero")

    properties = [get_tissue_properties(layer.kind) for layer in normalized]
    speeds = np.array([p.speed for p in properties], dtype=float)
    attenuations = np.array([p.attenuation for p in properties], dtype=float)

    weighted_speed = float(np.dot(thicknesses, speeds) / total_thickness)
    weighted_attenuation = float(np.dot(thicknesses, attenuations) / total_thickness)

    logger.debug("Aggregated %d layers: total=%.3f cm, c=%.2f m/s, alpha=%.4f dB/cm/MHz",
                 len(normalized), total_thickness, weighted_speed, weighted_attenuation)

    return AggregateResult(
        total_thickness=total_thickness,
        weighted_speed=weighted_speed,
        weighted_attenuation=weighted_attenuation,
        layers=normalized,
    )
