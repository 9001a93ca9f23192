"""
Normalized visual layout of a tissue stack.

Everything is expressed in percent of the display depth (the power-adjusted
penetration depth) so a renderer can map it onto any viewport height. Layers
deeper than the display depth get ``top_percent`` >= 100 and are not visible.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from usim import config
from usim.core.acoustics import DerivedQuantities, compute_derived_quantities
from usim.errors import InvalidConfiguration
from usim.model.layer import LayerLike, LayerStack
from usim.model.tissue import TissueKind
from usim.model.transducer import TransducerSettings


@dataclass(frozen=True)
class LayerBand:
    index: int
    kind: TissueKind
    color: str
    depth_cm: float
    thickness_cm: float
    top_percent: float
    height_percent: float
    has_boundary: bool

    @property
    def visible_height_percent(self) -> float:
        """Height remaining inside the 0-100 % viewport."""
        top = min(max(self.top_percent, 0.0), 100.0)
        bottom = min(max(self.top_percent + self.height_percent, 0.0), 100.0)
        return bottom - top

    @property
    def visible(self) -> bool:
        return self.visible_height_percent > 0


@dataclass(frozen=True)
class DepthMarker:
    depth_cm: float
    top_percent: float

    @property
    def label(self) -> str:
        return f'{self.depth_cm:.1f} cm'


@dataclass(frozen=True)
class ReflectionOverlay:
    index: int
    upper: TissueKind
    lower: TissueKind
    depth_cm: float
    top_percent: float
    reflection_percent: float
    opacity: float
    glow_blur: float
    glow_spread: float

    @property
    def label(self) -> str:
        return f'{self.reflection_percent:.1f}% refl.'


@dataclass(frozen=True)
class PulseTiming:
    """Timing of the animated pulses a renderer may draw; the model itself has no notion of time."""
    count: int
    period_s: float
    delays_s: Tuple[float, ...]
    amplitude: float


@dataclass(frozen=True)
class StackLayout:
    frequency: float
    display_depth_cm: float
    bands: Tuple[LayerBand, ...]
    markers: Tuple[DepthMarker, ...]
    overlays: Tuple[ReflectionOverlay, ...]
    pulses: PulseTiming
    threshold: float = field(default=config.REFLECTION_VISIBILITY_THRESHOLD)

    @property
    def visible_bands(self) -> List[LayerBand]:
        return [band for band in self.bands if band.visible]


def pulse_timing(frequency: float, power: float, count: int = config.PULSE_COUNT) -> PulseTiming:
    """Pulse period shrinks with frequency; amplitude follows power."""
    if frequency <= 0:
        raise InvalidConfiguration(f"frequency must be positive, got {frequency}")
    spread = config.PULSE_SPREAD_FACTOR / frequency
    return PulseTiming(
        count=count,
        period_s=config.PULSE_PERIOD_FACTOR / frequency,
        delays_s=tuple(i * spread / count for i in range(count)),
        amplitude=power / 100.0,
    )


def build_layout(stack: Union[LayerStack, Sequence[LayerLike]], derived: Optional[DerivedQuantities] = None, *,
                 settings: Optional[TransducerSettings] = None,
                 threshold: float = config.REFLECTION_VISIBILITY_THRESHOLD) -> StackLayout:
    """
    Lay out a stack against its display depth.

    :param stack: Layer stack or sequence of layers, nearest the transducer first
    :param derived: Quantities computed for this stack. Computed from ``settings`` when omitted.
    :param settings: Transducer settings used when ``derived`` is omitted
    :param threshold: Reflection percent an interface must exceed to get an overlay
    """
    if not isinstance(stack, LayerStack):
        stack = LayerStack(layers=list(stack))
    if derived is None:
        derived = compute_derived_quantities(settings or TransducerSettings(), stack)
    display_depth = derived.penetration_depth_cm
    if display_depth <= 0:
        raise InvalidConfiguration("Display depth is zero; power must be above 0 % to lay out the stack")

    def percent(depth_cm: float) -> float:
        return depth_cm / display_depth * 100

    bands: List[LayerBand] = []
    depth_above = 0.0
    for i, layer in enumerate(stack):
        bands.append(LayerBand(
            index=i,
            kind=layer.kind,
            color=layer.properties.color,
            depth_cm=depth_above,
            thickness_cm=layer.thickness,
            top_percent=percent(depth_above),
            height_percent=percent(layer.thickness),
            has_boundary=i < len(stack) - 1,
        ))
        depth_above += layer.thickness

    markers = tuple(DepthMarker(depth_cm=d, top_percent=percent(d))
                    for d in (0.0, display_depth / 2, display_depth))

    overlays: List[ReflectionOverlay] = []
    for interface in derived.interfaces:
        r = interface.reflection_percent
        if r <= threshold:
            continue
        overlays.append(ReflectionOverlay(
            index=interface.index,
            upper=interface.upper,
            lower=interface.lower,
            depth_cm=interface.depth_cm,
            top_percent=percent(interface.depth_cm),
            reflection_percent=r,
            opacity=min(config.REFLECTION_MAX_OPACITY, r / 30),
            glow_blur=r / 5,
            glow_spread=r / 10,
        ))

    return StackLayout(
        frequency=derived.frequency,
        display_depth_cm=display_depth,
        bands=tuple(bands),
        markers=markers,
        overlays=tuple(overlays),
        pulses=pulse_timing(derived.frequency, derived.power),
        threshold=threshold,
    )
