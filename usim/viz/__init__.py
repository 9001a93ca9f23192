from .layout import (
    StackLayout, LayerBand, DepthMarker, ReflectionOverlay, PulseTiming, build_layout, pulse_timing,
)
from .stack2d import plot_stack

__all__ = [
    "StackLayout", "LayerBand", "DepthMarker", "ReflectionOverlay", "PulseTiming",
    "build_layout", "pulse_timing", "plot_stack",
]
