from __future__ import annotations

from typing import Any, Dict, List, Sequence, Union

import numpy as np

from usim import config
from usim.core.acoustics import DerivedQuantities, compute_derived_quantities
from usim.core.aggregate import aggregate_layers
from usim.errors import InvalidConfiguration
from usim.model.layer import LayerLike, LayerStack
from usim.model.transducer import TransducerSettings
from usim.solve.results import ResultGrid
from usim.solve.sweep import Sweep


def _is_seq(x: Any) -> bool:
    return isinstance(x, (list, tuple, np.ndarray)) and not isinstance(x, (str, bytes))


def _as_floats(name: str, value: Any) -> List[float]:
    """Scalar or sequence setting as a non-empty list of floats."""
    try:
        values = [float(v) for v in np.atleast_1d(np.asarray(value, dtype=object))]
    except (TypeError, ValueError) as e:
        raise InvalidConfiguration(f"{name} must be a number or a list of numbers, got {value!r}") from e
    if not values:
        raise InvalidConfiguration(f"{name} sweep is empty")
    return values


def simulate(
    stack: Union[LayerStack, Sequence[LayerLike]],
    frequency: Union[float, Sequence[float], np.ndarray] = config.DEFAULT_FREQUENCY_MHZ,
    power: Union[float, Sequence[float], np.ndarray] = config.DEFAULT_POWER_PERCENT,
    *,
    clamp: bool = False,
    return_grid: bool = True,
) -> Union[DerivedQuantities, ResultGrid, Dict[str, Any]]:
    """High-level one-liner simulation API.

    - For scalar inputs, returns a DerivedQuantities (single point).
    - For any vector input, performs a sweep and returns a ResultGrid.

    Args:
        stack: LayerStack or sequence of layers, nearest the transducer first.
        frequency: scalar or sequence of frequencies in MHz.
        power: scalar or sequence of power levels in percent.
        clamp: snap the stack and settings into the editable ranges first.
        return_grid: when sweeping, if False return the raw dict from Sweep.run.

    Raises:
        InvalidConfiguration: a setting is not numeric, a sweep list is empty,
            or the stack and settings cannot produce finite results.
    """
    if not isinstance(stack, LayerStack):
        stack = LayerStack(layers=list(stack))
    if clamp:
        stack = stack.clamped()

    frequencies = _as_floats('frequency', frequency)
    powers = _as_floats('power', power)
    if clamp:
        frequencies = [TransducerSettings(frequency=f).clamped().frequency for f in frequencies]
        powers = [TransducerSettings(power=p).clamped().power for p in powers]

    # A scalar setting stays fixed on the base settings
    base = TransducerSettings(frequency=frequencies[0], power=powers[0])
    if not _is_seq(frequency) and not _is_seq(power):
        return compute_derived_quantities(base, aggregate_layers(stack))

    params: Dict[str, Any] = {}
    if _is_seq(frequency):
        params['frequency'] = frequencies
    if _is_seq(power):
        params['power'] = powers

    out = Sweep(params).run(stack, base)
    if return_grid:
        return out['result_grid']
    return out


__all__ = ["simulate"]
