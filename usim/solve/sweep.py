"""
Sweep engine for parameter scans.

Features:
- Transducer params: keys 'frequency' and 'power'. Values are sequences (scalars are wrapped).
- Object params: under 'objects', a list of {'layer': index, 'params': {attr: sequence}}
  where attr is 'thickness' or 'kind'. Each update produces a new LayerStack.
- Cartesian product over all parameters, evaluated serially.

Usage example:
    sweep = Sweep({
        'frequency': [2.0, 5.0, 10.0],
        'objects': [{'layer': 1, 'params': {'thickness': [0.5, 1.5, 3.0]}}],
    })
    out = sweep.run(LayerStack.default(), TransducerSettings(power=80))
"""
from __future__ import annotations

import logging
from dataclasses import replace
from itertools import product
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from usim.core.acoustics import DerivedQuantities, compute_derived_quantities
from usim.core.aggregate import aggregate_layers
from usim.model.layer import LayerStack
from usim.model.transducer import TransducerSettings
from usim.solve.results import build_result_grid_from_sweep

logger = logging.getLogger(__name__)

SOURCE_KEYS = ('frequency', 'power')
OBJECT_ATTRS = ('thickness', 'kind')


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    if hasattr(value, 'tolist') and not isinstance(value, str):
        converted = value.tolist()
        return converted if isinstance(converted, list) else [converted]
    return [value]


class Sweep:
    """Parameter sweep over transducer settings and layer attributes.

    Example:
        params = {
            'power': [25, 50, 100],
            'objects': [{'layer': 0, 'params': {'kind': ['Skin', 'Fat']}}],
        }
    """

    def __init__(self, params: Dict[str, Any]) -> None:
        self.params = params or {}
        self._source_specs: Dict[str, List[Any]] = {}
        self._object_specs: List[Tuple[int, str, List[Any]]] = []
        self._parse_params()

    def _parse_params(self) -> None:
        for key, val in self.params.items():
            if key == 'objects':
                for spec in _as_list(val):
                    if not isinstance(spec, dict) or 'layer' not in spec:
                        raise TypeError("Object parameter spec must be a dict with 'layer' and 'params'")
                    index = int(spec['layer'])
                    for attr, seq in (spec.get('params') or {}).items():
                        if attr not in OBJECT_ATTRS:
                            raise ValueError(f"Cannot sweep layer attribute '{attr}'; expected one of {OBJECT_ATTRS}")
                        self._object_specs.append((index, attr, _as_list(seq)))
            elif key in SOURCE_KEYS:
                self._source_specs[key] = _as_list(val)
            else:
                raise ValueError(f"Unknown sweep parameter '{key}'; expected {SOURCE_KEYS} or 'objects'")

    @property
    def coords(self) -> Dict[str, List[Any]]:
        coords: Dict[str, List[Any]] = dict(self._source_specs)
        for index, attr, values in self._object_specs:
            coords[f'layers[{index}].{attr}'] = values
        return coords

    def _iter_combinations(self) -> Iterable[Tuple[Dict[str, Any], List[Tuple[int, str, Any]]]]:
        """Yield all Cartesian combinations as (settings_updates, layer_updates), last dim fastest."""
        src_keys = list(self._source_specs.keys())
        all_values = [self._source_specs[k] for k in src_keys] + [v for _, _, v in self._object_specs]
        for combo in product(*all_values):
            src_update = dict(zip(src_keys, combo[:len(src_keys)]))
            obj_updates = [(index, attr, value) for (index, attr, _), value
                           in zip(self._object_specs, combo[len(src_keys):])]
            yield src_update, obj_updates

    @staticmethod
    def _apply_object_updates(stack: LayerStack, updates: Sequence[Tuple[int, str, Any]]) -> LayerStack:
        for index, attr, value in updates:
            stack = stack.with_updated_layer(index, **{attr: value})
        return stack

    def run(self, base_stack: LayerStack, settings: TransducerSettings = None) -> Dict[str, Any]:
        """Execute the sweep and return a dictionary with coordinates and results.

        Returns a dict:
            {
              'coords': {name: list(values), ...},
              'results': list[DerivedQuantities],
              'result_grid': ResultGrid,
            }
        """
        settings = settings if settings is not None else TransducerSettings()
        results: List[DerivedQuantities] = []
        for src_update, obj_updates in self._iter_combinations():
            stack_pt = self._apply_object_updates(base_stack, obj_updates)
            settings_pt = replace(settings, **src_update)
            results.append(compute_derived_quantities(settings_pt, aggregate_layers(stack_pt)))

        coords = self.coords
        logger.debug("Sweep evaluated %d points over dims %s", len(results), list(coords))
        return {
            'coords': coords,
            'results': results,
            'result_grid': build_result_grid_from_sweep(coords, results),
        }
