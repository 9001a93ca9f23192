from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple, Union, overload

import numpy as np

from usim import config
from usim.errors import InvalidConfiguration
from usim.model.tissue import TissueKind, TissueProperties, get_tissue_properties


@dataclass(frozen=True)
class TissueLayer:
    """
    Class for defining a single layer of a tissue stack

    :param kind: Tissue kind of the layer, either a TissueKind or its name
    :param thickness: Thickness of the layer in cm. Defaults to the tissue's default thickness.
    """
    kind: TissueKind
    thickness: float = field(default=None)  # type: ignore[assignment]

    def __post_init__(self):
        kind = TissueKind.parse(self.kind)
        object.__setattr__(self, 'kind', kind)
        if self.thickness is None:
            object.__setattr__(self, 'thickness', get_tissue_properties(kind).default_thickness)
        else:
            try:
                object.__setattr__(self, 'thickness', float(self.thickness))
            except (TypeError, ValueError) as e:
                raise InvalidConfiguration(f"Thickness of {kind.value} layer must be a number, "
                                           f"got {self.thickness!r}") from e

    @property
    def properties(self) -> TissueProperties:
        return get_tissue_properties(self.kind)

    def clamped(self) -> 'TissueLayer':
        """Return a copy with thickness snapped into the editable range."""
        low, high = config.THICKNESS_RANGE_CM
        return TissueLayer(self.kind, float(np.clip(self.thickness, low, high)))

    def __str__(self):
        return f'{self.kind.value} ({self.thickness:.1f} cm)'


LayerLike = Union[TissueLayer, Tuple[Union[TissueKind, str], float], Mapping[str, Any], TissueKind, str]


def as_layer(input_obj: LayerLike) -> TissueLayer:
    """Convert the accepted layer spellings to a TissueLayer.

    Accepts a TissueLayer, a ``(kind, thickness)`` pair, a mapping with ``kind``
    (or ``type``) and optional ``thickness`` keys, or a bare kind.
    """
    if isinstance(input_obj, TissueLayer):
        return input_obj
    if isinstance(input_obj, (TissueKind, str)):
        return TissueLayer(input_obj)
    if isinstance(input_obj, Mapping):
        kind = input_obj.get('kind', input_obj.get('type'))
        if kind is None:
            raise InvalidConfiguration(f"Layer mapping needs a 'kind' entry: {dict(input_obj)}")
        return TissueLayer(kind, input_obj.get('thickness'))
    if isinstance(input_obj, (tuple, list)) and len(input_obj) == 2:
        return TissueLayer(input_obj[0], input_obj[1])
    raise InvalidConfiguration(f"Cannot convert {type(input_obj).__name__} to TissueLayer. "
                               f"Expected TissueLayer, (kind, thickness) or a mapping.")


class LayerStack:
    """
    Ordered stack of tissue layers along the acoustic path

    The stack is immutable: editing methods return a new stack. Order is
    significant, the first layer sits directly under the transducer.

    :param internal_layers: Layers, starting with the one nearest the transducer
    :param layers: Alternative way to specify the layers as a list
    """
    def __init__(self, *internal_layers: LayerLike, layers: Optional[Sequence[LayerLike]] = None):
        if layers is not None:
            if internal_layers:
                raise ValueError("Cannot specify both positional internal_layers and 'layers' keyword argument")
            internal_layers = tuple(layers)
        self._layers: Tuple[TissueLayer, ...] = tuple(as_layer(layer) for layer in internal_layers)

    @classmethod
    def default(cls) -> 'LayerStack':
        """The stack a fresh session starts with."""
        return cls(
            TissueLayer(TissueKind.SKIN, 0.3),
            TissueLayer(TissueKind.FAT, 1.5),
            TissueLayer(TissueKind.MUSCLE, 3.0),
            TissueLayer(TissueKind.OTHER, 2.0),
        )

    @property
    def layers(self) -> Tuple[TissueLayer, ...]:
        return self._layers

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator[TissueLayer]:
        return iter(self._layers)

    @overload
    def __getitem__(self, index: int) -> TissueLayer: ...

    @overload
    def __getitem__(self, index: slice) -> 'LayerStack': ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return LayerStack(layers=self._layers[index])
        return self._layers[index]

    def __eq__(self, other):
        if not isinstance(other, LayerStack):
            return NotImplemented
        return self._layers == other._layers

    def __hash__(self):
        return hash(self._layers)

    def __str__(self):
        internal_string = ''
        for i, layer in enumerate(self._layers):
            internal_string += f'\t{i + 1}. {layer}\n'
        return f'\nLayer Count: {len(self._layers)}\n' + internal_string

    def __repr__(self):
        return f'LayerStack({", ".join(repr(layer) for layer in self._layers)})'

    @property
    def kinds(self) -> List[TissueKind]:
        return [layer.kind for layer in self._layers]

    @property
    def thicknesses(self) -> np.ndarray:
        return np.array([layer.thickness for layer in self._layers], dtype=float)

    @property
    def total_thickness(self) -> float:
        return float(np.sum(self.thicknesses))

    @property
    def boundaries(self) -> np.ndarray:
        """Depth in cm of each internal interface (one fewer than layers)."""
        return np.cumsum(self.thicknesses)[:-1]

    @property
    def interfaces(self) -> List[Tuple[TissueLayer, TissueLayer]]:
        """Adjacent layer pairs (layer[i], layer[i+1]) in acoustic path order."""
        return list(zip(self._layers[:-1], self._layers[1:]))

    # Editing, mirrors the bounds the layer editor enforces
    def with_layer(self, kind: Union[TissueKind, str] = TissueKind.MUSCLE,
                   thickness: Optional[float] = 2.0) -> 'LayerStack':
        """Append a layer. Refused once the stack holds ``config.MAX_LAYERS`` layers."""
        if len(self._layers) >= config.MAX_LAYERS:
            raise InvalidConfiguration(f"A stack holds at most {config.MAX_LAYERS} layers")
        return LayerStack(layers=[*self._layers, TissueLayer(kind, thickness)])

    def without_layer(self, index: int) -> 'LayerStack':
        """Remove the layer at ``index``. The last remaining layer cannot be removed."""
        if len(self._layers) <= 1:
            raise InvalidConfiguration("A stack must keep at least one layer")
        self._check_index(index)
        remaining = list(self._layers)
        del remaining[index]
        return LayerStack(layers=remaining)

    def with_updated_layer(self, index: int, kind: Union[TissueKind, str, None] = None,
                           thickness: Optional[float] = None) -> 'LayerStack':
        """Replace the kind and/or thickness of the layer at ``index``."""
        self._check_index(index)
        current = self._layers[index]
        updated = TissueLayer(current.kind if kind is None else kind,
                              current.thickness if thickness is None else thickness)
        replaced = list(self._layers)
        replaced[index] = updated
        return LayerStack(layers=replaced)

    def clamped(self) -> 'LayerStack':
        """Snap every thickness into range and drop layers past ``config.MAX_LAYERS``."""
        if len(self._layers) > config.MAX_LAYERS:
            warnings.warn(f"Stack has {len(self._layers)} layers; keeping the first {config.MAX_LAYERS}.")
        return LayerStack(layers=[layer.clamped() for layer in self._layers[:config.MAX_LAYERS]])

    def _check_index(self, index: int):
        if not -len(self._layers) <= index < len(self._layers):
            raise IndexError(f"Layer index {index} out of range for stack of {len(self._layers)} layers")

    def plot(self, derived=None, fig=None, ax=None, **kwargs):
        """Draw the stack as depth bands. See ``usim.viz.stack2d.plot_stack``."""
        from usim.viz.stack2d import plot_stack
        return plot_stack(self, derived=derived, fig=fig, ax=ax, **kwargs)


# Simplified Stack API - alias for LayerStack
Stack = LayerStack
