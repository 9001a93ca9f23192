import warnings
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from usim.core.acoustics import DerivedQuantities

SCALAR_FIELDS = (
    'total_thickness', 'weighted_speed', 'weighted_attenuation', 'wavelength', 'wavelength_mm',
    'axial_resolution_mm', 'base_penetration_depth_cm', 'penetration_depth_cm', 'round_trip_us',
)


def _same_label(coord: Any, value: Any) -> bool:
    numeric = (int, float, np.number)
    if isinstance(coord, numeric) and isinstance(value, numeric):
        return bool(np.isclose(coord, value))
    return coord == value


class ResultGrid:
    """
    Labelled grid of DerivedQuantities produced by a sweep.

    ``data`` is flat and ordered like ``itertools.product`` over ``dims``, so
    the last dimension varies fastest. Points are picked by position with
    ``isel`` or by coordinate label with ``sel`` (alias ``loc``); fixing every
    dimension returns a single DerivedQuantities, fixing some returns a
    smaller grid.
    """

    def __init__(self, dims: Sequence[str], coords: Mapping[str, Sequence[Any]], data: Sequence[DerivedQuantities]):
        self.dims = list(dims)
        self.coords = {k: list(v) for k, v in coords.items()}
        self.data: List[DerivedQuantities] = list(data)
        self._shape = tuple(len(self.coords[d]) for d in self.dims)
        n_points = int(np.prod(self._shape)) if self._shape else 1
        if len(self.data) != n_points:
            warnings.warn(
                f"ResultGrid holds {len(self.data)} results for a {self._shape} grid of {n_points} points; "
                f"indexing may be limited.")

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._shape

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self):
        return iter(self.data)

    def _points(self) -> np.ndarray:
        """The results as an object array shaped like the grid."""
        points = np.empty(len(self.data), dtype=object)
        for i, result in enumerate(self.data):
            points[i] = result
        return points.reshape(self._shape)

    def _label_index(self, dim: str, value: Any) -> int:
        if dim not in self.coords:
            raise KeyError(f"Unknown dimension {dim}")
        for i, coord in enumerate(self.coords[dim]):
            if _same_label(coord, value):
                return i
        raise KeyError(f"Value {value} not found in coords for {dim}")

    def isel(self, **indexers: int) -> Union['ResultGrid', DerivedQuantities]:
        """Pick by integer position along each named dim (negative positions count from the end)."""
        unknown = [d for d in indexers if d not in self.dims]
        if unknown:
            raise KeyError(f"Unknown dimension {unknown[0]}")

        key: List[Union[int, slice]] = []
        for dim, size in zip(self.dims, self._shape):
            if dim not in indexers:
                key.append(slice(None))
                continue
            position = int(indexers[dim])
            if not -size <= position < size:
                raise IndexError(f"isel: index {position} out of bounds for dim {dim} with size {size}")
            key.append(position)

        picked = self._points()[tuple(key)]
        remaining = [d for d in self.dims if d not in indexers]
        if not remaining:
            return picked
        return ResultGrid(remaining, {d: self.coords[d] for d in remaining}, list(picked.ravel()))

    def sel(self, **selectors: Any) -> Union['ResultGrid', DerivedQuantities]:
        """Pick by coordinate label; numeric labels match within ``np.isclose``. Alias: .loc"""
        return self.isel(**{dim: self._label_index(dim, value) for dim, value in selectors.items()})

    loc = sel

    def to_dataframe(self) -> pd.DataFrame:
        """One row per grid point: coordinate columns, scalar quantities and reflections."""
        points = self._points()
        rows: List[Dict[str, Any]] = []
        for position in np.ndindex(*self._shape):
            result = points[position]
            row: Dict[str, Any] = {dim: self.coords[dim][i] for dim, i in zip(self.dims, position)}
            row.update({name: getattr(result, name) for name in SCALAR_FIELDS})
            row['reflections'] = list(result.reflections)
            rows.append(row)
        return pd.DataFrame(rows)

    def get(self, field: str) -> np.ndarray:
        """Array of ``field`` over the grid, shape ``self.shape``.

        Sequence fields such as ``reflections`` add a trailing axis when every
        point has the same length; otherwise an object array is returned.
        """
        values = [getattr(result, field) for result in self.data]
        try:
            stacked = np.asarray(values, dtype=float)
        except (TypeError, ValueError):
            # layer count changes across the sweep, or the field is not numeric
            out = np.empty(len(values), dtype=object)
            for i, value in enumerate(values):
                out[i] = value
            return out.reshape(self._shape)
        return stacked.reshape(*self._shape, *stacked.shape[1:])

    def plot(self, x: str, y: str = 'penetration_depth_cm', ax=None, show=False):
        """Line plot of ``y`` against the single sweep dimension ``x``."""
        import matplotlib.pyplot as plt  # local import
        if len(self.dims) != 1:
            raise ValueError("plot currently supports 1D sweeps only")
        if x not in self.coords:
            raise KeyError(f"Unknown dimension {x}")
        if ax is None:
            _, ax = plt.subplots()
        ax.plot(self.coords[x], self.get(y))
        ax.set_xlabel(x)
        ax.set_ylabel(y)
        if show:
            plt.show()
        return ax


def build_result_grid_from_sweep(coords: Mapping[str, Sequence[Any]], results: Sequence[DerivedQuantities]) -> ResultGrid:
    """Helper to build a ResultGrid from Sweep.run coordinate dict and its result list."""
    return ResultGrid(dims=list(coords.keys()), coords=coords, data=results)
