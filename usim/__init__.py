__version__ = '0.1.0'
__author__ = 'usim contributors'

import os

file_location = os.path.dirname(__file__)
example_dir = os.path.join(file_location, 'examples')

from usim.errors import InvalidConfiguration

# Model modules
from usim.model.tissue import (
    TissueKind, TissueProperties, TISSUE_TABLE, get_tissue_properties, impedance, list_tissues,
    cm, mm, MHz, us,
)
from usim.model.layer import TissueLayer, LayerStack, Stack, as_layer
from usim.model.transducer import TransducerSettings

# Computation core
from usim.core.aggregate import AggregateResult, aggregate_layers
from usim.core.acoustics import (
    DerivedQuantities,
    InterfaceReflection,
    compute_derived_quantities,
    compute_reflection,
    interface_reflections,
)

# Results and workflow modules
from usim.solve.results import ResultGrid, build_result_grid_from_sweep
from usim.solve import Sweep
from usim.solve.simulate import simulate

# Layout and plotting
from usim.viz import build_layout, plot_stack, StackLayout

from usim.logging_config import setup_logging

# Public API surface for facade exports
__all__ = [
    # meta
    "__version__",
    "__author__",
    "example_dir",
    # errors
    "InvalidConfiguration",
    # model
    "TissueKind",
    "TissueProperties",
    "TISSUE_TABLE",
    "get_tissue_properties",
    "impedance",
    "list_tissues",
    "cm",
    "mm",
    "MHz",
    "us",
    "TissueLayer",
    "LayerStack",
    "Stack",
    "as_layer",
    "TransducerSettings",
    # core
    "AggregateResult",
    "aggregate_layers",
    "DerivedQuantities",
    "InterfaceReflection",
    "compute_derived_quantities",
    "compute_reflection",
    "interface_reflections",
    # workflow / results
    "ResultGrid",
    "build_result_grid_from_sweep",
    "Sweep",
    "simulate",
    # visualization
    "build_layout",
    "plot_stack",
    "StackLayout",
    # logging
    "setup_logging",
]
