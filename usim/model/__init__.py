"""
Data models for the propagation model.

This module contains the tissue property table, tissue layers, layer stacks
and transducer settings. It holds no computation beyond simple derived
properties and does not depend on the acoustic calculator.
"""

from .tissue import (
    TissueKind, TissueProperties, TISSUE_TABLE, get_tissue_properties, impedance, list_tissues,
    cm, mm, MHz, us,
)
from .layer import TissueLayer, LayerStack, Stack, as_layer
from .transducer import TransducerSettings

__all__ = [
    'TissueKind', 'TissueProperties', 'TISSUE_TABLE', 'get_tissue_properties', 'impedance', 'list_tissues',
    'cm', 'mm', 'MHz', 'us',
    'TissueLayer', 'LayerStack', 'Stack', 'as_layer',
    'TransducerSettings',
]
