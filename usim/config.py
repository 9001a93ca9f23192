"""
Configuration & Constants
=========================
Central registry of the ranges, steps and display constants shared by the
model, the layout builder and the CLI.

The ranges are the ones the editing interface enforces. The computation
functions do not rely on them; they only reject values that would make the
formulas meaningless (see ``usim.errors.InvalidConfiguration``).
"""
from typing import Tuple

# Transducer settings
FREQUENCY_RANGE_MHZ: Tuple[float, float] = (1.0, 15.0)
FREQUENCY_STEP_MHZ: float = 0.5
POWER_RANGE_PERCENT: Tuple[float, float] = (10.0, 100.0)
POWER_STEP_PERCENT: float = 5.0

DEFAULT_FREQUENCY_MHZ: float = 5.0
DEFAULT_POWER_PERCENT: float = 50.0

# Layer stack editing
THICKNESS_RANGE_CM: Tuple[float, float] = (0.1, 10.0)
MAX_LAYERS: int = 5

# Reconciles cm / us against m/s in the round-trip formula
SPEED_UNIT_DIVISOR: float = 10000.0

# Display
REFLECTION_VISIBILITY_THRESHOLD: float = 1.0  # percent
REFLECTION_MAX_OPACITY: float = 0.8
PULSE_COUNT: int = 5
PULSE_PERIOD_FACTOR: float = 7.0  # seconds x MHz
PULSE_SPREAD_FACTOR: float = 5.0  # seconds x MHz
