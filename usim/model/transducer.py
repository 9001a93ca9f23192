from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from usim import config
from usim.errors import InvalidConfiguration


def _snap(value: float, low: float, high: float, step: float) -> float:
    """Clip into [low, high] and round half-up onto the slider grid anchored at ``low``."""
    if not np.isfinite(value):
        raise InvalidConfiguration(f"Cannot snap non-finite value {value} into [{low}, {high}]")
    clipped = float(np.clip(value, low, high))
    snapped = low + np.floor((clipped - low) / step + 0.5) * step
    return float(min(snapped, high))


@dataclass(frozen=True)
class TransducerSettings:
    """
    Transducer excitation settings.

    No validation happens at construction; the acoustic calculator rejects a
    non-positive frequency. Use ``clamped()`` to bring arbitrary input into
    the slider ranges.

    :param frequency: Center frequency in MHz
    :param power: Output power in percent of maximum
    """
    frequency: float = config.DEFAULT_FREQUENCY_MHZ
    power: float = config.DEFAULT_POWER_PERCENT

    @property
    def frequency_hz(self) -> float:
        return self.frequency * 1e6

    @property
    def amplitude(self) -> float:
        """Relative pulse amplitude, power as a 0..1 fraction."""
        return self.power / 100.0

    def clamped(self) -> 'TransducerSettings':
        f_low, f_high = config.FREQUENCY_RANGE_MHZ
        p_low, p_high = config.POWER_RANGE_PERCENT
        return TransducerSettings(
            frequency=_snap(self.frequency, f_low, f_high, config.FREQUENCY_STEP_MHZ),
            power=_snap(self.power, p_low, p_high, config.POWER_STEP_PERCENT),
        )
