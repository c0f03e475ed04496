"""Battery voltage from averaged ADC readings of a resistor divider."""

from __future__ import annotations

from typing import Iterable

NUM_ADC_SAMPLES = 4

# two-point calibration of the supply divider
V1 = 3.247
V2 = 5.17
ADC1 = 491.0
ADC2 = 775.0


def average_samples(samples: Iterable[int]) -> int:
    """Integer average of raw ADC readings, truncated."""
    readings = [int(s) for s in samples]
    if not readings:
        raise ValueError("at least one ADC sample is required")
    total = sum(readings)
    quotient = abs(total) // len(readings)
    return quotient if total >= 0 else -quotient


def battery_voltage(sample: float) -> float:
    """Supply voltage corresponding to an averaged ADC reading."""
    slope = (V2 - V1) / (ADC2 - ADC1)
    return slope * (sample - ADC1) + V1