"""Onset strength from the energy envelope."""

import numpy as np

from ..core import EnergyEnvelope


def rising_energy(values: np.ndarray) -> np.ndarray:
    """First-order difference with negative changes clamped to zero.

    The first element has no predecessor and is zero, so the output has the
    same length as the input.
    """
    diff = np.zeros(len(values))
    if len(values) > 1:
        diff[1:] = np.maximum(np.diff(values), 0.0)
    return diff


def smooth3(values: np.ndarray) -> np.ndarray:
    """3-point moving average. First and last samples pass through."""
    smoothed = np.array(values, dtype=np.float64)
    if len(values) >= 3:
        smoothed[1:-1] = (values[:-2] + values[1:-1] + values[2:]) / 3.0
    return smoothed


def detect_onsets(envelope: EnergyEnvelope) -> np.ndarray:
    """
    Build the onset series for an envelope.

    Returns:
        Non-negative array with the same length as the envelope
    """
    onsets = smooth3(rising_energy(envelope.values))
    onsets.flags.writeable = False
    return onsets
