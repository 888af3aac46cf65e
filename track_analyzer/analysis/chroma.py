"""Chromagram from per-window autocorrelation pitch detection."""

import logging
import math
import numpy as np
import librosa
from typing import Optional, Tuple

from ..core import SampleBuffer, AnalysisConfig
from .envelope import window_size, frame_signal

logger = logging.getLogger(__name__)


def autocorrelate_frames(frames: np.ndarray) -> np.ndarray:
    """
    Autocorrelation of each frame, normalized by the frame length.

    Args:
        frames: Array [n_frames, frame_length]

    Returns:
        Array [n_frames, frame_length]; column ``p`` is the lag-``p`` value
    """
    length = frames.shape[1]
    # Zero-pad to 2N so the circular correlation equals the linear one
    spectrum = np.fft.rfft(frames, n=2 * length, axis=1)
    power = spectrum.real ** 2 + spectrum.imag ** 2
    return np.fft.irfft(power, n=2 * length, axis=1)[:, :length] / length


def lag_range(sample_rate: int, frame_length: int, config: AnalysisConfig) -> Tuple[int, int]:
    """Lags (inclusive) covering the configured pitch range."""
    shortest = max(1, math.ceil(sample_rate / config.max_frequency))
    longest = min(math.floor(sample_rate / config.min_frequency), frame_length - 2)
    return shortest, longest


def dominant_periods(
    correlation: np.ndarray, shortest: int, longest: int
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Strongest lag per frame, refined by parabolic interpolation.

    Returns:
        Tuple of (fractional periods in samples, correlation strengths)
    """
    search = correlation[:, shortest:longest + 1]
    index = np.argmax(search, axis=1)
    rows = np.arange(len(search))
    strength = search[rows, index]

    # lag_range keeps both neighbours inside the frame
    lag = index + shortest
    left = correlation[rows, lag - 1]
    right = correlation[rows, lag + 1]
    curvature = left - 2.0 * strength + right

    offset = np.zeros(len(lag))
    peaked = curvature < 0
    offset[peaked] = 0.5 * (left[peaked] - right[peaked]) / curvature[peaked]
    return lag + np.clip(offset, -0.5, 0.5), strength


def pitch_classes(frequencies: np.ndarray) -> np.ndarray:
    """Pitch class (0=C) of each frequency in Hz."""
    # MIDI numbers are C-aligned, so their residue mod 12 is the pitch class
    return np.mod(np.round(librosa.hz_to_midi(frequencies)).astype(int), 12)


def build_chromagram(
    buffer: SampleBuffer,
    config: Optional[AnalysisConfig] = None,
) -> np.ndarray:
    """
    Accumulate per-window pitch detections into a 12-bin histogram.

    Args:
        buffer: Mono samples
        config: Analysis settings (window length, pitch range, noise floor)

    Returns:
        12-element array summing to 1, or all zeros if nothing tonal was found
    """
    config = config or AnalysisConfig()
    buffer = buffer.head(config.max_duration)
    chroma = np.zeros(12)

    size = window_size(buffer.sample_rate, config.chroma_window_seconds)
    frames = frame_signal(buffer.samples, size)
    shortest, longest = lag_range(buffer.sample_rate, size, config)
    if len(frames) == 0 or longest < shortest:
        return chroma

    correlation = autocorrelate_frames(frames)
    periods, strength = dominant_periods(correlation, shortest, longest)

    voiced = strength >= config.chroma_floor
    if np.any(voiced):
        classes = pitch_classes(buffer.sample_rate / periods[voiced])
        np.add.at(chroma, classes, strength[voiced])

    logger.debug("Chromagram: %d/%d voiced windows", int(voiced.sum()), len(frames))

    total = chroma.sum()
    if total > 0:
        chroma /= total
    return chroma

