"""Windowed RMS energy envelope."""

import logging
import numpy as np
import librosa
from typing import Optional

from ..core import SampleBuffer, EnergyEnvelope, AnalysisConfig

logger = logging.getLogger(__name__)


def window_size(sample_rate: int, seconds: float) -> int:
    """Samples per analysis window, never less than one."""
    return max(1, int(round(sample_rate * seconds)))


def frame_signal(samples: np.ndarray, frame_length: int) -> np.ndarray:
    """
    Split samples into non-overlapping frames, dropping the partial tail.

    Returns:
        Array of shape [n_frames, frame_length]
    """
    n_frames = len(samples) // frame_length
    return samples[: n_frames * frame_length].reshape(n_frames, frame_length)


def build_envelope(
    buffer: SampleBuffer,
    config: Optional[AnalysisConfig] = None,
) -> EnergyEnvelope:
    """
    Compute the RMS loudness curve of the first ``max_duration`` seconds.

    Args:
        buffer: Mono samples
        config: Analysis settings (window length, duration cap)

    Returns:
        EnergyEnvelope with one value per ~23 ms window and a rate of
        windows per analyzed second. Empty when the buffer is shorter than
        a single window.
    """
    config = config or AnalysisConfig()
    buffer = buffer.head(config.max_duration)

    size = window_size(buffer.sample_rate, config.envelope_window_seconds)
    if len(buffer) < size:
        logger.debug("Envelope: buffer shorter than one %d-sample window", size)
        return EnergyEnvelope(np.zeros(0), envelope_rate=buffer.sample_rate / size)

    rms = librosa.feature.rms(
        y=np.ascontiguousarray(buffer.samples),
        frame_length=size,
        hop_length=size,
        center=False,
    )[0]

    # Rate is envelope length over analyzed duration, partial tail included
    logger.debug("Envelope: %d windows of %d samples", len(rms), size)
    return EnergyEnvelope(rms, envelope_rate=len(rms) / buffer.duration)
