"""Loudness-based helpers for picking and previewing audio regions."""

import numpy as np
import librosa
from typing import Tuple

from ..core import SampleBuffer
from ..core.constants import SEGMENT_SECONDS, SEGMENT_FRAME_SECONDS, SEGMENT_HOP_SECONDS


def find_best_segment(
    buffer: SampleBuffer,
    target_duration: float = SEGMENT_SECONDS,
    frame_seconds: float = SEGMENT_FRAME_SECONDS,
    hop_seconds: float = SEGMENT_HOP_SECONDS,
) -> Tuple[float, float]:
    """
    Find the loudest stretch of ``target_duration`` seconds.

    Loudness is the mean of 1 s RMS frames taken every 0.25 s. The earliest
    segment wins on ties.

    Args:
        buffer: Mono samples
        target_duration: Segment length in seconds
        frame_seconds: RMS frame length
        hop_seconds: Distance between frame starts

    Returns:
        Tuple of (start, end) in seconds
    """
    if target_duration <= 0 or frame_seconds <= 0 or hop_seconds <= 0:
        raise ValueError("Durations must be positive")

    duration = buffer.duration
    frame_length = max(1, int(round(frame_seconds * buffer.sample_rate)))
    hop_length = max(1, int(round(hop_seconds * buffer.sample_rate)))

    if duration <= target_duration or len(buffer) < frame_length:
        return 0.0, duration

    rms = librosa.feature.rms(
        y=np.ascontiguousarray(buffer.samples),
        frame_length=frame_length,
        hop_length=hop_length,
        center=False,
    )[0]

    span = max(1, int((target_duration - frame_seconds) / hop_seconds) + 1)
    span = min(span, len(rms))
    energy = np.convolve(rms, np.ones(span), mode="valid")

    start = float(librosa.samples_to_time(int(np.argmax(energy)) * hop_length, sr=buffer.sample_rate))
    return start, min(start + target_duration, duration)


def waveform_peaks(buffer: SampleBuffer, n_points: int = 100) -> np.ndarray:
    """
    Coarse waveform overview for display.

    Each point is the mean absolute amplitude of its block, scaled by 3.5 and
    kept within [0.1, 1.0] so quiet passages stay visible.
    """
    if n_points <= 0:
        raise ValueError(f"n_points must be positive, got {n_points}")
    if buffer.is_empty:
        return np.full(n_points, 0.1)

    block = max(1, len(buffer) // n_points)
    peaks = np.empty(n_points)
    for i in range(n_points):
        chunk = buffer.samples[i * block:(i + 1) * block]
        peaks[i] = np.abs(chunk).mean() if len(chunk) else 0.0

    return np.clip(peaks * 3.5, 0.1, 1.0)
