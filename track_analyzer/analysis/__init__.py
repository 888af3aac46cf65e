"""Analysis layer - Low-level signal analysis.

This layer extracts features from mono samples:
- Energy envelope and onset strength
- Tempo (autocorrelation with octave correction)
- Chromagram (per-window pitch detection)
- Loudest-segment search and waveform overview
"""

from .envelope import build_envelope
from .onset import detect_onsets
from .tempo import (
    TempoAnalyzer,
    TempoInfo,
    generate_candidates,
    resolve_octave,
    estimate_tempo,
)
from .chroma import build_chromagram
from .segment import find_best_segment, waveform_peaks

__all__ = [
    "build_envelope",
    "detect_onsets",
    "TempoAnalyzer",
    "TempoInfo",
    "generate_candidates",
    "resolve_octave",
    "estimate_tempo",
    "build_chromagram",
    "find_best_segment",
    "waveform_peaks",
]
