"""Track Analyzer - Tempo and key estimation for PCM audio.

Architecture Layers:
    1. core/      - Data types, errors, configuration and constants
    2. input/     - 16-bit PCM WAV decoding and mono downmix
    3. analysis/  - Signal analysis (envelope, onsets, tempo, chromagram)
    4. inference/ - Musical understanding (key)
    5. engine     - Combined tempo + key analysis
"""

__version__ = "0.1.0"

# Core types
from .core import (
    SampleBuffer,
    EnergyEnvelope,
    TempoCandidate,
    Mode,
    KeyEstimate,
    AnalysisResult,
    AnalysisConfig,
    AudioFormatError,
    MalformedHeader,
    UnsupportedFormat,
)

# Input layer
from .input import WavReader, read_wav_bytes, read_wav_file

# Analysis layer
from .analysis import TempoAnalyzer, find_best_segment, waveform_peaks

# Inference layer
from .inference import KeyDetector

# Engine
from .engine import AnalysisEngine, analyze, analyze_wav_bytes

__all__ = [
    # Core
    "SampleBuffer",
    "EnergyEnvelope",
    "TempoCandidate",
    "Mode",
    "KeyEstimate",
    "AnalysisResult",
    "AnalysisConfig",
    "AudioFormatError",
    "MalformedHeader",
    "UnsupportedFormat",
    # Input
    "WavReader",
    "read_wav_bytes",
    "read_wav_file",
    # Analysis
    "TempoAnalyzer",
    "find_best_segment",
    "waveform_peaks",
    # Inference
    "KeyDetector",
    # Engine
    "AnalysisEngine",
    "analyze",
    "analyze_wav_bytes",
]
