"""Core types, errors and configuration for Track Analyzer."""

from .types import (
    SampleBuffer,
    EnergyEnvelope,
    TempoCandidate,
    Mode,
    KeyEstimate,
    AnalysisResult,
)
from .errors import AudioFormatError, MalformedHeader, UnsupportedFormat
from .config import AnalysisConfig
from .constants import PITCH_NAMES

__all__ = [
    "SampleBuffer",
    "EnergyEnvelope",
    "TempoCandidate",
    "Mode",
    "KeyEstimate",
    "AnalysisResult",
    "AudioFormatError",
    "MalformedHeader",
    "UnsupportedFormat",
    "AnalysisConfig",
    "PITCH_NAMES",
]
