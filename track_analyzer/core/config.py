"""Tunable analysis parameters."""

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping

from . import constants


@dataclass
class AnalysisConfig:
    """Configuration for tempo and key analysis.

    Attributes:
        max_duration: Seconds of audio analyzed from the start (default: 30)
        envelope_window_seconds: RMS window length for the envelope (default: 0.023)
        min_bpm: Lowest reportable tempo (default: 60)
        max_bpm: Highest reportable tempo (default: 200)
        max_overlap_seconds: Upper bound on the autocorrelation overlap (default: 2.0)
        correlation_floor: Minimum normalized tempo correlation (default: 0.01)
        onset_weight: Extra weight given to rising energy (default: 2.0)
        octave_ratio: Relative strength needed to switch octave (default: 0.7)
        halving_threshold_bpm: Tempos above this are checked for halving (default: 120)
        octave_tolerance: Relative BPM distance counted as "near" (default: 0.06)
        chroma_window_seconds: Pitch detection window length (default: 0.1)
        min_frequency: Lowest detectable pitch in Hz (default: 80)
        max_frequency: Highest detectable pitch in Hz (default: 2000)
        chroma_floor: Minimum window correlation added to the chromagram (default: 0.01)
        min_key_energy: Chroma peak must exceed this to report a key (default: 0.0)
    """

    max_duration: float = constants.MAX_ANALYSIS_SECONDS
    envelope_window_seconds: float = constants.ENVELOPE_WINDOW_SECONDS
    min_bpm: float = constants.MIN_BPM
    max_bpm: float = constants.MAX_BPM
    max_overlap_seconds: float = constants.MAX_OVERLAP_SECONDS
    correlation_floor: float = constants.CORRELATION_FLOOR
    onset_weight: float = constants.ONSET_WEIGHT
    octave_ratio: float = constants.OCTAVE_RATIO
    halving_threshold_bpm: float = constants.HALVING_THRESHOLD_BPM
    octave_tolerance: float = constants.OCTAVE_TOLERANCE
    chroma_window_seconds: float = constants.CHROMA_WINDOW_SECONDS
    min_frequency: float = constants.MIN_FREQUENCY
    max_frequency: float = constants.MAX_FREQUENCY
    chroma_floor: float = constants.CHROMA_FLOOR
    min_key_energy: float = constants.MIN_KEY_ENERGY

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ValueError on settings the pipeline cannot honor."""
        for name in (
            "max_duration",
            "envelope_window_seconds",
            "max_overlap_seconds",
            "chroma_window_seconds",
            "min_bpm",
            "min_frequency",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

        if self.max_bpm <= self.min_bpm:
            raise ValueError(
                f"max_bpm ({self.max_bpm}) must be greater than min_bpm ({self.min_bpm})"
            )
        if self.max_frequency <= self.min_frequency:
            raise ValueError(
                f"max_frequency ({self.max_frequency}) must be greater than "
                f"min_frequency ({self.min_frequency})"
            )
        if not 0.0 < self.octave_ratio <= 1.0:
            raise ValueError(f"octave_ratio must be in (0, 1], got {self.octave_ratio}")
        for name in ("correlation_floor", "chroma_floor", "onset_weight",
                     "octave_tolerance", "min_key_energy"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnalysisConfig":
        """Build a config from a mapping, skipping ``None`` values.

        Raises:
            ValueError: If the mapping contains unknown keys
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**{k: float(v) for k, v in data.items() if v is not None})

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
