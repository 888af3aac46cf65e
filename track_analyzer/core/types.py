"""Data types shared by the analysis pipeline.

Every value here is created fresh per analysis call and never mutated
afterwards. Array-backed types hold read-only numpy arrays.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any
import numpy as np

from .constants import PITCH_NAMES


def _frozen_array(values) -> np.ndarray:
    array = np.array(values, dtype=np.float64)
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class SampleBuffer:
    """Normalized mono samples in [-1, 1] tagged with their sample rate."""

    samples: np.ndarray
    sample_rate: int
    channels: int = 1  # channel count of the source before downmix

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.channels <= 0:
            raise ValueError(f"channels must be positive, got {self.channels}")
        object.__setattr__(self, "samples", _frozen_array(self.samples).ravel())

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return len(self.samples) / self.sample_rate

    @property
    def is_empty(self) -> bool:
        return len(self.samples) == 0

    def head(self, seconds: float) -> "SampleBuffer":
        """Return a buffer holding at most the first ``seconds`` of audio."""
        n_samples = int(seconds * self.sample_rate)
        if n_samples >= len(self.samples):
            return self
        return SampleBuffer(self.samples[:n_samples], self.sample_rate, self.channels)


@dataclass(frozen=True, eq=False)
class EnergyEnvelope:
    """Per-window RMS loudness curve."""

    values: np.ndarray
    envelope_rate: float  # envelope samples per second of audio

    def __post_init__(self):
        if self.envelope_rate <= 0:
            raise ValueError(f"envelope_rate must be positive, got {self.envelope_rate}")
        object.__setattr__(self, "values", _frozen_array(self.values).ravel())

    def __len__(self) -> int:
        return len(self.values)

    @property
    def duration(self) -> float:
        """Seconds of audio covered by the envelope windows."""
        return len(self.values) / self.envelope_rate


@dataclass(frozen=True)
class TempoCandidate:
    """A tempo hypothesis with its autocorrelation score."""

    bpm: float
    strength: float


class Mode(Enum):
    """Key modes."""
    MAJOR = "major"
    MINOR = "minor"


@dataclass(frozen=True)
class KeyEstimate:
    """A tonic pitch class (0=C) with its mode and template score."""

    pitch_class: int
    mode: Mode
    score: float = 0.0

    @property
    def root(self) -> str:
        return PITCH_NAMES[self.pitch_class]

    @property
    def name(self) -> str:
        """Get key name (e.g., 'A minor')."""
        return f"{self.root} {self.mode.value}"

    @property
    def relative(self) -> "KeyEstimate":
        """Relative major/minor sharing the same key signature."""
        if self.mode is Mode.MAJOR:
            return KeyEstimate((self.pitch_class - 3) % 12, Mode.MINOR)
        return KeyEstimate((self.pitch_class + 3) % 12, Mode.MAJOR)


@dataclass(frozen=True)
class AnalysisResult:
    """Tempo and key estimate. ``None`` means unknown."""

    bpm: Optional[int] = None
    key: Optional[KeyEstimate] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        key = None
        if self.key is not None:
            key = {
                "pitch_class": self.key.pitch_class,
                "root": self.key.root,
                "mode": self.key.mode.value,
                "name": self.key.name,
            }
        return {"bpm": self.bpm, "key": key}
