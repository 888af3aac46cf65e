"""Key detection - Identify the tonal center of a buffer.

Scores a 12-bin chromagram against Krumhansl-Schmuckler key profiles for
every tonic in both major and minor mode.
"""

import logging
import numpy as np
from typing import List, Optional

from ..core import SampleBuffer, Mode, KeyEstimate, AnalysisConfig
from ..analysis.chroma import build_chromagram

logger = logging.getLogger(__name__)


def _profile(values) -> np.ndarray:
    profile = np.array(values, dtype=np.float64)
    profile.flags.writeable = False
    return profile


# Krumhansl-Schmuckler key profiles, tonic at index 0
MAJOR_PROFILE = _profile(
    [6.35, 2.23, 3.48, 2.33, 4.38, 4.09, 2.52, 5.19, 2.39, 3.66, 2.29, 2.88]
)
MINOR_PROFILE = _profile(
    [6.33, 2.68, 3.52, 5.38, 2.60, 3.53, 2.54, 4.75, 3.98, 2.69, 3.34, 3.17]
)

PROFILES = ((Mode.MAJOR, MAJOR_PROFILE), (Mode.MINOR, MINOR_PROFILE))


def rank_keys(chroma: np.ndarray) -> List[KeyEstimate]:
    """
    Score all 24 keys against a chromagram.

    Args:
        chroma: 12-element pitch class distribution

    Returns:
        KeyEstimates sorted by score, best first. Equal scores keep the
        order tonic C..B, major before minor.
    """
    candidates = []
    for tonic in range(12):
        rotated = np.roll(chroma, -tonic)
        for mode, profile in PROFILES:
            candidates.append(KeyEstimate(tonic, mode, float(np.dot(rotated, profile))))

    # sorted() is stable, so ties keep iteration order
    return sorted(candidates, key=lambda c: c.score, reverse=True)


def estimate_key(
    chroma: np.ndarray,
    config: Optional[AnalysisConfig] = None,
) -> Optional[KeyEstimate]:
    """
    Best-fitting key for a chromagram.

    Returns:
        KeyEstimate, or None when the chromagram peak does not exceed
        ``min_key_energy`` (no reliable tonal content)
    """
    config = config or AnalysisConfig()
    chroma = np.asarray(chroma, dtype=np.float64)

    if chroma.size != 12 or chroma.max() <= config.min_key_energy:
        return None

    best = rank_keys(chroma)[0]
    logger.debug("Key: %s (score %.3f)", best.name, best.score)
    return best


class KeyDetector:
    """Detect musical key from audio via its chromagram."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    def chromagram(self, buffer: SampleBuffer) -> np.ndarray:
        """Normalized 12-bin chromagram of the analyzed window."""
        return build_chromagram(buffer, self.config)

    def detect(self, buffer: SampleBuffer) -> Optional[KeyEstimate]:
        """
        Detect key from audio.

        Returns:
            KeyEstimate, or None if no tonal content was found
        """
        return estimate_key(self.chromagram(buffer), self.config)

    def alternatives(self, buffer: SampleBuffer, count: int = 3) -> List[KeyEstimate]:
        """Runner-up keys after the best one."""
        chroma = self.chromagram(buffer)
        if estimate_key(chroma, self.config) is None:
            return []
        return rank_keys(chroma)[1:count + 1]
