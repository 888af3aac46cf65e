"""Tempo estimation by envelope autocorrelation."""

import logging
import math
import numpy as np
from typing import Dict, Optional, Sequence, Tuple
from dataclasses import dataclass, field

from ..core import SampleBuffer, EnergyEnvelope, TempoCandidate, AnalysisConfig
from .envelope import build_envelope
from .onset import detect_onsets

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TempoInfo:
    """Container for tempo analysis results."""

    bpm: Optional[int]
    candidates: Tuple[TempoCandidate, ...] = field(default_factory=tuple)
    envelope_rate: float = 0.0

    @property
    def strength(self) -> float:
        """Score of the strongest raw candidate (0 when none survived)."""
        return max((c.strength for c in self.candidates), default=0.0)


def period_range(envelope_rate: float, config: AnalysisConfig) -> Tuple[int, int]:
    """Envelope-sample periods spanning the configured BPM range (inclusive)."""
    shortest = 60.0 * envelope_rate / config.max_bpm
    longest = 60.0 * envelope_rate / config.min_bpm
    return max(1, math.ceil(shortest - 1e-9)), math.floor(longest + 1e-9)


def correlation_score(
    envelope: np.ndarray,
    onsets: np.ndarray,
    period: int,
    max_overlap: int,
    onset_weight: float,
) -> float:
    """Onset-weighted autocorrelation at ``period``, normalized by overlap length."""
    n = min(len(envelope) - period, max_overlap)
    if n <= 0:
        return 0.0
    products = envelope[:n] * envelope[period:period + n] * (1.0 + onset_weight * onsets[:n])
    return float(np.sum(products) / n)


def _refined_period(scores: Dict[int, float], period: int) -> float:
    """Parabolic interpolation of a local correlation peak.

    Non-peaks and periods without both neighbours are returned unchanged.
    """
    if period - 1 not in scores or period + 1 not in scores:
        return float(period)

    left, center, right = scores[period - 1], scores[period], scores[period + 1]
    curvature = left - 2.0 * center + right
    if center < left or center < right or curvature >= 0:
        return float(period)

    offset = 0.5 * (left - right) / curvature
    return period + float(np.clip(offset, -0.5, 0.5))


def generate_candidates(
    envelope: EnergyEnvelope,
    onsets: np.ndarray,
    config: Optional[AnalysisConfig] = None,
) -> Tuple[TempoCandidate, ...]:
    """
    Score every integer period in the tempo range.

    Args:
        envelope: Energy envelope
        onsets: Onset series paired with the envelope
        config: Analysis settings

    Returns:
        Candidates above the correlation floor, ordered by period (fastest
        tempo first)
    """
    config = config or AnalysisConfig()
    if len(envelope) == 0:
        return ()

    values = envelope.values
    rate = envelope.envelope_rate
    shortest, longest = period_range(rate, config)
    max_overlap = max(1, int(round(config.max_overlap_seconds * rate)))

    scores = {
        period: correlation_score(values, onsets, period, max_overlap, config.onset_weight)
        for period in range(max(1, shortest - 1), longest + 2)
    }

    candidates = tuple(
        TempoCandidate(
            bpm=60.0 * rate / _refined_period(scores, period),
            strength=scores[period],
        )
        for period in range(shortest, longest + 1)
        if scores[period] > config.correlation_floor
    )

    logger.debug(
        "Tempo search over periods %d-%d: %d candidate(s)",
        shortest, longest, len(candidates),
    )
    return candidates


def _strongest_near(
    candidates: Sequence[TempoCandidate],
    target_bpm: float,
    min_strength: float,
    tolerance: float,
) -> Optional[TempoCandidate]:
    near = [
        c for c in candidates
        if abs(c.bpm - target_bpm) <= tolerance * target_bpm and c.strength >= min_strength
    ]
    if not near:
        return None
    return max(near, key=lambda c: c.strength)


def resolve_octave(
    candidates: Sequence[TempoCandidate],
    config: Optional[AnalysisConfig] = None,
) -> Optional[int]:
    """
    Pick the final tempo, correcting half- and double-tempo detections.

    The strongest candidate wins (first one on ties). When a candidate near
    twice its tempo is at least ``octave_ratio`` as strong, the faster tempo
    is preferred. Tempos above ``halving_threshold_bpm`` are checked the same
    way against half their value.

    Returns:
        Rounded BPM clamped to the configured range, or None if there are
        no candidates
    """
    config = config or AnalysisConfig()
    if not candidates:
        return None

    best = max(candidates, key=lambda c: c.strength)
    min_strength = config.octave_ratio * best.strength
    chosen = best

    if best.bpm * 2 <= config.max_bpm:
        doubled = _strongest_near(candidates, best.bpm * 2, min_strength, config.octave_tolerance)
        if doubled is not None:
            logger.debug("Half-tempo correction: %.2f -> %.2f BPM", best.bpm, doubled.bpm)
            chosen = doubled
    elif round(best.bpm) > config.halving_threshold_bpm:
        halved = _strongest_near(candidates, best.bpm / 2, min_strength, config.octave_tolerance)
        if halved is not None:
            logger.debug("Double-tempo correction: %.2f -> %.2f BPM", best.bpm, halved.bpm)
            chosen = halved

    bpm = int(round(chosen.bpm))
    return min(max(bpm, math.ceil(config.min_bpm)), math.floor(config.max_bpm))


def estimate_tempo(
    envelope: EnergyEnvelope,
    onsets: np.ndarray,
    config: Optional[AnalysisConfig] = None,
) -> Optional[int]:
    """Tempo in BPM for an envelope/onset pair, or None if unknown."""
    return resolve_octave(generate_candidates(envelope, onsets, config), config)


class TempoAnalyzer:
    """Detect a single global tempo from audio."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()

    def detect(self, buffer: SampleBuffer) -> Optional[int]:
        """
        Detect tempo.

        Args:
            buffer: Mono samples

        Returns:
            Tempo in BPM, or None if no periodicity was found
        """
        return self.analyze(buffer).bpm

    def analyze(self, buffer: SampleBuffer) -> TempoInfo:
        """
        Perform full tempo analysis.

        Returns:
            TempoInfo with the estimate and the raw candidates
        """
        envelope = build_envelope(buffer, self.config)
        if len(envelope) == 0:
            return TempoInfo(bpm=None)

        onsets = detect_onsets(envelope)
        candidates = generate_candidates(envelope, onsets, self.config)
        return TempoInfo(
            bpm=resolve_octave(candidates, self.config),
            candidates=candidates,
            envelope_rate=envelope.envelope_rate,
        )
