"""Analysis engine - tempo and key for a decoded buffer.

The tempo pipeline (envelope -> onsets -> tempo) and the key pipeline
(chromagram -> key) read the same immutable buffer and share no state, so
they may run on separate threads.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from .core import SampleBuffer, AnalysisResult, AnalysisConfig, KeyEstimate
from .input import read_wav_bytes
from .analysis import TempoAnalyzer
from .inference import KeyDetector

logger = logging.getLogger(__name__)


class AnalysisEngine:
    """Estimate tempo and key from mono samples."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()
        self.tempo_analyzer = TempoAnalyzer(self.config)
        self.key_detector = KeyDetector(self.config)

    def analyze(self, samples: SampleBuffer, parallel: bool = False) -> AnalysisResult:
        """
        Run both pipelines on the first ``max_duration`` seconds.

        Args:
            samples: Mono SampleBuffer
            parallel: Run tempo and key detection on two worker threads

        Returns:
            AnalysisResult; fields are None when nothing was detected
        """
        if samples.is_empty:
            logger.info("Empty buffer, nothing to analyze")
            return AnalysisResult()

        samples = samples.head(self.config.max_duration)

        if parallel:
            with ThreadPoolExecutor(max_workers=2) as pool:
                bpm_future = pool.submit(self.tempo_analyzer.detect, samples)
                key_future = pool.submit(self.key_detector.detect, samples)
                bpm, key = bpm_future.result(), key_future.result()
        else:
            bpm = self.tempo_analyzer.detect(samples)
            key = self.key_detector.detect(samples)

        result = AnalysisResult(bpm=bpm, key=key)
        logger.info(
            "Analyzed %.2fs at %d Hz: bpm=%s key=%s",
            samples.duration, samples.sample_rate, bpm, _key_name(key),
        )
        return result

    def analyze_wav_bytes(self, data: bytes, parallel: bool = False) -> AnalysisResult:
        """
        Decode a 16-bit PCM WAV buffer and analyze it.

        Raises:
            MalformedHeader: If the RIFF structure is invalid
            UnsupportedFormat: If the samples are not 16-bit PCM
        """
        return self.analyze(read_wav_bytes(data), parallel=parallel)


def _key_name(key: Optional[KeyEstimate]) -> str:
    return key.name if key is not None else "unknown"


def analyze(
    samples: SampleBuffer,
    config: Optional[AnalysisConfig] = None,
    parallel: bool = False,
) -> AnalysisResult:
    """Estimate tempo and key of a mono buffer."""
    return AnalysisEngine(config).analyze(samples, parallel=parallel)


def analyze_wav_bytes(
    data: bytes,
    config: Optional[AnalysisConfig] = None,
    parallel: bool = False,
) -> AnalysisResult:
    """Decode WAV bytes and estimate tempo and key."""
    return AnalysisEngine(config).analyze_wav_bytes(data, parallel=parallel)
