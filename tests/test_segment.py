"""Tests for loudest-segment search and waveform overview."""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from track_analyzer import SampleBuffer, find_best_segment, waveform_peaks

from generate_test_audio import generate_sine_wave, generate_silence


class TestBestSegment:
    """Sliding 30 s loudness window."""

    def test_finds_loud_region(self):
        sr = 8000
        audio = generate_silence(60.0, sr)
        audio[20 * sr:50 * sr] = generate_sine_wave(1000.0, 30.0, sr, amplitude=0.8)

        start, end = find_best_segment(SampleBuffer(audio, sr))

        assert start == pytest.approx(20.0, abs=0.25)
        assert end == pytest.approx(start + 30.0)

    def test_short_audio_returns_whole_buffer(self):
        buffer = SampleBuffer(generate_sine_wave(440.0, 10.0, 8000), 8000)
        assert find_best_segment(buffer) == (0.0, pytest.approx(10.0))

    def test_uniform_loudness_picks_earliest(self):
        buffer = SampleBuffer(np.full(8000 * 45, 0.5), 8000)
        assert find_best_segment(buffer)[0] == 0.0

    def test_custom_duration(self):
        sr = 8000
        audio = generate_silence(20.0, sr)
        audio[12 * sr:17 * sr] = 0.5

        start, end = find_best_segment(SampleBuffer(audio, sr), target_duration=5.0)

        assert start == pytest.approx(12.0, abs=0.25)
        assert end - start == pytest.approx(5.0)

    def test_rejects_non_positive_duration(self):
        buffer = SampleBuffer(np.zeros(100), 8000)
        with pytest.raises(ValueError):
            find_best_segment(buffer, target_duration=0)


class TestWaveformPeaks:
    """Block-averaged amplitude overview."""

    def test_length(self):
        buffer = SampleBuffer(generate_sine_wave(440.0, 2.0, 8000, 0.5), 8000)
        assert len(waveform_peaks(buffer, 50)) == 50

    def test_quiet_floor_and_loud_cap(self):
        audio = np.concatenate([np.zeros(1000), np.ones(1000)])
        peaks = waveform_peaks(SampleBuffer(audio, 8000), n_points=2)

        assert np.allclose(peaks, [0.1, 1.0])

    def test_scaling(self):
        peaks = waveform_peaks(SampleBuffer(np.full(1000, 0.2), 8000), n_points=10)
        assert np.allclose(peaks, 0.7)

    def test_empty_buffer(self):
        peaks = waveform_peaks(SampleBuffer(np.zeros(0), 8000), n_points=5)
        assert np.allclose(peaks, 0.1)

    def test_rejects_non_positive_points(self):
        with pytest.raises(ValueError):
            waveform_peaks(SampleBuffer(np.zeros(10), 8000), n_points=0)
