"""Tests for WAV decoding and downmix."""

import struct
import pytest
import numpy as np
from pathlib import Path
import sys

# Add package root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from track_analyzer.input import WavReader, read_wav_bytes, read_wav_file
from track_analyzer.input.wav import data_chunk_bounds
from track_analyzer.core import MalformedHeader, UnsupportedFormat, AudioFormatError

from generate_test_audio import to_wav_bytes, pcm_to_wav_bytes, generate_sine_wave


class TestHeaderParsing:
    """RIFF/WAVE structure validation."""

    def test_header_fields(self):
        data = to_wav_bytes(generate_sine_wave(440.0, 0.1, 8000), 8000)
        fmt = WavReader().parse_header(data)

        assert fmt.subtype == "PCM_16"
        assert fmt.channels == 1
        assert fmt.sample_rate == 8000
        assert fmt.frames == 800

    def test_canonical_data_chunk_offset(self):
        data = to_wav_bytes(generate_sine_wave(440.0, 0.1, 8000), 8000)
        assert data_chunk_bounds(data) == (44, 800 * 2)

    def test_data_chunk_after_odd_sized_chunk(self):
        """Odd-sized chunks carry a pad byte before the next chunk."""
        data = to_wav_bytes(np.zeros(10), 8000)
        extra = b"junk" + struct.pack("<I", 3) + b"abc" + b"\x00"

        assert data_chunk_bounds(data[:36] + extra + data[36:]) == (56, 20)
        assert data_chunk_bounds(data[:36]) is None

    def test_reads_sample_rate_and_channels(self):
        stereo = np.zeros((100, 2))
        buffer = read_wav_bytes(to_wav_bytes(stereo, 48000))

        assert buffer.sample_rate == 48000
        assert buffer.channels == 2
        assert len(buffer) == 100

    def test_invalid_riff_marker(self):
        data = bytearray(to_wav_bytes(np.zeros(100), 8000))
        data[0:4] = b"RIFX"

        with pytest.raises(MalformedHeader):
            read_wav_bytes(bytes(data))

    def test_invalid_wave_marker(self):
        data = bytearray(to_wav_bytes(np.zeros(100), 8000))
        data[8:12] = b"AVI "

        with pytest.raises(MalformedHeader):
            read_wav_bytes(bytes(data))

    def test_too_short_buffer(self):
        with pytest.raises(MalformedHeader):
            read_wav_bytes(b"RIFF")

    def test_missing_data_chunk(self):
        data = to_wav_bytes(np.zeros(100), 8000)[:36]

        with pytest.raises(MalformedHeader):
            read_wav_bytes(data)

    def test_truncated_data(self):
        """Buffer shorter than the declared data size."""
        data = to_wav_bytes(np.zeros(1000), 8000)[:-100]

        with pytest.raises(MalformedHeader):
            read_wav_bytes(data)

    def test_zero_channels(self):
        data = bytearray(to_wav_bytes(np.zeros(100), 8000))
        struct.pack_into("<H", data, 22, 0)

        with pytest.raises(MalformedHeader):
            read_wav_bytes(bytes(data))

    def test_8bit_is_unsupported(self):
        pcm = np.full(100, 128, dtype=np.uint8)
        data = pcm_to_wav_bytes(pcm, 8000)

        with pytest.raises(UnsupportedFormat):
            read_wav_bytes(data)

    def test_32bit_is_unsupported(self):
        pcm = np.zeros(100, dtype=np.int32)
        data = pcm_to_wav_bytes(pcm, 8000)

        with pytest.raises(UnsupportedFormat):
            read_wav_bytes(data)

    def test_errors_are_value_errors(self):
        assert issubclass(MalformedHeader, AudioFormatError)
        assert issubclass(UnsupportedFormat, AudioFormatError)
        assert issubclass(AudioFormatError, ValueError)

    def test_skips_extra_chunks(self):
        """A LIST chunk between 'fmt ' and 'data' is skipped."""
        data = to_wav_bytes(np.full(10, 0.5), 8000)
        extra = b"LIST" + struct.pack("<I", 4) + b"INFO"
        patched = bytearray(data[:36] + extra + data[36:])
        struct.pack_into("<I", patched, 4, len(patched) - 8)

        buffer = read_wav_bytes(bytes(patched))

        assert len(buffer) == 10
        assert np.allclose(buffer.samples, 16384 / 32768)


class TestDownmix:
    """Conversion of interleaved frames to mono."""

    def test_mono_normalization(self):
        pcm = np.array([0, 16384, -16384, 32767, -32768], dtype=np.int16)
        buffer = read_wav_bytes(pcm_to_wav_bytes(pcm, 8000))

        expected = pcm.astype(np.float64) / 32768
        assert np.allclose(buffer.samples, expected)
        assert buffer.samples.min() >= -1.0
        assert buffer.samples.max() <= 1.0

    def test_stereo_with_constant_offset(self):
        """Mono sample equals the mean of both channels at every frame."""
        left = (np.sin(np.linspace(0, 20, 500)) * 10000).astype(np.int16)
        right = (left.astype(np.int32) + 4000).astype(np.int16)
        pcm = np.stack([left, right], axis=1)

        buffer = read_wav_bytes(pcm_to_wav_bytes(pcm, 8000))

        expected = (left.astype(np.float64) + right.astype(np.float64)) / 2 / 32768
        assert len(buffer) == 500
        assert np.allclose(buffer.samples, expected)

    def test_all_channels_are_averaged(self):
        """Three channels: every channel contributes, not just the first two."""
        pcm = np.tile(np.array([100, 200, 600], dtype=np.int16), (50, 1))

        buffer = read_wav_bytes(pcm_to_wav_bytes(pcm, 8000))

        assert buffer.channels == 3
        assert np.allclose(buffer.samples, 300 / 32768)

    def test_samples_are_read_only(self):
        buffer = read_wav_bytes(to_wav_bytes(np.zeros(10), 8000))

        with pytest.raises(ValueError):
            buffer.samples[0] = 1.0

    def test_empty_data_chunk(self):
        buffer = read_wav_bytes(pcm_to_wav_bytes(np.zeros(0, dtype=np.int16), 8000))

        assert buffer.is_empty
        assert buffer.sample_rate == 8000


class TestReadFile:
    """Reading WAV files from disk."""

    def test_reads_file(self, tmp_path):
        path = tmp_path / "tone.wav"
        path.write_bytes(to_wav_bytes(generate_sine_wave(440.0, 0.5, 8000, 0.5), 8000))

        buffer = read_wav_file(path)

        assert buffer.sample_rate == 8000
        assert len(buffer) == 4000
        assert buffer.duration == pytest.approx(0.5)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_wav_file(tmp_path / "missing.wav")

    def test_rejects_other_extensions(self, tmp_path):
        path = tmp_path / "song.mp3"
        path.write_bytes(b"ID3")

        with pytest.raises(ValueError):
            read_wav_file(path)
