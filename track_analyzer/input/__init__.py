"""Input layer - WAV decoding."""

from .wav import WavReader, WavFormat, read_wav_bytes, read_wav_file

__all__ = [
    "WavReader",
    "WavFormat",
    "read_wav_bytes",
    "read_wav_file",
]
