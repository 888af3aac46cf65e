"""Exceptions raised while reading audio input."""


class AudioFormatError(ValueError):
    """Base class for input buffers the analyzer cannot decode."""


class MalformedHeader(AudioFormatError):
    """RIFF/WAVE structure is missing, truncated, or inconsistent."""


class UnsupportedFormat(AudioFormatError):
    """Well-formed WAV whose sample encoding is not 16-bit PCM."""
