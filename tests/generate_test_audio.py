"""Generate synthetic WAV audio for testing."""

import io
import os
import numpy as np
from scipy.io import wavfile

# Output directory for generated examples
EXAMPLES_DIR = os.path.join(os.path.dirname(__file__), "..", "examples")


def generate_sine_wave(
    freq: float, duration: float, sr: int = 22050, amplitude: float = 1.0
) -> np.ndarray:
    """Generate a sine wave at given frequency."""
    t = np.arange(int(sr * duration)) / sr
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float64)


def generate_pulsed_tone(
    bpm: float,
    duration: float,
    sr: int = 44100,
    carrier: float = 1000.0,
    amplitude: float = 0.28,
) -> np.ndarray:
    """Generate a tone whose loudness swells once per beat.

    The amplitude follows sin^2, so the loudness curve is periodic with the
    beat period.
    """
    t = np.arange(int(sr * duration)) / sr
    beat = 60.0 / bpm
    swell = np.sin(np.pi * t / beat) ** 2
    return amplitude * swell * np.sin(2 * np.pi * carrier * t)


def generate_silence(duration: float, sr: int = 22050) -> np.ndarray:
    """Generate silence."""
    return np.zeros(int(sr * duration))


def to_pcm16(audio: np.ndarray) -> np.ndarray:
    """Convert float audio in [-1, 1] to 16-bit integers."""
    return np.clip(np.round(audio * 32767), -32768, 32767).astype(np.int16)


def to_wav_bytes(audio: np.ndarray, sr: int = 22050) -> bytes:
    """Encode float audio ([n] or [n, channels]) as a 16-bit PCM WAV buffer."""
    return pcm_to_wav_bytes(to_pcm16(audio), sr)


def pcm_to_wav_bytes(pcm: np.ndarray, sr: int = 22050) -> bytes:
    """Encode integer samples as a WAV buffer, keeping their dtype."""
    buffer = io.BytesIO()
    wavfile.write(buffer, sr, pcm)
    return buffer.getvalue()


def save_wav(filename: str, audio: np.ndarray, sr: int = 22050) -> str:
    """Save audio as WAV file."""
    os.makedirs(EXAMPLES_DIR, exist_ok=True)
    filepath = os.path.join(EXAMPLES_DIR, filename)
    wavfile.write(filepath, sr, to_pcm16(audio))
    print(f"Created: {filepath}")
    return filepath


def main():
    sr = 44100

    # 1. Sustained A4 (440 Hz) - 5 seconds
    print("Generating a4_sustained.wav...")
    save_wav("a4_sustained.wav", generate_sine_wave(440.0, 5.0, sr, amplitude=0.5), sr)

    # 2. Tone pulsing at 120 BPM - 20 seconds
    print("Generating pulse_120bpm.wav...")
    save_wav("pulse_120bpm.wav", generate_pulsed_tone(120.0, 20.0, sr), sr)

    # 3. Silence - 3 seconds
    print("Generating silence.wav...")
    save_wav("silence.wav", generate_silence(3.0, sr), sr)

    print("\nDone! Test files created in examples/")


if __name__ == "__main__":
    main()
