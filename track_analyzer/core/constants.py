"""Global constants for Track Analyzer."""

# Pitch names
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# WAV decoding
PCM_SUBTYPE = "PCM_16"
PCM_SCALE = 32768.0

# Analysis window
MAX_ANALYSIS_SECONDS = 30.0
ENVELOPE_WINDOW_SECONDS = 0.023  # ~23 ms RMS windows
CHROMA_WINDOW_SECONDS = 0.1  # ~100 ms pitch windows

# Tempo search
MIN_BPM = 60.0
MAX_BPM = 200.0
MAX_OVERLAP_SECONDS = 2.0
CORRELATION_FLOOR = 0.01
ONSET_WEIGHT = 2.0
OCTAVE_RATIO = 0.7  # harmonic candidate must reach 70% of the best strength
HALVING_THRESHOLD_BPM = 120.0
OCTAVE_TOLERANCE = 0.06  # relative distance for "near" the doubled/halved tempo

# Pitch search
MIN_FREQUENCY = 80.0
MAX_FREQUENCY = 2000.0
CHROMA_FLOOR = 0.01

# Key gate. 0.0 reports a best guess whenever any tonal energy was found.
MIN_KEY_ENERGY = 0.0

# Segment finder
SEGMENT_SECONDS = 30.0
SEGMENT_FRAME_SECONDS = 1.0
SEGMENT_HOP_SECONDS = 0.25
