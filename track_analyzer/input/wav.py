"""16-bit PCM WAV decoding and mono downmix."""

import io
import logging
import struct
import numpy as np
import soundfile as sf
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from ..core import SampleBuffer, MalformedHeader, UnsupportedFormat
from ..core.constants import PCM_SUBTYPE, PCM_SCALE

logger = logging.getLogger(__name__)

_CHUNK_HEADER = struct.Struct("<4sI")


@dataclass(frozen=True)
class WavFormat:
    """Stream properties reported by libsndfile."""

    container: str
    subtype: str
    channels: int
    sample_rate: int
    frames: int


class WavReader:
    """Decodes RIFF/WAVE buffers into mono ``SampleBuffer``s."""

    SUPPORTED_FORMATS = {".wav", ".wave"}

    def read(self, data: bytes) -> SampleBuffer:
        """
        Decode a WAV byte buffer.

        Args:
            data: Complete RIFF/WAVE file contents

        Returns:
            Mono SampleBuffer normalized to [-1, 1]

        Raises:
            MalformedHeader: If the RIFF structure is missing or truncated
            UnsupportedFormat: If samples are not 16-bit integer PCM
        """
        fmt = self.parse_header(data)

        pcm, _ = sf.read(io.BytesIO(data), dtype="int16", always_2d=True)
        samples = self.downmix(pcm)

        logger.debug(
            "Decoded %d frames, %d channel(s) at %d Hz",
            len(samples), fmt.channels, fmt.sample_rate,
        )
        return SampleBuffer(samples, fmt.sample_rate, fmt.channels)

    def read_file(self, path: Union[str, Path]) -> SampleBuffer:
        """
        Read a WAV file from disk and decode it.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the extension is not a WAV extension
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {self.SUPPORTED_FORMATS}"
            )

        return self.read(path.read_bytes())

    def parse_header(self, data: bytes) -> WavFormat:
        """
        Validate the container and sample format without decoding samples.

        Raises:
            MalformedHeader: If libsndfile rejects the header or the data
                chunk is shorter than it declares
            UnsupportedFormat: If the subtype is not 16-bit PCM
        """
        if len(data) < 12 or data[0:4] != b"RIFF" or data[8:12] != b"WAVE":
            raise MalformedHeader("Missing RIFF/WAVE markers")

        try:
            info = sf.info(io.BytesIO(data))
        except sf.LibsndfileError as e:
            raise MalformedHeader(f"Unreadable WAV header: {e}") from e

        if info.subtype != PCM_SUBTYPE:
            raise UnsupportedFormat(
                f"Unsupported sample format: {info.subtype}. Only 16-bit PCM is supported"
            )

        # libsndfile silently reads a short data chunk
        chunk = data_chunk_bounds(data)
        if chunk is None:
            raise MalformedHeader("Missing 'data' chunk")
        start, size = chunk
        if start + size > len(data):
            raise MalformedHeader(
                f"Buffer holds {len(data) - start} data bytes, header declares {size}"
            )

        return WavFormat(info.format, info.subtype, info.channels, info.samplerate, info.frames)

    @staticmethod
    def downmix(pcm: np.ndarray) -> np.ndarray:
        """Average every channel of each frame ([n_frames, channels]) into one sample."""
        return pcm.astype(np.float64).mean(axis=1) / PCM_SCALE


def data_chunk_bounds(data: bytes) -> Optional[Tuple[int, int]]:
    """Offset and declared size of the 'data' chunk, or None if absent."""
    offset = 12
    while offset + _CHUNK_HEADER.size <= len(data):
        chunk_id, size = _CHUNK_HEADER.unpack_from(data, offset)
        body = offset + _CHUNK_HEADER.size
        if chunk_id == b"data":
            return body, size
        # Chunks are word aligned
        offset = body + size + (size & 1)
    return None


def read_wav_bytes(data: bytes) -> SampleBuffer:
    """Decode a WAV byte buffer into a mono SampleBuffer."""
    return WavReader().read(data)


def read_wav_file(path: Union[str, Path]) -> SampleBuffer:
    """Read and decode a WAV file from disk."""
    return WavReader().read_file(path)
