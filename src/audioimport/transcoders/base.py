"""Codec adapter contract and shared libsndfile helpers.

An adapter plugs one container/codec into the pipeline:

- check_format(data) -> bool: pure sniffing predicate, never raises
- decode(encoded) -> DecodedAudio: raises on failure
- encode(decoded, quality) -> EncodedAudio: optional, raises on failure
"""

import io
from collections.abc import Callable, Collection
from dataclasses import dataclass

import numpy as np
import soundfile as sf

from audioimport.types import AudioFormat, DecodedAudio, EncodedAudio

CheckFormatFn = Callable[[bytes], bool]
DecodeFn = Callable[[EncodedAudio], DecodedAudio]
EncodeFn = Callable[[DecodedAudio, int], EncodedAudio]


@dataclass(frozen=True)
class CodecAdapter:
    """Detect/decode/encode functions for a single audio format."""

    audio_format: AudioFormat
    check_format: CheckFormatFn
    decode: DecodeFn
    encode: EncodeFn | None = None
    """None for decode-only formats."""

    @property
    def can_encode(self) -> bool:
        return self.encode is not None


def read_with_soundfile(data: bytes, accepted_formats: Collection[str]) -> DecodedAudio:
    """Decode an in-memory audio stream with libsndfile.

    Args:
        data: The encoded stream. libsndfile detects the container from its
            header.
        accepted_formats: libsndfile major format names (e.g. "WAV", "FLAC")
            the caller is prepared to decode.

    Returns:
        DecodedAudio with interleaved float32 samples.

    Raises:
        ValueError: If libsndfile opened the stream as some other format.
    """
    with sf.SoundFile(io.BytesIO(data)) as f:
        if f.format not in accepted_formats:
            expected = "/".join(accepted_formats)
            raise ValueError(f"stream is {f.format} ({f.format_info}), expected {expected}")
        samples = f.read(dtype="float32", always_2d=True)
        sample_rate = f.samplerate

    num_channels = samples.shape[1]
    return DecodedAudio.from_interleaved(samples.reshape(-1), int(sample_rate), num_channels)


def write_with_soundfile(
    audio: DecodedAudio,
    format_name: str,
    subtype: str,
    compression_level: float | None = None,
) -> bytes:
    """Encode decoded audio to an in-memory stream with libsndfile."""
    buffer = io.BytesIO()
    sf.write(
        buffer,
        audio.as_frames(),
        audio.sample_rate,
        subtype=subtype,
        format=format_name,
        compression_level=compression_level,
    )
    return buffer.getvalue()


def quality_to_compression_level(quality: int) -> float:
    """Map a 0-255 quality hint onto libsndfile's 0.0-1.0 compression level.

    Higher quality means less compression.
    """
    return float(np.clip(1.0 - quality / 255.0, 0.0, 1.0))
