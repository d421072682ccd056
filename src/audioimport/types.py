"""Core types for the audio transcoding pipeline.

These types describe audio as it moves through the pipeline: encoded bytes
tagged with a container/codec format, the canonical decoded representation
(interleaved 32-bit float PCM plus basic stream information), and the
terminal status delivered to subscribers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeAlias, TypeVar

import numpy as np
from numpy.typing import NDArray

from audioimport.errors import ConstructionError, TranscodingError, TranscodingStatus
from audioimport.utils import format_duration

PCMData: TypeAlias = NDArray[np.float32]

T = TypeVar("T")


class AudioFormat(str, Enum):
    """Container/codec formats recognized by the pipeline.

    AUTO asks the pipeline to detect the format from content. INVALID is the
    result of a failed detection and is never accepted by a codec.
    """

    AUTO = "auto"
    INVALID = "invalid"
    MP3 = "mp3"
    WAV = "wav"
    FLAC = "flac"
    OGG_VORBIS = "ogg_vorbis"

    @property
    def is_concrete(self) -> bool:
        """Whether this format names an actual codec."""
        return self not in (AudioFormat.AUTO, AudioFormat.INVALID)

    @property
    def display_name(self) -> str:
        """Human-readable name for this format."""
        names = {
            AudioFormat.AUTO: "Auto",
            AudioFormat.INVALID: "Invalid",
            AudioFormat.MP3: "MP3",
            AudioFormat.WAV: "WAV",
            AudioFormat.FLAC: "FLAC",
            AudioFormat.OGG_VORBIS: "Ogg Vorbis",
        }
        return names[self]


class RawSampleFormat(str, Enum):
    """Sample encodings for headerless (RAW) PCM data.

    All multi-byte encodings are little-endian.
    """

    UINT8 = "uint8"
    INT16 = "int16"
    INT32 = "int32"
    FLOAT32 = "float32"

    @property
    def dtype(self) -> np.dtype:
        """Numpy dtype of a single sample."""
        dtypes = {
            RawSampleFormat.UINT8: np.dtype("u1"),
            RawSampleFormat.INT16: np.dtype("<i2"),
            RawSampleFormat.INT32: np.dtype("<i4"),
            RawSampleFormat.FLOAT32: np.dtype("<f4"),
        }
        return dtypes[self]

    @property
    def sample_width(self) -> int:
        """Size of a single sample in bytes."""
        return self.dtype.itemsize


@dataclass(frozen=True)
class EncodedAudio:
    """Encoded audio bytes tagged with their format."""

    data: bytes
    """The encoded byte stream."""

    audio_format: AudioFormat = AudioFormat.AUTO
    """Format of the stream, AUTO if it still needs detection."""

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class SoundWaveBasicInfo:
    """Basic stream information for decoded audio."""

    num_channels: int
    """Number of interleaved channels."""

    sample_rate: int
    """Sample rate in Hz."""

    duration: float
    """Duration in seconds, derived from frame count and sample rate."""

    @property
    def is_ambisonics(self) -> bool:
        """First-order ambisonic streams are carried as four channels."""
        return self.num_channels == 4


@dataclass(frozen=True, eq=False)
class PCMInfo:
    """Interleaved 32-bit float PCM samples."""

    pcm_data: PCMData
    """Flat array of interleaved samples."""

    num_frames: int
    """Number of frames (one sample per channel at a single time index)."""

    @property
    def num_bytes(self) -> int:
        return int(self.pcm_data.nbytes)


@dataclass(frozen=True, eq=False)
class DecodedAudio:
    """Canonical in-memory audio: every codec decodes into and encodes from this."""

    pcm_info: PCMInfo
    sound_wave_info: SoundWaveBasicInfo

    @classmethod
    def from_interleaved(
        cls,
        samples: NDArray[np.floating],
        sample_rate: int,
        num_channels: int,
    ) -> "DecodedAudio":
        """Build decoded audio from interleaved samples.

        Args:
            samples: Interleaved samples; converted to a flat float32 array.
            sample_rate: Sample rate in Hz.
            num_channels: Number of interleaved channels.

        Returns:
            DecodedAudio with derived frame count and duration.

        Raises:
            ConstructionError: If the rate or channel count is not positive, or
                the sample count is not a whole number of frames.
        """
        if num_channels <= 0:
            raise ConstructionError(f"Channel count must be positive, got {num_channels}")
        if sample_rate <= 0:
            raise ConstructionError(f"Sample rate must be positive, got {sample_rate}")

        pcm = np.ascontiguousarray(samples, dtype=np.float32).reshape(-1)
        if len(pcm) % num_channels != 0:
            raise ConstructionError(
                f"{len(pcm)} samples cannot be split into frames of {num_channels} channels"
            )

        num_frames = len(pcm) // num_channels
        return cls(
            pcm_info=PCMInfo(pcm_data=pcm, num_frames=num_frames),
            sound_wave_info=SoundWaveBasicInfo(
                num_channels=num_channels,
                sample_rate=sample_rate,
                duration=num_frames / sample_rate,
            ),
        )

    @property
    def num_channels(self) -> int:
        return self.sound_wave_info.num_channels

    @property
    def sample_rate(self) -> int:
        return self.sound_wave_info.sample_rate

    @property
    def duration(self) -> float:
        return self.sound_wave_info.duration

    @property
    def num_frames(self) -> int:
        return self.pcm_info.num_frames

    def as_frames(self) -> NDArray[np.float32]:
        """View the samples as a (num_frames, num_channels) array."""
        return self.pcm_info.pcm_data.reshape(self.num_frames, self.num_channels)

    def __str__(self) -> str:
        info = self.sound_wave_info
        return (
            f"Number of channels: {info.num_channels}\n"
            f"Sample rate: {info.sample_rate}\n"
            f"Duration: {format_duration(info.duration)} ({info.duration:.3f}s)\n"
            f"Number of frames: {self.pcm_info.num_frames}\n"
            f"PCM data size: {self.pcm_info.num_bytes} bytes"
        )


@dataclass(frozen=True)
class TranscodingResult(Generic[T]):
    """Terminal delivery of a pipeline run.

    On success `payload` holds the produced value (DecodedAudio for imports,
    EncodedAudio for exports, bytes for raw conversions). On failure it is
    None and `error` carries diagnostic detail.
    """

    status: TranscodingStatus
    payload: T | None = None
    error: TranscodingError | None = field(default=None, compare=False)

    @property
    def succeeded(self) -> bool:
        return self.status.succeeded


@dataclass
class PipelineConfig:
    """Runtime settings for a transcoding pipeline."""

    max_workers: int = 4
    """Size of the background worker pool."""

    thread_name_prefix: str = "audioimport"
    """Prefix for worker thread names."""

    default_quality: int = 100
    """Export quality hint (0-255) used when the caller does not give one."""
