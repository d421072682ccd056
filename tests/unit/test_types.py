"""Unit tests for core types, validation and helpers."""

import numpy as np
import pytest

from audioimport.errors import ConstructionError, TranscodingStatus
from audioimport.types import (
    AudioFormat,
    DecodedAudio,
    PCMInfo,
    RawSampleFormat,
    SoundWaveBasicInfo,
    TranscodingResult,
)
from audioimport.utils import format_duration
from audioimport.validation import validate_decoded_audio


class TestDecodedAudio:
    """Tests for building canonical decoded audio."""

    def test_from_interleaved(self) -> None:
        """Test frame count and duration are derived from the samples."""
        audio = DecodedAudio.from_interleaved(np.zeros(88200), 44100, 2)

        assert audio.num_frames == 44100
        assert audio.num_channels == 2
        assert audio.duration == 1.0
        assert audio.pcm_info.pcm_data.dtype == np.float32
        assert audio.pcm_info.num_bytes == 88200 * 4

    def test_from_frames_array(self) -> None:
        """Test a (frames, channels) array is flattened in interleaved order."""
        frames = np.array([[0.1, 0.2], [0.3, 0.4]], dtype=np.float32)

        audio = DecodedAudio.from_interleaved(frames, 8000, 2)

        np.testing.assert_array_equal(audio.pcm_info.pcm_data, frames.reshape(-1))
        np.testing.assert_array_equal(audio.as_frames(), frames)

    @pytest.mark.parametrize(
        ("num_samples", "sample_rate", "num_channels", "message"),
        [
            (4, 8000, 0, "Channel count must be positive"),
            (4, 0, 1, "Sample rate must be positive"),
            (5, 8000, 2, "cannot be split into frames"),
        ],
    )
    def test_invalid_parameters(
        self, num_samples: int, sample_rate: int, num_channels: int, message: str
    ) -> None:
        """Test inconsistent parameters raise ConstructionError."""
        with pytest.raises(ConstructionError, match=message) as e:
            DecodedAudio.from_interleaved(np.zeros(num_samples), sample_rate, num_channels)

        assert e.value.status is TranscodingStatus.CONSTRUCTION_FAILURE

    def test_str_summary(self) -> None:
        """Test the human readable description lists the stream info."""
        audio = DecodedAudio.from_interleaved(np.zeros(8000 * 65), 8000, 1)

        text = str(audio)

        assert "Number of channels: 1" in text
        assert "Sample rate: 8000" in text
        assert "Duration: 01:05" in text
        assert "Number of frames: 520000" in text

    def test_ambisonics(self) -> None:
        """Test four-channel audio is reported as ambisonic."""
        assert DecodedAudio.from_interleaved(np.zeros(8), 8000, 4).sound_wave_info.is_ambisonics
        assert not SoundWaveBasicInfo(2, 8000, 0.0).is_ambisonics


class TestFormats:
    """Tests for the format enumerations."""

    def test_concrete_formats(self) -> None:
        """Test AUTO and INVALID are the only non-concrete formats."""
        concrete = [f for f in AudioFormat if f.is_concrete]
        assert AudioFormat.AUTO not in concrete
        assert AudioFormat.INVALID not in concrete
        assert len(concrete) == 4

    @pytest.mark.parametrize(
        ("sample_format", "width"),
        [
            (RawSampleFormat.UINT8, 1),
            (RawSampleFormat.INT16, 2),
            (RawSampleFormat.INT32, 4),
            (RawSampleFormat.FLOAT32, 4),
        ],
    )
    def test_sample_width(self, sample_format: RawSampleFormat, width: int) -> None:
        """Test raw sample widths in bytes."""
        assert sample_format.sample_width == width

    def test_little_endian(self) -> None:
        """Test multi-byte raw formats are little-endian."""
        assert RawSampleFormat.INT16.dtype.str == "<i2"
        assert RawSampleFormat.FLOAT32.dtype.str == "<f4"


class TestTranscodingResult:
    """Tests for terminal results and status tags."""

    def test_success(self) -> None:
        result = TranscodingResult(status=TranscodingStatus.SUCCESS, payload=b"data")
        assert result.succeeded
        assert result.error is None

    @pytest.mark.parametrize(
        ("status", "is_encode_failure"),
        [
            (TranscodingStatus.ENCODE_FAILURE, True),
            (TranscodingStatus.UNSUPPORTED_OPERATION, True),
            (TranscodingStatus.INVALID_FORMAT, False),
            (TranscodingStatus.DECODE_FAILURE, False),
        ],
    )
    def test_encode_failure_tags(self, status: TranscodingStatus, is_encode_failure: bool) -> None:
        """Test UNSUPPORTED_OPERATION is a kind of encode failure."""
        assert status.is_encode_failure is is_encode_failure
        assert not status.succeeded


class TestValidateDecodedAudio:
    """Tests for decoded audio validation."""

    def test_valid(self) -> None:
        audio = DecodedAudio.from_interleaved(np.zeros(100), 8000, 2)

        result = validate_decoded_audio(audio)

        assert result.valid
        assert result.errors == []
        assert result.warnings == []

    def test_empty_audio_is_valid(self) -> None:
        """Test zero frames is a valid (silent) stream."""
        assert validate_decoded_audio(DecodedAudio.from_interleaved(np.zeros(0), 8000, 1)).valid

    def test_byte_count_mismatch(self) -> None:
        audio = DecodedAudio(
            pcm_info=PCMInfo(np.zeros(6, dtype=np.float32), num_frames=4),
            sound_wave_info=SoundWaveBasicInfo(1, 8000, 4 / 8000),
        )

        result = validate_decoded_audio(audio)

        assert not result.valid
        assert any("bytes of PCM data" in error for error in result.errors)

    def test_duration_mismatch(self) -> None:
        audio = DecodedAudio(
            pcm_info=PCMInfo(np.zeros(4, dtype=np.float32), num_frames=4),
            sound_wave_info=SoundWaveBasicInfo(1, 8000, 1.0),
        )

        result = validate_decoded_audio(audio)

        assert not result.valid
        assert any("duration" in error for error in result.errors)

    def test_wrong_dtype(self) -> None:
        audio = DecodedAudio(
            pcm_info=PCMInfo(np.zeros(4, dtype=np.float64), num_frames=4),  # type: ignore[arg-type]
            sound_wave_info=SoundWaveBasicInfo(1, 8000, 4 / 8000),
        )

        result = validate_decoded_audio(audio)

        assert not result.valid
        assert "pcm_data must be a flat float32 array" in result.errors

    def test_non_finite_warning(self) -> None:
        audio = DecodedAudio.from_interleaved(np.array([0.0, np.nan, np.inf]), 8000, 1)

        result = validate_decoded_audio(audio)

        assert result.valid
        assert "1 NaN, 1 Inf" in result.warnings[0]


class TestFormatDuration:
    """Tests for duration formatting."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, "00:00"),
            (59.9, "00:59"),
            (61, "01:01"),
            (3599, "59:59"),
            (3600, "01:00:00"),
            (3723.5, "01:02:03"),
            (-5, "00:00"),
        ],
    )
    def test_format(self, seconds: float, expected: str) -> None:
        assert format_duration(seconds) == expected
