"""Unit and property-based tests for raw PCM sample conversion."""

import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from audioimport.format.raw import (
    convert_raw,
    decode_raw_samples,
    encode_raw_samples,
    raw_to_float32,
)
from audioimport.types import RawSampleFormat

# Size of one step of each format in normalized [-1, 1] units
QUANTUM = {
    RawSampleFormat.UINT8: 1 / 128,
    RawSampleFormat.INT16: 1 / 32768,
    RawSampleFormat.INT32: 2.0**-31,
    RawSampleFormat.FLOAT32: 2.0**-24,
}


@st.composite
def raw_samples(draw: st.DrawFn, sample_format: RawSampleFormat) -> bytes:
    """Generate a raw buffer of 1-64 valid samples in the given format."""
    if sample_format is RawSampleFormat.FLOAT32:
        element = st.floats(min_value=-1.0, max_value=1.0, width=32)
    else:
        info = np.iinfo(sample_format.dtype)
        element = st.integers(min_value=int(info.min), max_value=int(info.max))

    values = draw(st.lists(element, min_size=1, max_size=64))
    return np.array(values, dtype=sample_format.dtype).tobytes()


@st.composite
def conversion_case(draw: st.DrawFn) -> tuple[bytes, RawSampleFormat, RawSampleFormat]:
    source = draw(st.sampled_from(list(RawSampleFormat)))
    target = draw(st.sampled_from(list(RawSampleFormat)))
    return draw(raw_samples(source)), source, target


class TestConvertRaw:
    """Tests for convert_raw with known values."""

    @pytest.mark.parametrize("sample_format", list(RawSampleFormat))
    def test_identity_returns_input(self, sample_format: RawSampleFormat) -> None:
        """Test that converting to the same format returns identical bytes."""
        data = bytes(range(16))
        assert convert_raw(data, sample_format, sample_format) == data

    def test_uint8_to_int16(self) -> None:
        """Test unsigned 8-bit centre and extremes map onto the int16 range."""
        data = bytes([0, 128, 255])

        converted = np.frombuffer(
            convert_raw(data, RawSampleFormat.UINT8, RawSampleFormat.INT16), dtype="<i2"
        )

        np.testing.assert_array_equal(converted, [-32768, 0, 32512])

    def test_int16_to_float32(self) -> None:
        """Test int16 samples are scaled by 1/32768."""
        data = np.array([-32768, 0, 16384, 32767], dtype="<i2").tobytes()

        converted = np.frombuffer(
            convert_raw(data, RawSampleFormat.INT16, RawSampleFormat.FLOAT32), dtype="<f4"
        )

        np.testing.assert_allclose(converted, [-1.0, 0.0, 0.5, 32767 / 32768], rtol=0, atol=1e-7)

    def test_float32_to_int16_saturates(self) -> None:
        """Test out-of-range floats saturate instead of wrapping."""
        data = np.array([1.0, -1.0, 0.5, 2.0, -3.0], dtype="<f4").tobytes()

        converted = np.frombuffer(
            convert_raw(data, RawSampleFormat.FLOAT32, RawSampleFormat.INT16), dtype="<i2"
        )

        np.testing.assert_array_equal(converted, [32767, -32768, 16384, 32767, -32768])

    def test_float32_to_uint8(self) -> None:
        """Test float to unsigned 8-bit uses the 128 offset."""
        data = np.array([0.0, -1.0, 1.0, 0.5], dtype="<f4").tobytes()

        converted = np.frombuffer(
            convert_raw(data, RawSampleFormat.FLOAT32, RawSampleFormat.UINT8), dtype="u1"
        )

        np.testing.assert_array_equal(converted, [128, 0, 255, 192])

    def test_int32_to_int16(self) -> None:
        """Test int32 to int16 keeps the top 16 bits."""
        data = np.array([65536, -65536, 2**31 - 1, -(2**31)], dtype="<i4").tobytes()

        converted = np.frombuffer(
            convert_raw(data, RawSampleFormat.INT32, RawSampleFormat.INT16), dtype="<i2"
        )

        np.testing.assert_array_equal(converted, [1, -1, 32767, -32768])

    def test_nan_encodes_as_silence(self) -> None:
        """Test NaN float samples become the integer zero point."""
        data = np.array([np.nan, 0.25], dtype="<f4").tobytes()

        pcm16 = convert_raw(data, RawSampleFormat.FLOAT32, RawSampleFormat.INT16)
        pcm8 = convert_raw(data, RawSampleFormat.FLOAT32, RawSampleFormat.UINT8)

        np.testing.assert_array_equal(np.frombuffer(pcm16, dtype="<i2"), [0, 8192])
        np.testing.assert_array_equal(np.frombuffer(pcm8, dtype="u1"), [128, 160])

    def test_float_output_is_not_clamped(self) -> None:
        """Test integer to float conversion keeps the full range."""
        samples = decode_raw_samples(
            np.array([-(2**31)], dtype="<i4").tobytes(), RawSampleFormat.INT32
        )
        assert samples[0] == -1.0

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            (RawSampleFormat.UINT8, RawSampleFormat.INT16),
            (RawSampleFormat.INT16, RawSampleFormat.INT32),
            (RawSampleFormat.INT32, RawSampleFormat.FLOAT32),
            (RawSampleFormat.FLOAT32, RawSampleFormat.UINT8),
        ],
    )
    def test_output_length(self, source: RawSampleFormat, target: RawSampleFormat) -> None:
        """Test output size is sample count times target width."""
        num_samples = 10
        data = bytes(num_samples * source.sample_width)

        converted = convert_raw(data, source, target)

        assert len(converted) == num_samples * target.sample_width

    def test_empty_buffer(self) -> None:
        """Test an empty buffer converts to an empty buffer."""
        assert convert_raw(b"", RawSampleFormat.INT16, RawSampleFormat.FLOAT32) == b""


class TestRawToFloat32:
    """Tests for decoding raw PCM to the canonical float32 form."""

    def test_dtype_and_values(self) -> None:
        """Test the result is a flat float32 array of normalized samples."""
        data = np.array([0, 16384, -16384], dtype="<i2").tobytes()

        samples = raw_to_float32(data, RawSampleFormat.INT16)

        assert samples.dtype == np.float32
        assert samples.ndim == 1
        np.testing.assert_array_equal(samples, [0.0, 0.5, -0.5])

    def test_float32_passthrough(self) -> None:
        """Test float32 input is returned as-is, including values beyond 1.0."""
        values = np.array([1.5, -2.0, 0.125], dtype="<f4")

        samples = raw_to_float32(values.tobytes(), RawSampleFormat.FLOAT32)

        np.testing.assert_array_equal(samples, values)


class TestRawConversionProperties:
    """Property-based tests for raw conversion."""

    @given(case=conversion_case())
    @settings(max_examples=200)
    def test_round_trip_within_one_step(
        self, case: tuple[bytes, RawSampleFormat, RawSampleFormat]
    ) -> None:
        """Property: source -> target -> source stays within one step of the coarser format."""
        data, source, target = case

        back = convert_raw(convert_raw(data, source, target), target, source)

        original = decode_raw_samples(data, source)
        restored = decode_raw_samples(back, source)
        tolerance = max(QUANTUM[source], QUANTUM[target]) + 1e-9
        assert np.max(np.abs(original - restored)) <= tolerance

    @given(case=conversion_case())
    @settings(max_examples=100)
    def test_sample_count_preserved(
        self, case: tuple[bytes, RawSampleFormat, RawSampleFormat]
    ) -> None:
        """Property: conversion never changes the number of samples."""
        data, source, target = case

        converted = convert_raw(data, source, target)

        assert len(converted) // target.sample_width == len(data) // source.sample_width

    @given(data=raw_samples(RawSampleFormat.FLOAT32))
    @settings(max_examples=50)
    def test_encode_saturates_at_extremes(self, data: bytes) -> None:
        """Property: samples at or beyond full scale encode to the dtype limits."""
        loud = decode_raw_samples(data, RawSampleFormat.FLOAT32) * 4.0

        encoded = np.frombuffer(encode_raw_samples(loud, RawSampleFormat.INT16), dtype="<i2")

        assert np.all(encoded[loud >= 1.0] == 32767)
        assert np.all(encoded[loud <= -1.0] == -32768)
