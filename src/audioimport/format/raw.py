"""Raw (headerless) PCM sample conversion.

Converts between unsigned 8-bit, signed 16-bit, signed 32-bit and 32-bit
float little-endian samples. Integer formats are linearly rescaled to and
from the normalized [-1, 1] float range:

- uint8:   (value - 128) / 128
- int16:   value / 32768
- int32:   value / 2^31
- float32: unchanged (no clamping)

Every conversion goes through the normalized form, so any pair of formats is
reachable with one decode and one encode step.
"""

import numpy as np
from numpy.typing import NDArray

from audioimport.types import RawSampleFormat

# Divisor mapping each integer format onto [-1, 1]
_INT_SCALES = {
    RawSampleFormat.UINT8: 128.0,
    RawSampleFormat.INT16: 32768.0,
    RawSampleFormat.INT32: 2147483648.0,  # 2^31
}

# Zero point of each integer format
_INT_OFFSETS = {
    RawSampleFormat.UINT8: 128.0,
    RawSampleFormat.INT16: 0.0,
    RawSampleFormat.INT32: 0.0,
}


def convert_raw(data: bytes, source: RawSampleFormat, target: RawSampleFormat) -> bytes:
    """Convert raw PCM bytes from one sample format to another.

    Args:
        data: Raw samples in the source format. Its length must be a multiple
            of the source sample width.
        source: Sample format of `data`.
        target: Sample format to produce.

    Returns:
        Raw samples in the target format. Identity conversions return the
        input bytes unchanged.

    Example:
        >>> pcm16 = convert_raw(bytes([0, 128, 255]), RawSampleFormat.UINT8, RawSampleFormat.INT16)
        >>> len(pcm16)
        6
    """
    if source is target:
        return bytes(data)

    normalized = decode_raw_samples(data, source)
    return encode_raw_samples(normalized, target)


def decode_raw_samples(data: bytes, sample_format: RawSampleFormat) -> NDArray[np.float64]:
    """Decode raw PCM bytes to normalized float64 samples."""
    samples = np.frombuffer(data, dtype=sample_format.dtype)

    if sample_format is RawSampleFormat.FLOAT32:
        return samples.astype(np.float64)

    scale = _INT_SCALES[sample_format]
    offset = _INT_OFFSETS[sample_format]
    return (samples.astype(np.float64) - offset) / scale


def encode_raw_samples(samples: NDArray[np.floating], sample_format: RawSampleFormat) -> bytes:
    """Encode normalized samples as raw PCM bytes.

    Integer targets are rounded to the nearest step and saturated at the
    format's range. Non-finite samples encode as silence.
    """
    if sample_format is RawSampleFormat.FLOAT32:
        return np.asarray(samples).astype(sample_format.dtype).tobytes()

    scale = _INT_SCALES[sample_format]
    offset = _INT_OFFSETS[sample_format]
    info = np.iinfo(sample_format.dtype)

    # Handle NaN/inf values by replacing with 0
    clean = np.where(np.isfinite(samples), samples, 0.0)
    scaled = np.rint(clean * scale + offset)
    clipped = np.clip(scaled, info.min, info.max)
    return clipped.astype(sample_format.dtype).tobytes()


def raw_to_float32(data: bytes, sample_format: RawSampleFormat) -> NDArray[np.float32]:
    """Decode raw PCM bytes straight to the canonical float32 representation."""
    if sample_format is RawSampleFormat.FLOAT32:
        return np.frombuffer(data, dtype=sample_format.dtype).astype(np.float32)
    return decode_raw_samples(data, sample_format).astype(np.float32)
