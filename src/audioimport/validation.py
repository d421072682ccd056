"""Validation of decoded audio against the canonical PCM layout.

Codec adapters must return audio whose frame count, channel count and buffer
length agree, and whose duration is derived from frame count and sample
rate. These checks run on every decode before the audio leaves the
dispatcher.
"""

import math
from dataclasses import dataclass

import numpy as np

from audioimport.types import DecodedAudio
from audioimport.utils import EPSILON


@dataclass
class ValidationResult:
    """Result of validation with optional warnings."""

    valid: bool
    errors: list[str]
    warnings: list[str]

    @classmethod
    def success(cls, warnings: list[str] | None = None) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(valid=True, errors=[], warnings=warnings or [])

    @classmethod
    def failure(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        """Create a failed validation result."""
        return cls(valid=False, errors=errors, warnings=warnings or [])


def validate_decoded_audio(audio: DecodedAudio) -> ValidationResult:
    """Validate decoded audio for structural correctness.

    Errors:
    - num_channels > 0 and sample_rate > 0
    - pcm_data is a flat float32 array
    - num_frames * num_channels * 4 == PCM byte length
    - duration == num_frames / sample_rate

    Warnings:
    - samples are non-finite or exceed the [-1, 1] range

    Args:
        audio: The decoded audio to validate.

    Returns:
        ValidationResult with errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    info = audio.sound_wave_info
    pcm = audio.pcm_info.pcm_data

    if info.num_channels <= 0:
        errors.append(f"num_channels must be > 0, got {info.num_channels}")
    if info.sample_rate <= 0:
        errors.append(f"sample_rate must be > 0, got {info.sample_rate}")
    if not isinstance(pcm, np.ndarray) or pcm.dtype != np.float32 or pcm.ndim != 1:
        errors.append("pcm_data must be a flat float32 array")

    # Layout checks need a sane header and buffer
    if errors:
        return ValidationResult.failure(errors, warnings)

    num_frames = audio.pcm_info.num_frames
    expected_bytes = num_frames * info.num_channels * 4
    if num_frames < 0 or expected_bytes != pcm.nbytes:
        errors.append(
            f"{num_frames} frames * {info.num_channels} channels * 4 bytes "
            f"!= {pcm.nbytes} bytes of PCM data"
        )

    expected_duration = num_frames / info.sample_rate
    if info.duration < 0 or not math.isclose(
        info.duration, expected_duration, rel_tol=1e-6, abs_tol=EPSILON
    ):
        errors.append(f"duration {info.duration} does not match {expected_duration} (frames / rate)")

    if pcm.size:
        if not np.all(np.isfinite(pcm)):
            nan_count = int(np.sum(np.isnan(pcm)))
            inf_count = int(np.sum(np.isinf(pcm)))
            warnings.append(f"PCM data contains non-finite values ({nan_count} NaN, {inf_count} Inf)")
        elif np.max(np.abs(pcm)) > 1.0:
            max_abs = float(np.max(np.abs(pcm)))
            warnings.append(f"samples exceed [-1, 1] range, max |sample| = {max_abs:.4f}")

    if errors:
        return ValidationResult.failure(errors, warnings)
    return ValidationResult.success(warnings)
