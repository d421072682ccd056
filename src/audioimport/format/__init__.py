"""Byte-level audio format helpers.

- raw: conversion between headerless PCM sample encodings
- riff: RIFF/WAVE header inspection and size repair
"""

from audioimport.format.raw import (
    convert_raw,
    decode_raw_samples,
    encode_raw_samples,
    raw_to_float32,
)
from audioimport.format.riff import RiffError, fix_wav_sizes, is_wave

__all__ = [
    # Raw PCM
    "convert_raw",
    "decode_raw_samples",
    "encode_raw_samples",
    "raw_to_float32",
    # RIFF
    "RiffError",
    "fix_wav_sizes",
    "is_wave",
]
