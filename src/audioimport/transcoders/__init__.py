"""Codec adapters.

Each supported format is a module exposing `check_format`, `decode` and, for
formats that can be written, `encode`, bundled as a CodecAdapter.

Supported formats (in detection priority order):
- MP3: decode only
- WAV: decode, encode (32-bit float)
- FLAC: decode only
- Ogg Vorbis: decode, encode

Example usage:
    >>> from audioimport.transcoders import DEFAULT_REGISTRY
    >>> from audioimport.types import AudioFormat
    >>> DEFAULT_REGISTRY[AudioFormat.WAV].can_encode
    True
"""

from audioimport.transcoders.base import CodecAdapter
from audioimport.transcoders.registry import DEFAULT_REGISTRY, CodecRegistry

__all__ = [
    "CodecAdapter",
    "CodecRegistry",
    "DEFAULT_REGISTRY",
]
