"""FLAC codec adapter (decode only)."""

from audioimport.transcoders.base import CodecAdapter, read_with_soundfile
from audioimport.types import AudioFormat, DecodedAudio, EncodedAudio

FLAC_MARKER = b"fLaC"
SOUNDFILE_FORMATS = ("FLAC",)


def check_format(data: bytes) -> bool:
    return data[:4] == FLAC_MARKER


def decode(encoded: EncodedAudio) -> DecodedAudio:
    return read_with_soundfile(encoded.data, SOUNDFILE_FORMATS)


ADAPTER = CodecAdapter(
    audio_format=AudioFormat.FLAC,
    check_format=check_format,
    decode=decode,
)
