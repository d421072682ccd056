"""Ogg Vorbis codec adapter."""

from audioimport.transcoders.base import (
    CodecAdapter,
    quality_to_compression_level,
    read_with_soundfile,
    write_with_soundfile,
)
from audioimport.types import AudioFormat, DecodedAudio, EncodedAudio

OGG_CAPTURE_PATTERN = b"OggS"
VORBIS_ID_HEADER = b"\x01vorbis"
SOUNDFILE_FORMATS = ("OGG",)

# Fixed part of an Ogg page header; byte 26 holds the segment count
OGG_PAGE_HEADER_SIZE = 27


def check_format(data: bytes) -> bool:
    """Check for an Ogg page whose first packet is a Vorbis identification header."""
    if len(data) < OGG_PAGE_HEADER_SIZE or data[:4] != OGG_CAPTURE_PATTERN:
        return False

    packet_start = OGG_PAGE_HEADER_SIZE + data[26]
    return data[packet_start : packet_start + len(VORBIS_ID_HEADER)] == VORBIS_ID_HEADER


def decode(encoded: EncodedAudio) -> DecodedAudio:
    return read_with_soundfile(encoded.data, SOUNDFILE_FORMATS)


def encode(decoded: DecodedAudio, quality: int) -> EncodedAudio:
    """Encode as Ogg Vorbis; `quality` 0-255 sets the VBR quality."""
    data = write_with_soundfile(
        decoded,
        format_name="OGG",
        subtype="VORBIS",
        compression_level=quality_to_compression_level(quality),
    )
    return EncodedAudio(data=data, audio_format=AudioFormat.OGG_VORBIS)


ADAPTER = CodecAdapter(
    audio_format=AudioFormat.OGG_VORBIS,
    check_format=check_format,
    decode=decode,
    encode=encode,
)
