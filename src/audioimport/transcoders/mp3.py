"""MP3 codec adapter (decode only)."""

from audioimport.transcoders.base import CodecAdapter, read_with_soundfile
from audioimport.types import AudioFormat, DecodedAudio, EncodedAudio

ID3_TAG = b"ID3"
SOUNDFILE_FORMATS = ("MP3", "MPEG")


def check_format(data: bytes) -> bool:
    """Check for an ID3v2 tag or an MPEG audio frame header.

    A frame header starts with an 11-bit sync word and must not use the
    reserved version, layer, bitrate or sample rate codes.
    """
    if data[:3] == ID3_TAG:
        return True
    if len(data) < 4 or data[0] != 0xFF or (data[1] & 0xE0) != 0xE0:
        return False

    version = (data[1] >> 3) & 0x03
    layer = (data[1] >> 1) & 0x03
    bitrate_index = (data[2] >> 4) & 0x0F
    sample_rate_index = (data[2] >> 2) & 0x03
    return version != 0x01 and layer != 0x00 and bitrate_index != 0x0F and sample_rate_index != 0x03


def decode(encoded: EncodedAudio) -> DecodedAudio:
    return read_with_soundfile(encoded.data, SOUNDFILE_FORMATS)


ADAPTER = CodecAdapter(
    audio_format=AudioFormat.MP3,
    check_format=check_format,
    decode=decode,
)
