"""WAV codec adapter.

Decoding repairs placeholder RIFF/data sizes before handing the stream to
libsndfile. Encoding always writes 32-bit IEEE float WAV, so `quality` is
ignored.
"""

import io

from scipy.io import wavfile

from audioimport.format.riff import RIFF_ID, fix_wav_sizes, is_wave
from audioimport.transcoders.base import CodecAdapter, read_with_soundfile
from audioimport.types import AudioFormat, DecodedAudio, EncodedAudio

# libsndfile reports extensible and 64-bit WAV under their own names
SOUNDFILE_FORMATS = ("WAV", "WAVEX", "RF64")


def check_format(data: bytes) -> bool:
    return is_wave(data)


def decode(encoded: EncodedAudio) -> DecodedAudio:
    data = encoded.data
    if data[:4] == RIFF_ID:
        data = fix_wav_sizes(data)
    return read_with_soundfile(data, SOUNDFILE_FORMATS)


def encode(decoded: DecodedAudio, quality: int) -> EncodedAudio:
    buffer = io.BytesIO()
    wavfile.write(buffer, decoded.sample_rate, decoded.as_frames())
    return EncodedAudio(data=buffer.getvalue(), audio_format=AudioFormat.WAV)


ADAPTER = CodecAdapter(
    audio_format=AudioFormat.WAV,
    check_format=check_format,
    decode=decode,
    encode=encode,
)
