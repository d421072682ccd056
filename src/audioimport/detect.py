"""Audio format detection.

Two detectors, both total (they return AudioFormat.INVALID instead of raising):

- detect_by_extension: advisory, from a file name
- detect_by_content: authoritative, runs each registered codec's sniffing
  predicate in registration order
"""

import logging
from pathlib import Path

from audioimport.transcoders import DEFAULT_REGISTRY, CodecRegistry
from audioimport.types import AudioFormat

logger = logging.getLogger(__name__)

EXTENSION_FORMATS = {
    "mp3": AudioFormat.MP3,
    "wav": AudioFormat.WAV,
    "wave": AudioFormat.WAV,
    "flac": AudioFormat.FLAC,
    "ogg": AudioFormat.OGG_VORBIS,
    "oga": AudioFormat.OGG_VORBIS,
    "sb0": AudioFormat.OGG_VORBIS,
}


def detect_by_extension(name: Path | str) -> AudioFormat:
    """Detect the audio format from a file name's extension.

    Args:
        name: File name or path.

    Returns:
        The matching format, or INVALID if the extension is not recognized.
    """
    extension = Path(name).suffix.lstrip(".").lower()
    audio_format = EXTENSION_FORMATS.get(extension, AudioFormat.INVALID)
    if audio_format is AudioFormat.INVALID:
        logger.warning("Unable to determine audio format of '%s' by name", name)
    return audio_format


def detect_by_content(data: bytes, registry: CodecRegistry | None = None) -> AudioFormat:
    """Detect the audio format by sniffing the data's headers.

    Args:
        data: The encoded audio bytes.
        registry: Adapters to try (default: all supported codecs).

    Returns:
        The first format whose predicate accepts the data, or INVALID.
    """
    registry = registry if registry is not None else DEFAULT_REGISTRY
    for audio_format, adapter in registry.items():
        if adapter.check_format(data):
            return audio_format

    logger.error("Unable to determine audio data format")
    return AudioFormat.INVALID


def resolve_format(
    data: bytes,
    hint: AudioFormat = AudioFormat.AUTO,
    name: Path | str | None = None,
    registry: CodecRegistry | None = None,
) -> AudioFormat:
    """Resolve the format to decode `data` with.

    An explicit hint is used as given. AUTO tries the file name's extension
    first when a name is available, keeping it only if that codec accepts
    the content. An INVALID hint, an unrecognized extension, or an extension
    the content contradicts fall back to content sniffing, which runs at
    most once.

    Returns:
        The resolved format, INVALID if nothing matched.
    """
    registry = registry if registry is not None else DEFAULT_REGISTRY
    audio_format = hint

    if audio_format is AudioFormat.AUTO and name is not None:
        audio_format = detect_by_extension(name)
        adapter = registry.get(audio_format)
        if adapter is not None and not adapter.check_format(data):
            logger.warning(
                "'%s' does not contain %s data, detecting from content",
                name,
                audio_format.display_name,
            )
            audio_format = AudioFormat.AUTO

    if audio_format is AudioFormat.INVALID:
        audio_format = AudioFormat.AUTO

    if audio_format is AudioFormat.AUTO:
        audio_format = detect_by_content(data, registry)

    return audio_format
