"""Routing of encoded/decoded audio to codec adapters.

The dispatcher is stateless: it resolves a format, looks up the adapter in a
read-only registry and invokes it. Whatever an adapter raises is re-tagged
here as DecodeError/EncodeError with the resolved format attached, so raw
codec exceptions never escape.
"""

import logging

from audioimport.detect import detect_by_content
from audioimport.errors import (
    DecodeError,
    EncodeError,
    InvalidFormatError,
    UnsupportedOperationError,
)
from audioimport.transcoders import DEFAULT_REGISTRY, CodecAdapter, CodecRegistry
from audioimport.types import AudioFormat, DecodedAudio, EncodedAudio
from audioimport.validation import validate_decoded_audio

logger = logging.getLogger(__name__)

MIN_QUALITY = 0
MAX_QUALITY = 255


class TranscodingDispatcher:
    """Decode and encode audio through the registered codec adapters."""

    def __init__(self, registry: CodecRegistry | None = None) -> None:
        self.registry = registry if registry is not None else DEFAULT_REGISTRY

    def detect(self, data: bytes) -> AudioFormat:
        return detect_by_content(data, self.registry)

    def decode(self, encoded: EncodedAudio) -> DecodedAudio:
        """Decode audio to the canonical float32 representation.

        Args:
            encoded: Encoded bytes; AUTO format is detected from content.

        Returns:
            Validated DecodedAudio.

        Raises:
            InvalidFormatError: If the format cannot be detected or has no
                registered adapter.
            DecodeError: If the adapter fails or returns malformed PCM.
        """
        audio_format = encoded.audio_format
        if audio_format is AudioFormat.AUTO:
            audio_format = self.detect(encoded.data)

        adapter = self._adapter_for(audio_format, "decoding")

        try:
            decoded = adapter.decode(encoded)
        except Exception as e:
            raise DecodeError(
                f"Something went wrong while decoding {audio_format.display_name} audio data: {e}",
                audio_format=audio_format,
            ) from e

        if not isinstance(decoded, DecodedAudio):
            raise DecodeError(
                f"{audio_format.display_name} decoder returned {type(decoded).__name__}",
                audio_format=audio_format,
            )

        result = validate_decoded_audio(decoded)
        if not result.valid:
            raise DecodeError(
                f"{audio_format.display_name} decoder produced malformed PCM: {result.errors}",
                audio_format=audio_format,
            )
        for warning in result.warnings:
            logger.warning("%s decode: %s", audio_format.display_name, warning)

        return decoded

    def encode(self, decoded: DecodedAudio, audio_format: AudioFormat, quality: int) -> EncodedAudio:
        """Encode canonical audio to a target format.

        Args:
            decoded: The audio to encode.
            audio_format: Target format. Must be explicit (not AUTO/INVALID).
            quality: Codec-specific quality hint, 0-255.

        Returns:
            EncodedAudio tagged with the target format.

        Raises:
            InvalidFormatError: If the format is AUTO/INVALID or unregistered.
            UnsupportedOperationError: If the format's adapter cannot encode.
            EncodeError: If the quality is out of range or the adapter fails.
        """
        if not audio_format.is_concrete:
            raise InvalidFormatError(
                f"Undefined audio data format for encoding: {audio_format.name}",
                audio_format=audio_format,
            )

        adapter = self._adapter_for(audio_format, "encoding")
        if adapter.encode is None:
            raise UnsupportedOperationError(
                f"{audio_format.display_name} format is not currently supported for encoding",
                audio_format=audio_format,
            )

        if not MIN_QUALITY <= quality <= MAX_QUALITY:
            raise EncodeError(
                f"Quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {quality}",
                audio_format=audio_format,
            )

        try:
            encoded = adapter.encode(decoded, quality)
        except Exception as e:
            raise EncodeError(
                f"Something went wrong while encoding {audio_format.display_name} audio data: {e}",
                audio_format=audio_format,
            ) from e

        if encoded.audio_format is not audio_format:
            encoded = EncodedAudio(data=encoded.data, audio_format=audio_format)
        return encoded

    def _adapter_for(self, audio_format: AudioFormat, operation: str) -> CodecAdapter:
        adapter = self.registry.get(audio_format)
        if adapter is None:
            raise InvalidFormatError(
                f"Undefined audio data format for {operation}: {audio_format.name}",
                audio_format=audio_format,
            )
        return adapter
