"""Transcoding status tags and the exceptions that carry them.

Every failure raised inside the pipeline is a TranscodingError subclass whose
`status` is the terminal tag delivered to subscribers. Codec adapters may
raise anything; the dispatcher re-tags those errors before they leave it.
"""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from audioimport.types import AudioFormat


class TranscodingStatus(Enum):
    """Terminal outcome of a pipeline run."""

    SUCCESS = "success"
    SOURCE_NOT_FOUND = "source_not_found"
    READ_FAILURE = "read_failure"
    INVALID_FORMAT = "invalid_format"
    DECODE_FAILURE = "decode_failure"
    ENCODE_FAILURE = "encode_failure"
    UNSUPPORTED_OPERATION = "unsupported_operation"
    WRITE_FAILURE = "write_failure"
    CONSTRUCTION_FAILURE = "construction_failure"

    @property
    def succeeded(self) -> bool:
        return self is TranscodingStatus.SUCCESS

    @property
    def is_encode_failure(self) -> bool:
        """Whether the run failed while producing encoded data.

        UNSUPPORTED_OPERATION counts as an encode failure: it is reported
        when the target codec has no encoder at all.
        """
        return self in (TranscodingStatus.ENCODE_FAILURE, TranscodingStatus.UNSUPPORTED_OPERATION)


class TranscodingError(Exception):
    """Base error for all pipeline failures."""

    status: TranscodingStatus = TranscodingStatus.CONSTRUCTION_FAILURE

    def __init__(
        self,
        message: str,
        *,
        audio_format: "AudioFormat | None" = None,
        stage: str | None = None,
    ) -> None:
        self.audio_format = audio_format
        self.stage = stage
        super().__init__(message)


class SourceNotFoundError(TranscodingError):
    """The source file does not exist."""

    status = TranscodingStatus.SOURCE_NOT_FOUND


class ReadError(TranscodingError):
    """The source exists but could not be read."""

    status = TranscodingStatus.READ_FAILURE


class InvalidFormatError(TranscodingError):
    """The format could not be detected or is not registered."""

    status = TranscodingStatus.INVALID_FORMAT


class DecodeError(TranscodingError):
    """A codec failed to decode, or produced malformed PCM."""

    status = TranscodingStatus.DECODE_FAILURE


class EncodeError(TranscodingError):
    """A codec failed to encode."""

    status = TranscodingStatus.ENCODE_FAILURE


class UnsupportedOperationError(EncodeError):
    """The target codec has no encoder."""

    status = TranscodingStatus.UNSUPPORTED_OPERATION


class WriteError(TranscodingError):
    """Encoded data could not be written to its destination."""

    status = TranscodingStatus.WRITE_FAILURE


class ConstructionError(TranscodingError):
    """The canonical decoded structure could not be built."""

    status = TranscodingStatus.CONSTRUCTION_FAILURE
