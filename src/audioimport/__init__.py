"""audioimport - Runtime audio import and transcoding.

This package decodes MP3, WAV, FLAC and Ogg Vorbis audio (or headerless PCM)
into a canonical interleaved float32 representation and encodes it back to
WAV or Ogg Vorbis, off the caller's thread.

Pipeline
--------
Every import/export call returns immediately. Work runs on a background
worker pool; progress (0-100) and exactly one terminal TranscodingResult are
delivered on the pipeline's delivery context, and only while the importer
that started the run is still alive.

Example Usage
-------------
>>> from audioimport import AudioFormat, QueueDelivery, RuntimeAudioImporter, TranscodingPipeline
>>>
>>> delivery = QueueDelivery()
>>> importer = RuntimeAudioImporter(TranscodingPipeline(delivery=delivery))
>>> importer.on_progress.append(lambda percent: print(f"{percent}%"))
>>>
>>> # Import a file; the format is detected from its name and content
>>> future = importer.import_from_file("speech.ogg", on_result=print)
>>> future.result()
>>>
>>> # Run the queued callbacks on this thread
>>> delivery.run_pending()
"""

from audioimport.delivery import DeliveryContext, LoopDelivery, QueueDelivery
from audioimport.detect import detect_by_content, detect_by_extension
from audioimport.dispatch import TranscodingDispatcher
from audioimport.errors import (
    ConstructionError,
    DecodeError,
    EncodeError,
    InvalidFormatError,
    ReadError,
    SourceNotFoundError,
    TranscodingError,
    TranscodingStatus,
    UnsupportedOperationError,
    WriteError,
)
from audioimport.format import convert_raw
from audioimport.importer import RuntimeAudioImporter
from audioimport.pipeline import Stage, TranscodingPipeline
from audioimport.types import (
    AudioFormat,
    DecodedAudio,
    EncodedAudio,
    PCMInfo,
    PipelineConfig,
    RawSampleFormat,
    SoundWaveBasicInfo,
    TranscodingResult,
)

__all__ = [
    # Types
    "AudioFormat",
    "RawSampleFormat",
    "EncodedAudio",
    "DecodedAudio",
    "PCMInfo",
    "SoundWaveBasicInfo",
    "TranscodingResult",
    "PipelineConfig",
    # Status and errors
    "TranscodingStatus",
    "TranscodingError",
    "SourceNotFoundError",
    "ReadError",
    "InvalidFormatError",
    "DecodeError",
    "EncodeError",
    "UnsupportedOperationError",
    "WriteError",
    "ConstructionError",
    # Detection and codecs
    "detect_by_extension",
    "detect_by_content",
    "TranscodingDispatcher",
    "convert_raw",
    # Pipeline
    "Stage",
    "TranscodingPipeline",
    "RuntimeAudioImporter",
    "DeliveryContext",
    "LoopDelivery",
    "QueueDelivery",
]
