"""Caller-facing import/export entry points.

Every entry point returns immediately with a Future for the background run.
Progress (0-100) and the single terminal TranscodingResult are delivered to
the importer's own subscribers plus any per-call subscribers, on the
pipeline's delivery context, for as long as the importer is alive.

Example:
    >>> importer = RuntimeAudioImporter()
    >>> importer.on_result.append(lambda result: print(result.status))
    >>> future = importer.import_from_file("speech.ogg")
    >>> future.result()
    >>> importer.pipeline.delivery.run_pending()  # doctest: +SKIP
    TranscodingStatus.SUCCESS
"""

import functools
import logging
from concurrent.futures import Future
from pathlib import Path

from audioimport.detect import resolve_format
from audioimport.dispatch import TranscodingDispatcher
from audioimport.errors import ConstructionError, DecodeError
from audioimport.format.raw import convert_raw, raw_to_float32
from audioimport.pipeline import (
    PipelineRun,
    ProgressCallback,
    ResultCallback,
    Stage,
    TranscodingPipeline,
)
from audioimport.storage import read_all_bytes, write_all_bytes
from audioimport.types import (
    AudioFormat,
    DecodedAudio,
    EncodedAudio,
    RawSampleFormat,
)

logger = logging.getLogger(__name__)


class RuntimeAudioImporter:
    """Import audio into DecodedAudio and export it back to encoded formats.

    Args:
        pipeline: Worker pool and delivery context to run on. A new pipeline
            is created when omitted.
    """

    def __init__(self, pipeline: TranscodingPipeline | None = None) -> None:
        self.pipeline = pipeline or TranscodingPipeline()
        self.on_progress: list[ProgressCallback] = []
        self.on_result: list[ResultCallback] = []

    @property
    def dispatcher(self) -> TranscodingDispatcher:
        return self.pipeline.dispatcher

    def import_from_file(
        self,
        path: Path | str,
        format_hint: AudioFormat = AudioFormat.AUTO,
        *,
        on_progress: ProgressCallback | None = None,
        on_result: ResultCallback | None = None,
    ) -> "Future[None]":
        """Import an encoded audio file.

        With an AUTO hint the file extension is tried first, then content
        sniffing. Delivers DecodedAudio.
        """
        job = functools.partial(_import_file, self.dispatcher, Path(path), format_hint)
        return self._submit(f"import of '{path}'", job, on_progress, on_result)

    def import_from_buffer(
        self,
        data: bytes,
        format_hint: AudioFormat = AudioFormat.AUTO,
        *,
        on_progress: ProgressCallback | None = None,
        on_result: ResultCallback | None = None,
    ) -> "Future[None]":
        """Import encoded audio held in memory. Delivers DecodedAudio."""
        job = functools.partial(_import_buffer, self.dispatcher, bytes(data), format_hint)
        return self._submit("buffer import", job, on_progress, on_result)

    def import_from_encoded(
        self,
        encoded: EncodedAudio,
        *,
        on_progress: ProgressCallback | None = None,
        on_result: ResultCallback | None = None,
    ) -> "Future[None]":
        """Import a pre-imported asset: encoded bytes with a stored format."""
        return self.import_from_buffer(
            encoded.data,
            encoded.audio_format,
            on_progress=on_progress,
            on_result=on_result,
        )

    def import_from_raw_buffer(
        self,
        data: bytes,
        raw_format: RawSampleFormat,
        sample_rate: int,
        num_channels: int,
        *,
        on_progress: ProgressCallback | None = None,
        on_result: ResultCallback | None = None,
    ) -> "Future[None]":
        """Import headerless interleaved PCM. Delivers DecodedAudio."""
        job = functools.partial(
            _import_raw_buffer, bytes(data), raw_format, sample_rate, num_channels
        )
        return self._submit(f"{raw_format.value} RAW import", job, on_progress, on_result)

    def import_from_raw_file(
        self,
        path: Path | str,
        raw_format: RawSampleFormat,
        sample_rate: int,
        num_channels: int,
        *,
        on_progress: ProgressCallback | None = None,
        on_result: ResultCallback | None = None,
    ) -> "Future[None]":
        """Import a headerless interleaved PCM file. Delivers DecodedAudio."""
        job = functools.partial(
            _import_raw_file, Path(path), raw_format, sample_rate, num_channels
        )
        return self._submit(f"RAW import of '{path}'", job, on_progress, on_result)

    def export_to_buffer(
        self,
        audio: DecodedAudio,
        audio_format: AudioFormat,
        quality: int,
        *,
        on_progress: ProgressCallback | None = None,
        on_result: ResultCallback | None = None,
    ) -> "Future[None]":
        """Encode audio in memory. Delivers EncodedAudio."""
        job = functools.partial(_export_buffer, self.dispatcher, audio, audio_format, quality)
        return self._submit(f"{audio_format.display_name} export", job, on_progress, on_result)

    def export_to_file(
        self,
        audio: DecodedAudio,
        path: Path | str,
        audio_format: AudioFormat,
        quality: int,
        *,
        on_progress: ProgressCallback | None = None,
        on_result: ResultCallback | None = None,
    ) -> "Future[None]":
        """Encode audio and write it to a file. Delivers EncodedAudio."""
        job = functools.partial(
            _export_file, self.dispatcher, audio, Path(path), audio_format, quality
        )
        return self._submit(f"export to '{path}'", job, on_progress, on_result)

    def convert_raw_buffer(
        self,
        data: bytes,
        from_format: RawSampleFormat,
        to_format: RawSampleFormat,
        *,
        on_progress: ProgressCallback | None = None,
        on_result: ResultCallback | None = None,
    ) -> "Future[None]":
        """Convert headerless PCM between sample formats. Delivers bytes."""
        job = functools.partial(_convert_raw_buffer, bytes(data), from_format, to_format)
        name = f"RAW conversion {from_format.value} -> {to_format.value}"
        return self._submit(name, job, on_progress, on_result)

    def convert_raw_file(
        self,
        source: Path | str,
        from_format: RawSampleFormat,
        destination: Path | str,
        to_format: RawSampleFormat,
        *,
        on_progress: ProgressCallback | None = None,
        on_result: ResultCallback | None = None,
    ) -> "Future[None]":
        """Convert a headerless PCM file and write the result. Delivers bytes."""
        job = functools.partial(
            _convert_raw_file, Path(source), from_format, Path(destination), to_format
        )
        name = f"RAW conversion of '{source}' to '{destination}'"
        return self._submit(name, job, on_progress, on_result)

    def _submit(
        self,
        name: str,
        job: functools.partial,
        on_progress: ProgressCallback | None,
        on_result: ResultCallback | None,
    ) -> "Future[None]":
        return self.pipeline.submit(
            self,
            name,
            job,
            on_progress=[on_progress] if on_progress else None,
            on_result=[on_result] if on_result else None,
        )


# Stage functions. They run on worker threads and must not hold a reference
# to the importer, so that its lifetime alone gates delivery.


def _import_file(
    dispatcher: TranscodingDispatcher,
    path: Path,
    format_hint: AudioFormat,
    run: PipelineRun,
) -> DecodedAudio:
    data = read_all_bytes(path)
    run.advance(Stage.LOADED, 5)
    return _decode_loaded(dispatcher, data, format_hint, path, run)


def _import_buffer(
    dispatcher: TranscodingDispatcher,
    data: bytes,
    format_hint: AudioFormat,
    run: PipelineRun,
) -> DecodedAudio:
    run.advance(Stage.LOADED, 5)
    return _decode_loaded(dispatcher, data, format_hint, None, run)


def _decode_loaded(
    dispatcher: TranscodingDispatcher,
    data: bytes,
    format_hint: AudioFormat,
    path: Path | None,
    run: PipelineRun,
) -> DecodedAudio:
    audio_format = resolve_format(data, format_hint, name=path, registry=dispatcher.registry)
    run.advance(Stage.FORMAT_RESOLVED, 10)

    audio = dispatcher.decode(EncodedAudio(data=data, audio_format=audio_format))
    run.advance(Stage.DECODED, 65)

    return _finish_import(audio, run)


def _import_raw_file(
    path: Path,
    raw_format: RawSampleFormat,
    sample_rate: int,
    num_channels: int,
    run: PipelineRun,
) -> DecodedAudio:
    run.advance(Stage.REQUESTED, 5)
    data = read_all_bytes(path)
    run.advance(Stage.LOADED, 35)
    return _decode_raw(data, raw_format, sample_rate, num_channels, run)


def _import_raw_buffer(
    data: bytes,
    raw_format: RawSampleFormat,
    sample_rate: int,
    num_channels: int,
    run: PipelineRun,
) -> DecodedAudio:
    run.advance(Stage.LOADED, 35)
    return _decode_raw(data, raw_format, sample_rate, num_channels, run)


def _decode_raw(
    data: bytes,
    raw_format: RawSampleFormat,
    sample_rate: int,
    num_channels: int,
    run: PipelineRun,
) -> DecodedAudio:
    if not data:
        raise DecodeError("RAW buffer contains no PCM data")
    if len(data) % raw_format.sample_width != 0:
        raise ConstructionError(
            f"RAW buffer of {len(data)} bytes is not a whole number of "
            f"{raw_format.sample_width}-byte {raw_format.value} samples"
        )
    run.advance(Stage.FORMAT_RESOLVED, 40)

    audio = DecodedAudio.from_interleaved(
        raw_to_float32(data, raw_format), sample_rate, num_channels
    )
    run.advance(Stage.DECODED, 50)

    return _finish_import(audio, run)


def _finish_import(audio: DecodedAudio, run: PipelineRun) -> DecodedAudio:
    if audio.sound_wave_info.is_ambisonics:
        logger.debug("%s: four channels, treating as ambisonics", run.request.name)
    logger.info(
        "The audio data was successfully imported. Information about imported data:\n%s", audio
    )
    run.advance(Stage.IMPORTED, 95)
    return audio


def _export_buffer(
    dispatcher: TranscodingDispatcher,
    audio: DecodedAudio,
    audio_format: AudioFormat,
    quality: int,
    run: PipelineRun,
) -> EncodedAudio:
    run.advance(Stage.REQUESTED, 5)
    encoded = dispatcher.encode(audio, audio_format, quality)
    run.advance(Stage.ENCODED, 90)
    return encoded


def _export_file(
    dispatcher: TranscodingDispatcher,
    audio: DecodedAudio,
    path: Path,
    audio_format: AudioFormat,
    quality: int,
    run: PipelineRun,
) -> EncodedAudio:
    encoded = _export_buffer(dispatcher, audio, audio_format, quality, run)
    write_all_bytes(path, encoded.data)
    run.advance(Stage.WRITTEN, 95)
    return encoded


def _convert_raw_buffer(
    data: bytes,
    from_format: RawSampleFormat,
    to_format: RawSampleFormat,
    run: PipelineRun,
) -> bytes:
    if len(data) % from_format.sample_width != 0:
        raise DecodeError(
            f"RAW buffer of {len(data)} bytes is not a whole number of "
            f"{from_format.value} samples"
        )
    converted = convert_raw(data, from_format, to_format)
    run.advance(Stage.CONVERTED, 90)
    return converted


def _convert_raw_file(
    source: Path,
    from_format: RawSampleFormat,
    destination: Path,
    to_format: RawSampleFormat,
    run: PipelineRun,
) -> bytes:
    data = read_all_bytes(source)
    run.advance(Stage.LOADED, 10)
    converted = _convert_raw_buffer(data, from_format, to_format, run)
    write_all_bytes(destination, converted)
    run.advance(Stage.WRITTEN, 95)
    return converted
