import sys
from collections.abc import Callable
from concurrent.futures import Future
from pathlib import Path
from typing import Annotated, Any, Literal

from cyclopts import App, Parameter
from rich.console import Console
from rich.table import Table

from audioimport.cli.validators import validate_positive_integer, validate_quality
from audioimport.delivery import QueueDelivery
from audioimport.detect import detect_by_content, detect_by_extension
from audioimport.errors import TranscodingError
from audioimport.importer import RuntimeAudioImporter
from audioimport.logging_setup import setup_logging
from audioimport.pipeline import TranscodingPipeline
from audioimport.storage import read_all_bytes
from audioimport.types import (
    AudioFormat,
    DecodedAudio,
    PipelineConfig,
    RawSampleFormat,
    TranscodingResult,
)
from audioimport.utils import format_duration

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

app = App(name="audioimport", help="Import, inspect and transcode audio files")
console = Console()


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(message, style="bold red")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(message, style="bold green")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(message, style="bold yellow")


def run_to_completion(
    config: PipelineConfig | None,
    start: Callable[[RuntimeAudioImporter], "Future[None]"],
) -> TranscodingResult[Any]:
    """Start a run, wait for it and deliver its callbacks on this thread."""
    delivery = QueueDelivery()
    results: list[TranscodingResult[Any]] = []

    with TranscodingPipeline(delivery=delivery, config=config) as pipeline:
        importer = RuntimeAudioImporter(pipeline)
        importer.on_result.append(results.append)
        start(importer).result()
        delivery.run_pending()

    return results[0]


def print_failure(action: str, result: TranscodingResult[Any]) -> None:
    print_error(f"{action} failed ({result.status.value}): {result.error}")


def print_audio_info(audio: DecodedAudio) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Property", justify="left")
    table.add_column("Value", justify="right")

    table.add_row("Channels", str(audio.num_channels))
    table.add_row("Sample rate", f"{audio.sample_rate} Hz")
    table.add_row("Duration", f"{format_duration(audio.duration)} ({audio.duration:.3f}s)")
    table.add_row("Frames", str(audio.num_frames))
    table.add_row("PCM size", f"{audio.pcm_info.num_bytes} bytes")
    if audio.sound_wave_info.is_ambisonics:
        table.add_row("Layout", "ambisonics")

    console.print(table)


@app.command
def detect(source: Path) -> int:
    """
    Detect the audio format of a file by its extension and by its content.

    Parameters
    ----------
    source: Path
        The audio file to inspect
    """
    try:
        data = read_all_bytes(source)
    except TranscodingError as e:
        print_error(f"Error reading {source}: {e}")
        return 1

    by_extension = detect_by_extension(source)
    by_content = detect_by_content(data)

    console.print(f"File: {source}")
    console.print(f"  By extension: {by_extension.display_name}")
    console.print(f"  By content: {by_content.display_name}")

    if not by_content.is_concrete:
        print_error("Unrecognized audio data")
        return 1
    if by_extension.is_concrete and by_extension is not by_content:
        print_warning(
            f"Extension suggests {by_extension.display_name} "
            f"but the data is {by_content.display_name}"
        )
    return 0


@app.command
def info(
    source: Path,
    format: AudioFormat = AudioFormat.AUTO,
    *,
    config: Annotated[PipelineConfig | None, Parameter(parse=False)] = None,
) -> int:
    """
    Decode an audio file and show its stream information.

    Parameters
    ----------
    source: Path
        The audio file to decode
    format: AudioFormat
        The format of the file, detected when 'auto'
    """
    result = run_to_completion(config, lambda importer: importer.import_from_file(source, format))
    if not result.succeeded:
        print_failure(f"Import of {source}", result)
        return 1

    console.print(f"File: {source}")
    print_audio_info(result.payload)
    return 0


@app.command
def convert(
    source: Path,
    output: Path,
    to: AudioFormat | None = None,
    quality: Annotated[int | None, Parameter(validator=validate_quality)] = None,
    *,
    config: Annotated[PipelineConfig | None, Parameter(parse=False)] = None,
) -> int:
    """
    Transcode an audio file to another format.

    Parameters
    ----------
    source: Path
        The audio file to convert
    output: Path
        The destination file
    to: AudioFormat | None
        The target format (default: from the output file's extension)
    quality: int | None
        Encoder quality hint between 0 and 255
    """
    config = config or PipelineConfig()
    target = to if to is not None else detect_by_extension(output)
    if not target.is_concrete:
        print_error(f"Cannot determine the target format of {output}, use --to")
        return 1
    if quality is None:
        quality = config.default_quality

    imported = run_to_completion(config, lambda importer: importer.import_from_file(source))
    if not imported.succeeded:
        print_failure(f"Import of {source}", imported)
        return 1

    exported = run_to_completion(
        config,
        lambda importer: importer.export_to_file(imported.payload, output, target, quality),
    )
    if not exported.succeeded:
        print_failure(f"{target.display_name} export", exported)
        return 1

    print_success(f"Converted {source} -> {output} ({target.display_name})")
    console.print(f"  Duration: {format_duration(imported.payload.duration)}")
    console.print(f"  Size: {len(exported.payload)} bytes")
    return 0


@app.command
def raw(
    source: Path,
    output: Path,
    from_format: RawSampleFormat,
    to_format: RawSampleFormat,
    *,
    config: Annotated[PipelineConfig | None, Parameter(parse=False)] = None,
) -> int:
    """
    Convert headerless PCM between sample formats.

    Parameters
    ----------
    source: Path
        The raw PCM file to read
    output: Path
        The raw PCM file to write
    from_format: RawSampleFormat
        Sample format of the source
    to_format: RawSampleFormat
        Sample format to write
    """
    result = run_to_completion(
        config,
        lambda importer: importer.convert_raw_file(source, from_format, output, to_format),
    )
    if not result.succeeded:
        print_failure("RAW conversion", result)
        return 1

    print_success(f"Converted {source} ({from_format.value}) -> {output} ({to_format.value})")
    return 0


@app.command
def import_raw(
    source: Path,
    output: Path,
    raw_format: RawSampleFormat,
    sample_rate: Annotated[int, Parameter(validator=validate_positive_integer)],
    channels: Annotated[int, Parameter(validator=validate_positive_integer)],
    *,
    config: Annotated[PipelineConfig | None, Parameter(parse=False)] = None,
) -> int:
    """
    Import headerless PCM and save it as a WAV file.

    Parameters
    ----------
    source: Path
        The raw PCM file to import
    output: Path
        The destination .wav file
    raw_format: RawSampleFormat
        Sample format of the source
    sample_rate: int
        Sample rate in Hz
    channels: int
        Number of interleaved channels
    """
    imported = run_to_completion(
        config,
        lambda importer: importer.import_from_raw_file(source, raw_format, sample_rate, channels),
    )
    if not imported.succeeded:
        print_failure(f"RAW import of {source}", imported)
        return 1

    exported = run_to_completion(
        config,
        lambda importer: importer.export_to_file(imported.payload, output, AudioFormat.WAV, 0),
    )
    if not exported.succeeded:
        print_failure("WAV export", exported)
        return 1

    print_success(f"Imported {source} -> {output}")
    print_audio_info(imported.payload)
    return 0


@app.meta.default
def launcher(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    log_level: LogLevel = "WARNING",
    workers: Annotated[int, Parameter(validator=validate_positive_integer)] = 4,
) -> int:
    """
    Parameters
    ----------
    log_level: LogLevel
        Minimum level of log records to show
    workers: int
        Size of the background worker pool
    """
    setup_logging(log_level)

    command, bound, ignored = app.parse_args(tokens)
    extra = {}
    if "config" in ignored:
        extra["config"] = PipelineConfig(max_workers=workers)
    return command(*bound.args, **bound.kwargs, **extra)


def main() -> None:
    sys.exit(app.meta())


if __name__ == "__main__":
    main()
