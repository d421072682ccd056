#!/usr/bin/env python3
"""Import an audio file in the background and re-export it as Ogg Vorbis.

This script demonstrates the complete workflow: starting an import, following
its progress, receiving the decoded audio and encoding it to another format.
"""

import sys
from pathlib import Path
from typing import Any

from audioimport import (
    AudioFormat,
    QueueDelivery,
    RuntimeAudioImporter,
    TranscodingPipeline,
    TranscodingResult,
)


def transcode_to_vorbis(source: Path, output: Path, quality: int = 200) -> bool:
    """Import `source` and write it to `output` as Ogg Vorbis.

    Args:
        source: Any supported audio file (MP3, WAV, FLAC, Ogg Vorbis).
        output: Destination .ogg path.
        quality: Encoder quality hint, 0-255.

    Returns:
        True if both the import and the export succeeded.
    """
    delivery = QueueDelivery()
    results: list[TranscodingResult[Any]] = []

    with TranscodingPipeline(delivery=delivery) as pipeline:
        importer = RuntimeAudioImporter(pipeline)
        importer.on_progress.append(lambda percent: print(f"  {percent:3d}%"))
        importer.on_result.append(results.append)

        # 1. Decode in the background, then deliver callbacks on this thread
        print(f"Importing {source}...")
        importer.import_from_file(source).result()
        delivery.run_pending()

        imported = results.pop()
        if not imported.succeeded:
            print(f"Import failed: {imported.status.value} ({imported.error})")
            return False

        audio = imported.payload
        print(audio)

        # 2. Encode the decoded audio and write it out
        print(f"Exporting to {output}...")
        importer.export_to_file(audio, output, AudioFormat.OGG_VORBIS, quality).result()
        delivery.run_pending()

        exported = results.pop()
        if not exported.succeeded:
            print(f"Export failed: {exported.status.value} ({exported.error})")
            return False

    print(f"Wrote {len(exported.payload)} bytes")
    return True


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(f"usage: {sys.argv[0]} SOURCE OUTPUT.ogg")
        sys.exit(2)

    ok = transcode_to_vorbis(Path(sys.argv[1]), Path(sys.argv[2]))
    sys.exit(0 if ok else 1)
