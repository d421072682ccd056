"""RIFF/WAV header utilities.

This module inspects and repairs RIFF/WAVE headers held in memory. Streamed
or truncated WAV files often carry placeholder sizes (0 or 0xFFFFFFFF) in the
RIFF header and the data chunk; decoders then either reject the stream or
read past its end. `fix_wav_sizes` rewrites those sizes to match the bytes
actually present.
"""

import struct

# FourCC identifiers
RIFF_ID = b"RIFF"
RF64_ID = b"RF64"
WAVE_ID = b"WAVE"
DATA_ID = b"data"

RIFF_HEADER_SIZE = 12
CHUNK_HEADER_SIZE = 8


class RiffError(Exception):
    """Error reading or repairing RIFF data."""


def is_wave(data: bytes) -> bool:
    """Check whether a buffer starts with a RIFF (or RF64) WAVE header."""
    if len(data) < RIFF_HEADER_SIZE:
        return False
    return data[:4] in (RIFF_ID, RF64_ID) and data[8:12] == WAVE_ID


def read_chunk_header(data: bytes, offset: int) -> tuple[bytes, int]:
    """Read a RIFF chunk header (FourCC + size) at an offset.

    Args:
        data: The RIFF buffer.
        offset: Offset of the chunk header.

    Returns:
        Tuple of (chunk_id, chunk_size).

    Raises:
        RiffError: If the header runs past the end of the buffer.
    """
    header = data[offset : offset + CHUNK_HEADER_SIZE]
    if len(header) < CHUNK_HEADER_SIZE:
        raise RiffError("Unexpected end of data reading chunk header")

    chunk_id = header[:4]
    chunk_size = struct.unpack("<I", header[4:8])[0]
    return chunk_id, chunk_size


def iter_chunks(data: bytes) -> list[tuple[bytes, int, int]]:
    """List the chunks of a RIFF/WAVE buffer.

    Returns:
        List of (chunk_id, header_offset, declared_size) tuples, in order.
        The walk stops at the data chunk or at the first chunk whose
        declared size overruns the buffer.

    Raises:
        RiffError: If the buffer is not a RIFF/WAVE stream.
    """
    if not is_wave(data) or data[:4] != RIFF_ID:
        raise RiffError("Not a RIFF/WAVE stream")

    chunks = []
    offset = RIFF_HEADER_SIZE
    while offset + CHUNK_HEADER_SIZE <= len(data):
        chunk_id, chunk_size = read_chunk_header(data, offset)
        chunks.append((chunk_id, offset, chunk_size))

        body_end = offset + CHUNK_HEADER_SIZE + chunk_size
        if chunk_id == DATA_ID or body_end > len(data):
            break

        # Skip to next chunk (with word alignment padding)
        offset = body_end + (chunk_size % 2)

    return chunks


def fix_wav_sizes(data: bytes) -> bytes:
    """Rewrite RIFF and data chunk sizes that disagree with the buffer length.

    Args:
        data: A RIFF/WAVE buffer, possibly with placeholder sizes.

    Returns:
        The buffer with consistent sizes. The input is returned unchanged
        when its sizes already fit.

    Raises:
        RiffError: If the buffer is not a RIFF/WAVE stream or has no
            data chunk.
    """
    chunks = iter_chunks(data)
    data_chunk = next((c for c in chunks if c[0] == DATA_ID), None)
    if data_chunk is None:
        raise RiffError("data chunk not found in WAV data")

    _, data_offset, data_size = data_chunk
    available = len(data) - data_offset - CHUNK_HEADER_SIZE
    riff_size = struct.unpack("<I", data[4:8])[0]
    actual_riff_size = len(data) - CHUNK_HEADER_SIZE

    if data_size <= available and 0 < riff_size <= actual_riff_size and data_size > 0:
        return data

    fixed = bytearray(data)
    if riff_size == 0 or riff_size > actual_riff_size:
        struct.pack_into("<I", fixed, 4, actual_riff_size)
    if data_size == 0 or data_size > available:
        struct.pack_into("<I", fixed, data_offset + 4, available)
    return bytes(fixed)

