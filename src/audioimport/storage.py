"""File access for the pipeline's load and write stages."""

from pathlib import Path

from audioimport.errors import ReadError, SourceNotFoundError, WriteError


def read_all_bytes(path: Path | str) -> bytes:
    """Read a whole file into memory.

    Raises:
        SourceNotFoundError: If the file does not exist.
        ReadError: If the file cannot be read.
    """
    path = Path(path)
    if not path.is_file():
        raise SourceNotFoundError(f"Audio file not found: {path}")

    try:
        return path.read_bytes()
    except OSError as e:
        raise ReadError(f"Cannot read file: {path}") from e


def write_all_bytes(path: Path | str, data: bytes) -> None:
    """Write bytes to a file, creating parent directories as needed.

    Raises:
        WriteError: If the file cannot be written.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise WriteError(f"Something went wrong when saving data to the path '{path}'") from e
