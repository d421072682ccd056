"""Read-only table from audio format to codec adapter."""

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from audioimport.transcoders import flac, mp3, vorbis, wav
from audioimport.transcoders.base import CodecAdapter
from audioimport.types import AudioFormat


class CodecRegistry(Mapping[AudioFormat, CodecAdapter]):
    """Immutable mapping of concrete formats to adapters.

    Iteration order is registration order, which is also the priority order
    used for content sniffing.
    """

    def __init__(self, adapters: Iterable[CodecAdapter]) -> None:
        table: dict[AudioFormat, CodecAdapter] = {}
        for adapter in adapters:
            if not adapter.audio_format.is_concrete:
                raise ValueError(f"Cannot register an adapter for {adapter.audio_format.name}")
            if adapter.audio_format in table:
                raise ValueError(f"Duplicate adapter for {adapter.audio_format.name}")
            table[adapter.audio_format] = adapter
        self._adapters = MappingProxyType(table)

    def __getitem__(self, audio_format: AudioFormat) -> CodecAdapter:
        return self._adapters[audio_format]

    def __iter__(self) -> Iterator[AudioFormat]:
        return iter(self._adapters)

    def __len__(self) -> int:
        return len(self._adapters)

    def __repr__(self) -> str:
        names = ", ".join(f.name for f in self._adapters)
        return f"CodecRegistry({names})"

    @property
    def encodable_formats(self) -> tuple[AudioFormat, ...]:
        return tuple(f for f, a in self._adapters.items() if a.can_encode)


DEFAULT_REGISTRY = CodecRegistry(
    [
        mp3.ADAPTER,
        wav.ADAPTER,
        flac.ADAPTER,
        vorbis.ADAPTER,
    ]
)
