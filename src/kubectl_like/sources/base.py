"""
Base classes for log sources.

A source is identified by a ``SourceRef`` and opened through a
``LogRequest``. Providers (docker, the Docker Swarm Control API) resolve
resource arguments into a mapping of the two; the engine only ever opens,
reads and closes the streams.
"""

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Callable, Iterable, Optional


@dataclass(frozen=True)
class SourceRef:
    """Identity of one log-producing endpoint"""
    kind: str
    name: str
    container: Optional[str] = None

    def __str__(self) -> str:
        parts = [self.kind, self.name]
        if self.container is not None:
            parts.append(self.container)
        return '/'.join(parts)


def source_tag(ref: SourceRef) -> Optional[str]:
    """Tag printed in front of every line of ``ref``, or None when there is
    nothing to identify it by."""
    if not ref.name:
        return None
    return str(ref)


class LogRequest(ABC):
    """A log stream that has not been opened yet"""

    @abstractmethod
    def stream(self) -> BinaryIO:
        """
        Open the log stream.

        Returns:
            A binary file object supporting ``readline()`` and ``close()``

        Raises:
            Any provider error if the stream cannot be opened
        """
        pass


class ChunkedStream(io.RawIOBase):
    """Raw stream over an iterator of byte chunks.

    Docker and HTTP clients hand logs out as chunks that do not line up with
    line boundaries; wrapping them in a ``BufferedReader`` gives back
    ``readline()``.
    """

    def __init__(
        self,
        chunks: Iterable[bytes],
        on_close: Optional[Callable[[], None]] = None,
        limit_bytes: int = 0
    ):
        super().__init__()
        self._chunks = iter(chunks)
        self._pending = b''
        self._on_close = on_close
        self._remaining = limit_bytes if limit_bytes > 0 else None

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        if self._remaining == 0:
            return 0

        while not self._pending:
            try:
                chunk = next(self._chunks)
            except StopIteration:
                return 0
            if isinstance(chunk, str):
                chunk = chunk.encode('utf-8')
            self._pending = chunk

        size = len(b)
        if self._remaining is not None:
            size = min(size, self._remaining)

        data = self._pending[:size]
        self._pending = self._pending[size:]
        n = len(data)
        b[:n] = data
        if self._remaining is not None:
            self._remaining -= n
        return n

    def close(self):
        if self.closed:
            return
        try:
            if self._on_close is not None:
                self._on_close()
        finally:
            super().close()


def open_chunked(
    chunks: Iterable[bytes],
    on_close: Optional[Callable[[], None]] = None,
    limit_bytes: int = 0
) -> BinaryIO:
    """Line-readable binary stream over ``chunks``"""
    return io.BufferedReader(ChunkedStream(chunks, on_close=on_close, limit_bytes=limit_bytes))
