"""
Writers shared by the log workers.

``PrefixingWriter`` tags lines with their source, ``LogPipe`` is the
merge point that concurrent workers write into and a single reader drains.
"""

import threading
from typing import Any, Callable, Optional, Protocol, TypeVar

from .exceptions import ClosedPipeError


K = TypeVar('K')


class Writer(Protocol):
    def write(self, data: bytes) -> Optional[int]:
        ...


class PrefixingWriter:
    """Writes ``prefix`` in front of every chunk.

    Prefix and payload go out in a single call to the wrapped writer so a
    concurrent writer sharing the same pipe cannot slip in between them.
    """

    def __init__(self, prefix: bytes, writer: Writer):
        self.prefix = prefix
        self.writer = writer

    def write(self, data: bytes) -> int:
        if not data:
            return 0

        n = self.writer.write(self.prefix + data)
        # Report bytes of ``data`` only: 0 <= n <= len(data)
        if n is None or n > len(data):
            return len(data)
        return n


def add_prefix_if_needed(
    ref: K,
    writer: Writer,
    enabled: bool,
    tag_for: Callable[[K], Optional[str]]
) -> Writer:
    if not enabled:
        return writer

    tag = tag_for(ref)
    if tag is None:
        return writer

    return PrefixingWriter(f"[{tag}] ".encode('utf-8'), writer)


class AutoFlushWriter:
    """Flushes the wrapped file after every write so followed lines show up
    as soon as they match."""

    def __init__(self, stream: Any):
        self.stream = stream

    def write(self, data: bytes) -> int:
        n = self.stream.write(data)
        self.stream.flush()
        return len(data) if n is None else n

    def flush(self):
        self.stream.flush()


class LogPipe:
    """
    Synchronous in-memory pipe.

    Each ``write`` hands its whole chunk to the reader and blocks until the
    reader has consumed it, so producers can never run ahead of the
    consumer. Writes are serialized: chunks from different writers are never
    interleaved.
    """

    def __init__(self):
        self._cond = threading.Condition()
        self._write_lock = threading.Lock()
        self._pending: Optional[memoryview] = None
        self._closed = False
        self._close_error: Optional[BaseException] = None
        self._reader_closed = False
        self._reader_error: Optional[BaseException] = None

    def write(self, data: bytes) -> int:
        if not data:
            with self._cond:
                self._check_writable()
            return 0

        with self._write_lock:
            with self._cond:
                self._check_writable()
                self._pending = memoryview(bytes(data))
                self._cond.notify_all()

                while self._pending is not None and not self._reader_closed:
                    self._cond.wait()

                if self._pending is not None:
                    self._pending = None
                    raise ClosedPipeError(self._reader_error)

        return len(data)

    def _check_writable(self):
        if self._reader_closed:
            raise ClosedPipeError(self._reader_error)
        if self._closed:
            raise ClosedPipeError(self._close_error)

    def close(self, error: Optional[BaseException] = None):
        """Close the write side. Only the first close has any effect."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._close_error = error
            self._cond.notify_all()

    def read(self, size: int = -1) -> bytes:
        """
        Read the next chunk, or up to ``size`` bytes of it.

        Returns b'' once the pipe is closed and drained, or raises the error
        the pipe was closed with.
        """
        with self._cond:
            while self._pending is None and not self._closed and not self._reader_closed:
                self._cond.wait()

            if self._reader_closed:
                raise ClosedPipeError(self._reader_error)

            if self._pending is None:
                if self._close_error is not None:
                    raise self._close_error
                return b''

            if size < 0 or size >= len(self._pending):
                data = self._pending.tobytes()
                self._pending = None
                self._cond.notify_all()
            else:
                data = self._pending[:size].tobytes()
                self._pending = self._pending[size:]
            return data

    def close_reader(self, error: Optional[BaseException] = None):
        """Stop reading; pending and future writes fail with ClosedPipeError"""
        with self._cond:
            if self._reader_closed:
                return
            self._reader_closed = True
            self._reader_error = error
            self._cond.notify_all()
