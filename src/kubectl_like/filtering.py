"""
Line filtering.

``filter_stream`` is the loop every source goes through: read a line, keep it
if the pattern matches, move on. ``RequestConsumer`` is the seam the
multiplexer calls for each source; ``LineFilterConsumer`` is the one used
outside of tests.
"""

import re
from abc import ABC, abstractmethod
from typing import BinaryIO, Pattern

from .exceptions import DestinationError, PatternError
from .sources.base import LogRequest
from .writers import Writer


def compile_pattern(pattern: str) -> Pattern[bytes]:
    """Compile the user pattern for matching raw log lines"""
    try:
        return re.compile(pattern.encode('utf-8'))
    except re.error as e:
        raise PatternError(pattern, str(e))


def filter_stream(stream: BinaryIO, pattern: Pattern[bytes], out: Writer):
    """
    Copy the lines of ``stream`` that match ``pattern`` to ``out``.

    Lines keep their trailing newline. The last read before end of stream is
    matched like any other, even when it is empty or has no newline.

    Raises:
        DestinationError: if writing to ``out`` fails
        Any error raised by ``stream`` while reading
    """
    while True:
        line = stream.readline()
        eof = not line.endswith(b'\n')

        if pattern.search(line):
            try:
                out.write(line)
            except DestinationError:
                raise
            except (OSError, ValueError) as e:
                raise DestinationError(f"write failed: {e}") from e

        if eof:
            return


class RequestConsumer(ABC):
    """How the multiplexer turns one log request into output"""

    @abstractmethod
    def consume(self, request: LogRequest, out: Writer):
        pass


class LineFilterConsumer(RequestConsumer):
    def __init__(self, pattern: Pattern[bytes]):
        self.pattern = pattern

    def consume(self, request: LogRequest, out: Writer):
        stream = request.stream()
        try:
            filter_stream(stream, self.pattern, out)
        finally:
            stream.close()
