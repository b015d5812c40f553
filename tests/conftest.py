"""
Pytest configuration and fixtures
"""

import io
import logging
from typing import List, Optional

import pytest

from kubectl_like.options import LikeOptions
from kubectl_like.sources.base import LogRequest


class ScriptedStream(io.BytesIO):
    """In-memory log stream that can fail once its data is exhausted"""

    def __init__(self, data: bytes, error: Optional[Exception] = None):
        super().__init__(data)
        self.error = error

    def readline(self, size=-1):
        line = super().readline(size)
        if not line and self.error is not None:
            raise self.error
        return line


class ScriptedRequest(LogRequest):
    """Log request over static bytes, recording how it was used"""

    def __init__(self, data: bytes = b'', error: Optional[Exception] = None,
                 open_error: Optional[Exception] = None):
        self.data = data
        self.error = error
        self.open_error = open_error
        self.streams: List[ScriptedStream] = []

    @property
    def opened(self) -> int:
        return len(self.streams)

    def stream(self):
        if self.open_error is not None:
            raise self.open_error
        stream = ScriptedStream(self.data, self.error)
        self.streams.append(stream)
        return stream


class RecordingWriter:
    """Destination remembering every write call"""

    def __init__(self):
        self.writes: List[bytes] = []

    def write(self, data: bytes) -> int:
        self.writes.append(bytes(data))
        return len(data)

    def getvalue(self) -> bytes:
        return b''.join(self.writes)


class BrokenWriter:
    def write(self, data: bytes) -> int:
        raise BrokenPipeError('broken pipe')


@pytest.fixture
def make_request():
    """Factory for scripted log requests"""
    return ScriptedRequest


@pytest.fixture
def recording_writer():
    return RecordingWriter()


@pytest.fixture
def broken_writer():
    return BrokenWriter()


@pytest.fixture
def make_options():
    """Factory for LikeOptions with a match-everything pattern"""
    def _make(**overrides):
        values = {'pattern': '.*'}
        values.update(overrides)
        return LikeOptions(**values)
    return _make


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The CLI reconfigures the root logger; undo it after each test"""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
