"""
Unit tests for the line filter
"""

import io

import pytest

from kubectl_like.exceptions import DestinationError, PatternError
from kubectl_like.filtering import LineFilterConsumer, compile_pattern, filter_stream


class TestCompilePattern:
    """Test pattern compilation"""

    def test_matches_anywhere_in_line(self):
        pattern = compile_pattern('error')
        assert pattern.search(b'2024-01-01 error: disk full\n')
        assert not pattern.search(b'all good\n')

    def test_invalid_pattern(self):
        with pytest.raises(PatternError) as exc_info:
            compile_pattern('(unclosed')

        assert exc_info.value.code == 'INVALID_PATTERN'
        assert '(unclosed' in str(exc_info.value)

    def test_non_ascii_pattern(self):
        pattern = compile_pattern('größe')
        assert pattern.search('die größe stimmt\n'.encode('utf-8'))


class TestFilterStream:
    """Test filter_stream"""

    def _filter(self, data: bytes, pattern: str) -> bytes:
        out = io.BytesIO()
        filter_stream(io.BytesIO(data), compile_pattern(pattern), out)
        return out.getvalue()

    def test_keeps_matching_lines(self):
        """Only matching lines are written"""
        assert self._filter(b'foo\nbar\nerror: baz\n', 'error') == b'error: baz\n'

    def test_empty_pattern_keeps_everything(self):
        data = b'foo\nbar\n\nerror: baz\n'
        assert self._filter(data, '') == data

    def test_preserves_order_and_newlines(self):
        data = b'a1\nb1\na2\nb2\na3'
        assert self._filter(data, '^a') == b'a1\na2\na3'

    def test_last_line_without_newline_is_matched(self):
        assert self._filter(b'foo\nbar', 'bar') == b'bar'

    def test_empty_stream(self):
        assert self._filter(b'', 'x') == b''

    def test_same_output_on_repeated_runs(self):
        data = b'GET /a 200\nGET /b 500\nPOST /c 500\n'
        assert self._filter(data, ' 500$') == self._filter(data, ' 500$')
        assert self._filter(data, ' 500$') == b'GET /b 500\nPOST /c 500\n'

    def test_empty_read_at_end_is_matched(self, recording_writer):
        """The empty read that signals end of stream goes through the pattern too"""
        filter_stream(io.BytesIO(b'a\n'), compile_pattern('^$'), recording_writer)
        assert recording_writer.writes == [b'']

    def test_write_error_becomes_destination_error(self, broken_writer):
        with pytest.raises(DestinationError):
            filter_stream(io.BytesIO(b'a\nb\n'), compile_pattern('a'), broken_writer)

    def test_read_error_stops_filtering(self, make_request, recording_writer):
        stream = make_request(b'a\nb\n', error=ConnectionResetError('reset')).stream()

        with pytest.raises(ConnectionResetError):
            filter_stream(stream, compile_pattern(''), recording_writer)

        assert recording_writer.getvalue() == b'a\nb\n'


class TestLineFilterConsumer:
    """Test LineFilterConsumer"""

    def test_opens_filters_and_closes(self, make_request, recording_writer):
        request = make_request(b'info\nwarn: low disk\n')
        LineFilterConsumer(compile_pattern('warn')).consume(request, recording_writer)

        assert recording_writer.getvalue() == b'warn: low disk\n'
        assert request.opened == 1
        assert request.streams[0].closed

    def test_closes_stream_on_error(self, make_request, recording_writer):
        request = make_request(b'x\n', error=OSError('gone'))

        with pytest.raises(OSError):
            LineFilterConsumer(compile_pattern('')).consume(request, recording_writer)

        assert request.streams[0].closed

    def test_open_error_propagates(self, make_request, recording_writer):
        request = make_request(open_error=OSError('no such container'))

        with pytest.raises(OSError, match='no such container'):
            LineFilterConsumer(compile_pattern('')).consume(request, recording_writer)
