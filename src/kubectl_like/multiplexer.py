"""
Fan-out/join of log sources into one output.

Following more than one source runs one worker thread per source; the
workers write into a shared ``LogPipe`` and the calling thread copies the
pipe into the destination. Everything else runs the sources one after
another, straight into the destination.
"""

import logging
import threading
from typing import Callable, List, Mapping, Optional, TypeVar

from .exceptions import ConcurrencyLimitError, DestinationError
from .filtering import LineFilterConsumer, RequestConsumer, compile_pattern
from .options import LikeOptions
from .policy import FailurePolicy
from .sources.base import LogRequest, source_tag
from .writers import LogPipe, Writer, add_prefix_if_needed


logger = logging.getLogger(__name__)

K = TypeVar('K')

COPY_CHUNK_SIZE = 32 * 1024


class LogMultiplexer:
    """Runs every log request through ``consumer`` into one output"""

    def __init__(
        self,
        options: LikeOptions,
        consumer: RequestConsumer,
        tag_for: Callable[[K], Optional[str]] = source_tag
    ):
        self.options = options
        self.consumer = consumer
        self.tag_for = tag_for
        self.policy = FailurePolicy(options.ignore_errors)

    def run(self, requests: Mapping[K, LogRequest], out: Writer):
        if self.options.follow and len(requests) > 1:
            if len(requests) > self.options.max_follow_concurrency:
                raise ConcurrencyLimitError(len(requests), self.options.max_follow_concurrency)

            return self.parallel_consume(requests, out)

        return self.sequential_consume(requests, out)

    def sequential_consume(self, requests: Mapping[K, LogRequest], out: Writer):
        for ref in sorted(requests, key=str):
            logger.debug("Reading logs of %s", ref)
            writer = add_prefix_if_needed(ref, out, self.options.prefix, self.tag_for)
            try:
                self.consumer.consume(requests[ref], writer)
            except Exception as e:
                self.policy.handle(e, out)

    def parallel_consume(self, requests: Mapping[K, LogRequest], out: Writer):
        pipe = LogPipe()
        workers: List[threading.Thread] = []

        for ref, request in requests.items():
            worker = threading.Thread(
                target=self._consume_into_pipe,
                args=(ref, request, pipe),
                name=f"like-{ref}",
                daemon=True
            )
            workers.append(worker)

        logger.debug("Following %d log streams", len(workers))
        for worker in workers:
            worker.start()

        closer = threading.Thread(
            target=self._close_when_done,
            args=(workers, pipe),
            name='like-closer',
            daemon=True
        )
        closer.start()

        copy_pipe(pipe, out)

    def _consume_into_pipe(self, ref: K, request: LogRequest, pipe: LogPipe):
        writer = add_prefix_if_needed(ref, pipe, self.options.prefix, self.tag_for)
        try:
            self.consumer.consume(request, writer)
        except Exception as e:
            try:
                self.policy.handle(e, pipe)
            except Exception as fatal:
                # Surfaces from the reader once buffered output is drained
                pipe.close(fatal)

    @staticmethod
    def _close_when_done(workers: List[threading.Thread], pipe: LogPipe):
        for worker in workers:
            worker.join()
        logger.debug("All log streams finished")
        pipe.close()


def copy_pipe(pipe: LogPipe, out: Writer):
    """Drain ``pipe`` into ``out`` until it is closed.

    A failing ``out`` closes the read side of the pipe so blocked workers
    give up instead of waiting for a reader that is gone.
    """
    flush = getattr(out, 'flush', None)
    while True:
        chunk = pipe.read(COPY_CHUNK_SIZE)
        if not chunk:
            return
        try:
            out.write(chunk)
            if flush is not None:
                flush()
        except (OSError, ValueError) as e:
            error = DestinationError(f"write failed: {e}")
            pipe.close_reader(error)
            raise error from e


def run_like(
    requests: Mapping[K, LogRequest],
    out: Writer,
    options: LikeOptions,
    consumer: Optional[RequestConsumer] = None,
    tag_for: Callable[[K], Optional[str]] = source_tag
):
    """
    Filter the logs of every request into ``out``.

    Args:
        requests: Log requests keyed by the source they read from
        out: Destination for the matching lines; owned by the caller
        options: Effective options for this invocation
        consumer: Replaces the line filter, mostly for tests
        tag_for: Maps a source to its prefix tag, None to leave it untagged

    Raises:
        PatternError: if the pattern does not compile; no source is opened
        ConcurrencyLimitError: if too many sources would be followed at once
        DestinationError: if writing to ``out`` fails
        Any source error, unless ``options.ignore_errors`` is set
    """
    pattern = compile_pattern(options.pattern)
    if consumer is None:
        consumer = LineFilterConsumer(pattern)

    LogMultiplexer(options, consumer, tag_for).run(requests, out)
