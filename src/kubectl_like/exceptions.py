"""Exceptions raised by the log filtering engine and its collaborators"""

from typing import Any, Dict, Optional


class LikeError(Exception):
    """Base exception for kubectl-like"""

    def __init__(
        self,
        message: str,
        code: str = 'LIKE_ERROR',
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(LikeError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 'VALIDATION_ERROR', details)


class PatternError(LikeError):
    def __init__(self, pattern: str, reason: str):
        super().__init__(
            f"invalid pattern {pattern!r}: {reason}",
            'INVALID_PATTERN',
            {'pattern': pattern}
        )


class ConcurrencyLimitError(LikeError):
    def __init__(self, requested: int, limit: int):
        super().__init__(
            f"you are attempting to follow {requested} log streams, but maximum allowed "
            f"concurrency is {limit}, use --max-log-requests to increase the limit",
            'CONCURRENCY_LIMIT_EXCEEDED',
            {'requested': requested, 'limit': limit}
        )


class SourceError(LikeError):
    """A log source could not be opened or failed while streaming"""

    def __init__(self, source: str, message: str):
        super().__init__(message, 'SOURCE_ERROR', {'source': source})


class DestinationError(LikeError):
    """Writing to the output failed; never recoverable"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 'DESTINATION_ERROR', details)


class ClosedPipeError(DestinationError):
    def __init__(self, cause: Optional[BaseException] = None):
        message = 'write on closed pipe'
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.cause = cause
