"""Effective options for one invocation"""

import math
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from dateutil import parser as date_parser
from dateutil import tz

from .exceptions import ValidationError


DEFAULT_MAX_FOLLOW_CONCURRENCY = 5
# -1 asks every source for its whole log
DEFAULT_TAIL = -1


@dataclass(frozen=True)
class LikeOptions:
    """Everything the engine and the stream providers read.

    The engine only looks at ``pattern``, ``follow``, ``ignore_errors``,
    ``max_follow_concurrency`` and ``prefix``; the rest shapes the log
    request sent to each source.
    """
    pattern: str
    follow: bool = False
    ignore_errors: bool = False
    max_follow_concurrency: int = DEFAULT_MAX_FOLLOW_CONCURRENCY
    prefix: bool = False
    timestamps: bool = False
    tail: int = DEFAULT_TAIL
    since_seconds: Optional[float] = None
    since_time: Optional[str] = None
    limit_bytes: int = 0

    def validate(self):
        if self.pattern == '':
            raise ValidationError('pattern is required. Please provide a pattern to match the logs')

        if self.since_time and self.since_seconds is not None:
            raise ValidationError('at most one of `sinceTime` or `sinceSeconds` may be specified')

        if self.limit_bytes < 0:
            raise ValidationError('--limit-bytes must be greater than 0')

        if self.since_seconds is not None and self.since_seconds < 0:
            raise ValidationError('--since must be greater than 0')

        if self.tail < -1:
            raise ValidationError('--tail must be greater than or equal to -1')

        if self.max_follow_concurrency < 1:
            raise ValidationError('--max-log-requests must be greater than 0')

        if self.since_time:
            self.parsed_since_time()

    def parsed_since_time(self) -> Optional[datetime]:
        if not self.since_time:
            return None
        try:
            parsed = date_parser.isoparse(self.since_time)
        except ValueError as e:
            raise ValidationError(
                f"invalid --since-time {self.since_time!r}: {e}",
                {'since_time': self.since_time}
            )
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=tz.UTC)
        return parsed

    def to_docker_log_kwargs(self, now: Optional[float] = None) -> Dict[str, Any]:
        """Keyword arguments for ``Container.logs`` / ``Service.logs``"""
        log_kwargs: Dict[str, Any] = {
            'stdout': True,
            'stderr': True,
            'follow': self.follow,
            'timestamps': self.timestamps,
            'tail': 'all' if self.tail == -1 else self.tail,
        }

        since_time = self.parsed_since_time()
        if since_time is not None:
            # Service.logs passes since through to the daemon unconverted
            log_kwargs['since'] = int(since_time.timestamp())
        elif self.since_seconds:
            if now is None:
                now = time.time()
            # nearest second, halves away from zero
            log_kwargs['since'] = int(now) - math.floor(self.since_seconds + 0.5)

        return log_kwargs
