"""
Docker Swarm Control API log source provider.

The backend returns a snapshot of a container's or service's log as JSON, so
these streams always end; following is not available through the API.
"""

import logging
from typing import Any, BinaryIO, Dict, Iterable, Optional, Tuple

from ..client import APIClient
from ..options import LikeOptions
from .base import LogRequest, SourceRef, open_chunked


logger = logging.getLogger(__name__)


class ApiLogRequest(LogRequest):
    """Log snapshot of one container"""

    def __init__(
        self,
        client: APIClient,
        host_id: str,
        resource_id: str,
        lines: Optional[int] = None,
        timestamps: bool = False,
        limit_bytes: int = 0
    ):
        self.client = client
        self.host_id = host_id
        self.resource_id = resource_id
        self.lines = lines
        self.timestamps = timestamps
        self.limit_bytes = limit_bytes

    def fetch(self) -> Dict[str, Any]:
        return self.client.get_container_logs(
            self.host_id,
            self.resource_id,
            lines=self.lines,
            timestamps=self.timestamps
        )

    def stream(self) -> BinaryIO:
        text = self.fetch().get('logs') or ''
        return open_chunked([text.encode('utf-8')], limit_bytes=self.limit_bytes)


class ApiServiceLogRequest(ApiLogRequest):
    """Log snapshot of every task of a service; the endpoint calls lines ``tail``"""

    def fetch(self) -> Dict[str, Any]:
        return self.client.get_service_logs(
            self.host_id,
            self.resource_id,
            tail=self.lines,
            timestamps=self.timestamps
        )


def api_log_requests(
    client: APIClient,
    host_id: str,
    resources: Iterable[Tuple[str, str]],
    options: LikeOptions
) -> Dict[SourceRef, LogRequest]:
    if options.follow:
        logger.warning("Following is not supported through the API, showing current logs only")

    # The backend applies its own default when lines is omitted
    lines = options.tail if options.tail >= 0 else None

    requests: Dict[SourceRef, LogRequest] = {}
    for kind, name in resources:
        request_class = ApiServiceLogRequest if kind == 'service' else ApiLogRequest
        requests[SourceRef(kind, name)] = request_class(
            client,
            host_id,
            name,
            lines=lines,
            timestamps=options.timestamps,
            limit_bytes=options.limit_bytes
        )

    return requests
