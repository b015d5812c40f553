"""
Docker log source provider.

Opens container and swarm service logs with the docker SDK. Only the
resources named on the command line are read; nothing is looked up by label.
"""

import logging
from typing import BinaryIO, Dict, Iterable, Tuple

from docker.errors import APIError
from docker.models.containers import Container
from docker.models.services import Service

from ..exceptions import SourceError
from ..options import LikeOptions
from .base import LogRequest, SourceRef, open_chunked


logger = logging.getLogger(__name__)

SWARM_SERVICE_LABEL = 'com.docker.swarm.service.name'


class ContainerLogRequest(LogRequest):
    def __init__(self, container: Container, log_kwargs: dict, limit_bytes: int = 0):
        self.container = container
        self.log_kwargs = log_kwargs
        self.limit_bytes = limit_bytes

    def stream(self) -> BinaryIO:
        try:
            logs = self.container.logs(stream=True, **self.log_kwargs)
        except APIError as e:
            raise SourceError(self.container.name, str(e)) from e
        return open_chunked(logs, on_close=getattr(logs, 'close', None), limit_bytes=self.limit_bytes)


class ServiceLogRequest(LogRequest):
    """Logs of every task of a swarm service, merged by the daemon"""

    def __init__(self, service: Service, log_kwargs: dict, limit_bytes: int = 0):
        self.service = service
        self.log_kwargs = log_kwargs
        self.limit_bytes = limit_bytes

    def stream(self) -> BinaryIO:
        try:
            logs = self.service.logs(**self.log_kwargs)
        except APIError as e:
            raise SourceError(self.service.name, str(e)) from e
        return open_chunked(logs, on_close=getattr(logs, 'close', None), limit_bytes=self.limit_bytes)


def container_ref(container: Container) -> SourceRef:
    """Swarm task containers are tagged with their service"""
    service_name = (container.labels or {}).get(SWARM_SERVICE_LABEL)
    if service_name:
        return SourceRef('service', service_name, container.name)
    return SourceRef('container', container.name)


def docker_log_requests(
    client,
    resources: Iterable[Tuple[str, str]],
    options: LikeOptions
) -> Dict[SourceRef, LogRequest]:
    """
    Build a log request for each ``(kind, name)`` resource.

    Args:
        client: ``docker.DockerClient``
        resources: Parsed resource arguments, kind is 'container' or 'service'
        options: Effective options

    Raises:
        docker.errors.NotFound: if a resource does not exist
    """
    log_kwargs = options.to_docker_log_kwargs()
    requests: Dict[SourceRef, LogRequest] = {}

    for kind, name in resources:
        if kind == 'service':
            service = client.services.get(name)
            ref = SourceRef('service', service.name)
            requests[ref] = ServiceLogRequest(service, log_kwargs, options.limit_bytes)
        else:
            container = client.containers.get(name)
            ref = container_ref(container)
            requests[ref] = ContainerLogRequest(container, log_kwargs, options.limit_bytes)
        logger.debug("Resolved %s/%s to %s", kind, name, ref)

    return requests
