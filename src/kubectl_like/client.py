"""API client for reading logs through a Docker Swarm Control backend"""

import requests
from typing import Any, Dict, Optional
from urllib.parse import urljoin

from .exceptions import LikeError


class APIError(LikeError):
    """API error exception"""
    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message, 'API_ERROR', {'response': details} if details else None)
        self.status_code = status_code


class APIClient:
    """Client for the Docker Swarm Control API"""

    def __init__(self, base_url: str, token: Optional[str] = None, verify_ssl: bool = True,
                 timeout: float = 30):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self.session = requests.Session()

        if token:
            self.session.headers['Authorization'] = f'Bearer {token}'

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """Make an HTTP request to the API"""
        url = urljoin(self.base_url + '/', endpoint.lstrip('/'))

        # Remove None values from params
        params = kwargs.pop('params', {})
        params = {k: v for k, v in params.items() if v is not None}

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                verify=self.verify_ssl,
                timeout=self.timeout,
                **kwargs
            )
            response.raise_for_status()
            return response
        except requests.exceptions.HTTPError as e:
            # Extract error details from response
            try:
                message = e.response.json().get('detail', str(e))
            except ValueError:
                message = str(e)

            raise APIError(message, e.response.status_code, e.response.text)
        except requests.exceptions.RequestException as e:
            raise APIError(f"Request failed: {str(e)}")

    def get(self, endpoint: str, **params) -> Any:
        """Make a GET request"""
        response = self._make_request('GET', endpoint, params=params)
        return response.json() if response.text else None

    def get_container_logs(self, host_id: str, container_id: str, **params) -> Dict[str, Any]:
        """Get container logs"""
        return self.get(f'containers/{container_id}/logs', host_id=host_id, **params) or {}

    def get_service_logs(self, host_id: str, service_id: str, **params) -> Dict[str, Any]:
        """Get service logs"""
        return self.get(f'services/{service_id}/logs', host_id=host_id, **params) or {}
