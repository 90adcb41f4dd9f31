"""
HTTP transport for JSON-RPC calls.

The RPC client only needs "send a JSON body, get a JSON body back or a
failure". BaseTransport captures that; HttpTransport implements it with a
pooled requests.Session that is shared by all scanner workers.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter

DEFAULT_TIMEOUT = 10.0  # seconds, per call
DEFAULT_POOL_SIZE = 8

JSON_HEADERS = {"Content-Type": "application/json"}


class TransportError(Exception):
    """Raised when a request could not be delivered or its reply decoded."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BaseTransport(ABC):
    """Blocking request/response primitive used by the RPC client."""

    @abstractmethod
    def post_json(self, url: str, payload: Any) -> Any:
        """
        POST a JSON payload and return the decoded JSON reply.

        Raises:
            TransportError: If the request fails or the reply is not JSON
        """
        pass


class HttpTransport(BaseTransport):
    """
    requests-backed transport with a bounded per-call timeout.

    A single session is shared across worker threads; the connection pool is
    sized so that every worker can hold a connection.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, pool_size: int = DEFAULT_POOL_SIZE):
        """
        Initialize the transport.

        Args:
            timeout: Seconds to wait for connect and for each read
            pool_size: Connections kept per host

        Raises:
            ValueError: If timeout is not positive
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.timeout = timeout
        self.session = requests.Session()
        adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def post_json(self, url: str, payload: Any) -> Any:
        try:
            response = self.session.post(
                url,
                json=payload,
                headers=JSON_HEADERS,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"Request failed: {e}") from e

        if not response.ok:
            raise TransportError(
                f"HTTP error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                "Response is not valid JSON",
                status_code=response.status_code,
            ) from e

    def close(self) -> None:
        self.session.close()
