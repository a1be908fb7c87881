"""
HTTP client with connection pooling for outbound lookups.
Requests are single round trips: no automatic retries are mounted.
"""

from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter

from catholic_schedule import config
from catholic_schedule.__version__ import __version__
from catholic_schedule.core.logger import get_logger

logger = get_logger(__name__)


class HTTPClient:
    """
    Pooled requests session with default headers and a request timeout.
    """

    def __init__(self, pool_connections: int = 4, pool_maxsize: int = 10, timeout: Optional[int] = None):
        """
        Initialize HTTP client with connection pooling.

        Args:
            pool_connections: Number of connection pools to cache
            pool_maxsize: Maximum number of connections to save in pool
            timeout: Default request timeout in seconds
        """
        self.timeout = timeout or config.HTTP_TIMEOUT
        self.session = requests.Session()

        adapter = HTTPAdapter(pool_connections=pool_connections, pool_maxsize=pool_maxsize, max_retries=0)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        self.session.headers.update(
            {
                "User-Agent": f"catholic-schedule/{__version__}",
                "Accept": "application/json",
            }
        )

        logger.debug(f"🔗 HTTP client initialized with pool_size={pool_maxsize}, timeout={self.timeout}s")

    def get(self, url: str, headers: Optional[Dict[str, str]] = None, **kwargs: Any) -> requests.Response:
        """
        GET request. The response is returned whatever its status code.

        Raises:
            requests.RequestException: On transport failure (connection, timeout)
        """
        logger.debug(f"🌐 GET request: {url}")
        response = self.session.get(url, headers=headers, timeout=kwargs.pop("timeout", self.timeout), **kwargs)
        logger.debug(f"GET {url} -> {response.status_code}")
        return response

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


_http_client: Optional[HTTPClient] = None


def get_http_client() -> HTTPClient:
    """Return the process-wide HTTP client, creating it on first use."""
    global _http_client
    if _http_client is None:
        _http_client = HTTPClient()
    return _http_client
