"""
HTTP execution for apitester.

``HttpExecutor`` sends prepared requests with a hard timeout and reports what
came back. Any received response is a normal result whatever its status code;
only failures that prevent a response (timeouts, refused connections, DNS or
TLS errors) are treated as transport errors.
"""

import logging
import ssl
import time
from typing import Optional

import httpx

from .builder import PreparedRequest
from .exceptions import NetworkError, SSLError, TimeoutError, TransportError
from .models import ExecutionResult
from .utils import log_request, log_response

logger = logging.getLogger("apitester.executor")

DEFAULT_TIMEOUT = 20.0


def _is_ssl_failure(exc: BaseException) -> bool:
    current: Optional[BaseException] = exc
    while current is not None:
        if isinstance(current, ssl.SSLError):
            return True
        current = current.__cause__ or current.__context__
    return "ssl" in str(exc).lower() or "certificate" in str(exc).lower()


def map_transport_error(exc: Exception, url: str) -> TransportError:
    """Translate an httpx failure into the package's transport error classes."""
    request_info = {"url": url}
    if isinstance(exc, httpx.TimeoutException):
        return TimeoutError(f"Request timed out: {str(exc) or type(exc).__name__}", request_info)
    if isinstance(exc, httpx.InvalidURL):
        return NetworkError(f"Invalid URL '{url}': {exc}", request_info)
    if isinstance(exc, httpx.ConnectError) and _is_ssl_failure(exc):
        return SSLError(f"SSL error: {exc}", request_info)
    if isinstance(exc, ValueError):
        return TransportError(f"Invalid request for '{url}': {exc}", request_info)
    if isinstance(exc, (httpx.NetworkError, httpx.UnsupportedProtocol)):
        return NetworkError(f"Failed to contact API endpoint: {exc}", request_info)
    return TransportError(f"Request failed: {exc}", request_info)


class HttpExecutor:
    """
    Sends prepared requests over a shared httpx client.

    Use as an async context manager so the underlying connection pool is
    closed when the run ends.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        follow_redirects: bool = False,
        debug: bool = False,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the executor.

        Args:
            timeout: Hard limit in seconds for each request
            verify_ssl: Whether to verify TLS certificates
            follow_redirects: Whether to follow 3xx responses
            debug: Log requests and responses at DEBUG level
            client: Pre-built httpx client; owned by the caller when given
        """
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.follow_redirects = follow_redirects
        self.debug = debug
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            verify=verify_ssl,
            follow_redirects=follow_redirects,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the client session if this executor created it."""
        if self._owns_client:
            await self.client.aclose()

    async def send(self, prepared: PreparedRequest) -> ExecutionResult:
        """
        Send a request and capture the response.

        Raises:
            TransportError: If no HTTP response was received
        """
        if self.debug:
            log_request(prepared.url, prepared.method.value, prepared.headers, prepared.content)

        start_time = time.perf_counter()
        try:
            # Header values that cannot be encoded fail while building, before any I/O
            request = self.client.build_request(
                prepared.method.value,
                prepared.url,
                headers=prepared.header_items(),
                content=prepared.content,
                timeout=httpx.Timeout(self.timeout),
            )
            response = await self.client.send(request)
        except (httpx.RequestError, httpx.InvalidURL, ValueError) as e:
            raise map_transport_error(e, prepared.url) from e
        elapsed_ms = (time.perf_counter() - start_time) * 1000.0

        if self.debug:
            log_response(response)

        return ExecutionResult(
            actual_status=response.status_code,
            actual_body=response.text,
            elapsed_ms=elapsed_ms,
            size_bytes=len(response.content),
        )

    async def execute(self, prepared: PreparedRequest) -> ExecutionResult:
        """Send a request, recording transport failures instead of raising them."""
        try:
            return await self.send(prepared)
        except TransportError as e:
            logger.warning(f"{prepared.method.value} {prepared.url} failed: {e.message}")
            return ExecutionResult(transport_error=e.message, error_kind=type(e).__name__)
