"""
Request building for apitester.

This module turns a ``RequestSpec`` into a ``PreparedRequest``: the final,
ordered header list and the payload to transmit. ``build_request`` is a pure
function of its inputs; ``RequestBuilder`` wraps it with a fluent API so the
same default headers and auth header can be applied to many requests.
"""

from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from .models import HttpMethod, RequestSpec


class PreparedRequest(BaseModel):
    """A request ready to be handed to the HTTP executor."""

    model_config = ConfigDict(frozen=True)

    method: HttpMethod
    url: str
    headers: Tuple[str, ...] = ()
    content: Optional[str] = None

    def header_items(self) -> List[Tuple[str, str]]:
        """
        Split each header line at its first colon for the transport.

        Lines without a colon become a header with an empty value.
        """
        items = []
        for line in self.headers:
            name, _, value = line.partition(":")
            items.append((name.strip(), value.strip()))
        return items


def clean_header_lines(lines: Sequence[str]) -> List[str]:
    """Trim each line and drop the ones left empty."""
    return [line.strip() for line in lines if line.strip()]


def should_send_body(method: HttpMethod, body: str) -> bool:
    return method is not HttpMethod.GET and bool(body.strip())


def build_request(
    spec: RequestSpec,
    default_headers: Sequence[str] = (),
    auth_header: Optional[str] = None,
) -> PreparedRequest:
    """
    Build the request to transmit.

    Header order is default headers, then the request's own headers, then
    the auth header. ``auth_header`` overrides the one carried by ``spec``.
    The body is attached only for non-GET requests with a non-blank body.
    """
    headers = clean_header_lines(default_headers)
    headers.extend(clean_header_lines(spec.headers))

    auth = auth_header if auth_header is not None else spec.auth_header
    if auth and auth.strip():
        headers.append(auth.strip())

    content = spec.body if should_send_body(spec.method, spec.body) else None

    return PreparedRequest(
        method=spec.method,
        url=spec.url,
        headers=tuple(headers),
        content=content,
    )


class RequestBuilder:
    """Builder class for prepared requests with fluent API."""

    def __init__(self):
        """Initialize the builder with no default or auth headers."""
        self._default_headers: List[str] = []
        self._auth_header: Optional[str] = None

    def with_default_headers(self, headers: Sequence[str]) -> "RequestBuilder":
        """Set the headers sent ahead of every request's own headers."""
        self._default_headers = list(headers)
        return self

    def add_default_header(self, line: str) -> "RequestBuilder":
        """Append a single default header line."""
        self._default_headers.append(line)
        return self

    def with_auth(self, auth_header: Optional[str]) -> "RequestBuilder":
        """Set the auth header appended last to every request."""
        self._auth_header = auth_header
        return self

    @property
    def default_headers(self) -> Tuple[str, ...]:
        return tuple(self._default_headers)

    @property
    def auth_header(self) -> Optional[str]:
        return self._auth_header

    def build(self, spec: RequestSpec) -> PreparedRequest:
        """Build a prepared request for ``spec`` with the configured headers."""
        return build_request(spec, self._default_headers, self._auth_header)
