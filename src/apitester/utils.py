"""
Utility functions for apitester.
"""

import logging
import shlex
from typing import Any, Optional, Sequence

import httpx
import orjson

logger = logging.getLogger("apitester")

MAX_LOGGED_BODY = 1000


def serialize_json(obj: Any, pretty: bool = False) -> str:
    """
    Serialize an object to a JSON string using orjson.
    """
    option = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(obj, option=option).decode("utf-8")


def deserialize_json(json_str: Any) -> Any:
    """
    Deserialize a JSON string (or bytes) to an object using orjson.
    """
    return orjson.loads(json_str)


def pretty_json(text: str) -> Optional[str]:
    """Return ``text`` re-indented if it is valid JSON, otherwise None."""
    if not text.strip():
        return None
    try:
        return serialize_json(deserialize_json(text), pretty=True)
    except orjson.JSONDecodeError:
        return None


def _truncate(text: str) -> str:
    if len(text) > MAX_LOGGED_BODY:
        return f"{text[:MAX_LOGGED_BODY]}... (truncated)"
    return text


def log_request(url: str, method: str, headers: Sequence[str], body: Optional[str]) -> None:
    """
    Log details of an outgoing HTTP request.
    """
    logger.debug(f"> {method} {url}")
    for line in headers:
        logger.debug(f"> {line}")
    if body:
        logger.debug(f"> Body: {_truncate(body)}")


def log_response(response: httpx.Response) -> None:
    """
    Log details of an HTTP response.
    """
    logger.debug(f"< HTTP {response.status_code} {response.reason_phrase}")
    for name, value in response.headers.items():
        logger.debug(f"< {name}: {value}")
    logger.debug(f"< Body: {_truncate(response.text)}")


def format_curl_command(
    method: str,
    url: str,
    headers: Sequence[str],
    body: Optional[str],
    timeout: Optional[float] = None,
) -> str:
    """
    Format a curl command equivalent to the HTTP request.

    Args:
        method: HTTP method
        url: Request URL
        headers: Raw "Name: Value" header lines
        body: Request body, omitted when None or empty
        timeout: Value for ``--max-time``

    Returns:
        Formatted curl command
    """
    cmd_parts = ["curl", "-s", "-X", method]

    if timeout is not None:
        cmd_parts.extend(["--max-time", f"{timeout:g}"])

    for line in headers:
        cmd_parts.extend(["-H", shlex.quote(line)])

    if body:
        cmd_parts.extend(["-d", shlex.quote(body)])

    cmd_parts.append(shlex.quote(url))

    return " ".join(cmd_parts)
