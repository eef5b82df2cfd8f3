"""
Append-only request history.

Every executed request (ad-hoc, prefilled or suite case) is appended to a
flat text log as one block terminated by ``---``. The log is a write sink;
nothing in the suite engine reads it back.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pydantic import BaseModel, Field

from .models import ExecutionResult

logger = logging.getLogger("apitester.history")

ENTRY_SEPARATOR = "---"
FILTER_CONTEXT_LINES = 3


class HistoryEntry(BaseModel):
    """One executed request as written to the history log."""

    timestamp: datetime = Field(default_factory=datetime.now)
    method: str
    url: str
    headers: List[str] = Field(default_factory=list)
    body: str = ""
    status: Optional[int] = None
    elapsed_seconds: Optional[float] = None
    size_bytes: Optional[int] = None
    response: str = ""

    @classmethod
    def from_result(
        cls,
        method: str,
        url: str,
        headers: Sequence[str],
        body: str,
        result: ExecutionResult,
    ) -> "HistoryEntry":
        if result.ok:
            return cls(
                method=method,
                url=url,
                headers=list(headers),
                body=body,
                status=result.actual_status,
                elapsed_seconds=result.elapsed_seconds,
                size_bytes=result.size_bytes,
                response=result.actual_body,
            )
        return cls(
            method=method,
            url=url,
            headers=list(headers),
            body=body,
            response=f"Error: {result.transport_error}",
        )

    def render(self) -> str:
        def or_na(value) -> str:
            return "N/A" if value is None else str(value)

        time_text = None if self.elapsed_seconds is None else f"{self.elapsed_seconds:.3f}"
        headers_text = "\n".join(self.headers) if self.headers else "(none)"
        lines = [
            f"[{self.timestamp:%Y-%m-%d %H:%M:%S}] {self.method} {self.url}",
            "Headers:",
            headers_text,
            "Body:",
            self.body or "(none)",
            f"Status: {or_na(self.status)}",
            f"Time: {or_na(time_text)}",
            f"Size: {or_na(self.size_bytes)}",
            "Response:",
            self.response,
            ENTRY_SEPARATOR,
        ]
        return "\n".join(lines) + "\n"


def append_entry(path: Union[str, Path], entry: HistoryEntry) -> None:
    """Append an entry to the history log, creating the file if needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(entry.render())
    logger.debug(f"Recorded {entry.method} {entry.url} in {path}")


def read_history(path: Union[str, Path]) -> Optional[str]:
    """Return the whole log, or None when no history exists."""
    path = Path(path)
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")


def filter_history(
    text: str, keyword: str, context: int = FILTER_CONTEXT_LINES
) -> List[str]:
    """
    Case-insensitive keyword search with surrounding context.

    Returns the matching lines plus ``context`` lines before and after each
    match, in file order. Non-adjacent groups are separated by ``--``.
    """
    lines = text.splitlines()
    needle = keyword.lower()
    keep = set()
    for index, line in enumerate(lines):
        if needle in line.lower():
            keep.update(range(max(0, index - context), min(len(lines), index + context + 1)))

    output: List[str] = []
    previous = None
    for index in sorted(keep):
        if previous is not None and index != previous + 1:
            output.append("--")
        output.append(lines[index])
        previous = index
    return output


def clear_history(path: Union[str, Path]) -> None:
    """Truncate the history log."""
    path = Path(path)
    if path.exists():
        path.write_text("", encoding="utf-8")
