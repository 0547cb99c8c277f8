"""Domain models for the wire layer: fully encoded requests and responses."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import Any

Header = tuple[str, str]


@dataclass(frozen=True)
class WireRequest:
    """A fully built HTTP request, ready for the transport."""

    method: str
    url: str
    headers: tuple[Header, ...]
    body: bytes
    content_type: str

    def header(self, name: str) -> str | None:
        """Return the first header value named *name* (case-insensitive)."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None

    def json(self) -> Any:
        """Decode a JSON body (for inspection and tests)."""
        return json.loads(self.body)


@dataclass(frozen=True)
class WireResponse:
    """Status, headers, and raw body of one HTTP exchange."""

    status_code: int
    content_type: str = ""
    headers: tuple[Header, ...] = field(default_factory=tuple)
    body: bytes = b""

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json.loads(self.body)
