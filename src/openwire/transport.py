"""Transport: executes wire requests over HTTP.

The core never depends on this module; anything satisfying ``Transport``
can be plugged into the client. ``HttpxTransport`` owns one lazily created
``httpx.AsyncClient``, initialized on first use and torn down by
``aclose()``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx

from openwire._http import RETRYABLE_STATUS_CODES, is_success
from openwire.errors import OpenwireError, TransportError, _walk_exception_chain
from openwire.models import WireResponse

if TYPE_CHECKING:
    from openwire.models import WireRequest

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Minimal transport protocol: execute one request, release resources."""

    async def execute(self, request: WireRequest) -> WireResponse:
        """Perform the HTTP exchange and return the raw response."""
        ...

    async def aclose(self) -> None:
        """Release any underlying connections."""
        ...


def wrap_transport_error(exc: BaseException, *, endpoint: str) -> TransportError:
    """Map an exception raised while sending into a ``TransportError``.

    Connection failures and timeouts anywhere in the exception chain are
    marked retryable. Status-level failures never get here: the transport
    returns every response and ``raise_for_status`` classifies it.
    """
    retryable = any(
        isinstance(e, (httpx.TimeoutException, httpx.TransportError))
        for e in _walk_exception_chain(exc)
    )
    msg = f"HTTP exchange with {endpoint} failed"
    cause = str(exc)
    return TransportError(
        f"{msg}: {cause}" if cause else msg,
        retryable=retryable,
        endpoint=endpoint,
    )


def raise_for_status(response: WireResponse, *, endpoint: str) -> WireResponse:
    """Raise ``TransportError`` for any status outside 200-299."""
    if is_success(response.status_code):
        return response
    status = response.status_code
    hint = None
    if status in {401, 403}:
        hint = "Check credentials/permissions (try setting OPENAI_API_KEY)."
    raise TransportError(
        f"{endpoint} returned HTTP {status}: {response.text[:500]}",
        hint=hint,
        status_code=status,
        retryable=status in RETRYABLE_STATUS_CODES,
        body=response.body,
        endpoint=endpoint,
    )


class HttpxTransport:
    """``Transport`` backed by ``httpx.AsyncClient``."""

    def __init__(
        self, *, timeout_s: float = 300.0, client: httpx.AsyncClient | None = None
    ) -> None:
        """Use *client* when given; otherwise create one on first request."""
        self.timeout_s = timeout_s
        self._client: httpx.AsyncClient | None = client

    def _get_client(self) -> httpx.AsyncClient:
        """Lazily initialize and return the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_s)
        return self._client

    async def execute(self, request: WireRequest) -> WireResponse:
        """Send *request* and return its response, whatever the status."""
        client = self._get_client()
        try:
            resp = await client.request(
                request.method,
                request.url,
                headers=list(request.headers),
                content=request.body,
            )
        except asyncio.CancelledError:
            raise
        except OpenwireError:
            raise
        except Exception as e:
            raise wrap_transport_error(e, endpoint=request.url) from e

        logger.debug("%s %s -> %d", request.method, request.url, resp.status_code)
        return WireResponse(
            status_code=resp.status_code,
            content_type=resp.headers.get("content-type", ""),
            headers=tuple(resp.headers.items()),
            body=resp.content,
        )

    async def aclose(self) -> None:
        """Close underlying async client resources."""
        client = self._client
        if client is None:
            return
        self._client = None
        await client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
