"""Client facade: descriptor in, parsed payload out."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from openwire import _http
from openwire.config import Config
from openwire.errors import TransportError
from openwire.mapper import RequestMapper
from openwire.transport import HttpxTransport, Transport, raise_for_status

if TYPE_CHECKING:
    from openwire.descriptors import (
        ImageEditRequest,
        ImageGenerateRequest,
        ModerationRequest,
        ResponsesRequest,
        SpeechRequest,
        TranscriptionRequest,
        VideoCreateRequest,
    )
    from openwire.models import WireRequest, WireResponse

logger = logging.getLogger(__name__)


class OpenAIClient:
    """Async client for the OpenAI REST endpoints covered by openwire.

    Create once per process and close with ``aclose()`` (or use it as an
    async context manager). JSON endpoints return the parsed response dict;
    use ``openwire.navigator`` to pull payloads out of it.

    Example:
        async with OpenAIClient() as client:
            response = await client.create_response(
                ResponsesRequest(model="gpt-4.1-mini", input="Say hi")
            )
            print(first_text_output(response))
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        transport: Transport | None = None,
    ) -> None:
        """Resolve configuration and bind a transport (httpx by default)."""
        self.config = config if config is not None else Config()
        self.mapper = RequestMapper(self.config)
        self._transport: Transport = transport or HttpxTransport(
            timeout_s=self.config.timeout_s
        )

    async def execute(self, request: WireRequest) -> WireResponse:
        """Run *request* through the transport, failing on non-2xx status."""
        response = await self._transport.execute(request)
        return raise_for_status(response, endpoint=_endpoint(self.config, request))

    async def _execute_json(self, request: WireRequest) -> dict[str, Any]:
        response = await self.execute(request)
        endpoint = _endpoint(self.config, request)
        try:
            parsed = response.json()
        except ValueError as e:
            raise TransportError(
                f"{endpoint} returned a non-JSON body",
                status_code=response.status_code,
                body=response.body,
                endpoint=endpoint,
            ) from e
        if not isinstance(parsed, dict):
            raise TransportError(
                f"{endpoint} returned JSON that is not an object",
                status_code=response.status_code,
                body=response.body,
                endpoint=endpoint,
            )
        return parsed

    async def create_response(self, r: ResponsesRequest) -> dict[str, Any]:
        return await self._execute_json(self.mapper.responses(r))

    async def generate_image(self, r: ImageGenerateRequest) -> dict[str, Any]:
        return await self._execute_json(self.mapper.image_generation(r))

    async def edit_image(self, r: ImageEditRequest) -> dict[str, Any]:
        return await self._execute_json(self.mapper.image_edit(r))

    async def moderate(self, r: ModerationRequest) -> dict[str, Any]:
        return await self._execute_json(self.mapper.moderation(r))

    async def synthesize_speech(self, r: SpeechRequest) -> bytes:
        """Return the raw audio bytes produced for *r*."""
        response = await self.execute(self.mapper.speech(r))
        return response.body

    async def transcribe(self, r: TranscriptionRequest) -> str:
        """Return the raw transcription body (JSON, text, SRT or VTT)."""
        response = await self.execute(self.mapper.transcription(r))
        return response.text

    async def transcribe_json(self, r: TranscriptionRequest) -> dict[str, Any]:
        """Transcribe and parse a JSON (or verbose_json) response."""
        return await self._execute_json(self.mapper.transcription(r))

    async def create_video(self, r: VideoCreateRequest) -> dict[str, Any]:
        return await self._execute_json(self.mapper.video(r))

    async def aclose(self) -> None:
        """Tear down the transport."""
        try:
            await self._transport.aclose()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            # Cleanup should never mask the primary failure.
            logger.warning("Transport cleanup failed: %s", exc)

    async def __aenter__(self) -> OpenAIClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def _endpoint(config: Config, request: WireRequest) -> str:
    """Return the endpoint path of *request*, e.g. ``/responses``."""
    base = config.base_url or _http.DEFAULT_BASE_URL
    return request.url.removeprefix(base) or request.url
