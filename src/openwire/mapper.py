"""Request mapping: typed descriptors to wire requests.

JSON endpoints build a body dict in three passes: required fields, present
optional fields, then the descriptor's ``extra`` overlay (last write wins).
File-carrying endpoints build the same logical field set and route it
through the multipart encoder, followed by the file parts.
"""

from __future__ import annotations

from decimal import Decimal
import json
import logging
import math
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from openwire import _http
from openwire._utils import text_format_for_model
from openwire.descriptors import is_present
from openwire.errors import InvalidDescriptorError
from openwire.models import Header, WireRequest
from openwire.multipart import MultipartField, encode_multipart, file_part

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from openwire.config import Config
    from openwire.descriptors import (
        ImageEditRequest,
        ImageGenerateRequest,
        ModerationRequest,
        ResponsesRequest,
        SpeechRequest,
        TranscriptionRequest,
        VideoCreateRequest,
    )
    from openwire.multipart import MultipartFile

logger = logging.getLogger(__name__)

_RESPONSES_OPTIONAL_KEYS = (
    "instructions",
    "metadata",
    "temperature",
    "top_p",
    "max_output_tokens",
    "previous_response_id",
    "reasoning",
    "text",
    "tools",
    "tool_choice",
    "truncation",
    "include",
    "parallel_tool_calls",
    "audio",
    "store",
    "user",
    "service_tier",
)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return not value
    return False


def _require(descriptor: object, *names: str) -> None:
    """Raise ``InvalidDescriptorError`` for the first missing/empty field."""
    kind = type(descriptor).__name__
    for name in names:
        if _is_missing(getattr(descriptor, name)):
            raise InvalidDescriptorError(
                f"{kind}.{name} is required",
                field=name,
                hint=f"Set {name}=... to a non-empty value.",
            )


def _set_present(
    body: dict[str, Any], descriptor: object, keys: Sequence[str]
) -> None:
    for key in keys:
        value = getattr(descriptor, key)
        if is_present(value):
            body[key] = value


def _overlay(body: dict[str, Any], extra: Mapping[str, Any]) -> dict[str, Any]:
    for key, value in extra.items():
        body[key] = value
    return body


def format_form_value(value: Any) -> str:
    """Render a field value as multipart text.

    Floats use plain locale-independent decimal notation (no exponent),
    booleans are lowercase JSON literals, and strings pass through
    unchanged. Other values are compact JSON.

    Raises:
        InvalidDescriptorError: A float (top-level or nested) is NaN or
            infinite.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidDescriptorError(
                f"Form value {value!r} is not a finite number"
            )
        return format(Decimal(repr(value)), "f")
    try:
        return json.dumps(value, separators=(",", ":"), allow_nan=False)
    except ValueError as e:
        raise InvalidDescriptorError(
            f"Form value contains a non-finite number: {e}"
        ) from e



def _form_fields(form: Mapping[str, Any]) -> list[MultipartField]:
    return [
        MultipartField(name, format_form_value(value)) for name, value in form.items()
    ]


# =============================================================================
# Body builders (pure)
# =============================================================================


def responses_body(r: ResponsesRequest) -> dict[str, Any]:
    """Build the JSON body for ``POST /responses``."""
    _require(r, "model", "input")
    body: dict[str, Any] = {"model": r.model, "input": r.input}
    _set_present(body, r, _RESPONSES_OPTIONAL_KEYS)
    if isinstance(r.text, type) and issubclass(r.text, BaseModel):
        body["text"] = text_format_for_model(r.text)
    return _overlay(body, r.extra)


def image_generation_body(r: ImageGenerateRequest) -> dict[str, Any]:
    _require(r, "model", "prompt")
    body: dict[str, Any] = {"model": r.model, "prompt": r.prompt}
    _set_present(body, r, ("n", "size", "quality", "style", "response_format", "user"))
    return _overlay(body, r.extra)


def moderation_body(r: ModerationRequest) -> dict[str, Any]:
    _require(r, "model", "input")
    return _overlay({"model": r.model, "input": r.input}, r.extra)


def speech_body(r: SpeechRequest) -> dict[str, Any]:
    _require(r, "model", "input", "voice")
    body: dict[str, Any] = {"model": r.model, "input": r.input, "voice": r.voice}
    _set_present(body, r, ("instructions", "response_format", "speed"))
    return _overlay(body, r.extra)


def video_body(r: VideoCreateRequest) -> dict[str, Any]:
    _require(r, "model", "prompt")
    body: dict[str, Any] = {"model": r.model, "prompt": r.prompt}
    _set_present(
        body, r, ("aspect_ratio", "format", "duration", "seed", "user", "metadata")
    )
    return _overlay(body, r.extra)


def image_edit_form(
    r: ImageEditRequest,
) -> tuple[list[MultipartField], list[MultipartFile]]:
    """Build the multipart fields and files for ``POST /images/edits``.

    Reads the image (and optional mask) from disk.
    """
    _require(r, "model", "image_path")
    form: dict[str, Any] = {"model": r.model}
    _set_present(
        form,
        r,
        ("prompt", "n", "size", "quality", "style", "output_format", "user"),
    )
    _overlay(form, r.extra)

    files = [file_part("image", r.image_path)]
    if r.mask_path is not None:
        files.append(file_part("mask", r.mask_path))
    return _form_fields(form), files


def transcription_form(
    r: TranscriptionRequest,
) -> tuple[list[MultipartField], list[MultipartFile]]:
    """Build the multipart fields and files for ``POST /audio/transcriptions``."""
    _require(r, "model", "file_path")
    form: dict[str, Any] = {"model": r.model}
    _set_present(form, r, ("language", "prompt", "response_format", "temperature"))
    _overlay(form, r.extra)
    return _form_fields(form), [file_part("file", r.file_path)]


# =============================================================================
# Wire request assembly
# =============================================================================


class RequestMapper:
    """Turns descriptors into ``WireRequest`` objects for one configuration."""

    def __init__(self, config: Config) -> None:
        """Bind the mapper to a configuration (credentials and base URL)."""
        self.config = config

    def headers(self, content_type: str) -> tuple[Header, ...]:
        """Return the common headers for a request with *content_type*."""
        headers: list[Header] = [
            ("Authorization", f"Bearer {self.config.api_key}"),
            ("Content-Type", content_type),
        ]
        if self.config.organization:
            headers.append(("OpenAI-Organization", self.config.organization))
        if self.config.project:
            headers.append(("OpenAI-Project", self.config.project))
        headers.append(("User-Agent", _http.USER_AGENT))
        return tuple(headers)

    def _json_request(self, path: str, body: dict[str, Any]) -> WireRequest:
        return self._post(
            path,
            json.dumps(body).encode("utf-8"),
            _http.JSON_CONTENT_TYPE,
        )

    def _multipart_request(
        self,
        path: str,
        fields: list[MultipartField],
        files: list[MultipartFile],
    ) -> WireRequest:
        body, content_type = encode_multipart(fields, files)
        return self._post(path, body, content_type)

    def _post(self, path: str, body: bytes, content_type: str) -> WireRequest:
        request = WireRequest(
            method="POST",
            url=f"{self.config.base_url}{path}",
            headers=self.headers(content_type),
            body=body,
            content_type=content_type,
        )
        logger.debug(
            "Built %s %s (%s, %d bytes)",
            request.method,
            request.url,
            content_type.split(";", 1)[0],
            len(body),
        )
        return request

    def responses(self, r: ResponsesRequest) -> WireRequest:
        return self._json_request(_http.RESPONSES_PATH, responses_body(r))

    def image_generation(self, r: ImageGenerateRequest) -> WireRequest:
        return self._json_request(
            _http.IMAGE_GENERATIONS_PATH, image_generation_body(r)
        )

    def image_edit(self, r: ImageEditRequest) -> WireRequest:
        fields, files = image_edit_form(r)
        return self._multipart_request(_http.IMAGE_EDITS_PATH, fields, files)

    def moderation(self, r: ModerationRequest) -> WireRequest:
        return self._json_request(_http.MODERATIONS_PATH, moderation_body(r))

    def speech(self, r: SpeechRequest) -> WireRequest:
        return self._json_request(_http.SPEECH_PATH, speech_body(r))

    def transcription(self, r: TranscriptionRequest) -> WireRequest:
        fields, files = transcription_form(r)
        return self._multipart_request(_http.TRANSCRIPTIONS_PATH, fields, files)

    def video(self, r: VideoCreateRequest) -> WireRequest:
        return self._json_request(_http.VIDEOS_PATH, video_body(r))
