"""Typed request descriptors, one per endpoint family.

Optional fields are tri-state:

- ``None``: absent, never sent.
- a value: present, sent under the field's wire key.
- ``ApiDefault(value)``: the API's documented default. Not sent; the server
  applies the same default when the key is omitted.

Every descriptor also carries ``extra``, an ordered mapping merged into the
wire body after all typed fields. A key in ``extra`` replaces a typed field
of the same name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pydantic import BaseModel

T = TypeVar("T")


@dataclass(frozen=True)
class ApiDefault(Generic[T]):
    """Marks an optional field left at the API's documented default."""

    value: T


def is_present(value: Any) -> bool:
    """Return True when an optional field should be serialized."""
    return value is not None and not isinstance(value, ApiDefault)


def effective_value(value: Any) -> Any:
    """Return the value the server will use, unwrapping ``ApiDefault``."""
    if isinstance(value, ApiDefault):
        return value.value
    return value


@dataclass(frozen=True)
class ResponsesRequest:
    """POST /responses: text (and tool-driven) generation.

    ``input`` is either a plain string or a list of input items, see
    :func:`user_message`. ``text`` accepts a raw text-configuration dict or a
    Pydantic model class, which becomes a strict ``json_schema`` format.
    """

    model: str
    input: Any
    instructions: str | None = None
    metadata: dict[str, Any] | None = None
    temperature: float | ApiDefault[float] | None = ApiDefault(1.0)
    top_p: float | ApiDefault[float] | None = ApiDefault(1.0)
    max_output_tokens: int | None = None
    previous_response_id: str | None = None
    reasoning: dict[str, Any] | None = None
    text: dict[str, Any] | type[BaseModel] | None = None
    tools: list[dict[str, Any]] | None = None
    tool_choice: str | dict[str, Any] | None = None
    truncation: str | None = None
    include: list[str] | None = None
    parallel_tool_calls: bool | None = None
    audio: dict[str, Any] | None = None
    store: bool | None = None
    user: str | None = None
    service_tier: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ImageGenerateRequest:
    """POST /images/generations: text-to-image."""

    model: str
    prompt: str
    n: int | ApiDefault[int] | None = ApiDefault(1)
    size: str | None = None
    quality: str | None = None
    style: str | None = None
    response_format: str | None = None
    user: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ImageEditRequest:
    """POST /images/edits: restyle or modify an image (multipart).

    Transparent areas of the optional PNG ``mask_path`` mark the editable
    region.
    """

    model: str
    image_path: str
    mask_path: str | None = None
    prompt: str | None = None
    n: int | ApiDefault[int] | None = ApiDefault(1)
    size: str | None = None
    quality: str | None = None
    style: str | None = None
    output_format: str | None = None
    user: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ModerationRequest:
    """POST /moderations: classify one string or a list of strings."""

    model: str
    input: str | list[str]
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SpeechRequest:
    """POST /audio/speech: text-to-speech. The response body is raw audio."""

    model: str
    input: str
    voice: str
    instructions: str | None = None
    response_format: str | None = None
    speed: float | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TranscriptionRequest:
    """POST /audio/transcriptions: speech-to-text (multipart)."""

    model: str
    file_path: str
    language: str | None = None
    prompt: str | None = None
    #: ``json``, ``text``, ``srt``, ``verbose_json`` or ``vtt``.
    response_format: str | None = None
    temperature: float | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class VideoCreateRequest:
    """POST /videos: start a video generation job."""

    model: str
    prompt: str
    aspect_ratio: str | None = None
    format: str | None = None
    duration: int | None = None
    seed: int | None = None
    user: str | None = None
    metadata: dict[str, Any] | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)


def input_text(text: str) -> dict[str, str]:
    """Build an ``input_text`` content part."""
    return {"type": "input_text", "text": text}


def input_image(image_url: str, *, detail: str | None = None) -> dict[str, str]:
    """Build an ``input_image`` content part from an http(s) or data URL."""
    part = {"type": "input_image", "image_url": image_url}
    if detail is not None:
        part["detail"] = detail
    return part


def user_message(*parts: str | dict[str, Any]) -> dict[str, Any]:
    """Build a user input item; bare strings become ``input_text`` parts."""
    content = [input_text(p) if isinstance(p, str) else p for p in parts]
    return {"role": "user", "content": content}
