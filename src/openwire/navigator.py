"""Response navigation: locate payloads inside a Responses API envelope.

The envelope carries an optional top-level ``error`` object and an ordered
``output`` list of tagged items. Every extraction here:

- raises ``RemoteError`` first when ``error`` is non-null,
- scans ``output`` once, in order, and stops at the first match,
- never falls back to a later item and never aggregates matches.

Known limitation: ``first_text_output`` reads only the first content entry
of the first message item; additional content blocks are ignored.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError

from openwire.codec import decode_base64
from openwire.errors import (
    MalformedResultError,
    MissingResultError,
    NoContentError,
    NoMessageBlockError,
    NoTextFieldError,
    NoToolCallError,
    RemoteError,
    ResponseShapeError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

ModelT = TypeVar("ModelT", bound=BaseModel)

IMAGE_GENERATION_TOOL = "image_generation"
_CALL_SUFFIX = "_call"
_GENERIC_TOOL_CALL = "tool_call"


class ItemKind(Enum):
    """Variants of a response output item, keyed by its ``type`` discriminant."""

    MESSAGE = "message"
    TOOL_CALL = "tool_call"
    SPECIALIZED_TOOL_CALL = "specialized_tool_call"
    REASONING = "reasoning"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class OutputItem:
    """A classified, read-only view of one ``output`` entry."""

    kind: ItemKind
    type: str | None
    raw: Any

    def field(self, name: str) -> Any:
        """Return ``raw[name]`` or None when absent or ``raw`` is not an object."""
        if isinstance(self.raw, Mapping):
            return self.raw.get(name)
        return None

    @property
    def tool_name(self) -> str | None:
        """Tool this item reports on, for either tool-call form."""
        if self.kind is ItemKind.TOOL_CALL:
            name = self.field("tool_name")
            return name if isinstance(name, str) else None
        if self.kind is ItemKind.SPECIALIZED_TOOL_CALL and self.type is not None:
            return self.type.removesuffix(_CALL_SUFFIX)
        return None

    def matches_tool(self, tool_type: str) -> bool:
        """Specialized form ``<tool_type>_call``, or generic ``tool_call`` by name."""
        if self.type == tool_type + _CALL_SUFFIX:
            return True
        return self.kind is ItemKind.TOOL_CALL and self.field("tool_name") == tool_type


def classify_item(raw: Any) -> OutputItem:
    """Tag a raw output entry with its variant."""
    item_type = raw.get("type") if isinstance(raw, Mapping) else None
    if not isinstance(item_type, str):
        return OutputItem(ItemKind.UNKNOWN, None, raw)

    if item_type == "message":
        kind = ItemKind.MESSAGE
    elif item_type == "reasoning":
        kind = ItemKind.REASONING
    elif item_type == _GENERIC_TOOL_CALL:
        kind = ItemKind.TOOL_CALL
    elif item_type.endswith(_CALL_SUFFIX):
        kind = ItemKind.SPECIALIZED_TOOL_CALL
    else:
        kind = ItemKind.UNKNOWN
    return OutputItem(kind, item_type, raw)


def raise_for_error(response: Mapping[str, Any]) -> None:
    """Raise ``RemoteError`` when the envelope carries a non-null ``error``."""
    err = response.get("error") if isinstance(response, Mapping) else None
    if err is None:
        return

    error_type = "error"
    message = "unknown error"
    if isinstance(err, Mapping):
        if isinstance(err.get("type"), str):
            error_type = err["type"]
        if isinstance(err.get("message"), str):
            message = err["message"]
    elif isinstance(err, str) and err:
        message = err
    raise RemoteError(error_type, message)


def _output_list(response: Mapping[str, Any]) -> list[Any]:
    output = response.get("output") if isinstance(response, Mapping) else None
    return output if isinstance(output, list) else []


def iter_output_items(response: Mapping[str, Any]) -> Iterator[OutputItem]:
    """Yield classified output items in order; nothing when ``output`` is absent."""
    for raw in _output_list(response):
        yield classify_item(raw)


def first_message_item(response: Mapping[str, Any]) -> OutputItem:
    """Return the first ``message`` item.

    Raises:
        RemoteError: The envelope carries an error.
        NoMessageBlockError: ``output`` is absent, empty, or has no message.
    """
    raise_for_error(response)
    if not _output_list(response):
        raise NoMessageBlockError(
            "Response contains no output items", expected="message item"
        )
    for item in iter_output_items(response):
        if item.kind is ItemKind.MESSAGE:
            return item
    raise NoMessageBlockError(
        "No message block found in output", expected="message item"
    )


def first_text_output(response: Mapping[str, Any]) -> str:
    """Return the ``text`` of the first content entry of the first message.

    Raises:
        RemoteError: The envelope carries an error.
        NoMessageBlockError: No message item in ``output``.
        NoContentError: The message has no non-empty ``content`` list.
        NoTextFieldError: The first content entry has no string ``text``.
    """
    message = first_message_item(response)

    content = message.field("content")
    if not isinstance(content, list) or not content:
        raise NoContentError(
            "Message block contains no content entries",
            expected="non-empty content list",
        )

    first = content[0]
    text = first.get("text") if isinstance(first, Mapping) else None
    if not isinstance(text, str):
        raise NoTextFieldError(
            "No text field found in the first content entry",
            expected="string 'text' field",
        )
    return text


def first_tool_call(response: Mapping[str, Any], tool_type: str) -> OutputItem:
    """Return the first output item produced by *tool_type*.

    Matches ``<tool_type>_call`` items and generic ``tool_call`` items whose
    ``tool_name`` equals *tool_type*, whichever comes first.

    Raises:
        RemoteError: The envelope carries an error.
        NoToolCallError: Nothing matches (including absent/empty ``output``).
    """
    raise_for_error(response)
    for item in iter_output_items(response):
        if item.matches_tool(tool_type):
            return item
    raise NoToolCallError(
        f"No tool call found for tool type {tool_type!r}",
        tool_type=tool_type,
        expected=f"{tool_type}{_CALL_SUFFIX} or tool_call with tool_name={tool_type!r}",
    )


def tool_call_result(item: OutputItem | Mapping[str, Any]) -> str:
    """Return the encoded ``result`` of a tool-call item.

    A string result is returned as is; for a list, the first element must be
    a string and is returned.

    Raises:
        MissingResultError: No ``result`` field.
        MalformedResultError: Any other shape.
    """
    raw = item.raw if isinstance(item, OutputItem) else item
    label = _item_label(raw)
    if not isinstance(raw, Mapping) or "result" not in raw:
        raise MissingResultError(f"{label} has no result field", expected="result")

    result = raw["result"]
    if isinstance(result, str):
        return result
    if isinstance(result, list) and result and isinstance(result[0], str):
        return result[0]
    raise MalformedResultError(
        f"{label} result is neither a string nor a non-empty list of strings "
        f"(got {type(result).__name__})",
        expected="string or list of strings",
    )


def first_image_output(response: Mapping[str, Any]) -> str:
    """Return the base64 payload of the first image-generation call."""
    return tool_call_result(first_tool_call(response, IMAGE_GENERATION_TOOL))


def first_image_bytes(response: Mapping[str, Any]) -> bytes:
    """Return the decoded bytes of the first image-generation call."""
    return decode_base64(first_image_output(response))


def first_structured_output(response: Mapping[str, Any], model: type[ModelT]) -> ModelT:
    """Validate the first text output as JSON shaped like *model*.

    Raises:
        ResponseShapeError: The text is not valid JSON for *model*.
    """
    text = first_text_output(response)
    try:
        return model.model_validate_json(text)
    except ValidationError as e:
        raise ResponseShapeError(
            f"Text output does not match {model.__name__}: {e.error_count()} error(s)",
            expected=model.__name__,
        ) from e


def _item_label(raw: Any) -> str:
    item_type = raw.get("type") if isinstance(raw, Mapping) else None
    return item_type if isinstance(item_type, str) else "tool call"
