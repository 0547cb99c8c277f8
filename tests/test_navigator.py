"""Response navigation tests: error precedence, first-match scans, result shapes."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

from pydantic import BaseModel
import pytest

from openwire.errors import (
    DecodeError,
    MalformedResultError,
    MissingResultError,
    NoContentError,
    NoMessageBlockError,
    NoTextFieldError,
    NoToolCallError,
    RemoteError,
    ResponseShapeError,
)
from openwire.navigator import (
    ItemKind,
    classify_item,
    first_image_bytes,
    first_image_output,
    first_message_item,
    first_structured_output,
    first_text_output,
    first_tool_call,
    iter_output_items,
    raise_for_error,
    tool_call_result,
)

pytestmark = pytest.mark.unit


def _message(text: str) -> dict[str, Any]:
    return {"type": "message", "content": [{"type": "output_text", "text": text}]}


# =============================================================================
# Classification
# =============================================================================


@pytest.mark.parametrize(
    ("raw", "kind"),
    [
        ({"type": "message"}, ItemKind.MESSAGE),
        ({"type": "reasoning"}, ItemKind.REASONING),
        ({"type": "tool_call", "tool_name": "web_search"}, ItemKind.TOOL_CALL),
        ({"type": "image_generation_call"}, ItemKind.SPECIALIZED_TOOL_CALL),
        ({"type": "web_search_call"}, ItemKind.SPECIALIZED_TOOL_CALL),
        ({"type": "something_new"}, ItemKind.UNKNOWN),
        ({"type": 3}, ItemKind.UNKNOWN),
        ({}, ItemKind.UNKNOWN),
        ("not an object", ItemKind.UNKNOWN),
    ],
)
def test_classify_item(raw: Any, kind: ItemKind) -> None:
    assert classify_item(raw).kind is kind


def test_tool_name_for_both_call_forms() -> None:
    assert classify_item({"type": "image_generation_call"}).tool_name == (
        "image_generation"
    )
    assert classify_item({"type": "tool_call", "tool_name": "x"}).tool_name == "x"
    assert classify_item({"type": "message"}).tool_name is None


def test_iter_output_items_tolerates_missing_output() -> None:
    assert list(iter_output_items({})) == []
    assert list(iter_output_items({"output": None})) == []


# =============================================================================
# Error precedence
# =============================================================================


def test_error_envelope_wins_over_valid_output() -> None:
    response = {
        "error": {"type": "invalid_request_error", "message": "bad model"},
        "output": [_message("hello"), {"type": "image_generation_call", "result": "YWJj"}],
    }

    with pytest.raises(RemoteError) as exc:
        first_text_output(response)
    assert exc.value.error_type == "invalid_request_error"
    assert exc.value.remote_message == "bad model"
    assert "bad model" in str(exc.value)

    with pytest.raises(RemoteError):
        first_tool_call(response, "image_generation")
    with pytest.raises(RemoteError):
        first_image_output(response)


def test_error_subfields_default_when_missing() -> None:
    with pytest.raises(RemoteError) as exc:
        raise_for_error({"error": {}})
    assert exc.value.error_type == "error"
    assert exc.value.remote_message == "unknown error"


def test_error_precedence_holds_for_read_only_mappings() -> None:
    response = MappingProxyType(
        {
            "error": MappingProxyType({"type": "t", "message": "m"}),
            "output": [_message("hi")],
        }
    )
    with pytest.raises(RemoteError) as exc:
        first_text_output(response)
    assert exc.value.error_type == "t"
    assert exc.value.remote_message == "m"


def test_null_error_is_ignored() -> None:
    raise_for_error({"error": None, "output": []})
    assert first_text_output({"error": None, "output": [_message("ok")]}) == "ok"


# =============================================================================
# First text
# =============================================================================


def test_first_message_wins() -> None:
    response = {
        "output": [
            {"type": "reasoning"},
            {"type": "message", "content": [{"text": "hello"}]},
            {"type": "message", "content": [{"text": "world"}]},
        ]
    }
    assert first_text_output(response) == "hello"


def test_only_first_content_entry_is_consulted() -> None:
    response = {
        "output": [
            {"type": "message", "content": [{"text": "a"}, {"text": "b"}]},
        ]
    }
    assert first_text_output(response) == "a"


@pytest.mark.parametrize("response", [{}, {"output": []}, {"output": "nope"}])
def test_no_output_items(response: dict[str, Any]) -> None:
    with pytest.raises(NoMessageBlockError) as exc:
        first_text_output(response)
    assert exc.value.expected == "message item"


def test_no_message_item_among_others() -> None:
    with pytest.raises(NoMessageBlockError):
        first_text_output({"output": [{"type": "reasoning"}, {"type": "web_search_call"}]})


@pytest.mark.parametrize(
    "message",
    [
        {"type": "message"},
        {"type": "message", "content": []},
        {"type": "message", "content": "text"},
    ],
)
def test_message_without_content(message: dict[str, Any]) -> None:
    with pytest.raises(NoContentError):
        first_text_output({"output": [message, _message("later")]})


@pytest.mark.parametrize(
    "entry",
    [{"type": "refusal", "refusal": "no"}, {"text": 42}, "bare string"],
)
def test_first_content_entry_without_text(entry: Any) -> None:
    """No fallback to later entries or later messages."""
    with pytest.raises(NoTextFieldError):
        first_text_output(
            {"output": [{"type": "message", "content": [entry, {"text": "x"}]}]}
        )


def test_empty_string_text_is_returned() -> None:
    assert first_text_output({"output": [_message("")]}) == ""


def test_first_message_item_returns_raw_item() -> None:
    item = first_message_item({"output": [{"type": "reasoning"}, _message("hi")]})
    assert item.kind is ItemKind.MESSAGE
    assert item.raw == _message("hi")


# =============================================================================
# Tool calls
# =============================================================================


def test_specialized_tool_call_result() -> None:
    response = {"output": [{"type": "image_generation_call", "result": "YWJj"}]}
    item = first_tool_call(response, "image_generation")
    assert tool_call_result(item) == "YWJj"
    assert first_image_output(response) == "YWJj"
    assert first_image_bytes(response) == b"abc"


def test_generic_tool_call_list_result() -> None:
    response = {
        "output": [{"type": "tool_call", "tool_name": "web_search", "result": ["r1", "r2"]}]
    }
    assert tool_call_result(first_tool_call(response, "web_search")) == "r1"


def test_first_matching_tool_call_wins_across_forms() -> None:
    response = {
        "output": [
            _message("text first"),
            {"type": "tool_call", "tool_name": "other", "result": "no"},
            {"type": "tool_call", "tool_name": "image_generation", "result": "first"},
            {"type": "image_generation_call", "result": "second"},
        ]
    }
    assert tool_call_result(first_tool_call(response, "image_generation")) == "first"


def test_generic_tool_call_requires_matching_name() -> None:
    response = {"output": [{"type": "tool_call", "result": "x"}]}
    with pytest.raises(NoToolCallError) as exc:
        first_tool_call(response, "web_search")
    assert exc.value.tool_type == "web_search"
    assert "web_search" in str(exc.value)


@pytest.mark.parametrize("response", [{}, {"output": []}])
def test_no_tool_call_in_empty_output(response: dict[str, Any]) -> None:
    with pytest.raises(NoToolCallError):
        first_image_output(response)


def test_no_fallback_to_later_tool_call_when_result_missing() -> None:
    response = {
        "output": [
            {"type": "image_generation_call", "status": "failed"},
            {"type": "image_generation_call", "result": "YWJj"},
        ]
    }
    with pytest.raises(MissingResultError):
        first_image_output(response)


@pytest.mark.parametrize("result", [[], [1, "a"], {"b64": "x"}, None, 7])
def test_malformed_result(result: Any) -> None:
    with pytest.raises(MalformedResultError) as exc:
        tool_call_result({"type": "image_generation_call", "result": result})
    assert "image_generation_call" in str(exc.value)


def test_tool_call_result_accepts_raw_mapping() -> None:
    assert tool_call_result({"result": ["a"]}) == "a"


def test_first_image_bytes_rejects_bad_base64() -> None:
    with pytest.raises(DecodeError):
        first_image_bytes({"output": [{"type": "image_generation_call", "result": "%%"}]})


# =============================================================================
# Structured output
# =============================================================================


class _Entities(BaseModel):
    entities: list[str]


def test_first_structured_output_validates_text() -> None:
    response = {"output": [_message('{"entities": ["Paris"]}')]}
    assert first_structured_output(response, _Entities).entities == ["Paris"]


def test_first_structured_output_reports_mismatch() -> None:
    with pytest.raises(ResponseShapeError) as exc:
        first_structured_output({"output": [_message("not json")]}, _Entities)
    assert exc.value.expected == "_Entities"


def test_read_only_mapping_items_are_navigated() -> None:
    message = MappingProxyType(
        {"type": "message", "content": [MappingProxyType({"text": "hello"})]}
    )
    call = MappingProxyType({"type": "image_generation_call", "result": "YWJj"})
    response = MappingProxyType({"output": [message, call]})

    assert classify_item(message).kind is ItemKind.MESSAGE
    assert first_text_output(response) == "hello"
    assert first_image_bytes(response) == b"abc"
