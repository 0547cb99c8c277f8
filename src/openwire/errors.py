"""Exception hierarchy for openwire."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class OpenwireError(Exception):
    """Base exception for all openwire errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(OpenwireError):
    """Configuration validation or resolution failed."""


class InvalidDescriptorError(OpenwireError):
    """A request descriptor is missing a required field."""

    def __init__(
        self, message: str, *, field: str | None = None, hint: str | None = None
    ) -> None:
        super().__init__(message, hint=hint)
        self.field = field


class FileAccessError(OpenwireError):
    """A file referenced by a request could not be read or written."""

    def __init__(
        self, message: str, *, path: str | None = None, hint: str | None = None
    ) -> None:
        super().__init__(message, hint=hint)
        self.path = path


class DecodeError(OpenwireError):
    """Base64 input was malformed."""


class FormatError(OpenwireError):
    """A data URL did not have the ``data:<mime>;base64,<payload>`` shape."""


class MultipartError(OpenwireError):
    """A multipart body could not be encoded unambiguously."""


class RemoteError(OpenwireError):
    """The API answered with its own error envelope."""

    def __init__(
        self,
        error_type: str,
        remote_message: str,
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(f"OpenAI error ({error_type}): {remote_message}", hint=hint)
        self.error_type = error_type
        self.remote_message = remote_message


class ResponseShapeError(OpenwireError):
    """A response did not contain the shape an extraction needs.

    ``expected`` names the missing shape, e.g. ``"message item"``.
    """

    def __init__(
        self, message: str, *, expected: str | None = None, hint: str | None = None
    ) -> None:
        super().__init__(message, hint=hint)
        self.expected = expected


class NoMessageBlockError(ResponseShapeError):
    """No ``message`` item in the response output."""


class NoContentError(ResponseShapeError):
    """A ``message`` item has no content entries."""


class NoTextFieldError(ResponseShapeError):
    """The first content entry of a message has no string ``text``."""


class NoToolCallError(ResponseShapeError):
    """No output item matches the requested tool type."""

    def __init__(
        self,
        message: str,
        *,
        tool_type: str,
        expected: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, expected=expected, hint=hint)
        self.tool_type = tool_type


class MissingResultError(ResponseShapeError):
    """A matched tool call carries no ``result`` field."""


class MalformedResultError(ResponseShapeError):
    """A tool-call ``result`` is neither a string nor a list of strings."""


class TransportError(OpenwireError):
    """HTTP exchange failed, either at the transport level or with a non-2xx status.

    The transport attaches status metadata so callers can decide what to do
    without parsing messages.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        status_code: int | None = None,
        retryable: bool | None = None,
        body: bytes | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code = status_code
        self.retryable = retryable
        self.body = body
        self.endpoint = endpoint


def _walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* and its ``__cause__``/``__context__`` chain, with cycle protection."""
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        yield cur

        cause = cur.__cause__
        if isinstance(cause, BaseException):
            stack.append(cause)
        context = cur.__context__
        if isinstance(context, BaseException):
            stack.append(context)
