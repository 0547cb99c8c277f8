"""openwire: typed requests in, wire bytes out, answers back.

Public API:
    - OpenAIClient: async facade over the REST endpoints
    - Request descriptors: ResponsesRequest, ImageEditRequest, ...
    - RequestMapper: descriptor -> WireRequest, without sending anything
    - Navigation: first_text_output(), first_image_output(), first_tool_call()
    - Config: Configuration dataclass
"""

from __future__ import annotations

import logging

from openwire._http import USER_AGENT
from openwire.client import OpenAIClient
from openwire.codec import (
    bytes_to_data_url,
    decode_base64,
    encode_base64,
    file_to_data_url,
    save_base64_to_file,
    split_data_url,
)
from openwire.config import Config
from openwire.descriptors import (
    ApiDefault,
    ImageEditRequest,
    ImageGenerateRequest,
    ModerationRequest,
    ResponsesRequest,
    SpeechRequest,
    TranscriptionRequest,
    VideoCreateRequest,
    input_image,
    input_text,
    user_message,
)
from openwire.errors import (
    ConfigurationError,
    DecodeError,
    FileAccessError,
    FormatError,
    InvalidDescriptorError,
    MalformedResultError,
    MissingResultError,
    MultipartError,
    NoContentError,
    NoMessageBlockError,
    NoTextFieldError,
    NoToolCallError,
    OpenwireError,
    RemoteError,
    ResponseShapeError,
    TransportError,
)
from openwire.mapper import RequestMapper
from openwire.mime import guess_mime_type
from openwire.models import WireRequest, WireResponse
from openwire.navigator import (
    first_image_bytes,
    first_image_output,
    first_structured_output,
    first_text_output,
    first_tool_call,
    tool_call_result,
)

__version__ = USER_AGENT.partition("/")[2]

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("openwire").addHandler(logging.NullHandler())

__all__ = [
    "ApiDefault",
    "Config",
    "ConfigurationError",
    "DecodeError",
    "FileAccessError",
    "FormatError",
    "ImageEditRequest",
    "ImageGenerateRequest",
    "InvalidDescriptorError",
    "MalformedResultError",
    "MissingResultError",
    "ModerationRequest",
    "MultipartError",
    "NoContentError",
    "NoMessageBlockError",
    "NoTextFieldError",
    "NoToolCallError",
    "OpenAIClient",
    "OpenwireError",
    "RemoteError",
    "RequestMapper",
    "ResponseShapeError",
    "ResponsesRequest",
    "SpeechRequest",
    "TranscriptionRequest",
    "TransportError",
    "VideoCreateRequest",
    "WireRequest",
    "WireResponse",
    "bytes_to_data_url",
    "decode_base64",
    "encode_base64",
    "file_to_data_url",
    "first_image_bytes",
    "first_image_output",
    "first_structured_output",
    "first_text_output",
    "first_tool_call",
    "guess_mime_type",
    "input_image",
    "input_text",
    "save_base64_to_file",
    "split_data_url",
    "tool_call_result",
    "user_message",
]
