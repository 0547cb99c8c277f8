"""Small HTTP-related constants shared across openwire.

This module is intentionally tiny to avoid circular imports and drift.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

DEFAULT_BASE_URL = "https://api.openai.com/v1"

JSON_CONTENT_TYPE = "application/json"
OCTET_STREAM = "application/octet-stream"

# Endpoint paths, appended to Config.base_url.
RESPONSES_PATH = "/responses"
IMAGE_GENERATIONS_PATH = "/images/generations"
IMAGE_EDITS_PATH = "/images/edits"
MODERATIONS_PATH = "/moderations"
SPEECH_PATH = "/audio/speech"
TRANSCRIPTIONS_PATH = "/audio/transcriptions"
VIDEOS_PATH = "/videos"

# Status codes a caller may reasonably retry; surfaced as metadata only.
RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({408, 409, 429, 500, 502, 503, 504})


def is_success(status_code: int) -> bool:
    """Return True for 2xx status codes."""
    return 200 <= status_code <= 299


def _package_version() -> str:
    try:
        return version("openwire")
    except PackageNotFoundError:
        return "0.0.0+unknown"


USER_AGENT = f"openwire/{_package_version()}"
