"""Extension-based MIME type sniffing."""

from __future__ import annotations

from pathlib import PurePath

from openwire._http import OCTET_STREAM

_MIME_BY_EXTENSION: dict[str, str] = {
    # Images
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".svg": "image/svg+xml",
    # Video
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".webm": "video/webm",
    # Audio
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".flac": "audio/flac",
    ".m4a": "audio/mp4",
    # Documents and data
    ".pdf": "application/pdf",
    ".json": "application/json",
    ".txt": "text/plain",
    ".vtt": "text/vtt",
}


def guess_mime_type(path: str | PurePath) -> str:
    """Return the content type for *path* based on its extension.

    Matching is case-insensitive. Unknown or missing extensions map to
    ``application/octet-stream``; this never raises.
    """
    suffix = PurePath(path).suffix.lower()
    return _MIME_BY_EXTENSION.get(suffix, OCTET_STREAM)
