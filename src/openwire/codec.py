"""Binary/text codec helpers: base64, data URLs, and whole-file I/O.

All functions are pure transformations except the file helpers, which
perform a single whole-file read or write.
"""

from __future__ import annotations

import base64
from pathlib import Path

from openwire.errors import DecodeError, FileAccessError, FormatError
from openwire.mime import guess_mime_type

_DATA_URL_PREFIX = "data:"
_DATA_URL_MARKER = ";base64,"


def encode_base64(data: bytes) -> str:
    """Encode *data* with the standard RFC 4648 alphabet, without line wrapping."""
    return base64.b64encode(data).decode("ascii")


def decode_base64(text: str) -> bytes:
    """Decode standard base64, rejecting foreign characters and bad padding."""
    try:
        return base64.b64decode(text, validate=True)
    except ValueError as e:
        raise DecodeError(
            f"Malformed base64 payload: {e}",
            hint="Expected the standard alphabet (A-Z, a-z, 0-9, +, /) with '=' padding.",
        ) from e


def bytes_to_data_url(data: bytes, mime_type: str) -> str:
    """Return ``data:<mime_type>;base64,<payload>`` for *data*."""
    return f"{_DATA_URL_PREFIX}{mime_type}{_DATA_URL_MARKER}{encode_base64(data)}"


def split_data_url(data_url: str) -> tuple[str, str]:
    """Split a data URL into ``(mime_type, base64_payload)``.

    The payload is returned still encoded. The first ``;base64,`` marker
    separates the MIME type from the payload.
    """
    if not data_url.startswith(_DATA_URL_PREFIX):
        raise FormatError(
            "Not a data URL (missing 'data:' prefix)",
            hint="Build one with bytes_to_data_url() or file_to_data_url().",
        )
    head, sep, payload = data_url[len(_DATA_URL_PREFIX) :].partition(_DATA_URL_MARKER)
    if not sep:
        raise FormatError("Data URL is missing the ';base64,' segment")
    return head, payload


def data_url_to_bytes(data_url: str) -> tuple[str, bytes]:
    """Return ``(mime_type, decoded_bytes)`` for a base64 data URL."""
    mime_type, payload = split_data_url(data_url)
    return mime_type, decode_base64(payload)


def read_file_bytes(path: str | Path) -> bytes:
    """Read a whole file, mapping OS failures to ``FileAccessError``."""
    p = Path(path)
    try:
        return p.read_bytes()
    except OSError as e:
        raise FileAccessError(
            f"Unable to read file: {p}",
            path=str(p),
            hint="Check that the path exists and is readable.",
        ) from e


def write_file_bytes(path: str | Path, data: bytes) -> None:
    """Write *data* to *path*, replacing any existing content."""
    p = Path(path)
    try:
        p.write_bytes(data)
    except OSError as e:
        raise FileAccessError(f"Unable to write file: {p}", path=str(p)) from e


def file_to_base64(path: str | Path) -> str:
    return encode_base64(read_file_bytes(path))


def file_to_data_url(path: str | Path) -> str:
    """Read *path* and inline it as a data URL, sniffing the MIME type."""
    return bytes_to_data_url(read_file_bytes(path), guess_mime_type(path))


def save_base64_to_file(payload: str, path: str | Path) -> None:
    """Decode a base64 payload (e.g. an image result) and write it to *path*."""
    write_file_bytes(path, decode_base64(payload))


def data_url_to_file(data_url: str, path: str | Path) -> None:
    _, data = data_url_to_bytes(data_url)
    write_file_bytes(path, data)
