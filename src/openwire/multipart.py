"""multipart/form-data body construction.

Bodies are built fully in memory. Parts are emitted in input order: text
fields first, then file parts. The boundary must not occur inside any field
value or file payload; ``build_multipart_body`` verifies this unless told
otherwise, and ``encode_multipart`` draws a fresh boundary on collision.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import random
from typing import TYPE_CHECKING

from openwire.codec import read_file_bytes
from openwire.errors import MultipartError
from openwire.mime import guess_mime_type

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

BOUNDARY_PREFIX = "----openwire_boundary_"
_BOUNDARY_HEX_DIGITS = 16
_MAX_BOUNDARY_ATTEMPTS = 8
_CRLF = b"\r\n"
_HEADER_PARAM_ESCAPES = str.maketrans({"\"": "%22", "\r": "%0D", "\n": "%0A"})


@dataclass(frozen=True, slots=True)
class MultipartField:
    """A simple text form field."""

    name: str
    value: str


@dataclass(frozen=True, slots=True)
class MultipartFile:
    """A binary file part."""

    name: str
    filename: str
    content_type: str
    data: bytes


def _quote_param(value: str) -> str:
    """Percent-escape quote and CR/LF so a header parameter stays one token."""
    return value.translate(_HEADER_PARAM_ESCAPES)


def random_boundary() -> str:
    """Return a boundary token: fixed prefix plus 16 random hex digits.

    Not cryptographically strong; uniqueness against content is checked at
    encode time instead.
    """
    suffix = random.getrandbits(4 * _BOUNDARY_HEX_DIGITS)
    return f"{BOUNDARY_PREFIX}{suffix:0{_BOUNDARY_HEX_DIGITS}x}"


def file_part(
    name: str, path: str | Path, *, content_type: str | None = None
) -> MultipartFile:
    """Read *path* into a file part named *name*.

    The filename sent to the server is the path's final component; the
    content type is sniffed from the extension unless given.
    """
    p = Path(path)
    return MultipartFile(
        name=name,
        filename=p.name,
        content_type=content_type or guess_mime_type(p),
        data=read_file_bytes(p),
    )


def find_boundary_collision(
    boundary: str,
    fields: Sequence[MultipartField],
    files: Sequence[MultipartFile] = (),
) -> str | None:
    """Return the name of the first part whose content contains *boundary*."""
    needle = boundary.encode("utf-8")
    for f in fields:
        if needle in f.value.encode("utf-8"):
            return f.name
    for file in files:
        if needle in file.data or needle in file.filename.encode("utf-8"):
            return file.name
    return None


def build_multipart_body(
    boundary: str,
    fields: Sequence[MultipartField],
    files: Sequence[MultipartFile] = (),
    *,
    check_collisions: bool = True,
) -> bytes:
    """Build a complete multipart/form-data body.

    Args:
        boundary: Boundary token, without the leading dashes.
        fields: Text fields, emitted in order.
        files: File parts, emitted in order after the fields.
        check_collisions: Scan every value and payload for the boundary
            first. Disable only when the caller guarantees uniqueness.

    Returns:
        The encoded body, terminated by ``--boundary--\\r\\n``.

    Raises:
        MultipartError: If the boundary is empty or occurs inside a part.
    """
    if not boundary:
        raise MultipartError("Multipart boundary must be a non-empty string")
    if check_collisions:
        collided = find_boundary_collision(boundary, fields, files)
        if collided is not None:
            raise MultipartError(
                f"Boundary occurs inside multipart part {collided!r}",
                hint="Use encode_multipart() to pick a non-colliding boundary.",
            )

    delimiter = b"--" + boundary.encode("utf-8") + _CRLF
    chunks: list[bytes] = []

    for f in fields:
        chunks.append(delimiter)
        disposition = f'form-data; name="{_quote_param(f.name)}"'
        chunks.append(f"Content-Disposition: {disposition}".encode() + _CRLF)
        chunks.append(_CRLF)
        chunks.append(f.value.encode("utf-8") + _CRLF)

    for file in files:
        chunks.append(delimiter)
        chunks.append(
            f'Content-Disposition: form-data; name="{_quote_param(file.name)}"; '
            f'filename="{_quote_param(file.filename)}"'.encode()
            + _CRLF
        )
        chunks.append(f"Content-Type: {file.content_type}".encode() + _CRLF)
        chunks.append(_CRLF)
        chunks.append(file.data + _CRLF)

    chunks.append(b"--" + boundary.encode("utf-8") + b"--" + _CRLF)
    return b"".join(chunks)


def encode_multipart(
    fields: Sequence[MultipartField],
    files: Sequence[MultipartFile] = (),
) -> tuple[bytes, str]:
    """Encode parts under a fresh boundary.

    Returns:
        ``(body, content_type)`` where the content type carries the boundary.
    """
    for _ in range(_MAX_BOUNDARY_ATTEMPTS):
        boundary = random_boundary()
        if find_boundary_collision(boundary, fields, files) is None:
            body = build_multipart_body(boundary, fields, files, check_collisions=False)
            return body, f"multipart/form-data; boundary={boundary}"
        logger.debug("Boundary %s collided with part content; drawing another", boundary)
    raise MultipartError(
        f"Could not find a non-colliding boundary after {_MAX_BOUNDARY_ATTEMPTS} attempts"
    )
