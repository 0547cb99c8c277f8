from __future__ import annotations

from pathlib import Path

import pytest

from openwire.mime import guess_mime_type

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("a.png", "image/png"),
        ("a.jpeg", "image/jpeg"),
        ("a.gif", "image/gif"),
        ("a.webp", "image/webp"),
        ("a.bmp", "image/bmp"),
        ("a.svg", "image/svg+xml"),
        ("a.mp4", "video/mp4"),
        ("a.mov", "video/quicktime"),
        ("a.webm", "video/webm"),
        ("a.mp3", "audio/mpeg"),
        ("a.wav", "audio/wav"),
        ("a.ogg", "audio/ogg"),
        ("a.flac", "audio/flac"),
        ("a.m4a", "audio/mp4"),
        ("a.pdf", "application/pdf"),
        ("a.json", "application/json"),
        ("a.txt", "text/plain"),
        ("a.vtt", "text/vtt"),
    ],
)
def test_known_extensions(path: str, expected: str) -> None:
    assert guess_mime_type(path) == expected


def test_matching_is_case_insensitive() -> None:
    assert guess_mime_type("photo.JPG") == guess_mime_type("photo.jpg") == "image/jpeg"


@pytest.mark.parametrize("path", ["x.xyz", "README", "", "archive.tar.gz", ".png"])
def test_unknown_or_missing_extension_falls_back_to_octet_stream(path: str) -> None:
    assert guess_mime_type(path) == "application/octet-stream"


def test_accepts_path_objects() -> None:
    assert guess_mime_type(Path("dir.d") / "clip.WAV") == "audio/wav"
