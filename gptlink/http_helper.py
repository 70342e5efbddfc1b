"""Helpers for building multipart/form-data request bodies."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import NamedTuple

LINE_TERMINATOR = "\r\n"
_BOUNDARY_PREFIX = "-" * 27
_ENCODING = "utf-8"

_MIME_TYPES = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "jpg": "image/jpg",
    "mp3": "audio/mp3",
    "wav": "audio/wav",
    "mp4": "video/mp4",
    "mpeg": "video/mpeg",
    "mpga": "video/mpga",
    "m4a": "video/m4a",
    "webm": "video/webm",
    "json": "application/json",
    "jsonl": "application/jsonl",
}


class Boundary(NamedTuple):
    """A multipart boundary and its opening and closing delimiters."""

    boundary: str
    begin_boundary: str
    end_boundary: str


def mime_type_from_ext(ext: str) -> str:
    """Return the MIME type for a file extension, ignoring case."""
    try:
        return _MIME_TYPES[ext.lower()]
    except KeyError:
        raise ValueError(f"unsupported file extension: {ext!r}") from None


def _now_ticks() -> int:
    """Current time in 100-nanosecond ticks since 0001-01-01."""
    delta = datetime.now() - datetime(1, 1, 1)
    return delta.days * 864_000_000_000 + delta.seconds * 10_000_000 + delta.microseconds * 10


def make_boundary(ticks: int | None = None) -> Boundary:
    """Build a boundary from a tick count, by default the current time."""
    if ticks is None:
        ticks = _now_ticks()
    boundary = f"{_BOUNDARY_PREFIX}{ticks}"
    begin = f"{LINE_TERMINATOR}--{boundary}{LINE_TERMINATOR}"
    end = f"{LINE_TERMINATOR}--{boundary}--{LINE_TERMINATOR}"
    return Boundary(boundary, begin, end)


def add_mime_file(file_path: str | Path, param_name: str, begin_boundary: str) -> bytes:
    """Return a multipart section that carries the contents of a file."""
    path = Path(file_path)
    content = path.read_bytes()
    mime_type = mime_type_from_ext(path.suffix.lstrip("."))
    header = (
        f'Content-Disposition: form-data;name="{param_name}";'
        f'filename="{path.name}"{LINE_TERMINATOR}'
        f"Content-Type: {mime_type}{LINE_TERMINATOR}{LINE_TERMINATOR}"
    )
    return begin_boundary.encode(_ENCODING) + header.encode(_ENCODING) + content


def add_mime(param_name: str, param_value: str, begin_boundary: str) -> bytes:
    """Return a multipart section that carries a plain form value."""
    section = (
        f'Content-Disposition: form-data;name="{param_name}"'
        f"{LINE_TERMINATOR}{LINE_TERMINATOR}{param_value}"
    )
    return begin_boundary.encode(_ENCODING) + section.encode(_ENCODING)