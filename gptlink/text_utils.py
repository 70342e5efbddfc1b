"""Small text checks used on service responses."""

from __future__ import annotations

import re
import unicodedata

_URL_PATTERN = re.compile(
    r"^((http|https)://)[-a-zA-Z0-9@:%._\+~#?&/=]{2,256}\.[a-z]{2,6}\b"
    r"([-a-zA-Z0-9@:%._\+~#?&/=]*)$"
)


def remove_punctuation(text: str) -> str:
    """Drop every punctuation and symbol character from the text."""
    return "".join(ch for ch in text if unicodedata.category(ch)[0] not in "PS")


def is_valid_url(url: str) -> bool:
    """True if the string looks like an http or https URL."""
    return _URL_PATTERN.search(url) is not None