"""Filename checks for order file uploads."""

from __future__ import annotations

import re

MAX_FILENAME_LENGTH = 255

# < > : " / \ | ? * and ASCII control characters
_INVALID_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f\x7f]')


def is_valid_filename(filename: str) -> bool:
    """Return True if ``filename`` is safe to send as an upload description."""
    if not filename or not filename.strip():
        return False
    if filename.strip() != filename:
        return False
    if _INVALID_CHARS.search(filename):
        return False
    return len(filename) <= MAX_FILENAME_LENGTH
