"""Base64 encoding helpers used for basic authentication tokens."""

from __future__ import annotations

import base64


def encoded_length(count: int) -> int:
    """Number of characters the base64 encoding of ``count`` bytes takes."""
    if count < 0:
        raise ValueError("count must not be negative")
    return ((count + 2) // 3) * 4


def base64_encode(data: bytes) -> str:
    """Encode ``data`` with the standard base64 alphabet and ``=`` padding."""
    return base64.b64encode(bytes(data)).decode("ascii")