"""Local entry point for the TOON codec.

Callers import :func:`encode` and :func:`decode` from here instead of
depending on ``toon_format`` directly.  Both functions forward their argument
unchanged and let any codec error propagate.
"""

from typing import Any

from toon_format import decode as _toon_decode
from toon_format import encode as _toon_encode


def encode(data: Any) -> str:
    """Convert a JSON-like value (dict, list or primitive) to a TOON string."""

    return _toon_encode(data)


def decode(toon_string: str) -> Any:
    """Parse a TOON string back into the equivalent JSON-like value."""

    return _toon_decode(toon_string)


__all__ = ["encode", "decode"]
