"""
Request body encoding and response body decoding.
"""

import json
from typing import Any, Optional, Tuple


def encode_body(data: Any) -> Optional[bytes]:
    """
    Encode a request body.

    Text is sent as UTF-8 and bytes verbatim. Any other value is
    serialized as compact JSON.

    Args:
        data: The body value, ``None`` for no body

    Returns:
        The encoded body or None

    Raises:
        TypeError: If the value is not JSON serializable
    """
    if data is None:
        return None
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return data.encode("utf-8")
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def decode_body(content: bytes) -> Tuple[Any, bool]:
    """
    Decode a response body, preferring JSON.

    Returns:
        ``(value, True)`` when the body is valid JSON, otherwise
        ``(text, False)``. Parse failures are not errors.
    """
    text = content.decode("utf-8", errors="replace")
    try:
        return json.loads(text), True
    except ValueError:
        return text, False
