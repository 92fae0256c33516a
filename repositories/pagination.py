"""
Opaque keyset cursors.

A cursor is the sort key of the last row of a page, serialised as URL-safe
base64 JSON so callers treat it as an opaque token.
"""

import base64
import binascii
import json
from typing import List

from app.exceptions import ServiceValidationError


def encode_cursor(*parts) -> str:
    raw = json.dumps([str(p) for p in parts], separators=(",", ":"))
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(token: str, arity: int) -> List[str]:
    """Return the cursor parts; malformed tokens are a validation error."""
    padded = token + "=" * (-len(token) % 4)
    try:
        parts = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
    except (binascii.Error, UnicodeError, ValueError):
        raise ServiceValidationError("Invalid pagination cursor", details={"cursor": token})
    if not isinstance(parts, list) or len(parts) != arity:
        raise ServiceValidationError("Invalid pagination cursor", details={"cursor": token})
    return [str(p) for p in parts]
