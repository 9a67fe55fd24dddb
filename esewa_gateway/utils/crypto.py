"""HMAC signing helpers for eSewa ePay v2."""

import base64
import hashlib
import hmac
from typing import Any, Iterable, Mapping, Union

Secret = Union[str, bytes]


def _to_bytes(value: Secret) -> bytes:
    return value if isinstance(value, bytes) else value.encode("utf-8")


def generate_hmac_sha256(data: str, secret: Secret) -> str:
    """Return base64(HMAC-SHA256(data, secret)) as text."""
    digest = hmac.new(_to_bytes(secret), data.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def build_signature_message(fields: Mapping[str, Any], names: Iterable[str]) -> str:
    """
    Build the canonical "k1=v1,k2=v2,..." message over the given field names.

    Values are inserted with str() as-is; callers normalise amounts beforehand.

    Raises:
        KeyError: If a named field is missing from fields
    """
    return ",".join(f"{name}={fields[name]}" for name in names)


def signatures_match(expected: str, received: Any) -> bool:
    """Constant-time comparison of two base64 signatures. Non-text input never matches."""
    if not isinstance(expected, str) or not isinstance(received, str):
        return False
    if not expected or not received:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), received.encode("utf-8"))
