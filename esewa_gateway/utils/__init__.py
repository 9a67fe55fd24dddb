# Utilities Module
from .crypto import (
    build_signature_message,
    generate_hmac_sha256,
    signatures_match,
)

__all__ = [
    "build_signature_message",
    "generate_hmac_sha256",
    "signatures_match",
]
