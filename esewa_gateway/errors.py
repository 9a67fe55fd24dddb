"""
Gateway errors.

Exception hierarchy raised by the client plus the shared error messages
used in logs and callback responses.
"""

from typing import Any, Dict, Optional

# Configuration errors
ERROR_UNKNOWN_ENVIRONMENT = "Unknown eSewa environment"
ERROR_MISSING_CONFIG = "eSewa gateway is not configured"

# Payment errors
ERROR_NO_REDIRECT = "Gateway did not redirect after payment submission"
ERROR_PAYMENT_FAILED = "Payment failed or was cancelled"

# Callback errors
ERROR_INVALID_BASE64 = "Callback data is not valid base64"
ERROR_INVALID_JSON = "Callback data is not valid JSON"
ERROR_INVALID_CALLBACK = "Callback data does not match the verification shape"
ERROR_INVALID_SIGNATURE = "Invalid signature"

# Status errors
ERROR_STATUS_UNAVAILABLE = "Transaction status lookup failed"


class GatewayError(ValueError):
    """Base class for every error raised by esewa_gateway."""

    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


class ConfigError(GatewayError):
    """Unknown environment or missing required configuration."""


class SignatureMismatch(GatewayError):
    """Recomputed callback signature differs from the received one."""


class PaymentInitiationError(GatewayError):
    """Direct POST finished without producing a redirect URL."""


class DecodeError(GatewayError):
    """Encoded callback payload is not base64-encoded JSON of the expected shape."""


class NetworkError(GatewayError):
    """Transport failure or non-2xx response from the gateway."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, payload=payload)
        self.status_code = status_code


class StatusQueryError(NetworkError):
    """Status lookup failed or returned an unusable body."""


__all__ = [
    "GatewayError",
    "ConfigError",
    "SignatureMismatch",
    "PaymentInitiationError",
    "DecodeError",
    "NetworkError",
    "StatusQueryError",
]
