"""
esewa-gateway

Client library for the eSewa ePay v2 payment gateway:
- services.payments: GatewayClient (signing, initiation, callbacks, status)
- models: Pydantic schemas for requests, callbacks and status results
- payments: environment tables and env-var configuration
- errors: exception hierarchy
- routers: optional FastAPI callback router

Note: Imports are lazy so that importing a single submodule does not pull
in httpx or FastAPI.
"""

__version__ = "0.3.0"

__all__ = [
    "GatewayClient",
    "ClientConfig",
    "PaymentRequest",
    "PaymentForm",
    "SignedPayload",
    "CallbackVerification",
    "StatusQueryResult",
    "Environment",
    "InitiationStrategy",
    "TransactionStatus",
    "load_config_from_env",
    "GatewayError",
    "ConfigError",
    "SignatureMismatch",
    "PaymentInitiationError",
    "DecodeError",
    "NetworkError",
    "StatusQueryError",
]

_MODELS = {
    "ClientConfig",
    "PaymentRequest",
    "PaymentForm",
    "SignedPayload",
    "CallbackVerification",
    "StatusQueryResult",
}
_CONSTANTS = {"Environment", "InitiationStrategy", "TransactionStatus"}
_ERRORS = {
    "GatewayError",
    "ConfigError",
    "SignatureMismatch",
    "PaymentInitiationError",
    "DecodeError",
    "NetworkError",
    "StatusQueryError",
}


def __getattr__(name):
    """Lazy attribute access."""
    if name == "GatewayClient":
        from esewa_gateway.services.payments import GatewayClient
        return GatewayClient
    elif name == "load_config_from_env":
        from esewa_gateway.payments.config import load_config_from_env
        return load_config_from_env
    elif name in _MODELS:
        from esewa_gateway import models
        return getattr(models, name)
    elif name in _CONSTANTS:
        from esewa_gateway.payments import constants
        return getattr(constants, name)
    elif name in _ERRORS:
        from esewa_gateway import errors
        return getattr(errors, name)
    raise AttributeError(f"module 'esewa_gateway' has no attribute '{name}'")
