"""Gateway configuration module."""
from .constants import (
    Environment,
    InitiationStrategy,
    TransactionStatus,
    API_URLS,
    STATUS_URLS,
    ENVIRONMENT_ALIASES,
    PAYMENT_SIGNED_FIELDS,
    PAYMENT_SIGNED_FIELD_NAMES,
    CALLBACK_SIGNED_FIELDS,
)
from .config import (
    is_gateway_configured,
    load_config_from_env,
    normalize_environment,
    normalize_strategy,
)

__all__ = [
    "Environment",
    "InitiationStrategy",
    "TransactionStatus",
    "API_URLS",
    "STATUS_URLS",
    "ENVIRONMENT_ALIASES",
    "PAYMENT_SIGNED_FIELDS",
    "PAYMENT_SIGNED_FIELD_NAMES",
    "CALLBACK_SIGNED_FIELDS",
    "is_gateway_configured",
    "load_config_from_env",
    "normalize_environment",
    "normalize_strategy",
]
