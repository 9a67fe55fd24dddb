"""Gateway configuration loading and validation."""
import os
import logging
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from esewa_gateway.errors import ConfigError, ERROR_MISSING_CONFIG, ERROR_UNKNOWN_ENVIRONMENT

from .constants import (
    DEFAULT_ENVIRONMENT,
    DEFAULT_TIMEOUT_SECONDS,
    ENVIRONMENT_ALIASES,
    InitiationStrategy,
)

if TYPE_CHECKING:
    from esewa_gateway.models import ClientConfig

logger = logging.getLogger(__name__)


# Config field -> environment variable
GATEWAY_ENV_REQUIREMENTS: Dict[str, str] = {
    "secret_key": "ESEWA_SECRET_KEY",
    "product_code": "ESEWA_PRODUCT_CODE",
    "success_url": "ESEWA_SUCCESS_URL",
    "failure_url": "ESEWA_FAILURE_URL",
}

GATEWAY_ENV_OPTIONAL: Dict[str, str] = {
    "env": "ESEWA_ENV",
    "strategy": "ESEWA_STRATEGY",
    "timeout": "ESEWA_TIMEOUT",
}


def normalize_environment(env: Optional[str]) -> str:
    """
    Normalize environment name to canonical form.

    Args:
        env: Environment name (any case, with aliases). Empty means development.

    Returns:
        "development" or "production"

    Raises:
        ConfigError: If the name is not a known environment

    Example:
        normalize_environment("PROD") -> "production"
        normalize_environment(None) -> "development"
    """
    if env is None:
        return DEFAULT_ENVIRONMENT.value

    normalized = str(getattr(env, "value", env)).lower().strip()
    if not normalized:
        return DEFAULT_ENVIRONMENT.value

    canonical = ENVIRONMENT_ALIASES.get(normalized)
    if canonical is None:
        raise ConfigError(
            f"{ERROR_UNKNOWN_ENVIRONMENT}: {env!r}. Expected development or production.",
            payload={"env": str(env)},
        )
    return canonical


def normalize_strategy(strategy: Optional[str]) -> InitiationStrategy:
    """Parse strategy name ("return_payload", "follow-redirect", ...)."""
    if not strategy:
        return InitiationStrategy.RETURN_PAYLOAD
    normalized = str(strategy).lower().strip().replace("-", "_")
    try:
        return InitiationStrategy(normalized)
    except ValueError:
        raise ConfigError(
            f"Unknown initiation strategy: {strategy!r}",
            payload={"strategy": str(strategy)},
        ) from None


def get_gateway_config() -> Dict[str, Optional[str]]:
    """
    Read all gateway environment variables.

    Returns dict with config field names as keys and their values (or None if not set).
    """
    names = {**GATEWAY_ENV_REQUIREMENTS, **GATEWAY_ENV_OPTIONAL}
    return {field: os.environ.get(env_var) for field, env_var in names.items()}


def _missing_variables(values: Dict[str, Optional[str]]) -> Tuple[str, ...]:
    return tuple(
        env_var
        for field, env_var in GATEWAY_ENV_REQUIREMENTS.items()
        if not (values.get(field) or "").strip()
    )


def load_config_from_env() -> "ClientConfig":
    """
    Build ClientConfig from ESEWA_* environment variables.

    Returns:
        Validated, immutable client config

    Raises:
        ConfigError: If required variables are missing or values are invalid
    """
    from esewa_gateway.models import ClientConfig

    values = get_gateway_config()

    missing = _missing_variables(values)
    if missing:
        logger.error("eSewa gateway not configured. Missing: %s", list(missing))
        raise ConfigError(
            f"{ERROR_MISSING_CONFIG}. Set: {', '.join(missing)}",
            payload={"missing": list(missing)},
        )

    timeout_raw = values.get("timeout")
    try:
        timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT_SECONDS
    except ValueError:
        raise ConfigError(f"ESEWA_TIMEOUT must be a number, got {timeout_raw!r}") from None
    if timeout <= 0:
        raise ConfigError(f"ESEWA_TIMEOUT must be positive, got {timeout_raw!r}")

    return ClientConfig(
        secret_key=values["secret_key"],
        product_code=values["product_code"],
        success_url=values["success_url"],
        failure_url=values["failure_url"],
        env=normalize_environment(values.get("env")),
        strategy=normalize_strategy(values.get("strategy")),
        timeout=timeout,
    )


def is_gateway_configured() -> bool:
    """Check if the gateway is properly configured without raising exceptions."""
    values = get_gateway_config()
    if _missing_variables(values):
        return False
    try:
        normalize_environment(values.get("env"))
        normalize_strategy(values.get("strategy"))
    except ConfigError:
        return False
    return True
