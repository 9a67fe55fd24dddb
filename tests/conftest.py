"""Pytest configuration and fixtures"""
import base64
import hashlib
import hmac
import json
from typing import Any, Callable, Dict

import httpx
import pytest

from esewa_gateway.models import ClientConfig
from esewa_gateway.payments.constants import InitiationStrategy
from esewa_gateway.services.payments import GatewayClient

# eSewa's public UAT credentials
TEST_SECRET = "8gBm/:&EnhH.1/q"
TEST_PRODUCT_CODE = "EPAYTEST"

CALLBACK_FIELD_ORDER = (
    "transaction_code",
    "status",
    "total_amount",
    "transaction_uuid",
    "product_code",
    "signed_field_names",
)


def sign(message: str, secret: str = TEST_SECRET) -> str:
    """Reference implementation of the gateway signature."""
    digest = hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def encode_callback(data: Dict[str, Any]) -> str:
    return base64.b64encode(json.dumps(data).encode("utf-8")).decode("ascii")


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(
        secret_key=TEST_SECRET,
        product_code=TEST_PRODUCT_CODE,
        success_url="https://shop.test/esewa/success",
        failure_url="https://shop.test/esewa/failure",
    )


@pytest.fixture
def client(config) -> GatewayClient:
    return GatewayClient(config)


@pytest.fixture
def redirect_config(config) -> ClientConfig:
    return config.model_copy(update={"strategy": InitiationStrategy.FOLLOW_REDIRECT})


@pytest.fixture
def make_client(config) -> Callable[..., GatewayClient]:
    """Build a client whose HTTP calls go to the given handler."""

    def _make(handler, cfg: ClientConfig | None = None) -> GatewayClient:
        transport = httpx.MockTransport(handler)
        return GatewayClient(cfg or config, http_client=httpx.AsyncClient(transport=transport))

    return _make


@pytest.fixture
def callback_data() -> Dict[str, Any]:
    """Success callback as eSewa sends it, signed with the test secret."""
    data = {
        "transaction_code": "000AWEO",
        "status": "COMPLETE",
        "total_amount": "1000.0",
        "transaction_uuid": "250610-162413",
        "product_code": TEST_PRODUCT_CODE,
        "signed_field_names": ",".join(CALLBACK_FIELD_ORDER),
    }
    message = ",".join(f"{name}={data[name]}" for name in CALLBACK_FIELD_ORDER)
    data["signature"] = sign(message)
    return data
