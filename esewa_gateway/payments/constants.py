"""Gateway constants, enums, and aliases."""
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Environment(str, Enum):
    """eSewa deployment targets."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class InitiationStrategy(str, Enum):
    """
    How initiate_payment hands the payment to the gateway.

    - return_payload: build the signed form and return it; the caller's
      frontend submits it (usually an auto-submitting HTML form)
    - follow_redirect: POST the form from the server, follow redirects and
      return the URL the payer should be sent to
    """
    RETURN_PAYLOAD = "return_payload"
    FOLLOW_REDIRECT = "follow_redirect"


class TransactionStatus(str, Enum):
    """
    Status strings returned by the status endpoint.

    Flow:
        PENDING -> COMPLETE -> FULL_REFUND / PARTIAL_REFUND
                -> CANCELED
        AMBIGUOUS: payment halted mid-way, settle manually
        NOT_FOUND: session expired or never reached eSewa
    """
    PENDING = "PENDING"
    COMPLETE = "COMPLETE"
    FULL_REFUND = "FULL_REFUND"
    PARTIAL_REFUND = "PARTIAL_REFUND"
    AMBIGUOUS = "AMBIGUOUS"
    NOT_FOUND = "NOT_FOUND"
    CANCELED = "CANCELED"
    UNKNOWN = "UNKNOWN"


DEFAULT_ENVIRONMENT = Environment.DEVELOPMENT

# Environment -> form submission endpoint
API_URLS: Mapping[str, str] = MappingProxyType({
    Environment.DEVELOPMENT.value: "https://rc-epay.esewa.com.np/api/epay/main/v2/form",
    Environment.PRODUCTION.value: "https://epay.esewa.com.np/api/epay/main/v2/form",
})

# Environment -> transaction status endpoint
STATUS_URLS: Mapping[str, str] = MappingProxyType({
    Environment.DEVELOPMENT.value: "https://rc.esewa.com.np/api/epay/transaction/status/",
    Environment.PRODUCTION.value: "https://epay.esewa.com.np/api/epay/transaction/status/",
})

# Environment name aliases (input -> canonical)
ENVIRONMENT_ALIASES: Mapping[str, str] = MappingProxyType({
    "development": Environment.DEVELOPMENT.value,
    "dev": Environment.DEVELOPMENT.value,
    "test": Environment.DEVELOPMENT.value,
    "testing": Environment.DEVELOPMENT.value,
    "rc": Environment.DEVELOPMENT.value,
    "uat": Environment.DEVELOPMENT.value,
    "sandbox": Environment.DEVELOPMENT.value,
    "production": Environment.PRODUCTION.value,
    "prod": Environment.PRODUCTION.value,
    "live": Environment.PRODUCTION.value,
})

# Field order matters: the gateway rebuilds the message in this exact order
PAYMENT_SIGNED_FIELDS: tuple[str, ...] = ("total_amount", "transaction_uuid", "product_code")
CALLBACK_SIGNED_FIELDS: tuple[str, ...] = (
    "transaction_code",
    "status",
    "total_amount",
    "transaction_uuid",
    "product_code",
    "signed_field_names",
)

PAYMENT_SIGNED_FIELD_NAMES = ",".join(PAYMENT_SIGNED_FIELDS)

# Wire order of the payment form
PAYMENT_FORM_FIELDS: tuple[str, ...] = (
    "amount",
    "tax_amount",
    "product_service_charge",
    "product_delivery_charge",
    "total_amount",
    "transaction_uuid",
    "product_code",
    "success_url",
    "failure_url",
    "signed_field_names",
    "signature",
)

DEFAULT_TIMEOUT_SECONDS = 10.0
