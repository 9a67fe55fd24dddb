"""
Pydantic Models - Data Schemas for the eSewa gateway

Contains the models that cross the client boundary:
- Client configuration
- Payment request and the signed form built from it
- Callback verification payload
- Status lookup result
"""

from enum import Enum
from typing import Any, Dict, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from esewa_gateway.payments.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    InitiationStrategy,
    PAYMENT_FORM_FIELDS,
    TransactionStatus,
)
from esewa_gateway.services.money import parse_amount, sum_amounts, to_wire_amount


def _wire_amount(value: Any) -> str:
    try:
        return to_wire_amount(value)
    except TypeError as e:
        raise ValueError(str(e)) from None


def _optional_wire_amount(value: Any) -> str:
    if value is None:
        return "0"
    return _wire_amount(value) or "0"


def _echoed_amount(value: Any) -> str:
    # Echoed amounts are signed exactly as received; only numbers are rendered
    if isinstance(value, str):
        return value
    return _wire_amount(value)


# ============================================================
# Configuration
# ============================================================

class ClientConfig(BaseModel):
    """
    Merchant credentials and endpoints for one GatewayClient.

    env is kept as the raw name here; the client resolves it (and rejects
    unknown names) when it is constructed. None means development.
    """
    model_config = ConfigDict(frozen=True)

    secret_key: Union[str, bytes] = Field(repr=False)
    product_code: str
    success_url: str
    failure_url: str
    env: Optional[str] = None
    strategy: InitiationStrategy = InitiationStrategy.RETURN_PAYLOAD
    timeout: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)

    @field_validator("env", mode="before")
    @classmethod
    def _env_value(cls, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        return value


# ============================================================
# Payment initiation
# ============================================================

class PaymentRequest(BaseModel):
    """
    One payment attempt.

    All amounts are decimal strings; numbers are accepted and rendered the
    way the gateway renders them. Charges and tax default to "0".
    transaction_uuid must be unique per attempt and is never generated here.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    amount: str
    tax_amount: str = "0"
    product_service_charge: str = Field(
        default="0",
        validation_alias=AliasChoices("product_service_charge", "service_charge"),
    )
    product_delivery_charge: str = Field(
        default="0",
        validation_alias=AliasChoices("product_delivery_charge", "delivery_charge"),
    )
    total_amount: str
    transaction_uuid: str = Field(min_length=1)

    @field_validator("tax_amount", "product_service_charge", "product_delivery_charge", mode="before")
    @classmethod
    def _optional_amount(cls, value: Any) -> str:
        return _optional_wire_amount(value)

    @field_validator("amount", "total_amount", mode="before")
    @classmethod
    def _required_amount(cls, value: Any) -> str:
        if value is None:
            raise ValueError("amount is required")
        return _wire_amount(value)

    @field_validator("amount", "tax_amount", "product_service_charge", "product_delivery_charge", "total_amount")
    @classmethod
    def _valid_amount(cls, value: str) -> str:
        parse_amount(value)
        return value

    @classmethod
    def from_components(
        cls,
        amount: Any,
        transaction_uuid: str,
        tax_amount: Any = "0",
        product_service_charge: Any = "0",
        product_delivery_charge: Any = "0",
    ) -> "PaymentRequest":
        """Build a request whose total_amount is the sum of its components."""
        return cls(
            amount=amount,
            tax_amount=tax_amount,
            product_service_charge=product_service_charge,
            product_delivery_charge=product_delivery_charge,
            total_amount=sum_amounts(
                _wire_amount(amount),
                _optional_wire_amount(tax_amount),
                _optional_wire_amount(product_service_charge),
                _optional_wire_amount(product_delivery_charge),
            ),
            transaction_uuid=transaction_uuid,
        )

    @property
    def components_total(self) -> str:
        """Sum of amount, tax and charges."""
        return sum_amounts(
            self.amount,
            self.tax_amount,
            self.product_service_charge,
            self.product_delivery_charge,
        )


class SignedPayload(BaseModel):
    """Form fields posted to the gateway. Field order is wire order."""
    model_config = ConfigDict(frozen=True)

    amount: str
    tax_amount: str
    product_service_charge: str
    product_delivery_charge: str
    total_amount: str
    transaction_uuid: str
    product_code: str
    success_url: str
    failure_url: str
    signed_field_names: str
    signature: str

    def as_form(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in PAYMENT_FORM_FIELDS}


class PaymentForm(BaseModel):
    """What the caller needs to submit the payment: where, how, and what."""
    model_config = ConfigDict(frozen=True)

    url: str
    method: Literal["POST"] = "POST"
    payload: SignedPayload


# ============================================================
# Callbacks and status
# ============================================================

class CallbackVerification(BaseModel):
    """Fields eSewa echoes back to the success URL."""
    model_config = ConfigDict(frozen=True)

    transaction_code: str
    status: str
    total_amount: str
    transaction_uuid: str
    product_code: str
    signed_field_names: str
    signature: str = ""

    @field_validator("total_amount", mode="before")
    @classmethod
    def _total_amount_text(cls, value: Any) -> str:
        return _echoed_amount(value)


class StatusQueryResult(BaseModel):
    """Response of the transaction status endpoint."""
    model_config = ConfigDict(frozen=True)

    product_code: str
    transaction_uuid: str
    total_amount: str
    status: str
    ref_id: Optional[str] = None

    @field_validator("total_amount", mode="before")
    @classmethod
    def _total_amount_text(cls, value: Any) -> str:
        return _echoed_amount(value)

    @field_validator("ref_id", mode="before")
    @classmethod
    def _ref_id_text(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        return str(value)

    @property
    def transaction_status(self) -> TransactionStatus:
        try:
            return TransactionStatus(self.status.strip().upper())
        except ValueError:
            return TransactionStatus.UNKNOWN

    @property
    def is_complete(self) -> bool:
        return self.transaction_status is TransactionStatus.COMPLETE


__all__ = [
    "ClientConfig",
    "PaymentRequest",
    "SignedPayload",
    "PaymentForm",
    "CallbackVerification",
    "StatusQueryResult",
    "TransactionStatus",
    "InitiationStrategy",
]
