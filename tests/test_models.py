"""
Tests for Pydantic models
"""

import pytest
from pydantic import ValidationError

from esewa_gateway.models import (
    CallbackVerification,
    ClientConfig,
    PaymentRequest,
    SignedPayload,
    StatusQueryResult,
    TransactionStatus,
)
from esewa_gateway.payments.constants import Environment, InitiationStrategy, PAYMENT_FORM_FIELDS


class TestClientConfig:
    """Tests for ClientConfig model."""

    def test_defaults(self, config):
        assert config.env is None
        assert config.strategy == InitiationStrategy.RETURN_PAYLOAD
        assert config.timeout == 10.0

    def test_is_frozen(self, config):
        with pytest.raises(ValidationError):
            config.product_code = "OTHER"

    def test_secret_not_in_repr(self, config):
        assert config.secret_key not in repr(config)

    def test_env_enum_is_stored_as_value(self):
        cfg = ClientConfig(
            secret_key="s",
            product_code="P",
            success_url="https://a",
            failure_url="https://b",
            env=Environment.PRODUCTION,
        )
        assert cfg.env == "production"

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            ClientConfig(
                secret_key="s",
                product_code="P",
                success_url="https://a",
                failure_url="https://b",
                timeout=0,
            )


class TestPaymentRequest:
    """Tests for PaymentRequest model."""

    def test_optional_fields_default_to_zero(self):
        request = PaymentRequest(amount="100", total_amount="100", transaction_uuid="TXN-001")

        assert request.tax_amount == "0"
        assert request.product_service_charge == "0"
        assert request.product_delivery_charge == "0"

    def test_empty_optional_fields_default_to_zero(self):
        request = PaymentRequest(
            amount="100",
            tax_amount="",
            product_service_charge=None,
            total_amount="100",
            transaction_uuid="TXN-001",
        )
        assert request.tax_amount == "0"
        assert request.product_service_charge == "0"

    def test_short_aliases(self):
        request = PaymentRequest(
            amount="100",
            service_charge="5",
            delivery_charge="10",
            total_amount="115",
            transaction_uuid="TXN-001",
        )
        assert request.product_service_charge == "5"
        assert request.product_delivery_charge == "10"

    def test_numbers_become_strings(self):
        request = PaymentRequest(amount=100, tax_amount=13.0, total_amount=113, transaction_uuid="T")
        assert request.amount == "100"
        assert request.tax_amount == "13"
        assert request.total_amount == "113"

    @pytest.mark.parametrize("amount", ["abc", "-5", ""])
    def test_invalid_amount(self, amount):
        with pytest.raises(ValidationError):
            PaymentRequest(amount=amount, total_amount="100", transaction_uuid="T")

    def test_transaction_uuid_required(self):
        with pytest.raises(ValidationError):
            PaymentRequest(amount="100", total_amount="100", transaction_uuid="")

    def test_from_components_sums_total(self):
        request = PaymentRequest.from_components(
            amount="100",
            transaction_uuid="T",
            tax_amount="10",
            product_delivery_charge="5",
        )
        assert request.total_amount == "115"
        assert request.components_total == "115"


class TestSignedPayload:
    def test_form_is_in_wire_order(self):
        payload = SignedPayload(**{name: name for name in PAYMENT_FORM_FIELDS})
        assert tuple(payload.as_form().keys()) == PAYMENT_FORM_FIELDS


class TestCallbackVerification:
    def test_parses_callback(self, callback_data):
        callback = CallbackVerification.model_validate(callback_data)

        assert callback.transaction_code == "000AWEO"
        assert callback.total_amount == "1000.0"

    def test_string_total_amount_is_kept_verbatim(self, callback_data):
        callback_data["total_amount"] = " 1000.0 "
        callback = CallbackVerification.model_validate(callback_data)
        assert callback.total_amount == " 1000.0 "

    def test_numeric_total_amount(self, callback_data):
        callback_data["total_amount"] = 1000.0
        callback = CallbackVerification.model_validate(callback_data)
        assert callback.total_amount == "1000"

    def test_missing_field(self, callback_data):
        del callback_data["status"]
        with pytest.raises(ValidationError):
            CallbackVerification.model_validate(callback_data)


class TestStatusQueryResult:
    def test_complete(self):
        result = StatusQueryResult(
            product_code="EPAYTEST",
            transaction_uuid="T",
            total_amount=100.0,
            status="COMPLETE",
            ref_id="0001TS9",
        )
        assert result.total_amount == "100"
        assert result.transaction_status is TransactionStatus.COMPLETE
        assert result.is_complete is True

    def test_pending_without_ref_id(self):
        result = StatusQueryResult(
            product_code="EPAYTEST",
            transaction_uuid="T",
            total_amount="100",
            status="PENDING",
            ref_id=None,
        )
        assert result.ref_id is None
        assert result.is_complete is False

    def test_string_total_amount_is_kept_verbatim(self):
        result = StatusQueryResult(
            product_code="EPAYTEST",
            transaction_uuid="T",
            total_amount="100.00 ",
            status="COMPLETE",
        )
        assert result.total_amount == "100.00 "

    def test_unknown_status(self):
        result = StatusQueryResult(
            product_code="EPAYTEST", transaction_uuid="T", total_amount="1", status="WHATEVER"
        )
        assert result.transaction_status is TransactionStatus.UNKNOWN
