"""Payment Service - eSewa ePay v2 Integration
All network methods use async/await with a shared httpx.AsyncClient.
"""

import base64
import binascii
import json
from typing import Any, Mapping, Union

import httpx
from pydantic import ValidationError

from esewa_gateway.errors import (
    ConfigError,
    DecodeError,
    NetworkError,
    PaymentInitiationError,
    SignatureMismatch,
    StatusQueryError,
    ERROR_INVALID_BASE64,
    ERROR_INVALID_CALLBACK,
    ERROR_INVALID_JSON,
    ERROR_INVALID_SIGNATURE,
    ERROR_NO_REDIRECT,
    ERROR_STATUS_UNAVAILABLE,
)
from esewa_gateway.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from esewa_gateway.models import (
    CallbackVerification,
    ClientConfig,
    PaymentForm,
    PaymentRequest,
    SignedPayload,
    StatusQueryResult,
)
from esewa_gateway.payments.config import normalize_environment
from esewa_gateway.payments.constants import (
    API_URLS,
    CALLBACK_SIGNED_FIELDS,
    PAYMENT_SIGNED_FIELDS,
    PAYMENT_SIGNED_FIELD_NAMES,
    STATUS_URLS,
    InitiationStrategy,
)
from esewa_gateway.services.money import amounts_equal, to_wire_amount
from esewa_gateway.utils.crypto import (
    build_signature_message,
    generate_hmac_sha256,
    signatures_match,
)

logger = get_logger(__name__)


class GatewayClient:
    """Client for the eSewa ePay v2 payment gateway"""

    def __init__(self, config: ClientConfig, *, http_client: httpx.AsyncClient | None = None):
        self.config = config
        self.env = normalize_environment(config.env)
        self._validate_config()

        # Endpoints are fixed per environment for the lifetime of the client
        self.base_url = API_URLS[self.env]
        self.status_url = STATUS_URLS[self.env]
        self.strategy = config.strategy

        # HTTP client (lazy init unless injected); injected clients belong to the caller
        self._http_client: httpx.AsyncClient | None = http_client
        self._owns_client = http_client is None

    # ==================== INTERNAL HELPERS ====================

    def _validate_config(self) -> None:
        """Reject configs that cannot produce a valid request."""
        missing = [
            name
            for name in ("secret_key", "product_code", "success_url", "failure_url")
            if not getattr(self.config, name)
        ]
        if missing:
            raise ConfigError(
                f"eSewa client config is missing: {', '.join(missing)}",
                payload={"missing": missing},
            )

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout, connect=5.0),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            )
        return self._http_client

    @staticmethod
    def _request_options(timeout: float | None) -> dict[str, Any]:
        # Passing timeout=None to httpx disables the timeout, so omit it instead
        return {} if timeout is None else {"timeout": timeout}

    # ==================== SIGNING ====================

    def generate_signature(self, total_amount: str, transaction_uuid: str, product_code: str) -> str:
        """
        Sign a payment request.

        Message: total_amount=<a>,transaction_uuid=<u>,product_code=<p>
        Signature: base64(HMAC-SHA256(message, secret_key))
        """
        message = build_signature_message(
            {
                "total_amount": total_amount,
                "transaction_uuid": transaction_uuid,
                "product_code": product_code,
            },
            PAYMENT_SIGNED_FIELDS,
        )
        return generate_hmac_sha256(message, self.config.secret_key)

    def compute_callback_signature(self, response: CallbackVerification) -> str:
        """Signature eSewa should have attached to this callback."""
        message = build_signature_message(response.model_dump(), CALLBACK_SIGNED_FIELDS)
        return generate_hmac_sha256(message, self.config.secret_key)

    # ==================== PAYMENT INITIATION ====================

    def build_payment_form(self, request: PaymentRequest | Mapping[str, Any]) -> PaymentForm:
        """
        Build the signed form for the caller to POST to the gateway.

        Accepts a PaymentRequest or a plain mapping with the same fields.
        """
        if not isinstance(request, PaymentRequest):
            request = PaymentRequest.model_validate(request)

        if not amounts_equal(request.total_amount, request.components_total):
            logger.warning(
                "eSewa payment %s: total_amount %s differs from components sum %s",
                sanitize_id_for_logging(request.transaction_uuid),
                request.total_amount,
                request.components_total,
            )

        product_code = self.config.product_code
        signature = self.generate_signature(request.total_amount, request.transaction_uuid, product_code)

        payload = SignedPayload(
            amount=request.amount,
            tax_amount=request.tax_amount,
            product_service_charge=request.product_service_charge,
            product_delivery_charge=request.product_delivery_charge,
            total_amount=request.total_amount,
            transaction_uuid=request.transaction_uuid,
            product_code=product_code,
            success_url=self.config.success_url,
            failure_url=self.config.failure_url,
            signed_field_names=PAYMENT_SIGNED_FIELD_NAMES,
            signature=signature,
        )
        return PaymentForm(url=self.base_url, method="POST", payload=payload)

    async def initiate_payment(
        self,
        request: PaymentRequest | Mapping[str, Any],
        *,
        timeout: float | None = None,
    ) -> Union[PaymentForm, str]:
        """
        Start a payment using the configured strategy.

        - RETURN_PAYLOAD: returns the PaymentForm (no network call)
        - FOLLOW_REDIRECT: posts the form and returns the final redirect URL

        Raises:
            PaymentInitiationError: FOLLOW_REDIRECT and the gateway did not redirect
            NetworkError: FOLLOW_REDIRECT and the POST failed
        """
        form = self.build_payment_form(request)
        logger.info(
            "eSewa payment initiation (%s): transaction=%s total=%s env=%s",
            self.strategy.value,
            sanitize_id_for_logging(form.payload.transaction_uuid),
            form.payload.total_amount,
            self.env,
        )

        if self.strategy is InitiationStrategy.RETURN_PAYLOAD:
            return form
        return await self._submit_payment_form(form, timeout)

    async def _submit_payment_form(self, form: PaymentForm, timeout: float | None) -> str:
        """POST the form-urlencoded payload and return where the gateway redirected."""
        transaction_uuid = form.payload.transaction_uuid
        client = await self._get_http_client()
        try:
            response = await client.post(
                form.url,
                data=form.payload.as_form(),
                headers={"Accept": "text/html,application/json"},
                follow_redirects=True,
                **self._request_options(timeout),
            )
            logger.info(
                "eSewa submission response status: %s for transaction %s",
                response.status_code,
                sanitize_id_for_logging(transaction_uuid),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.exception(
                "eSewa submission error %s for transaction %s",
                e.response.status_code,
                sanitize_id_for_logging(transaction_uuid),
            )
            raise NetworkError(
                f"eSewa rejected payment submission: HTTP {e.response.status_code}",
                status_code=e.response.status_code,
                payload={"transaction_uuid": transaction_uuid, "body": e.response.text[:200]},
            ) from e
        except httpx.RequestError as e:
            logger.exception("eSewa network error during payment submission")
            raise NetworkError(
                f"Failed to connect to eSewa: {e!s}",
                payload={"transaction_uuid": transaction_uuid},
            ) from e

        if not response.history:
            logger.error(
                "eSewa submission for transaction %s returned %s without a redirect",
                sanitize_id_for_logging(transaction_uuid),
                response.status_code,
            )
            raise PaymentInitiationError(
                ERROR_NO_REDIRECT,
                payload={"transaction_uuid": transaction_uuid, "status_code": response.status_code},
            )

        redirect_url = str(response.url)
        logger.info(
            "eSewa payment redirect obtained for transaction %s after %s hop(s)",
            sanitize_id_for_logging(transaction_uuid),
            len(response.history),
        )
        return redirect_url

    # ==================== CALLBACKS ====================

    def verify_callback(
        self,
        signature: str,
        response: CallbackVerification | Mapping[str, Any],
    ) -> bool:
        """
        Recompute the callback signature and compare it with the received one.

        Returns False on mismatch (or on a response missing signed fields);
        the caller decides what a mismatch means.
        """
        if not isinstance(response, CallbackVerification):
            try:
                response = CallbackVerification.model_validate(response)
            except ValidationError:
                logger.warning("eSewa callback: response is missing signed fields")
                return False

        expected = self.compute_callback_signature(response)
        if not signatures_match(expected, signature):
            logger.warning(
                "eSewa callback: signature mismatch for transaction %s",
                sanitize_id_for_logging(response.transaction_uuid),
            )
            return False

        logger.info(
            "eSewa callback: signature verified for transaction %s",
            sanitize_id_for_logging(response.transaction_uuid),
        )
        return True

    @staticmethod
    def decode_callback_raw(encoded: str | bytes) -> dict[str, Any]:
        """
        Decode a base64 JSON callback blob into a dict without shape checks.

        Accepts the standard and URL-safe alphabets with or without padding.

        Raises:
            DecodeError: Invalid base64, invalid UTF-8, bad JSON or not a JSON object
        """
        if isinstance(encoded, bytes):
            try:
                encoded = encoded.decode("ascii")
            except UnicodeDecodeError as e:
                raise DecodeError(ERROR_INVALID_BASE64) from e

        # Query-string decoding turns "+" into " "
        text = (encoded or "").strip().replace(" ", "+")
        if not text:
            raise DecodeError(ERROR_INVALID_BASE64)

        altchars = b"-_" if ("-" in text or "_" in text) else None
        padded = text + "=" * (-len(text) % 4)
        try:
            raw = base64.b64decode(padded, altchars=altchars, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(ERROR_INVALID_BASE64) from e

        try:
            data = json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise DecodeError(ERROR_INVALID_JSON) from e
        except json.JSONDecodeError as e:
            raise DecodeError(ERROR_INVALID_JSON) from e

        if not isinstance(data, dict):
            raise DecodeError(ERROR_INVALID_JSON, payload={"type": type(data).__name__})
        return data

    def decode_callback(self, encoded: str | bytes) -> CallbackVerification:
        """
        Decode the base64 callback payload into a CallbackVerification.

        The embedded signature is NOT checked; use verify_encoded_callback
        when the payload must be trusted.

        Raises:
            DecodeError: Undecodable payload or one missing verification fields
        """
        data = self.decode_callback_raw(encoded)
        try:
            return CallbackVerification.model_validate(data)
        except ValidationError as e:
            raise DecodeError(
                ERROR_INVALID_CALLBACK,
                payload={"fields": sorted(data.keys())},
            ) from e

    def verify_encoded_callback(self, encoded: str | bytes) -> CallbackVerification:
        """
        Decode the callback payload and check its embedded signature.

        Raises:
            DecodeError: Undecodable payload
            SignatureMismatch: Signature does not match the recomputed one
        """
        callback = self.decode_callback(encoded)
        if not self.verify_callback(callback.signature, callback):
            raise SignatureMismatch(
                ERROR_INVALID_SIGNATURE,
                payload={"transaction_uuid": callback.transaction_uuid},
            )
        return callback

    # ==================== STATUS ====================

    async def get_transaction_status(
        self,
        transaction_uuid: str,
        total_amount: Any,
        *,
        timeout: float | None = None,
    ) -> StatusQueryResult:
        """
        Look up a transaction on the status endpoint.

        Raises:
            StatusQueryError: Transport failure, non-2xx, or unusable body
        """
        params = {
            "product_code": self.config.product_code,
            "total_amount": to_wire_amount(total_amount),
            "transaction_uuid": transaction_uuid,
        }
        safe_uuid = sanitize_id_for_logging(transaction_uuid)

        client = await self._get_http_client()
        try:
            response = await client.get(
                self.status_url,
                params=params,
                headers={"Accept": "application/json"},
                **self._request_options(timeout),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.exception(
                "eSewa status API error %s for transaction %s",
                e.response.status_code,
                safe_uuid,
            )
            raise StatusQueryError(
                f"{ERROR_STATUS_UNAVAILABLE}: HTTP {e.response.status_code}",
                status_code=e.response.status_code,
                payload={"transaction_uuid": transaction_uuid, "body": e.response.text[:200]},
            ) from e
        except httpx.RequestError as e:
            logger.exception("eSewa status network error")
            raise StatusQueryError(
                f"Failed to connect to eSewa status API: {e!s}",
                payload={"transaction_uuid": transaction_uuid},
            ) from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error("eSewa status: non-JSON body for transaction %s", safe_uuid)
            raise StatusQueryError(
                f"{ERROR_STATUS_UNAVAILABLE}: response is not JSON",
                status_code=response.status_code,
                payload={"transaction_uuid": transaction_uuid},
            ) from e

        if not isinstance(data, dict):
            raise StatusQueryError(
                f"{ERROR_STATUS_UNAVAILABLE}: unexpected response body",
                status_code=response.status_code,
                payload={"transaction_uuid": transaction_uuid},
            )

        try:
            result = StatusQueryResult.model_validate(data)
        except ValidationError as e:
            logger.error("eSewa status: unexpected keys %s", list(data.keys()))
            raise StatusQueryError(
                f"{ERROR_STATUS_UNAVAILABLE}: response is missing fields",
                status_code=response.status_code,
                payload={"transaction_uuid": transaction_uuid, "raw": data},
            ) from e

        logger.info(
            "eSewa status for transaction %s: %s",
            safe_uuid,
            sanitize_string_for_logging(result.status),
        )
        return result

    # ==================== LIFECYCLE ====================

    async def aclose(self) -> None:
        """Close http client if created here."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "GatewayClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
