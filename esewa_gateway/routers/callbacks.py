"""
Callbacks Router

Success and failure redirect endpoints for eSewa.
eSewa sends the payer back to success_url with a base64 JSON blob in the
`data` query parameter; the blob carries its own signature, which is
verified here before anything is reported as paid.
"""

from typing import Awaitable, Callable, Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from esewa_gateway.errors import DecodeError, SignatureMismatch, ERROR_PAYMENT_FAILED
from esewa_gateway.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from esewa_gateway.models import CallbackVerification
from esewa_gateway.services.payments import GatewayClient

logger = get_logger(__name__)

CallbackHandler = Callable[[CallbackVerification], Awaitable[None]]


def create_callback_router(
    client: GatewayClient,
    prefix: str = "/esewa",
    on_success: Optional[CallbackHandler] = None,
) -> APIRouter:
    """
    Build the router for one GatewayClient.

    Args:
        client: Client whose secret verifies the callbacks
        prefix: Path prefix for both endpoints
        on_success: Awaited with the verified callback before responding
    """
    router = APIRouter(prefix=prefix, tags=["esewa"])

    @router.get("/success")
    async def esewa_success(data: str = Query(default="")):
        """Handle the success redirect."""
        try:
            callback = client.verify_encoded_callback(data)
        except DecodeError as e:
            logger.warning("eSewa success callback: could not decode data (%s)", e)
            return JSONResponse({"ok": False, "error": str(e)}, status_code=400)
        except SignatureMismatch as e:
            logger.warning(
                "eSewa success callback: signature mismatch for transaction %s",
                sanitize_id_for_logging(e.payload.get("transaction_uuid")),
            )
            return JSONResponse({"ok": False, "error": str(e)}, status_code=400)

        logger.info(
            "eSewa success callback verified: transaction=%s status=%s",
            sanitize_id_for_logging(callback.transaction_uuid),
            sanitize_string_for_logging(callback.status),
        )

        if on_success is not None:
            await on_success(callback)

        return {
            "ok": True,
            "transaction_uuid": callback.transaction_uuid,
            "transaction_code": callback.transaction_code,
            "status": callback.status,
            "total_amount": callback.total_amount,
        }

    @router.get("/failure")
    async def esewa_failure(transaction_uuid: Optional[str] = Query(default=None)):
        """Handle the failure redirect (payer cancelled or payment failed)."""
        logger.info(
            "eSewa failure callback: transaction=%s",
            sanitize_id_for_logging(transaction_uuid),
        )
        body = {"ok": False, "error": ERROR_PAYMENT_FAILED}
        if transaction_uuid:
            body["transaction_uuid"] = transaction_uuid
        return body

    return router
