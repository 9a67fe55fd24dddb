"""Tests for scripts/check_transaction.py"""
import importlib.util
import json
from pathlib import Path

import pytest

from esewa_gateway.errors import StatusQueryError
from esewa_gateway.models import StatusQueryResult
from esewa_gateway.services.payments import GatewayClient

SCRIPT = Path(__file__).parent.parent / "scripts" / "check_transaction.py"


@pytest.fixture
def script():
    spec = importlib.util.spec_from_file_location("check_transaction", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def gateway_env(monkeypatch):
    monkeypatch.setenv("ESEWA_SECRET_KEY", "8gBm/:&EnhH.1/q")
    monkeypatch.setenv("ESEWA_PRODUCT_CODE", "EPAYTEST")
    monkeypatch.setenv("ESEWA_SUCCESS_URL", "https://shop.test/success")
    monkeypatch.setenv("ESEWA_FAILURE_URL", "https://shop.test/failure")
    return monkeypatch


@pytest.mark.asyncio
async def test_prints_status(script, gateway_env, capsys):
    async def fake_status(self, transaction_uuid, total_amount, *, timeout=None):
        assert (transaction_uuid, total_amount, timeout) == ("TXN-1", "100", 3.0)
        return StatusQueryResult(
            product_code="EPAYTEST",
            transaction_uuid=transaction_uuid,
            total_amount=total_amount,
            status="COMPLETE",
            ref_id="REF1",
        )

    gateway_env.setattr(GatewayClient, "get_transaction_status", fake_status)

    code = await script.check_transaction("TXN-1", "100", 3.0)

    assert code == 0
    printed = json.loads(capsys.readouterr().out)
    assert printed["status"] == "COMPLETE"
    assert printed["ref_id"] == "REF1"


@pytest.mark.asyncio
async def test_incomplete_transaction_logs_escaped_uuid(script, gateway_env, capsys, caplog):
    async def pending_status(self, transaction_uuid, total_amount, *, timeout=None):
        return StatusQueryResult(
            product_code="EPAYTEST",
            transaction_uuid=transaction_uuid,
            total_amount=total_amount,
            status="PENDING",
        )

    gateway_env.setattr(GatewayClient, "get_transaction_status", pending_status)

    with caplog.at_level("WARNING"):
        code = await script.check_transaction("TXN-1\nFAKE ENTRY", "100", None)

    assert code == 0
    assert "TXN-1\\nFAKE ENTRY" in caplog.text
    assert "TXN-1\nFAKE" not in caplog.text


@pytest.mark.asyncio
async def test_gateway_error_exits_1(script, gateway_env, capsys):
    async def failing_status(self, transaction_uuid, total_amount, *, timeout=None):
        raise StatusQueryError("Transaction status lookup failed: HTTP 503", status_code=503)

    gateway_env.setattr(GatewayClient, "get_transaction_status", failing_status)

    code = await script.check_transaction("TXN-1", "100", None)

    assert code == 1
    assert "HTTP 503" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_missing_config_exits_1(script, monkeypatch, capsys):
    monkeypatch.delenv("ESEWA_SECRET_KEY", raising=False)

    code = await script.check_transaction("TXN-1", "100", None)

    assert code == 1
    assert "ESEWA_SECRET_KEY" in capsys.readouterr().err


def test_parse_args(script):
    args = script.parse_args(["--uuid", "TXN-1", "--amount", "100", "--timeout", "2"])
    assert (args.uuid, args.amount, args.timeout) == ("TXN-1", "100", 2.0)
