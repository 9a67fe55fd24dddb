#!/usr/bin/env python3
"""
Look up an eSewa transaction on the status endpoint.

Reads ESEWA_* settings from the environment (or .env in the repo root).

Usage:
    python scripts/check_transaction.py --uuid 250610-162413 --amount 100
    python scripts/check_transaction.py --uuid 250610-162413 --amount 100 --timeout 5
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from esewa_gateway.errors import GatewayError
from esewa_gateway.logging import (
    configure_logging,
    get_logger,
    sanitize_id_for_logging,
    sanitize_string_for_logging,
)
from esewa_gateway.payments.config import load_config_from_env
from esewa_gateway.services.payments import GatewayClient

logger = get_logger("check_transaction")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check eSewa transaction status")
    parser.add_argument("--uuid", required=True, help="transaction_uuid used when the payment was initiated")
    parser.add_argument("--amount", required=True, help="total_amount used when the payment was initiated")
    parser.add_argument("--timeout", type=float, default=None, help="request timeout in seconds")
    return parser.parse_args(argv)


async def check_transaction(uuid: str, amount: str, timeout: float | None) -> int:
    """Print the status result as JSON. Returns the process exit code."""
    try:
        config = load_config_from_env()
        async with GatewayClient(config) as client:
            result = await client.get_transaction_status(uuid, amount, timeout=timeout)
    except GatewayError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print(json.dumps(result.model_dump(), indent=2, ensure_ascii=False))
    if not result.is_complete:
        logger.warning(
            "Transaction %s is not complete: %s",
            sanitize_id_for_logging(uuid),
            sanitize_string_for_logging(result.status),
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    env_path = Path(__file__).parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    configure_logging()
    args = parse_args(argv)
    return asyncio.run(check_transaction(args.uuid, args.amount, args.timeout))


if __name__ == "__main__":
    sys.exit(main())
