#!/usr/bin/env python3
"""Command-line tools for the Adyen connector.

Usage:
    python -m adyen_connector.cli scrub --input transcript.log --output clean.log
    python -m adyen_connector.cli verify --number 4111111111111111 --month 3 --year 2030 \
        --name "Jane Doe" --cvc 737 --order-id order-1 --simulate
"""

import argparse
import json
import logging
import sys
from typing import Optional

from .config import GatewayConfig
from .connectors import AdyenConnector, CardDetails, SimulatorTransport
from .scrubbing import scrub

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SIMULATOR_CONFIG = GatewayConfig(
    username="ws@Company.Simulator",
    password="simulator",
    merchant_account="SimulatorMerchant",
)


def run_scrub(input_file: Optional[str], output_file: Optional[str]) -> int:
    """Redact a transcript read from a file or stdin.

    Returns:
        Exit code (0 for success).
    """
    if input_file:
        with open(input_file, "r", encoding="utf-8") as f:
            transcript = f.read()
    else:
        transcript = sys.stdin.read()

    cleaned = scrub(transcript)

    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(cleaned)
        logger.info(f"Scrubbed transcript written to {output_file}")
    else:
        sys.stdout.write(cleaned)
    return 0


def run_verify(args: argparse.Namespace) -> int:
    """Verify a card and print the outcome as JSON.

    Returns:
        Exit code (0 if the card verified, 1 otherwise, 2 on bad input).
    """
    if args.simulate:
        connector = AdyenConnector(SIMULATOR_CONFIG, transport=SimulatorTransport())
    else:
        try:
            connector = AdyenConnector(GatewayConfig.from_env())
        except ValueError as e:
            logger.error(f"Configuration error: {e}")
            return 2

    try:
        card = CardDetails(
            number=args.number,
            month=args.month,
            year=args.year,
            name=args.name,
            verification_value=args.cvc,
        )
        outcome = connector.verify(card, {"order_id": args.order_id, "currency": args.currency})
    except ValueError as e:
        logger.error(f"Invalid request: {e}")
        return 2

    print(json.dumps(outcome.model_dump(mode="json"), indent=2))
    return 0 if outcome.success else 1


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Adyen connector tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    scrub_parser = subparsers.add_parser("scrub", help="Redact credentials and card data from a transcript")
    scrub_parser.add_argument("--input", "-i", help="Transcript file (default: stdin)")
    scrub_parser.add_argument("--output", "-o", help="Output file (default: stdout)")

    verify_parser = subparsers.add_parser("verify", help="Verify a card with a zero-amount authorization")
    verify_parser.add_argument("--number", required=True, help="Card number")
    verify_parser.add_argument("--month", required=True, type=int, help="Expiry month")
    verify_parser.add_argument("--year", required=True, type=int, help="Expiry year")
    verify_parser.add_argument("--name", required=True, help="Card holder name")
    verify_parser.add_argument("--cvc", help="Card verification code")
    verify_parser.add_argument("--order-id", required=True, help="Merchant order reference")
    verify_parser.add_argument("--currency", default=None, help="Currency code override")
    verify_parser.add_argument(
        "--simulate",
        action="store_true",
        help="Use the in-memory simulator instead of the remote API",
    )

    args = parser.parse_args(argv)

    if args.command == "scrub":
        return run_scrub(args.input, args.output)
    if args.command == "verify":
        return run_verify(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
