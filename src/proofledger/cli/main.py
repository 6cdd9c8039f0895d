#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors
"""
proofledger CLI - offline attestor tooling.

Commands:
  proofledger keygen                     Generate an attestor key
  proofledger address                    Show the address for a key
  proofledger digest ...                 Compute a claim digest
  proofledger sign ...                   Sign a claim (attestor side)
  proofledger recover ...                Recover the signer of a claim
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from ..core.config import get_config
from ..core.exceptions import LedgerException
from ..core.logging import configure_logging, correlation_context
from ..crypto.signing import AttestorSigner, attestation_digest, recover_signer

logger = logging.getLogger(__name__)


def output_json(data: dict[str, Any]) -> None:
    print(json.dumps(data, indent=2))


def output_error(exc: LedgerException) -> None:
    """Print an error as JSON to stderr."""
    print(json.dumps(exc.to_dict()), file=sys.stderr)


def _load_signer(args: argparse.Namespace) -> AttestorSigner:
    if args.key:
        return AttestorSigner.from_hex(args.key)
    return get_config().attestor_signer()


def _add_claim_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--user", "-u", required=True, help="Claim subject address")
    parser.add_argument("--amount", "-a", type=int, required=True, help="Contribution amount (base units)")
    parser.add_argument("--nonce", "-n", type=int, required=True, help="Per-user nonce")
    parser.add_argument("--target", "-t", required=True, help="Ledger address the claim is for")


# ============================================================================
# Commands
# ============================================================================


def cmd_keygen(args: argparse.Namespace) -> int:
    """Generate a fresh attestor key."""
    signer = AttestorSigner.generate()
    output_json({"private_key": signer.private_key_hex, "address": signer.address})
    return 0


def cmd_address(args: argparse.Namespace) -> int:
    """Print the address for the configured or supplied key."""
    signer = _load_signer(args)
    output_json({"address": signer.address})
    return 0


def cmd_digest(args: argparse.Namespace) -> int:
    """Print the digest an attestor signs for a claim."""
    digest = attestation_digest(args.user, args.amount, args.nonce, args.target)
    output_json({"digest": "0x" + digest.hex()})
    return 0


def cmd_sign(args: argparse.Namespace) -> int:
    """Sign a claim; output matches what a relayer submits."""
    signer = _load_signer(args)
    signed = signer.sign_attestation(args.user, args.amount, args.nonce, args.target)
    logger.info("Signed claim for %s nonce=%d as %s", signed.user, signed.nonce, signer.address)
    output_json(signed.to_dict())
    return 0


def cmd_recover(args: argparse.Namespace) -> int:
    """Recover the signer address of a signed claim."""
    digest = attestation_digest(args.user, args.amount, args.nonce, args.target)
    signer = recover_signer(digest, args.signature)
    output_json({"signer": signer, "digest": "0x" + digest.hex()})
    return 0


# ============================================================================
# Parser
# ============================================================================


def app() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="proofledger",
        description="Proof-of-contribution ledger tooling",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  proofledger keygen
  proofledger sign -u 0xAlice... -a 50 -n 1 -t 0xLedger... --key 0x59c6...
  proofledger recover -u 0xAlice... -a 50 -n 1 -t 0xLedger... -s 0x...
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("keygen", help="Generate an attestor key")

    address_parser = subparsers.add_parser("address", help="Show the address of an attestor key")
    address_parser.add_argument("--key", "-k", help="Private key hex (default: PROOFLEDGER_ATTESTOR_KEY)")

    digest_parser = subparsers.add_parser("digest", help="Compute a claim digest")
    _add_claim_args(digest_parser)

    sign_parser = subparsers.add_parser("sign", help="Sign a claim as an attestor")
    _add_claim_args(sign_parser)
    sign_parser.add_argument("--key", "-k", help="Private key hex (default: PROOFLEDGER_ATTESTOR_KEY)")

    recover_parser = subparsers.add_parser("recover", help="Recover the signer of a claim")
    _add_claim_args(recover_parser)
    recover_parser.add_argument("--signature", "-s", required=True, help="65-byte signature hex")

    return parser


COMMANDS = {
    "keygen": cmd_keygen,
    "address": cmd_address,
    "digest": cmd_digest,
    "sign": cmd_sign,
    "recover": cmd_recover,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = app()
    args = parser.parse_args(argv)

    if args.verbose:
        configure_logging("DEBUG")

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    with correlation_context():
        try:
            return handler(args)
        except LedgerException as exc:
            output_error(exc)
            return 1


if __name__ == "__main__":
    sys.exit(main())
