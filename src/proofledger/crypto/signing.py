# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Attestation digests, signing and signer recovery.

Signing pipeline (byte-compatible with ethers ``solidityKeccak256`` +
``wallet.signMessage(arrayify(hash))``):

    1. digest        : keccak256(abi.encodePacked(address user, uint256 amount,
                                                 uint256 nonce, address target))
    2. prefixed hash : keccak256("\\x19Ethereum Signed Message:\\n32" ++ digest)
    3. signature     : secp256k1 ECDSA over the prefixed hash, 65 bytes r ++ s ++ v

``target`` is the ledger's own address. Binding it into the digest means a
signature produced for one deployment is worthless against any other.

Verification recovers the signer's address from the signature; membership in
the attestor directory is checked by the caller, not here.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from eth_abi.packed import encode_packed
from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import keccak, to_checksum_address

from ..core.exceptions import InvalidSignature, ValidationException
from .addresses import UINT256_MAX, to_address

logger = logging.getLogger(__name__)

SIGNATURE_LENGTH = 65

# secp256k1 group order
_SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


def _check_uint256(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= UINT256_MAX:
        raise ValidationException(f"{field} must be a uint256", field=field, value=value)
    return value


def attestation_digest(user: str, amount: int, nonce: int, target: str) -> bytes:
    """Build the domain-separated claim digest.

    Args:
        user: Subject of the claim.
        amount: Contribution amount (uint256).
        nonce: Per-user nonce (uint256).
        target: Address of the ledger the claim is meant for.

    Returns:
        32-byte keccak256 digest of the packed tuple.
    """
    packed = encode_packed(
        ["address", "uint256", "uint256", "address"],
        [
            to_address(user, field="user"),
            _check_uint256(amount, "amount"),
            _check_uint256(nonce, "nonce"),
            to_address(target, field="target"),
        ],
    )
    return keccak(packed)


def to_signature_bytes(signature: bytes | str) -> bytes:
    """Normalize a signature given as raw bytes or 0x-prefixed hex."""
    if isinstance(signature, bytes | bytearray):
        raw = bytes(signature)
    elif isinstance(signature, str):
        try:
            raw = bytes.fromhex(signature.removeprefix("0x"))
        except ValueError as exc:
            raise InvalidSignature("not hex") from exc
    else:
        raise InvalidSignature(f"unsupported type {type(signature).__name__}")
    if len(raw) != SIGNATURE_LENGTH:
        raise InvalidSignature(f"expected {SIGNATURE_LENGTH} bytes, got {len(raw)}")
    return raw


def recover_signer(digest: bytes, signature: bytes | str) -> str:
    """Recover the address that signed ``digest`` (EIP-191 prefixed).

    Raises:
        InvalidSignature: If the signature is malformed or unrecoverable.
    """
    raw = to_signature_bytes(signature)
    try:
        signer = Account.recover_message(encode_defunct(primitive=digest), signature=raw)
    except Exception as exc:
        raise InvalidSignature(str(exc) or exc.__class__.__name__) from exc
    return to_checksum_address(signer)


@dataclass(frozen=True)
class SignedAttestation:
    """A claim plus the attestor signature over its digest."""

    user: str
    amount: int
    nonce: int
    target: str
    signature: bytes
    attestor: str

    @property
    def digest(self) -> bytes:
        return attestation_digest(self.user, self.amount, self.nonce, self.target)

    def to_dict(self) -> dict[str, Any]:
        return {
            "user": self.user,
            "amount": str(self.amount),
            "nonce": self.nonce,
            "contract": self.target,
            "signature": "0x" + self.signature.hex(),
            "attestor": self.attestor,
        }


class AttestorSigner:
    """secp256k1 signer held by an off-chain attestor.

    Keys are generated and parsed with ``cryptography``; the EIP-191 signing
    step is delegated to ``eth_account`` so signatures match what an ethers
    wallet produces for the same key.
    """

    def __init__(self, private_key: ec.EllipticCurvePrivateKey) -> None:
        if not isinstance(private_key.curve, ec.SECP256K1):
            raise ValidationException("attestor key must be on secp256k1", field="private_key")
        self._private_key = private_key
        pub_bytes = private_key.public_key().public_bytes(
            serialization.Encoding.X962,
            serialization.PublicFormat.UncompressedPoint,
        )
        self.address = to_checksum_address(keccak(pub_bytes[1:])[-20:])

    @classmethod
    def generate(cls) -> AttestorSigner:
        """Create a signer with a fresh random key."""
        return cls(ec.generate_private_key(ec.SECP256K1()))

    @classmethod
    def from_hex(cls, private_key_hex: str) -> AttestorSigner:
        """Load a signer from a 32-byte hex private key."""
        try:
            key_bytes = bytes.fromhex(private_key_hex.strip().removeprefix("0x"))
        except ValueError as exc:
            raise ValidationException("private key is not hex", field="private_key") from exc
        if len(key_bytes) != 32:
            raise ValidationException("private key must be 32 bytes", field="private_key")
        value = int.from_bytes(key_bytes, "big")
        if not 0 < value < _SECP256K1_N:
            raise ValidationException("private key out of range for secp256k1", field="private_key")
        return cls(ec.derive_private_key(value, ec.SECP256K1()))

    @staticmethod
    def random_key_hex() -> str:
        """A random private key in hex, for dev tooling."""
        while True:
            value = int.from_bytes(secrets.token_bytes(32), "big")
            if 0 < value < _SECP256K1_N:
                return "0x" + value.to_bytes(32, "big").hex()

    @property
    def private_key_hex(self) -> str:
        return "0x" + self._key_bytes().hex()

    def _key_bytes(self) -> bytes:
        return self._private_key.private_numbers().private_value.to_bytes(32, "big")

    def sign_digest(self, digest: bytes) -> bytes:
        """Sign a 32-byte digest with the EIP-191 prefix. Returns 65 bytes."""
        if len(digest) != 32:
            raise ValidationException("digest must be 32 bytes", field="digest")
        signed = Account.sign_message(encode_defunct(primitive=digest), private_key=self._key_bytes())
        return bytes(signed.signature)

    def sign_attestation(self, user: str, amount: int, nonce: int, target: str) -> SignedAttestation:
        """Produce a signed attestation for ``user`` aimed at ledger ``target``."""
        user = to_address(user, field="user")
        target = to_address(target, field="target")
        digest = attestation_digest(user, amount, nonce, target)
        signature = self.sign_digest(digest)
        logger.debug("Attestor %s signed claim for %s nonce=%d", self.address, user, nonce)
        return SignedAttestation(
            user=user,
            amount=amount,
            nonce=nonce,
            target=target,
            signature=signature,
            attestor=self.address,
        )

    def __repr__(self) -> str:
        return f"AttestorSigner(address={self.address})"
