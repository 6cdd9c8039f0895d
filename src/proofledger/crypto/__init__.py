"""Cryptographic primitives for proofledger.

- Address normalization and deterministic unit addresses
- Attestation digests (domain-separated by the target ledger address)
- secp256k1 signing and signer recovery
"""

from .addresses import (
    ZERO_ADDRESS,
    ZERO_DIGEST,
    address_bytes,
    derive_contract_address,
    to_address,
    to_bytes32,
)
from .signing import (
    AttestorSigner,
    SignedAttestation,
    attestation_digest,
    recover_signer,
    to_signature_bytes,
)

__all__ = [
    "ZERO_ADDRESS",
    "ZERO_DIGEST",
    "address_bytes",
    "derive_contract_address",
    "to_address",
    "to_bytes32",
    "AttestorSigner",
    "SignedAttestation",
    "attestation_digest",
    "recover_signer",
    "to_signature_bytes",
]
