# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Address and digest normalization.

Identities are 20-byte Ethereum-style addresses, carried around in EIP-55
checksum form. Deployed units get deterministic addresses using the CREATE2
derivation rule, so two deployments by the same deployer with different
salts never share an identity (and never accept each other's signatures).
"""

from __future__ import annotations

from typing import Any

from eth_utils import is_address, is_checksum_address, keccak, to_checksum_address

from ..core.exceptions import InvalidAddress, InvalidSnapshotRoot

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
ZERO_DIGEST = b"\x00" * 32

UINT256_MAX = 2**256 - 1


def to_address(value: Any, field: str = "address") -> str:
    """Normalize ``value`` to a checksummed address.

    Accepts 20 raw bytes, or a 0x-prefixed hex string in single case or valid
    mixed-case checksum form.

    Raises:
        InvalidAddress: If the value is not an address.
    """
    if isinstance(value, bytes | bytearray):
        if len(value) != 20:
            raise InvalidAddress(value, field=field)
        return to_checksum_address("0x" + bytes(value).hex())
    if not isinstance(value, str) or not is_address(value):
        raise InvalidAddress(value, field=field)
    # Mixed case must be a valid EIP-55 checksum; single-case hex carries none
    digits = value.removeprefix("0x")
    if digits != digits.lower() and digits != digits.upper() and not is_checksum_address(value):
        raise InvalidAddress(value, field=field)
    return to_checksum_address(value)


def address_bytes(address: str) -> bytes:
    """Raw 20 bytes of a (normalized) address."""
    return bytes.fromhex(to_address(address)[2:])


def derive_contract_address(deployer: str, salt: int = 0, label: str = "") -> str:
    """Derive a deployed unit's address.

    ``keccak256(0xff ++ deployer ++ salt ++ keccak256(label))[12:]``, the
    CREATE2 rule with the unit's type name standing in for its init code.
    """
    if not 0 <= salt <= UINT256_MAX:
        raise ValueError(f"salt out of range: {salt}")
    preimage = b"\xff" + address_bytes(deployer) + salt.to_bytes(32, "big") + keccak(text=label)
    return to_checksum_address(keccak(preimage)[12:])


def to_bytes32(value: Any) -> bytes:
    """Normalize a 32-byte digest given as bytes or a 0x-prefixed hex string.

    Raises:
        InvalidSnapshotRoot: If the value is not exactly 32 bytes.
    """
    if isinstance(value, bytes | bytearray):
        raw = bytes(value)
    elif isinstance(value, str):
        try:
            raw = bytes.fromhex(value.removeprefix("0x"))
        except ValueError as exc:
            raise InvalidSnapshotRoot(value) from exc
    else:
        raise InvalidSnapshotRoot(value)
    if len(raw) != 32:
        raise InvalidSnapshotRoot(value)
    return raw
