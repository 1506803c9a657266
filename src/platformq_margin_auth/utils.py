"""
Utility functions for addresses, keys and 32 byte values.
"""

import re
from typing import Optional, Union

from eth_utils import to_checksum_address, is_address, to_bytes, is_hex

from .types import WORD_SIZE, InstrumentKind, InvalidTerms


def validate_address(address: str) -> bool:
    """Validate EVM address format"""
    return isinstance(address, str) and is_address(address)


def normalize_address(address: str, field: Optional[str] = None,
                      instrument_kind: Optional[InstrumentKind] = None) -> str:
    """Normalize address to checksum format"""
    if not validate_address(address):
        raise InvalidTerms(f"Invalid address: {address!r}",
                           instrument_kind=instrument_kind, field=field)
    return to_checksum_address(address)


def validate_private_key(private_key: Union[str, bytes]) -> bool:
    """Validate private key format"""
    if isinstance(private_key, bytes):
        return len(private_key) == 32
    if not isinstance(private_key, str):
        return False
    # Remove 0x prefix if present
    if private_key.startswith('0x'):
        private_key = private_key[2:]

    # Check if it's 64 hex characters
    return bool(re.match(r'^[0-9a-fA-F]{64}$', private_key))


def to_bytes32(value: Union[bytes, str], field: Optional[str] = None) -> bytes:
    """Coerce a 32 byte value given as bytes or hex string"""
    if isinstance(value, str):
        if not is_hex(value):
            raise ValueError(f"Not a hex string: {value!r}")
        value = to_bytes(hexstr=value)
    if len(value) != WORD_SIZE:
        raise ValueError(f"Expected {WORD_SIZE} bytes for {field or 'value'}, got {len(value)}")
    return bytes(value)


def hex32(value: bytes) -> str:
    """0x-prefixed hex of a 32 byte value"""
    return "0x" + bytes(value).hex()
