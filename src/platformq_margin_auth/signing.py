"""
Digest and recoverable ECDSA signatures compatible with the on-chain verifier.

The verifier recomputes the instrument hash and checks::

    signer == ecrecover(keccak256("\\x19Ethereum Signed Message:\\n32", hash), v, r, s)

so signatures are produced over the ``eth_sign`` form of the 32 byte digest,
with ``v`` in {27, 28}. eth_account signs deterministically (RFC 6979), so a
given (digest, key) pair always yields the same signature.
"""

import logging
from typing import Optional, Union

from eth_account import Account
from eth_account.messages import encode_defunct, SignableMessage
from eth_utils import keccak, to_checksum_address

from .models import ECSignature
from .types import (
    ETH_SIGN_V_OFFSET, WORD_SIZE, InstrumentKind, SigningError, SignatureMismatch
)
from .utils import validate_private_key

logger = logging.getLogger(__name__)

PrivateKey = Union[str, bytes]


def digest(data: bytes) -> bytes:
    """keccak-256 of data, the hash primitive the verifier uses"""
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError(f"Expected bytes, got {type(data).__name__}")
    return keccak(bytes(data))


def eth_sign_message(message_hash: bytes) -> SignableMessage:
    """Wrap a 32 byte digest in the eth_sign prefix"""
    if not isinstance(message_hash, (bytes, bytearray)) or len(message_hash) != WORD_SIZE:
        raise ValueError("Digest must be 32 bytes")
    return encode_defunct(primitive=bytes(message_hash))


def _load_account(signer_key: PrivateKey):
    if signer_key is None:
        raise SigningError("No signing key provided")
    if not validate_private_key(signer_key):
        raise SigningError("Malformed private key")
    try:
        return Account.from_key(signer_key)
    except Exception as e:
        raise SigningError(f"Invalid private key: {e}") from e


def address_of(signer_key: PrivateKey) -> str:
    """Checksum address controlled by a private key"""
    return _load_account(signer_key).address


def sign(message_hash: bytes, signer_key: PrivateKey) -> ECSignature:
    """
    Sign a digest the way eth_sign does.

    Args:
        message_hash: 32 byte instrument digest
        signer_key: secp256k1 private key (hex or raw bytes)

    Returns:
        ECSignature with v already offset to 27/28

    Raises:
        SigningError: If the key is missing or invalid
    """
    account = _load_account(signer_key)
    try:
        signed = account.sign_message(eth_sign_message(message_hash))
    except ValueError as e:
        raise SigningError(f"Signing failed: {e}") from e

    v = signed.v
    if v < ETH_SIGN_V_OFFSET:
        v += ETH_SIGN_V_OFFSET

    return ECSignature(
        v=v,
        r=signed.r.to_bytes(WORD_SIZE, "big"),
        s=signed.s.to_bytes(WORD_SIZE, "big"),
    )


def recover(message_hash: bytes, signature: ECSignature,
            instrument_kind: Optional[InstrumentKind] = None) -> str:
    """
    Recover the checksum address that produced signature over message_hash.

    Raises:
        SignatureMismatch: If the signature is malformed or unrecoverable
    """
    if signature is None:
        raise SignatureMismatch("Instrument is not signed", instrument_kind=instrument_kind)
    if signature.v not in (ETH_SIGN_V_OFFSET, ETH_SIGN_V_OFFSET + 1):
        raise SignatureMismatch(f"Unsupported v value {signature.v}", instrument_kind=instrument_kind)

    vrs = (
        signature.v,
        int.from_bytes(signature.r, "big"),
        int.from_bytes(signature.s, "big"),
    )
    try:
        address = Account.recover_message(eth_sign_message(message_hash), vrs=vrs)
    except Exception as e:
        raise SignatureMismatch(f"Unrecoverable signature: {e}",
                                instrument_kind=instrument_kind) from e
    return to_checksum_address(address)


def verify(message_hash: bytes, signature: ECSignature, expected_signer: str,
           instrument_kind: Optional[InstrumentKind] = None) -> str:
    """Recover the signer and require it to equal expected_signer"""
    recovered = recover(message_hash, signature, instrument_kind)
    if recovered.lower() != expected_signer.lower():
        logger.warning(f"Signature mismatch: expected {expected_signer}, recovered {recovered}")
        raise SignatureMismatch(
            f"Signature recovers to {recovered}, expected {expected_signer}",
            instrument_kind=instrument_kind,
            expected=expected_signer,
            recovered=recovered,
        )
    return recovered
