"""
Canonical packed encodings of margin protocol instruments.

Every encoding matches Solidity's ``abi.encodePacked`` (web3 ``soliditySha3``)
over the same fields in the same order as the verifying contract:
addresses take 20 bytes, uint256 and bytes32 take 32 bytes big-endian, and
nothing is padded or length-prefixed.

Loan offerings are hashed in two levels. The inner values hash covers the
negotiable terms::

    keccak256(minimumDeposit, maxAmount, minAmount, interestRate, lenderFee,
              takerFee, expirationTimestamp, lockoutTime, callTimeLimit, salt)

and the outer hash binds it to the protocol instance and parties::

    keccak256(shortSell, underlyingToken, baseToken, lender, taker,
              feeRecipient, valuesHash)

Exchange orders use the flat 0x v1 order hash layout.
"""

import logging
from typing import List, Sequence, Tuple, Union

from eth_abi.exceptions import EncodingError
from eth_abi.packed import encode_packed

from .models import LoanOffering, ExchangeOrder
from .signing import digest
from .types import ADDRESS_SIZE, UINT256_MAX, WORD_SIZE, InstrumentKind, EncodingRangeError
from .utils import validate_address

logger = logging.getLogger(__name__)

Instrument = Union[LoanOffering, ExchangeOrder]

# (solidity type, attribute path) in verifier order
LOAN_OFFERING_VALUES_LAYOUT: List[Tuple[str, str]] = [
    ("uint256", "rates.minimum_deposit"),
    ("uint256", "rates.max_amount"),
    ("uint256", "rates.min_amount"),
    ("uint256", "rates.interest_rate"),
    ("uint256", "rates.lender_fee"),
    ("uint256", "rates.taker_fee"),
    ("uint256", "expiration_timestamp"),
    ("uint256", "lockout_time"),
    ("uint256", "call_time_limit"),
    ("uint256", "salt"),
]

LOAN_OFFERING_LAYOUT: List[Tuple[str, str]] = [
    ("address", "short_sell_address"),
    ("address", "underlying_token"),
    ("address", "base_token"),
    ("address", "lender"),
    ("address", "taker"),
    ("address", "fee_recipient"),
]

EXCHANGE_ORDER_LAYOUT: List[Tuple[str, str]] = [
    ("address", "exchange_contract_address"),
    ("address", "maker"),
    ("address", "taker"),
    ("address", "maker_token_address"),
    ("address", "taker_token_address"),
    ("address", "fee_recipient"),
    ("uint256", "maker_token_amount"),
    ("uint256", "taker_token_amount"),
    ("uint256", "maker_fee"),
    ("uint256", "taker_fee"),
    ("uint256", "expiration_unix_timestamp_sec"),
    ("uint256", "salt"),
]

_WIDTHS = {"address": ADDRESS_SIZE, "uint256": WORD_SIZE, "bytes32": WORD_SIZE}


def _resolve(obj, path: str):
    for part in path.split("."):
        obj = getattr(obj, part)
    return obj


def _check_range(abi_type: str, value, field: str, kind: InstrumentKind) -> None:
    if abi_type == "address":
        if not validate_address(value):
            raise EncodingRangeError(f"Not a 20 byte address: {value!r}",
                                     instrument_kind=kind, field=field)
    elif abi_type == "uint256":
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodingRangeError(f"Expected integer, got {type(value).__name__}",
                                     instrument_kind=kind, field=field)
        if not 0 <= value <= UINT256_MAX:
            raise EncodingRangeError(f"Value {value} does not fit uint256",
                                     instrument_kind=kind, field=field)
    elif abi_type == "bytes32":
        if not isinstance(value, (bytes, bytearray)) or len(value) != WORD_SIZE:
            raise EncodingRangeError("Expected 32 bytes", instrument_kind=kind, field=field)


def pack(types: Sequence[str], values: Sequence, fields: Sequence[str],
         kind: InstrumentKind) -> bytes:
    """Range-check each value and pack them back to back"""
    for abi_type, value, field in zip(types, values, fields):
        _check_range(abi_type, value, field, kind)
    try:
        encoded = encode_packed(list(types), list(values))
    except EncodingError as e:
        raise EncodingRangeError(f"Packed encoding failed: {e}", instrument_kind=kind) from e

    expected = sum(_WIDTHS[t] for t in types)
    if len(encoded) != expected:
        raise EncodingRangeError(f"Packed length {len(encoded)} != {expected}", instrument_kind=kind)
    return encoded


def _pack_layout(instrument, layout: List[Tuple[str, str]], kind: InstrumentKind) -> bytes:
    types = [abi_type for abi_type, _ in layout]
    fields = [path for _, path in layout]
    values = [_resolve(instrument, path) for path in fields]
    return pack(types, values, fields, kind)


def encode_loan_offering_values(offering: LoanOffering) -> bytes:
    """Inner encoding: rates, timing and salt (10 x uint256)"""
    return _pack_layout(offering, LOAN_OFFERING_VALUES_LAYOUT, InstrumentKind.LOAN_OFFERING)


def loan_offering_values_hash(offering: LoanOffering) -> bytes:
    """keccak256 of the inner encoding"""
    return digest(encode_loan_offering_values(offering))


def encode_loan_offering_with_values_hash(offering: LoanOffering, values_hash: bytes) -> bytes:
    """Outer encoding: six addresses followed by the inner values hash"""
    kind = InstrumentKind.LOAN_OFFERING
    types = [abi_type for abi_type, _ in LOAN_OFFERING_LAYOUT] + ["bytes32"]
    fields = [path for _, path in LOAN_OFFERING_LAYOUT] + ["values_hash"]
    values = [_resolve(offering, path) for _, path in LOAN_OFFERING_LAYOUT] + [values_hash]
    return pack(types, values, fields, kind)


def encode_loan_offering(offering: LoanOffering) -> bytes:
    return encode_loan_offering_with_values_hash(offering, loan_offering_values_hash(offering))


def encode_exchange_order(order: ExchangeOrder) -> bytes:
    """Flat 0x v1 order encoding (6 addresses, 6 x uint256)"""
    return _pack_layout(order, EXCHANGE_ORDER_LAYOUT, InstrumentKind.EXCHANGE_ORDER)


def encode_short_id(lender: str, sequence: int) -> bytes:
    """Packed (address lender, uint256 sequence) used to derive a short id"""
    return pack(["address", "uint256"], [lender, sequence], ["lender", "sequence"],
                InstrumentKind.SHORT_SELL)


def encode(instrument: Instrument) -> bytes:
    """Canonical bytes whose keccak256 the verifier checks signatures against"""
    if isinstance(instrument, LoanOffering):
        return encode_loan_offering(instrument)
    if isinstance(instrument, ExchangeOrder):
        return encode_exchange_order(instrument)
    raise TypeError(f"Cannot encode {type(instrument).__name__}")


def instrument_hash(instrument: Instrument) -> bytes:
    """Digest a signer commits to for this instrument"""
    result = digest(encode(instrument))
    logger.debug(f"{instrument.kind.value} hash 0x{result.hex()}")
    return result
