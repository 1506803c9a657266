"""
Core types, constants and errors for margin protocol instrument signing.
"""

from enum import Enum
from typing import Optional


NULL_ADDRESS = "0x0000000000000000000000000000000000000000"

UINT256_MAX = 2 ** 256 - 1

# ecrecover on the verifier side expects v in {27, 28}
ETH_SIGN_V_OFFSET = 27

ADDRESS_SIZE = 20
WORD_SIZE = 32


class InstrumentKind(Enum):
    """Signed instrument types understood by the margin protocol"""
    LOAN_OFFERING = "loan_offering"
    EXCHANGE_ORDER = "exchange_order"
    SHORT_SELL = "short_sell"


class SignerBackend(Enum):
    """Where signing keys live"""
    LOCAL = "local"  # Private key held in process
    NODE = "node"  # Unlocked account on an RPC node (eth_sign)


class MarginAuthError(Exception):
    """Base exception for instrument encoding and signing"""
    def __init__(self, message: str, instrument_kind: Optional[InstrumentKind] = None,
                 field: Optional[str] = None):
        self.instrument_kind = instrument_kind
        self.field = field
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        context = []
        if self.instrument_kind is not None:
            context.append(f"instrument={self.instrument_kind.value}")
        if self.field is not None:
            context.append(f"field={self.field}")
        if context:
            return f"{message} ({', '.join(context)})"
        return message


class InvalidTerms(MarginAuthError):
    """Terms violate a data model invariant"""
    pass


class EncodingRangeError(MarginAuthError):
    """Field value does not fit its packed width"""
    pass


class DivisionByZero(MarginAuthError, ZeroDivisionError):
    """Partial amount requested with a zero denominator"""
    pass


class SigningError(MarginAuthError):
    """Signer missing, invalid or unavailable"""
    pass


class SignatureMismatch(MarginAuthError):
    """Recovered address differs from the expected signer"""
    def __init__(self, message: str, instrument_kind: Optional[InstrumentKind] = None,
                 expected: Optional[str] = None, recovered: Optional[str] = None):
        self.expected = expected
        self.recovered = recovered
        super().__init__(message, instrument_kind=instrument_kind, field="signature")
