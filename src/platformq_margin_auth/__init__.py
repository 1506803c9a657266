"""
PlatformQ Margin Auth Library

Encoding, hashing and signing of margin protocol loan offerings and exchange
orders, byte-compatible with the on-chain ShortSell and 0x Exchange verifiers.
"""

from .types import (
    InstrumentKind,
    SignerBackend,
    NULL_ADDRESS,
    UINT256_MAX,
    MarginAuthError,
    InvalidTerms,
    EncodingRangeError,
    DivisionByZero,
    SigningError,
    SignatureMismatch
)

from .models import (
    ECSignature,
    LoanRates,
    LoanOffering,
    ExchangeOrder,
    ShortSellTx
)

from .terms import (
    LoanRatesTerms,
    LoanOfferingTerms,
    ExchangeOrderTerms
)

from .fixed_point import partial_amount

from .encoding import (
    encode,
    encode_loan_offering,
    encode_loan_offering_values,
    loan_offering_values_hash,
    encode_exchange_order,
    instrument_hash
)

from .signing import (
    digest,
    sign,
    recover,
    verify,
    address_of
)

from .interfaces import ISigner
from .signers import BaseSigner, LocalKeySigner, NodeSigner
from .config import SignerSettings, get_settings
from .signer_factory import SignerFactory

from .builder import (
    InstrumentBuilder,
    build_loan_offering,
    build_exchange_order,
    generate_salt,
    recover_signer,
    verify_instrument,
    is_valid_signature
)

from .short_sell import (
    ShortCallArgs,
    CloseShortCallArgs,
    compute_short_id,
    create_short_sell_tx,
    build_short_sell_tx,
    short_call_args,
    close_short_call_args
)

__all__ = [
    # Types
    "InstrumentKind",
    "SignerBackend",
    "NULL_ADDRESS",
    "UINT256_MAX",

    # Errors
    "MarginAuthError",
    "InvalidTerms",
    "EncodingRangeError",
    "DivisionByZero",
    "SigningError",
    "SignatureMismatch",

    # Models
    "ECSignature",
    "LoanRates",
    "LoanOffering",
    "ExchangeOrder",
    "ShortSellTx",
    "LoanRatesTerms",
    "LoanOfferingTerms",
    "ExchangeOrderTerms",

    # Math
    "partial_amount",

    # Encoding
    "encode",
    "encode_loan_offering",
    "encode_loan_offering_values",
    "loan_offering_values_hash",
    "encode_exchange_order",
    "instrument_hash",

    # Digest & signatures
    "digest",
    "sign",
    "recover",
    "verify",
    "address_of",

    # Signers
    "ISigner",
    "BaseSigner",
    "LocalKeySigner",
    "NodeSigner",
    "SignerSettings",
    "get_settings",
    "SignerFactory",

    # Builder
    "InstrumentBuilder",
    "build_loan_offering",
    "build_exchange_order",
    "generate_salt",
    "recover_signer",
    "verify_instrument",
    "is_valid_signature",

    # Short sell
    "ShortCallArgs",
    "CloseShortCallArgs",
    "compute_short_id",
    "create_short_sell_tx",
    "build_short_sell_tx",
    "short_call_args",
    "close_short_call_args"
]

__version__ = "1.0.0"
