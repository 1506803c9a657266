"""
Invariant checks run before any instrument is hashed or signed.
"""

import logging
from typing import Optional

from .models import LoanOffering, ExchangeOrder, ShortSellTx
from .types import UINT256_MAX, InstrumentKind, InvalidTerms
from .utils import validate_address

logger = logging.getLogger(__name__)


def require_uint256(value, field: str, instrument_kind: Optional[InstrumentKind] = None) -> int:
    """Check that value is an integer in [0, 2**256 - 1]"""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidTerms(f"Expected integer, got {type(value).__name__}",
                           instrument_kind=instrument_kind, field=field)
    if value < 0:
        raise InvalidTerms(f"Value must be non-negative, got {value}",
                           instrument_kind=instrument_kind, field=field)
    if value > UINT256_MAX:
        raise InvalidTerms(f"Value {value} exceeds uint256",
                           instrument_kind=instrument_kind, field=field)
    return value


def require_address(value, field: str, instrument_kind: Optional[InstrumentKind] = None) -> str:
    if not validate_address(value):
        raise InvalidTerms(f"Invalid address: {value!r}",
                           instrument_kind=instrument_kind, field=field)
    return value


def validate_loan_offering(offering: LoanOffering) -> None:
    """Raise InvalidTerms if the offering breaks a data model invariant"""
    kind = InstrumentKind.LOAN_OFFERING

    for name in ("lender", "taker", "fee_recipient", "short_sell_address",
                 "underlying_token", "base_token"):
        require_address(getattr(offering, name), name, kind)

    rates = offering.rates
    for name in ("minimum_deposit", "max_amount", "min_amount", "interest_rate",
                 "lender_fee", "taker_fee"):
        require_uint256(getattr(rates, name), f"rates.{name}", kind)

    for name in ("expiration_timestamp", "lockout_time", "call_time_limit", "salt"):
        require_uint256(getattr(offering, name), name, kind)

    if rates.min_amount > rates.max_amount:
        raise InvalidTerms(
            f"minAmount {rates.min_amount} exceeds maxAmount {rates.max_amount}",
            instrument_kind=kind, field="rates.min_amount"
        )


def validate_exchange_order(order: ExchangeOrder) -> None:
    """Raise InvalidTerms if the order breaks a data model invariant"""
    kind = InstrumentKind.EXCHANGE_ORDER

    for name in ("exchange_contract_address", "maker", "taker", "fee_recipient",
                 "maker_token_address", "taker_token_address"):
        require_address(getattr(order, name), name, kind)

    for name in ("maker_token_amount", "taker_token_amount", "maker_fee", "taker_fee",
                 "expiration_unix_timestamp_sec", "salt"):
        require_uint256(getattr(order, name), name, kind)


def validate_short_sell_tx(tx: ShortSellTx) -> None:
    """Check a short sell bundle before flattening it into call arguments"""
    kind = InstrumentKind.SHORT_SELL

    for name in ("underlying_token", "base_token", "seller"):
        require_address(getattr(tx, name), name, kind)
    require_uint256(tx.short_amount, "short_amount", kind)
    require_uint256(tx.deposit_amount, "deposit_amount", kind)

    validate_loan_offering(tx.loan_offering)
    validate_exchange_order(tx.buy_order)

    if not tx.loan_offering.is_signed:
        raise InvalidTerms("Loan offering is not signed", instrument_kind=kind, field="loan_offering")
    if not tx.buy_order.is_signed:
        raise InvalidTerms("Buy order is not signed", instrument_kind=kind, field="buy_order")

    rates = tx.loan_offering.rates
    if not rates.min_amount <= tx.short_amount <= rates.max_amount:
        raise InvalidTerms(
            f"Short amount {tx.short_amount} outside loan bounds "
            f"[{rates.min_amount}, {rates.max_amount}]",
            instrument_kind=kind, field="short_amount"
        )

    # Token pair must agree between the bundle, the loan and the buy order
    if (tx.loan_offering.underlying_token.lower() != tx.underlying_token.lower()
            or tx.loan_offering.base_token.lower() != tx.base_token.lower()):
        raise InvalidTerms("Loan offering token pair does not match the short",
                           instrument_kind=kind, field="loan_offering")
    if (tx.buy_order.taker_token_address.lower() != tx.underlying_token.lower()
            or tx.buy_order.maker_token_address.lower() != tx.base_token.lower()):
        raise InvalidTerms("Buy order must trade underlying token for base token",
                           instrument_kind=kind, field="buy_order")

    logger.debug(f"Short sell tx for seller {tx.seller} passed validation")
