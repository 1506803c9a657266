"""
Short position identifiers and ShortSell contract call arguments.

Nothing here talks to a node: the functions only produce the identifiers and
argument arrays that a transaction sender passes to ``ShortSell.short`` and
``ShortSell.closeShort``.
"""

import asyncio
import logging
from typing import Any, List, Mapping, NamedTuple, Union

from .builder import InstrumentBuilder
from .encoding import encode_short_id
from .models import LoanOffering, ExchangeOrder, ShortSellTx
from .signing import digest
from .terms import LoanOfferingTerms, ExchangeOrderTerms
from .types import InstrumentKind, InvalidTerms
from .utils import normalize_address
from .validation import require_uint256, validate_exchange_order, validate_short_sell_tx

logger = logging.getLogger(__name__)


class ShortCallArgs(NamedTuple):
    """Arguments of ShortSell.short(address[8], uint[18], uint8[2], bytes32[4])"""
    addresses: List[str]
    values: List[int]
    sig_v: List[int]
    sig_rs: List[bytes]


class CloseShortCallArgs(NamedTuple):
    """Arguments of ShortSell.closeShort(bytes32, address[3], uint[6], uint8, bytes32, bytes32)"""
    short_id: bytes
    addresses: List[str]
    values: List[int]
    v: int
    r: bytes
    s: bytes


def compute_short_id(lender: str, sequence: int = 0) -> bytes:
    """keccak256(abi.encodePacked(lender, sequence)), the ledger's lookup key for a short"""
    kind = InstrumentKind.SHORT_SELL
    lender = normalize_address(lender, "lender", kind)
    require_uint256(sequence, "sequence", kind)
    return digest(encode_short_id(lender, sequence))


def create_short_sell_tx(loan_offering: LoanOffering, buy_order: ExchangeOrder, seller: str,
                         short_amount: int, deposit_amount: int) -> ShortSellTx:
    """Bundle a signed loan offering and buy order into a validated short"""
    tx = ShortSellTx(
        underlying_token=loan_offering.underlying_token,
        base_token=loan_offering.base_token,
        short_amount=short_amount,
        deposit_amount=deposit_amount,
        loan_offering=loan_offering,
        buy_order=buy_order,
        seller=normalize_address(seller, "seller", InstrumentKind.SHORT_SELL),
    )
    validate_short_sell_tx(tx)
    return tx


async def build_short_sell_tx(loan_builder: InstrumentBuilder,
                              loan_terms: Union[LoanOfferingTerms, Mapping[str, Any]],
                              order_builder: InstrumentBuilder,
                              order_terms: Union[ExchangeOrderTerms, Mapping[str, Any]],
                              seller: str, short_amount: int, deposit_amount: int) -> ShortSellTx:
    """Sign the loan offering and buy order concurrently, then bundle them"""
    loan_offering, buy_order = await asyncio.gather(
        loan_builder.build_loan_offering(loan_terms),
        order_builder.build_exchange_order(order_terms),
    )
    return create_short_sell_tx(loan_offering, buy_order, seller, short_amount, deposit_amount)


def short_call_args(tx: ShortSellTx) -> ShortCallArgs:
    """Flatten a short into the contract's positional array arguments"""
    validate_short_sell_tx(tx)
    loan = tx.loan_offering
    order = tx.buy_order

    addresses = [
        tx.underlying_token,
        tx.base_token,
        loan.lender,
        loan.taker,
        loan.fee_recipient,
        order.maker,
        order.taker,
        order.fee_recipient,
    ]

    values = [
        loan.rates.minimum_deposit,
        loan.rates.max_amount,
        loan.rates.min_amount,
        loan.rates.interest_rate,
        loan.rates.lender_fee,
        loan.rates.taker_fee,
        loan.expiration_timestamp,
        loan.lockout_time,
        loan.call_time_limit,
        loan.salt,
        order.maker_token_amount,
        order.taker_token_amount,
        order.maker_fee,
        order.taker_fee,
        order.expiration_unix_timestamp_sec,
        order.salt,
        tx.short_amount,
        tx.deposit_amount,
    ]

    sig_v = [loan.signature.v, order.ec_signature.v]
    sig_rs = [
        loan.signature.r,
        loan.signature.s,
        order.ec_signature.r,
        order.ec_signature.s,
    ]

    return ShortCallArgs(addresses, values, sig_v, sig_rs)


def close_short_call_args(short_id: bytes, sell_order: ExchangeOrder) -> CloseShortCallArgs:
    """Flatten a signed sell order into closeShort arguments"""
    kind = InstrumentKind.SHORT_SELL
    if not isinstance(short_id, (bytes, bytearray)) or len(short_id) != 32:
        raise InvalidTerms("Short id must be 32 bytes", instrument_kind=kind, field="short_id")
    validate_exchange_order(sell_order)
    if not sell_order.is_signed:
        raise InvalidTerms("Sell order is not signed", instrument_kind=kind, field="sell_order")

    addresses = [sell_order.maker, sell_order.taker, sell_order.fee_recipient]
    values = [
        sell_order.maker_token_amount,
        sell_order.taker_token_amount,
        sell_order.maker_fee,
        sell_order.taker_fee,
        sell_order.expiration_unix_timestamp_sec,
        sell_order.salt,
    ]

    signature = sell_order.ec_signature
    logger.debug(f"closeShort arguments for short 0x{bytes(short_id).hex()}")
    return CloseShortCallArgs(bytes(short_id), addresses, values, signature.v, signature.r, signature.s)
