"""
Shared fixtures: deterministic accounts and the reference short sell terms.
"""

import pytest

from platformq_margin_auth import (
    NULL_ADDRESS,
    InstrumentBuilder,
    LocalKeySigner,
    LoanOffering,
    LoanRates,
    ExchangeOrder,
    address_of,
)

from .constants import (
    BASE_AMOUNT, LENDER_KEY, MAKER_KEY, SELL_MAKER_KEY, SHORT_SELL_ADDRESS, EXCHANGE_ADDRESS,
    UNDERLYING_TOKEN, BASE_TOKEN, LOAN_FEE_RECIPIENT, ORDER_FEE_RECIPIENT,
)


@pytest.fixture
def lender_address():
    return address_of(LENDER_KEY)


@pytest.fixture
def maker_address():
    return address_of(MAKER_KEY)


@pytest.fixture
def loan_terms():
    """Loan offering terms as the protocol's JSON would carry them"""
    return {
        "taker": NULL_ADDRESS,
        "feeRecipient": LOAN_FEE_RECIPIENT,
        "rates": {
            "minimumDeposit": BASE_AMOUNT,
            "maxAmount": BASE_AMOUNT * 3,
            "minAmount": BASE_AMOUNT // 10,
            "interestRate": BASE_AMOUNT // 10,
            "lenderFee": BASE_AMOUNT // 100,
            "takerFee": BASE_AMOUNT * 2 // 100,
        },
        "expirationTimestamp": 1000000000000,
        "lockoutTime": 100000,
        "callTimeLimit": 100000,
        "salt": 123,
        "shortSellAddress": SHORT_SELL_ADDRESS,
        "underlyingToken": UNDERLYING_TOKEN,
        "baseToken": BASE_TOKEN,
    }


@pytest.fixture
def buy_order_terms():
    """3 base token : 1 underlying token"""
    return {
        "exchangeContractAddress": EXCHANGE_ADDRESS,
        "expirationUnixTimestampSec": 100000000000000,
        "feeRecipient": ORDER_FEE_RECIPIENT,
        "makerFee": 0,
        "makerTokenAddress": BASE_TOKEN,
        "makerTokenAmount": BASE_AMOUNT * 6,
        "salt": 7324,
        "taker": NULL_ADDRESS,
        "takerFee": BASE_AMOUNT // 10,
        "takerTokenAddress": UNDERLYING_TOKEN,
        "takerTokenAmount": BASE_AMOUNT * 2,
    }


@pytest.fixture
def sell_order_terms():
    """4 base token : 1 underlying token"""
    return {
        "exchangeContractAddress": EXCHANGE_ADDRESS,
        "expirationUnixTimestampSec": 100000000000000,
        "feeRecipient": ORDER_FEE_RECIPIENT,
        "makerFee": 0,
        "makerTokenAddress": UNDERLYING_TOKEN,
        "makerTokenAmount": BASE_AMOUNT * 2,
        "salt": 342,
        "taker": NULL_ADDRESS,
        "takerFee": BASE_AMOUNT // 10,
        "takerTokenAddress": BASE_TOKEN,
        "takerTokenAmount": BASE_AMOUNT * 8,
    }


@pytest.fixture
def loan_offering(lender_address):
    """Unsigned loan offering with the reference terms"""
    return LoanOffering(
        lender=lender_address,
        taker=NULL_ADDRESS,
        fee_recipient=LOAN_FEE_RECIPIENT,
        rates=LoanRates(
            minimum_deposit=BASE_AMOUNT,
            max_amount=BASE_AMOUNT * 3,
            min_amount=BASE_AMOUNT // 10,
            interest_rate=BASE_AMOUNT // 10,
            lender_fee=BASE_AMOUNT // 100,
            taker_fee=BASE_AMOUNT * 2 // 100,
        ),
        expiration_timestamp=1000000000000,
        lockout_time=100000,
        call_time_limit=100000,
        salt=123,
        short_sell_address=SHORT_SELL_ADDRESS,
        underlying_token=UNDERLYING_TOKEN,
        base_token=BASE_TOKEN,
    )


@pytest.fixture
def exchange_order(maker_address):
    """Unsigned buy order with the reference terms"""
    return ExchangeOrder(
        exchange_contract_address=EXCHANGE_ADDRESS,
        maker=maker_address,
        taker=NULL_ADDRESS,
        fee_recipient=ORDER_FEE_RECIPIENT,
        maker_token_address=BASE_TOKEN,
        taker_token_address=UNDERLYING_TOKEN,
        maker_token_amount=BASE_AMOUNT * 6,
        taker_token_amount=BASE_AMOUNT * 2,
        maker_fee=0,
        taker_fee=BASE_AMOUNT // 10,
        expiration_unix_timestamp_sec=100000000000000,
        salt=7324,
    )


@pytest.fixture
def lender_builder():
    return InstrumentBuilder(LocalKeySigner.from_key(LENDER_KEY))


@pytest.fixture
def maker_builder():
    return InstrumentBuilder(LocalKeySigner.from_key(MAKER_KEY))


@pytest.fixture
def sell_maker_builder():
    return InstrumentBuilder(LocalKeySigner.from_key(SELL_MAKER_KEY))
