"""
Tests for canonical packed encodings.

web3's solidity_keccak is the Python counterpart of the soliditySha3 helper
the protocol's own tooling hashes with, so it serves as the reference the
encoder must agree with byte for byte.
"""

import dataclasses

import pytest
from eth_utils import keccak, to_canonical_address
from web3 import Web3

from platformq_margin_auth import (
    encode,
    encode_loan_offering,
    encode_loan_offering_values,
    loan_offering_values_hash,
    encode_exchange_order,
    instrument_hash,
    EncodingRangeError,
    InstrumentKind,
    UINT256_MAX,
)
from platformq_margin_auth.encoding import encode_short_id

from tests.constants import BASE_AMOUNT

# Digests of the conftest reference instruments, computed independently of
# this package
LOAN_VALUES_HASH = "b250970e76ed008dddd3f729c4ca4888a5cdf02111dac3929988ab01ae88807f"
LOAN_OFFERING_HASH = "c3a84485664f29e29ec1579cb02ad8aca3832bdaa6eb1d6b39c52a0218f85385"
BUY_ORDER_HASH = "83768748a90d8fd18ede8e27bf72a6ccc0daef698cb0df58884f90415a4ea2af"


def _word(value: int) -> bytes:
    return value.to_bytes(32, "big")


class TestLoanOfferingEncoding:
    """Test suite for the two-level loan offering encoding"""

    def test_values_layout(self, loan_offering):
        """Ten uint256 words in verifier order"""
        encoded = encode_loan_offering_values(loan_offering)

        assert len(encoded) == 320
        assert encoded == b"".join(_word(v) for v in [
            BASE_AMOUNT,
            BASE_AMOUNT * 3,
            BASE_AMOUNT // 10,
            BASE_AMOUNT // 10,
            BASE_AMOUNT // 100,
            BASE_AMOUNT * 2 // 100,
            1000000000000,
            100000,
            100000,
            123,
        ])

    def test_values_hash_matches_solidity_keccak(self, loan_offering):
        rates = loan_offering.rates
        expected = Web3.solidity_keccak(["uint256"] * 10, [
            rates.minimum_deposit,
            rates.max_amount,
            rates.min_amount,
            rates.interest_rate,
            rates.lender_fee,
            rates.taker_fee,
            loan_offering.expiration_timestamp,
            loan_offering.lockout_time,
            loan_offering.call_time_limit,
            loan_offering.salt,
        ])

        assert loan_offering_values_hash(loan_offering) == bytes(expected)

    def test_outer_layout(self, loan_offering):
        """Six 20 byte addresses then the 32 byte values hash"""
        encoded = encode_loan_offering(loan_offering)

        assert len(encoded) == 6 * 20 + 32
        addresses = [
            loan_offering.short_sell_address,
            loan_offering.underlying_token,
            loan_offering.base_token,
            loan_offering.lender,
            loan_offering.taker,
            loan_offering.fee_recipient,
        ]
        for i, address in enumerate(addresses):
            assert encoded[i * 20:(i + 1) * 20] == to_canonical_address(address)
        assert encoded[120:] == loan_offering_values_hash(loan_offering)

    def test_wildcard_taker_encodes_as_zero_bytes(self, loan_offering):
        encoded = encode_loan_offering(loan_offering)

        assert encoded[80:100] == b"\x00" * 20

    def test_hash_matches_solidity_keccak(self, loan_offering):
        values_hash = Web3.solidity_keccak(
            ["uint256"] * 10,
            [
                loan_offering.rates.minimum_deposit,
                loan_offering.rates.max_amount,
                loan_offering.rates.min_amount,
                loan_offering.rates.interest_rate,
                loan_offering.rates.lender_fee,
                loan_offering.rates.taker_fee,
                loan_offering.expiration_timestamp,
                loan_offering.lockout_time,
                loan_offering.call_time_limit,
                loan_offering.salt,
            ],
        )
        expected = Web3.solidity_keccak(
            ["address"] * 6 + ["bytes32"],
            [
                loan_offering.short_sell_address,
                loan_offering.underlying_token,
                loan_offering.base_token,
                loan_offering.lender,
                loan_offering.taker,
                loan_offering.fee_recipient,
                values_hash,
            ],
        )

        assert instrument_hash(loan_offering) == bytes(expected)

    def test_deterministic(self, loan_offering):
        assert encode(loan_offering) == encode(loan_offering)
        assert instrument_hash(loan_offering) == instrument_hash(loan_offering)

    @pytest.mark.parametrize("field,value", [
        ("salt", 124),
        ("expiration_timestamp", 1000000000001),
        ("lockout_time", 100001),
        ("call_time_limit", 99999),
        ("taker", "0x" + "99" * 20),
        ("fee_recipient", "0x" + "98" * 20),
        ("short_sell_address", "0x" + "97" * 20),
        ("underlying_token", "0x" + "96" * 20),
        ("base_token", "0x" + "95" * 20),
        ("lender", "0x" + "94" * 20),
    ])
    def test_single_field_change_changes_hash(self, loan_offering, field, value):
        changed = dataclasses.replace(loan_offering, **{field: value})

        assert instrument_hash(changed) != instrument_hash(loan_offering)

    @pytest.mark.parametrize("field", [
        "minimum_deposit", "max_amount", "min_amount", "interest_rate", "lender_fee", "taker_fee",
    ])
    def test_single_rate_change_changes_hash(self, loan_offering, field):
        rates = dataclasses.replace(
            loan_offering.rates, **{field: getattr(loan_offering.rates, field) + 1}
        )
        changed = dataclasses.replace(loan_offering, rates=rates)

        assert instrument_hash(changed) != instrument_hash(loan_offering)

    def test_swapped_fields_change_hash(self, loan_offering):
        """Order matters: swapping lockout and call limit must not collide"""
        swapped = dataclasses.replace(loan_offering, lockout_time=1, call_time_limit=2)
        original = dataclasses.replace(loan_offering, lockout_time=2, call_time_limit=1)

        assert instrument_hash(swapped) != instrument_hash(original)


class TestExchangeOrderEncoding:
    """Test suite for the 0x v1 order encoding"""

    def test_layout(self, exchange_order):
        encoded = encode_exchange_order(exchange_order)

        assert len(encoded) == 6 * 20 + 6 * 32
        assert encoded[0:20] == to_canonical_address(exchange_order.exchange_contract_address)
        assert encoded[20:40] == to_canonical_address(exchange_order.maker)
        assert encoded[40:60] == b"\x00" * 20
        assert encoded[60:80] == to_canonical_address(exchange_order.maker_token_address)
        assert encoded[80:100] == to_canonical_address(exchange_order.taker_token_address)
        assert encoded[100:120] == to_canonical_address(exchange_order.fee_recipient)
        assert encoded[120:152] == _word(BASE_AMOUNT * 6)
        assert encoded[152:184] == _word(BASE_AMOUNT * 2)
        assert encoded[184:216] == _word(0)
        assert encoded[216:248] == _word(BASE_AMOUNT // 10)
        assert encoded[248:280] == _word(100000000000000)
        assert encoded[280:312] == _word(7324)

    def test_hash_matches_solidity_keccak(self, exchange_order):
        expected = Web3.solidity_keccak(
            ["address"] * 6 + ["uint256"] * 6,
            [
                exchange_order.exchange_contract_address,
                exchange_order.maker,
                exchange_order.taker,
                exchange_order.maker_token_address,
                exchange_order.taker_token_address,
                exchange_order.fee_recipient,
                exchange_order.maker_token_amount,
                exchange_order.taker_token_amount,
                exchange_order.maker_fee,
                exchange_order.taker_fee,
                exchange_order.expiration_unix_timestamp_sec,
                exchange_order.salt,
            ],
        )

        assert instrument_hash(exchange_order) == bytes(expected)
        assert instrument_hash(exchange_order) == keccak(encode(exchange_order))

    def test_salt_change_changes_hash(self, exchange_order):
        changed = dataclasses.replace(exchange_order, salt=exchange_order.salt + 1)

        assert instrument_hash(changed) != instrument_hash(exchange_order)


class TestKnownDigests:
    """Reference instruments hash to fixed, known-good digests"""

    def test_loan_offering_values_hash(self, loan_offering):
        assert loan_offering_values_hash(loan_offering).hex() == LOAN_VALUES_HASH

    def test_loan_offering_hash(self, loan_offering, lender_address):
        assert lender_address == "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"
        assert instrument_hash(loan_offering).hex() == LOAN_OFFERING_HASH

    def test_buy_order_hash(self, exchange_order, maker_address):
        assert maker_address == "0x19E7E376E7C213B7E7e7e46cc70A5dD086DAff2A"
        assert instrument_hash(exchange_order).hex() == BUY_ORDER_HASH


class TestEncodingRange:
    """Out-of-range values fail instead of being truncated"""

    def test_uint256_overflow(self, exchange_order):
        too_big = dataclasses.replace(exchange_order, maker_token_amount=UINT256_MAX + 1)

        with pytest.raises(EncodingRangeError) as exc_info:
            encode(too_big)

        assert exc_info.value.field == "maker_token_amount"
        assert exc_info.value.instrument_kind == InstrumentKind.EXCHANGE_ORDER

    def test_uint256_max_fits(self, exchange_order):
        largest = dataclasses.replace(exchange_order, salt=UINT256_MAX)

        assert encode(largest)[-32:] == b"\xff" * 32

    def test_negative_rate(self, loan_offering):
        rates = dataclasses.replace(loan_offering.rates, lender_fee=-1)

        with pytest.raises(EncodingRangeError) as exc_info:
            encode(dataclasses.replace(loan_offering, rates=rates))

        assert exc_info.value.field == "rates.lender_fee"
        assert exc_info.value.instrument_kind == InstrumentKind.LOAN_OFFERING

    def test_bad_address(self, loan_offering):
        with pytest.raises(EncodingRangeError) as exc_info:
            encode(dataclasses.replace(loan_offering, taker="0x1234"))

        assert exc_info.value.field == "taker"

    def test_unknown_instrument(self):
        with pytest.raises(TypeError):
            encode(object())


class TestShortIdEncoding:

    def test_layout(self, lender_address):
        encoded = encode_short_id(lender_address, 5)

        assert encoded == to_canonical_address(lender_address) + _word(5)
