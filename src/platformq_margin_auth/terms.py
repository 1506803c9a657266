"""
Input models for instrument terms.

Field names follow the python convention; camelCase aliases match the
protocol's JSON shape, so ``{"minimumDeposit": ...}`` and
``{"minimum_deposit": ...}`` are both accepted.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from .types import NULL_ADDRESS


class _Terms(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    @field_validator("*", mode="before")
    @classmethod
    def reject_bool(cls, value):
        # Lax int parsing would otherwise sign true/false as 1/0
        if isinstance(value, bool):
            raise ValueError("expected an integer or address, got a boolean")
        return value


class LoanRatesTerms(_Terms):
    """Rates block of a loan offering"""
    minimum_deposit: int
    max_amount: int
    min_amount: int
    interest_rate: int
    lender_fee: int
    taker_fee: int


class LoanOfferingTerms(_Terms):
    """Terms a lender offers for funding a short"""
    lender: Optional[str] = None  # Defaults to the signer identity
    taker: str = NULL_ADDRESS
    fee_recipient: str
    rates: LoanRatesTerms
    expiration_timestamp: int
    lockout_time: int
    call_time_limit: int
    salt: Optional[int] = None
    short_sell_address: Optional[str] = None  # Defaults to the builder's contract
    underlying_token: str
    base_token: str


class ExchangeOrderTerms(_Terms):
    """Terms of a 0x exchange order"""
    exchange_contract_address: Optional[str] = None  # Defaults to the builder's contract
    maker: Optional[str] = None  # Defaults to the signer identity
    taker: str = NULL_ADDRESS
    fee_recipient: str
    maker_token_address: str
    taker_token_address: str
    maker_token_amount: int
    taker_token_amount: int
    maker_fee: int = 0
    taker_fee: int = 0
    expiration_unix_timestamp_sec: int
    salt: Optional[int] = None
