"""
Data models for signed margin protocol instruments.
"""

from typing import Optional, Dict, Any, Union
from dataclasses import dataclass

from eth_utils import to_bytes

from .types import ETH_SIGN_V_OFFSET, WORD_SIZE, InstrumentKind, NULL_ADDRESS
from .utils import hex32, to_bytes32


@dataclass(frozen=True)
class ECSignature:
    """Recoverable ECDSA signature, v carrying the ledger offset (27/28)"""
    v: int
    r: bytes
    s: bytes

    def __post_init__(self):
        object.__setattr__(self, "r", to_bytes32(self.r, "r"))
        object.__setattr__(self, "s", to_bytes32(self.s, "s"))

    @classmethod
    def from_rpc_signature(cls, signature: Union[bytes, str]) -> "ECSignature":
        """Split a 65 byte r || s || v signature as returned by eth_sign"""
        raw = to_bytes(hexstr=signature) if isinstance(signature, str) else bytes(signature)
        if len(raw) != 2 * WORD_SIZE + 1:
            raise ValueError(f"Expected 65 byte signature, got {len(raw)}")
        v = raw[64]
        if v < ETH_SIGN_V_OFFSET:
            v += ETH_SIGN_V_OFFSET
        return cls(v=v, r=raw[:32], s=raw[32:64])

    def to_rpc_signature(self) -> bytes:
        return self.r + self.s + bytes([self.v])

    def to_dict(self) -> Dict[str, Any]:
        return {"v": self.v, "r": hex32(self.r), "s": hex32(self.s)}


@dataclass(frozen=True)
class LoanRates:
    """Negotiable amounts and rates of a loan offering, in token base units"""
    minimum_deposit: int
    max_amount: int
    min_amount: int
    interest_rate: int
    lender_fee: int
    taker_fee: int


@dataclass(frozen=True)
class LoanOffering:
    """Lender's signed terms for funding a short position"""
    lender: str
    fee_recipient: str
    rates: LoanRates
    expiration_timestamp: int
    lockout_time: int
    call_time_limit: int
    salt: int
    short_sell_address: str
    underlying_token: str
    base_token: str
    taker: str = NULL_ADDRESS
    signature: Optional[ECSignature] = None

    @property
    def kind(self) -> InstrumentKind:
        return InstrumentKind.LOAN_OFFERING

    @property
    def signer(self) -> str:
        return self.lender

    @property
    def is_signed(self) -> bool:
        return self.signature is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "lender": self.lender,
            "taker": self.taker,
            "feeRecipient": self.fee_recipient,
            "rates": {
                "minimumDeposit": str(self.rates.minimum_deposit),
                "maxAmount": str(self.rates.max_amount),
                "minAmount": str(self.rates.min_amount),
                "interestRate": str(self.rates.interest_rate),
                "lenderFee": str(self.rates.lender_fee),
                "takerFee": str(self.rates.taker_fee),
            },
            "expirationTimestamp": str(self.expiration_timestamp),
            "lockoutTime": str(self.lockout_time),
            "callTimeLimit": str(self.call_time_limit),
            "salt": str(self.salt),
            "shortSellAddress": self.short_sell_address,
            "underlyingToken": self.underlying_token,
            "baseToken": self.base_token,
            "signature": self.signature.to_dict() if self.signature else None,
        }


@dataclass(frozen=True)
class ExchangeOrder:
    """Maker's signed 0x order to trade one token for another"""
    exchange_contract_address: str
    maker: str
    fee_recipient: str
    maker_token_address: str
    taker_token_address: str
    maker_token_amount: int
    taker_token_amount: int
    maker_fee: int
    taker_fee: int
    expiration_unix_timestamp_sec: int
    salt: int
    taker: str = NULL_ADDRESS
    ec_signature: Optional[ECSignature] = None

    @property
    def kind(self) -> InstrumentKind:
        return InstrumentKind.EXCHANGE_ORDER

    @property
    def signer(self) -> str:
        return self.maker

    @property
    def signature(self) -> Optional[ECSignature]:
        return self.ec_signature

    @property
    def is_signed(self) -> bool:
        return self.ec_signature is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary in 0x order field naming"""
        return {
            "exchangeContractAddress": self.exchange_contract_address,
            "maker": self.maker,
            "taker": self.taker,
            "feeRecipient": self.fee_recipient,
            "makerTokenAddress": self.maker_token_address,
            "takerTokenAddress": self.taker_token_address,
            "makerTokenAmount": str(self.maker_token_amount),
            "takerTokenAmount": str(self.taker_token_amount),
            "makerFee": str(self.maker_fee),
            "takerFee": str(self.taker_fee),
            "expirationUnixTimestampSec": str(self.expiration_unix_timestamp_sec),
            "salt": str(self.salt),
            "ecSignature": self.ec_signature.to_dict() if self.ec_signature else None,
        }


@dataclass(frozen=True)
class ShortSellTx:
    """Inputs of a ShortSell.short call: loan offering plus the buy order it funds"""
    underlying_token: str
    base_token: str
    short_amount: int
    deposit_amount: int
    loan_offering: LoanOffering
    buy_order: ExchangeOrder
    seller: str

    @property
    def kind(self) -> InstrumentKind:
        return InstrumentKind.SHORT_SELL
