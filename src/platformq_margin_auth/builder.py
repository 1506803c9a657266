"""
Assembles, hashes and signs loan offerings and exchange orders.
"""

import dataclasses
import logging
import secrets
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .config import SignerSettings, get_settings
from .encoding import instrument_hash, Instrument
from .interfaces import ISigner
from .models import LoanRates, LoanOffering, ExchangeOrder
from .signer_factory import SignerFactory
from .signers import LocalKeySigner
from .signing import PrivateKey, recover, verify
from .terms import LoanOfferingTerms, ExchangeOrderTerms
from .types import InstrumentKind, InvalidTerms, SignatureMismatch
from .utils import normalize_address
from .validation import validate_loan_offering, validate_exchange_order

logger = logging.getLogger(__name__)

TermsT = TypeVar("TermsT", bound=BaseModel)


def generate_salt(bits: int = 256) -> int:
    """Random salt so that otherwise identical terms hash differently"""
    return secrets.randbits(bits)


def _coerce_terms(model: Type[TermsT], terms: Union[TermsT, Mapping[str, Any]],
                  kind: InstrumentKind) -> TermsT:
    if isinstance(terms, model):
        return terms
    if not isinstance(terms, Mapping):
        raise InvalidTerms(f"Expected {model.__name__} or mapping, got {type(terms).__name__}",
                           instrument_kind=kind)
    try:
        return model.model_validate(dict(terms))
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise InvalidTerms(f"Malformed terms: {first['msg']}", instrument_kind=kind, field=field) from e


def _pick_party(from_terms: Optional[str], from_caller: Optional[str], default: Optional[str],
                field: str, kind: InstrumentKind) -> str:
    if from_terms and from_caller and from_terms.lower() != from_caller.lower():
        raise InvalidTerms(f"Terms name {from_terms} but signing as {from_caller}",
                           instrument_kind=kind, field=field)
    party = from_terms or from_caller or default
    if party is None:
        raise InvalidTerms("No signing party given", instrument_kind=kind, field=field)
    return normalize_address(party, field, kind)


class InstrumentBuilder:
    """
    Builds signed instruments through a signing collaborator.

    Terms are validated before anything is hashed, so invalid terms never
    reach the signer. Independent builds share no state and may run
    concurrently.
    """

    def __init__(self, signer: ISigner, short_sell_address: Optional[str] = None,
                 exchange_contract_address: Optional[str] = None, salt_bits: int = 256):
        self.signer = signer
        self.short_sell_address = short_sell_address
        self.exchange_contract_address = exchange_contract_address
        self.salt_bits = salt_bits

    @classmethod
    def from_settings(cls, settings: Optional[SignerSettings] = None) -> "InstrumentBuilder":
        """Builder whose signer, contract defaults and salt width come from settings"""
        settings = settings or get_settings()
        return cls(
            SignerFactory.create_signer(settings),
            short_sell_address=settings.short_sell_address,
            exchange_contract_address=settings.exchange_contract_address,
            salt_bits=settings.salt_bits,
        )

    async def build_loan_offering(self, terms: Union[LoanOfferingTerms, Mapping[str, Any]],
                                  lender: Optional[str] = None) -> LoanOffering:
        """
        Build and sign a loan offering.

        Args:
            terms: Loan offering terms (model or camelCase/snake_case mapping)
            lender: Signing identity; defaults to terms.lender, then the signer's default

        Raises:
            InvalidTerms: If the terms break an invariant (nothing is signed)
            SigningError: If the signer fails
            SignatureMismatch: If the signature does not recover to the lender
        """
        kind = InstrumentKind.LOAN_OFFERING
        terms = _coerce_terms(LoanOfferingTerms, terms, kind)

        lender = _pick_party(terms.lender, lender, self.signer.default_identity, "lender", kind)
        short_sell_address = terms.short_sell_address or self.short_sell_address
        if short_sell_address is None:
            raise InvalidTerms("No ShortSell contract address", instrument_kind=kind,
                               field="short_sell_address")

        rates = terms.rates
        offering = LoanOffering(
            lender=lender,
            taker=normalize_address(terms.taker, "taker", kind),
            fee_recipient=normalize_address(terms.fee_recipient, "fee_recipient", kind),
            rates=LoanRates(
                minimum_deposit=rates.minimum_deposit,
                max_amount=rates.max_amount,
                min_amount=rates.min_amount,
                interest_rate=rates.interest_rate,
                lender_fee=rates.lender_fee,
                taker_fee=rates.taker_fee,
            ),
            expiration_timestamp=terms.expiration_timestamp,
            lockout_time=terms.lockout_time,
            call_time_limit=terms.call_time_limit,
            salt=terms.salt if terms.salt is not None else generate_salt(self.salt_bits),
            short_sell_address=normalize_address(short_sell_address, "short_sell_address", kind),
            underlying_token=normalize_address(terms.underlying_token, "underlying_token", kind),
            base_token=normalize_address(terms.base_token, "base_token", kind),
        )
        validate_loan_offering(offering)

        return await self._sign(offering, lender, "signature")

    async def build_exchange_order(self, terms: Union[ExchangeOrderTerms, Mapping[str, Any]],
                                   maker: Optional[str] = None) -> ExchangeOrder:
        """Build and sign a 0x exchange order; same contract as build_loan_offering"""
        kind = InstrumentKind.EXCHANGE_ORDER
        terms = _coerce_terms(ExchangeOrderTerms, terms, kind)

        maker = _pick_party(terms.maker, maker, self.signer.default_identity, "maker", kind)
        exchange = terms.exchange_contract_address or self.exchange_contract_address
        if exchange is None:
            raise InvalidTerms("No exchange contract address", instrument_kind=kind,
                               field="exchange_contract_address")

        order = ExchangeOrder(
            exchange_contract_address=normalize_address(exchange, "exchange_contract_address", kind),
            maker=maker,
            taker=normalize_address(terms.taker, "taker", kind),
            fee_recipient=normalize_address(terms.fee_recipient, "fee_recipient", kind),
            maker_token_address=normalize_address(terms.maker_token_address, "maker_token_address", kind),
            taker_token_address=normalize_address(terms.taker_token_address, "taker_token_address", kind),
            maker_token_amount=terms.maker_token_amount,
            taker_token_amount=terms.taker_token_amount,
            maker_fee=terms.maker_fee,
            taker_fee=terms.taker_fee,
            expiration_unix_timestamp_sec=terms.expiration_unix_timestamp_sec,
            salt=terms.salt if terms.salt is not None else generate_salt(self.salt_bits),
        )
        validate_exchange_order(order)

        return await self._sign(order, maker, "ec_signature")

    async def _sign(self, instrument: Instrument, signer_address: str, signature_field: str):
        message_hash = instrument_hash(instrument)
        signature = await self.signer.sign_digest(message_hash, signer_address)
        verify(message_hash, signature, signer_address, instrument.kind)

        logger.info(f"Signed {instrument.kind.value} 0x{message_hash.hex()} as {signer_address}")
        return dataclasses.replace(instrument, **{signature_field: signature})


async def build_loan_offering(terms: Union[LoanOfferingTerms, Mapping[str, Any]],
                              lender_key: PrivateKey) -> LoanOffering:
    """Build a loan offering signed with a local private key"""
    return await InstrumentBuilder(LocalKeySigner.from_key(lender_key)).build_loan_offering(terms)


async def build_exchange_order(terms: Union[ExchangeOrderTerms, Mapping[str, Any]],
                               maker_key: PrivateKey) -> ExchangeOrder:
    """Build an exchange order signed with a local private key"""
    return await InstrumentBuilder(LocalKeySigner.from_key(maker_key)).build_exchange_order(terms)


def recover_signer(instrument: Instrument) -> str:
    """Address that signed the instrument's current field values"""
    return recover(instrument_hash(instrument), instrument.signature, instrument.kind)


def verify_instrument(instrument: Instrument, expected_signer: Optional[str] = None) -> str:
    """
    Check the instrument's signature against its lender or maker.

    Raises:
        SignatureMismatch: If unsigned, malformed, or signed by someone else
    """
    expected = expected_signer or instrument.signer
    return verify(instrument_hash(instrument), instrument.signature, expected, instrument.kind)


def is_valid_signature(instrument: Instrument, expected_signer: Optional[str] = None) -> bool:
    try:
        verify_instrument(instrument, expected_signer)
    except SignatureMismatch:
        return False
    return True
