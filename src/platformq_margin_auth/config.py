"""
Signer configuration.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .types import SignerBackend
from .utils import validate_address


class SignerSettings(BaseSettings):
    """Where signing keys come from and which protocol contracts to commit to"""

    model_config = SettingsConfigDict(
        env_prefix="MARGIN_AUTH_",
        env_file=".env",
        extra="ignore",
    )

    backend: SignerBackend = SignerBackend.LOCAL

    # Local backend
    private_key: Optional[SecretStr] = None

    # Node backend (eth_sign through an unlocked account)
    rpc_url: str = "http://localhost:8545"
    account: Optional[str] = None

    # Protocol contracts the instruments commit to
    short_sell_address: Optional[str] = None
    exchange_contract_address: Optional[str] = None

    # Random salt width in bits
    salt_bits: int = Field(256, ge=1, le=256)

    @field_validator("account", "short_sell_address", "exchange_contract_address")
    @classmethod
    def check_address(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not validate_address(value):
            raise ValueError(f"invalid address {value!r}")
        return value


@lru_cache()
def get_settings() -> SignerSettings:
    """Get cached settings instance"""
    return SignerSettings()
