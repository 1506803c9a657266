"""
In-process signer holding secp256k1 private keys.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ..models import ECSignature
from ..signing import PrivateKey, address_of, sign
from ..types import SignerBackend, SigningError
from .base import BaseSigner

logger = logging.getLogger(__name__)


class LocalKeySigner(BaseSigner):
    """Signs with private keys kept in memory; the first key is the default identity"""

    def __init__(self, private_keys: Iterable[PrivateKey]):
        self._keys: Dict[str, PrivateKey] = {}
        for key in private_keys:
            self._keys[address_of(key)] = key

        if not self._keys:
            raise SigningError("LocalKeySigner requires at least one private key")

        super().__init__(SignerBackend.LOCAL, default_identity=next(iter(self._keys)))
        logger.info(f"Local signer loaded {len(self._keys)} key(s)")

    @classmethod
    def from_key(cls, private_key: PrivateKey) -> "LocalKeySigner":
        return cls([private_key])

    async def sign_digest(self, digest: bytes, identity: Optional[str] = None) -> ECSignature:
        address = self._resolve_identity(identity)
        key = self._keys.get(address)
        if key is None:
            raise SigningError(f"No private key held for {address}")
        return sign(digest, key)

    async def get_identities(self) -> List[str]:
        return list(self._keys)
