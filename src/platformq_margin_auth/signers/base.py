"""
Base signer implementation with common functionality.
"""

import logging
from typing import Optional, List
from abc import ABC

from ..interfaces import ISigner
from ..types import SignerBackend, SigningError
from ..utils import validate_address, normalize_address

logger = logging.getLogger(__name__)


class BaseSigner(ISigner, ABC):
    """Base signer with identity bookkeeping"""

    def __init__(self, backend: SignerBackend, default_identity: Optional[str] = None):
        if default_identity is not None and not validate_address(default_identity):
            raise SigningError(f"Invalid signing identity: {default_identity!r}")
        self._backend = backend
        self._default_identity = normalize_address(default_identity) if default_identity else None

    @property
    def backend(self) -> SignerBackend:
        return self._backend

    @property
    def default_identity(self) -> Optional[str]:
        return self._default_identity

    def _resolve_identity(self, identity: Optional[str]) -> str:
        """Pick the address to sign as, failing when none is known"""
        identity = identity or self._default_identity
        if identity is None:
            raise SigningError(f"No signing identity given to {self.backend.value} signer")
        if not validate_address(identity):
            raise SigningError(f"Invalid signing identity: {identity!r}")
        return normalize_address(identity)

    async def get_identities(self) -> List[str]:
        return [self._default_identity] if self._default_identity else []
