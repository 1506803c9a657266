"""
Interfaces (protocols) for signing collaborators.
Using Python's Protocol for structural subtyping.
"""

from typing import Protocol, List, Optional
from abc import abstractmethod

from .models import ECSignature
from .types import SignerBackend


class ISigner(Protocol):
    """Interface for anything that can produce eth_sign signatures over a digest"""

    @property
    @abstractmethod
    def backend(self) -> SignerBackend:
        """Get the key backend this signer uses"""
        ...

    @property
    @abstractmethod
    def default_identity(self) -> Optional[str]:
        """Address used when the caller does not name one"""
        ...

    @abstractmethod
    async def sign_digest(self, digest: bytes, identity: Optional[str] = None) -> ECSignature:
        """Sign a 32 byte digest as identity (eth_sign form, v = 27/28)"""
        ...

    @abstractmethod
    async def get_identities(self) -> List[str]:
        """Addresses this signer can sign for"""
        ...
