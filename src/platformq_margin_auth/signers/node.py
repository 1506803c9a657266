"""
Signer backed by an unlocked account on an Ethereum JSON-RPC node (eth_sign).
"""

import asyncio
import logging
from typing import Optional, List

from web3 import Web3

from ..models import ECSignature
from ..types import SignerBackend, SigningError, WORD_SIZE
from .base import BaseSigner

logger = logging.getLogger(__name__)


class NodeSigner(BaseSigner):
    """Delegates signing to a node that holds the account keys"""

    def __init__(self, rpc_url: Optional[str] = None, account: Optional[str] = None,
                 w3: Optional[Web3] = None):
        super().__init__(SignerBackend.NODE, default_identity=account)
        self.rpc_url = rpc_url
        self.w3: Optional[Web3] = w3
        self._connected = w3 is not None

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def connect(self) -> bool:
        """Connect to the signing node"""
        if self.w3 is None:
            if not self.rpc_url:
                raise SigningError("NodeSigner needs an rpc_url or a Web3 instance")
            self.w3 = Web3(Web3.HTTPProvider(self.rpc_url))

        try:
            connected = await asyncio.to_thread(self.w3.is_connected)
        except Exception as e:
            logger.error(f"Error connecting to signing node at {self.rpc_url}: {e}")
            raise SigningError(f"Signing node unavailable: {e}") from e

        if not connected:
            logger.error(f"Failed to connect to signing node at {self.rpc_url}")
            raise SigningError("Signing node unavailable")

        self._connected = True
        logger.info(f"Connected to signing node at {self.rpc_url}")
        return True

    async def sign_digest(self, digest: bytes, identity: Optional[str] = None) -> ECSignature:
        if not isinstance(digest, (bytes, bytearray)) or len(digest) != WORD_SIZE:
            raise SigningError("Digest must be 32 bytes")
        address = self._resolve_identity(identity)
        if not self._connected:
            await self.connect()

        try:
            raw = await asyncio.to_thread(self.w3.eth.sign, address, data=bytes(digest))
        except Exception as e:
            logger.error(f"eth_sign failed for {address}: {e}")
            raise SigningError(f"Node rejected signing request for {address}: {e}") from e

        try:
            return ECSignature.from_rpc_signature(bytes(raw))
        except ValueError as e:
            raise SigningError(f"Malformed signature from node: {e}") from e

    async def get_identities(self) -> List[str]:
        if not self._connected:
            await self.connect()
        return list(await asyncio.to_thread(lambda: self.w3.eth.accounts))
