"""
Signer factory for creating backend-specific signers from settings.
"""

import logging
from typing import Dict, Type, Optional

from .config import SignerSettings, get_settings
from .interfaces import ISigner
from .signers import LocalKeySigner, NodeSigner
from .types import SignerBackend, SigningError

logger = logging.getLogger(__name__)


class SignerFactory:
    """Factory for creating signing collaborators"""

    # Mapping of key backends to signer classes
    _signers: Dict[SignerBackend, Type[ISigner]] = {
        SignerBackend.LOCAL: LocalKeySigner,
        SignerBackend.NODE: NodeSigner,
    }

    @classmethod
    def create_signer(cls, settings: Optional[SignerSettings] = None) -> ISigner:
        """
        Create a signer for the configured backend.

        Args:
            settings: Signer settings; environment-derived settings when omitted

        Returns:
            Configured signer instance

        Raises:
            SigningError: If the backend is unknown or missing its key material
        """
        settings = settings or get_settings()

        if settings.backend not in cls._signers:
            raise SigningError(f"Unsupported signer backend: {settings.backend}")

        signer_class = cls._signers[settings.backend]

        if settings.backend == SignerBackend.LOCAL:
            if settings.private_key is None:
                raise SigningError("Local signer backend requires MARGIN_AUTH_PRIVATE_KEY")
            signer = signer_class([settings.private_key.get_secret_value()])

        elif settings.backend == SignerBackend.NODE:
            signer = signer_class(rpc_url=settings.rpc_url, account=settings.account)

        else:
            raise SigningError(f"No implementation for signer backend: {settings.backend}")

        logger.info(f"Created {settings.backend.value} signer {signer_class.__name__}")
        return signer

    @classmethod
    def register_signer(cls, backend: SignerBackend, signer_class: Type[ISigner]):
        """
        Register a custom signer implementation for a backend.

        The mapping is class-level, so the registration applies to every
        caller in the process. create_signer constructs the class the same
        way as the built-in one for that backend: LOCAL classes receive a
        list of private keys, NODE classes receive ``rpc_url=`` and
        ``account=`` keyword arguments.
        """
        cls._signers[backend] = signer_class
        logger.info(f"Registered signer {signer_class.__name__} for {backend.value}")

    @classmethod
    def get_supported_backends(cls) -> list:
        """Get list of supported backends"""
        return list(cls._signers.keys())
