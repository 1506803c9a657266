"""
Signing collaborator implementations.
"""

from .base import BaseSigner
from .local import LocalKeySigner
from .node import NodeSigner

__all__ = [
    "BaseSigner",
    "LocalKeySigner",
    "NodeSigner"
]
