"""
SOLWALLET Core - Wallet storage and chain client.
"""

from .client import ChainClient, SolanaChainClient
from .wallet import WalletRecord, WalletStore

__all__ = [
    "WalletRecord",
    "WalletStore",
    "ChainClient",
    "SolanaChainClient",
]
