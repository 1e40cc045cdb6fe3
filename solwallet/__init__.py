"""
SOLWALLET - Solana Test Wallet

Load or create one keypair, keep it in a JSON file, and drive it against a
test cluster: airdrop, balance, transfer.

Usage:
    solwallet new
    solwallet airdrop 2
    solwallet transfer <recipient> 0.5

Or from Python:
    from solwallet import WalletConfig, WalletLogger, WalletStore

    config = WalletConfig()
    store = WalletStore(config.wallet_file, WalletLogger(config))
    record = store.load_or_create()
"""

__version__ = "1.0.0"

# Configuration
from solwallet.config import WalletConfig

# Core components
from solwallet.core.client import LAMPORTS_PER_SOL, ChainClient, SolanaChainClient
from solwallet.core.wallet import WalletRecord, WalletStore

# CLI
from solwallet.cli import CommandResult, dispatch, main

# Exceptions
from solwallet.exceptions import (
    ConfigError,
    DataIntegrityError,
    NetworkError,
    SolWalletError,
    UsageError,
    WalletError,
)

# Logger
from solwallet.logger import WalletLogger

__all__ = [
    # Config
    "WalletConfig",
    # Exceptions
    "SolWalletError",
    "ConfigError",
    "UsageError",
    "WalletError",
    "DataIntegrityError",
    "NetworkError",
    # Logger
    "WalletLogger",
    # Core
    "WalletRecord",
    "WalletStore",
    "ChainClient",
    "SolanaChainClient",
    "LAMPORTS_PER_SOL",
    # CLI
    "CommandResult",
    "dispatch",
    "main",
]
