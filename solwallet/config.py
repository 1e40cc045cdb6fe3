#!/usr/bin/env python3
"""
SOLWALLET - Core Configuration

Wallet configuration and environment management.
"""

import logging
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv

# Dependency check (single location for the whole package)
try:
    from solana.rpc.async_api import AsyncClient  # noqa: F401
    from solders.keypair import Keypair  # noqa: F401
except ImportError:
    print("Missing dependencies. Install with:")
    print("   pip install solana solders base58 python-dotenv rich")
    sys.exit(1)


DEFAULT_RPC_URL = "https://api.testnet.solana.com"
DEFAULT_WALLET_FILE = "test_wallet.json"
VALID_COMMITMENTS = ("processed", "confirmed", "finalized")

_dotenv_loaded = False


def _ensure_dotenv() -> None:
    """Load .env file exactly once, on first call."""
    global _dotenv_loaded
    if not _dotenv_loaded:
        load_dotenv()
        _dotenv_loaded = True


@dataclass
class WalletConfig:
    """
    Everything the CLI needs to know about where the wallet lives
    and which cluster it talks to.
    """

    # Network & Connection
    rpc_url: str = ""
    commitment: str = "confirmed"
    rpc_timeout_seconds: float = 30.0

    # Confirmation polling for airdrops and transfers
    confirm_max_attempts: int = 20
    confirm_interval_seconds: float = 1.0

    # Wallet file
    wallet_file: str = ""

    # Commands
    default_airdrop_sol: float = 1.0

    # Logging
    log_level: str = ""
    log_file: str = "solwallet.log"

    def __post_init__(self):
        """Fill env-based defaults after dataclass init (avoids module-level side effects)."""
        _ensure_dotenv()
        if not self.rpc_url:
            self.rpc_url = os.getenv("SOLANA_RPC_URL", DEFAULT_RPC_URL)
        if not self.wallet_file:
            self.wallet_file = os.getenv("SOLWALLET_FILE", DEFAULT_WALLET_FILE)
        if not self.log_level:
            self.log_level = os.getenv("SOLWALLET_LOG_LEVEL", "INFO").upper()

    def __repr__(self) -> str:
        """Keep query-string API keys some RPC providers embed in the URL out of logs."""
        return (
            f"WalletConfig(rpc_url='{self.rpc_url[:30]}...', "
            f"commitment={self.commitment}, "
            f"wallet_file='{self.wallet_file}')"
        )

    def validate(self) -> list[str]:
        """Return a list of human-readable problems; empty when the config is usable."""
        errors = []

        if not self.rpc_url:
            errors.append("RPC URL required (set SOLANA_RPC_URL)")

        if self.rpc_url and not self.rpc_url.startswith("https://"):
            if not self.rpc_url.startswith("http://127.0.0.1") and not self.rpc_url.startswith(
                "http://localhost"
            ):
                errors.append("RPC URL must use HTTPS (plaintext HTTP is only allowed for localhost)")

        if self.commitment not in VALID_COMMITMENTS:
            errors.append(f"Commitment must be one of: {', '.join(VALID_COMMITMENTS)}")

        if self.rpc_timeout_seconds <= 0:
            errors.append("RPC timeout must be positive")

        if self.confirm_max_attempts < 1:
            errors.append("Confirmation attempts must be at least 1")

        if self.confirm_interval_seconds < 0:
            errors.append("Confirmation interval must be non-negative")

        if self.default_airdrop_sol <= 0:
            errors.append("Default airdrop amount must be positive")

        if not self.wallet_file:
            errors.append("Wallet file path required (set SOLWALLET_FILE)")

        if not isinstance(logging.getLevelName(self.log_level), int):
            errors.append(f"Unknown log level: {self.log_level}")

        return errors
