#!/usr/bin/env python3
"""
SOLWALLET - Custom Exception Hierarchy

Structured error types for precise error handling.
"""


class SolWalletError(Exception):
    """Base exception for all SOLWALLET errors."""

    pass


class ConfigError(SolWalletError):
    """Invalid or missing configuration."""

    pass


class UsageError(SolWalletError):
    """Missing or malformed command-line parameters."""

    pass


class WalletError(SolWalletError):
    """Wallet or key management error."""

    pass


class DataIntegrityError(WalletError):
    """The wallet file exists but does not hold a valid wallet record."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Wallet file {path} is corrupt: {reason}")


class NetworkError(SolWalletError):
    """
    RPC or on-chain failure.

    ``signature`` is set once a transaction has been submitted, so callers can
    tell "nothing happened" apart from "sent but not confirmed".
    """

    def __init__(self, message: str, signature: str | None = None):
        self.signature = signature
        super().__init__(message)
