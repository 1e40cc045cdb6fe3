#!/usr/bin/env python3
"""
SOLWALLET - Logging

Console plus rotating file history for every wallet action.
"""

import logging
from logging.handlers import RotatingFileHandler

from .config import WalletConfig


class WalletLogger:
    """
    Thin facade over the "SOLWALLET" logger.
    Never pass secret key material to any of these methods.
    """

    def __init__(self, config: WalletConfig):
        self.logger = logging.getLogger("SOLWALLET")
        self.logger.setLevel(getattr(logging, config.log_level))

        # logging.getLogger returns the same instance every time, so only
        # attach handlers once per process.
        if not self.logger.handlers:
            console = logging.StreamHandler()
            console.setFormatter(logging.Formatter(
                '%(asctime)s | %(levelname)8s | %(message)s',
                datefmt='%H:%M:%S'
            ))
            self.logger.addHandler(console)

            file_handler = RotatingFileHandler(
                config.log_file,
                maxBytes=10_000_000,  # 10MB
                backupCount=5
            )
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s | %(levelname)8s | %(name)s | %(message)s'
            ))
            self.logger.addHandler(file_handler)

    def wallet_loaded(self, address: str, path: str):
        self.logger.info(f"Wallet loaded: {address} ({path})")

    def wallet_created(self, address: str):
        self.logger.info(f"New wallet created: {address}")

    def wallet_saved(self, address: str, path: str, balance: float):
        self.logger.debug(f"Wallet saved: {address[:8]}... -> {path} | {balance:.9f} SOL")

    def airdrop_completed(self, address: str, amount_sol: float, signature: str):
        self.logger.info(f"AIRDROP: {amount_sol:g} SOL -> {address[:8]}...")
        self.logger.info(f"   Signature: {signature}")

    def transfer_completed(self, recipient: str, amount_sol: float, signature: str):
        self.logger.info(f"TRANSFER: {amount_sol:g} SOL -> {recipient[:8]}...")
        self.logger.info(f"   Signature: {signature}")

    def error(self, context: str, error: Exception):
        self.logger.error(f"{context}: {str(error)}")

    def info(self, message: str):
        self.logger.info(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def debug(self, message: str):
        self.logger.debug(message)
