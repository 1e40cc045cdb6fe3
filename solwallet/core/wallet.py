#!/usr/bin/env python3
"""
SOLWALLET - Wallet Storage

One keypair, one JSON file. The file either holds a complete, self-consistent
wallet or it does not exist at all.
"""

import json
import math
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

import base58
from solders.keypair import Keypair

from solwallet.exceptions import DataIntegrityError, WalletError
from solwallet.logger import WalletLogger

WALLET_FORMAT_VERSION = 1
SECRET_KEY_LENGTH = 64


@dataclass
class WalletRecord:
    """The active wallet: secret key bytes plus the last balance we saw."""

    secret_key: bytes
    balance: float = 0.0
    created: bool = field(default=False, compare=False)

    @classmethod
    def generate(cls) -> "WalletRecord":
        """Fresh random keypair with nothing in it yet."""
        return cls(secret_key=bytes(Keypair()), created=True)

    @property
    def keypair(self) -> Keypair:
        return Keypair.from_seed(self.secret_key[:32])

    @property
    def public_key(self) -> str:
        return str(self.keypair.pubkey())

    def __repr__(self) -> str:
        return (
            f"WalletRecord(public_key='{self.public_key}', "
            f"secret_key='***', balance={self.balance})"
        )

    def to_dict(self) -> dict:
        return {
            "version": WALLET_FORMAT_VERSION,
            "secretKey": list(self.secret_key),
            "publicKey": self.public_key,
            "balance": self.balance,
        }


def _decode_secret_key(raw) -> bytes:
    """Accept a list of byte values or a base58 string."""
    if isinstance(raw, str):
        try:
            secret = base58.b58decode(raw)
        except ValueError as e:
            raise ValueError(f"secretKey is not valid base58: {e}") from e
    elif isinstance(raw, list):
        if not all(isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255 for b in raw):
            raise ValueError("secretKey must contain byte values (0-255)")
        secret = bytes(raw)
    else:
        raise ValueError("secretKey must be a byte array or base58 string")

    if len(secret) != SECRET_KEY_LENGTH:
        raise ValueError(f"secretKey must be {SECRET_KEY_LENGTH} bytes, got {len(secret)}")
    return secret


def record_from_dict(data) -> WalletRecord:
    """
    Build a WalletRecord from parsed JSON.

    Files without a "version" key were written by the original JS tool and
    share the version 1 layout. Raises ValueError on anything inconsistent.
    """
    if not isinstance(data, dict):
        raise ValueError("top-level JSON value must be an object")

    version = data.get("version", WALLET_FORMAT_VERSION)
    if version != WALLET_FORMAT_VERSION:
        raise ValueError(f"unsupported wallet format version: {version}")

    if "secretKey" not in data:
        raise ValueError("missing secretKey")
    secret = _decode_secret_key(data["secretKey"])

    derived = Keypair.from_seed(secret[:32]).pubkey()
    if bytes(derived) != secret[32:]:
        raise ValueError("secretKey public half does not match its seed")

    stored_pubkey = data.get("publicKey")
    if stored_pubkey is not None and stored_pubkey != str(derived):
        raise ValueError(f"publicKey {stored_pubkey} does not match secretKey ({derived})")

    balance = data.get("balance", 0.0)
    # The JS tool serialized an unresolved Promise here, which lands as {}
    if balance == {}:
        balance = 0.0
    if not isinstance(balance, (int, float)) or isinstance(balance, bool):
        raise ValueError(f"balance must be a number, got {balance!r}")
    if not math.isfinite(balance):
        raise ValueError(f"balance must be finite, got {balance!r}")

    return WalletRecord(secret_key=secret, balance=float(balance))


class WalletStore:
    """
    Load-or-create and atomic persistence for a single WalletRecord.
    A corrupt file is reported, never silently replaced.
    """

    def __init__(self, path: str | Path, logger: WalletLogger):
        self.path = Path(path)
        self.logger = logger

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> WalletRecord | None:
        """Return the persisted record, or None when no file exists."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise DataIntegrityError(self.path, f"unreadable ({e})") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DataIntegrityError(self.path, f"invalid JSON ({e})") from e

        try:
            record = record_from_dict(data)
        except ValueError as e:
            raise DataIntegrityError(self.path, str(e)) from e

        self.logger.wallet_loaded(record.public_key, str(self.path))
        return record

    def load_or_create(self) -> WalletRecord:
        """
        Load the wallet file, or generate a new keypair when it is absent.
        The generated record is not written; call save() for that.
        """
        record = self.load()
        if record is None:
            record = WalletRecord.generate()
            self.logger.wallet_created(record.public_key)
        return record

    def save(self, record: WalletRecord):
        """Write the record via a temp file in the same directory and os.replace."""
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(record.to_dict(), indent=2)

        fd, tmp_path = tempfile.mkstemp(
            dir=directory, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.path)
        except OSError as e:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise WalletError(f"Failed to save wallet to {self.path}: {e}") from e

        self.logger.wallet_saved(record.public_key, str(self.path), record.balance)
