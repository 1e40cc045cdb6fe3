"""
SOLWALLET Test Suite - Shared Fixtures
"""

import pytest

from solwallet.config import WalletConfig
from solwallet.core.client import parse_address
from solwallet.core.wallet import WalletStore
from solwallet.logger import WalletLogger


class FakeChainClient:
    """
    In-memory ChainClient. Tracks balances per address and records every call.
    Put an exception in ``failures[method_name]`` to make that method raise it.
    """

    def __init__(self):
        self.balances: dict[str, float] = {}
        self.calls: list[tuple] = []
        self.failures: dict[str, Exception] = {}
        self.closed = False

    def _maybe_fail(self, name: str):
        if name in self.failures:
            raise self.failures[name]

    async def request_funds(self, address: str, amount_sol: float) -> str:
        self.calls.append(("request_funds", address, amount_sol))
        self._maybe_fail("request_funds")
        self.balances[address] = self.balances.get(address, 0.0) + amount_sol
        return "AirdropSig1111"

    async def get_balance(self, address: str) -> float:
        self.calls.append(("get_balance", address))
        self._maybe_fail("get_balance")
        return self.balances.get(address, 0.0)

    async def submit_transfer(self, keypair, to_address: str, amount_sol: float) -> str:
        self.calls.append(("submit_transfer", str(keypair.pubkey()), to_address, amount_sol))
        self._maybe_fail("submit_transfer")
        parse_address(to_address)
        sender = str(keypair.pubkey())
        self.balances[sender] = self.balances.get(sender, 0.0) - amount_sol
        self.balances[to_address] = self.balances.get(to_address, 0.0) + amount_sol
        return "TransferSig2222"

    async def close(self):
        self.closed = True

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def wallet_path(tmp_path):
    return tmp_path / "test_wallet.json"


@pytest.fixture
def wallet_config(tmp_path, wallet_path):
    """Config pointed at a temp wallet file and a local validator URL."""
    return WalletConfig(
        rpc_url="http://localhost:8899",
        wallet_file=str(wallet_path),
        log_file=str(tmp_path / "solwallet.log"),
        confirm_max_attempts=3,
        confirm_interval_seconds=0.0,
    )


@pytest.fixture
def logger(wallet_config):
    """Logger instance for tests."""
    return WalletLogger(wallet_config)


@pytest.fixture
def store(wallet_path, logger):
    return WalletStore(wallet_path, logger)


@pytest.fixture
def chain():
    return FakeChainClient()
