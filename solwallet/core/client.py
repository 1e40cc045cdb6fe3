#!/usr/bin/env python3
"""
SOLWALLET - Chain Client

The three things the wallet ever asks of the network: fund me, what do I
hold, and send this. Everything else is the RPC node's business.
"""

import asyncio
import math
from typing import Awaitable, Protocol, TypeVar

from solana.rpc.async_api import AsyncClient
from solana.rpc.types import TxOpts
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction
from solders.transaction_status import TransactionConfirmationStatus

from solwallet.config import WalletConfig
from solwallet.exceptions import NetworkError
from solwallet.logger import WalletLogger

LAMPORTS_PER_SOL = 1_000_000_000
MAX_LAMPORTS = 2**64 - 1  # lamport amounts are u64 on-chain

T = TypeVar("T")


def sol_to_lamports(amount_sol: float) -> int:
    """
    Whole lamports for a SOL amount.
    Raises ValueError unless the result is between 1 and MAX_LAMPORTS.
    """
    scaled = amount_sol * LAMPORTS_PER_SOL
    if not math.isfinite(scaled) or scaled > MAX_LAMPORTS:
        raise ValueError(f"{amount_sol:g} SOL is more than a u64 lamport amount can hold")
    lamports = int(round(scaled))
    if lamports < 1:
        raise ValueError(f"{amount_sol:g} SOL is less than one lamport")
    if lamports > MAX_LAMPORTS:
        raise ValueError(f"{amount_sol:g} SOL is more than a u64 lamport amount can hold")
    return lamports


def _lamports_or_network_error(amount_sol: float) -> int:
    try:
        return sol_to_lamports(amount_sol)
    except ValueError as e:
        raise NetworkError(f"Invalid amount: {e}") from e


def parse_address(address: str) -> Pubkey:
    """Parse a base58 address, turning a bad one into a NetworkError."""
    try:
        return Pubkey.from_string(address)
    except ValueError as e:
        raise NetworkError(f"Invalid address {address!r}: {e}") from e


class ChainClient(Protocol):
    """Capabilities the CLI needs from a blockchain collaborator."""

    async def request_funds(self, address: str, amount_sol: float) -> str: ...

    async def get_balance(self, address: str) -> float: ...

    async def submit_transfer(
        self, keypair: Keypair, to_address: str, amount_sol: float
    ) -> str: ...

    async def close(self) -> None: ...


class SolanaChainClient:
    """
    ChainClient backed by solana-py's AsyncClient.
    Failures are raised as NetworkError, never returned as sentinels.
    """

    def __init__(self, config: WalletConfig, logger: WalletLogger):
        self.config = config
        self.logger = logger
        self.client = AsyncClient(config.rpc_url, commitment=config.commitment)

    async def _call(self, awaitable: Awaitable[T], label: str, signature: str | None = None) -> T:
        """Run one RPC call under the configured timeout."""
        try:
            return await asyncio.wait_for(awaitable, timeout=self.config.rpc_timeout_seconds)
        except asyncio.TimeoutError as e:
            self.logger.warning(f"RPC timeout: {label}")
            raise NetworkError(
                f"RPC timeout after {self.config.rpc_timeout_seconds:g}s: {label}", signature
            ) from e
        except NetworkError:
            raise
        except Exception as e:
            self.logger.debug(f"RPC call failed: {label}: {e}")
            raise NetworkError(f"{label} failed: {e}", signature) from e

    async def get_balance(self, address: str) -> float:
        """Balance in SOL."""
        pubkey = parse_address(address)
        response = await self._call(self.client.get_balance(pubkey), "get_balance")
        return response.value / LAMPORTS_PER_SOL

    async def request_funds(self, address: str, amount_sol: float) -> str:
        """Ask the cluster faucet for SOL and wait until the airdrop lands."""
        pubkey = parse_address(address)
        lamports = _lamports_or_network_error(amount_sol)
        response = await self._call(
            self.client.request_airdrop(pubkey, lamports), "request_airdrop"
        )
        signature = str(response.value)
        self.logger.debug(f"Airdrop requested: {signature}")
        await self.confirm_transaction(signature)
        return signature

    async def submit_transfer(self, keypair: Keypair, to_address: str, amount_sol: float) -> str:
        """
        Build, sign, send and confirm a system-program SOL transfer.
        Returns the transaction signature.
        """
        recipient = parse_address(to_address)
        lamports = _lamports_or_network_error(amount_sol)
        ix = transfer(
            TransferParams(
                from_pubkey=keypair.pubkey(),
                to_pubkey=recipient,
                lamports=lamports,
            )
        )

        blockhash_resp = await self._call(
            self.client.get_latest_blockhash(commitment=self.config.commitment),
            "get_latest_blockhash",
        )
        blockhash = blockhash_resp.value.blockhash

        message = Message.new_with_blockhash([ix], keypair.pubkey(), blockhash)
        transaction = Transaction([keypair], message, blockhash)

        opts = TxOpts(preflight_commitment=self.config.commitment)
        response = await self._call(
            self.client.send_transaction(transaction, opts), "send_transaction"
        )
        signature = str(response.value)
        self.logger.debug(f"Transfer sent: {signature}")
        await self.confirm_transaction(signature)
        return signature

    async def confirm_transaction(self, signature: str):
        """
        Poll signature status until confirmed or finalized.
        Raises NetworkError carrying the signature on failure or timeout.
        """
        wanted = (TransactionConfirmationStatus.Confirmed, TransactionConfirmationStatus.Finalized)
        if self.config.commitment == "processed":
            wanted = wanted + (TransactionConfirmationStatus.Processed,)

        sig = Signature.from_string(signature)
        attempts = self.config.confirm_max_attempts
        for attempt in range(attempts):
            response = await self._call(
                self.client.get_signature_statuses([sig]),
                "get_signature_statuses",
                signature,
            )
            status = response.value[0] if response.value else None
            if status is not None:
                if status.err:
                    raise NetworkError(f"Transaction failed on-chain: {status.err}", signature)
                if status.confirmation_status in wanted:
                    return
            if attempt < attempts - 1:
                await asyncio.sleep(self.config.confirm_interval_seconds)

        raise NetworkError(
            f"Transaction {signature[:16]}... not confirmed after {attempts} attempts",
            signature,
        )

    async def close(self):
        await self.client.close()
