#!/usr/bin/env python3
"""
SOLWALLET - Command Line Interface

    solwallet new
    solwallet airdrop [amount]
    solwallet balance
    solwallet transfer <recipient> <amount>

dispatch() is the whole command table; main() only wires real collaborators
into it and renders the result.
"""

import asyncio
import math
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from rich.console import Console

from solwallet.config import WalletConfig
from solwallet.core.client import ChainClient, SolanaChainClient, sol_to_lamports
from solwallet.core.wallet import WalletRecord, WalletStore
from solwallet.exceptions import (
    ConfigError,
    DataIntegrityError,
    NetworkError,
    UsageError,
    WalletError,
)
from solwallet.logger import WalletLogger

COMMANDS = ("new", "airdrop", "balance", "transfer")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


@dataclass
class CommandResult:
    """Outcome of one command invocation."""

    ok: bool
    message: str
    exit_code: int = EXIT_OK
    record: WalletRecord | None = None
    balance: float | None = None
    signature: str | None = None

    @classmethod
    def failure(cls, message: str, exit_code: int = EXIT_FAILURE, **kwargs) -> "CommandResult":
        return cls(ok=False, message=message, exit_code=exit_code, **kwargs)


def parse_amount(raw: str, name: str = "amount") -> float:
    """Positive, finite SOL amount from a CLI argument."""
    try:
        amount = float(raw)
    except (TypeError, ValueError) as e:
        raise UsageError(f"Invalid {name}: {raw!r} is not a number") from e
    if not math.isfinite(amount) or amount <= 0:
        raise UsageError(f"Invalid {name}: {raw!r} must be a positive number")
    try:
        sol_to_lamports(amount)
    except ValueError as e:
        raise UsageError(f"Invalid {name}: {e}") from e
    return amount


def _param(params: Sequence[str | None], index: int) -> str | None:
    if index < len(params) and params[index]:
        return params[index]
    return None


def _active_record(store: WalletStore) -> WalletRecord:
    """Load the wallet, persisting it straight away if it was just generated."""
    record = store.load_or_create()
    if record.created:
        store.save(record)
    return record


async def _refresh_and_save(
    record: WalletRecord, store: WalletStore, client: ChainClient, logger: WalletLogger
) -> bool:
    """
    Pull the post-operation balance into the record and save it.
    The save happens even if the balance query fails.
    """
    refreshed = False
    try:
        record.balance = await client.get_balance(record.public_key)
        refreshed = True
    except NetworkError as e:
        logger.warning(f"Balance refresh failed, keeping last known balance: {e}")
    finally:
        store.save(record)
    return refreshed


async def _cmd_new(params, store, client, logger, default_airdrop_sol) -> CommandResult:
    record = _active_record(store)
    if record.created:
        message = f"New wallet created: {record.public_key}"
    else:
        message = f"Wallet loaded: {record.public_key}"
    return CommandResult(ok=True, message=message, record=record, balance=record.balance)


async def _cmd_airdrop(params, store, client, logger, default_airdrop_sol) -> CommandResult:
    raw = _param(params, 0)
    amount = parse_amount(raw) if raw is not None else default_airdrop_sol

    record = _active_record(store)
    try:
        signature = await client.request_funds(record.public_key, amount)
    except NetworkError as e:
        if e.signature:
            await _refresh_and_save(record, store, client, logger)
        raise

    logger.airdrop_completed(record.public_key, amount, signature)
    refreshed = await _refresh_and_save(record, store, client, logger)
    message = f"Airdrop of {amount:g} SOL completed."
    if not refreshed:
        message += " (balance could not be refreshed)"
    return CommandResult(
        ok=True, message=message, record=record, balance=record.balance, signature=signature
    )


async def _cmd_balance(params, store, client, logger, default_airdrop_sol) -> CommandResult:
    record = _active_record(store)
    balance = await client.get_balance(record.public_key)
    return CommandResult(
        ok=True, message=f"Current balance: {balance:g} SOL", record=record, balance=balance
    )


async def _cmd_transfer(params, store, client, logger, default_airdrop_sol) -> CommandResult:
    recipient = _param(params, 0)
    raw_amount = _param(params, 1)
    if recipient is None or raw_amount is None:
        raise UsageError("Please provide recipient address and amount for the transfer.")
    amount = parse_amount(raw_amount)

    record = _active_record(store)
    try:
        signature = await client.submit_transfer(record.keypair, recipient, amount)
    except NetworkError as e:
        if e.signature:
            await _refresh_and_save(record, store, client, logger)
        raise

    logger.transfer_completed(recipient, amount, signature)
    refreshed = await _refresh_and_save(record, store, client, logger)
    message = f"Transfer of {amount:g} SOL to {recipient} completed."
    if not refreshed:
        message += " (balance could not be refreshed)"
    return CommandResult(
        ok=True, message=message, record=record, balance=record.balance, signature=signature
    )


COMMAND_TABLE: dict[str, Callable[..., Awaitable[CommandResult]]] = {
    "new": _cmd_new,
    "airdrop": _cmd_airdrop,
    "balance": _cmd_balance,
    "transfer": _cmd_transfer,
}


async def dispatch(
    command: str,
    params: Sequence[str | None],
    store: WalletStore,
    client: ChainClient,
    logger: WalletLogger,
    default_airdrop_sol: float = WalletConfig.default_airdrop_sol,
) -> CommandResult:
    """
    Run one command against the given store and chain client.
    Never raises for usage, wallet or network problems; those become failed results.
    """
    handler = COMMAND_TABLE.get(command)
    if handler is None:
        logger.warning(f"Unsupported command: {command!r}")
        return CommandResult.failure(
            f"Unsupported command: {command!r}. Supported commands: {', '.join(COMMANDS)}.",
            exit_code=EXIT_USAGE,
        )

    try:
        return await handler(params, store, client, logger, default_airdrop_sol)
    except UsageError as e:
        return CommandResult.failure(str(e), exit_code=EXIT_USAGE)
    except DataIntegrityError as e:
        logger.error("Wallet file rejected", e)
        return CommandResult.failure(
            f"{e}. Refusing to overwrite it; move or repair the file and retry."
        )
    except WalletError as e:
        logger.error("Wallet error", e)
        return CommandResult.failure(str(e))
    except NetworkError as e:
        logger.error(f"{command} failed", e)
        message = f"{command} failed: {e}"
        if e.signature:
            message += f" (transaction {e.signature} was submitted; check it before retrying)"
        else:
            message += " (nothing was submitted)"
        return CommandResult.failure(message, signature=e.signature)


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        prog="solwallet",
        description="Manage a single Solana test-network wallet",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  new                          Create the wallet file, or show the existing wallet
  airdrop [amount]             Request test SOL (default: 1)
  balance                      Show the current on-chain balance
  transfer <recipient> <amount>  Send SOL to another address

Environment Variables (or use .env file):
  SOLANA_RPC_URL        - RPC endpoint (default: https://api.testnet.solana.com)
  SOLWALLET_FILE        - Wallet file path (default: test_wallet.json)
  SOLWALLET_LOG_LEVEL   - Log level (default: INFO)
        """,
    )
    parser.add_argument("command", help="new | airdrop | balance | transfer")
    parser.add_argument("param1", nargs="?", default=None)
    parser.add_argument("param2", nargs="?", default=None)
    return parser


def render_result(result: CommandResult, console: Console | None = None, err_console: Console | None = None):
    console = console or Console()
    err_console = err_console or Console(stderr=True)

    if not result.ok:
        err_console.print(result.message, style="bold red", markup=False, highlight=False)
        if result.signature:
            err_console.print(f"Signature: {result.signature}", style="dim", markup=False)
        return

    console.print(result.message, style="bold green", markup=False, highlight=False)
    if result.record is not None:
        console.print(f"Address:   {result.record.public_key}", markup=False, highlight=False)
    if result.balance is not None:
        console.print(f"Balance:   {result.balance:g} SOL", markup=False, highlight=False)
    if result.signature:
        console.print(f"Signature: {result.signature}", style="dim", markup=False)


async def run_command(
    config: WalletConfig, command: str, params: Sequence[str | None]
) -> CommandResult:
    """Wire the real store and RPC client into dispatch()."""
    errors = config.validate()
    if errors:
        raise ConfigError("; ".join(errors))

    logger = WalletLogger(config)
    store = WalletStore(config.wallet_file, logger)
    client = SolanaChainClient(config, logger)
    try:
        return await dispatch(
            command,
            params,
            store,
            client,
            logger,
            default_airdrop_sol=config.default_airdrop_sol,
        )
    finally:
        await client.close()


def main(argv: Sequence[str] | None = None) -> int:
    """
    The entry point.
    Returns the process exit code.
    """
    args = build_parser().parse_args(argv)

    config = WalletConfig()
    try:
        result = asyncio.run(run_command(config, args.command, [args.param1, args.param2]))
    except ConfigError as e:
        Console(stderr=True).print(f"Configuration error: {e}", style="red", markup=False)
        return EXIT_USAGE

    render_result(result)
    return result.exit_code
