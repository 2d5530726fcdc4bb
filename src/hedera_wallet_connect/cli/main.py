"""
hedera-wc CLI: inspect and verify the payloads exchanged over the bridge.

Commands:
  hedera-wc decode <kind> <base64>                    Decode a transaction, signature map or body
  hedera-wc verify <message> <sigmap> <public-key>    Verify a signed message
  hedera-wc account-key <account-id>                  Look up an account's public key
  hedera-wc config show|set                           Persistent settings
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install hedera-wallet-connect[cli]")

from hedera_wallet_connect.codec import verify_message_signature
from hedera_wallet_connect.errors import HederaWalletConnectError
from hedera_wallet_connect.ledger.ids import LedgerId
from hedera_wallet_connect.ledger.keys import key_type, public_key_bytes
from hedera_wallet_connect.transport.http import MirrorNodeClient

console = Console()
CONFIG_FILE = Path.home() / ".hedera-wc" / "config.json"
CONFIG_KEYS = ("network", "mirror_node_url")


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
def main():
    """Hedera WalletConnect tools."""


@main.command("verify")
@click.argument("message")
@click.argument("signature_map")
@click.argument("public_key")
def verify_cmd(message: str, signature_map: str, public_key: str):
    """Verify SIGNATURE_MAP (base64) over MESSAGE with PUBLIC_KEY (hex)."""
    try:
        valid = verify_message_signature(message, signature_map, public_key)
    except HederaWalletConnectError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(2)
    if valid:
        console.print("[green]Signature is valid.[/green]")
    else:
        console.print("[red]Signature is NOT valid.[/red]")
        raise SystemExit(1)


@main.command("account-key")
@click.argument("account_id")
@click.option("--network", default=None, help="mainnet, testnet, previewnet or local-node")
@click.option("--mirror-url", default=None, help="Mirror node base URL")
def account_key_cmd(account_id: str, network: Optional[str], mirror_url: Optional[str]):
    """Show the public key of ACCOUNT_ID from the mirror node."""

    async def _lookup():
        cfg = _load_config()
        ledger_id = LedgerId.from_string(network or cfg.get("network", "testnet"))
        client = MirrorNodeClient(ledger_id, base_url=mirror_url or cfg.get("mirror_node_url"))
        try:
            with console.status(f"Querying {client.base_url}..."):
                return await client.get_account_public_key(account_id)
        finally:
            await client.close()

    try:
        key = _run(_lookup())
    except HederaWalletConnectError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    if key is None:
        console.print(f"[yellow]No key found for {account_id}.[/yellow]")
        raise SystemExit(1)
    console.print(f"[bold]{key_type(key).value}[/bold] {public_key_bytes(key).hex()}")


@main.group("config")
def config():
    """Persistent settings (~/.hedera-wc/config.json)."""


@config.command("show")
def config_show():
    cfg = _load_config()
    if not cfg:
        console.print("[dim]No settings saved.[/dim]")
        return
    for key, value in cfg.items():
        console.print(f"{key} = {value}")


@config.command("set")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
@click.argument("value")
def config_set(key: str, value: str):
    if key == "network":
        try:
            LedgerId.from_string(value)
        except ValueError:
            console.print(f"[red]Unknown network: {value}[/red]")
            raise SystemExit(1)
    cfg = _load_config()
    _save_config({**cfg, key: value})
    console.print(f"[green]{key} set to {value}[/green]")


# Register subcommands from separate modules
from hedera_wallet_connect.cli.decode import decode

main.add_command(decode)


if __name__ == "__main__":
    main()
