"""CLI: hedera-wc decode transaction|signature-map|body"""

import json

import click
from google.protobuf.json_format import MessageToDict
from rich.console import Console
from rich.table import Table

from hedera_wallet_connect.codec import decode_signature_map, decode_transaction, decode_transaction_body
from hedera_wallet_connect.errors import CodecError
from hedera_wallet_connect.ledger.ids import transaction_id_to_string
from hedera_wallet_connect.ledger.keys import SignaturePair

console = Console()

_SCHEMES = {"ed25519": "ed25519", "ECDSA_secp256k1": "ecdsa_secp256k1", "ECDSA_384": "ecdsa_384"}


def _scheme(pair: SignaturePair) -> tuple[str, bytes]:
    field = pair.WhichOneof("signature")
    if field is None:
        return "none", b""
    return _SCHEMES.get(field, field), getattr(pair, field)


def _signature_table(title: str, pairs) -> Table:
    table = Table(title=title)
    table.add_column("Public key prefix", style="bold")
    table.add_column("Scheme")
    table.add_column("Signature")
    for pair in pairs:
        scheme, signature = _scheme(pair)
        table.add_row(pair.pubKeyPrefix.hex(), scheme, signature.hex())
    return table


@click.group()
def decode():
    """Decode base64 payloads."""


@decode.command("transaction")
@click.argument("value")
@click.option("--json-output", "--json", is_flag=True)
def decode_transaction_cmd(value: str, json_output: bool):
    """Decode a base64 transaction list."""
    try:
        transaction = decode_transaction(value)
    except CodecError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    body = transaction.body_for_node(None)
    summary = {
        "kind": transaction.kind,
        "transactionId": transaction_id_to_string(transaction.transaction_id) if transaction.transaction_id else None,
        "nodeAccountIds": [str(node) for node in transaction.node_account_ids],
        "maxTransactionFee": transaction.max_transaction_fee,
        "memo": transaction.memo,
        "data": MessageToDict(getattr(body, transaction.kind)) if transaction.kind else {},
    }
    if json_output:
        click.echo(json.dumps(summary, indent=2))
        return
    for key, item in summary.items():
        console.print(f"[bold]{key}[/bold]: {item}")
    for node, pairs in transaction.signatures.items():
        console.print(_signature_table(f"Signatures for node {node}", pairs))


@decode.command("signature-map")
@click.argument("value")
def decode_signature_map_cmd(value: str):
    """Decode a base64 signature map."""
    try:
        signature_map = decode_signature_map(value)
    except CodecError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    console.print(_signature_table(f"Signature map ({len(signature_map.sigPair)} pairs)", signature_map.sigPair))


@decode.command("body")
@click.argument("value")
def decode_body_cmd(value: str):
    """Decode a base64 transaction body."""
    try:
        body = decode_transaction_body(value)
    except CodecError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    click.echo(json.dumps(MessageToDict(body), indent=2))
