"""
Codec: ledger objects to and from transport-safe base64 strings, plus the
signature extraction and verification helpers both sides share.

Every payload is the base64 of SDK protobuf bytes: a `TransactionList` for
transactions, a `TransactionBody`, a `SignatureMap` or a `Query`. All
functions are pure. Decoding failures surface as `CodecError`.
"""

import base64
import binascii
import logging
from typing import Optional, Union

from google.protobuf.message import DecodeError
from hiero_sdk_python import AccountId, PublicKey

from hedera_wallet_connect.errors import CodecError, NoSignatureFoundError
from hedera_wallet_connect.ledger.keys import (
    SignatureMap,
    SignerSignature,
    public_key_from_string,
    to_signature_pair,
    verify,
)
from hedera_wallet_connect.ledger.queries import Query
from hedera_wallet_connect.ledger.transaction_list import Transaction, TransactionBody, TransactionList

logger = logging.getLogger(__name__)

MESSAGE_PREFIX = "\x19Hedera Signed Message:\n"
DEFAULT_NODE_ACCOUNT_IDS = (AccountId(0, 0, 3), AccountId(0, 0, 4), AccountId(0, 0, 5))


# ---------------------------------------------------------------------------
# Raw bytes
# ---------------------------------------------------------------------------


def bytes_to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def base64_to_bytes(value: str) -> bytes:
    if not isinstance(value, str):
        raise CodecError(f"Expected a base64 string, got {type(value).__name__}")
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CodecError(f"Invalid base64 payload: {e}") from e


def _decode(value: str, what: str, parse):
    data = base64_to_bytes(value)
    try:
        return parse(data)
    except (DecodeError, ValueError) as e:
        raise CodecError(f"Malformed {what} bytes: {e}") from e


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


def set_default_node_account_ids(transaction: Transaction) -> None:
    """Target the default consensus nodes, unless targets are already set."""
    if not transaction.is_frozen() and not transaction.node_account_ids:
        transaction.set_node_account_ids(list(DEFAULT_NODE_ACCOUNT_IDS))


def freeze_transaction(transaction: Transaction) -> None:
    if not transaction.is_frozen():
        transaction.freeze()


def encode_transaction(transaction: Transaction) -> str:
    set_default_node_account_ids(transaction)
    freeze_transaction(transaction)
    return bytes_to_base64(transaction.to_bytes())


def decode_transaction(value: str) -> Transaction:
    return _decode(value, "transaction", Transaction.from_bytes)


def transaction_to_transaction_body(transaction: Transaction, node_account_id: Optional[AccountId]) -> TransactionBody:
    return transaction.body_for_node(node_account_id)


def encode_transaction_body(body: TransactionBody) -> str:
    return bytes_to_base64(body.SerializeToString())


def decode_transaction_body(value: str) -> TransactionBody:
    return _decode(value, "transaction body", TransactionBody.FromString)


def encode_transaction_list(transaction_list: TransactionList) -> str:
    return bytes_to_base64(transaction_list.SerializeToString())


def decode_transaction_list(value: str) -> TransactionList:
    return _decode(value, "transaction list", TransactionList.FromString)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def encode_query(query: Query) -> str:
    return bytes_to_base64(query.SerializeToString())


def decode_query(value: str) -> Query:
    return _decode(value, "query", Query.FromString)


# ---------------------------------------------------------------------------
# Signatures
# ---------------------------------------------------------------------------


def encode_signature_map(signature_map: SignatureMap) -> str:
    return bytes_to_base64(signature_map.SerializeToString())


def decode_signature_map(value: str) -> SignatureMap:
    return _decode(value, "signature map", SignatureMap.FromString)


def signer_signatures_to_signature_map(signatures: list[SignerSignature]) -> SignatureMap:
    """Pair each signature with its public key. Matching keys to accounts is the dApp's job."""
    return SignatureMap(sigPair=[to_signature_pair(s.public_key, s.signature) for s in signatures])


def extract_first_signature(signature_map: Optional[SignatureMap]) -> bytes:
    """Signature bytes of the first pair, preferring ed25519 over ECDSA secp256k1 over ECDSA P-384."""
    if signature_map is None or not signature_map.sigPair:
        raise NoSignatureFoundError()
    pair = signature_map.sigPair[0]
    signature = pair.ed25519 or pair.ECDSA_secp256k1 or pair.ECDSA_384
    if not signature:
        raise NoSignatureFoundError()
    return signature


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


def prefix_message_to_sign(message: str) -> str:
    return f"{MESSAGE_PREFIX}{len(message.encode('utf-8'))}{message}"


def string_to_signer_message(message: str) -> list[bytes]:
    """The bytes a wallet signs for `hedera_signMessage`."""
    return [prefix_message_to_sign(message).encode("utf-8")]


def _public_key(public_key: Union[PublicKey, str]) -> PublicKey:
    if isinstance(public_key, PublicKey):
        return public_key
    try:
        return public_key_from_string(public_key)
    except ValueError as e:
        raise CodecError(f"Invalid public key: {e}") from e


def verify_message_signature(
    message: str,
    signature_map: Union[SignatureMap, str],
    public_key: Union[PublicKey, str],
) -> bool:
    """Check the first signature in `signature_map` against the prefixed message."""
    if isinstance(signature_map, str):
        signature_map = decode_signature_map(signature_map)
    signature = extract_first_signature(signature_map)
    return verify(_public_key(public_key), prefix_message_to_sign(message).encode("utf-8"), signature)


def verify_signer_signature(
    message: str,
    signer_signature: SignerSignature,
    public_key: Union[PublicKey, str],
) -> bool:
    if not signer_signature.signature:
        raise NoSignatureFoundError()
    return verify(_public_key(public_key), prefix_message_to_sign(message).encode("utf-8"), signer_signature.signature)
