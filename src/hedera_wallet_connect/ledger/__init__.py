"""
Ledger objects carried across the bridge, built on the Hiero Python SDK and
its HAPI protobufs.
"""

from hiero_sdk_python import AccountId, PrivateKey, PublicKey

from hedera_wallet_connect.ledger.client import LedgerClient, Network, TransactionResponse
from hedera_wallet_connect.ledger.ids import (
    LedgerId,
    TransactionID,
    generate_transaction_id,
    make_transaction_id,
    parse_account_id,
    parse_transaction_id,
    transaction_id_to_string,
)
from hedera_wallet_connect.ledger.keys import KeyType, SignatureMap, SignaturePair, SignerSignature
from hedera_wallet_connect.ledger.queries import (
    Query,
    account_balance_query,
    account_info_query,
    transaction_receipt_query,
)
from hedera_wallet_connect.ledger.transaction_list import (
    SignedTransaction,
    Transaction,
    TransactionBody,
    TransactionList,
)

__all__ = [
    "AccountId",
    "KeyType",
    "LedgerClient",
    "LedgerId",
    "Network",
    "PrivateKey",
    "PublicKey",
    "Query",
    "SignatureMap",
    "SignaturePair",
    "SignedTransaction",
    "SignerSignature",
    "Transaction",
    "TransactionBody",
    "TransactionID",
    "TransactionList",
    "TransactionResponse",
    "account_balance_query",
    "account_info_query",
    "generate_transaction_id",
    "make_transaction_id",
    "parse_account_id",
    "parse_transaction_id",
    "transaction_id_to_string",
    "transaction_receipt_query",
]
