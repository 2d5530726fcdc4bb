"""
Builders for the SDK `Query` protobufs a signer runs.
"""

from typing import Union

from hiero_sdk_python import AccountId
from hiero_sdk_python.hapi.services import query_pb2

from hedera_wallet_connect.ledger.ids import TransactionID, account_id_to_proto, parse_account_id, parse_transaction_id

Query = query_pb2.Query

# Query.query oneof field names
ACCOUNT_BALANCE = "cryptogetAccountBalance"
ACCOUNT_INFO = "cryptoGetInfo"
TRANSACTION_RECEIPT = "transactionGetReceipt"


def account_balance_query(account_id: Union[AccountId, str]) -> Query:
    query = Query()
    query.cryptogetAccountBalance.accountID.CopyFrom(account_id_to_proto(parse_account_id(account_id)))
    return query


def account_info_query(account_id: Union[AccountId, str]) -> Query:
    query = Query()
    query.cryptoGetInfo.accountID.CopyFrom(account_id_to_proto(parse_account_id(account_id)))
    return query


def transaction_receipt_query(transaction_id: Union[TransactionID, str]) -> Query:
    query = Query()
    query.transactionGetReceipt.transactionID.CopyFrom(parse_transaction_id(transaction_id))
    return query


def query_kind(query: Query) -> str:
    return query.WhichOneof("query") or ""
