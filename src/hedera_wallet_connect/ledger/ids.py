"""
Ledger identifiers.

Account ids are the SDK's `AccountId`; transaction ids travel as the SDK's
`TransactionID` protobuf and print as `shard.realm.num@seconds.nanos`.
"""

import re
import time
from enum import Enum
from typing import Union

from hiero_sdk_python import AccountId
from hiero_sdk_python.hapi.services import basic_types_pb2

_ACCOUNT_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")
_TRANSACTION_ID_RE = re.compile(r"^(\d+\.\d+\.\d+)@(\d+)\.(\d+)$")

TransactionID = basic_types_pb2.TransactionID


class LedgerId(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"
    PREVIEWNET = "previewnet"
    LOCAL_NODE = "local-node"

    @classmethod
    def from_string(cls, name: str) -> "LedgerId":
        try:
            return cls(name.lower())
        except ValueError:
            raise ValueError(f"Unknown ledger id: {name!r}") from None

    def __str__(self) -> str:
        return self.value


def parse_account_id(value: Union[AccountId, str, int]) -> AccountId:
    """`0.0.1234`, a bare account number, or an AccountId as is."""
    if isinstance(value, AccountId):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return AccountId(0, 0, value)
    match = _ACCOUNT_RE.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise ValueError(f"Invalid account id: {value!r}")
    shard, realm, num = (int(part) for part in match.groups())
    return AccountId(shard, realm, num)


def account_id_to_proto(account_id: AccountId) -> basic_types_pb2.AccountID:
    return basic_types_pb2.AccountID(shardNum=account_id.shard, realmNum=account_id.realm, accountNum=account_id.num)


def account_id_from_proto(proto: basic_types_pb2.AccountID) -> AccountId:
    return AccountId(proto.shardNum, proto.realmNum, proto.accountNum)


def make_transaction_id(account_id: Union[AccountId, str], seconds: int, nanos: int = 0) -> TransactionID:
    transaction_id = TransactionID()
    transaction_id.accountID.CopyFrom(account_id_to_proto(parse_account_id(account_id)))
    transaction_id.transactionValidStart.seconds = seconds
    transaction_id.transactionValidStart.nanos = nanos
    return transaction_id


def generate_transaction_id(account_id: Union[AccountId, str]) -> TransactionID:
    now = time.time_ns()
    return make_transaction_id(account_id, now // 1_000_000_000, now % 1_000_000_000)


def parse_transaction_id(value: Union[TransactionID, str]) -> TransactionID:
    if isinstance(value, TransactionID):
        return value
    match = _TRANSACTION_ID_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid transaction id: {value!r}")
    account, seconds, nanos = match.groups()
    return make_transaction_id(account, int(seconds), int(nanos))


def transaction_id_to_string(transaction_id: TransactionID) -> str:
    start = transaction_id.transactionValidStart
    return f"{account_id_from_proto(transaction_id.accountID)}@{start.seconds}.{start.nanos:09d}"
