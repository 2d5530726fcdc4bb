"""
Transactions as they cross the bridge: a `TransactionList` of SDK
`Transaction` protobufs, one `SignedTransaction` per target node.

A `Transaction` starts from an SDK `TransactionBody` template. Freezing
stamps one body per node and makes it immutable; signing adds signature
pairs to every node body. `to_bytes` produces the same `TransactionList`
bytes other Hedera SDKs emit from `Transaction.toBytes()`.
"""

import logging
from typing import Any, Optional, Union

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError
from hiero_sdk_python import AccountId, PrivateKey
from hiero_sdk_python.hapi.services import transaction_contents_pb2, transaction_pb2

from hedera_wallet_connect.errors import TransactionError
from hedera_wallet_connect.ledger.ids import (
    TransactionID,
    account_id_from_proto,
    account_id_to_proto,
    generate_transaction_id,
    parse_account_id,
    parse_transaction_id,
    transaction_id_to_string,
)
from hedera_wallet_connect.ledger.keys import SignatureMap, SignaturePair, public_key_bytes, sign_pair

logger = logging.getLogger(__name__)

TransactionBody = transaction_pb2.TransactionBody
SignedTransaction = transaction_contents_pb2.SignedTransaction

DEFAULT_MAX_TRANSACTION_FEE = 200_000_000  # tinybars
DEFAULT_VALID_DURATION = 120  # seconds


def _transaction_list_class():
    # proto.TransactionList lives in the SDK-side protobufs, not the HAPI services
    # set; `repeated bytes` has the same wire encoding as `repeated Transaction`.
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="hedera_wallet_connect/transaction_list.proto", package="proto", syntax="proto3"
    )
    message = file_proto.message_type.add(name="TransactionList")
    message.field.add(
        name="transaction_list",
        number=1,
        type=descriptor_pb2.FieldDescriptorProto.TYPE_BYTES,
        label=descriptor_pb2.FieldDescriptorProto.LABEL_REPEATED,
    )
    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_proto.SerializeToString())
    return message_factory.GetMessageClass(pool.FindMessageTypeByName("proto.TransactionList"))


TransactionList = _transaction_list_class()


def parse_message(message_class, data: bytes, what: str):
    """`message_class.FromString` with decode failures raised as ValueError."""
    try:
        return message_class.FromString(data)
    except DecodeError as e:
        raise ValueError(f"Malformed {what}: {e}") from e


class Transaction:
    def __init__(
        self,
        body: Optional[TransactionBody] = None,
        *,
        transaction_id: Optional[Union[TransactionID, str]] = None,
        node_account_ids: Optional[list[Union[AccountId, str]]] = None,
    ):
        self._template = TransactionBody()
        if body is not None:
            self._template.CopyFrom(body)
        if transaction_id is not None:
            self._template.transactionID.CopyFrom(parse_transaction_id(transaction_id))
        if not self._template.transactionFee:
            self._template.transactionFee = DEFAULT_MAX_TRANSACTION_FEE
        if not self._template.HasField("transactionValidDuration"):
            self._template.transactionValidDuration.seconds = DEFAULT_VALID_DURATION

        if node_account_ids is None and self._template.HasField("nodeAccountID"):
            node_account_ids = [account_id_from_proto(self._template.nodeAccountID)]
        self._template.ClearField("nodeAccountID")
        self._node_account_ids = [parse_account_id(n) for n in node_account_ids or []]

        self._frozen = False
        self._bodies: dict[AccountId, bytes] = {}
        self._signatures: dict[AccountId, list[SignaturePair]] = {}

    @property
    def kind(self) -> Optional[str]:
        """Name of the body's operation field, e.g. `cryptoTransfer`."""
        return self._template.WhichOneof("data")

    @property
    def transaction_id(self) -> Optional[TransactionID]:
        return self._template.transactionID if self._template.HasField("transactionID") else None

    @property
    def node_account_ids(self) -> list[AccountId]:
        return list(self._node_account_ids)

    @property
    def memo(self) -> str:
        return self._template.memo

    @property
    def max_transaction_fee(self) -> int:
        return self._template.transactionFee

    @property
    def signatures(self) -> dict[AccountId, tuple[SignaturePair, ...]]:
        return {node: tuple(pairs) for node, pairs in self._signatures.items()}

    def is_frozen(self) -> bool:
        return self._frozen

    def _require_unfrozen(self) -> None:
        if self._frozen:
            raise TransactionError("Transaction is immutable; it has been frozen")

    def set_transaction_id(self, transaction_id: Union[TransactionID, str]) -> "Transaction":
        self._require_unfrozen()
        self._template.transactionID.CopyFrom(parse_transaction_id(transaction_id))
        return self

    def set_node_account_ids(self, node_account_ids: list[Union[AccountId, str]]) -> "Transaction":
        self._require_unfrozen()
        self._node_account_ids = [parse_account_id(n) for n in node_account_ids]
        return self

    def set_memo(self, memo: str) -> "Transaction":
        self._require_unfrozen()
        self._template.memo = memo
        return self

    def set_max_transaction_fee(self, fee: int) -> "Transaction":
        self._require_unfrozen()
        self._template.transactionFee = fee
        return self

    def body_for_node(self, node_account_id: Optional[AccountId]) -> TransactionBody:
        body = TransactionBody()
        body.CopyFrom(self._template)
        if node_account_id is not None:
            body.nodeAccountID.CopyFrom(account_id_to_proto(node_account_id))
        return body

    def freeze(self) -> "Transaction":
        if self._frozen:
            return self
        if not self._node_account_ids:
            raise TransactionError("Node account ids must be set before freezing")
        if self.transaction_id is None:
            raise TransactionError("Transaction id must be set before freezing")
        self._bodies = {node: self.body_for_node(node).SerializeToString() for node in self._node_account_ids}
        self._signatures = {node: [] for node in self._node_account_ids}
        self._frozen = True
        logger.debug(f"Froze {self!r} for {len(self._bodies)} node(s)")
        return self

    def freeze_with(self, client: Any) -> "Transaction":
        """Freeze against a ledger client's node table when targets are unset."""
        if self._frozen:
            return self
        if not self._node_account_ids:
            self._node_account_ids = list(client.network.values())
        return self.freeze()

    def freeze_with_signer(self, signer: Any) -> "Transaction":
        if self._frozen:
            return self
        if self.transaction_id is None:
            self._template.transactionID.CopyFrom(generate_transaction_id(signer.get_account_id()))
        if not self._node_account_ids:
            self._node_account_ids = list(signer.get_network().values())
        return self.freeze()

    def body_bytes(self, node_account_id: AccountId) -> bytes:
        if not self._frozen:
            raise TransactionError("Transaction must be frozen before reading body bytes")
        return self._bodies[node_account_id]

    def sign(self, private_key: PrivateKey) -> "Transaction":
        if not self._frozen:
            raise TransactionError("Transaction must be frozen before signing")
        prefix = public_key_bytes(private_key.public_key())
        for node, body in self._bodies.items():
            pairs = self._signatures[node]
            if any(pair.pubKeyPrefix == prefix for pair in pairs):
                continue
            pairs.append(sign_pair(private_key, body))
        return self

    def add_signature_map(self, signature_map: SignatureMap, node_account_id: Optional[AccountId] = None) -> "Transaction":
        """Merge signature pairs into one node entry, or every entry when no node is given."""
        if not self._frozen:
            raise TransactionError("Transaction must be frozen before adding signatures")
        nodes = [node_account_id] if node_account_id is not None else list(self._bodies)
        for node in nodes:
            self._signatures[node].extend(signature_map.sigPair)
        return self

    def signed_transaction(self, node_account_id: AccountId) -> SignedTransaction:
        return SignedTransaction(
            bodyBytes=self.body_bytes(node_account_id),
            sigMap=SignatureMap(sigPair=self._signatures[node_account_id]),
        )

    def to_bytes(self) -> bytes:
        if not self._frozen:
            raise TransactionError("Transaction must be frozen before serialization")
        transaction_list = TransactionList()
        for node in self._node_account_ids:
            entry = transaction_pb2.Transaction(
                signedTransactionBytes=self.signed_transaction(node).SerializeToString()
            )
            transaction_list.transaction_list.append(entry.SerializeToString())
        return transaction_list.SerializeToString()

    @classmethod
    def from_bytes(cls, data: bytes) -> "Transaction":
        transaction_list = parse_message(TransactionList, data, "transaction list")
        signed_transactions = []
        for raw in transaction_list.transaction_list:
            entry = parse_message(transaction_pb2.Transaction, raw, "transaction")
            if not entry.signedTransactionBytes:
                raise ValueError("Transaction entry carries no signed transaction bytes")
            signed_transactions.append(
                parse_message(SignedTransaction, entry.signedTransactionBytes, "signed transaction")
            )
        return cls.from_signed_transactions(signed_transactions)

    @classmethod
    def from_signed_transactions(cls, signed_transactions: list[SignedTransaction]) -> "Transaction":
        """A frozen transaction over exactly these body bytes and signatures."""
        if not signed_transactions:
            raise ValueError("Transaction list is empty")

        bodies: dict[AccountId, bytes] = {}
        signatures: dict[AccountId, list[SignaturePair]] = {}
        first: Optional[TransactionBody] = None
        for signed in signed_transactions:
            body = parse_message(TransactionBody, signed.bodyBytes, "transaction body")
            if not body.HasField("nodeAccountID"):
                raise ValueError("Transaction body is missing its node account id")
            node = account_id_from_proto(body.nodeAccountID)
            bodies[node] = signed.bodyBytes
            signatures[node] = list(signed.sigMap.sigPair)
            first = first or body

        transaction = cls(node_account_ids=list(bodies))
        transaction._template.CopyFrom(first)
        transaction._template.ClearField("nodeAccountID")
        transaction._bodies = bodies
        transaction._signatures = signatures
        transaction._frozen = True
        return transaction

    def __repr__(self) -> str:
        transaction_id = transaction_id_to_string(self.transaction_id) if self.transaction_id else None
        return f"Transaction(kind={self.kind!r}, transaction_id={transaction_id!r}, frozen={self._frozen})"

