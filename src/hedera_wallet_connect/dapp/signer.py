"""
DAppSigner: a Signer that forwards every operation to the paired wallet.
"""

import logging
import random
from typing import Any, Optional, Union

from hiero_sdk_python import AccountId

from hedera_wallet_connect.chains import ledger_id_to_caip_chain_id
from hedera_wallet_connect.codec import (
    base64_to_bytes,
    bytes_to_base64,
    decode_signature_map,
    encode_query,
    encode_transaction,
    extract_first_signature,
)
from hedera_wallet_connect.errors import SessionNotFoundError
from hedera_wallet_connect.extensions import ExtensionBridge
from hedera_wallet_connect.ledger.client import Network, TransactionResponse
from hedera_wallet_connect.ledger.ids import LedgerId, parse_account_id
from hedera_wallet_connect.ledger.keys import SignerSignature, public_key_from_bytes
from hedera_wallet_connect.ledger.queries import Query
from hedera_wallet_connect.ledger.transaction_list import SignedTransaction, Transaction
from hedera_wallet_connect.methods import HederaJsonRpcMethod
from hedera_wallet_connect.models.rpc import RpcCall
from hedera_wallet_connect.models.session import PeerMetadata
from hedera_wallet_connect.signer import Executable, Signer
from hedera_wallet_connect.transport.base import SignClient

logger = logging.getLogger(__name__)


class DAppSigner(Signer):
    def __init__(
        self,
        account_id: Union[AccountId, str],
        sign_client: SignClient,
        topic: str,
        ledger_id: LedgerId = LedgerId.MAINNET,
        extension_id: Optional[str] = None,
        peer: Optional[PeerMetadata] = None,
        extension_bridge: Optional[ExtensionBridge] = None,
        log_level: Optional[Union[int, str]] = None,
    ):
        self._account_id = parse_account_id(account_id)
        self._sign_client = sign_client
        self.topic = topic
        self._ledger_id = ledger_id
        self.extension_id = extension_id
        self.peer = peer or PeerMetadata()
        self._extension_bridge = extension_bridge
        if log_level is not None:
            self.set_log_level(log_level)

    def set_log_level(self, level: Union[int, str]) -> None:
        logger.setLevel(level.upper() if isinstance(level, str) else level)

    def get_metadata(self) -> PeerMetadata:
        """Metadata this dApp presents to wallets."""
        return self._sign_client.metadata

    def get_account_id(self) -> AccountId:
        return self._account_id

    def get_ledger_id(self) -> LedgerId:
        return self._ledger_id

    def get_network(self) -> dict[str, AccountId]:
        return dict(Network.for_name(self._ledger_id).nodes)

    def get_mirror_network(self) -> list[str]:
        return list(Network.for_name(self._ledger_id).mirror_network)

    @property
    def chain_id(self) -> str:
        return ledger_id_to_caip_chain_id(self._ledger_id)

    async def request(self, method: Union[HederaJsonRpcMethod, str], params: Any = None) -> Any:
        """Send one JSON-RPC call over this signer's session."""
        if self._sign_client.get_session(self.topic) is None:
            logger.error(f"Session {self.topic} no longer exists; signer for {self._account_id} is stale")
            raise SessionNotFoundError(f"No session found for topic {self.topic}", topic=self.topic)

        if self.extension_id and self._extension_bridge is not None:
            await self._extension_bridge.open(self.extension_id)

        method_name = method.value if isinstance(method, HederaJsonRpcMethod) else method
        logger.debug(f"-> {method_name} on {self.topic}")
        return await self._sign_client.request(self.topic, self.chain_id, RpcCall(method=method_name, params=params))

    async def sign(self, messages: list[bytes]) -> list[SignerSignature]:
        """Have the wallet sign the first message. The wallet applies the signed-message prefix."""
        result = await self.request(
            HederaJsonRpcMethod.SIGN_MESSAGE,
            {"signerAccountId": str(self.account_identifier), "message": messages[0].decode("utf-8")},
        )
        signature_map = decode_signature_map(result["signatureMap"])
        signature = extract_first_signature(signature_map)
        return [
            SignerSignature(
                public_key=public_key_from_bytes(signature_map.sigPair[0].pubKeyPrefix),
                signature=signature,
                account_id=self._account_id,
            )
        ]

    async def sign_transaction(self, transaction: Transaction) -> Transaction:
        """Have the wallet sign one node's body of `transaction`.

        Returns a new frozen transaction carrying that single body and the
        wallet's signatures.
        """
        if not transaction.is_frozen():
            if transaction.transaction_id is None:
                await self.populate_transaction(transaction)
            if not transaction.node_account_ids:
                transaction.set_node_account_ids([random.choice(list(self.get_network().values()))])
            transaction.freeze()

        node = transaction.node_account_ids[0]
        body_bytes = transaction.body_bytes(node)
        result = await self.request(
            HederaJsonRpcMethod.SIGN_TRANSACTION,
            {"signerAccountId": str(self.account_identifier), "transactionBody": bytes_to_base64(body_bytes)},
        )
        signed = SignedTransaction(bodyBytes=body_bytes, sigMap=decode_signature_map(result["signatureMap"]))
        return Transaction.from_signed_transactions([signed])

    async def call(self, request: Executable) -> Any:
        """Transactions go through sign-and-execute-transaction, queries through sign-and-execute-query."""
        if isinstance(request, Transaction):
            if not request.is_frozen() and request.transaction_id is None:
                await self.populate_transaction(request)
            result = await self.request(
                HederaJsonRpcMethod.SIGN_AND_EXECUTE_TRANSACTION,
                {"signerAccountId": str(self.account_identifier), "transactionList": encode_transaction(request)},
            )
            return TransactionResponse.from_json(result)
        if isinstance(request, Query):
            result = await self.request(
                HederaJsonRpcMethod.SIGN_AND_EXECUTE_QUERY,
                {"signerAccountId": str(self.account_identifier), "query": encode_query(request)},
            )
            return base64_to_bytes(result["response"])
        raise TypeError(f"Cannot execute {type(request).__name__}; expected a Transaction or Query")

    def __repr__(self) -> str:
        return f"DAppSigner(account_id={str(self._account_id)!r}, topic={self.topic!r}, extension_id={self.extension_id!r})"
