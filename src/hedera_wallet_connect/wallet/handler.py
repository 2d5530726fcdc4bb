"""
HederaWallet: the wallet's side of the bridge.

Each inbound session request moves through
    received -> parsed -> executing -> responded
or ends in `rejected`. Every failure after `received` is answered with a
JSON-RPC error envelope; nothing thrown inside a handler reaches the
transport unconverted.
"""

import logging
from typing import Any, Awaitable, Callable, Optional, Union

from hiero_sdk_python import AccountId, PrivateKey

from hedera_wallet_connect.chains import caip_chain_id_to_ledger_id
from hedera_wallet_connect.codec import (
    bytes_to_base64,
    encode_signature_map,
    signer_signatures_to_signature_map,
    string_to_signer_message,
)
from hedera_wallet_connect.errors import (
    HederaWalletConnectError,
    InvalidParamsError,
    UnsupportedMethodError,
    get_hedera_error,
)
from hedera_wallet_connect.ledger.queries import Query
from hedera_wallet_connect.ledger.transaction_list import Transaction
from hedera_wallet_connect.methods import HEDERA_NAMESPACE, HederaJsonRpcMethod, HederaSessionEvent
from hedera_wallet_connect.models.rpc import JsonRpcError, JsonRpcErrorResponse, JsonRpcResult, SessionRequestEvent
from hedera_wallet_connect.models.session import Namespace, PeerMetadata, Session, SessionProposal
from hedera_wallet_connect.parser import RequestDescriptor, parse_session_request, validate_param
from hedera_wallet_connect.signer import Signer
from hedera_wallet_connect.transport.base import SignClient
from hedera_wallet_connect.transport.socketio import DEFAULT_RELAY_URL, RelayClient
from hedera_wallet_connect.transport.storage import KeyValueStorage
from hedera_wallet_connect.wallet.local import Wallet
from hedera_wallet_connect.wallet.provider import Provider

logger = logging.getLogger(__name__)

SessionRequest = Union[SessionRequestEvent, dict[str, Any]]
MethodHandler = Callable[[int, str, Any, Signer], Awaitable[None]]


class HederaWallet:
    def __init__(
        self,
        client: SignClient,
        methods: Optional[list[str]] = None,
        events: Optional[list[str]] = None,
        log_level: Optional[Union[int, str]] = None,
    ):
        self.client = client
        self.methods = methods or [m.value for m in HederaJsonRpcMethod]
        self.events = events or [e.value for e in HederaSessionEvent]
        self._handlers: dict[HederaJsonRpcMethod, MethodHandler] = {
            HederaJsonRpcMethod.GET_NODE_ADDRESSES: self.hedera_get_node_addresses,
            HederaJsonRpcMethod.EXECUTE_TRANSACTION: self.hedera_execute_transaction,
            HederaJsonRpcMethod.SIGN_MESSAGE: self.hedera_sign_message,
            HederaJsonRpcMethod.SIGN_AND_EXECUTE_QUERY: self.hedera_sign_and_execute_query,
            HederaJsonRpcMethod.SIGN_AND_EXECUTE_TRANSACTION: self.hedera_sign_and_execute_transaction,
            HederaJsonRpcMethod.SIGN_TRANSACTION: self.hedera_sign_transaction,
        }
        if log_level is not None:
            self.set_log_level(log_level)

    @classmethod
    async def create(
        cls,
        project_id: str,
        metadata: PeerMetadata,
        sign_client: Optional[SignClient] = None,
        relay_url: str = DEFAULT_RELAY_URL,
        storage: Optional[KeyValueStorage] = None,
        log_level: Optional[Union[int, str]] = None,
    ) -> "HederaWallet":
        client = sign_client or RelayClient(project_id, metadata, relay_url=relay_url, storage=storage)
        await client.init()
        return cls(client, log_level=log_level)

    def set_log_level(self, level: Union[int, str]) -> None:
        logger.setLevel(level.upper() if isinstance(level, str) else level)

    # -----------------------------------------------------------------
    # Sessions
    # -----------------------------------------------------------------

    def get_hedera_wallet(
        self,
        chain_id: str,
        account_id: Union[AccountId, str],
        private_key: Union[PrivateKey, str],
        provider: Optional[Provider] = None,
    ) -> Wallet:
        """A local signer for `account_id` on the network named by `chain_id`."""
        if isinstance(private_key, str):
            private_key = PrivateKey.from_string(private_key)
        provider = provider or Provider(caip_chain_id_to_ledger_id(chain_id))
        return Wallet(account_id, private_key, provider)

    async def build_and_approve_session(self, accounts: list[str], proposal: SessionProposal) -> Session:
        """Approve `proposal` for `accounts` (`hedera:<network>:<address>` strings)."""
        chains = list(dict.fromkeys(":".join(account.split(":")[:2]) for account in accounts))
        required = proposal.required_namespaces.get(HEDERA_NAMESPACE)
        if required is not None:
            missing_chains = set(required.chains or []) - set(chains)
            missing_methods = set(required.methods) - set(self.methods)
            if missing_chains or missing_methods:
                raise HederaWalletConnectError(
                    "unsupported_namespaces",
                    f"Proposal requires unsupported chains {sorted(missing_chains)} or methods {sorted(missing_methods)}",
                )
        namespaces = {
            HEDERA_NAMESPACE: Namespace(accounts=list(accounts), methods=self.methods, events=self.events, chains=chains),
        }
        session = await self.client.approve_session(proposal.id, namespaces, proposal.session_properties)
        logger.info(f"Approved session {session.topic} for {len(accounts)} account(s)")
        return session

    # -----------------------------------------------------------------
    # Requests
    # -----------------------------------------------------------------

    def validate_param(self, name: str, value: Any, expected: str) -> None:
        validate_param(name, value, expected)

    def parse_session_request(self, event: SessionRequest, should_throw: bool = True) -> RequestDescriptor:
        return parse_session_request(event, should_throw)

    async def execute_session_request(self, event: SessionRequest, signer: Signer) -> None:
        """Parse, dispatch and answer one inbound request.

        Malformed params are answered with INVALID_PARAMS and a failure while
        executing with INTERNAL_ERROR. An unsupported method is answered with
        INVALID_METHOD and then raised as UnsupportedMethodError.
        """
        try:
            descriptor = self.parse_session_request(event)
        except InvalidParamsError as e:
            fallback = self.parse_session_request(event, should_throw=False)
            logger.error(f"Rejecting request {fallback.id}: {e}")
            await self._respond_error(fallback.id, fallback.topic, e.to_rpc_error())
            return

        if not descriptor.is_supported:
            logger.error(f"Unsupported method {descriptor.method} in request {descriptor.id}")
            await self._respond_error(
                descriptor.id, descriptor.topic, get_hedera_error("INVALID_METHOD", str(descriptor.method)),
            )
            raise UnsupportedMethodError(str(descriptor.method))

        handler = self._handlers[descriptor.method]
        try:
            await handler(descriptor.id, descriptor.topic, descriptor.body, signer)
        except Exception as e:
            logger.error(f"{descriptor.method.value} request {descriptor.id} failed: {e}")
            await self._respond_error(descriptor.id, descriptor.topic, get_hedera_error("INTERNAL_ERROR", str(e)))

    async def reject_session_request(self, event: SessionRequest) -> None:
        descriptor = self.parse_session_request(event, should_throw=False)
        logger.info(f"User rejected request {descriptor.id}")
        await self._respond_error(descriptor.id, descriptor.topic, get_hedera_error("USER_REJECTED"))

    async def _respond(self, id: int, topic: str, result: Any) -> None:
        await self.client.respond(topic, JsonRpcResult(id=id, result=result).model_dump())

    async def _respond_error(self, id: int, topic: str, error: dict[str, Any]) -> None:
        response = JsonRpcErrorResponse(id=id, error=JsonRpcError(**error))
        await self.client.respond(topic, response.model_dump(exclude_none=True))

    # -----------------------------------------------------------------
    # Method handlers
    # -----------------------------------------------------------------

    async def hedera_get_node_addresses(self, id: int, topic: str, _: Any, signer: Signer) -> None:
        nodes = [str(node) for node in signer.get_network().values()]
        await self._respond(id, topic, {"nodes": nodes})

    async def hedera_execute_transaction(self, id: int, topic: str, body: Transaction, signer: Signer) -> None:
        response = await signer.call(body)
        await self._respond(id, topic, response.to_json())

    async def hedera_sign_message(self, id: int, topic: str, body: str, signer: Signer) -> None:
        signatures = await signer.sign(string_to_signer_message(body))
        signature_map = encode_signature_map(signer_signatures_to_signature_map(signatures))
        await self._respond(id, topic, {"signatureMap": signature_map})

    async def hedera_sign_and_execute_query(self, id: int, topic: str, body: Query, signer: Signer) -> None:
        response = await signer.call(body)
        await self._respond(id, topic, {"response": bytes_to_base64(response)})

    async def hedera_sign_and_execute_transaction(self, id: int, topic: str, body: Transaction, signer: Signer) -> None:
        signed = await signer.sign_transaction(body)
        response = await signer.call(signed)
        await self._respond(id, topic, response.to_json())

    async def hedera_sign_transaction(self, id: int, topic: str, body: bytes, signer: Signer) -> None:
        signatures = await signer.sign([body])
        signature_map = encode_signature_map(signer_signatures_to_signature_map(signatures))
        await self._respond(id, topic, {"signatureMap": signature_map})
