"""
DAppConnector: the dApp's side of the bridge.

Owns the registry of DAppSigners across every live session, drives the
pairing flow, routes outbound requests to the right signer and keeps the
registry in step with transport events.

Lifecycle: created -> init() -> active -> dispose() -> disposed.
"""

import inspect
import logging
import uuid
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

from hiero_sdk_python import AccountId

from hedera_wallet_connect.chains import (
    AccountIdentifier,
    account_and_ledger_from_session,
    ledger_id_to_caip_chain_id,
    network_namespaces,
)
from hedera_wallet_connect.codec import (
    encode_query,
    encode_transaction,
    encode_transaction_body,
    set_default_node_account_ids,
    transaction_to_transaction_body,
)
from hedera_wallet_connect.dapp.signer import DAppSigner
from hedera_wallet_connect.errors import (
    HederaWalletConnectError,
    InvalidParamsError,
    NoActiveSessionError,
    SessionNotFoundError,
    SignerNotFoundError,
    get_hedera_error,
)
from hedera_wallet_connect.extensions import ExtensionBridge, ExtensionData, find_iframe_extension
from hedera_wallet_connect.ledger.client import TransactionResponse
from hedera_wallet_connect.ledger.ids import LedgerId, parse_account_id
from hedera_wallet_connect.ledger.queries import Query
from hedera_wallet_connect.ledger.transaction_list import Transaction, TransactionBody
from hedera_wallet_connect.methods import HEDERA_NAMESPACE, HederaJsonRpcMethod, HederaSessionEvent
from hedera_wallet_connect.models.events import TransportEvent, TransportEventType
from hedera_wallet_connect.models.payloads import (
    ExecuteTransactionParams,
    GetNodeAddressesResult,
    SignAndExecuteQueryParams,
    SignAndExecuteQueryResult,
    SignAndExecuteTransactionParams,
    SignMessageParams,
    SignMessageResult,
    SignTransactionParams,
    SignTransactionResult,
)
from hedera_wallet_connect.models.session import PeerMetadata, Session
from hedera_wallet_connect.transport.base import SignClient
from hedera_wallet_connect.transport.socketio import DEFAULT_RELAY_URL, RelayClient
from hedera_wallet_connect.transport.storage import KeyValueStorage

logger = logging.getLogger(__name__)

INSTANCE_ID_KEY = "hedera-wc:dapp-connector:instance-id"

LaunchCallback = Callable[[str], Union[None, Awaitable[None]]]


class ConnectorState(str, Enum):
    CREATED = "created"
    ACTIVE = "active"
    DISPOSED = "disposed"


class DAppConnector:
    def __init__(
        self,
        metadata: PeerMetadata,
        network: Union[LedgerId, str],
        project_id: str = "",
        methods: Optional[list[str]] = None,
        events: Optional[list[str]] = None,
        chains: Optional[list[str]] = None,
        sign_client: Optional[SignClient] = None,
        extension_bridge: Optional[ExtensionBridge] = None,
        relay_url: str = DEFAULT_RELAY_URL,
        storage: Optional[KeyValueStorage] = None,
        log_level: Optional[Union[int, str]] = None,
    ):
        self.metadata = metadata
        self.network = network if isinstance(network, LedgerId) else LedgerId.from_string(network)
        self.project_id = project_id
        self.supported_methods = methods or [m.value for m in HederaJsonRpcMethod]
        self.supported_events = events or [e.value for e in HederaSessionEvent]
        self.supported_chains = chains or [ledger_id_to_caip_chain_id(self.network)]
        self._client: SignClient = sign_client or RelayClient(project_id, metadata, relay_url=relay_url, storage=storage)
        self._extension_bridge = extension_bridge
        self._instance_id = uuid.uuid4().hex
        self._remove_handler: Optional[Callable[[], None]] = None
        self.state = ConnectorState.CREATED
        self.signers: list[DAppSigner] = []
        self.extensions: list[ExtensionData] = []
        if log_level is not None:
            self.set_log_level(log_level)

    @property
    def client(self) -> SignClient:
        return self._client

    def set_log_level(self, level: Union[int, str]) -> None:
        logger.setLevel(level.upper() if isinstance(level, str) else level)

    def _require_active(self) -> None:
        if self.state != ConnectorState.ACTIVE:
            raise HederaWalletConnectError("not_initialized", f"DAppConnector is {self.state.value}; call init() first")

    # -----------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------

    async def init(self) -> None:
        if self.state == ConnectorState.DISPOSED:
            raise HederaWalletConnectError("disposed", "DAppConnector has been disposed")
        if self.state == ConnectorState.ACTIVE:
            return

        await self._client.init()
        await self._check_instance_identity()
        self._remove_handler = self._client.add_event_handler(self._handle_event)

        sessions = self._client.get_sessions()
        if sessions:
            self.signers = [signer for session in sessions for signer in self._create_signers(session)]
            logger.info(f"Restored {len(self.signers)} signer(s) from {len(sessions)} session(s)")

        self.state = ConnectorState.ACTIVE
        logger.info(f"DAppConnector initialized for {self.network.value}")

        if self._extension_bridge is not None:
            self.extensions = await self._extension_bridge.query()
            extension = find_iframe_extension(self.extensions)
            if extension is not None:
                logger.info(f"Auto-connecting to iframe extension {extension.id}")
                await self.connect_extension(extension.id)

    async def _check_instance_identity(self) -> None:
        """Restart the relay link when durable storage holds another connector's identity."""
        storage = self._client.storage
        stored = await storage.get_item(INSTANCE_ID_KEY)
        if stored == self._instance_id:
            return
        if stored is not None:
            logger.warning(f"Stored connector identity {stored} does not match {self._instance_id}; restarting relay")
            await self._client.restart_relay()
        await storage.set_item(INSTANCE_ID_KEY, self._instance_id)

    async def dispose(self) -> None:
        if self._remove_handler is not None:
            self._remove_handler()
            self._remove_handler = None
        self.signers = []
        if self.state == ConnectorState.ACTIVE:
            await self._client.close()
        self.state = ConnectorState.DISPOSED
        logger.info("DAppConnector disposed")

    # -----------------------------------------------------------------
    # Connection
    # -----------------------------------------------------------------

    async def connect(
        self,
        launch: LaunchCallback,
        pairing_topic: Optional[str] = None,
        extension_id: Optional[str] = None,
    ) -> Session:
        """Propose a session and wait for the wallet to approve it.

        `launch` receives the pairing URI so the caller can show it. It is
        not called when `pairing_topic` resumes a known pairing.
        """
        self._require_active()
        namespaces = network_namespaces(self.network, self.supported_methods, self.supported_events)
        namespaces[HEDERA_NAMESPACE] = namespaces[HEDERA_NAMESPACE].model_copy(update={"chains": list(self.supported_chains)})
        session_properties = {"extensionId": extension_id} if extension_id else None

        result = await self._client.connect(namespaces, pairing_topic, session_properties)
        if result.uri:
            launched = launch(result.uri)
            if inspect.isawaitable(launched):
                await launched

        session = await result.approval()
        await self.on_session_connected(session)
        return session

    async def connect_extension(self, extension_id: str) -> Session:
        if self._extension_bridge is None:
            raise HederaWalletConnectError("no_extension_bridge", "No extension bridge configured")
        extension = next((e for e in self.extensions if e.id == extension_id), None)
        if extension is None or not extension.available:
            raise HederaWalletConnectError("extension_not_available", f"Extension {extension_id} is not available")

        bridge = self._extension_bridge

        async def launch(uri: str) -> None:
            await bridge.connect(extension.id, extension.available_in_iframe, uri)

        return await self.connect(launch, extension_id=extension.id)

    async def on_session_connected(self, session: Session) -> list[DAppSigner]:
        """Register signers for `session`, retiring any stale duplicates on other topics.

        A signer is stale when it has the same account on the same ledger,
        the same extension and the same wallet name as a new one but lives
        on another topic.
        """
        new_signers = self._create_signers(session)
        stale_topics: set[str] = set()
        for signer in new_signers:
            for existing in self.signers:
                if existing.topic == session.topic or existing.topic in stale_topics:
                    continue
                if (
                    existing.account_identifier == signer.account_identifier
                    and existing.extension_id == signer.extension_id
                    and existing.peer.name == signer.peer.name
                ):
                    stale_topics.add(existing.topic)

        for topic in stale_topics:
            logger.warning(f"Disconnecting stale session {topic} replaced by {session.topic}")
            try:
                await self._client.disconnect(topic, get_hedera_error("USER_DISCONNECTED"))
            except Exception as e:
                logger.warning(f"Stale session {topic} could not be disconnected: {e}")

        removed = stale_topics | {session.topic}
        self.signers = [s for s in self.signers if s.topic not in removed] + new_signers
        logger.info(f"Session {session.topic} connected with {len(new_signers)} signer(s)")
        return new_signers

    async def disconnect(self, topic: str) -> None:
        self._require_active()
        try:
            await self._client.disconnect(topic, get_hedera_error("USER_DISCONNECTED"))
        finally:
            self._remove_signers(topic)
        logger.info(f"Disconnected {topic}")

    async def disconnect_all(self) -> None:
        self._require_active()
        sessions = self._client.get_sessions()
        pairings = self._client.get_pairings()
        if not sessions and not pairings:
            raise NoActiveSessionError("There is no active session or pairing to disconnect. Connect to the wallet at first.")

        reason = get_hedera_error("USER_DISCONNECTED")
        try:
            for session in sessions:
                await self._client.disconnect(session.topic, reason)
            for pairing in pairings:
                await self._client.disconnect(pairing.topic, reason)
        finally:
            self.signers = []
        logger.info(f"Disconnected {len(sessions)} session(s) and {len(pairings)} pairing(s)")

    def _create_signers(self, session: Session) -> list[DAppSigner]:
        return [
            DAppSigner(
                identifier.address,
                self._client,
                session.topic,
                identifier.ledger_id,
                extension_id=session.extension_id,
                peer=session.peer,
                extension_bridge=self._extension_bridge,
            )
            for identifier in account_and_ledger_from_session(session)
        ]

    def _remove_signers(self, topic: str) -> None:
        self.signers = [s for s in self.signers if s.topic != topic]

    # -----------------------------------------------------------------
    # Routing
    # -----------------------------------------------------------------

    def get_signer(self, account_id: Union[AccountId, str]) -> DAppSigner:
        account = parse_account_id(account_id)
        for signer in self.signers:
            if signer.get_account_id() == account:
                return signer
        raise SignerNotFoundError(f"Signer is not found for account {account}", account_id=str(account))

    def _resolve_signer(self, params: Any) -> DAppSigner:
        if not self.signers:
            raise NoActiveSessionError()

        signer_account_id = params.get("signerAccountId") if isinstance(params, dict) else None
        if not signer_account_id:
            if len(self.signers) > 1:
                raise SignerNotFoundError("Multiple signers are connected; specify signerAccountId")
            return self.signers[0]

        try:
            target = AccountIdentifier.parse(signer_account_id, ledger_id_to_caip_chain_id(self.network))
        except ValueError as e:
            raise InvalidParamsError("signerAccountId", f"Invalid signerAccountId: {e}") from e
        for signer in self.signers:
            if signer.get_account_id() == target.address and signer.get_ledger_id() == target.ledger_id:
                return signer
        raise SignerNotFoundError(f"Signer is not found for {signer_account_id}", account_id=signer_account_id)

    async def request(self, method: Union[HederaJsonRpcMethod, str], params: Any = None) -> Any:
        """Route one call to the signer named by `signerAccountId`, or the only signer."""
        self._require_active()
        signer = self._resolve_signer(params)
        try:
            return await signer.request(method, params)
        except SessionNotFoundError:
            self._remove_signers(signer.topic)
            raise

    # -----------------------------------------------------------------
    # Hedera JSON-RPC methods
    # -----------------------------------------------------------------

    async def get_node_addresses(self) -> GetNodeAddressesResult:
        result = await self.request(HederaJsonRpcMethod.GET_NODE_ADDRESSES)
        return GetNodeAddressesResult.model_validate(result)

    async def execute_transaction(self, transaction_list: Union[Transaction, str]) -> TransactionResponse:
        params = ExecuteTransactionParams(transaction_list=_serialize_transaction("transactionList", transaction_list))
        result = await self.request(HederaJsonRpcMethod.EXECUTE_TRANSACTION, params.to_wire())
        return TransactionResponse.from_json(result)

    async def sign_message(self, signer_account_id: str, message: str) -> SignMessageResult:
        params = SignMessageParams(signer_account_id=signer_account_id, message=message)
        result = await self.request(HederaJsonRpcMethod.SIGN_MESSAGE, params.to_wire())
        return SignMessageResult.model_validate(result)

    async def sign_and_execute_query(self, signer_account_id: str, query: Union[Query, str]) -> SignAndExecuteQueryResult:
        if isinstance(query, Query):
            query = encode_query(query)
        elif not isinstance(query, str):
            raise InvalidParamsError("query", f"query must be a Query or a base64 string, got {type(query).__name__}")
        params = SignAndExecuteQueryParams(signer_account_id=signer_account_id, query=query)
        result = await self.request(HederaJsonRpcMethod.SIGN_AND_EXECUTE_QUERY, params.to_wire())
        return SignAndExecuteQueryResult.model_validate(result)

    async def sign_and_execute_transaction(
        self, signer_account_id: str, transaction_list: Union[Transaction, str],
    ) -> TransactionResponse:
        params = SignAndExecuteTransactionParams(
            signer_account_id=signer_account_id,
            transaction_list=_serialize_transaction("transactionList", transaction_list),
        )
        result = await self.request(HederaJsonRpcMethod.SIGN_AND_EXECUTE_TRANSACTION, params.to_wire())
        return TransactionResponse.from_json(result)

    async def sign_transaction(
        self, signer_account_id: str, transaction_body: Union[Transaction, TransactionBody, str],
    ) -> SignTransactionResult:
        """Ask the wallet to sign one transaction body. A live Transaction contributes its first node's body."""
        if isinstance(transaction_body, Transaction):
            set_default_node_account_ids(transaction_body)
            nodes = transaction_body.node_account_ids
            transaction_body = transaction_to_transaction_body(transaction_body, nodes[0] if nodes else None)
        if isinstance(transaction_body, TransactionBody):
            transaction_body = encode_transaction_body(transaction_body)
        elif not isinstance(transaction_body, str):
            raise InvalidParamsError(
                "transactionBody",
                f"transactionBody must be a Transaction, TransactionBody or base64 string, got {type(transaction_body).__name__}",
            )
        params = SignTransactionParams(signer_account_id=signer_account_id, transaction_body=transaction_body)
        result = await self.request(HederaJsonRpcMethod.SIGN_TRANSACTION, params.to_wire())
        return SignTransactionResult.model_validate(result)

    # -----------------------------------------------------------------
    # Transport events
    # -----------------------------------------------------------------

    def _handle_event(self, event: TransportEvent) -> None:
        if event.type == TransportEventType.SESSION_UPDATE:
            session = self._client.get_session(event.payload.topic)
            if session is None:
                logger.warning(f"Update for unknown session {event.payload.topic}")
                return
            updated = session.model_copy(update={"namespaces": event.payload.namespaces})
            new_signers = self._create_signers(updated)
            self.signers = [s for s in self.signers if s.topic != updated.topic] + new_signers
            logger.info(f"Session {updated.topic} updated: {len(new_signers)} signer(s)")
        elif event.type == TransportEventType.SESSION_DELETE:
            self._remove_signers(event.payload.topic)
            logger.info(f"Session {event.payload.topic} deleted by peer")
        elif event.type == TransportEventType.PAIRING_DELETE:
            self._remove_signers(event.payload.topic)
            logger.info(f"Pairing {event.payload.topic} deleted by peer")


def _serialize_transaction(field: str, transaction: Union[Transaction, str]) -> str:
    if isinstance(transaction, Transaction):
        return encode_transaction(transaction)
    if isinstance(transaction, str):
        return transaction
    raise InvalidParamsError(field, f"{field} must be a Transaction or a base64 string, got {type(transaction).__name__}")
