"""
Socket.IO relay client implementing `SignClient`.

The relay is a plain topic pub/sub server: clients `subscribe` to topics,
`publish` JSON-RPC messages to a topic, and receive `message` events for
every topic they subscribe to. The relay keeps undelivered messages until a
subscriber shows up. Payloads travel unencrypted.

Pairing URI: wc:{topic}@2?relay-protocol=socketio&expiryTimestamp={seconds}
"""

import asyncio
import logging
import random
import secrets
import time
import uuid
from typing import Any, Callable, Optional
from urllib.parse import parse_qs, urlparse

import socketio

from hedera_wallet_connect.errors import RpcResponseError, TransportError
from hedera_wallet_connect.models.events import (
    PairingDelete,
    SessionDelete,
    SessionUpdate,
    TransportEvent,
    TransportEventType,
)
from hedera_wallet_connect.models.rpc import (
    JsonRpcError,
    JsonRpcErrorResponse,
    JsonRpcRequest,
    JsonRpcResult,
    RpcCall,
    SessionRequestEvent,
    is_error_response,
)
from hedera_wallet_connect.models.session import Namespace, Pairing, PeerMetadata, Session, SessionProposal
from hedera_wallet_connect.transport.base import ConnectResult, EventHandler
from hedera_wallet_connect.transport.storage import KeyValueStorage, MemoryStorage

logger = logging.getLogger(__name__)

DEFAULT_RELAY_URL = "wss://relay.walletconnect.com"
SOCKETIO_PATH = "/socket.io/"
PAIRING_TTL = 300
SESSION_TTL = 7 * 24 * 3600

SESSIONS_KEY = "wc@2:client:session"
PAIRINGS_KEY = "wc@2:core:pairing"

# Relay-level JSON-RPC methods
SESSION_PROPOSE = "wc_sessionPropose"
SESSION_REQUEST = "wc_sessionRequest"
SESSION_UPDATE = "wc_sessionUpdate"
SESSION_DELETE = "wc_sessionDelete"
PAIRING_DELETE = "wc_pairingDelete"


def _payload_id() -> int:
    return int(time.time() * 1000) * 1000 + random.randint(0, 999)


def _new_topic() -> str:
    return secrets.token_hex(32)


def parse_pairing_uri(uri: str) -> tuple[str, int]:
    """Return (topic, expiry) from a pairing URI."""
    parsed = urlparse(uri)
    if parsed.scheme != "wc" or "@" not in parsed.path:
        raise TransportError(f"Invalid pairing URI: {uri}")
    topic = parsed.path.split("@", 1)[0]
    query = parse_qs(parsed.query)
    expiry = int(query.get("expiryTimestamp", [0])[0] or 0)
    return topic, expiry


class RelayClient:
    def __init__(
        self,
        project_id: str,
        metadata: PeerMetadata,
        relay_url: str = DEFAULT_RELAY_URL,
        storage: Optional[KeyValueStorage] = None,
        transports: Optional[list[str]] = None,
        ready_timeout: float = 15.0,
        request_timeout: Optional[float] = None,
    ):
        self._project_id = project_id
        self._metadata = metadata
        self._relay_url = relay_url
        self._storage = storage or MemoryStorage()
        self._transports = transports or ["websocket"]
        self._ready_timeout = ready_timeout
        self._request_timeout = request_timeout
        self._sio: Optional[socketio.AsyncClient] = None
        self._connected = False
        self._event_handlers: list[EventHandler] = []
        self._sessions: dict[str, Session] = {}
        self._pairings: dict[str, Pairing] = {}
        self._subscriptions: set[str] = set()
        self._pending: dict[int, asyncio.Future] = {}
        self._proposals: dict[int, SessionProposal] = {}
        self.client_id = uuid.uuid4().hex

    @property
    def metadata(self) -> PeerMetadata:
        return self._metadata

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    @property
    def connected(self) -> bool:
        return self._connected and self._sio is not None and self._sio.connected

    # -----------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------

    async def init(self) -> None:
        """Restore persisted sessions and pairings, then open the relay socket."""
        for raw in await self._storage.get_item(SESSIONS_KEY) or []:
            session = Session.model_validate(raw)
            self._sessions[session.topic] = session
        for raw in await self._storage.get_item(PAIRINGS_KEY) or []:
            pairing = Pairing.model_validate(raw)
            self._pairings[pairing.topic] = pairing
        await self._open()
        for topic in list(self._sessions) + list(self._pairings):
            await self._subscribe(topic)

    async def _open(self) -> None:
        if self._sio and self._sio.connected:
            return

        self._sio = socketio.AsyncClient()
        ready_event = asyncio.Event()

        @self._sio.on("ready")
        async def on_ready(*_args: Any) -> None:
            self._connected = True
            ready_event.set()

        @self._sio.on("message")
        async def on_message(data: Any) -> None:
            if isinstance(data, dict) and isinstance(data.get("message"), dict):
                self._handle_message(data.get("topic", ""), data["message"])

        @self._sio.event
        async def disconnect(_reason: str = "") -> None:
            self._connected = False

        try:
            await self._sio.connect(
                self._relay_url,
                auth={"projectId": self._project_id, "clientId": self.client_id},
                transports=self._transports,
                socketio_path=SOCKETIO_PATH,
            )
        except socketio.exceptions.ConnectionError as e:
            raise TransportError(f"Relay connection failed: {e}") from e

        try:
            await asyncio.wait_for(ready_event.wait(), timeout=self._ready_timeout)
        except asyncio.TimeoutError:
            await self._sio.disconnect()
            raise TransportError(f"Timed out waiting for relay 'ready' after {self._ready_timeout}s")

    async def restart_relay(self) -> None:
        """Drop the relay socket and open a fresh one, resubscribing every topic."""
        logger.info("Restarting relay transport")
        await self.close()
        topics = set(self._subscriptions)
        self._subscriptions.clear()
        await self._open()
        for topic in topics:
            await self._subscribe(topic)

    async def close(self) -> None:
        self._connected = False
        if self._sio:
            await self._sio.disconnect()
            self._sio = None

    # -----------------------------------------------------------------
    # Events
    # -----------------------------------------------------------------

    def add_event_handler(self, handler: EventHandler) -> Callable[[], None]:
        """Add an event handler. Returns a cleanup function."""
        self._event_handlers.append(handler)

        def remove() -> None:
            try:
                self._event_handlers.remove(handler)
            except ValueError:
                pass

        return remove

    def _dispatch(self, event: TransportEvent) -> None:
        for handler in list(self._event_handlers):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Event handler failed for {event.type.value}: {e}")

    # -----------------------------------------------------------------
    # Store
    # -----------------------------------------------------------------

    def get_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def get_session(self, topic: str) -> Optional[Session]:
        return self._sessions.get(topic)

    def get_pairings(self) -> list[Pairing]:
        return list(self._pairings.values())

    async def _persist(self) -> None:
        await self._storage.set_item(SESSIONS_KEY, [s.model_dump(by_alias=True) for s in self._sessions.values()])
        await self._storage.set_item(PAIRINGS_KEY, [p.model_dump() for p in self._pairings.values()])

    # -----------------------------------------------------------------
    # Relay I/O
    # -----------------------------------------------------------------

    def _require_socket(self) -> socketio.AsyncClient:
        if not self._sio or not self._sio.connected:
            raise TransportError("Relay not connected")
        return self._sio

    async def _subscribe(self, topic: str) -> None:
        if topic in self._subscriptions:
            return
        await self._require_socket().emit("subscribe", {"topic": topic})
        self._subscriptions.add(topic)

    async def _unsubscribe(self, topic: str) -> None:
        if topic not in self._subscriptions:
            return
        self._subscriptions.discard(topic)
        await self._require_socket().emit("unsubscribe", {"topic": topic})

    async def _publish(self, topic: str, message: dict[str, Any]) -> None:
        await self._require_socket().emit("publish", {"topic": topic, "message": message})

    def _await_response(self, payload_id: int) -> asyncio.Future:
        future = asyncio.get_running_loop().create_future()
        self._pending[payload_id] = future
        return future

    async def _wait(self, payload_id: int, future: asyncio.Future) -> Any:
        try:
            if self._request_timeout is None:
                return await future
            return await asyncio.wait_for(future, timeout=self._request_timeout)
        except asyncio.TimeoutError:
            raise TransportError(f"Timed out waiting for response to request {payload_id}")
        finally:
            self._pending.pop(payload_id, None)

    # -----------------------------------------------------------------
    # dApp role
    # -----------------------------------------------------------------

    async def connect(
        self,
        required_namespaces: dict[str, Namespace],
        pairing_topic: Optional[str] = None,
        session_properties: Optional[dict[str, str]] = None,
    ) -> ConnectResult:
        uri: Optional[str] = None
        if pairing_topic is None or pairing_topic not in self._pairings:
            pairing_topic = _new_topic()
            expiry = int(time.time()) + PAIRING_TTL
            self._pairings[pairing_topic] = Pairing(topic=pairing_topic, expiry=expiry)
            uri = f"wc:{pairing_topic}@2?relay-protocol=socketio&expiryTimestamp={expiry}"
            await self._subscribe(pairing_topic)
            await self._persist()

        payload_id = _payload_id()
        future = self._await_response(payload_id)
        proposal = JsonRpcRequest(id=payload_id, method=SESSION_PROPOSE, params={
            "proposer": self._metadata.model_dump(),
            "requiredNamespaces": {k: v.model_dump(exclude_none=True) for k, v in required_namespaces.items()},
            "sessionProperties": session_properties,
        })
        await self._publish(pairing_topic, proposal.model_dump())

        async def approval() -> Session:
            result = await self._wait(payload_id, future)
            session = Session(
                topic=result["sessionTopic"],
                namespaces=result["namespaces"],
                peer=result.get("peer") or {},
                expiry=result.get("expiry", 0),
                pairing_topic=pairing_topic,
                session_properties=result.get("sessionProperties") or session_properties,
            )
            self._sessions[session.topic] = session
            pairing = self._pairings.get(pairing_topic)
            if pairing:
                self._pairings[pairing_topic] = pairing.model_copy(update={"active": True, "peer": session.peer})
            await self._subscribe(session.topic)
            await self._persist()
            return session

        return ConnectResult(uri=uri, approval=approval)

    async def request(self, topic: str, chain_id: str, request: RpcCall) -> Any:
        if topic not in self._sessions:
            raise TransportError(f"No session for topic {topic}")
        payload_id = _payload_id()
        future = self._await_response(payload_id)
        message = JsonRpcRequest(
            id=payload_id, method=SESSION_REQUEST, params={"request": request.model_dump(), "chainId": chain_id},
        )
        await self._publish(topic, message.model_dump())
        return await self._wait(payload_id, future)

    async def disconnect(self, topic: str, reason: dict[str, Any]) -> None:
        if topic in self._sessions:
            method = SESSION_DELETE
            del self._sessions[topic]
        elif topic in self._pairings:
            method = PAIRING_DELETE
            del self._pairings[topic]
        else:
            raise TransportError(f"No session or pairing for topic {topic}")
        await self._publish(topic, JsonRpcRequest(id=_payload_id(), method=method, params=reason).model_dump())
        await self._unsubscribe(topic)
        await self._persist()

    # -----------------------------------------------------------------
    # Wallet role
    # -----------------------------------------------------------------

    async def pair(self, uri: str) -> None:
        topic, expiry = parse_pairing_uri(uri)
        self._pairings[topic] = Pairing(topic=topic, expiry=expiry, active=True)
        await self._subscribe(topic)
        await self._persist()

    async def approve_session(
        self,
        proposal_id: int,
        namespaces: dict[str, Namespace],
        session_properties: Optional[dict[str, str]] = None,
    ) -> Session:
        proposal = self._proposals.pop(proposal_id, None)
        if proposal is None:
            raise TransportError(f"No pending proposal with id {proposal_id}")
        properties = session_properties or proposal.session_properties
        session = Session(
            topic=_new_topic(),
            namespaces=namespaces,
            peer=proposal.proposer,
            expiry=int(time.time()) + SESSION_TTL,
            pairing_topic=proposal.pairing_topic,
            session_properties=properties,
        )
        self._sessions[session.topic] = session
        await self._subscribe(session.topic)
        await self._publish(proposal.pairing_topic, JsonRpcResult(id=proposal_id, result={
            "sessionTopic": session.topic,
            "namespaces": {k: v.model_dump(exclude_none=True) for k, v in namespaces.items()},
            "peer": self._metadata.model_dump(),
            "expiry": session.expiry,
            "sessionProperties": properties,
        }).model_dump())
        await self._persist()
        return session

    async def reject_session(self, proposal_id: int, reason: dict[str, Any]) -> None:
        proposal = self._proposals.pop(proposal_id, None)
        if proposal is None:
            raise TransportError(f"No pending proposal with id {proposal_id}")
        response = JsonRpcErrorResponse(id=proposal_id, error=JsonRpcError(**reason))
        await self._publish(proposal.pairing_topic, response.model_dump(exclude_none=True))

    async def respond(self, topic: str, response: dict[str, Any]) -> None:
        await self._publish(topic, response)

    # -----------------------------------------------------------------
    # Inbound
    # -----------------------------------------------------------------

    def _handle_message(self, topic: str, message: dict[str, Any]) -> None:
        method = message.get("method")
        if method is None:
            self._handle_response(message)
            return

        if method == SESSION_PROPOSE:
            params = message.get("params") or {}
            proposal = SessionProposal(
                id=message["id"],
                pairing_topic=topic,
                proposer=params.get("proposer") or {},
                required_namespaces=params.get("requiredNamespaces") or {},
                session_properties=params.get("sessionProperties"),
            )
            self._proposals[proposal.id] = proposal
            self._dispatch(TransportEvent(TransportEventType.SESSION_PROPOSAL, proposal))
        elif method == SESSION_REQUEST:
            event = SessionRequestEvent(id=message["id"], topic=topic, params=message.get("params") or {})
            self._dispatch(TransportEvent(TransportEventType.SESSION_REQUEST, event))
        elif method == SESSION_UPDATE:
            update = SessionUpdate(topic=topic, namespaces=(message.get("params") or {}).get("namespaces") or {})
            session = self._sessions.get(topic)
            if session:
                self._sessions[topic] = session.model_copy(update={"namespaces": update.namespaces})
            self._dispatch(TransportEvent(TransportEventType.SESSION_UPDATE, update))
        elif method == SESSION_DELETE:
            self._sessions.pop(topic, None)
            self._subscriptions.discard(topic)
            self._dispatch(TransportEvent(TransportEventType.SESSION_DELETE, SessionDelete(topic=topic)))
        elif method == PAIRING_DELETE:
            self._pairings.pop(topic, None)
            self._subscriptions.discard(topic)
            self._dispatch(TransportEvent(TransportEventType.PAIRING_DELETE, PairingDelete(topic=topic)))
        else:
            logger.warning(f"Ignoring unknown relay method {method} on topic {topic}")

    def _handle_response(self, message: dict[str, Any]) -> None:
        future = self._pending.get(message.get("id"))  # type: ignore[arg-type]
        if future is None or future.done():
            return
        if is_error_response(message):
            error = message["error"]
            future.set_exception(RpcResponseError(error.get("code", 0), error.get("message", ""), error.get("data")))
        else:
            future.set_result(message.get("result"))
