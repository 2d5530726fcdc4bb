"""
Pairing/session transport interface.

The transport owns pairing, relay delivery and session persistence. This
package only talks to it through `SignClient`.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Protocol

from hedera_wallet_connect.models.events import TransportEvent
from hedera_wallet_connect.models.rpc import RpcCall
from hedera_wallet_connect.models.session import Namespace, Pairing, PeerMetadata, Session
from hedera_wallet_connect.transport.storage import KeyValueStorage

EventHandler = Callable[[TransportEvent], None]


@dataclass
class ConnectResult:
    uri: Optional[str]
    approval: Callable[[], Awaitable[Session]]


class SignClient(Protocol):
    @property
    def metadata(self) -> PeerMetadata: ...

    @property
    def storage(self) -> KeyValueStorage: ...

    async def init(self) -> None: ...

    def get_sessions(self) -> list[Session]: ...

    def get_session(self, topic: str) -> Optional[Session]: ...

    def get_pairings(self) -> list[Pairing]: ...

    def add_event_handler(self, handler: EventHandler) -> Callable[[], None]: ...

    async def restart_relay(self) -> None: ...

    async def close(self) -> None: ...
    # dApp role
    async def connect(
        self,
        required_namespaces: dict[str, Namespace],
        pairing_topic: Optional[str] = None,
        session_properties: Optional[dict[str, str]] = None,
    ) -> ConnectResult: ...

    async def request(self, topic: str, chain_id: str, request: RpcCall) -> Any: ...

    async def disconnect(self, topic: str, reason: dict[str, Any]) -> None: ...

    # wallet role
    async def pair(self, uri: str) -> None: ...

    async def approve_session(
        self,
        proposal_id: int,
        namespaces: dict[str, Namespace],
        session_properties: Optional[dict[str, str]] = None,
    ) -> Session: ...

    async def reject_session(self, proposal_id: int, reason: dict[str, Any]) -> None: ...

    async def respond(self, topic: str, response: dict[str, Any]) -> None: ...
