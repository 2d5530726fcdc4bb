"""
Transport event kinds and their typed payloads.

Every notification from the transport arrives as one `TransportEvent`
through a single subscription point.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from pydantic import BaseModel

from hedera_wallet_connect.models.rpc import SessionRequestEvent
from hedera_wallet_connect.models.session import Namespace, SessionProposal


class TransportEventType(str, Enum):
    SESSION_PROPOSAL = "session_proposal"
    SESSION_REQUEST = "session_request"
    SESSION_UPDATE = "session_update"
    SESSION_DELETE = "session_delete"
    PAIRING_DELETE = "pairing_delete"


class SessionUpdate(BaseModel):
    topic: str
    namespaces: dict[str, Namespace]


class SessionDelete(BaseModel):
    topic: str


class PairingDelete(BaseModel):
    topic: str


EventPayload = Union[SessionProposal, SessionRequestEvent, SessionUpdate, SessionDelete, PairingDelete]

_PAYLOAD_TYPES = {
    TransportEventType.SESSION_PROPOSAL: SessionProposal,
    TransportEventType.SESSION_REQUEST: SessionRequestEvent,
    TransportEventType.SESSION_UPDATE: SessionUpdate,
    TransportEventType.SESSION_DELETE: SessionDelete,
    TransportEventType.PAIRING_DELETE: PairingDelete,
}


@dataclass(frozen=True)
class TransportEvent:
    type: TransportEventType
    payload: EventPayload

    def __post_init__(self) -> None:
        expected = _PAYLOAD_TYPES[self.type]
        if not isinstance(self.payload, expected):
            raise TypeError(f"{self.type.value} expects {expected.__name__}, got {type(self.payload).__name__}")
