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
    SessionRequestParams,
)
from hedera_wallet_connect.models.session import Namespace, Pairing, PeerMetadata, Session, SessionProposal

__all__ = [
    "JsonRpcError",
    "JsonRpcErrorResponse",
    "JsonRpcRequest",
    "JsonRpcResult",
    "Namespace",
    "Pairing",
    "PairingDelete",
    "PeerMetadata",
    "RpcCall",
    "Session",
    "SessionDelete",
    "SessionProposal",
    "SessionRequestEvent",
    "SessionRequestParams",
    "SessionUpdate",
    "TransportEvent",
    "TransportEventType",
]
