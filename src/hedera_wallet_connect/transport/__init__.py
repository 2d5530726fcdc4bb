from hedera_wallet_connect.transport.base import ConnectResult, EventHandler, SignClient
from hedera_wallet_connect.transport.http import MirrorNodeClient, get_account_public_key, mirror_node_url
from hedera_wallet_connect.transport.socketio import RelayClient, parse_pairing_uri
from hedera_wallet_connect.transport.storage import FileStorage, KeyValueStorage, MemoryStorage

__all__ = [
    "ConnectResult",
    "EventHandler",
    "FileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "MirrorNodeClient",
    "RelayClient",
    "SignClient",
    "get_account_public_key",
    "mirror_node_url",
    "parse_pairing_uri",
]
