"""
Hedera WalletConnect error types and JSON-RPC error codes.

WalletConnect reserves a set of positive code ranges for its own use; the
INVALID_PARAMS code sits outside them so a peer can tell the two apart.
"""

from typing import Any, Optional


HEDERA_ERRORS: dict[str, dict[str, Any]] = {
    "INVALID_PARAMS": {"code": 9000, "message": "INVALID_PARAMS"},
    "INVALID_METHOD": {"code": 1001, "message": "Invalid method."},
    "USER_REJECTED": {"code": 5000, "message": "User rejected."},
    "USER_DISCONNECTED": {"code": 6000, "message": "User disconnected."},
    "INTERNAL_ERROR": {"code": -32603, "message": "Internal error"},
}


def get_hedera_error(key: str, context: Optional[str] = None, data: Any = None) -> dict[str, Any]:
    """Build a `{code, message, data}` error object from the table above."""
    entry = HEDERA_ERRORS[key]
    message = f"{entry['message']} {context}" if context else entry["message"]
    error: dict[str, Any] = {"code": entry["code"], "message": message}
    if data is not None:
        error["data"] = data
    return error


class HederaWalletConnectError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class CodecError(HederaWalletConnectError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("codec_error", message, details)


class TransactionError(HederaWalletConnectError):
    def __init__(self, message: str):
        super().__init__("transaction_error", message)


class InvalidParamsError(HederaWalletConnectError):
    """Malformed, missing or mis-typed request parameter."""

    def __init__(self, field: str, message: str):
        super().__init__("invalid_params", message, {"field": field})
        self.field = field

    def to_rpc_error(self) -> dict[str, Any]:
        return get_hedera_error("INVALID_PARAMS", str(self), {"field": self.field})


class NoActiveSessionError(HederaWalletConnectError):
    def __init__(self, message: str = "There is no active session. Connect to the wallet at first."):
        super().__init__("no_active_session", message)


class SignerNotFoundError(HederaWalletConnectError):
    def __init__(self, message: str, account_id: Optional[str] = None):
        super().__init__("signer_not_found", message, {"account_id": account_id} if account_id else None)


class SessionNotFoundError(HederaWalletConnectError):
    def __init__(self, message: str, topic: Optional[str] = None):
        super().__init__("session_not_found", message, {"topic": topic} if topic else None)


class NoSignatureFoundError(HederaWalletConnectError):
    def __init__(self, message: str = "Signature not found in signature map"):
        super().__init__("no_signature_found", message)


class UnsupportedMethodError(HederaWalletConnectError):
    """The peer asked for a method this side does not implement."""

    def __init__(self, method: str):
        super().__init__("unsupported_method", f"Unsupported method: {method}", {"method": method})
        self.method = method


class TransportError(HederaWalletConnectError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("transport_error", message, details)


class RpcResponseError(HederaWalletConnectError):
    """The peer answered a request with a JSON-RPC error envelope."""

    def __init__(self, rpc_code: int, message: str, data: Any = None):
        super().__init__("rpc_error", message, {"rpc_code": rpc_code, "data": data})
        self.rpc_code = rpc_code
        self.data = data
