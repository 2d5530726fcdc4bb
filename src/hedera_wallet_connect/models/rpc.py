"""
JSON-RPC 2.0 envelopes carried by the transport.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class RpcCall(BaseModel):
    method: str
    params: Any = None


class SessionRequestParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    request: RpcCall
    chain_id: str = Field(alias="chainId")


class SessionRequestEvent(BaseModel):
    """An inbound `session_request` delivered to the wallet."""

    id: int
    topic: str
    params: SessionRequestParams


class JsonRpcRequest(BaseModel):
    id: int
    jsonrpc: str = "2.0"
    method: str
    params: Any = None


class JsonRpcError(BaseModel):
    code: int
    message: str
    data: Optional[Any] = None


class JsonRpcResult(BaseModel):
    id: int
    jsonrpc: str = "2.0"
    result: Any = None


class JsonRpcErrorResponse(BaseModel):
    id: int
    jsonrpc: str = "2.0"
    error: JsonRpcError


def is_error_response(raw: dict[str, Any]) -> bool:
    return "error" in raw and raw.get("error") is not None
