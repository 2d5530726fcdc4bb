"""
Session request parser: validates an inbound JSON-RPC call against its
method's parameter schema and decodes the serialized payload it carries.

Unknown methods pass through unparsed; rejecting them is the dispatcher's job.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError

from hedera_wallet_connect.chains import AccountIdentifier
from hedera_wallet_connect.codec import base64_to_bytes, decode_query, decode_transaction, decode_transaction_body
from hedera_wallet_connect.errors import CodecError, InvalidParamsError
from hedera_wallet_connect.methods import HederaJsonRpcMethod
from hedera_wallet_connect.models.rpc import SessionRequestEvent

logger = logging.getLogger(__name__)

SIGNER_ACCOUNT_ID = "signerAccountId"


def _transaction_body_bytes(value: str) -> bytes:
    decode_transaction_body(value)
    return base64_to_bytes(value)


@dataclass(frozen=True)
class ParamSpec:
    name: str
    kind: str  # "string" | "array" | "number"
    decode: Optional[Callable[[Any], Any]] = None


_SIGNER = ParamSpec(SIGNER_ACCOUNT_ID, "string")

METHOD_PARAMS: dict[HederaJsonRpcMethod, tuple[ParamSpec, ...]] = {
    HederaJsonRpcMethod.GET_NODE_ADDRESSES: (),
    HederaJsonRpcMethod.EXECUTE_TRANSACTION: (ParamSpec("transactionList", "string", decode_transaction),),
    HederaJsonRpcMethod.SIGN_MESSAGE: (_SIGNER, ParamSpec("message", "string")),
    HederaJsonRpcMethod.SIGN_AND_EXECUTE_QUERY: (_SIGNER, ParamSpec("query", "string", decode_query)),
    HederaJsonRpcMethod.SIGN_AND_EXECUTE_TRANSACTION: (
        _SIGNER,
        ParamSpec("transactionList", "string", decode_transaction),
    ),
    HederaJsonRpcMethod.SIGN_TRANSACTION: (_SIGNER, ParamSpec("transactionBody", "string", _transaction_body_bytes)),
}


@dataclass
class RequestDescriptor:
    """Normalized view of one inbound session request."""

    method: Union[HederaJsonRpcMethod, str]
    chain_id: str
    id: int
    topic: str
    body: Any = None
    account_id: Optional[AccountIdentifier] = None

    @property
    def is_supported(self) -> bool:
        return isinstance(self.method, HederaJsonRpcMethod)


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def validate_param(name: str, value: Any, expected: str) -> None:
    if _type_name(value) == expected:
        return
    raise InvalidParamsError(
        name, f"Invalid parameter value for {name}, expected {expected} but got {_type_name(value)}"
    )


def _coerce_event(event: Union[SessionRequestEvent, dict[str, Any]]) -> SessionRequestEvent:
    if isinstance(event, SessionRequestEvent):
        return event
    try:
        return SessionRequestEvent.model_validate(event)
    except ValidationError as e:
        raise InvalidParamsError("event", f"Malformed session request: {e.error_count()} error(s)") from e


def _salvage_descriptor(event: Any) -> RequestDescriptor:
    """Best-effort descriptor for an envelope that failed validation."""
    raw = event if isinstance(event, dict) else {}
    params = raw.get("params") if isinstance(raw.get("params"), dict) else {}
    request = params.get("request") if isinstance(params.get("request"), dict) else {}
    request_id = raw.get("id")
    if not isinstance(request_id, int) or isinstance(request_id, bool):
        request_id = 0
    return RequestDescriptor(
        method=str(request.get("method") or ""),
        chain_id=str(params.get("chainId") or ""),
        id=request_id,
        topic=str(raw.get("topic") or ""),
    )


def parse_session_request(
    event: Union[SessionRequestEvent, dict[str, Any]],
    should_throw: bool = True,
) -> RequestDescriptor:
    """Parse `event` into a RequestDescriptor.

    With `should_throw=False` errors are swallowed and the descriptor
    carries whatever was parsed before the failure, down to the bare id and
    topic of an envelope that is itself malformed; the reject path only
    needs those two.
    """
    try:
        request_event = _coerce_event(event)
    except InvalidParamsError as e:
        if should_throw:
            raise
        logger.debug(f"Salvaging id and topic from malformed request: {e}")
        return _salvage_descriptor(event)

    raw_method = request_event.params.request.method
    params = request_event.params.request.params
    chain_id = request_event.params.chain_id

    try:
        method: Union[HederaJsonRpcMethod, str] = HederaJsonRpcMethod(raw_method)
    except ValueError:
        method = raw_method

    descriptor = RequestDescriptor(method=method, chain_id=chain_id, id=request_event.id, topic=request_event.topic)
    if not isinstance(method, HederaJsonRpcMethod):
        return descriptor

    try:
        _parse_params(descriptor, method, params)
    except InvalidParamsError as e:
        logger.debug(f"Rejecting {method.value} request {request_event.id}: {e}")
        if should_throw:
            raise
    return descriptor


def _parse_params(descriptor: RequestDescriptor, method: HederaJsonRpcMethod, params: Any) -> None:
    schema = METHOD_PARAMS[method]
    if not schema:
        if params is not None:
            raise InvalidParamsError("params", f"{method.value} does not accept params")
        return
    if not isinstance(params, dict):
        raise InvalidParamsError("params", f"Invalid params for {method.value}, expected object but got {_type_name(params)}")

    for spec in schema:
        if params.get(spec.name) is None:
            raise InvalidParamsError(spec.name, f"Missing required parameter {spec.name}")
        value = params[spec.name]
        validate_param(spec.name, value, spec.kind)

        if spec.name == SIGNER_ACCOUNT_ID:
            try:
                descriptor.account_id = AccountIdentifier.parse(value, descriptor.chain_id)
            except ValueError as e:
                raise InvalidParamsError(spec.name, f"Invalid {spec.name}: {e}") from e
        elif spec.decode is not None:
            try:
                descriptor.body = spec.decode(value)
            except CodecError as e:
                raise InvalidParamsError(spec.name, f"Invalid {spec.name}: {e}") from e
        else:
            descriptor.body = value
