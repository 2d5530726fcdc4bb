"""
hedera-wallet-connect: bridge Hedera JSON-RPC signing requests between a dApp
and a wallet over a paired session transport.
"""

from hedera_wallet_connect.chains import AccountIdentifier
from hedera_wallet_connect.codec import (
    decode_signature_map,
    decode_transaction,
    encode_signature_map,
    encode_transaction,
    extract_first_signature,
    verify_message_signature,
    verify_signer_signature,
)
from hedera_wallet_connect.dapp import DAppConnector, DAppSigner
from hedera_wallet_connect.errors import (
    CodecError,
    HederaWalletConnectError,
    InvalidParamsError,
    NoActiveSessionError,
    NoSignatureFoundError,
    SessionNotFoundError,
    SignerNotFoundError,
    TransportError,
    UnsupportedMethodError,
)
from hedera_wallet_connect.methods import HederaChainId, HederaJsonRpcMethod, HederaSessionEvent
from hedera_wallet_connect.parser import RequestDescriptor, parse_session_request
from hedera_wallet_connect.transport import RelayClient
from hedera_wallet_connect.wallet import HederaWallet, Provider, Wallet

__version__ = "0.1.0"
__all__ = [
    "AccountIdentifier",
    "CodecError",
    "DAppConnector",
    "DAppSigner",
    "HederaChainId",
    "HederaJsonRpcMethod",
    "HederaSessionEvent",
    "HederaWallet",
    "HederaWalletConnectError",
    "InvalidParamsError",
    "NoActiveSessionError",
    "NoSignatureFoundError",
    "Provider",
    "RelayClient",
    "RequestDescriptor",
    "SessionNotFoundError",
    "SignerNotFoundError",
    "TransportError",
    "UnsupportedMethodError",
    "Wallet",
    "decode_signature_map",
    "decode_transaction",
    "encode_signature_map",
    "encode_transaction",
    "extract_first_signature",
    "parse_session_request",
    "verify_message_signature",
    "verify_signer_signature",
]
