"""
Hedera JSON-RPC method names, session events and CAIP-2 chain ids.
"""

from enum import Enum


class HederaJsonRpcMethod(str, Enum):
    GET_NODE_ADDRESSES = "hedera_getNodeAddresses"
    EXECUTE_TRANSACTION = "hedera_executeTransaction"
    SIGN_MESSAGE = "hedera_signMessage"
    SIGN_AND_EXECUTE_QUERY = "hedera_signAndExecuteQuery"
    SIGN_AND_EXECUTE_TRANSACTION = "hedera_signAndExecuteTransaction"
    SIGN_TRANSACTION = "hedera_signTransaction"


class HederaSessionEvent(str, Enum):
    ACCOUNTS_CHANGED = "accountsChanged"
    CHAIN_CHANGED = "chainChanged"


class HederaChainId(str, Enum):
    MAINNET = "hedera:mainnet"
    TESTNET = "hedera:testnet"
    PREVIEWNET = "hedera:previewnet"
    DEVNET = "hedera:devnet"


HEDERA_NAMESPACE = "hedera"
