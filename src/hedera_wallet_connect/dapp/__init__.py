from hedera_wallet_connect.dapp.connector import ConnectorState, DAppConnector
from hedera_wallet_connect.dapp.signer import DAppSigner

__all__ = ["ConnectorState", "DAppConnector", "DAppSigner"]
