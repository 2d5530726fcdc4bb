from hedera_wallet_connect.wallet.handler import HederaWallet
from hedera_wallet_connect.wallet.local import Wallet
from hedera_wallet_connect.wallet.provider import Provider

__all__ = ["HederaWallet", "Provider", "Wallet"]
