"""
Wallet: a Signer backed by a local private key.
"""

from typing import Any, Union

from hiero_sdk_python import AccountId, PrivateKey, PublicKey

from hedera_wallet_connect.ledger.ids import LedgerId, parse_account_id
from hedera_wallet_connect.ledger.keys import SignerSignature
from hedera_wallet_connect.ledger.transaction_list import Transaction
from hedera_wallet_connect.signer import Executable, Signer
from hedera_wallet_connect.wallet.provider import Provider


class Wallet(Signer):
    def __init__(self, account_id: Union[AccountId, str], private_key: PrivateKey, provider: Provider):
        self._account_id = parse_account_id(account_id)
        self._private_key = private_key
        self._provider = provider

    @property
    def provider(self) -> Provider:
        return self._provider

    def get_account_id(self) -> AccountId:
        return self._account_id

    def get_account_key(self) -> PublicKey:
        return self._private_key.public_key()

    def get_ledger_id(self) -> LedgerId:
        return self._provider.get_ledger_id()

    def get_network(self) -> dict[str, AccountId]:
        return self._provider.get_network()

    def get_mirror_network(self) -> list[str]:
        return self._provider.get_mirror_network()

    async def sign(self, messages: list[bytes]) -> list[SignerSignature]:
        public_key = self._private_key.public_key()
        return [SignerSignature(public_key, self._private_key.sign(message), self._account_id) for message in messages]

    async def sign_transaction(self, transaction: Transaction) -> Transaction:
        if not transaction.is_frozen():
            transaction.freeze_with_signer(self)
        return transaction.sign(self._private_key)

    async def call(self, request: Executable) -> Any:
        return await self._provider.call(request)
