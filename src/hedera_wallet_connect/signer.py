"""
Signer: one usable signing identity on one network.

The dApp side implements it by forwarding to a paired wallet; the wallet side
implements it with a local private key and a ledger client.
"""

from abc import ABC, abstractmethod
from typing import Any, Union

from hiero_sdk_python import AccountId

from hedera_wallet_connect.chains import AccountIdentifier, ledger_id_to_caip_chain_id
from hedera_wallet_connect.ledger.client import TransactionResponse
from hedera_wallet_connect.ledger.ids import LedgerId, generate_transaction_id
from hedera_wallet_connect.ledger.keys import SignerSignature
from hedera_wallet_connect.ledger.queries import Query, account_balance_query, account_info_query
from hedera_wallet_connect.ledger.transaction_list import Transaction

Executable = Union[Transaction, Query]


class Signer(ABC):
    @abstractmethod
    def get_account_id(self) -> AccountId: ...

    @abstractmethod
    def get_ledger_id(self) -> LedgerId: ...

    @abstractmethod
    def get_network(self) -> dict[str, AccountId]: ...

    @abstractmethod
    def get_mirror_network(self) -> list[str]: ...

    @abstractmethod
    async def sign(self, messages: list[bytes]) -> list[SignerSignature]: ...

    @abstractmethod
    async def sign_transaction(self, transaction: Transaction) -> Transaction: ...

    @abstractmethod
    async def call(self, request: Executable) -> Any: ...

    @property
    def account_identifier(self) -> AccountIdentifier:
        namespace, network = ledger_id_to_caip_chain_id(self.get_ledger_id()).split(":")
        return AccountIdentifier(namespace, network, self.get_account_id())

    async def populate_transaction(self, transaction: Transaction) -> Transaction:
        return transaction.set_transaction_id(generate_transaction_id(self.get_account_id()))

    async def get_account_balance(self) -> Any:
        return await self.call(account_balance_query(self.get_account_id()))

    async def get_account_info(self) -> Any:
        return await self.call(account_info_query(self.get_account_id()))

    async def execute_transaction(self, transaction: Transaction) -> TransactionResponse:
        return await self.call(transaction)
