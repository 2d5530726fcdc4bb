"""
Provider: the wallet's view of one network.

Wraps a `LedgerClient` for execution. Without a client the provider still
answers network questions, which is all that message and body signing need.
"""

import logging
from typing import Any, Optional, Union

from hiero_sdk_python import AccountId

from hedera_wallet_connect.errors import TransactionError
from hedera_wallet_connect.ledger.client import LedgerClient, Network, TransactionResponse
from hedera_wallet_connect.ledger.ids import LedgerId, TransactionID
from hedera_wallet_connect.ledger.queries import (
    Query,
    account_balance_query,
    account_info_query,
    query_kind,
    transaction_receipt_query,
)
from hedera_wallet_connect.ledger.transaction_list import Transaction

logger = logging.getLogger(__name__)


class Provider:
    def __init__(self, network: Union[Network, LedgerId, str], client: Optional[LedgerClient] = None):
        self._network = network if isinstance(network, Network) else Network.for_name(network)
        self._client = client

    @classmethod
    def from_client(cls, client: LedgerClient) -> "Provider":
        return cls(Network(client.ledger_id, dict(client.network), list(client.mirror_network)), client)

    def get_ledger_id(self) -> LedgerId:
        return self._network.ledger_id

    def get_network(self) -> dict[str, AccountId]:
        return dict(self._network.nodes)

    def get_mirror_network(self) -> list[str]:
        return list(self._network.mirror_network)

    def _require_client(self) -> LedgerClient:
        if self._client is None:
            raise TransactionError(f"No ledger client configured for {self._network.ledger_id.value}")
        return self._client

    async def get_account_balance(self, account_id: Union[AccountId, str]) -> bytes:
        return await self.call(account_balance_query(account_id))

    async def get_account_info(self, account_id: Union[AccountId, str]) -> bytes:
        return await self.call(account_info_query(account_id))

    async def get_transaction_receipt(self, transaction_id: Union[TransactionID, str]) -> bytes:
        return await self.call(transaction_receipt_query(transaction_id))

    async def wait_for_receipt(self, response: TransactionResponse) -> bytes:
        return await self.get_transaction_receipt(response.transaction_id)

    async def call(self, request: Union[Transaction, Query]) -> Any:
        client = self._require_client()
        if isinstance(request, Transaction):
            logger.debug(f"Submitting {request!r}")
            return await client.execute(request)
        if isinstance(request, Query):
            logger.debug(f"Running {query_kind(request)} query")
            return await client.query(request)
        raise TypeError(f"Cannot execute {type(request).__name__}; expected a Transaction or Query")
