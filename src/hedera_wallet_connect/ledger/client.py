"""
Ledger node client boundary.

Submitting transactions and queries to consensus nodes happens behind the
`LedgerClient` protocol; this package only ships the static node tables
each network starts from.
"""

from dataclasses import dataclass, field
from typing import Protocol, Union, runtime_checkable

from hiero_sdk_python import AccountId
from pydantic import BaseModel, ConfigDict, Field

from hedera_wallet_connect.ledger.ids import LedgerId
from hedera_wallet_connect.ledger.queries import Query
from hedera_wallet_connect.ledger.transaction_list import Transaction


class TransactionResponse(BaseModel):
    """Node acknowledgement of a submitted transaction."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    node_id: str = Field(alias="nodeId")
    transaction_hash: str = Field(alias="transactionHash")
    transaction_id: str = Field(alias="transactionId")

    def to_json(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_json(cls, data: dict[str, str]) -> "TransactionResponse":
        return cls.model_validate(data)


@runtime_checkable
class LedgerClient(Protocol):
    """A client bound to one network's consensus and mirror nodes."""

    @property
    def ledger_id(self) -> LedgerId: ...

    @property
    def network(self) -> dict[str, AccountId]: ...

    @property
    def mirror_network(self) -> list[str]: ...

    async def execute(self, transaction: Transaction) -> TransactionResponse: ...

    async def query(self, query: Query) -> bytes: ...


@dataclass(frozen=True)
class Network:
    ledger_id: LedgerId
    nodes: dict[str, AccountId] = field(default_factory=dict)
    mirror_network: list[str] = field(default_factory=list)

    @classmethod
    def for_name(cls, name: Union[LedgerId, str]) -> "Network":
        ledger_id = name if isinstance(name, LedgerId) else LedgerId.from_string(name)
        return _NETWORKS[ledger_id]


def _nodes(addresses: list[str]) -> dict[str, AccountId]:
    return {address: AccountId(0, 0, 3 + i) for i, address in enumerate(addresses)}


_NETWORKS = {
    LedgerId.MAINNET: Network(
        LedgerId.MAINNET,
        _nodes(["35.237.200.180:50211", "35.186.191.247:50211", "35.192.2.25:50211", "35.199.161.108:50211"]),
        ["mainnet-public.mirrornode.hedera.com:443"],
    ),
    LedgerId.TESTNET: Network(
        LedgerId.TESTNET,
        _nodes([f"{i}.testnet.hedera.com:50211" for i in range(4)]),
        ["testnet.mirrornode.hedera.com:443"],
    ),
    LedgerId.PREVIEWNET: Network(
        LedgerId.PREVIEWNET,
        _nodes([f"{i}.previewnet.hedera.com:50211" for i in range(4)]),
        ["previewnet.mirrornode.hedera.com:443"],
    ),
    LedgerId.LOCAL_NODE: Network(
        LedgerId.LOCAL_NODE,
        _nodes(["127.0.0.1:50211"]),
        ["127.0.0.1:5600"],
    ),
}
