"""
Network identifier mappings (HIP-30) and session namespace helpers.

LEDGER_ID_MAPPINGS rows are (ledger id, EIP-155 chain id, CAIP-2 chain id).
Lookups that miss fall back to the local node.
"""

from dataclasses import dataclass
from typing import Optional

from hiero_sdk_python import AccountId

from hedera_wallet_connect.errors import HederaWalletConnectError
from hedera_wallet_connect.ledger.ids import LedgerId, parse_account_id
from hedera_wallet_connect.methods import HEDERA_NAMESPACE
from hedera_wallet_connect.models.session import Namespace, Session

LEDGER_ID_MAPPINGS: list[tuple[LedgerId, int, str]] = [
    (LedgerId.MAINNET, 295, "hedera:mainnet"),
    (LedgerId.TESTNET, 296, "hedera:testnet"),
    (LedgerId.PREVIEWNET, 297, "hedera:previewnet"),
    (LedgerId.LOCAL_NODE, 298, "hedera:devnet"),
]
DEFAULT_LEDGER_ID = LedgerId.LOCAL_NODE
DEFAULT_EIP = 298
DEFAULT_CAIP = "hedera:devnet"


@dataclass(frozen=True)
class AccountIdentifier:
    """A CAIP-10 style `namespace:network:address` account reference."""

    namespace: str
    network: str
    address: AccountId

    @classmethod
    def parse(cls, value: str, default_chain_id: Optional[str] = None) -> "AccountIdentifier":
        """Parse `hedera:testnet:0.0.1234`, or a bare `0.0.1234` given a default chain."""
        parts = value.split(":")
        if len(parts) == 3:
            namespace, network, address = parts
        elif len(parts) == 1 and default_chain_id:
            namespace, network = default_chain_id.split(":", 1)
            address = parts[0]
        else:
            raise ValueError(f"Invalid account identifier: {value!r}")
        if not namespace or not network:
            raise ValueError(f"Invalid account identifier: {value!r}")
        return cls(namespace, network, parse_account_id(address))

    @property
    def chain_id(self) -> str:
        return f"{self.namespace}:{self.network}"

    @property
    def ledger_id(self) -> LedgerId:
        return caip_chain_id_to_ledger_id(self.chain_id)

    def __str__(self) -> str:
        return f"{self.namespace}:{self.network}:{self.address}"


def eip_chain_id_to_ledger_id(chain_id: int) -> LedgerId:
    for ledger_id, eip, _ in LEDGER_ID_MAPPINGS:
        if eip == chain_id:
            return ledger_id
    return DEFAULT_LEDGER_ID


def ledger_id_to_eip_chain_id(ledger_id: LedgerId) -> int:
    for ledger_id_, eip, _ in LEDGER_ID_MAPPINGS:
        if ledger_id_ == ledger_id:
            return eip
    return DEFAULT_EIP


def caip_chain_id_to_ledger_id(chain_id: str) -> LedgerId:
    for ledger_id, _, caip in LEDGER_ID_MAPPINGS:
        if caip == chain_id:
            return ledger_id
    return DEFAULT_LEDGER_ID


def ledger_id_to_caip_chain_id(ledger_id: LedgerId) -> str:
    for ledger_id_, _, caip in LEDGER_ID_MAPPINGS:
        if ledger_id_ == ledger_id:
            return caip
    return DEFAULT_CAIP


def _ledger_id_for_name(network_name: str) -> LedgerId:
    try:
        return LedgerId.from_string(network_name)
    except ValueError:
        return DEFAULT_LEDGER_ID


def network_name_to_eip_chain_id(network_name: str) -> int:
    return ledger_id_to_eip_chain_id(_ledger_id_for_name(network_name))


def network_name_to_caip_chain_id(network_name: str) -> str:
    return ledger_id_to_caip_chain_id(_ledger_id_for_name(network_name))


def network_namespaces(ledger_id: LedgerId, methods: list[str], events: list[str]) -> dict[str, Namespace]:
    """Required namespaces for a pairing proposal on one network."""
    return {
        HEDERA_NAMESPACE: Namespace(
            chains=[ledger_id_to_caip_chain_id(ledger_id)],
            methods=list(methods),
            events=list(events),
        )
    }


def account_and_ledger_from_session(session: Session) -> list[AccountIdentifier]:
    namespace = session.namespaces.get(HEDERA_NAMESPACE)
    if namespace is None:
        raise HederaWalletConnectError("no_namespace", "No hedera namespace found")
    return [AccountIdentifier.parse(account) for account in namespace.accounts]
