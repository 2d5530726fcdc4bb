"""Chain id mappings and session account extraction."""

import pytest

from hedera_wallet_connect.chains import (
    AccountIdentifier,
    account_and_ledger_from_session,
    caip_chain_id_to_ledger_id,
    eip_chain_id_to_ledger_id,
    ledger_id_to_caip_chain_id,
    ledger_id_to_eip_chain_id,
    network_name_to_caip_chain_id,
    network_name_to_eip_chain_id,
    network_namespaces,
)
from hedera_wallet_connect.errors import HederaWalletConnectError
from hedera_wallet_connect.ledger import AccountId, LedgerId
from hedera_wallet_connect.models import Session

from fakes import make_session


class TestAccountIdentifier:
    def test_parse_triple(self):
        identifier = AccountIdentifier.parse("hedera:testnet:0.0.1234")
        assert identifier == AccountIdentifier("hedera", "testnet", AccountId(0, 0, 1234))
        assert identifier.chain_id == "hedera:testnet"
        assert identifier.ledger_id == LedgerId.TESTNET
        assert str(identifier) == "hedera:testnet:0.0.1234"

    def test_parse_bare_address_with_default_chain(self):
        identifier = AccountIdentifier.parse("0.0.7", "hedera:mainnet")
        assert str(identifier) == "hedera:mainnet:0.0.7"

    @pytest.mark.parametrize("value", ["0.0.7", "hedera:0.0.7", ":testnet:0.0.7", "hedera:testnet:nope"])
    def test_parse_rejects(self, value):
        with pytest.raises(ValueError):
            AccountIdentifier.parse(value)


class TestMappings:
    @pytest.mark.parametrize(
        "ledger_id, eip, caip",
        [
            (LedgerId.MAINNET, 295, "hedera:mainnet"),
            (LedgerId.TESTNET, 296, "hedera:testnet"),
            (LedgerId.PREVIEWNET, 297, "hedera:previewnet"),
            (LedgerId.LOCAL_NODE, 298, "hedera:devnet"),
        ],
    )
    def test_mapping_rows(self, ledger_id, eip, caip):
        assert ledger_id_to_eip_chain_id(ledger_id) == eip
        assert eip_chain_id_to_ledger_id(eip) == ledger_id
        assert ledger_id_to_caip_chain_id(ledger_id) == caip
        assert caip_chain_id_to_ledger_id(caip) == ledger_id

    def test_unknown_falls_back_to_local_node(self):
        assert eip_chain_id_to_ledger_id(1) == LedgerId.LOCAL_NODE
        assert caip_chain_id_to_ledger_id("eip155:1") == LedgerId.LOCAL_NODE
        assert network_name_to_eip_chain_id("moonnet") == 298
        assert network_name_to_caip_chain_id("moonnet") == "hedera:devnet"

    def test_network_names(self):
        assert network_name_to_eip_chain_id("testnet") == 296
        assert network_name_to_caip_chain_id("Mainnet") == "hedera:mainnet"

    def test_network_namespaces(self):
        namespaces = network_namespaces(LedgerId.TESTNET, ["hedera_signMessage"], ["chainChanged"])
        assert namespaces["hedera"].chains == ["hedera:testnet"]
        assert namespaces["hedera"].methods == ["hedera_signMessage"]
        assert namespaces["hedera"].events == ["chainChanged"]


class TestSessionAccounts:
    def test_accounts_from_session(self):
        session = make_session("t1", ["hedera:testnet:0.0.1", "hedera:mainnet:0.0.2"])
        identifiers = account_and_ledger_from_session(session)
        assert [str(i) for i in identifiers] == ["hedera:testnet:0.0.1", "hedera:mainnet:0.0.2"]
        assert [i.ledger_id for i in identifiers] == [LedgerId.TESTNET, LedgerId.MAINNET]

    def test_session_without_hedera_namespace(self):
        with pytest.raises(HederaWalletConnectError):
            account_and_ledger_from_session(Session(topic="t1"))

    def test_extension_id(self):
        assert make_session("t1", [], extension_id="ext-1").extension_id == "ext-1"
        assert make_session("t1", []).extension_id is None
