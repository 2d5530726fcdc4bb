"""Wallet side: local signer, provider and the session request handler."""

import pytest

from hedera_wallet_connect.codec import (
    base64_to_bytes,
    decode_signature_map,
    encode_query,
    encode_transaction,
    encode_transaction_body,
    extract_first_signature,
    verify_message_signature,
)
from hedera_wallet_connect.errors import HederaWalletConnectError, TransactionError, UnsupportedMethodError
from hedera_wallet_connect.ledger import (
    AccountId,
    LedgerId,
    PrivateKey,
    Transaction,
    account_balance_query,
    account_info_query,
    transaction_id_to_string,
    transaction_receipt_query,
)
from hedera_wallet_connect.ledger.keys import same_key, verify
from hedera_wallet_connect.methods import HederaJsonRpcMethod
from hedera_wallet_connect.models import Namespace, PeerMetadata, SessionProposal
from hedera_wallet_connect.wallet import HederaWallet, Provider, Wallet

from fakes import TRANSACTION_ID, FakeLedgerClient, FakeSignClient, make_transaction, transfer_body

SIGNER = "hedera:testnet:0.0.1234"


def request_event(method: str, params=None, id: int = 7) -> dict:
    return {"id": id, "topic": "topic-1", "params": {"request": {"method": method, "params": params}, "chainId": "hedera:testnet"}}


@pytest.fixture
def client():
    return FakeSignClient(PeerMetadata(name="Test Wallet"))


@pytest.fixture
def ledger():
    return FakeLedgerClient(LedgerId.TESTNET, query_response=b"balance:42")


@pytest.fixture
def private_key():
    return PrivateKey.generate_ed25519()


@pytest.fixture
def wallet(client):
    return HederaWallet(client)


@pytest.fixture
def signer(wallet, ledger, private_key):
    return wallet.get_hedera_wallet("hedera:testnet", "0.0.1234", private_key, Provider.from_client(ledger))


def only_response(client: FakeSignClient) -> dict:
    assert len(client.responses) == 1
    topic, response = client.responses[0]
    assert topic == "topic-1"
    return response


class TestLocalWallet:
    @pytest.mark.asyncio
    async def test_sign(self, private_key):
        wallet = Wallet("0.0.5", private_key, Provider(LedgerId.TESTNET))
        [signature] = await wallet.sign([b"abc"])
        assert signature.account_id == AccountId(0, 0, 5)
        assert same_key(signature.public_key, private_key.public_key())
        assert verify(private_key.public_key(), b"abc", signature.signature)

    @pytest.mark.asyncio
    async def test_sign_transaction_freezes_with_signer(self, private_key):
        wallet = Wallet("0.0.5", private_key, Provider(LedgerId.TESTNET))
        transaction = await wallet.sign_transaction(Transaction(transfer_body()))
        assert transaction.is_frozen()
        assert transaction.transaction_id.accountID.accountNum == 5
        assert set(transaction.signatures) == set(wallet.get_network().values())

    @pytest.mark.asyncio
    async def test_call_without_client(self, private_key):
        wallet = Wallet("0.0.5", private_key, Provider(LedgerId.TESTNET))
        with pytest.raises(TransactionError):
            await wallet.get_account_balance()

    @pytest.mark.asyncio
    async def test_provider_queries(self, ledger):
        provider = Provider.from_client(ledger)
        assert provider.get_ledger_id() == LedgerId.TESTNET
        assert await provider.get_account_info("0.0.9") == b"balance:42"
        assert ledger.queries == [account_info_query("0.0.9")]

    @pytest.mark.asyncio
    async def test_provider_receipt(self, ledger):
        provider = Provider.from_client(ledger)
        response = await provider.call(make_transaction().freeze_with(ledger))
        assert await provider.wait_for_receipt(response) == b"balance:42"
        assert ledger.queries == [transaction_receipt_query(TRANSACTION_ID)]

    def test_provider_without_client_knows_its_network(self):
        provider = Provider("testnet")
        assert provider.get_ledger_id() == LedgerId.TESTNET
        assert provider.get_mirror_network() == ["testnet.mirrornode.hedera.com:443"]
        assert len(provider.get_network()) == 4

    def test_get_hedera_wallet_from_hex_key(self, wallet, private_key):
        signer = wallet.get_hedera_wallet("hedera:mainnet", "0.0.3", private_key.to_bytes_raw().hex())
        assert signer.get_ledger_id() == LedgerId.MAINNET
        assert same_key(signer.get_account_key(), private_key.public_key())
        assert str(signer.account_identifier) == "hedera:mainnet:0.0.3"


class TestBuildAndApproveSession:
    @pytest.mark.asyncio
    async def test_unique_chains(self, wallet, client):
        proposal = SessionProposal(id=11, pairing_topic="pairing", session_properties={"extensionId": "ext"})
        accounts = ["hedera:testnet:0.0.1", "hedera:testnet:0.0.2", "hedera:mainnet:0.0.3"]
        session = await wallet.build_and_approve_session(accounts, proposal)

        proposal_id, namespaces = client.approved[0]
        assert proposal_id == 11
        assert namespaces["hedera"].chains == ["hedera:testnet", "hedera:mainnet"]
        assert namespaces["hedera"].accounts == accounts
        assert set(namespaces["hedera"].methods) == {m.value for m in HederaJsonRpcMethod}
        assert session.extension_id == "ext"

    @pytest.mark.asyncio
    async def test_rejects_unsupported_required_chain(self, wallet):
        proposal = SessionProposal(
            id=12,
            pairing_topic="pairing",
            required_namespaces={"hedera": Namespace(chains=["hedera:previewnet"], methods=["hedera_signMessage"])},
        )
        with pytest.raises(HederaWalletConnectError):
            await wallet.build_and_approve_session(["hedera:testnet:0.0.1"], proposal)


class TestExecuteSessionRequest:
    @pytest.mark.asyncio
    async def test_get_node_addresses(self, wallet, client, signer):
        await wallet.execute_session_request(request_event("hedera_getNodeAddresses"), signer)
        response = only_response(client)
        assert response["id"] == 7
        assert response["jsonrpc"] == "2.0"
        assert response["result"]["nodes"] == [str(n) for n in signer.get_network().values()]

    @pytest.mark.asyncio
    async def test_sign_message(self, wallet, client, signer, private_key):
        await wallet.execute_session_request(
            request_event("hedera_signMessage", {"signerAccountId": SIGNER, "message": "hi"}), signer
        )
        signature_map = only_response(client)["result"]["signatureMap"]
        assert verify_message_signature("hi", signature_map, private_key.public_key())

    @pytest.mark.asyncio
    async def test_sign_transaction(self, wallet, client, signer, private_key):
        body = make_transaction().body_for_node(AccountId(0, 0, 3))
        await wallet.execute_session_request(
            request_event(
                "hedera_signTransaction", {"signerAccountId": SIGNER, "transactionBody": encode_transaction_body(body)}
            ),
            signer,
        )
        signature_map = decode_signature_map(only_response(client)["result"]["signatureMap"])
        assert verify(private_key.public_key(), body.SerializeToString(), extract_first_signature(signature_map))

    @pytest.mark.asyncio
    async def test_sign_and_execute_transaction(self, wallet, client, signer, ledger, private_key):
        params = {"signerAccountId": SIGNER, "transactionList": encode_transaction(make_transaction())}
        await wallet.execute_session_request(request_event("hedera_signAndExecuteTransaction", params), signer)

        result = only_response(client)["result"]
        assert result["transactionId"] == "0.0.1234@1700000000.000000000"
        [executed] = ledger.executed
        for node, pairs in executed.signatures.items():
            assert verify(private_key.public_key(), executed.body_bytes(node), pairs[0].ed25519)

    @pytest.mark.asyncio
    async def test_execute_transaction_does_not_sign(self, wallet, client, signer, ledger):
        params = {"transactionList": encode_transaction(make_transaction())}
        await wallet.execute_session_request(request_event("hedera_executeTransaction", params), signer)

        assert only_response(client)["result"]["nodeId"] == "0.0.3"
        assert all(pairs == () for pairs in ledger.executed[0].signatures.values())

    @pytest.mark.asyncio
    async def test_sign_and_execute_query(self, wallet, client, signer, ledger):
        params = {"signerAccountId": SIGNER, "query": encode_query(account_balance_query("0.0.1234"))}
        await wallet.execute_session_request(request_event("hedera_signAndExecuteQuery", params), signer)

        assert base64_to_bytes(only_response(client)["result"]["response"]) == b"balance:42"
        assert ledger.queries == [account_balance_query("0.0.1234")]

    @pytest.mark.asyncio
    async def test_invalid_params_are_rejected(self, wallet, client, signer):
        await wallet.execute_session_request(request_event("hedera_signMessage", {"signerAccountId": SIGNER}), signer)
        response = only_response(client)
        assert response["id"] == 7
        assert response["error"]["code"] == 9000
        assert response["error"]["data"] == {"field": "message"}
        assert "result" not in response

    @pytest.mark.asyncio
    async def test_malformed_envelope_is_answered_with_invalid_params(self, wallet, client, signer):
        event = {"id": 9, "topic": "topic-1", "params": {"request": {"method": "hedera_signMessage", "params": {}}}}
        await wallet.execute_session_request(event, signer)
        response = only_response(client)
        assert response["id"] == 9
        assert response["error"]["code"] == 9000
        assert response["error"]["data"] == {"field": "event"}

    @pytest.mark.asyncio
    async def test_unsupported_method(self, wallet, client, signer):
        with pytest.raises(UnsupportedMethodError):
            await wallet.execute_session_request(request_event("hedera_signTransactions", {}), signer)
        assert only_response(client)["error"]["code"] == 1001

    @pytest.mark.asyncio
    async def test_execution_failure_becomes_error_envelope(self, wallet, client, private_key):
        offline = wallet.get_hedera_wallet("hedera:testnet", "0.0.1234", private_key)
        params = {"signerAccountId": SIGNER, "query": encode_query(account_balance_query("0.0.1234"))}
        await wallet.execute_session_request(request_event("hedera_signAndExecuteQuery", params), offline)

        error = only_response(client)["error"]
        assert error["code"] == -32603
        assert "No ledger client configured" in error["message"]

    @pytest.mark.asyncio
    async def test_failures_do_not_leak_across_requests(self, wallet, client, signer):
        await wallet.execute_session_request(request_event("hedera_signMessage", {"signerAccountId": SIGNER}, id=1), signer)
        await wallet.execute_session_request(
            request_event("hedera_signMessage", {"signerAccountId": SIGNER, "message": "ok"}, id=2), signer
        )
        assert [r["id"] for _, r in client.responses] == [1, 2]
        assert "error" in client.responses[0][1]
        assert "result" in client.responses[1][1]


class TestRejectSessionRequest:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "event",
        [
            request_event("hedera_signMessage", {"signerAccountId": SIGNER, "message": "hi"}),
            request_event("hedera_signMessage", {}),
            request_event("hedera_unknown", None),
            {"id": 7, "topic": "topic-1", "params": {"request": {"method": "hedera_signMessage", "params": {}}}},
        ],
    )
    async def test_always_user_rejected(self, wallet, client, event):
        await wallet.reject_session_request(event)
        response = only_response(client)
        assert response["id"] == 7
        assert response["error"] == {"code": 5000, "message": "User rejected."}
