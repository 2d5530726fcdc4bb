"""hedera-wc command line."""

import json

import httpx
import pytest
from click.testing import CliRunner

from hedera_wallet_connect.cli import main as cli_module
from hedera_wallet_connect.cli.main import main
from hedera_wallet_connect.codec import (
    encode_signature_map,
    encode_transaction,
    encode_transaction_body,
    signer_signatures_to_signature_map,
    string_to_signer_message,
)
from hedera_wallet_connect.ledger import PrivateKey, SignerSignature
from hedera_wallet_connect.ledger.keys import public_key_bytes
from hedera_wallet_connect.transport.http import MirrorNodeClient

from fakes import TRANSACTION_ID, make_transaction


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(cli_module, "CONFIG_FILE", path)
    return path


@pytest.fixture
def key():
    return PrivateKey.generate_ed25519()


def signed_message_map(key: PrivateKey, message: str) -> str:
    [payload] = string_to_signer_message(message)
    signature = SignerSignature(key.public_key(), key.sign(payload))
    return encode_signature_map(signer_signatures_to_signature_map([signature]))


def key_hex(key: PrivateKey) -> str:
    return public_key_bytes(key.public_key()).hex()


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


class TestDecode:
    def test_transaction_json(self, runner):
        transaction = make_transaction().set_memo("hi")
        encoded = encode_transaction(transaction)

        result = runner.invoke(main, ["decode", "transaction", encoded, "--json"])
        assert result.exit_code == 0
        summary = json.loads(result.output)
        assert summary["kind"] == "cryptoTransfer"
        assert summary["transactionId"] == TRANSACTION_ID
        assert summary["nodeAccountIds"] == ["0.0.3", "0.0.4", "0.0.5"]
        assert summary["memo"] == "hi"
        assert summary["data"]["transfers"]["accountAmounts"][1]["amount"] == "1"

    def test_transaction_table(self, runner, key):
        transaction = make_transaction()
        encode_transaction(transaction)
        transaction.sign(key)

        result = runner.invoke(main, ["decode", "transaction", encode_transaction(transaction)])
        assert result.exit_code == 0
        assert "Signatures for node 0.0.3" in result.output

    def test_malformed_transaction(self, runner):
        result = runner.invoke(main, ["decode", "transaction", "not base64!"])
        assert result.exit_code == 1

    def test_signature_map(self, runner, key):
        result = runner.invoke(main, ["decode", "signature-map", signed_message_map(key, "hi")])
        assert result.exit_code == 0
        assert "1 pairs" in result.output

    def test_body(self, runner):
        body = encode_transaction_body(make_transaction().body_for_node(None))

        result = runner.invoke(main, ["decode", "body", body])
        assert result.exit_code == 0
        decoded = json.loads(result.output)
        assert decoded["memo"] == "transfer"
        assert decoded["transactionFee"] == "200000000"
        assert len(decoded["cryptoTransfer"]["transfers"]["accountAmounts"]) == 2


class TestVerify:
    def test_valid(self, runner, key):
        result = runner.invoke(main, ["verify", "hi", signed_message_map(key, "hi"), key_hex(key)])
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_invalid(self, runner, key):
        result = runner.invoke(main, ["verify", "bye", signed_message_map(key, "hi"), key_hex(key)])
        assert result.exit_code == 1
        assert "NOT valid" in result.output

    def test_malformed_key(self, runner, key):
        result = runner.invoke(main, ["verify", "hi", signed_message_map(key, "hi"), "abcd"])
        assert result.exit_code == 2


class TestConfig:
    def test_show_empty(self, runner, config_file):
        result = runner.invoke(main, ["config", "show"])
        assert result.exit_code == 0
        assert "No settings saved" in result.output

    def test_set_and_show(self, runner, config_file):
        assert runner.invoke(main, ["config", "set", "network", "mainnet"]).exit_code == 0
        assert runner.invoke(main, ["config", "set", "mirror_node_url", "http://localhost:5551"]).exit_code == 0

        assert json.loads(config_file.read_text()) == {"network": "mainnet", "mirror_node_url": "http://localhost:5551"}
        result = runner.invoke(main, ["config", "show"])
        assert "network = mainnet" in result.output

    def test_rejects_unknown_network(self, runner, config_file):
        result = runner.invoke(main, ["config", "set", "network", "moonnet"])
        assert result.exit_code == 1
        assert not config_file.exists()

    def test_rejects_unknown_key(self, runner, config_file):
        result = runner.invoke(main, ["config", "set", "colour", "blue"])
        assert result.exit_code == 2


class TestAccountKey:
    def patch_mirror(self, monkeypatch, status: int, body=None, seen=None):
        def handler(request):
            if seen is not None:
                seen.append(request)
            return httpx.Response(status, json=body or {})

        def factory(ledger_id, base_url=None):
            return MirrorNodeClient(ledger_id, base_url=base_url, transport=httpx.MockTransport(handler))

        monkeypatch.setattr(cli_module, "MirrorNodeClient", factory)

    def test_found(self, runner, monkeypatch, config_file, key):
        seen = []
        self.patch_mirror(monkeypatch, 200, {"key": {"_type": "ED25519", "key": key_hex(key)}}, seen)
        result = runner.invoke(main, ["account-key", "0.0.1234", "--network", "mainnet"])
        assert result.exit_code == 0
        assert "ed25519" in result.output
        assert seen[0].url.host == "mainnet.mirrornode.hedera.com"

    def test_uses_configured_mirror(self, runner, monkeypatch, config_file, key):
        config_file.write_text(json.dumps({"mirror_node_url": "http://localhost:5551"}))
        seen = []
        self.patch_mirror(monkeypatch, 200, {"key": {"key": key_hex(key)}}, seen)
        result = runner.invoke(main, ["account-key", "0.0.1234"])
        assert result.exit_code == 0
        assert str(seen[0].url) == "http://localhost:5551/api/v1/accounts/0.0.1234"

    def test_not_found(self, runner, monkeypatch, config_file):
        self.patch_mirror(monkeypatch, 404)
        result = runner.invoke(main, ["account-key", "0.0.1234"])
        assert result.exit_code == 1
        assert "No key found" in result.output

    def test_mirror_failure(self, runner, monkeypatch, config_file):
        self.patch_mirror(monkeypatch, 503)
        result = runner.invoke(main, ["account-key", "0.0.1234"])
        assert result.exit_code == 1
