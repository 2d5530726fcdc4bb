"""Mirror node REST lookups against a mocked HTTP transport."""

import httpx
import pytest

from hedera_wallet_connect.errors import TransportError
from hedera_wallet_connect.ledger import KeyType, LedgerId, PrivateKey
from hedera_wallet_connect.ledger.keys import key_type, public_key_bytes, same_key
from hedera_wallet_connect.transport import MirrorNodeClient, get_account_public_key, mirror_node_url


def mirror_transport(status: int = 200, body=None, seen: list = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=body if body is not None else {})

    return httpx.MockTransport(handler)


def test_mirror_node_url():
    assert mirror_node_url(LedgerId.MAINNET) == "https://mainnet.mirrornode.hedera.com"
    assert mirror_node_url(LedgerId.TESTNET) == "https://testnet.mirrornode.hedera.com"


@pytest.mark.asyncio
async def test_account_public_key_ed25519():
    key = PrivateKey.generate_ed25519().public_key()
    seen = []
    body = {"account": "0.0.1234", "key": {"_type": "ED25519", "key": public_key_bytes(key).hex()}}
    client = MirrorNodeClient(LedgerId.TESTNET, transport=mirror_transport(body=body, seen=seen))
    try:
        assert same_key(await client.get_account_public_key("0.0.1234"), key)
    finally:
        await client.close()
    assert str(seen[0].url) == "https://testnet.mirrornode.hedera.com/api/v1/accounts/0.0.1234"


@pytest.mark.asyncio
async def test_account_public_key_ecdsa():
    key = PrivateKey.generate_ecdsa().public_key()
    body = {"key": {"_type": "ECDSA_SECP256K1", "key": public_key_bytes(key).hex()}}
    found = await get_account_public_key(LedgerId.TESTNET, "0.0.5", transport=mirror_transport(body=body))
    assert key_type(found) == KeyType.ECDSA_SECP256K1
    assert same_key(found, key)


@pytest.mark.asyncio
async def test_custom_base_url():
    seen = []
    client = MirrorNodeClient(LedgerId.LOCAL_NODE, base_url="http://127.0.0.1:5551/", transport=mirror_transport(body={}, seen=seen))
    try:
        assert client.base_url == "http://127.0.0.1:5551"
        assert await client.get_account_public_key("0.0.2") is None
    finally:
        await client.close()
    assert seen[0].url.path == "/api/v1/accounts/0.0.2"


@pytest.mark.asyncio
async def test_unknown_account():
    found = await get_account_public_key(LedgerId.TESTNET, "0.0.999", transport=mirror_transport(status=404))
    assert found is None


@pytest.mark.asyncio
async def test_server_error():
    with pytest.raises(TransportError) as exc_info:
        await get_account_public_key(LedgerId.TESTNET, "0.0.1", transport=mirror_transport(status=500, body={"error": "down"}))
    assert exc_info.value.details["status"] == 500


@pytest.mark.asyncio
async def test_network_failure():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(TransportError, match="Mirror node request failed"):
        await get_account_public_key(LedgerId.TESTNET, "0.0.1", transport=httpx.MockTransport(handler))
