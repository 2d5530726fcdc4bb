"""
Mirror node REST client, used to look up an account's public key.
"""

from typing import Any, Optional, Union

import httpx
from hiero_sdk_python import AccountId, PublicKey

from hedera_wallet_connect.errors import TransportError
from hedera_wallet_connect.ledger.ids import LedgerId, parse_account_id
from hedera_wallet_connect.ledger.keys import public_key_from_string

USER_AGENT = "hedera-wallet-connect-python/0.1.0"


def mirror_node_url(ledger_id: LedgerId) -> str:
    return f"https://{ledger_id.value}.mirrornode.hedera.com"


class MirrorNodeClient:
    def __init__(
        self,
        ledger_id: LedgerId = LedgerId.TESTNET,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._ledger_id = ledger_id
        self._base_url = (base_url or mirror_node_url(ledger_id)).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}/api/v1",
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def get(self, path: str) -> Optional[Any]:
        """GET a mirror node resource. Returns None on 404."""
        try:
            resp = await self._client.get(path)
        except httpx.HTTPError as e:
            raise TransportError(f"Mirror node request failed: {e}") from e
        if resp.status_code == 404:
            return None
        if resp.status_code != 200:
            raise TransportError(
                f"Failed request to mirror node: HTTP {resp.status_code}",
                {"status": resp.status_code, "body": resp.text[:200]},
            )
        return resp.json()

    async def get_account(self, account_id: Union[AccountId, str]) -> Optional[dict[str, Any]]:
        return await self.get(f"/accounts/{parse_account_id(account_id)}")

    async def get_account_public_key(self, account_id: Union[AccountId, str]) -> Optional[PublicKey]:
        account = await self.get_account(account_id)
        if not account:
            return None
        key_info = account.get("key") or {}
        key = key_info.get("key")
        return public_key_from_string(key) if key else None

    async def close(self) -> None:
        await self._client.aclose()


async def get_account_public_key(
    ledger_id: LedgerId,
    account_id: Union[AccountId, str],
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[PublicKey]:
    client = MirrorNodeClient(ledger_id, transport=transport)
    try:
        return await client.get_account_public_key(account_id)
    finally:
        await client.close()
