"""
Browser-extension and iframe signer sources.

An extension is a wallet reachable without showing a pairing URI: the host
environment hands the URI straight to it. Discovery and messaging belong to
the host, reached through `ExtensionBridge`.
"""

from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field


class ExtensionData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: Optional[str] = None
    icon: Optional[str] = None
    url: Optional[str] = None
    available: bool = False
    available_in_iframe: bool = Field(default=False, alias="availableInIframe")


class ExtensionBridge(Protocol):
    async def query(self) -> list[ExtensionData]:
        """Return every extension the host knows about."""
        ...

    async def connect(self, extension_id: str, is_iframe: bool, uri: str) -> None:
        """Hand a pairing URI to the extension."""
        ...

    async def open(self, extension_id: str) -> None:
        """Bring the extension to the foreground before a request."""
        ...


def find_iframe_extension(extensions: list[ExtensionData]) -> Optional[ExtensionData]:
    """The single extension that can be auto-connected, or None when there isn't exactly one."""
    candidates = [e for e in extensions if e.available and e.available_in_iframe]
    if len(candidates) != 1:
        return None
    return candidates[0]
