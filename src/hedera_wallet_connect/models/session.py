"""
Session, pairing and proposal models as reported by the pairing transport.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Namespace(BaseModel):
    accounts: list[str] = []
    methods: list[str] = []
    events: list[str] = []
    chains: Optional[list[str]] = None


class PeerMetadata(BaseModel):
    name: str = ""
    description: str = ""
    url: str = ""
    icons: list[str] = []


class Session(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic: str
    namespaces: dict[str, Namespace] = {}
    peer: PeerMetadata = PeerMetadata()
    expiry: int = 0
    pairing_topic: Optional[str] = Field(default=None, alias="pairingTopic")
    session_properties: Optional[dict[str, str]] = Field(default=None, alias="sessionProperties")

    @property
    def extension_id(self) -> Optional[str]:
        if not self.session_properties:
            return None
        return self.session_properties.get("extensionId")


class Pairing(BaseModel):
    topic: str
    expiry: int = 0
    active: bool = False
    peer: Optional[PeerMetadata] = None


class SessionProposal(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    pairing_topic: str = Field(alias="pairingTopic")
    proposer: PeerMetadata = PeerMetadata()
    required_namespaces: dict[str, Namespace] = Field(default={}, alias="requiredNamespaces")
    optional_namespaces: dict[str, Namespace] = Field(default={}, alias="optionalNamespaces")
    session_properties: Optional[dict[str, str]] = Field(default=None, alias="sessionProperties")
