"""
Key helpers over the SDK's `PrivateKey` and `PublicKey`.

The SDK does the signing: ed25519 keys sign the bytes directly, ECDSA
secp256k1 keys sign their keccak-256 digest as a raw 64 byte `r || s`.
This module maps keys to and from the raw public key prefixes and
signature pairs that travel in a `SignatureMap`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cryptography.exceptions import InvalidSignature
from hiero_sdk_python import AccountId, PrivateKey, PublicKey
from hiero_sdk_python.hapi.services import basic_types_pb2

SignaturePair = basic_types_pb2.SignaturePair
SignatureMap = basic_types_pb2.SignatureMap


class KeyType(str, Enum):
    ED25519 = "ed25519"
    ECDSA_SECP256K1 = "ecdsa_secp256k1"


def _hex_to_bytes(value: str) -> bytes:
    value = value.strip()
    if value.startswith("0x"):
        value = value[2:]
    return bytes.fromhex(value)


def key_type(key: PublicKey) -> KeyType:
    return KeyType.ED25519 if key.is_ed25519() else KeyType.ECDSA_SECP256K1


def public_key_bytes(key: PublicKey) -> bytes:
    """Raw key bytes: 32 for ed25519, the 33 byte compressed point for ECDSA."""
    return key.to_bytes_raw()


def public_key_from_bytes(data: bytes) -> PublicKey:
    if len(data) == 32:
        return PublicKey.from_bytes_ed25519(data)
    if len(data) in (33, 65):
        return PublicKey.from_bytes_ecdsa(data)
    raise ValueError(f"Unsupported public key encoding ({len(data)} bytes)")


def public_key_from_string(value: str) -> PublicKey:
    return public_key_from_bytes(_hex_to_bytes(value))


def same_key(a: PublicKey, b: PublicKey) -> bool:
    return key_type(a) == key_type(b) and public_key_bytes(a) == public_key_bytes(b)


def verify(key: PublicKey, message: bytes, signature: bytes) -> bool:
    """True when `signature` is valid for `message` under `key`."""
    try:
        key.verify(signature, message)
    except (InvalidSignature, ValueError):
        return False
    return True


def to_signature_pair(key: PublicKey, signature: bytes) -> SignaturePair:
    if key.is_ed25519():
        return SignaturePair(pubKeyPrefix=public_key_bytes(key), ed25519=signature)
    return SignaturePair(pubKeyPrefix=public_key_bytes(key), ECDSA_secp256k1=signature)


def sign_pair(private_key: PrivateKey, message: bytes) -> SignaturePair:
    return to_signature_pair(private_key.public_key(), private_key.sign(message))


@dataclass(frozen=True)
class SignerSignature:
    """One signature produced by a signer, with the key that made it."""

    public_key: PublicKey
    signature: bytes
    account_id: Optional[AccountId] = None
