"""
Ed25519 key generation in Solana format.

A Solana keypair is a 64-byte secret key laid out as [32-byte seed][32-byte
public key]; the address shown to users is the Base58 text of the public key.
"""

import logging
from dataclasses import dataclass, field
from typing import List

import base58
from nacl.signing import SigningKey
from nacl.utils import random as random_bytes

logger = logging.getLogger(__name__)

SEED_SIZE = 32
PUB_KEY_SIZE = 32
SECRET_KEY_SIZE = 64


@dataclass(frozen=True)
class KeyPair:
    """Container for a generated Solana keypair."""
    public_key: bytes
    address: str
    # Secret material never shows up in logs or tracebacks
    secret_key: bytes = field(repr=False)

    @property
    def seed(self) -> bytes:
        return self.secret_key[:SEED_SIZE]

    @property
    def secret_key_base58(self) -> str:
        """Base58 text of the full 64-byte secret key (wallet import format)."""
        return base58.b58encode(self.secret_key).decode("ascii")

    def to_json_array(self) -> List[int]:
        """Secret key as a list of ints, the solana-keygen keypair file format."""
        return list(self.secret_key)


def encode_public_key(public_key: bytes) -> str:
    """Encode a public key as Base58 text, the form Solana displays as an address."""
    return base58.b58encode(public_key).decode("ascii")


def keypair_from_seed(seed: bytes) -> KeyPair:
    """Derive the Solana keypair for a 32-byte Ed25519 seed."""
    public_key = SigningKey(seed).verify_key.encode()
    return KeyPair(
        public_key=public_key,
        address=encode_public_key(public_key),
        secret_key=seed + public_key,
    )


def generate_keypair() -> KeyPair:
    """
    Generate a random Solana keypair.

    Seeds come from libsodium's CSPRNG, which keeps its own state per process,
    so concurrent workers never share or lock a generator.
    """
    return keypair_from_seed(random_bytes(SEED_SIZE))


def keypair_from_secret(secret_key: bytes) -> KeyPair:
    """Rebuild a KeyPair from a 64-byte secret key (or a bare 32-byte seed)."""
    if len(secret_key) == SEED_SIZE:
        return keypair_from_seed(secret_key)
    if len(secret_key) != SECRET_KEY_SIZE:
        raise ValueError(f"Secret key must be {SEED_SIZE} or {SECRET_KEY_SIZE} bytes, got {len(secret_key)}")

    keypair = keypair_from_seed(secret_key[:SEED_SIZE])
    if keypair.public_key != secret_key[SEED_SIZE:]:
        raise ValueError("Secret key public half does not match its seed")
    return keypair


def verify_keypair(keypair: KeyPair) -> bool:
    """Verify that a keypair's seed produces its public key and address."""
    try:
        derived = keypair_from_seed(keypair.seed)
    except Exception as e:
        logger.error(f"Key verification failed: {e}")
        return False

    return (derived.public_key == keypair.public_key
            and derived.address == keypair.address
            and keypair.secret_key[SEED_SIZE:] == keypair.public_key)
