import base58
import pytest

from vanity.keygen import (
    encode_public_key,
    generate_keypair,
    keypair_from_secret,
    keypair_from_seed,
    verify_keypair
)
from vanity.suffix import is_base58

# RFC 8032 test vector 1
SEED = bytes.fromhex("9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60")
PUBLIC = bytes.fromhex("d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a")


def test_keypair_from_seed_matches_test_vector():
    keypair = keypair_from_seed(SEED)
    assert keypair.public_key == PUBLIC
    assert keypair.secret_key == SEED + PUBLIC
    assert keypair.seed == SEED
    assert base58.b58decode(keypair.address) == PUBLIC


def test_generated_keys_are_solana_shaped():
    keypair = generate_keypair()
    assert len(keypair.public_key) == 32
    assert len(keypair.secret_key) == 64
    assert keypair.secret_key[32:] == keypair.public_key
    assert 32 <= len(keypair.address) <= 44
    assert is_base58(keypair.address)
    assert keypair.address == encode_public_key(keypair.public_key)
    assert verify_keypair(keypair)


def test_generated_keys_differ():
    assert generate_keypair().address != generate_keypair().address


def test_secret_exports():
    keypair = keypair_from_seed(SEED)
    assert base58.b58decode(keypair.secret_key_base58) == keypair.secret_key
    assert keypair.to_json_array() == list(SEED + PUBLIC)


def test_keypair_from_secret_round_trip_and_mismatch():
    keypair = keypair_from_seed(SEED)
    assert keypair_from_secret(keypair.secret_key) == keypair
    assert keypair_from_secret(SEED) == keypair

    with pytest.raises(ValueError):
        keypair_from_secret(SEED + bytes(32))
    with pytest.raises(ValueError):
        keypair_from_secret(b"short")


def test_repr_hides_secret_key():
    keypair = keypair_from_seed(SEED)
    assert "secret_key" not in repr(keypair)
    assert SEED.hex() not in repr(keypair)


def test_verify_keypair_rejects_tampered_address():
    keypair = keypair_from_seed(SEED)
    tampered = type(keypair)(public_key=keypair.public_key, address="x" + keypair.address[1:],
                             secret_key=keypair.secret_key)
    assert not verify_keypair(tampered)
