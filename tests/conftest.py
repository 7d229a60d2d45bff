"""
Shared fixtures for the multisig tests.
"""
import pytest

from multisig.multisig_core.crypto import generate_keypair, sha256_digest


@pytest.fixture
def keypairs():
    """Three fresh secp256k1 key pairs: [(sk1, pk1), (sk2, pk2), (sk3, pk3)]"""
    return [generate_keypair() for _ in range(3)]


@pytest.fixture
def public_keys(keypairs):
    return [pk for _, pk in keypairs]


@pytest.fixture
def secret_keys(keypairs):
    return [sk for sk, _ in keypairs]


@pytest.fixture
def digest():
    return sha256_digest(b"Hello, multisig!")


@pytest.fixture
def other_digest():
    return sha256_digest(b"Hello, multisig! Wrong")
