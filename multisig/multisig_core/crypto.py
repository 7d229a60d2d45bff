# multisig_core/crypto.py
"""
secp256k1 primitives used around the verifier: key generation, 32-byte
digests and ECDSA signing over a digest.

The verifier never hashes for the caller. Callers hash their content with
sha256_digest (or keccak_digest for Ethereum-style payloads) and pass the
32-byte result in.
"""
import hashlib
from typing import Tuple, Union

from coincurve import PrivateKey, PublicKey
from web3 import Web3

from .errors import InvalidDigestError, InvalidKeyError

DIGEST_SIZE = 32

KeyLike = Union[PublicKey, bytes, bytearray, str]


def _strip0x(s: str) -> str:
    return s[2:] if s.lower().startswith("0x") else s


def h2b(h: str) -> bytes:
    return bytes.fromhex(_strip0x(h.strip()))


def b2h(b: bytes) -> str:
    return "0x" + b.hex()


def generate_keypair() -> Tuple[PrivateKey, PublicKey]:
    sk = PrivateKey()
    return sk, sk.public_key


def sha256_digest(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def keccak_digest(data: bytes) -> bytes:
    # HexBytes -> bytes
    return bytes(Web3.keccak(data))


def as_digest(value: Union[bytes, bytearray, str]) -> bytes:
    """Normalize a digest given as bytes or 0x-hex; must be exactly 32 bytes"""
    if isinstance(value, str):
        try:
            value = h2b(value)
        except ValueError as e:
            raise InvalidDigestError(f"invalid hex for digest: {e}")
    if not isinstance(value, (bytes, bytearray)):
        raise InvalidDigestError(f"digest must be bytes, got {type(value).__name__}")
    if len(value) != DIGEST_SIZE:
        raise InvalidDigestError(f"digest must be {DIGEST_SIZE} bytes, got {len(value)}")
    return bytes(value)


def load_public_key(value: KeyLike) -> PublicKey:
    """
    Parse a secp256k1 public key.
    Accepts a coincurve PublicKey, SEC1 bytes (33B compressed / 65B uncompressed)
    or the same bytes as 0x-hex.
    """
    if isinstance(value, PublicKey):
        return value
    try:
        if isinstance(value, str):
            value = h2b(value)
        return PublicKey(bytes(value))
    except (ValueError, TypeError) as e:
        raise InvalidKeyError(f"invalid secp256k1 public key: {e}")


def sign_digest(private_key: PrivateKey, digest: bytes) -> bytes:
    """DER-encoded ECDSA signature over an already-hashed 32-byte message"""
    digest = as_digest(digest)
    # hasher=None: libsecp256k1 signs the digest as-is
    return private_key.sign(digest, hasher=None)
