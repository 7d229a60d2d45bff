# multisig_core/schemes.py
"""
Signature-scheme backends for the verifier.

A scheme only has to answer one question: does `signature` verify over the
32-byte `message` under `public_key`. Every failure (bad DER, bad point,
wrong key, wrong message) is reported as False.
"""
import logging
from typing import Any, Callable, Dict, Protocol

from coincurve import PublicKey
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed

from .crypto import h2b, load_public_key
from .errors import InvalidKeyError

logger = logging.getLogger(__name__)


class SignatureScheme(Protocol):
    name: str

    def verify(self, message: bytes, signature: bytes, public_key: Any) -> bool:
        ...


class Secp256k1Scheme:
    """libsecp256k1 (coincurve) ECDSA, DER signatures"""

    name = "secp256k1"

    def verify(self, message: bytes, signature: bytes, public_key: Any) -> bool:
        try:
            pk = load_public_key(public_key)
            # message is already a digest, no re-hash
            return pk.verify(bytes(signature), message, hasher=None)
        except (InvalidKeyError, ValueError, TypeError) as e:
            logger.debug("secp256k1 verify rejected input: %s", e)
            return False

    def __repr__(self):
        return "Secp256k1Scheme()"


class EcdsaScheme:
    """
    ECDSA through the `cryptography` package (OpenSSL).
    The 32-byte message is treated as a prehashed SHA-256 digest, so a
    signature made by Secp256k1Scheme's signer verifies here too.
    """

    def __init__(self, curve: ec.EllipticCurve = None):
        self.curve = curve if curve is not None else ec.SECP256K1()
        self.name = f"ecdsa-{self.curve.name}"
        self._algorithm = ec.ECDSA(Prehashed(hashes.SHA256()))

    def _load(self, public_key: Any) -> ec.EllipticCurvePublicKey:
        if isinstance(public_key, ec.EllipticCurvePublicKey):
            return public_key
        if isinstance(public_key, PublicKey):
            public_key = public_key.format(compressed=True)
        elif isinstance(public_key, str):
            public_key = h2b(public_key)
        return ec.EllipticCurvePublicKey.from_encoded_point(self.curve, bytes(public_key))

    def verify(self, message: bytes, signature: bytes, public_key: Any) -> bool:
        try:
            self._load(public_key).verify(bytes(signature), message, self._algorithm)
            return True
        except InvalidSignature:
            return False
        except (ValueError, TypeError) as e:
            logger.debug("%s verify rejected input: %s", self.name, e)
            return False

    def __repr__(self):
        return f"EcdsaScheme({self.curve.name})"


_SCHEMES: Dict[str, Callable[[], SignatureScheme]] = {
    "secp256k1": Secp256k1Scheme,
    "ecdsa-secp256k1": lambda: EcdsaScheme(ec.SECP256K1()),
    "p256": lambda: EcdsaScheme(ec.SECP256R1()),
}


def get_scheme(name: str) -> SignatureScheme:
    try:
        factory = _SCHEMES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown signature scheme {name!r}, expected one of {sorted(_SCHEMES)}")
    return factory()
