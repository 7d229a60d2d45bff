# multisig_core/__init__.py
from .errors import MultisigError, ThresholdError, InvalidDigestError, InvalidKeyError
from .crypto import generate_keypair, sha256_digest, keccak_digest, sign_digest, load_public_key, as_digest
from .schemes import SignatureScheme, Secp256k1Scheme, EcdsaScheme, get_scheme
from .verifier import Multisig, VerificationReport, SlotResult
