# multisig_core/errors.py


class MultisigError(Exception):
    """Base class for multisig errors"""


class ThresholdError(MultisigError, ValueError):
    """threshold outside [1, len(public_keys)] or empty key list (strict mode only)"""


class InvalidDigestError(MultisigError, ValueError):
    """message is not a 32-byte digest"""


class InvalidKeyError(MultisigError, ValueError):
    """public key bytes could not be parsed"""
