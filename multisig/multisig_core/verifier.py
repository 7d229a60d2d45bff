# multisig_core/verifier.py
"""
t-of-n ECDSA multisig verifier with positional signer binding.

Signatures are collected in arrival order and signature #i is checked
against public key #i. Only the first `threshold` signatures are examined:

    ms = Multisig([pk1, pk2, pk3], threshold=2)
    ms.add_signature(sig1)
    ms.add_signature(sig2)
    ms.verify(digest)   # True iff sig1/pk1 and sig2/pk2 both verify

Threshold bounds are not checked unless strict=True:
  threshold <= 0            -> verify() is always True
  threshold > len(keys)     -> verify() is always False
"""
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from .crypto import as_digest
from .errors import ThresholdError
from .schemes import Secp256k1Scheme, SignatureScheme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotResult:
    index: int
    valid: bool


@dataclass(frozen=True)
class VerificationReport:
    accepted: bool
    threshold: int
    collected: int
    valid: int
    slots: Tuple[SlotResult, ...] = ()

    def to_dict(self) -> dict:
        return {
            "accepted": self.accepted,
            "threshold": self.threshold,
            "collected": self.collected,
            "valid": self.valid,
            "slots": [{"index": s.index, "valid": s.valid} for s in self.slots],
        }


class Multisig:
    def __init__(self, public_keys: Sequence[Any], threshold: int,
                 scheme: Optional[SignatureScheme] = None, strict: bool = False):
        self._public_keys = tuple(public_keys)
        self._threshold = int(threshold)
        self._signatures: List[bytes] = []
        self.scheme = scheme if scheme is not None else Secp256k1Scheme()
        if strict:
            self._check_bounds()

    def _check_bounds(self):
        n = len(self._public_keys)
        if n == 0:
            raise ThresholdError("at least one public key is required")
        if not (1 <= self._threshold <= n):
            raise ThresholdError(f"threshold {self._threshold} not in [1, {n}]")

    @property
    def public_keys(self) -> Tuple[Any, ...]:
        return self._public_keys

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def signatures(self) -> Tuple[bytes, ...]:
        return tuple(self._signatures)

    def __len__(self):
        return len(self._signatures)

    def add_signature(self, signature: bytes) -> None:
        """Append a signature; no validation happens until verify()"""
        self._signatures.append(signature)

    def check(self, message: bytes) -> VerificationReport:
        """Run the positional threshold check and return per-slot results"""
        digest = as_digest(message)
        t = self._threshold
        collected = len(self._signatures)

        if collected < t:
            logger.debug("not enough signatures: %d/%d", collected, t)
            return VerificationReport(accepted=False, threshold=t, collected=collected, valid=0)

        slots: List[SlotResult] = []
        # never more than t signatures, and none at all for t <= 0
        for i, sig in enumerate(self._signatures[:max(t, 0)]):
            if i < len(self._public_keys):
                ok = self.scheme.verify(digest, sig, self._public_keys[i])
            else:
                # no key at this position
                ok = False
            if not ok:
                logger.debug("signature #%d rejected", i)
            slots.append(SlotResult(i, ok))

        valid = sum(1 for s in slots if s.valid)
        report = VerificationReport(
            accepted=valid >= t,
            threshold=t,
            collected=collected,
            valid=valid,
            slots=tuple(slots),
        )
        logger.debug("multisig verify: %d/%d valid, accepted=%s", valid, t, report.accepted)
        return report

    def verify(self, message: bytes) -> bool:
        return self.check(message).accepted

    def __repr__(self):
        return (f"Multisig(keys={len(self._public_keys)}, threshold={self._threshold}, "
                f"signatures={len(self._signatures)}, scheme={self.scheme!r})")
