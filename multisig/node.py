# multisig/node.py
# -*- coding: utf-8 -*-
"""
Minimal HTTP collector for a t-of-n multisig:
- holds one Multisig verifier (ordered public keys + threshold)
- POST /signatures { "signature": "0x30..(DER)" } appends the next signature
- POST /verify { "digest": "0x..(32B)" } or { "message": "text" } runs the check
- signatures are positional: the k-th POST is checked against the k-th key

Dependencies:
  pip install fastapi uvicorn coincurve cryptography

Environment:
  MULTISIG_PUBKEYS=0x02..,0x03..,0x02..   # ordered, comma separated (required)
  MULTISIG_THRESHOLD=2
  MULTISIG_SCHEME=secp256k1               # secp256k1|ecdsa-secp256k1|p256
  MULTISIG_STRICT=true                    # reject threshold outside [1, n]

Run:
  uvicorn multisig.node:create_app --factory --host 127.0.0.1 --port 7101
"""
import logging
import os
import threading
from typing import List, Optional

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .multisig_core.crypto import as_digest, b2h, h2b, load_public_key, sha256_digest
from .multisig_core.errors import InvalidDigestError, MultisigError
from .multisig_core.schemes import get_scheme
from .multisig_core.verifier import Multisig

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Environment
# -----------------------------------------------------------------------------
def _require_env(name: str) -> str:
    v = os.getenv(name)
    if not v:
        raise RuntimeError(f"env {name} is required")
    return v


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _key_bytes(key) -> bytes:
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    if isinstance(key, str):
        return h2b(key)
    if isinstance(key, ec.EllipticCurvePublicKey):
        return key.public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.CompressedPoint
        )
    return load_public_key(key).format(compressed=True)


def verifier_from_env() -> Multisig:
    pubkeys = [x.strip() for x in _require_env("MULTISIG_PUBKEYS").split(",") if x.strip()]
    threshold = int(os.getenv("MULTISIG_THRESHOLD", "2"))
    scheme = get_scheme(os.getenv("MULTISIG_SCHEME", "secp256k1"))
    strict = _env_flag("MULTISIG_STRICT", "true")
    try:
        keys = [h2b(k) for k in pubkeys]
    except ValueError as e:
        raise RuntimeError(f"MULTISIG_PUBKEYS invalid: {e}")
    return Multisig(keys, threshold, scheme=scheme, strict=strict)


# -----------------------------------------------------------------------------
# Models
# -----------------------------------------------------------------------------
class AddSignatureReq(BaseModel):
    signature: str  # 0x.. DER


class AddSignatureResp(BaseModel):
    index: int
    collected: int


class VerifyReq(BaseModel):
    digest: Optional[str] = None   # 0x.. 32B, preferred
    message: Optional[str] = None  # utf-8 text, hashed with sha256 here


class SlotResp(BaseModel):
    index: int
    valid: bool


class VerifyResp(BaseModel):
    accepted: bool
    threshold: int
    collected: int
    valid: int
    slots: List[SlotResp] = []


# -----------------------------------------------------------------------------
# FastAPI
# -----------------------------------------------------------------------------
def create_app(verifier: Optional[Multisig] = None) -> FastAPI:
    if verifier is None:
        verifier = verifier_from_env()

    # Multisig itself is not thread-safe; sync endpoints run in a threadpool
    lock = threading.Lock()
    app = FastAPI(title="Multisig Collector")
    app.state.verifier = verifier

    @app.get("/health")
    def health():
        return {
            "ok": True,
            "threshold": verifier.threshold,
            "keys": len(verifier.public_keys),
            "scheme": verifier.scheme.name,
        }

    @app.get("/status")
    def status():
        with lock:
            collected = len(verifier)
        return {
            "collected": collected,
            "threshold": verifier.threshold,
            "public_keys": [b2h(_key_bytes(k)) for k in verifier.public_keys],
        }

    @app.post("/signatures", response_model=AddSignatureResp)
    def add_signature(req: AddSignatureReq):
        try:
            sig = h2b(req.signature)
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid hex for signature")
        if not sig:
            raise HTTPException(status_code=400, detail="empty signature")
        with lock:
            verifier.add_signature(sig)
            collected = len(verifier)
        logger.info("signature #%d collected", collected - 1)
        return AddSignatureResp(index=collected - 1, collected=collected)

    @app.post("/verify", response_model=VerifyResp)
    def verify(req: VerifyReq):
        if req.digest is not None:
            try:
                digest = as_digest(req.digest)
            except InvalidDigestError as e:
                raise HTTPException(status_code=400, detail=str(e))
        elif req.message is not None:
            digest = sha256_digest(req.message.encode("utf-8"))
        else:
            raise HTTPException(status_code=400, detail="one of digest or message is required")

        try:
            with lock:
                report = verifier.check(digest)
        except MultisigError as e:
            raise HTTPException(status_code=400, detail=str(e))
        logger.info("verify %s: %d/%d valid, accepted=%s",
                    b2h(digest)[:12], report.valid, report.threshold, report.accepted)
        return VerifyResp(**report.to_dict())

    return app
