"""
Tests for the positional threshold verifier.
"""
import pytest

from multisig.multisig_core.crypto import generate_keypair, sign_digest
from multisig.multisig_core.errors import InvalidDigestError, ThresholdError
from multisig.multisig_core.verifier import Multisig, SlotResult


def test_two_of_three_accepts(public_keys, secret_keys, digest):
    sk1, sk2, _ = secret_keys
    ms = Multisig(public_keys, 2)
    ms.add_signature(sign_digest(sk1, digest))
    ms.add_signature(sign_digest(sk2, digest))

    assert ms.verify(digest)


def test_single_signature_below_threshold(public_keys, secret_keys, digest):
    ms = Multisig(public_keys, 2)
    ms.add_signature(sign_digest(secret_keys[0], digest))

    assert not ms.verify(digest)


def test_extra_signature_does_not_invalidate(public_keys, secret_keys, digest):
    ms = Multisig(public_keys, 2)
    for sk in secret_keys:
        ms.add_signature(sign_digest(sk, digest))

    assert ms.verify(digest)


def test_second_signer_signed_other_message(digest, other_digest):
    (sk1, pk1), (sk2, pk2) = generate_keypair(), generate_keypair()
    ms = Multisig([pk1, pk2], 2)
    ms.add_signature(sign_digest(sk1, digest))
    ms.add_signature(sign_digest(sk2, other_digest))

    assert not ms.verify(digest)
    assert not ms.verify(other_digest)


def test_no_signatures(public_keys, digest):
    ms = Multisig(public_keys, 1)
    assert len(ms) == 0
    assert not ms.verify(digest)


def test_trailing_signatures_are_never_consulted(public_keys, secret_keys, digest, other_digest):
    sk1, sk2, sk3 = secret_keys

    ms = Multisig(public_keys, 2)
    ms.add_signature(sign_digest(sk1, digest))
    ms.add_signature(sign_digest(sk2, digest))
    assert ms.verify(digest)
    # garbage after the threshold
    ms.add_signature(b"\x00" * 70)
    ms.add_signature(sign_digest(sk3, other_digest))
    assert ms.verify(digest)

    # an invalid slot inside the threshold is not rescued by a later valid one
    ms = Multisig(public_keys, 2)
    ms.add_signature(sign_digest(sk1, digest))
    ms.add_signature(sign_digest(sk3, digest))  # wrong signer for slot 1
    ms.add_signature(sign_digest(sk2, digest))
    assert not ms.verify(digest)


def test_pairing_is_positional(public_keys, secret_keys, digest):
    sk1, sk2, _ = secret_keys
    ms = Multisig(public_keys, 2)
    # right signers, wrong order
    ms.add_signature(sign_digest(sk2, digest))
    ms.add_signature(sign_digest(sk1, digest))

    report = ms.check(digest)
    assert not report.accepted
    assert report.valid == 0


def test_malformed_signature_counts_as_invalid(public_keys, secret_keys, digest):
    ms = Multisig(public_keys, 2)
    ms.add_signature(sign_digest(secret_keys[0], digest))
    ms.add_signature(b"not a der signature")

    report = ms.check(digest)
    assert not report.accepted
    assert report.slots == (SlotResult(0, True), SlotResult(1, False))


def test_malformed_public_key_counts_as_invalid(secret_keys, digest):
    sk1, pk1 = generate_keypair()
    ms = Multisig([pk1, b"\x02" + b"\xff" * 32], 2)
    ms.add_signature(sign_digest(sk1, digest))
    ms.add_signature(sign_digest(secret_keys[1], digest))

    assert not ms.verify(digest)


def test_report(public_keys, secret_keys, digest):
    ms = Multisig(public_keys, 2)
    for sk in secret_keys:
        ms.add_signature(sign_digest(sk, digest))

    report = ms.check(digest)
    assert report.accepted
    assert report.threshold == 2
    assert report.collected == 3
    assert report.valid == 2
    assert [s.index for s in report.slots] == [0, 1]
    assert report.to_dict()["slots"] == [{"index": 0, "valid": True}, {"index": 1, "valid": True}]


def test_report_short_circuits_below_threshold(public_keys, digest):
    ms = Multisig(public_keys, 3)
    ms.add_signature(b"whatever")
    report = ms.check(digest)
    assert not report.accepted
    assert report.collected == 1
    assert report.slots == ()


def test_signatures_are_append_only(public_keys, secret_keys, digest):
    ms = Multisig(public_keys, 2)
    sig = sign_digest(secret_keys[0], digest)
    ms.add_signature(sig)
    ms.add_signature(sig)

    assert ms.signatures == (sig, sig)
    assert isinstance(ms.signatures, tuple)
    assert isinstance(ms.public_keys, tuple)
    # verify is a pure query, adding still works afterwards
    assert not ms.verify(digest)
    ms.add_signature(sig)
    assert len(ms) == 3


@pytest.mark.parametrize("threshold", [0, -1])
def test_non_positive_threshold_always_accepts(public_keys, digest, threshold):
    ms = Multisig(public_keys, threshold)
    assert ms.verify(digest)
    ms.add_signature(b"junk")
    assert ms.verify(digest)


def test_threshold_above_key_count_always_rejects(digest):
    sk1, pk1 = generate_keypair()
    ms = Multisig([pk1], 2)
    ms.add_signature(sign_digest(sk1, digest))
    ms.add_signature(sign_digest(sk1, digest))

    report = ms.check(digest)
    assert not report.accepted
    assert report.slots == (SlotResult(0, True), SlotResult(1, False))


def test_empty_key_list(digest):
    ms = Multisig([], 1)
    ms.add_signature(b"sig")
    assert not ms.verify(digest)


@pytest.mark.parametrize("n_keys,threshold", [(0, 1), (3, 0), (3, -2), (3, 4)])
def test_strict_rejects_bad_bounds(n_keys, threshold):
    keys = [generate_keypair()[1] for _ in range(n_keys)]
    with pytest.raises(ThresholdError):
        Multisig(keys, threshold, strict=True)


def test_strict_accepts_valid_bounds(public_keys):
    assert Multisig(public_keys, 1, strict=True).threshold == 1
    assert Multisig(public_keys, 3, strict=True).threshold == 3


def test_threshold_error_is_value_error(public_keys):
    with pytest.raises(ValueError):
        Multisig(public_keys, 10, strict=True)


@pytest.mark.parametrize("message", [b"", b"short", b"\x00" * 33])
def test_message_must_be_digest(public_keys, message):
    ms = Multisig(public_keys, 1)
    with pytest.raises(InvalidDigestError):
        ms.verify(message)


def test_hex_digest_and_keys(public_keys, secret_keys, digest):
    hex_keys = ["0x" + pk.format(compressed=True).hex() for pk in public_keys]
    ms = Multisig(hex_keys, 2)
    ms.add_signature(sign_digest(secret_keys[0], digest))
    ms.add_signature(sign_digest(secret_keys[1], digest))

    assert ms.verify("0x" + digest.hex())
