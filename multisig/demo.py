# multisig/demo.py
# python -m multisig.demo
from .multisig_core.crypto import generate_keypair, sha256_digest, sign_digest
from .multisig_core.verifier import Multisig


def run_demo() -> bool:
    print("=== DEMO: 2-of-3 multisig (secp256k1) ===")
    # 3 participants
    sk1, pk1 = generate_keypair()
    sk2, pk2 = generate_keypair()
    sk3, pk3 = generate_keypair()

    multisig = Multisig([pk1, pk2, pk3], threshold=2)

    message = sha256_digest(b"Hello, multisig!")

    for sk in (sk1, sk2, sk3):
        multisig.add_signature(sign_digest(sk, message))

    ok = multisig.verify(message)
    if ok:
        print("Multisig verification succeeded!")
    else:
        print("Multisig verification failed!")
    return ok


if __name__ == "__main__":
    run_demo()
