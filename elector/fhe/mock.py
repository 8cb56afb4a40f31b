"""Mock coprocessor backend.

Keeps plaintexts in the ``ciphertexts`` table and hands out random handles, so
the engine can be exercised end to end without real homomorphic encryption.
It also plays the two collaborators that sit outside the engine: the
client-side input encryption (``encrypt_input``) and the public decryption
relayer (``public_decrypt``).

Writes go through the current ``db.session`` and therefore commit or roll
back together with the engine operation that triggered them.
"""

import secrets
import time

from itsdangerous import BadSignature, URLSafeSerializer

from elector.errors import DecryptionNotAllowed, InvalidProof
from elector.extensions import db
from elector.fhe.base import EncryptedArithmetic, ExternalInput
from elector.models import Ciphertext

UINT32_MODULUS = 2 ** 32

KIND_UINT = "uint32"
KIND_BOOL = "bool"
KIND_EXTERNAL = "external"


def _new_handle():
    return "0x" + secrets.token_hex(32)


class MockArithmetic(EncryptedArithmetic):
    def __init__(self, proof_secret):
        self._proofs = URLSafeSerializer(proof_secret, salt="elector-input-proof")

    def _store(self, kind, value):
        handle = _new_handle()
        db.session.add(
            Ciphertext(
                handle=handle,
                kind=kind,
                value=value,
                public=False,
                created_at=int(time.time()),
            )
        )
        db.session.flush()
        return handle

    def _load(self, handle, *kinds):
        ciphertext = db.session.get(Ciphertext, handle) if handle else None
        if ciphertext is None or ciphertext.kind not in kinds:
            raise ValueError(f"Unknown ciphertext handle {handle!r}")
        return ciphertext

    def encrypt_constant(self, value):
        return self._store(KIND_UINT, int(value) % UINT32_MODULUS)

    def import_external(self, handle, proof, context):
        try:
            claims = self._proofs.loads(proof or "")
        except BadSignature as exc:
            raise InvalidProof("Input proof signature is invalid.") from exc

        expected = {
            "handle": handle,
            "election_id": context.election_id,
            "caller": context.caller,
        }
        if not isinstance(claims, dict) or any(
            claims.get(key) != value for key, value in expected.items()
        ):
            raise InvalidProof("Input proof is bound to a different input.")

        ciphertext = db.session.get(Ciphertext, handle) if handle else None
        if ciphertext is None or ciphertext.kind != KIND_EXTERNAL:
            raise InvalidProof("Encrypted input is unknown.")
        if not 0 <= ciphertext.value < context.bound:
            raise InvalidProof("Encrypted input is out of range.")

        return self._store(KIND_UINT, ciphertext.value)

    def equals(self, left, right):
        a = self._load(left, KIND_UINT)
        b = self._load(right, KIND_UINT)
        return self._store(KIND_BOOL, int(a.value == b.value))

    def select(self, condition, if_true, if_false):
        flag = self._load(condition, KIND_BOOL)
        a = self._load(if_true, KIND_UINT)
        b = self._load(if_false, KIND_UINT)
        return self._store(KIND_UINT, a.value if flag.value else b.value)

    def add(self, left, right):
        a = self._load(left, KIND_UINT)
        b = self._load(right, KIND_UINT)
        return self._store(KIND_UINT, (a.value + b.value) % UINT32_MODULUS)

    def mark_publicly_revealable(self, handle):
        ciphertext = self._load(handle, KIND_UINT)
        ciphertext.public = True
        return handle

    def is_publicly_revealable(self, handle):
        ciphertext = db.session.get(Ciphertext, handle) if handle else None
        return bool(ciphertext is not None and ciphertext.public)

    # -- collaborators outside the engine --

    def encrypt_input(self, value, context):
        handle = self._store(KIND_EXTERNAL, int(value))
        proof = self._proofs.dumps(
            {
                "handle": handle,
                "election_id": context.election_id,
                "caller": context.caller,
            }
        )
        return ExternalInput(handle=handle, proof=proof)

    def public_decrypt(self, handle):
        ciphertext = db.session.get(Ciphertext, handle) if handle else None
        if ciphertext is None or not ciphertext.public:
            raise DecryptionNotAllowed()
        return ciphertext.value
