from elector.extensions import db


class Ciphertext(db.Model):
    """Plaintext store behind the mock arithmetic backend.

    Only the mock coprocessor reads ``value``; the engine sees handles.
    """

    __tablename__ = "ciphertexts"

    handle = db.Column(db.String(66), primary_key=True)
    kind = db.Column(db.String(20), nullable=False)
    value = db.Column(db.BigInteger, nullable=False)
    public = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.BigInteger, nullable=False)
