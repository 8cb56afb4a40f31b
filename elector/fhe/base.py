"""Boundary with the encrypted arithmetic capability.

The engine only ever holds opaque handles. Handles for encrypted integers and
encrypted booleans are both plain strings; which is which is known to the
backend alone.
"""

from abc import ABC, abstractmethod
from collections import namedtuple

# What an input proof is bound to. ``bound`` is the exclusive upper limit the
# proof must attest for the encrypted value (the election's option count).
InputContext = namedtuple("InputContext", ["election_id", "caller", "bound"])

ExternalInput = namedtuple("ExternalInput", ["handle", "proof"])


class EncryptedArithmetic(ABC):
    @abstractmethod
    def encrypt_constant(self, value):
        """Trivially encrypt a public scalar."""

    def encrypted_zero(self):
        return self.encrypt_constant(0)

    def encrypted_one(self):
        return self.encrypt_constant(1)

    @abstractmethod
    def import_external(self, handle, proof, context):
        """Verify ``proof`` for ``handle`` and return a trusted integer handle.

        Raises ``InvalidProof`` when verification fails.
        """

    @abstractmethod
    def equals(self, left, right):
        """Encrypted boolean ``left == right``."""

    @abstractmethod
    def select(self, condition, if_true, if_false):
        """Encrypted conditional select."""

    @abstractmethod
    def add(self, left, right):
        """Encrypted addition."""

    @abstractmethod
    def mark_publicly_revealable(self, handle):
        """Allow public decryption of ``handle``; returns the revealable handle."""

    @abstractmethod
    def is_publicly_revealable(self, handle):
        """Plain bool; reveals nothing about the plaintext."""
