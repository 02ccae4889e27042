"""
ShipTrack Backend — Password Hashing
======================================

What:  One-way salted password hashing and verification with bcrypt.
How:   bcrypt.gensalt() draws a fresh random salt per hash, so hashing the
       same password twice gives two different strings. checkpw() compares
       in constant time.
Who:   UserService (register hashes, login verifies).

bcrypt only looks at the first 72 bytes of its input; longer passwords are
cut to 72 bytes explicitly so hashing never raises on long input.
"""

import logging

import bcrypt

from shiptrack.config import settings

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Stateless bcrypt wrapper; the cost factor is the only configuration."""

    def __init__(self, rounds: int | None = None):
        self.rounds = rounds if rounds is not None else settings.bcrypt_rounds

    def hash(self, plaintext: str) -> str:
        """Hash a password with a random salt and the configured cost factor."""
        return bcrypt.hashpw(_encode(plaintext), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plaintext: str, hashed: str) -> bool:
        """
        Check a password against a stored hash.

        Returns False on mismatch. A stored value that is not a bcrypt hash
        also returns False (and is logged) instead of raising.
        """
        try:
            return bcrypt.checkpw(_encode(plaintext), hashed.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is not a valid bcrypt hash")
            return False


password_hasher = PasswordHasher()
