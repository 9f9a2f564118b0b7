from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

import bcrypt

from ..errors import HashingError
from ..utils import utcnow

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def _hash_password(plain_password: str) -> str:
    """Hash a plain password using bcrypt with a fresh salt."""
    if len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise HashingError(f"password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    try:
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        hashed = bcrypt.hashpw(plain_password.encode("utf-8"), salt)
    except (ValueError, TypeError) as exc:
        raise HashingError(f"failed to hash password: {exc}") from exc
    return hashed.decode("utf-8")


# PUBLIC_INTERFACE
@dataclass
class User:
    """
    Domain model for a registered user.

    Fields:
    - id: opaque unique identifier (uuid4 string)
    - email: unique login email; not validated here
    - password_hash: bcrypt hash, never the raw password
    - created_at / updated_at: aware UTC timestamps

    Mutate through the methods below so `updated_at` stays correct.
    """

    id: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def new(cls, id: str, email: str, password: str) -> "User":
        """
        Build a fresh user with a salted hash of `password`.

        Raises:
            HashingError: if bcrypt rejects the password.
        """
        password_hash = _hash_password(password)
        now = utcnow()
        return cls(
            id=id,
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )

    def check_password(self, candidate: str) -> bool:
        """Return True iff `candidate` matches the stored hash."""
        if not candidate:
            return False
        if len(candidate.encode("utf-8")) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(candidate.encode("utf-8"), self.password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash for user %s is not a valid bcrypt hash", self.id)
            return False

    def update_password(self, new_password: str) -> None:
        """
        Replace the password hash. An empty string leaves the password unchanged.

        Raises:
            HashingError: if bcrypt rejects the password.
        """
        if not new_password:
            return
        self.password_hash = _hash_password(new_password)
        self.updated_at = utcnow()

    def update_email(self, new_email: str) -> None:
        self.email = new_email
        self.updated_at = utcnow()
