from __future__ import annotations

import time
from dataclasses import dataclass

import jwt
from jwt.exceptions import InvalidTokenError

from ..errors import InvalidCredentialsError
from ..settings import Settings


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified bearer token."""

    user_id: str
    email: str


# PUBLIC_INTERFACE
class TokenManager:
    """
    Issues and verifies HS256 bearer tokens.

    The signing secret is handed in once at startup and never read from
    module state, so separate apps (or tests) can use separate secrets.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_hours: int = 24) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_seconds = expire_hours * 3600

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenManager":
        return cls(
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
            expire_hours=settings.access_token_expire_hours,
        )

    def create_token(self, user_id: str, email: str) -> str:
        """
        Create a signed token for `user_id` expiring after the configured lifetime.
        """
        issued_at = int(time.time())
        payload = {
            "sub": user_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self._expire_seconds,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify_token(self, token: str) -> TokenClaims:
        """
        Decode and validate a token.

        Raises:
            InvalidCredentialsError: if the token is malformed, badly signed,
                expired, or lacks the subject claim.
        """
        try:
            decoded = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except InvalidTokenError as exc:
            raise InvalidCredentialsError(f"invalid token: {exc}") from exc

        user_id = decoded.get("sub")
        if not user_id:
            raise InvalidCredentialsError("invalid token: missing subject")
        return TokenClaims(user_id=str(user_id), email=str(decoded.get("email", "")))
