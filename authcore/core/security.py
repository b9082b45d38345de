import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from passlib.context import CryptContext

from authcore.errors import InvalidTokenError

ACCESS_TOKEN = "access"
PASSWORD_RESET_TOKEN = "password_reset"

DEFAULT_BCRYPT_ROUNDS = 10


class PasswordHasher:
    """Salted one-way password hashing backed by bcrypt."""

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Hash a password."""
        return self._context.hash(password)

    def verify(self, plain_password: str | None, hashed_password: str | None) -> bool:
        """Verify a plain password against a hashed password."""
        if not plain_password or not hashed_password:
            return False
        try:
            return self._context.verify(plain_password, hashed_password)
        except ValueError:
            # unrecognized or corrupted hash
            return False

    def dummy_verify(self) -> bool:
        """Spend the time of a real verification when there is no user to check against."""
        self._context.dummy_verify()
        return False


class TokenIssuer:
    """Signs and verifies time-bounded JWT bearer tokens."""

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def issue(self, user_id: int, ttl: timedelta, purpose: str = ACCESS_TOKEN) -> str:
        """Create a signed token for ``user_id`` that expires ``ttl`` from now."""
        now = datetime.now(timezone.utc)
        to_encode: dict[str, Any] = {
            "sub": str(user_id),
            "type": purpose,
            "iat": now,
            "exp": now + ttl,
            "jti": secrets.token_urlsafe(16),
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str | None, purpose: str = ACCESS_TOKEN) -> int:
        """
        Decode ``token`` and return the user id it carries.

        Raises:
            InvalidTokenError: For any failure (signature, format, expiry, purpose).
                The message is the same whatever the cause.
        """
        if not token:
            raise InvalidTokenError("Invalid or expired token")
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.InvalidTokenError:
            raise InvalidTokenError("Invalid or expired token") from None

        if payload.get("type") != purpose:
            raise InvalidTokenError("Invalid or expired token")

        try:
            return int(payload["sub"])
        except (TypeError, ValueError):
            raise InvalidTokenError("Invalid or expired token") from None
