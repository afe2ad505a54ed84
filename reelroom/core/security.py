import hashlib
import hmac
import secrets
import string
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any, Protocol

import jwt
from argon2 import PasswordHasher

from reelroom.core.config import Settings

ph = PasswordHasher(time_cost=3, memory_cost=64 * 1024, parallelism=2)

DEMO_SALT = "demo-salt"
SESSION_TTL = timedelta(hours=24)

ACCESS_CODE_LENGTH = 8
ACCESS_CODE_ALPHABET = string.ascii_uppercase + string.digits

_ARGON2_PREFIX = "$argon2"

# Seeded demo accounts (admin/admin123, user/user123) stored under the demo salt.
_SEEDED_DEMO_CREDENTIALS = frozenset(
    {
        ("admin123", "240be518fabd2724ddb6f04eeb1da5967448d7e831c08c8fa822809f74c720a9"),
        ("user123", "e606e38b0d8c19b24cf0ee3808183162ea7cd63ff7912dbb22b5e803286b4446"),
    }
)


class HashMode(StrEnum):
    demo = "demo"
    custom = "custom"
    random = "random"


def _legacy_digest(plain: str) -> str:
    return hashlib.sha256(plain.encode("utf-8")).hexdigest()


def hash_password(
    plain: str, mode: HashMode = HashMode.random, salt: str | None = None
) -> str:
    """
    Produce a stored credential for ``plain``.

    ``demo`` and ``custom`` emit the legacy ``salt:hexDigest`` format, where the
    digest covers the password bytes only. ``random`` is the path for new
    accounts and returns an Argon2id hash.
    """
    if mode == HashMode.demo:
        return f"{DEMO_SALT}:{_legacy_digest(plain)}"
    if mode == HashMode.custom:
        if not salt or ":" in salt:
            raise ValueError("Custom salt must be non-empty and must not contain ':'")
        return f"{salt}:{_legacy_digest(plain)}"
    return ph.hash(plain)


def _is_seeded_demo_credential(plain: str, digest: str) -> bool:
    return (plain, digest) in _SEEDED_DEMO_CREDENTIALS


def _verify_legacy(plain: str, stored: str) -> bool:
    salt, digest = stored.split(":", 1)
    if salt == DEMO_SALT and _is_seeded_demo_credential(plain, digest):
        return True
    return hmac.compare_digest(_legacy_digest(plain), digest)


def verify_password(plain: str, stored: str) -> bool:
    try:
        if stored.startswith(_ARGON2_PREFIX):
            return ph.verify(stored, plain)
        return _verify_legacy(plain, stored)
    except Exception:
        return False


def generate_access_code(length: int = ACCESS_CODE_LENGTH) -> str:
    return "".join(secrets.choice(ACCESS_CODE_ALPHABET) for _ in range(length))


class TokenSubject(Protocol):
    id: int
    username: str
    email: str
    role_id: int


@dataclass(frozen=True)
class SessionClaims:
    user_id: int
    username: str
    email: str
    role_id: int | None
    expires_at: datetime


class TokenService:
    """Signs and verifies the session JWT carried in the ``auth-token`` cookie."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = SESSION_TTL,
    ) -> None:
        if not secret:
            raise ValueError("JWT secret must be configured")
        self._secret = secret
        self._algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(settings.jwt_secret, settings.jwt_algo)

    def issue(self, user: TokenSubject, *, now: datetime | None = None) -> str:
        now = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user.id),
            "username": user.username,
            "email": user.email,
            "role_id": user.role_id,
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> SessionClaims | None:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.PyJWTError:
            return None

        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError):
            return None

        return SessionClaims(
            user_id=user_id,
            username=payload.get("username", ""),
            email=payload.get("email", ""),
            role_id=payload.get("role_id"),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
