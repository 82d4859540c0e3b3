# app/auth/stores.py
"""
Adapters for the two stores the auth service coordinates.

CredentialStore wraps a per-request SQLAlchemy session over the users table.
ChallengeStore wraps a shared Redis client holding one reset OTP per email
with a TTL. Driver-level failures surface as StoreUnavailable.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import redis
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from app.auth.models import User
from app.core.errors import DuplicateUser, StoreUnavailable

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Durable credential store
# ---------------------------------------------------------------------------
class CredentialStore:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except DBAPIError as exc:
            self.db.rollback()
            logger.error("User store failure during %s: %s", action, exc)
            raise StoreUnavailable() from exc

    def get_by_email(self, email: str) -> Optional[User]:
        with self._guard("lookup"):
            return self.db.query(User).filter(User.email == email).first()

    def create(self, email: str, password_hash: str) -> User:
        """Insert a new user; a taken email raises DuplicateUser."""
        user = User(email=email, password_hash=password_hash)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            # Unique constraint violation on email
            raise DuplicateUser() from exc
        except DBAPIError as exc:
            self.db.rollback()
            logger.error("User store failure during insert: %s", exc)
            raise StoreUnavailable() from exc
        self.db.refresh(user)
        return user

    def update_password_hash(self, user: User, password_hash: str) -> None:
        with self._guard("password update"):
            user.password_hash = password_hash
            self.db.add(user)
            self.db.commit()


# ---------------------------------------------------------------------------
# Ephemeral challenge store
# ---------------------------------------------------------------------------
class ChallengeStore:
    """
    One pending reset OTP per email.

    ``upsert`` overwrites any existing challenge and restarts its TTL, so only
    the most recently issued OTP is ever valid.
    """

    def __init__(self, client: redis.Redis, ttl_seconds: int = 900, key_prefix: str = ""):
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix

    def _key(self, email: str) -> str:
        return f"{self.key_prefix}{email}"

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except redis.RedisError as exc:
            logger.error("OTP store failure during %s: %s", action, exc)
            raise StoreUnavailable() from exc

    def upsert(self, email: str, otp: str) -> None:
        with self._guard("upsert"):
            self.client.set(self._key(email), otp, ex=self.ttl_seconds)

    def get(self, email: str) -> Optional[str]:
        with self._guard("get"):
            value = self.client.get(self._key(email))
        if isinstance(value, bytes):
            value = value.decode()
        return value

    def consume(self, email: str) -> bool:
        """Delete the challenge; False when it was already gone."""
        with self._guard("delete"):
            return self.client.delete(self._key(email)) == 1

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as exc:
            logger.error("OTP store unreachable: %s", exc)
            return False
