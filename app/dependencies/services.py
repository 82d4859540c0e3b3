# app/dependencies/services.py
"""
FastAPI dependencies that assemble the auth service per request.

Process-wide clients (session factory, Redis client, notifier) live on
``app.state`` and are created by the application lifespan.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.auth.services.auth_service import AuthService
from app.auth.stores import ChallengeStore, CredentialStore
from app.dependencies.db import get_db


def get_challenge_store(request: Request) -> ChallengeStore:
    settings = request.app.state.settings
    return ChallengeStore(
        request.app.state.redis,
        ttl_seconds=settings.OTP_TTL_SECONDS,
        key_prefix=settings.OTP_KEY_PREFIX,
    )


def get_auth_service(
    request: Request,
    db: Session = Depends(get_db),
    challenges: ChallengeStore = Depends(get_challenge_store),
) -> AuthService:
    settings = request.app.state.settings
    return AuthService(
        credentials=CredentialStore(db),
        challenges=challenges,
        notifier=request.app.state.notifier,
        pepper=settings.AUTH_PEPPER,
        password_min_length=settings.PASSWORD_MIN_LENGTH,
        password_max_length=settings.PASSWORD_MAX_LENGTH,
    )
