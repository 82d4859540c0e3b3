# app/auth/services/auth_service.py
"""
Registration, login and the OTP password-reset flow.

The service owns no connections: the credential store, the challenge store and
the notifier are handed to it at construction time (see app.dependencies).

Reset protocol, per email:

    NONE --request--> PENDING --reset ok / TTL expiry--> NONE
                      PENDING --request--> PENDING (fresh OTP, TTL restarted)

On a successful reset the challenge is deleted *before* the new password hash
is committed. If the credential write then fails, the old password stays and
the user has to request a new OTP; the consumed OTP can never be replayed.
"""

import logging
from typing import Optional

from app.auth.stores import ChallengeStore, CredentialStore
from app.core.errors import (
    InvalidCredentials,
    InvalidOTP,
    UserNotFound,
    ValidationError,
)
from app.core.security import generate_otp, hash_password, otp_matches, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        credentials: CredentialStore,
        challenges: ChallengeStore,
        notifier,
        pepper: str = "",
        password_min_length: int = 3,
        password_max_length: int = 128,
    ):
        self.credentials = credentials
        self.challenges = challenges
        self.notifier = notifier
        self.pepper = pepper
        self.password_min_length = password_min_length
        self.password_max_length = password_max_length

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _check_new_password(self, password: str, field: str = "password") -> None:
        if len(password) < self.password_min_length:
            raise ValidationError(
                f"{field}: must be at least {self.password_min_length} characters"
            )
        if len(password) > self.password_max_length:
            raise ValidationError(
                f"{field}: must be at most {self.password_max_length} characters"
            )

    # ------------------------------------------------------------------
    # Registration / login
    # ------------------------------------------------------------------

    def register(self, email: str, password: str) -> None:
        """Create a user; raises DuplicateUser if the email is taken."""
        self._check_new_password(password)
        self.credentials.create(email, hash_password(password, self.pepper))
        logger.info("Registered user %s", email)

    def login(self, email: str, password: str) -> None:
        """
        Check a password against the stored hash.

        Raises UserNotFound for an unknown email and InvalidCredentials on a
        mismatch. No session or token is issued.
        """
        user = self.credentials.get_by_email(email)
        if user is None:
            logger.info("Login for unknown email %s", email)
            raise UserNotFound()
        if not verify_password(password, user.password_hash, self.pepper):
            logger.info("Login with bad password for %s", email)
            raise InvalidCredentials()
        logger.info("Login successful for %s", email)

    # ------------------------------------------------------------------
    # Password reset
    # ------------------------------------------------------------------

    def request_password_reset(self, email: str) -> None:
        """
        Issue a fresh OTP for a known user and email it.

        Any previous OTP for the email is overwritten. If delivery fails the
        new challenge stays stored, so calling this again is safe.
        """
        if self.credentials.get_by_email(email) is None:
            raise UserNotFound()

        otp = generate_otp()
        self.challenges.upsert(email, otp)
        logger.info("Issued password reset OTP for %s", email)

        self.notifier.send_otp(email, otp)

    def reset_password(self, email: str, otp: str, new_password: str) -> None:
        self._check_new_password(new_password, field="newPassword")

        stored: Optional[str] = self.challenges.get(email)
        if stored is None or not otp_matches(stored, otp):
            logger.info("Rejected reset OTP for %s", email)
            raise InvalidOTP()

        user = self.credentials.get_by_email(email)
        if user is None:
            raise UserNotFound()

        new_hash = hash_password(new_password, self.pepper)

        # A concurrent reset may have consumed the same OTP first
        if not self.challenges.consume(email):
            raise InvalidOTP()

        self.credentials.update_password_hash(user, new_hash)
        logger.info("Password reset for %s", email)
