# core/security.py
"""
Credential hashing and one-time password helpers.

Passwords are hashed with Argon2id (passlib) plus an optional server-side
pepper. The pepper is concatenated so it never travels with a DB dump; the
same pepper must be supplied for verification.
"""

import secrets

from passlib.exc import UnknownHashError
from passlib.hash import argon2

OTP_MIN = 100000
OTP_MAX = 999999


# ----------------------------------------------------------------------
# Password hashing
# ----------------------------------------------------------------------

def hash_password(plain_password: str, pepper: str = "") -> str:
    """Hash password using Argon2id with optional server-side pepper."""
    return argon2.hash(plain_password + pepper)


def verify_password(plain_password: str, hashed_password: str, pepper: str = "") -> bool:
    """
    Verify password against an Argon2id hash in constant time.

    A malformed stored hash counts as a mismatch rather than an error.
    """
    try:
        return argon2.verify(plain_password + pepper, hashed_password)
    except (ValueError, TypeError, UnknownHashError):
        return False


# ----------------------------------------------------------------------
# One-time passwords
# ----------------------------------------------------------------------

def generate_otp() -> str:
    """Return a 6-digit OTP sampled uniformly from 100000..999999."""
    return str(secrets.randbelow(OTP_MAX - OTP_MIN + 1) + OTP_MIN)


def otp_matches(stored: str, supplied: str) -> bool:
    """Exact string comparison that does not leak timing information."""
    return secrets.compare_digest(stored.encode(), supplied.encode())
