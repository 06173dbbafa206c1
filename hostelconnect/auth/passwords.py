"""Password hashing, verification and the signup password policy.

Uses bcrypt directly instead of passlib to avoid compatibility issues
between passlib and bcrypt 4.x+.
"""

import re

import bcrypt

MIN_PASSWORD_LENGTH = 8

_HAS_LETTER = re.compile(r"[A-Za-z]")
_HAS_DIGIT = re.compile(r"\d")


def hash_password(password: str) -> str:
    """Hash a plain-text password using bcrypt."""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain-text password against a bcrypt hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def password_problem(password: str) -> str | None:
    """Return why ``password`` is too weak, or None if it is acceptable.

    Policy: at least eight characters with at least one letter and one digit.
    """
    if len(password) < MIN_PASSWORD_LENGTH or not _HAS_LETTER.search(password) or not _HAS_DIGIT.search(password):
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters with 1 letter and 1 number"
    return None
