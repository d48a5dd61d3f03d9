"""
Security utilities: password hashing, password rules, and JWT tokens.

This module centralizes all credential handling so it's easy to audit and
update. Three concerns are handled here:

1. PASSWORD HASHING (Argon2)
   - Passwords are never stored in plaintext
   - We use passlib's CryptContext for safe, high-level Argon2 operations

2. PASSWORD RULES
   - At least MINIMUM_PASSWORD_LENGTH characters
   - At least one lowercase, one uppercase, one digit and one special
     character out of "@$!%*?&"; no other characters are accepted
   - generate_password() produces a compliant password (used for resets)

3. JWT TOKENS (JSON Web Tokens)
   - After login, the caller receives a signed JWT containing their id and
     role ("user" or "admin")
   - The token is signed with SECRET_KEY using HS256 (HMAC-SHA256)
   - Tokens expire after ACCESS_TOKEN_EXPIRE_MINUTES (default: 30 min)
"""

import re
import secrets
import string
from datetime import datetime, timedelta, timezone

from jose import jwt
from passlib.context import CryptContext

from dispobank.config import settings


# ---------------------------------------------------------------------------
# 1. Password Hashing (Argon2)
# ---------------------------------------------------------------------------

# "deprecated='auto'" lets passlib migrate old hashes transparently if the
# active scheme ever changes.
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    """Hash a plaintext password using Argon2id."""
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against a stored Argon2 hash."""
    return pwd_context.verify(plain_password, hashed_password)


# ---------------------------------------------------------------------------
# 2. Password Rules
# ---------------------------------------------------------------------------

SPECIAL_CHARACTERS = "@$!%*?&"
PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]+$"
)


def validate_password(password: str) -> tuple[bool, str]:
    """
    Check a plaintext password against the password rules.

    Returns:
        (True, "") if the password is acceptable, otherwise (False, reason).
    """
    if len(password) < settings.MINIMUM_PASSWORD_LENGTH:
        return False, (
            f"Password must be at minimum '{settings.MINIMUM_PASSWORD_LENGTH}' characters."
        )
    if not PASSWORD_PATTERN.match(password):
        return False, (
            "Password must contain at minimum one lowercase, one uppercase, "
            "one special character and one digit."
        )
    return True, ""


def generate_password() -> str:
    """
    Generate a random password that satisfies validate_password().

    Characters cycle through the four required classes so every class is
    present, then the result is shuffled.
    """
    classes = [string.ascii_lowercase, string.ascii_uppercase, string.digits, SPECIAL_CHARACTERS]
    chars = [
        secrets.choice(classes[i % len(classes)])
        for i in range(settings.MINIMUM_PASSWORD_LENGTH)
    ]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


# ---------------------------------------------------------------------------
# 3. JWT Tokens
# ---------------------------------------------------------------------------

ROLE_USER = "user"
ROLE_ADMIN = "admin"


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """
    Create a signed JWT access token.

    The token payload contains:
      - "sub": The subject (user or administrator id as string)
      - "role": "user" or "admin"
      - "exp": Expiration timestamp — after this, the token is rejected
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decode and verify a JWT access token.

    Raises:
        JWTError: If the token is expired, tampered with, or invalid.
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
