"""
Password hashing and session token generation.
"""

import secrets

from passlib.context import CryptContext

SESSION_TOKEN_BYTES = 32

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def generate_session_token() -> str:
    """256 random bits, hex-encoded."""
    return secrets.token_hex(SESSION_TOKEN_BYTES)
