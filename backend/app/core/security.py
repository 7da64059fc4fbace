"""
Password hashing and JWT session utilities.

Passwords are stored as salted PBKDF2-HMAC-SHA256 digests in the form
``pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>``.
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone

import jwt

from app.core.settings import settings

ALGORITHM = "HS256"
HASH_SCHEME = "pbkdf2_sha256"
HASH_ITERATIONS = 100_000
SALT_BYTES = 16


def _derive(plain_password: str, salt: bytes, iterations: int) -> str:
    return hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, iterations).hex()


def hash_password(plain_password: str) -> str:
    salt = secrets.token_bytes(SALT_BYTES)
    digest = _derive(plain_password, salt, HASH_ITERATIONS)
    return f"{HASH_SCHEME}${HASH_ITERATIONS}${salt.hex()}${digest}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        scheme, iterations, salt_hex, digest = hashed_password.split("$")
        if scheme != HASH_SCHEME:
            return False
        candidate = _derive(plain_password, bytes.fromhex(salt_hex), int(iterations))
    except ValueError:
        return False
    return hmac.compare_digest(candidate, digest)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
