"""Credentials — bcrypt password hashing and HMAC-signed JWT access tokens.

Invariants:
    - Password hashes are bcrypt, never stored or compared in plaintext
    - Tokens carry exactly {user_id: int, exp: unix seconds}
    - decode_access_token raises AuthenticationError, never a PyJWT exception
"""

import time
from dataclasses import dataclass

import bcrypt
import jwt

from app.core.errors import AuthenticationError

ALGORITHM = "HS256"
ACCEPTED_ALGORITHMS = ["HS256", "HS384", "HS512"]
DEFAULT_EXPIRY_SECONDS = 24 * 3600


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(hashed_password: str, password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), hashed_password.encode())
    except ValueError:
        # malformed stored hash
        return False


@dataclass(frozen=True)
class AccessToken:
    token: str
    expires_at: int


def issue_access_token(
    user_id: int, secret: str, expires_in: int, now: float | None = None,
) -> AccessToken:
    """Sign a token for `user_id` valid for `expires_in` seconds."""
    if expires_in <= 0:
        expires_in = DEFAULT_EXPIRY_SECONDS
    issued = int(now if now is not None else time.time())
    expires_at = issued + expires_in
    token = jwt.encode(
        {"user_id": user_id, "exp": expires_at}, secret, algorithm=ALGORITHM,
    )
    return AccessToken(token=token, expires_at=expires_at)


def decode_access_token(token: str, secret: str) -> int:
    """Verify `token` and return its user id."""
    try:
        claims = jwt.decode(token, secret, algorithms=ACCEPTED_ALGORITHMS)
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("invalid or expired token")

    user_id = claims.get("user_id")
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise AuthenticationError("invalid user ID in token")
    return user_id
