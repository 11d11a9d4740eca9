"""
Security utilities for JWT session tokens and credential hashing.

Access and refresh tokens are HS256 JWTs carrying {sub, jti}, each token
class signed with its own secret. Passwords and refresh-token values are
hashed with bcrypt (SHA-256 pre-hashed, so a whole JWT is covered rather
than only its first 72 bytes).
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings
from app.core.exceptions import InvalidTokenError

ACCESS_TOKEN_EXPIRES = timedelta(minutes=15)
REFRESH_TOKEN_EXPIRES = timedelta(days=7)
DEFAULT_ALGORITHM = "HS256"

# Credential hashing context (bcrypt over a SHA-256 digest)
pwd_context = CryptContext(
    schemes=["bcrypt_sha256"],
    deprecated="auto",
    bcrypt_sha256__rounds=settings.BCRYPT_ROUNDS,
)


@dataclass(frozen=True)
class TokenPayload:
    """Verified claims of a session token."""
    sub: str
    jti: str
    exp: Optional[int] = None


def hash_secret(plaintext: str) -> str:
    """One-way hash of a password or refresh token value."""
    return pwd_context.hash(plaintext)


def verify_secret(plaintext: str, hashed: str) -> bool:
    """Check a plaintext value against a digest produced by hash_secret."""
    try:
        return pwd_context.verify(plaintext, hashed)
    except (ValueError, TypeError):
        # Unparseable digest
        return False


def dummy_verify() -> None:
    """Spend the time of one verification, used when no user matched."""
    pwd_context.dummy_verify()


def get_password_hash(password: str) -> str:
    return hash_secret(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return verify_secret(plain_password, hashed_password)


def generate_jti() -> str:
    """Generate a fresh unique token identifier."""
    return str(uuid.uuid4())


def _encode(user_id: str, jti: str, secret: str, expires_delta: timedelta, algorithm: str) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": str(user_id),
        "jti": jti,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def create_access_token(
    user_id: str,
    jti: str,
    secret: str,
    expires_delta: Optional[timedelta] = None,
    algorithm: str = DEFAULT_ALGORITHM,
) -> str:
    """
    Create a short-lived JWT access token.

    Args:
        user_id: Subject of the token
        jti: Unique token identifier
        secret: Access token signing secret
        expires_delta: Optional lifetime (default: 15 minutes)
        algorithm: Signing algorithm

    Returns:
        Encoded JWT access token
    """
    return _encode(user_id, jti, secret, expires_delta or ACCESS_TOKEN_EXPIRES, algorithm)


def create_refresh_token(
    user_id: str,
    jti: str,
    secret: str,
    expires_delta: Optional[timedelta] = None,
    algorithm: str = DEFAULT_ALGORITHM,
) -> str:
    """
    Create a long-lived JWT refresh token.

    Same shape as the access token, signed with the refresh secret and
    valid for 7 days unless expires_delta is given.
    """
    return _encode(user_id, jti, secret, expires_delta or REFRESH_TOKEN_EXPIRES, algorithm)


def decode_token(
    token: str,
    secret: str,
    algorithm: str = DEFAULT_ALGORITHM,
    verify_exp: bool = True,
) -> TokenPayload:
    """
    Decode and validate a JWT token.

    Args:
        token: The JWT token to decode
        secret: Secret of the token class the caller expects
        algorithm: Accepted signing algorithm
        verify_exp: Reject expired tokens (default: True)

    Returns:
        The verified sub/jti claims

    Raises:
        InvalidTokenError: If the signature is invalid, the token is expired
            or the sub/jti claims are missing
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"verify_exp": verify_exp},
        )
    except ExpiredSignatureError:
        raise InvalidTokenError("Token expired")
    except JWTError:
        raise InvalidTokenError("Invalid token")

    sub = payload.get("sub")
    jti = payload.get("jti")
    if not sub or not jti:
        raise InvalidTokenError("Token is missing required claims")

    return TokenPayload(sub=str(sub), jti=str(jti), exp=payload.get("exp"))
