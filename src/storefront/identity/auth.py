"""Password hashing and admin bearer-token verification.

Tokens are HS256 JWTs carrying ``sub`` (user id) and ``role`` claims and
expire after ``access_token_expiry_hours``. Issuing tokens to people is
left to an external identity service; ``create_access_token`` exists for
operators and tests.
"""

import os
from datetime import UTC, datetime, timedelta

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from protean.exceptions import ConfigurationError

from storefront.domain import get_setting
from storefront.shared.errors import AuthError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ADMIN_ROLE = "ADMIN"

_password_hasher = PasswordHasher()
_bearer_scheme = HTTPBearer(auto_error=False, description="Admin access token")


def hash_password(password: str) -> str:
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHash):
        return False


def jwt_secret() -> str:
    """Signing secret from `JWT_SECRET` or `[custom] jwt_secret`. An empty secret is a configuration error."""
    secret = os.getenv("JWT_SECRET") or get_setting("jwt_secret")
    if not secret:
        raise ConfigurationError("JWT_SECRET is not configured; refusing to sign or verify access tokens")
    return secret


def _algorithm() -> str:
    return get_setting("jwt_algorithm", "HS256")


def create_access_token(user_id, role, expires_in: timedelta | None = None) -> str:
    if expires_in is None:
        expires_in = timedelta(hours=get_setting("access_token_expiry_hours", 24))
    now = datetime.now(UTC)
    claims = {
        "sub": str(user_id),
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    return jwt.encode(claims, jwt_secret(), algorithm=_algorithm())


def decode_access_token(token: str) -> dict:
    """Verify signature and expiry; raise ``AuthError`` (401) otherwise."""
    try:
        claims = jwt.decode(token, jwt_secret(), algorithms=[_algorithm()])
    except ExpiredSignatureError as exc:
        raise AuthError("Access token has expired", code="TOKEN_EXPIRED") from exc
    except JWTError as exc:
        raise AuthError("Access token is invalid", code="TOKEN_INVALID") from exc

    if not claims.get("sub"):
        raise AuthError("Access token has no subject", code="TOKEN_INVALID")
    return claims


def require_admin(credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme)) -> dict:
    """FastAPI dependency guarding admin routes. Returns the token claims."""
    if credentials is None or not credentials.credentials:
        raise AuthError("Authentication required")

    claims = decode_access_token(credentials.credentials)
    if claims.get("role") != ADMIN_ROLE:
        logger.warning("admin_access_denied", user_id=claims.get("sub"), role=claims.get("role"))
        raise AuthError("Admin access required", status_code=403)
    return claims
