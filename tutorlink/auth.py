# tutorlink/auth.py
"""
Bearer token verification.

Tokens are issued by the external identity provider; this module only
verifies them and turns the ``sub``/``role`` claims into an Actor.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
from pydantic import SecretStr

from .core.config import settings
from .core.enums import RoleName
from .principal import Actor

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _secret_value(secret: SecretStr | str) -> str:
    if isinstance(secret, SecretStr):
        return secret.get_secret_value()
    return secret


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": detail, "code": "UNAUTHORIZED"},
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and verify a JWT access token."""
    payload_raw = jwt.decode(
        token,
        _secret_value(settings.secret_key),
        algorithms=[settings.algorithm],
        options={"verify_aud": False},
    )
    return cast(Dict[str, Any], payload_raw)


def actor_from_claims(claims: Dict[str, Any]) -> Actor:
    """Build an Actor from verified claims; raises ValueError for missing or unknown values."""
    user_id = claims.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise ValueError("Token has no subject")
    role = RoleName(str(claims.get("role", "")).lower())
    return Actor(user_id=user_id, role=role)


def create_access_token(
    subject: str, role: RoleName | str, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Mint a token with the identity provider's claim shape.

    Used by tests and local tooling; production tokens come from the provider.
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=30))
    role_value = role.value if isinstance(role, RoleName) else role
    payload = {"sub": subject, "role": role_value, "exp": expire}
    return jwt.encode(payload, _secret_value(settings.secret_key), algorithm=settings.algorithm)


def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Actor:
    if credentials is None or not credentials.credentials:
        raise _credentials_exception("Not authenticated")
    try:
        claims = decode_access_token(credentials.credentials)
        return actor_from_claims(claims)
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired access token")
        raise _credentials_exception("Token has expired")
    except (jwt.PyJWTError, ValueError) as e:
        logger.info(f"Rejected access token: {str(e)}")
        raise _credentials_exception()
