"""Password hashing and access tokens for enquiry service accounts.

Tokens are HS256 JWTs whose subject is the numeric user id. The role and
email claims are informational; callers re-read the account from the
database before trusting them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Union

from passlib.context import CryptContext
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from enquiry_svc import config
from enquiry_svc.models.enums import UserRole

_logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    role: UserRole
    email: Optional[str]
    expires_at: datetime

    def to_payload(self) -> Dict[str, object]:
        payload: Dict[str, object] = {"sub": str(self.user_id), "role": self.role.value, "exp": self.expires_at}
        if self.email:
            payload["email"] = self.email
        return payload


def _require_text(value: object, name: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{name} must be a non-empty string")
    return value


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a login password against a stored hash.

    Empty or non-string arguments raise ValueError. A malformed stored hash
    counts as a mismatch.
    """
    _require_text(plain_password, "plain_password")
    _require_text(hashed_password, "hashed_password")
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        _logger.error(e, exc_info=True)
        return False


def get_password_hash(password: str) -> str:
    return pwd_context.hash(_require_text(password, "password"))


def create_access_token(
    user_id: int,
    role: Union[UserRole, str],
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a token for ``user_id`` acting as ``role``."""
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise ValueError("user_id must be an integer")

    lifetime = expires_delta if expires_delta is not None else timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = TokenClaims(
        user_id=user_id,
        role=UserRole(role),
        email=email,
        expires_at=datetime.now(timezone.utc) + lifetime,
    )
    return jwt.encode(claims.to_payload(), config.SECRET_KEY, algorithm=config.ALGORITHM)


def create_user_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Issue an access token identifying the given user."""
    return create_access_token(user.id, user.role, user.email, expires_delta)


def decode_access_token(token: str) -> Optional[TokenClaims]:
    """Verify ``token`` and return its claims.

    Returns None for anything that is not a live token signed by this
    service with an integer subject and a known role.
    """
    if not isinstance(token, str) or not token:
        return None

    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except ExpiredSignatureError:
        _logger.info("Rejected expired access token")
        return None
    except JWTError as e:
        _logger.warning("Rejected access token: %s", e)
        return None

    try:
        return TokenClaims(
            user_id=int(payload["sub"]),
            role=UserRole(payload["role"]),
            email=payload.get("email"),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError) as e:
        _logger.warning("Access token has malformed claims: %s", e)
        return None
