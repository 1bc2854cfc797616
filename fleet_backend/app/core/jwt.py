"""
Access tokens for dashboard sessions.

Tokens carry the user's email (``sub``) and id only; the role is read
from ``user_roles`` on every request so a role change applies at once.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from fleet_backend.app.core.config import settings


def token_lifetime() -> timedelta:
    return timedelta(minutes=settings.access_token_expire_minutes)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a session token.

    ``data`` should hold ``sub`` (email) and ``user_id``; ``exp`` and a
    random ``jti`` are added here, e.g.
    ``{"sub": "manager@safirismart.co.ke", "user_id": 1, "exp": ..., "jti": "..."}``.
    """
    claims = dict(data)
    claims["exp"] = datetime.now(timezone.utc) + (expires_delta or token_lifetime())
    # two tokens issued in the same second must still revoke independently
    claims["jti"] = uuid.uuid4().hex
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Claims of a valid, unexpired token; None for anything else."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
