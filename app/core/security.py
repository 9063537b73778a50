import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from jose import jwt
from app.core import config

logger = logging.getLogger(__name__)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode an identity-provider token and return its claims.

    Raises jose.JWTError when the token is malformed, expired or signed with
    another key.
    """
    return jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a token in the identity provider's format (local development and tests)."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=60))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)
