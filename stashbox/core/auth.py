"""Authentication dependency.

``require_auth`` resolves the caller's owner id from the bearer token. Every
file-system route depends on it; the owner id scopes every query that follows.

When ``settings.auth_enabled`` is False the dependency returns a context for
``settings.dev_user_id`` so local development needs no identity provider.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .token_factory import decode_token
from ..exceptions import AuthenticationError

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Resolved identity of the caller."""

    user_id: str


def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> AuthContext:
    """Require a valid token and return the caller's AuthContext."""
    if not settings.auth_enabled:
        return AuthContext(user_id=settings.dev_user_id)

    if credentials is None:
        raise AuthenticationError("Missing authentication token")

    payload = decode_token(
        credentials.credentials, settings.jwt_secret_key, settings.jwt_algorithm
    )
    if payload is None:
        logger.info("Rejected bearer token")
        raise AuthenticationError("Invalid or expired token")

    return AuthContext(user_id=payload.sub)
