"""Pure functions for creating and decoding HS256 bearer tokens.

The identity provider in front of Stashbox mints these; ``create_token`` is
kept here for tests and local tooling that need a signed token.
"""

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

_ISSUER = "stashbox"


@dataclass(frozen=True)
class TokenPayload:
    """Decoded token payload. ``sub`` is the owner id."""
    sub: str
    exp: datetime


def create_token(
    subject: str,
    secret: str,
    algorithm: str = "HS256",
    expires_hours: int = 24,
) -> str:
    """Create a signed token for ``subject``.

    Args:
        subject: Owner id placed in the ``sub`` claim.
        secret: HMAC signing key.
        algorithm: Only HS256 supported.
        expires_hours: Hours until expiry. Negative values yield an expired token.
    """
    if algorithm != "HS256":
        raise ValueError(f"Unsupported algorithm: {algorithm}")

    now = time.time()
    payload = {
        "sub": subject,
        "iat": int(now),
        "exp": int(now + expires_hours * 3600),
        "iss": _ISSUER,
    }

    header = {"alg": "HS256", "typ": "JWT"}
    segments = [
        _b64encode(json.dumps(header).encode()),
        _b64encode(json.dumps(payload).encode()),
    ]
    segments.append(_b64encode(_sign(secret, b".".join(segments))))
    return b".".join(segments).decode()


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> Optional[TokenPayload]:
    """Decode and validate a token.

    Returns ``None`` on any validation failure (bad signature, expired,
    malformed, missing subject) so the caller decides how to respond.
    """
    if algorithm != "HS256":
        return None

    try:
        parts = token.encode().split(b".")
        if len(parts) != 3:
            return None

        header_seg, payload_seg, signature_seg = parts
        expected = _sign(secret, header_seg + b"." + payload_seg)
        if not hmac.compare_digest(expected, _b64decode(signature_seg)):
            return None

        payload = json.loads(_b64decode(payload_seg))

        exp = payload.get("exp", 0)
        if time.time() > exp:
            return None

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            return None

        return TokenPayload(
            sub=subject,
            exp=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
    except (json.JSONDecodeError, KeyError, ValueError, IndexError, TypeError):
        return None


def _sign(secret: str, signing_input: bytes) -> bytes:
    return hmac.new(secret.encode(), signing_input, hashlib.sha256).digest()


def _b64encode(data: bytes) -> bytes:
    return base64.urlsafe_b64encode(data).rstrip(b"=")


def _b64decode(data: bytes) -> bytes:
    padding = 4 - len(data) % 4
    if padding != 4:
        data += b"=" * padding
    return base64.urlsafe_b64decode(data)
