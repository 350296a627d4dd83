"""Request context middleware: one pass for observability, upload guard and rate limiting.

Per request:
- Generate or propagate ``X-Request-ID`` (also exposed to log records)
- Reject uploads whose declared ``Content-Length`` exceeds ``MAX_UPLOAD_BYTES``
- Enforce a per-client token bucket (owner id from the bearer token, else IP)
- Measure duration and log one structured line

``check_rate_limit`` is a pure function so it can be tested on its own.
"""

import logging
import threading
import time
import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..core.config import settings
from ..core.logging_config import request_id_var
from ..core.token_factory import decode_token
from ..exceptions import ErrorCode, PayloadTooLargeError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Rate limiting: pure function + in-memory bucket
# ---------------------------------------------------------------------------

# {client_key: (available_tokens, last_refill_timestamp)}
_rate_buckets: dict[str, tuple[float, float]] = {}
_rate_lock = threading.Lock()

# Stale keys are swept every _EVICT_EVERY calls.
_rate_call_count = 0
_EVICT_EVERY = 100
_EVICT_AGE = 120.0


def check_rate_limit(
    bucket: dict[str, tuple[float, float]],
    key: str,
    max_per_minute: int,
    now: Optional[float] = None,
) -> tuple[bool, float]:
    """Take one token for *key* from the bucket if one is available.

    Args:
        bucket: Per-key state, modified in place.
        key: Client identifier (owner id or IP address).
        max_per_minute: Sustained rate cap; ``<= 0`` disables limiting.
        now: Injectable clock for tests. Defaults to ``time.monotonic()``.

    Returns:
        ``(allowed, retry_after)`` where *retry_after* is the number of
        seconds until the next token, or 0.0 when allowed.
    """
    global _rate_call_count

    if max_per_minute <= 0:
        return True, 0.0

    if now is None:
        now = time.monotonic()

    _rate_call_count += 1
    if _rate_call_count % _EVICT_EVERY == 0:
        cutoff = now - _EVICT_AGE
        for stale_key in [k for k, (_, ts) in bucket.items() if ts < cutoff]:
            del bucket[stale_key]

    refill_per_second = max_per_minute / 60.0

    if key in bucket:
        tokens, last_refill = bucket[key]
        tokens = min(max_per_minute, tokens + (now - last_refill) * refill_per_second)
    else:
        tokens = float(max_per_minute)

    if tokens >= 1.0:
        bucket[key] = (tokens - 1.0, now)
        return True, 0.0

    bucket[key] = (tokens, now)
    return False, (1.0 - tokens) / refill_per_second


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

# Health probes and docs are never throttled.
_EXEMPT_PATHS = frozenset({"/", "/health", "/docs", "/redoc", "/openapi.json"})

_UPLOAD_PATH_SUFFIX = "/items/upload"


def _client_key(request: Request) -> str:
    """Rate-limit key: ``owner:<sub>`` for a valid bearer token, else the client IP."""
    authorization = request.headers.get("authorization", "")
    if settings.auth_enabled and authorization.lower().startswith("bearer "):
        payload = decode_token(
            authorization[7:].strip(), settings.jwt_secret_key, settings.jwt_algorithm
        )
        if payload is not None:
            return f"owner:{payload.sub}"

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


def _declared_length(request: Request) -> Optional[int]:
    value = request.headers.get("content-length")
    if value is None or not value.isdigit():
        return None
    return int(value)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Request id, upload size guard, rate limiting, timing and access log."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:16]
        request_id_var.set(rid)
        path = request.url.path

        # Multipart overhead is small; the route re-checks the file part itself.
        if request.method == "POST" and path.endswith(_UPLOAD_PATH_SUFFIX):
            declared = _declared_length(request)
            if declared is not None and declared > settings.max_upload_bytes + 64 * 1024:
                exc = PayloadTooLargeError(declared, settings.max_upload_bytes)
                logger.info("Upload rejected by size", extra={"path": path, "size": declared})
                return JSONResponse(
                    status_code=exc.status_code,
                    content=exc.to_dict(),
                    headers={"X-Request-ID": rid},
                )

        if path not in _EXEMPT_PATHS:
            key = _client_key(request)
            with _rate_lock:
                allowed, retry_after = check_rate_limit(
                    _rate_buckets, key, settings.rate_limit_per_minute
                )
            if not allowed:
                logger.warning(
                    "Rate limit exceeded",
                    extra={"client": key, "path": path, "retry_after": round(retry_after, 1)},
                )
                return JSONResponse(
                    status_code=429,
                    content={
                        "error": ErrorCode.RATE_LIMITED.value,
                        "message": "Too many requests",
                        "details": {"retry_after": round(retry_after, 1)},
                    },
                    headers={
                        "Retry-After": str(int(retry_after) + 1),
                        "X-Request-ID": rid,
                    },
                )

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        response.headers["X-Request-ID"] = rid
        response.headers["X-Response-Time"] = f"{duration_ms}ms"

        logger.info(
            f"{request.method} {path} {response.status_code}",
            extra={
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        return response
