"""Rate limiting for the public write endpoints (orders, contact form)."""

from slowapi import Limiter
from starlette.requests import Request


def client_ip(request: Request) -> str:
    """Best-effort client IP, preferring proxy headers over the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    return (
        request.headers.get("CF-Connecting-IP")
        or request.headers.get("X-Real-IP")
        or forwarded
        or (request.client.host if request.client else "127.0.0.1")
    )


limiter = Limiter(key_func=client_ip)
