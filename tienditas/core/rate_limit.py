"""Rate limiting for the endpoints that call the language model."""

from slowapi import Limiter
from starlette.requests import Request

# Storefront chat is anonymous; the palette assistant is admin-only but costs more per call.
CHAT_RATE_LIMIT = "10/minute"
PALETTE_RATE_LIMIT = "5/minute"


def _get_real_client_ip(request: Request) -> str:
    """Extract the real client IP behind a reverse proxy."""
    return (
        request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
        or (request.client.host if request.client else "127.0.0.1")
    )


limiter = Limiter(key_func=_get_real_client_ip)
