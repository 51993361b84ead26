"""Request rate limiting

Two windows: a general per-IP limit shared by every project route, and a
stricter limit on the endpoints that call the hosted AI providers, keyed by
the caller's user id when a valid token is presented.

Each app builds its own limiter from its settings; counters live in that
limiter's storage for the lifetime of the app.
"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from storyboard.core.config import Settings
from storyboard.core.security import decode_access_token

API_LIMIT_MESSAGE = "Too many requests from this IP, please try again after 15 minutes"
AI_LIMIT_MESSAGE = "AI generation limit reached for this hour. Please try again later."


def ai_rate_limit_key(request: Request) -> str:
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token:
        user_id = decode_access_token(token.strip(), request.app.state.settings)
        if user_id is not None:
            return f"user:{user_id}"
    return get_remote_address(request)


def create_limiter(settings: Settings) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        enabled=settings.RATE_LIMIT_ENABLED,
    )


class RateLimits:
    """The route decorators for one limiter.

    ``api`` is applied to every project and scene route, ``ai`` additionally
    to the routes that call an AI provider. Each is a shared limit, so all
    routes decorated with it draw from one counter per key.
    """

    def __init__(self, limiter: Limiter, settings: Settings):
        self.limiter = limiter
        self.api = limiter.shared_limit(
            settings.API_RATE_LIMIT,
            scope="api",
            error_message=API_LIMIT_MESSAGE,
        )
        self.ai = limiter.shared_limit(
            settings.AI_RATE_LIMIT,
            scope="ai",
            key_func=ai_rate_limit_key,
            error_message=AI_LIMIT_MESSAGE,
        )
