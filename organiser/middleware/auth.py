"""Authentication middleware for JWT validation."""

import re
from typing import Optional

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from organiser.config.settings import settings
from organiser.middleware.error_handler import error_response
from organiser.services.token import decode_token, create_token, should_refresh_token

logger = structlog.get_logger()

# Paths that don't require authentication
SKIP_AUTH_PATHS = [
    r"^/api/v1/auth/(register|login|refresh)$",
    r"^/api/v1/health",
    r"^/health",
    r"^/$",
    r"^/api/docs",
    r"^/api/openapi\.json",
    r"^/api/redoc",
]

SKIP_AUTH_PATTERNS = [re.compile(p) for p in SKIP_AUTH_PATHS]

REFRESHED_TOKEN_HEADER = "X-Refreshed-Token"


def should_skip_auth(path: str) -> bool:
    """Check if path should skip authentication."""
    return any(pattern.match(path) for pattern in SKIP_AUTH_PATTERNS)


def get_token_from_request(request: Request) -> Optional[str]:
    """Extract JWT token from the Authorization header."""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]
    return None


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware that validates JWT tokens on protected routes."""

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process request and validate authentication."""
        if request.method == "OPTIONS" or should_skip_auth(request.url.path):
            return await call_next(request)

        token = get_token_from_request(request)
        if not token:
            return error_response(401, "UNAUTHORIZED", "Not authenticated")

        try:
            payload = decode_token(token)
        except Exception as e:
            logger.info("Rejected token", error=str(e), path=request.url.path)
            return error_response(401, "UNAUTHORIZED", str(e))

        # Store user info in request state
        request.state.user = payload
        request.state.user_id = payload.get("sub")
        request.state.user_roles = payload.get("roles", [])

        response = await call_next(request)

        # Rolling token refresh
        if should_refresh_token(payload):
            claims = {k: v for k, v in payload.items() if k not in ("exp", "iat")}
            response.headers[REFRESHED_TOKEN_HEADER] = create_token(claims)

        return response
