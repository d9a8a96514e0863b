# headerpolicy/middleware_security.py

"""
Security middleware that stamps a PolicySet onto every HTTP response.

For each request it:
- Awaits the downstream handler exactly once
- Applies the configured PolicySet to the returned response's headers
- Returns that same response (body and status untouched)

If the downstream handler raises, the exception propagates as-is and no
header is written.

Example usage:
    app.add_middleware(SecurityHeadersMiddleware)                       # from settings
    app.add_middleware(SecurityHeadersMiddleware, policy=build_policy("api"))
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from headerpolicy.builder import policy_from_settings
from headerpolicy.config import settings
from headerpolicy.policy import PolicySet

logger = logging.getLogger("headerpolicy")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Applies a shared, read-only PolicySet to all responses.
    """
    def __init__(self, app: ASGIApp, policy: PolicySet | None = None):
        """
        Args:
            app: ASGI application instance.
            policy (PolicySet | None): Policy to apply. Built from environment
                settings when omitted.
        """
        super().__init__(app)
        self.policy = policy if policy is not None else policy_from_settings(settings)

        logger.info(
            "security headers policy loaded",
            extra={
                "headers": sorted(self.policy.header_map()),
                "transport_security": self.policy.transport_security,
            },
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        self.policy.apply(response)
        return response
