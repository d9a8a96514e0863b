# headerpolicy/main.py

"""
FastAPI application wiring for the headerpolicy middleware.

`create_app()` returns a minimal service with the security-headers middleware
installed and a liveness probe, which is handy for smoke-testing a policy
(`curl -i /healthz`) before copying the wiring into a real service.
"""

from fastapi import FastAPI

from headerpolicy.config import settings
from headerpolicy.logging_config import configure_logging
from headerpolicy.middleware_security import SecurityHeadersMiddleware
from headerpolicy.policy import PolicySet


def create_app(policy: PolicySet | None = None) -> FastAPI:
    """
    Build a FastAPI app that applies `policy` (or the settings-driven policy).
    """
    app = FastAPI(title="headerpolicy", version="0.1.0")
    app.add_middleware(SecurityHeadersMiddleware, policy=policy)

    @app.get("/healthz", tags=["health"])
    async def healthz():
        """
        Liveness probe. No external dependencies.
        """
        return {"status": "ok"}

    return app


configure_logging(settings.log_level)
app = create_app()
