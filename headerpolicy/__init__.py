# headerpolicy/__init__.py

"""
Response-header security policies for Starlette/FastAPI services.

Public entry points:
- `build_policy()` / `PolicyMode` to assemble a policy
- `ContentTypeOptionsRule`, `ContentSecurityPolicyRule` to override a mode's defaults
- `SecurityHeadersMiddleware` to apply a policy to every response

    from headerpolicy import SecurityHeadersMiddleware, build_policy

    app.add_middleware(SecurityHeadersMiddleware, policy=build_policy("api"))
"""

from headerpolicy.builder import PolicyMode, build_policy, policy_from_settings
from headerpolicy.exceptions import PolicyError
from headerpolicy.middleware_security import SecurityHeadersMiddleware
from headerpolicy.policy import PolicySet
from headerpolicy.rules import (
    ContentSecurityPolicyRule,
    ContentTypeOption,
    ContentTypeOptionsRule,
    HeaderRule,
)

__all__ = [
    "ContentSecurityPolicyRule",
    "ContentTypeOption",
    "ContentTypeOptionsRule",
    "HeaderRule",
    "PolicyError",
    "PolicyMode",
    "PolicySet",
    "SecurityHeadersMiddleware",
    "build_policy",
    "policy_from_settings",
]
