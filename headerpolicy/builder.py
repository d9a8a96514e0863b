# headerpolicy/builder.py

"""
Assembles a PolicySet from a named mode plus optional overrides.

Two modes exist:
- `general` → Content-Security-Policy `default-src 'self'` (browser-facing sites)
- `api`     → Content-Security-Policy `default-src 'none'` (machine-readable APIs)

Both modes use `X-Content-Type-Options: nosniff`. A caller may replace either
rule for one deployment without touching the other defaults; an override always
beats the mode's default.
"""

from enum import Enum
from types import MappingProxyType

from headerpolicy.config import Settings
from headerpolicy.exceptions import PolicyError
from headerpolicy.policy import PolicySet
from headerpolicy.rules import (
    ContentSecurityPolicyRule,
    ContentTypeOption,
    ContentTypeOptionsRule,
)


class PolicyMode(str, Enum):
    GENERAL = "general"
    API = "api"


_DEFAULT_CSP = MappingProxyType({
    PolicyMode.GENERAL: "default-src 'self'",
    PolicyMode.API: "default-src 'none'",
})


def build_policy(
    mode: PolicyMode | str = PolicyMode.GENERAL,
    transport_security_enabled: bool = False,
    content_type_rule: ContentTypeOptionsRule | None = None,
    csp_rule: ContentSecurityPolicyRule | None = None,
) -> PolicySet:
    """
    Build the PolicySet for a mode, substituting any supplied override rules.

    Args:
        mode (PolicyMode | str): "general" or "api".
        transport_security_enabled (bool): Emit Strict-Transport-Security. Off by default.
        content_type_rule (ContentTypeOptionsRule | None): Replaces the nosniff default.
        csp_rule (ContentSecurityPolicyRule | None): Replaces the mode's CSP default.

    Returns:
        PolicySet: Rules ordered content-type first, then CSP.

    Raises:
        PolicyError: If `mode` is not a known mode.
    """
    try:
        mode = PolicyMode(mode)
    except ValueError:
        raise PolicyError(f"Unknown policy mode: {mode!r}") from None

    if content_type_rule is None:
        content_type_rule = ContentTypeOptionsRule(option=ContentTypeOption.NOSNIFF)
    if csp_rule is None:
        csp_rule = ContentSecurityPolicyRule(value=_DEFAULT_CSP[mode])

    return PolicySet(
        rules=(content_type_rule, csp_rule),
        transport_security=transport_security_enabled,
    )


def policy_from_settings(settings: Settings) -> PolicySet:
    """
    Translate environment-driven `Settings` into a PolicySet.
    """
    content_type_rule = None
    if settings.content_type_options is not None:
        content_type_rule = ContentTypeOptionsRule(option=settings.content_type_options)

    csp_rule = None
    if settings.content_security_policy is not None:
        csp_rule = ContentSecurityPolicyRule(value=settings.content_security_policy)

    return build_policy(
        settings.security_headers_mode,
        transport_security_enabled=settings.hsts_enabled,
        content_type_rule=content_type_rule,
        csp_rule=csp_rule,
    )
