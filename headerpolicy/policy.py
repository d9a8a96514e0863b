# headerpolicy/policy.py

"""
PolicySet: the ordered collection of header rules applied to every response.

A policy writes its headers in a fixed order:
1. Fixed defaults (`X-Frame-Options`, then `X-XSS-Protection`)
2. `Strict-Transport-Security`, only when transport security is enabled
3. Each configured rule, in configured order

Later writes overwrite earlier ones, so a rule that targets the same header
as a fixed default wins.

🔒 A PolicySet is frozen. It is built once per middleware instance and read
concurrently by every request without locking.
"""

from types import MappingProxyType
from typing import Dict, Iterator, Tuple

from pydantic import BaseModel, ConfigDict, model_validator

from headerpolicy.exceptions import PolicyError
from headerpolicy.rules import HeaderRule, rule_value

STRICT_TRANSPORT_SECURITY = "Strict-Transport-Security"
HSTS_VALUE = "max-age=31536000; includeSubdomains; preload"

# Written unconditionally, in this order.
FIXED_HEADERS = MappingProxyType({
    "X-Frame-Options": "deny",
    "X-XSS-Protection": "1; mode=block",
})


class PolicySet(BaseModel):
    """
    Immutable header policy.

    Fields:
        rules (Tuple[HeaderRule, ...]): Rules applied after the fixed defaults,
            at most one per header name.
        transport_security (bool): Whether to emit Strict-Transport-Security.
    """
    model_config = ConfigDict(frozen=True)

    rules: Tuple[HeaderRule, ...] = ()
    transport_security: bool = False

    @model_validator(mode="after")
    def check_unique_headers(self):
        """
        Rejects two rules governing the same header name.

        Raises:
            PolicyError: If a header name appears more than once.
        """
        seen = set()
        for rule in self.rules:
            if rule.header_name in seen:
                raise PolicyError(f"Duplicate rule for header {rule.header_name!r}")
            seen.add(rule.header_name)
        return self

    def writes(self) -> Iterator[Tuple[str, str]]:
        """
        Yield `(header, value)` pairs in application order.
        """
        yield from FIXED_HEADERS.items()

        if self.transport_security:
            yield STRICT_TRANSPORT_SECURITY, HSTS_VALUE

        for rule in self.rules:
            value = rule_value(rule)
            if value is not None:
                yield rule.header_name, value

    def header_map(self) -> Dict[str, str]:
        """
        The final header values this policy produces, after overwrites.
        """
        return dict(self.writes())

    def apply(self, response) -> None:
        """
        Write every header onto `response.headers`. Body and status are untouched.

        Args:
            response: Any object with a mutable `headers` mapping
                (e.g. `starlette.responses.Response`).
        """
        for name, value in self.writes():
            response.headers[name] = value
