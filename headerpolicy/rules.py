# headerpolicy/rules.py

"""
Header rules: small, immutable units that each write exactly one response header.

The set of rule kinds is closed, so rules are modelled as a tagged union of
frozen Pydantic models rather than an open class hierarchy. Every variant
carries a `kind` literal and its own payload; `rule_value()` is the one place
that knows how to turn a rule into a header value.

Supported kinds:
- `content_type_options`    → X-Content-Type-Options (nosniff, or nothing at all)
- `content_security_policy` → Content-Security-Policy (opaque policy string)

🧠 Rules never look at the request. They are built once at startup and
shared read-only across every response.
"""

from enum import Enum
from typing import Annotated, Any, ClassVar, Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from headerpolicy.exceptions import PolicyError

X_CONTENT_TYPE_OPTIONS = "X-Content-Type-Options"
CONTENT_SECURITY_POLICY = "Content-Security-Policy"


class ContentTypeOption(str, Enum):
    NOSNIFF = "nosniff"
    NONE = "none"


class _Rule(BaseModel):
    model_config = ConfigDict(frozen=True)

    header: ClassVar[str]

    @property
    def header_name(self) -> str:
        return self.header

    def apply(self, response) -> None:
        apply_rule(self, response)


class ContentTypeOptionsRule(_Rule):
    """
    Controls MIME sniffing protection.

    `nosniff` writes `X-Content-Type-Options: nosniff`; `none` writes nothing,
    which is how a deployment turns the header off.
    """
    header: ClassVar[str] = X_CONTENT_TYPE_OPTIONS

    kind: Literal["content_type_options"] = "content_type_options"
    option: ContentTypeOption = ContentTypeOption.NOSNIFF


class ContentSecurityPolicyRule(_Rule):
    """
    Writes a Content-Security-Policy value verbatim.

    The policy grammar is not parsed, but the value must be a writable header
    value (see `check_header_value`), so a bad policy fails at startup instead
    of on every response.
    """
    header: ClassVar[str] = CONTENT_SECURITY_POLICY

    kind: Literal["content_security_policy"] = "content_security_policy"
    value: str

    @field_validator("value")
    @classmethod
    def check_value(cls, v: str) -> str:
        return check_header_value(v)


def check_header_value(v: str) -> str:
    """
    Validates a raw header value before it is ever written.

    Rejects:
    - blank values (an empty CSP is never a meaningful policy)
    - control characters, CR/LF included (header injection); HTAB is allowed
    - characters outside latin-1, which ASGI servers cannot encode

    Raises:
        ValueError: Describing the first problem found.
    """
    if not v.strip():
        raise ValueError("header value must not be blank")
    if any((ord(c) < 0x20 and c != "\t") or ord(c) == 0x7F for c in v):
        raise ValueError("header value must not contain control characters")
    try:
        v.encode("latin-1")
    except UnicodeEncodeError:
        raise ValueError("header value must be latin-1 encodable") from None
    return v


HeaderRule = Annotated[
    Union[ContentTypeOptionsRule, ContentSecurityPolicyRule],
    Field(discriminator="kind"),
]

_rule_adapter = TypeAdapter(HeaderRule)


def parse_rule(data: Dict[str, Any]) -> HeaderRule:
    """
    Validate a plain mapping (e.g. decoded JSON config) into a rule variant.

    Args:
        data (Dict[str, Any]): Must contain a `kind` tag plus that kind's payload,
            e.g. {"kind": "content_security_policy", "value": "default-src 'none'"}

    Returns:
        HeaderRule: The matching frozen rule instance.

    Raises:
        pydantic.ValidationError: On an unknown tag or a malformed payload.
    """
    return _rule_adapter.validate_python(data)


def rule_value(rule: HeaderRule) -> str | None:
    """
    Compute the header value a rule writes, or None when it writes nothing.

    Raises:
        PolicyError: If the rule carries a kind outside the known set. Only
            possible when validation was bypassed (e.g. `model_construct`).
    """
    if rule.kind == "content_type_options":
        if rule.option == ContentTypeOption.NOSNIFF:
            return "nosniff"
        return None

    if rule.kind == "content_security_policy":
        return rule.value

    raise PolicyError(f"Unknown header rule kind: {rule.kind!r}")


def apply_rule(rule: HeaderRule, response) -> None:
    """
    Write the rule's header onto `response.headers`, overwriting any earlier value.
    """
    value = rule_value(rule)
    if value is not None:
        response.headers[rule.header_name] = value
