# headerpolicy/config.py

"""
Configuration module for the headerpolicy security-headers middleware.

Settings are read once at startup from environment variables or a `.env`
file using Pydantic's `BaseSettings`, then turned into an immutable
PolicySet by `headerpolicy.builder.policy_from_settings()`.

This config controls:
- Which base policy to use (general-purpose web vs. API)
- Whether Strict-Transport-Security is emitted
- Optional overrides for X-Content-Type-Options and Content-Security-Policy
- Log verbosity

⚠️ HSTS stays off unless `HSTS_ENABLED=true` is set explicitly. Browsers cache
it for a year, so a misconfigured TLS deployment can lock users out.
"""

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from headerpolicy.rules import ContentTypeOption, check_header_value


class Settings(BaseSettings):
    # ─── Policy Selection ──────────────────────────────────────────────────────
    security_headers_mode: Literal["general", "api"] = "general"
    hsts_enabled: bool = False  # opt-in only

    # ─── Overrides (unset → use the mode's default) ────────────────────────────
    content_type_options: ContentTypeOption | None = None  # "nosniff" or "none"
    content_security_policy: str | None = None             # written verbatim

    # ─── Logging ───────────────────────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # ─── Pydantic Global Configuration ─────────────────────────────────────────
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ─── Validators ────────────────────────────────────────────────────────────
    @field_validator("content_security_policy")
    @classmethod
    def check_policy_value(cls, v: str | None) -> str | None:
        """
        Applies the same checks as `ContentSecurityPolicyRule`, so a bad
        CONTENT_SECURITY_POLICY fails when settings load. Leave the variable
        unset to keep the mode's default instead.
        """
        if v is None:
            return v
        return check_header_value(v)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """
        Accepts `LOG_LEVEL=debug` as well as `LOG_LEVEL=DEBUG`; anything else
        outside the standard level names is rejected here rather than by
        `logging` at startup.
        """
        return v.upper() if isinstance(v, str) else v


# Instantiate a singleton config object, importable throughout the package
settings = Settings()
