"""Configuration schema and validation using Pydantic.

Settings are read from ``GEMINI_``-prefixed environment variables (or passed
programmatically) and resolved into a per-call ``ModelCallConfig`` for each
operation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_LOG_BUFFER_CAPACITY,
    DEFAULT_MODEL,
    DEFAULT_PRO_MODEL,
    DEFAULT_TIMEOUT_SECONDS,
    MAX_TIMEOUT_SECONDS,
)
from .types import ModelCallConfig, ModelTier

if TYPE_CHECKING:
    from .registry import OperationDescriptor


class HiringSettings(BaseSettings):
    """Pydantic settings schema for the generation pipeline.

    The API key is optional: a process without one still
    starts, reports ``degraded`` health, and fails individual calls with
    ``ProviderAuthError``.
    """

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        description="Google Gemini API key",
    )

    model: str = Field(
        default=DEFAULT_MODEL,
        description="Model used by standard-tier operations",
        min_length=1,
    )

    pro_model: str = Field(
        default=DEFAULT_PRO_MODEL,
        description="Model used by operations that need deeper reasoning",
        min_length=1,
    )

    timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        description="Default per-call timeout",
        gt=0,
        le=MAX_TIMEOUT_SECONDS,
    )

    log_buffer_capacity: int = Field(
        default=DEFAULT_LOG_BUFFER_CAPACITY,
        description="Number of recent call entries kept in memory",
        ge=1,
    )

    json_mode: bool = Field(
        default=True,
        description="Ask the provider for application/json output",
    )

    @field_validator("api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, v: Any) -> Any:
        """Treat an empty or whitespace-only key as absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def has_api_key(self) -> bool:
        return self.api_key is not None

    def model_for(self, tier: ModelTier) -> str:
        return self.pro_model if tier is ModelTier.PRO else self.model

    def call_config_for(self, descriptor: OperationDescriptor) -> ModelCallConfig:
        """Resolve the model call settings for one operation.

        Args:
            descriptor: The operation whose generation profile to apply.

        Returns:
            A ``ModelCallConfig`` combining the profile with these settings.
        """
        profile = descriptor.profile
        return ModelCallConfig(
            model=self.model_for(profile.tier),
            temperature=profile.temperature,
            max_output_tokens=profile.max_output_tokens,
            timeout_seconds=profile.timeout_seconds or self.timeout_seconds,
            json_mode=self.json_mode,
        )

    def to_dict(self) -> dict[str, Any]:
        """Redacted view for diagnostics (the key itself is never exposed)."""
        return {
            "api_key_configured": self.has_api_key,
            "model": self.model,
            "pro_model": self.pro_model,
            "timeout_seconds": self.timeout_seconds,
            "log_buffer_capacity": self.log_buffer_capacity,
            "json_mode": self.json_mode,
        }
