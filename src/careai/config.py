"""
Runtime settings for the CareAI service.

Settings are pydantic-settings models built once at startup (usually through
'Settings.from_env') and passed explicitly to the components that need them.
Nothing else in the package reads the environment.

Environment variables
---------------------
CAREAI_API_KEY               shared secret expected in the 'X-API-Key' header
CAREAI_CORS_ALLOWED_ORIGINS  comma-separated list of allowed origins
CAREAI_HISTORY_LIMIT         history messages forwarded to the model (0-10, default 10)
CAREAI_REJECT_COMPLETED      'true' to refuse turns on completed conversations
CAREAI_HOST / CAREAI_PORT    bind address for 'python -m careai'
OPENAI_ENABLED               'false' to disable the completion provider
OPENAI_PROVIDER              'azure' (default) or 'openai'
OPENAI_API_KEY               provider credential
OPENAI_ENDPOINT              Azure resource endpoint or OpenAI-compatible base url
OPENAI_MODEL_NAME            model name (default 'gpt-4')
OPENAI_DEPLOYMENT_NAME       Azure deployment, falls back to the model name
OPENAI_ORGANIZATION          optional organization id
OPENAI_API_VERSION           Azure API version

Empty variables count as unset.
"""

from typing import Annotated, Literal

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from careai.exceptions import ConfigurationError

# Upper bound of the context window history: persona + 10 + new message = 12.
MAX_HISTORY_LIMIT = 10


class CompletionSettings(BaseSettings):
    """Connection details of the completion provider."""

    model_config = SettingsConfigDict(
        env_prefix="OPENAI_",
        env_ignore_empty=True,
        extra="ignore",
        protected_namespaces=(),
    )

    enabled: bool = True
    provider: Literal["azure", "openai"] = "azure"
    api_key: str = ""
    endpoint: str = ""
    model_name: str = "gpt-4"
    deployment_name: str | None = None
    organization: str | None = None
    api_version: str = "2024-06-01"

    @property
    def is_configured(self) -> bool:
        """True when the provider is enabled and has both a credential and an endpoint."""
        return self.enabled and bool(self.api_key) and bool(self.endpoint)

    @property
    def deployment(self) -> str:
        return self.deployment_name or self.model_name


class Settings(BaseSettings):
    """Top-level service settings."""

    model_config = SettingsConfigDict(
        env_prefix="CAREAI_",
        env_ignore_empty=True,
        extra="ignore",
        populate_by_name=True,
    )

    api_key: str = ""
    completion: CompletionSettings = Field(default_factory=CompletionSettings)
    cors_allowed_origins: Annotated[list[str], NoDecode] = Field(default_factory=list)
    history_limit: int = Field(default=MAX_HISTORY_LIMIT, ge=0, le=MAX_HISTORY_LIMIT)
    reject_completed_conversations: bool = Field(
        default=False,
        validation_alias=AliasChoices("reject_completed_conversations", "CAREAI_REJECT_COMPLETED"),
    )
    host: str = "0.0.0.0"
    port: int = Field(default=8000, gt=0, lt=65536)

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (see module docstring)."""
        try:
            return cls()
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid settings: {exc}") from exc
