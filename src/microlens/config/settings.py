# config/settings.py
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from enum import Enum
from pathlib import Path

from microlens.core.exceptions import ConfigurationException

DEFAULT_KUBECONFIG = Path(".kube") / "config"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class KubernetesSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="K8S_", populate_by_name=True)
    
    kubeconfig_path: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("KUBECONFIG", "K8S_KUBECONFIG_PATH"),
        description="Path to kubeconfig file",
    )
    context: Optional[str] = Field(None, description="Kubernetes context to use")
    request_timeout_seconds: int = Field(30, gt=0, description="Deadline for each API call")

    def resolve_kubeconfig_path(self) -> str:
        """Return the configured kubeconfig path, falling back to ~/.kube/config."""
        if self.kubeconfig_path:
            return self.kubeconfig_path
        try:
            home = Path.home()
        except (RuntimeError, KeyError) as e:
            raise ConfigurationException(f"error getting home directory: {e}")
        return str(home / DEFAULT_KUBECONFIG)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MICROLENS_",
        case_sensitive=False,
        extra="ignore"
    )
    
    debug: bool = Field(False, description="Debug mode")
    log_level: LogLevel = Field(LogLevel.WARNING, description="Log level")
    
    kubernetes: KubernetesSettings = Field(default_factory=lambda: KubernetesSettings())

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @property
    def effective_log_level(self) -> LogLevel:
        """Debug mode forces DEBUG regardless of the configured level."""
        return LogLevel.DEBUG if self.debug else self.log_level

    @classmethod
    def create_from_env(cls) -> "Settings":
        """Create settings instance from environment variables."""
        return cls()
