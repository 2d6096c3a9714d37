"""
Centralized Configuration System

Type-safe configuration for every service in the mesh, built on Pydantic
Settings so that values come from environment variables (or a local .env
file) with sensible defaults.

Features:
- One settings class per concern, aggregated by ApplicationSettings
- Environment variable binding with defaults
- Test-friendly reload via reload_settings()
"""

import os
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment types"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class ServiceSettings(BaseSettings):
    """Service hosts, ports and inter-service call settings"""

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("DOCKER_CONTAINER") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    gateway_host: str = Field(
        default="localhost",
        description="API gateway host"
    )
    gateway_port: int = Field(
        default=3000,
        description="API gateway port"
    )
    auth_host: str = Field(
        default="localhost",
        description="Auth service host"
    )
    auth_port: int = Field(
        default=3001,
        description="Auth service port"
    )
    iam_host: str = Field(
        default="localhost",
        description="IAM service host"
    )
    iam_port: int = Field(
        default=3002,
        description="IAM service port"
    )
    catalog_host: str = Field(
        default="localhost",
        description="Catalog service host"
    )
    catalog_port: int = Field(
        default=3003,
        description="Catalog service port"
    )

    use_https: bool = Field(
        default=False,
        description="Use HTTPS for service communication"
    )
    rpc_timeout: float = Field(
        default=5.0,
        description="Timeout in seconds for one inter-service RPC call"
    )

    def _base_url(self, host: str, port: int) -> str:
        protocol = "https" if self.use_https else "http"
        return f"{protocol}://{host}:{port}"

    @property
    def gateway_base_url(self) -> str:
        """Construct API gateway base URL"""
        return self._base_url(self.gateway_host, self.gateway_port)

    @property
    def auth_base_url(self) -> str:
        """Construct auth service base URL"""
        return self._base_url(self.auth_host, self.auth_port)

    @property
    def iam_base_url(self) -> str:
        """Construct IAM service base URL"""
        return self._base_url(self.iam_host, self.iam_port)

    @property
    def catalog_base_url(self) -> str:
        """Construct catalog service base URL"""
        return self._base_url(self.catalog_host, self.catalog_port)


class SecuritySettings(BaseSettings):
    """Security configuration settings"""

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("DOCKER_CONTAINER") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # JWT Configuration
    jwt_secret_key: str = Field(
        default="your-secret-key-change-this-in-production",
        description="Secret used to sign access tokens"
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT algorithm"
    )
    access_token_expire_minutes: int = Field(
        default=15,
        description="Access token lifetime in minutes"
    )
    refresh_token_secret_key: str = Field(
        default="refresh-token-secret",
        description="Secret used to sign refresh tokens"
    )
    refresh_token_expire_days: int = Field(
        default=7,
        description="Refresh token lifetime in days"
    )

    # Password hashing
    bcrypt_rounds: int = Field(
        default=12,
        description="bcrypt cost factor for stored password hashes"
    )


class ErrorCatalogSettings(BaseSettings):
    """Error catalog location and localization defaults"""

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("DOCKER_CONTAINER") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    error_catalog_dir: Optional[str] = Field(
        default=None,
        description="Directory holding <service>.errors.json files (defaults to the bundled catalogs)"
    )
    default_language: str = Field(
        default="en",
        description="Language used when neither the request nor the caller picks one"
    )

    @field_validator("default_language", mode="before")
    @classmethod
    def normalize_default_language(cls, v):
        return (v or "en").strip().lower()


class ApplicationSettings(BaseSettings):
    """Main application settings - aggregates all other settings"""

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("DOCKER_CONTAINER") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    services: ServiceSettings = ServiceSettings()
    security: SecuritySettings = SecuritySettings()
    errors: ErrorCatalogSettings = ErrorCatalogSettings()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self.environment == Environment.PRODUCTION

    @property
    def is_test(self) -> bool:
        """Check if running in test mode"""
        return self.environment == Environment.TEST


settings = ApplicationSettings()


def get_settings() -> ApplicationSettings:
    """
    Get the global settings instance

    Usable with FastAPI's Depends() for dependency injection.
    """
    return settings


def reload_settings() -> ApplicationSettings:
    """
    Reload settings from environment (useful for testing)

    Returns:
        ApplicationSettings: New settings instance with reloaded values
    """
    global settings
    settings = ApplicationSettings(
        services=ServiceSettings(),
        security=SecuritySettings(),
        errors=ErrorCatalogSettings(),
    )
    return settings
