"""Application configuration management.

Settings are read from environment variables, optionally seeded from a
``.env`` file. Variables already present in the environment always win over
file entries.

Architecture:
- EnvironmentLoader: Environment variable loading with type conversion
- Settings: Main configuration class with all application settings
- get_settings: Cached settings factory
"""

import os
from enum import Enum
from functools import lru_cache
from typing import Any

from asdf.core.enums import Environment, LogFormat, LogLevel, get_enum_values
from asdf.core.errors import ConfigurationError

ENV_PREFIX = "ASDF_"

TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
FALSE_VALUES = frozenset({"false", "0", "no", "off"})

DEFAULT_API_BASES = {
    Environment.DEVELOPMENT: "http://localhost:3000/api",
    Environment.TESTING: "http://localhost:3000/api",
    Environment.STAGING: "https://test.alonisthe.dev/api",
    Environment.PRODUCTION: "https://asdf-api.onrender.com/api",
}


# =====================================================================================
# ENVIRONMENT LOADER
# =====================================================================================


class EnvironmentLoader:
    """
    Environment variable loader with type conversion and validation.

    Every getter raises ConfigurationError naming the offending key when a
    value cannot be converted.
    """

    def __init__(self, env_file: str | None = ".env", prefix: str = ENV_PREFIX):
        """
        Initialize environment loader.

        Args:
            env_file: Optional environment file to load
            prefix: Prefix prepended to every key looked up
        """
        self.env_file = env_file
        self.prefix = prefix
        if env_file:
            self._load_env_file()

    def _load_env_file(self) -> None:
        """Load environment variables from file if it exists."""
        if not os.path.exists(self.env_file):
            return

        try:
            with open(self.env_file, encoding="utf-8") as f:
                for raw_line in f:
                    line = raw_line.strip()

                    if not line or line.startswith("#") or "=" not in line:
                        continue

                    key, value = line.split("=", 1)
                    key = key.strip()
                    value = value.strip()

                    if (value.startswith('"') and value.endswith('"')) or (
                        value.startswith("'") and value.endswith("'")
                    ):
                        value = value[1:-1]

                    if key not in os.environ:
                        os.environ[key] = value

        except OSError as e:
            raise ConfigurationError(
                f"Failed to load environment file {self.env_file}: {e}"
            ) from e

    def key(self, name: str) -> str:
        """Full environment variable name for ``name``."""
        return f"{self.prefix}{name}"

    def get_raw(self, name: str) -> str | None:
        value = os.environ.get(self.key(name))
        if value is None or not value.strip():
            return None
        return value.strip()

    def get_string(self, name: str, default: str | None = None) -> str | None:
        """Get string value from environment."""
        value = self.get_raw(name)
        return default if value is None else value

    def get_boolean(self, name: str, default: bool) -> bool:
        """Get boolean value from environment."""
        value = self.get_raw(name)
        if value is None:
            return default

        lowered = value.lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        raise ConfigurationError(
            f"{self.key(name)} must be a boolean, got {value!r}",
            config_key=self.key(name),
        )

    def get_enum(
        self, name: str, enum_class: type[Enum], default: Enum | None = None
    ) -> Enum | None:
        """Get enum value (matched against member values) from environment."""
        value = self.get_raw(name)
        if value is None:
            return default

        try:
            return enum_class(value.lower())
        except ValueError:
            allowed = ", ".join(get_enum_values(enum_class))
            raise ConfigurationError(
                f"{self.key(name)} must be one of: {allowed}; got {value!r}",
                config_key=self.key(name),
            ) from None

    def get_log_level(self, name: str, default: LogLevel) -> LogLevel:
        """Get log level (matched by name) from environment."""
        value = self.get_raw(name)
        if value is None:
            return default

        try:
            return LogLevel.from_string(value)
        except ValueError as e:
            raise ConfigurationError(str(e), config_key=self.key(name)) from e

    def get_url(self, name: str, default: str) -> str:
        """Get URL value from environment."""
        value = self.get_raw(name)
        if value is None:
            return default

        if not value.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"{self.key(name)} must be a valid http(s) URL, got {value!r}",
                config_key=self.key(name),
            )
        return value.rstrip("/")

    def get_list(self, name: str, default: list[str] | None = None) -> list[str]:
        """Get comma separated list value from environment."""
        value = self.get_raw(name)
        if value is None:
            return list(default or [])
        return [item.strip() for item in value.split(",") if item.strip()]


# =====================================================================================
# SETTINGS
# =====================================================================================


class Settings:
    """
    Application settings.

    Usage:
        settings = Settings()
        settings.environment  # Environment.DEVELOPMENT
        settings.container_eager_services  # ["site_config"]
    """

    def __init__(self, env_file: str | None = ".env"):
        loader = EnvironmentLoader(env_file)

        self.environment: Environment = loader.get_enum(
            "ENV", Environment, Environment.DEVELOPMENT
        )
        self.log_level: LogLevel = loader.get_log_level(
            "LOG_LEVEL",
            LogLevel.DEBUG if self.environment.is_development else LogLevel.INFO,
        )
        # None lets LogConfig pick the environment default
        self.log_format: LogFormat | None = loader.get_enum("LOG_FORMAT", LogFormat)
        self.api_base: str = loader.get_url(
            "API_BASE", DEFAULT_API_BASES[self.environment]
        )

        self.container_thread_safe: bool = loader.get_boolean(
            "CONTAINER_THREAD_SAFE", True
        )
        self.container_eager_services: list[str] = loader.get_list(
            "CONTAINER_EAGER_SERVICES"
        )

    @property
    def is_production(self) -> bool:
        return self.environment.is_production

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to a plain dictionary."""
        return {
            "environment": self.environment.value,
            "log_level": self.log_level.level_name,
            "log_format": self.log_format.value if self.log_format else None,
            "api_base": self.api_base,
            "container_thread_safe": self.container_thread_safe,
            "container_eager_services": list(self.container_eager_services),
        }

    def __repr__(self) -> str:
        return f"Settings(environment={self.environment.value!r})"


@lru_cache
def get_settings(env_file: str | None = ".env") -> Settings:
    """
    Get cached settings instance.

    Args:
        env_file: Environment file to load
    """
    return Settings(env_file)


__all__ = [
    "DEFAULT_API_BASES",
    "ENV_PREFIX",
    "EnvironmentLoader",
    "Settings",
    "get_settings",
]
