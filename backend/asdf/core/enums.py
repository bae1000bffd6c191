"""Shared enums for the ASDF services backend.

Design Principles:
- Single source of truth for enum values
- Rich enum implementations with additional methods
- Framework-agnostic design
"""

from enum import Enum


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "dev"
    TESTING = "test"
    STAGING = "staging"
    PRODUCTION = "prod"

    @property
    def is_production(self) -> bool:
        """Check if environment is production."""
        return self == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        """Check if environment is development."""
        return self == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """Check if environment is testing."""
        return self == Environment.TESTING


class LogLevel(Enum):
    """Logging levels with priority mapping."""

    DEBUG = ("DEBUG", 10)
    INFO = ("INFO", 20)
    WARNING = ("WARNING", 30)
    ERROR = ("ERROR", 40)
    CRITICAL = ("CRITICAL", 50)

    def __init__(self, level_name: str, priority: int):
        self.level_name = level_name
        self.priority = priority

    @classmethod
    def from_string(cls, level_str: str) -> "LogLevel":
        """Create LogLevel from string representation."""
        level_str = level_str.upper()
        for level in cls:
            if level.level_name == level_str:
                return level
        raise ValueError(f"Invalid log level: {level_str}")

    def to_logging_level(self) -> int:
        """Convert to standard logging module level."""
        return self.priority


class LogFormat(Enum):
    """Log output formats."""

    JSON = "json"
    CONSOLE = "console"
    PLAIN = "plain"


# === DEPENDENCY INJECTION ENUMS ===


class ServiceState(Enum):
    """Resolution progress of a registered service."""

    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"

    @property
    def is_available(self) -> bool:
        """Check if a cached value is available without invoking the factory."""
        return self == ServiceState.RESOLVED

    @property
    def in_progress(self) -> bool:
        """Check if the service is part of the active resolution chain."""
        return self == ServiceState.RESOLVING


def get_enum_values(enum_class: type[Enum]) -> list[str]:
    """Get all enum values as a list."""
    return [member.value for member in enum_class]


__all__ = [
    "Environment",
    "LogFormat",
    "LogLevel",
    "ServiceState",
    "get_enum_values",
]
