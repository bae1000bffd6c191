# ruff: noqa: A005
"""Structured logging configuration.

This module provides the logging infrastructure for the ASDF services backend
on top of structlog. Loggers accept a message plus keyword context, and the
final rendering (JSON, console or key/value) is chosen per environment.

Architecture:
- LogConfig: Configuration with validation and environment defaults
- StructuredLogger: Level-filtering wrapper around a structlog logger
- LoggerFactory: Logger creation, caching and structlog configuration

Note: This module name intentionally shadows the standard library 'logging'
module inside the package; the stdlib module is still used for output.
"""

import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars

from asdf.core.enums import Environment, LogFormat, LogLevel
from asdf.core.errors import ConfigurationError

# =====================================================================================
# CONFIGURATION
# =====================================================================================


@dataclass
class LogConfig:
    """
    Logging configuration with validation and environment defaults.

    Usage Example:
        config = LogConfig(
            level=LogLevel.INFO,
            environment=Environment.PRODUCTION,
        )
    """

    level: LogLevel = field(default=LogLevel.INFO)
    format: LogFormat | None = field(default=None)  # Auto-set based on environment
    environment: Environment = field(default=Environment.DEVELOPMENT)

    enable_timestamps: bool = field(default=True)
    enable_caller_info: bool | None = field(default=None)
    enable_exception_info: bool = field(default=True)

    max_message_length: int = field(default=10000)

    def __post_init__(self):
        """Post-initialization validation and setup."""
        self.validate()
        self.apply_environment_defaults()

    def validate(self) -> None:
        """
        Validate logging configuration parameters.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if self.max_message_length < 1000:
            raise ConfigurationError(
                "Maximum message length must be at least 1000 characters",
                config_key="max_message_length",
            )

    def apply_environment_defaults(self) -> None:
        """Fill unset options with environment-specific defaults."""
        if self.format is None:
            self.format = {
                Environment.DEVELOPMENT: LogFormat.CONSOLE,
                Environment.TESTING: LogFormat.PLAIN,
            }.get(self.environment, LogFormat.JSON)

        if self.enable_caller_info is None:
            self.enable_caller_info = self.environment.is_development

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "level": self.level.level_name,
            "format": self.format.value,
            "environment": self.environment.value,
            "enable_timestamps": self.enable_timestamps,
            "enable_caller_info": self.enable_caller_info,
            "enable_exception_info": self.enable_exception_info,
            "max_message_length": self.max_message_length,
        }


# =====================================================================================
# STRUCTURED LOGGER
# =====================================================================================


class StructuredLogger:
    """
    Structured logger with level filtering and simple usage statistics.

    Messages longer than the configured limit are truncated before they
    reach structlog.
    """

    def __init__(self, name: str, config: LogConfig):
        self.name = name
        self.config = config
        self._logger = structlog.get_logger(name)

        self._log_count = 0
        self._error_count = 0
        self._last_log_time: datetime | None = None

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self._log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self._log(LogLevel.ERROR, message, **kwargs)
        self._error_count += 1

    def is_enabled_for(self, level: LogLevel) -> bool:
        """Check whether messages at ``level`` pass the configured threshold."""
        return level.priority >= self.config.level.priority

    def _log(self, level: LogLevel, message: str, **kwargs: Any) -> None:
        if not self.is_enabled_for(level):
            return

        if len(message) > self.config.max_message_length:
            message = message[: self.config.max_message_length] + "...[truncated]"

        getattr(self._logger, level.level_name.lower())(message, **kwargs)
        self._log_count += 1
        self._last_log_time = datetime.now(timezone.utc)

    def get_stats(self) -> dict[str, Any]:
        """Get logger statistics."""
        return {
            "logger_name": self.name,
            "log_count": self._log_count,
            "error_count": self._error_count,
            "last_log_time": self._last_log_time.isoformat()
            if self._last_log_time
            else None,
        }


# =====================================================================================
# LOGGER FACTORY
# =====================================================================================


class LoggerFactory:
    """
    Factory for creating and caching structured loggers.

    The first logger request configures structlog and the standard library
    root logger.
    """

    def __init__(self, config: LogConfig):
        self.config = config
        self._loggers: dict[str, StructuredLogger] = {}
        self._configured = False

    def configure_logging(self) -> None:
        """Configure global logging settings."""
        if self._configured:
            return

        processors = [
            merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
        ]

        if self.config.enable_timestamps:
            processors.append(structlog.processors.TimeStamper(fmt="iso"))

        if self.config.enable_caller_info:
            processors.append(
                structlog.processors.CallsiteParameterAdder(
                    parameters=[
                        structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO,
                        structlog.processors.CallsiteParameter.FUNC_NAME,
                    ],
                    # Report the caller of StructuredLogger, not its _log method.
                    additional_ignores=[__name__],
                )
            )

        if self.config.enable_exception_info:
            processors.extend(
                [
                    structlog.processors.StackInfoRenderer(),
                    structlog.processors.format_exc_info,
                ]
            )

        processors.append(structlog.processors.UnicodeDecoder())

        if self.config.format == LogFormat.JSON:
            processors.append(structlog.processors.JSONRenderer())
        elif self.config.format == LogFormat.CONSOLE:
            processors.append(structlog.dev.ConsoleRenderer(colors=True))
        else:
            processors.append(structlog.processors.KeyValueRenderer())

        structlog.configure(
            processors=processors,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=not self.config.environment.is_testing,
        )

        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=self.config.level.to_logging_level(),
        )
        logging.getLogger("asdf").setLevel(self.config.level.to_logging_level())

        self._configured = True

    def get_logger(self, name: str) -> StructuredLogger:
        """Get or create structured logger."""
        if not self._configured:
            self.configure_logging()

        if name not in self._loggers:
            self._loggers[name] = StructuredLogger(name, self.config)

        return self._loggers[name]

    def get_all_logger_stats(self) -> dict[str, dict[str, Any]]:
        """Get statistics for all loggers."""
        return {name: logger.get_stats() for name, logger in self._loggers.items()}


# =====================================================================================
# GLOBAL CONFIGURATION AND FACTORY
# =====================================================================================

_logger_factory: LoggerFactory | None = None


def build_log_config(settings: Any = None) -> LogConfig:
    """
    Build a logging configuration from application settings.

    Without explicit settings the cached process settings are used. Module
    level loggers are created at import time, so an invalid environment
    falls back to the default configuration instead of failing the import;
    the error still surfaces when the application loads its settings.
    """
    if settings is None:
        try:
            from asdf.core.config import get_settings

            settings = get_settings()
        except (ImportError, ConfigurationError):
            return LogConfig()

    return LogConfig(
        level=settings.log_level,
        format=settings.log_format,
        environment=settings.environment,
    )


def configure_logging(config: LogConfig | None = None) -> LoggerFactory:
    """
    Configure global logging system.

    Args:
        config: Logging configuration (built from settings if not provided)

    Returns:
        LoggerFactory: The installed factory
    """
    global _logger_factory  # noqa: PLW0603 - Required to initialize global factory

    _logger_factory = LoggerFactory(config or build_log_config())
    _logger_factory.configure_logging()
    return _logger_factory


def get_logger_factory() -> LoggerFactory:
    """Return the installed logger factory, configuring one if needed."""
    if _logger_factory is None:
        return configure_logging()
    return _logger_factory


def get_logger(name: str) -> StructuredLogger:
    """
    Get structured logger instance.

    Args:
        name: Logger name (usually __name__)
    """
    return get_logger_factory().get_logger(name)


def log_context(**kwargs: Any) -> None:
    """Add context variables to all subsequent logs in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "LogConfig",
    "LoggerFactory",
    "StructuredLogger",
    "build_log_config",
    "clear_context",
    "configure_logging",
    "get_logger",
    "get_logger_factory",
    "log_context",
]
