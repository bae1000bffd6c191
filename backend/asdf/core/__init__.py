"""Core infrastructure: configuration, errors, logging and the service container."""

from .config import Settings, get_settings
from .dependencies import (
    CircularDependencyError,
    ContainerError,
    ContainerLockedError,
    ServiceContainer,
    ServiceNotFoundError,
    ServiceRegistrationError,
    ServiceTypeError,
)
from .errors import ASDFError, ConfigurationError, NotFoundError

__all__ = [
    "ASDFError",
    "CircularDependencyError",
    "ConfigurationError",
    "ContainerError",
    "ContainerLockedError",
    "NotFoundError",
    "ServiceContainer",
    "ServiceNotFoundError",
    "ServiceRegistrationError",
    "ServiceTypeError",
    "Settings",
    "get_settings",
]
