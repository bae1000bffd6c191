"""
Bootstrap module for initializing the application container.

This is the composition root: the entry point builds one container here,
registers every service, optionally resolves the eager ones and locks it.
There is no process-wide container; whoever calls ``initialize_container``
owns the result and passes it on.

Usage:
    container = initialize_container()
    site_config = container.get("site_config")
"""

from collections.abc import Iterable

from asdf.core.config import Settings, get_settings
from asdf.core.dependencies import ServiceContainer
from asdf.core.logging import build_log_config, configure_logging, get_logger

from .site_bootstrap import SiteConfig, register_site_services

logger = get_logger(__name__)


def create_container(settings: Settings | None = None) -> ServiceContainer:
    """
    Create a container with the core services registered but not locked.

    Registered ids:
        settings: the Settings instance (constant)
        logger_factory: LoggerFactory configured from these settings and
            installed as the process logger factory
        site_config: SiteConfig built from settings
    """
    settings = settings or get_settings()

    container = ServiceContainer(thread_safe=settings.container_thread_safe)
    container.constant("settings", settings)
    container.set(
        "logger_factory",
        lambda c: configure_logging(build_log_config(c.get("settings"))),
    )
    register_site_services(container)

    logger.debug(
        "Application container created",
        environment=settings.environment.value,
        services=container.keys(),
    )
    return container


def initialize_container(
    settings: Settings | None = None, eager: Iterable[str] | None = None
) -> ServiceContainer:
    """
    Create the application container, resolve eager services and lock it.

    Args:
        settings: Application settings (cached settings if not provided)
        eager: Ids to resolve before locking (settings list if not provided)

    Returns:
        ServiceContainer: Locked container ready for runtime use
    """
    settings = settings or get_settings()
    container = create_container(settings)

    if eager is None:
        eager = settings.container_eager_services
    container.boot(eager)

    logger.info("Application container initialized", **container.stats())
    return container


__all__ = [
    "SiteConfig",
    "create_container",
    "initialize_container",
    "register_site_services",
]
