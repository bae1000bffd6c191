"""Tests for the application composition root."""

import pytest

from asdf.bootstrap import SiteConfig, create_container, initialize_container
from asdf.core.config import Settings
from asdf.core.dependencies import ContainerLockedError, ServiceContainer
from asdf.core.enums import Environment, LogFormat, LogLevel
from asdf.core.logging import LoggerFactory, get_logger_factory


@pytest.mark.unit
class TestCreateContainer:
    def test_registers_core_services(self, settings):
        container = create_container(settings)

        assert isinstance(container, ServiceContainer)
        assert container.keys() == ["settings", "logger_factory", "site_config"]
        assert container.stats() == {"registered": 3, "resolved": 1, "locked": False}
        assert not container.locked

    def test_settings_registered_as_constant(self, settings):
        container = create_container(settings)

        assert container.get("settings") is settings

    def test_logger_factory(self, settings):
        container = create_container(settings)

        assert isinstance(container.get("logger_factory"), LoggerFactory)

    def test_logger_factory_follows_container_settings(self, clean_env):
        clean_env.setenv("ASDF_ENV", "prod")
        clean_env.setenv("ASDF_LOG_LEVEL", "ERROR")
        clean_env.setenv("ASDF_LOG_FORMAT", "plain")
        container = create_container(Settings(env_file=None))

        factory = container.get("logger_factory")

        assert factory.config.level == LogLevel.ERROR
        assert factory.config.format == LogFormat.PLAIN
        assert factory.config.environment == Environment.PRODUCTION
        assert get_logger_factory() is factory

    def test_site_config_built_from_settings(self, settings):
        container = create_container(settings)

        site_config = container.get_typed("site_config", SiteConfig)

        assert site_config.environment == Environment.DEVELOPMENT
        assert site_config.api_base == settings.api_base
        assert site_config.dev_mode is True
        assert container.get("site_config") is site_config

    def test_each_call_builds_a_new_container(self, settings):
        assert create_container(settings) is not create_container(settings)

    def test_services_can_be_overridden_before_lock(self, settings):
        container = create_container(settings)
        fake = SiteConfig(environment=Environment.TESTING, api_base="http://fake")

        container.constant("site_config", fake)

        assert container.get("site_config") is fake


@pytest.mark.unit
class TestInitializeContainer:
    def test_boots_and_locks(self, settings):
        container = initialize_container(settings, eager=["site_config"])

        assert container.locked
        assert container.stats() == {"registered": 3, "resolved": 2, "locked": True}

        with pytest.raises(ContainerLockedError):
            container.set("late", lambda c: None)

    def test_eager_list_defaults_to_settings(self, clean_env):
        clean_env.setenv("ASDF_CONTAINER_EAGER_SERVICES", "logger_factory,unknown")
        settings = Settings(env_file=None)

        container = initialize_container(settings)

        assert container.get_service_info("logger_factory")["state"] == "resolved"
        assert container.get_service_info("site_config")["state"] == "unresolved"

    def test_thread_safety_follows_settings(self, clean_env):
        clean_env.setenv("ASDF_CONTAINER_THREAD_SAFE", "false")

        container = initialize_container(Settings(env_file=None), eager=[])

        assert container.thread_safe is False
        assert container.get("settings").container_thread_safe is False


@pytest.mark.unit
class TestSiteConfig:
    def test_to_dict(self):
        config = SiteConfig(
            environment=Environment.PRODUCTION,
            api_base="https://asdf-api.onrender.com/api",
        )

        assert config.to_dict() == {
            "ENV": "prod",
            "DEV_MODE": False,
            "ASDF_TOKEN_MINT": "ASdfasdFa6u9KrRuVMPQKWY4DNKL24ShUggDhFGvpump",
            "TOKEN_DECIMALS": 6,
            "MIN_HOLDER_BALANCE": 10_000_000,
            "API_BASE": "https://asdf-api.onrender.com/api",
            "ROTATION_EPOCH": "2025-01-20T00:00:00Z",
            "CYCLE_WEEKS": 9,
        }

    def test_is_immutable(self):
        config = SiteConfig(environment=Environment.TESTING, api_base="http://x")

        with pytest.raises(AttributeError):
            config.api_base = "http://y"
