"""
Site services bootstrap configuration.

Registers the site-wide configuration consumed by the page renderers and
the arcade: token parameters, the API base for the current environment and
the game rotation schedule.
"""

from dataclasses import dataclass, field
from typing import Any

from asdf.core.config import Settings
from asdf.core.dependencies import ServiceContainer
from asdf.core.enums import Environment

ASDF_TOKEN_MINT = "ASdfasdFa6u9KrRuVMPQKWY4DNKL24ShUggDhFGvpump"
TOKEN_DECIMALS = 6
MIN_HOLDER_BALANCE = 10_000_000
ROTATION_EPOCH = "2025-01-20T00:00:00Z"
CYCLE_WEEKS = 9


@dataclass(frozen=True)
class SiteConfig:
    """Immutable site configuration shared with page renderers."""

    environment: Environment
    api_base: str
    token_mint: str = field(default=ASDF_TOKEN_MINT)
    token_decimals: int = field(default=TOKEN_DECIMALS)
    min_holder_balance: int = field(default=MIN_HOLDER_BALANCE)
    rotation_epoch: str = field(default=ROTATION_EPOCH)
    cycle_weeks: int = field(default=CYCLE_WEEKS)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SiteConfig":
        return cls(environment=settings.environment, api_base=settings.api_base)

    @property
    def dev_mode(self) -> bool:
        return self.environment.is_development

    def to_dict(self) -> dict[str, Any]:
        """Key names match the CONFIG object the front end hydrates from."""
        return {
            "ENV": self.environment.value,
            "DEV_MODE": self.dev_mode,
            "ASDF_TOKEN_MINT": self.token_mint,
            "TOKEN_DECIMALS": self.token_decimals,
            "MIN_HOLDER_BALANCE": self.min_holder_balance,
            "API_BASE": self.api_base,
            "ROTATION_EPOCH": self.rotation_epoch,
            "CYCLE_WEEKS": self.cycle_weeks,
        }


def register_site_services(container: ServiceContainer) -> None:
    """Register site services; expects ``settings`` to be registered."""
    container.set(
        "site_config", lambda c: SiteConfig.from_settings(c.get("settings"))
    )


__all__ = ["SiteConfig", "register_site_services"]
