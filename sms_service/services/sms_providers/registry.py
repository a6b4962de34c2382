from __future__ import annotations

from typing import Callable, Mapping, Optional

from ..exceptions import ConfigurationError
from .banglalink_provider import BanglalinkSMSProvider
from .base import BaseSMSProvider
from .bd_web_host_24_provider import BdWebHost24SMSProvider
from .boom_cast_provider import BoomCastSMSProvider
from .ssl_provider import SslSMSProvider

ProviderFactory = Callable[[Mapping[str, str], Optional[str]], BaseSMSProvider]

PROVIDER_SSL = SslSMSProvider.name
PROVIDER_BANGLALINK = BanglalinkSMSProvider.name
PROVIDER_BD_WEB_HOST_24 = BdWebHost24SMSProvider.name
PROVIDER_BOOM_CAST = BoomCastSMSProvider.name


class ProviderRegistry:
    """Explicit name -> factory lookup for SMS providers."""

    def __init__(self, factories: Optional[Mapping[str, ProviderFactory]] = None):
        self._factories: dict[str, ProviderFactory] = dict(factories or {})

    def register(self, name: str, factory: ProviderFactory) -> None:
        self._factories[name] = factory

    def names(self) -> list[str]:
        return sorted(self._factories)

    def create(
        self,
        name: str,
        config: Optional[Mapping[str, str]] = None,
        url: Optional[str] = None,
    ) -> BaseSMSProvider:
        factory = self._factories.get(name)
        if factory is None:
            raise ConfigurationError(f"Invalid SMS provider name is given: {name!r}")
        return factory(dict(config or {}), url)


def default_registry() -> ProviderRegistry:
    return ProviderRegistry(
        {
            PROVIDER_SSL: SslSMSProvider,
            PROVIDER_BANGLALINK: BanglalinkSMSProvider,
            PROVIDER_BD_WEB_HOST_24: BdWebHost24SMSProvider,
            PROVIDER_BOOM_CAST: BoomCastSMSProvider,
        }
    )


def get_provider(
    name: str = PROVIDER_SSL,
    config: Optional[Mapping[str, str]] = None,
    url: Optional[str] = None,
) -> BaseSMSProvider:
    return default_registry().create(name, config, url)
