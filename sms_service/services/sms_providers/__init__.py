from .banglalink_provider import BanglalinkSMSProvider
from .base import BaseSMSProvider, ProviderResponse
from .bd_web_host_24_provider import BdWebHost24SMSProvider
from .boom_cast_provider import BoomCastSMSProvider
from .registry import (
    PROVIDER_BANGLALINK,
    PROVIDER_BD_WEB_HOST_24,
    PROVIDER_BOOM_CAST,
    PROVIDER_SSL,
    ProviderRegistry,
    default_registry,
    get_provider,
)
from .ssl_provider import SslSMSProvider

__all__ = [
    "BaseSMSProvider",
    "ProviderResponse",
    "ProviderRegistry",
    "default_registry",
    "get_provider",
    "PROVIDER_SSL",
    "PROVIDER_BANGLALINK",
    "PROVIDER_BD_WEB_HOST_24",
    "PROVIDER_BOOM_CAST",
    "SslSMSProvider",
    "BanglalinkSMSProvider",
    "BdWebHost24SMSProvider",
    "BoomCastSMSProvider",
]
