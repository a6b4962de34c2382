from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pydantic import BaseModel


@dataclass(slots=True)
class ProviderResponse:
    """Normalized response returned by SMS providers."""

    success: bool
    response: Any = None

    def as_dict(self) -> dict[str, Any]:
        return {"success": self.success, "response": self.response}


class BaseSMSProvider(ABC):
    """Interface all SMS providers must implement."""

    name: str
    default_url: str = ""

    def __init__(self, config: Optional[Mapping[str, str]] = None, url: Optional[str] = None):
        self._config = dict(config or {})
        self._url = url or self.default_url

    def get_url(self) -> str:
        return self._url

    def get_config(self) -> dict[str, str]:
        return dict(self._config)

    @abstractmethod
    def map_params(self, recipient: str, message: str, params: Mapping[str, Any]) -> dict[str, Any]:
        """Translate a recipient and message into the gateway's request fields."""
        raise NotImplementedError

    @abstractmethod
    def get_validation_rules(self) -> type[BaseModel]:
        """Return the model the merged request fields must satisfy."""
        raise NotImplementedError

    @abstractmethod
    def parse_response(self, raw: str) -> ProviderResponse:
        """Interpret the raw gateway reply."""
        raise NotImplementedError
