import json
import os
import sys
from pathlib import Path
from typing import Any, Mapping

import pytest
from pydantic import BaseModel, ConfigDict, Field

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ.setdefault("SMS_PROVIDER", "ssl")
os.environ.setdefault(
    "SMS_PROVIDER_CONFIG",
    json.dumps({"user": "test-user", "pass": "test-pass", "sid": "TESTSID"}),
)
os.environ.setdefault("SMS_REQUEST_TIMEOUT", "30")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from sms_service.core.config import get_settings
from sms_service.services import exceptions
from sms_service.services.sms_providers import BaseSMSProvider, ProviderResponse

get_settings.cache_clear()


class StubPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    api_key: str = Field(..., min_length=1)
    to: str = Field(..., pattern=r"^\d+$")
    text: str = Field(..., min_length=1)


class StubProvider(BaseSMSProvider):
    """Deterministic provider: raw ``OK...`` replies succeed, anything else is rejected."""

    name = "stub"
    default_url = "http://gateway.test/send"

    def __init__(self, config=None, url=None, *, mapping_overrides: Mapping[str, Any] | None = None):
        super().__init__(config if config is not None else {"api_key": "config-key"}, url)
        self.mapping_overrides = dict(mapping_overrides or {})
        self.parsed: list[str] = []

    def map_params(self, recipient, message, params):
        if recipient in self.mapping_overrides:
            return self.mapping_overrides[recipient]
        return {"to": recipient, "text": message, **params}

    def get_validation_rules(self):
        return StubPayload

    def parse_response(self, raw):
        self.parsed.append(raw)
        if raw.startswith("OK"):
            return ProviderResponse(success=True, response={"id": raw})
        return ProviderResponse(success=False, response=raw or "rejected")


class DummyTransport:
    """Replays queued outcomes; exceptions are raised, strings are returned."""

    def __init__(self, outcomes: list[object] | None = None, default: object = "OK"):
        self.outcomes = list(outcomes or [])
        self.default = default
        self.calls = []

    def execute(self, options):
        self.calls.append(options)
        outcome = self.outcomes.pop(0) if self.outcomes else self.default
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture()
def provider():
    return StubProvider()


@pytest.fixture()
def transport_error():
    def _make(message="HTTP Error # ConnectError | HTTP Error Message: connect fail", code=None):
        return exceptions.TransportError(message, code=code)

    return _make


@pytest.fixture()
def settings_env(monkeypatch):
    """Apply env overrides and rebuild the cached settings."""

    def _apply(**values):
        for key, value in values.items():
            monkeypatch.setenv(key, value)
        get_settings.cache_clear()
        return get_settings()

    yield _apply
    get_settings.cache_clear()
