from __future__ import annotations

from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field

from sms_service.core.phone import BD_MOBILE_PATTERN, normalize_bangladeshi_phone

from .base import BaseSMSProvider, ProviderResponse


class BdWebHost24Payload(BaseModel):
    model_config = ConfigDict(extra="allow")

    api_key: str = Field(..., min_length=1)
    senderid: str = Field(..., min_length=1)
    type: Literal["text", "unicode"] = "text"
    contacts: str = Field(..., pattern=BD_MOBILE_PATTERN)
    msg: str = Field(..., min_length=1)


class BdWebHost24SMSProvider(BaseSMSProvider):
    name = "bd_web_host_24"
    default_url = "http://sms.bdwebhost24.com/smsapi"

    def map_params(self, recipient: str, message: str, params: Mapping[str, Any]) -> dict[str, Any]:
        try:
            contacts = normalize_bangladeshi_phone(recipient)
        except ValueError:
            contacts = recipient
        return {"contacts": contacts, "msg": message}

    def get_validation_rules(self) -> type[BaseModel]:
        return BdWebHost24Payload

    def parse_response(self, raw: str) -> ProviderResponse:
        text = (raw or "").strip()
        if text.upper().startswith("SMS SUBMITTED"):
            return ProviderResponse(success=True, response=text)
        return ProviderResponse(success=False, response=text or "Empty response from BD Web Host 24 gateway")
