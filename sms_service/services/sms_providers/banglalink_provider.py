from __future__ import annotations

import re
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

from sms_service.core.phone import BD_MOBILE_PATTERN, normalize_bangladeshi_phone

from .base import BaseSMSProvider, ProviderResponse

_SUCCESS_COUNT = re.compile(r"Success\s*Count\s*:\s*(\d+)", re.IGNORECASE)


class BanglalinkPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    userID: str = Field(..., min_length=1)
    passwd: str = Field(..., min_length=1)
    sender: str = Field(..., min_length=1)
    msisdn: str = Field(..., pattern=BD_MOBILE_PATTERN)
    message: str = Field(..., min_length=1)


class BanglalinkSMSProvider(BaseSMSProvider):
    name = "banglalink"
    default_url = "https://vas.banglalinkgsm.com/sendSMS/sendSMS"

    def map_params(self, recipient: str, message: str, params: Mapping[str, Any]) -> dict[str, Any]:
        try:
            msisdn = normalize_bangladeshi_phone(recipient)
        except ValueError:
            msisdn = recipient
        return {"msisdn": msisdn, "message": message}

    def get_validation_rules(self) -> type[BaseModel]:
        return BanglalinkPayload

    def parse_response(self, raw: str) -> ProviderResponse:
        text = (raw or "").strip()
        match = _SUCCESS_COUNT.search(text)
        if match and int(match.group(1)) > 0:
            return ProviderResponse(success=True, response=text)
        return ProviderResponse(success=False, response=text or "Empty response from Banglalink gateway")
