from __future__ import annotations

import json
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

from sms_service.core.phone import BD_MOBILE_PATTERN, normalize_bangladeshi_phone

from .base import BaseSMSProvider, ProviderResponse


class BoomCastPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    userName: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    MsgType: str = Field(default="TEXT")
    masking: str = Field(..., min_length=1)
    receiver: str = Field(..., pattern=BD_MOBILE_PATTERN)
    message: str = Field(..., min_length=1)


class BoomCastSMSProvider(BaseSMSProvider):
    name = "boom_cast"
    default_url = (
        "http://api.boom-cast.com/boomcast/WebFramework/boomCastWebService/"
        "externalApiSendTextMessage.php"
    )

    def map_params(self, recipient: str, message: str, params: Mapping[str, Any]) -> dict[str, Any]:
        try:
            receiver = normalize_bangladeshi_phone(recipient)
        except ValueError:
            receiver = recipient
        return {"receiver": receiver, "message": message}

    def get_validation_rules(self) -> type[BaseModel]:
        return BoomCastPayload

    def parse_response(self, raw: str) -> ProviderResponse:
        if not raw:
            return ProviderResponse(success=False, response="Empty response from Boom Cast gateway")
        try:
            payload = json.loads(raw)
        except ValueError:
            return ProviderResponse(success=False, response=raw)

        # The gateway replies with a one-element list per submitted message.
        entry = payload[0] if isinstance(payload, list) and payload else payload
        if isinstance(entry, dict) and str(entry.get("success")) == "1":
            return ProviderResponse(success=True, response=entry)
        return ProviderResponse(success=False, response=entry)
