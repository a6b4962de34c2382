from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping

from defusedxml import DefusedXmlException, ElementTree
from pydantic import BaseModel, ConfigDict, Field

from sms_service.core.phone import BD_MOBILE_PATTERN, normalize_bangladeshi_phone

from .base import BaseSMSProvider, ProviderResponse

logger = logging.getLogger(__name__)


class SslPushPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    user: str = Field(..., min_length=1)
    password: str = Field(..., alias="pass", min_length=1)
    sid: str = Field(..., min_length=1)
    msisdn: str = Field(..., pattern=BD_MOBILE_PATTERN)
    sms: str = Field(..., min_length=1)
    csmsid: str = Field(..., min_length=1, max_length=20)


class SslSMSProvider(BaseSMSProvider):
    """SSL Wireless push API.

    The gateway answers with an XML ``REPLY`` document. A message is accepted
    only when the login succeeded and a ``REFERENCEID`` was issued for it.
    """

    name = "ssl"
    default_url = "http://sms.sslwireless.com/pushapi"

    def map_params(self, recipient: str, message: str, params: Mapping[str, Any]) -> dict[str, Any]:
        try:
            msisdn = normalize_bangladeshi_phone(recipient)
        except ValueError:
            msisdn = recipient
        return {
            "msisdn": msisdn,
            "sms": message,
            "csmsid": str(params.get("csmsid") or uuid.uuid4().hex[:20]),
        }

    def get_validation_rules(self) -> type[BaseModel]:
        return SslPushPayload

    def parse_response(self, raw: str) -> ProviderResponse:
        if not raw:
            return ProviderResponse(success=False, response="Empty response from SSL gateway")
        try:
            reply = ElementTree.fromstring(raw)
        except (ElementTree.ParseError, DefusedXmlException):
            logger.warning("Unreadable SSL gateway reply: %s", raw[:200])
            return ProviderResponse(success=False, response=raw)

        parameter = (reply.findtext("PARAMETER") or "").strip().upper()
        login = (reply.findtext("LOGIN") or "").strip().upper()
        sms_info = reply.find("SMSINFO")
        reference_id = sms_info.findtext("REFERENCEID") if sms_info is not None else None

        if parameter != "OK":
            return ProviderResponse(success=False, response=f"Invalid parameters: {parameter or 'UNKNOWN'}")
        if login != "SUCCESSFULL":
            return ProviderResponse(success=False, response=f"Login failed: {login or 'UNKNOWN'}")
        if not reference_id:
            return ProviderResponse(success=False, response="SMS was not accepted by SSL gateway")

        return ProviderResponse(
            success=True,
            response={child.tag.lower(): (child.text or "").strip() for child in sms_info},
        )
