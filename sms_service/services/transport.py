import logging
from typing import Optional

import httpx

from . import exceptions
from .request_builder import RequestOptions

logger = logging.getLogger("sms_service.transport")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class HttpTransport:
    """Blocking form POST to an SMS gateway.

    A fresh ``httpx.Client`` is opened per call and closed on every exit path.
    Connection failures, timeouts and empty replies surface as
    ``exceptions.TransportError`` whose message names the httpx error class.
    """

    def __init__(self, transport: Optional[httpx.BaseTransport] = None):
        self._transport = transport

    def execute(self, options: RequestOptions) -> str:
        _, body = self.execute_with_status(options)
        return body

    def execute_with_status(self, options: RequestOptions) -> tuple[int, str]:
        headers = {"Content-Type": FORM_CONTENT_TYPE}
        logger.debug(
            "Gateway request %s %s | fields=%s | timeout=%s",
            options.method,
            options.url,
            options.field_count,
            options.timeout_seconds,
        )
        with httpx.Client(timeout=options.timeout_seconds, transport=self._transport) as client:
            try:
                response = client.request(options.method, options.url, content=options.body, headers=headers)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                message = self._error_message(type(exc).__name__, str(exc) or repr(exc))
                logger.error("Gateway request to %s failed: %s", options.url, message)
                raise exceptions.TransportError(message) from exc

            status_code = response.status_code
            body = response.text

        if not body:
            message = self._error_message("EmptyResponse", f"gateway returned an empty body (HTTP {status_code})")
            logger.error("Gateway request to %s failed: %s", options.url, message)
            raise exceptions.TransportError(message)

        return status_code, body

    @staticmethod
    def _error_message(code: str, description: str) -> str:
        return f"HTTP Error # {code} | HTTP Error Message: {description}"
