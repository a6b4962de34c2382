import logging
from typing import Any, Iterable, Mapping, Optional, Union

from sms_service.core.config import get_settings

from . import exceptions
from .aggregator import build_report
from .outcomes import (
    DispatchLog,
    DispatchReport,
    Failure,
    FailureKind,
    GenericFailure,
    Sent,
    SendOutcome,
    ValidationFailure,
)
from .request_builder import DEFAULT_TIMEOUT_SECONDS, RequestOptions, build_request_options
from .sms_providers import BaseSMSProvider, ProviderRegistry, ProviderResponse, default_registry
from .transport import HttpTransport
from .validation import validate

logger = logging.getLogger(__name__)

MAPPING_FAILED_MESSAGE = "Failed to map the params."

_FAILURE_KINDS: tuple[tuple[type[exceptions.ServiceError], FailureKind], ...] = (
    (exceptions.MappingError, FailureKind.MAPPING_ERROR),
    (exceptions.ValidationError, FailureKind.VALIDATION_ERROR),
    (exceptions.TransportError, FailureKind.TRANSPORT_ERROR),
    (exceptions.ProviderRejection, FailureKind.PROVIDER_REJECTION),
)


class SMSClient:
    """Sends one message to many recipients through a single SMS provider.

    Every recipient is processed on its own: a failure for one number is
    recorded in the report and the batch moves on. ``send`` makes one attempt
    per recipient, ``send_with_fallback`` retries once when the gateway
    rejects the message or the first request does not complete.
    """

    def __init__(
        self,
        provider: BaseSMSProvider,
        *,
        transport: Optional[HttpTransport] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.provider = provider
        self.transport = transport or HttpTransport()
        self.timeout_seconds = timeout_seconds
        self.sms_logger = logging.getLogger("sms_service.sms")

    @classmethod
    def from_settings(
        cls,
        *,
        registry: Optional[ProviderRegistry] = None,
        transport: Optional[HttpTransport] = None,
    ) -> "SMSClient":
        settings = get_settings()
        provider = (registry or default_registry()).create(
            settings.SMS_PROVIDER,
            settings.SMS_PROVIDER_CONFIG,
            settings.SMS_PROVIDER_URL,
        )
        return cls(provider, transport=transport, timeout_seconds=settings.SMS_REQUEST_TIMEOUT)

    def send(
        self,
        recipients: Union[str, Iterable[str]],
        message: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> DispatchReport:
        return self.dispatch(recipients, message, params, fallback=False)

    def send_with_fallback(
        self,
        recipients: Union[str, Iterable[str]],
        message: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> DispatchReport:
        return self.dispatch(recipients, message, params, fallback=True)

    def dispatch(
        self,
        recipients: Union[str, Iterable[str]],
        message: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        fallback: bool = False,
    ) -> DispatchReport:
        log = DispatchLog()
        extra = dict(params or {})

        for recipient in self._normalize_recipients(recipients):
            outcome = self._process(recipient, message, extra, fallback=fallback, log=log)
            log.record(recipient, outcome)

        report = build_report(log)
        self.sms_logger.info(
            "SMS dispatch finished | provider=%s | sent=%s | failed=%s | total=%s | fallback=%s",
            self.provider.name,
            report.summary.sent,
            report.summary.failed,
            report.summary.total,
            fallback,
        )
        return report

    def _process(
        self,
        recipient: str,
        message: str,
        params: Mapping[str, Any],
        *,
        fallback: bool,
        log: DispatchLog,
    ) -> SendOutcome:
        try:
            options = self._prepare(recipient, message, params)
            if fallback:
                response = self._execute_with_fallback(recipient, options, log)
            else:
                response = self.provider.parse_response(self.transport.execute(options))
                if not response.success:
                    raise exceptions.ProviderRejection(response.response)
        except exceptions.ServiceError as exc:
            failure = self._failure_from_error(exc)
            self.sms_logger.warning(
                "SMS not sent | recipient=%s | kind=%s | code=%s | response=%s",
                recipient,
                failure.kind.value,
                failure.code,
                failure.response,
            )
            return failure
        except Exception as exc:
            logger.exception("Unexpected error while sending SMS | recipient=%s", recipient)
            return GenericFailure(kind=FailureKind.INTERNAL_ERROR, message=str(exc), code=500)

        self.sms_logger.info("SMS sent | recipient=%s | provider=%s", recipient, self.provider.name)
        return Sent(response)

    def _prepare(self, recipient: str, message: str, params: Mapping[str, Any]) -> RequestOptions:
        mapped = self.provider.map_params(recipient, message, params)
        if not mapped:
            raise exceptions.MappingError(MAPPING_FAILED_MESSAGE)

        # Provider config wins over mapped recipient fields on key collision.
        data = {**mapped, **self.provider.get_config()}

        result = validate(data, self.provider.get_validation_rules())
        if not result.passed:
            raise exceptions.ValidationError(result.messages)

        return build_request_options(self.provider.get_url(), data, timeout_seconds=self.timeout_seconds)

    def _execute_with_fallback(self, recipient: str, options: RequestOptions, log: DispatchLog) -> ProviderResponse:
        try:
            raw = self.transport.execute(options)
        except exceptions.TransportError as exc:
            log.record_failed(recipient, self._failure_from_error(exc))
            raw = ""

        response = self.provider.parse_response(raw)
        if response.success:
            return response

        self.sms_logger.info("SMS sending failed response! | recipient=%s", recipient)
        try:
            response = self.provider.parse_response(self.transport.execute(options))
            self.sms_logger.info("Second try of sending SMS | recipient=%s | response=%s", recipient, response.as_dict())
            if not response.success:
                raise exceptions.ProviderRejection(response.response)
        except exceptions.ServiceError as exc:
            self.sms_logger.error("Second try of sending SMS failed | recipient=%s | error=%s", recipient, exc)
            raise
        return response

    @staticmethod
    def _failure_from_error(exc: exceptions.ServiceError) -> Failure:
        code = exc.code if exc.code is not None and exc.code >= 100 else 500
        kind = next(
            (kind for error_type, kind in _FAILURE_KINDS if isinstance(exc, error_type)),
            FailureKind.INTERNAL_ERROR,
        )
        if isinstance(exc, exceptions.ValidationError):
            return ValidationFailure(kind=kind, messages=exc.messages, code=code)
        detail = exc.detail if isinstance(exc, exceptions.ProviderRejection) else exc.message
        return GenericFailure(kind=kind, message=detail, code=code)

    @staticmethod
    def _normalize_recipients(recipients: Union[str, Iterable[str]]) -> list[str]:
        if isinstance(recipients, str):
            return [recipients]
        return [str(recipient) for recipient in recipients]
