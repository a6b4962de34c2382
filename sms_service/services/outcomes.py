from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Union

from .sms_providers.base import ProviderResponse


class FailureKind(str, enum.Enum):
    MAPPING_ERROR = "MappingError"
    VALIDATION_ERROR = "ValidationError"
    TRANSPORT_ERROR = "TransportError"
    PROVIDER_REJECTION = "ProviderRejection"
    INTERNAL_ERROR = "InternalError"


@dataclass(slots=True)
class ValidationFailure:
    """Failure carrying every message reported for the request fields."""

    kind: FailureKind
    messages: list[str]
    code: int = 422
    success: bool = False

    @property
    def response(self) -> list[str]:
        return list(self.messages)

    def as_dict(self) -> dict[str, Any]:
        return {"success": False, "response": self.response}


@dataclass(slots=True)
class GenericFailure:
    kind: FailureKind
    message: Any
    code: int = 500
    success: bool = False

    @property
    def response(self) -> Any:
        return self.message

    def as_dict(self) -> dict[str, Any]:
        return {"success": False, "response": self.response}


Failure = Union[ValidationFailure, GenericFailure]


@dataclass(slots=True)
class Sent:
    response: ProviderResponse


SendOutcome = Union[Sent, ValidationFailure, GenericFailure]


@dataclass(slots=True)
class DispatchLog:
    sent: dict[str, ProviderResponse] = field(default_factory=dict)
    failed: dict[str, Failure] = field(default_factory=dict)

    def record_sent(self, recipient: str, response: ProviderResponse) -> None:
        self.failed.pop(recipient, None)
        self.sent[recipient] = response

    def record_failed(self, recipient: str, failure: Failure) -> None:
        self.sent.pop(recipient, None)
        self.failed[recipient] = failure

    def record(self, recipient: str, outcome: SendOutcome) -> None:
        if isinstance(outcome, Sent):
            self.record_sent(recipient, outcome.response)
        else:
            self.record_failed(recipient, outcome)

    def as_dict(self) -> dict[str, Any]:
        return {
            "sent": {recipient: response.as_dict() for recipient, response in self.sent.items()},
            "failed": {recipient: failure.as_dict() for recipient, failure in self.failed.items()},
        }


@dataclass(frozen=True, slots=True)
class DispatchSummary:
    sent: int
    failed: int
    total: int

    def as_dict(self) -> dict[str, int]:
        return {"sent": self.sent, "failed": self.failed, "total": self.total}


@dataclass(slots=True)
class DispatchReport:
    summary: DispatchSummary
    log: DispatchLog

    def as_dict(self) -> dict[str, Any]:
        return {"summary": self.summary.as_dict(), "log": self.log.as_dict()}
