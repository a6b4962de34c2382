from typing import Any


class ServiceError(Exception):
    """Base exception for service-level errors.

    ``code`` mirrors an HTTP status. Errors without one are reported as 500
    once they reach the dispatch log.
    """

    code: int | None = None

    def __init__(self, message: str = "", *, code: int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ConfigurationError(ServiceError):
    pass


class MappingError(ServiceError):
    code = 422


class ValidationError(ServiceError):
    code = 422

    def __init__(self, messages: list[str]):
        super().__init__("; ".join(messages))
        self.messages = list(messages)


class TransportError(ServiceError):
    pass


class ProviderRejection(ServiceError):
    code = 500

    def __init__(self, detail: Any):
        super().__init__(detail if isinstance(detail, str) else str(detail))
        self.detail = detail
