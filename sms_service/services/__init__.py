from .outcomes import DispatchLog, DispatchReport, DispatchSummary, FailureKind
from .sms_client import SMSClient
from .transport import HttpTransport

__all__ = [
    "DispatchLog",
    "DispatchReport",
    "DispatchSummary",
    "FailureKind",
    "HttpTransport",
    "SMSClient",
]
