from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import urlencode

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class RequestOptions:
    url: str
    body: str
    field_count: int
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    method: str = "POST"


def build_request_options(
    url: str,
    data: Mapping[str, Any],
    *,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> RequestOptions:
    """Encode validated request fields as a form body for ``url``."""

    return RequestOptions(
        url=url,
        body=urlencode(data, doseq=True),
        field_count=len(data),
        timeout_seconds=timeout_seconds,
    )
