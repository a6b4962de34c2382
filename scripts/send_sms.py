from pathlib import Path
import argparse
import json
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sms_service.core.config import get_settings
from sms_service.core.logging import configure_logging
from sms_service.services import SMSClient, exceptions
from sms_service.services.sms_providers import default_registry


def _parse_param(value: str) -> tuple[str, str]:
    key, sep, param_value = value.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected key=value, got {value!r}")
    return key, param_value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send an SMS to one or more recipients.")
    parser.add_argument("recipients", nargs="+", help="Recipient phone numbers")
    parser.add_argument("-m", "--message", required=True, help="Message text")
    parser.add_argument("--provider", help="Provider name (defaults to SMS_PROVIDER)")
    parser.add_argument("--url", help="Override the provider URL")
    parser.add_argument("--fallback", action="store_true", help="Retry once on failure")
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        type=_parse_param,
        help="Extra provider param as key=value (repeatable)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    settings = get_settings()

    try:
        provider = default_registry().create(
            args.provider or settings.SMS_PROVIDER,
            settings.SMS_PROVIDER_CONFIG,
            args.url or settings.SMS_PROVIDER_URL,
        )
    except exceptions.ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    client = SMSClient(provider, timeout_seconds=settings.SMS_REQUEST_TIMEOUT)

    params = dict(args.param)
    if args.fallback or settings.SMS_USE_FALLBACK:
        report = client.send_with_fallback(args.recipients, args.message, params)
    else:
        report = client.send(args.recipients, args.message, params)

    print(json.dumps(report.as_dict(), indent=2, ensure_ascii=False, default=str))
    return 1 if report.summary.failed else 0


if __name__ == "__main__":
    sys.exit(main())
