from urllib.parse import parse_qs

import pytest

from conftest import DummyTransport, StubPayload, StubProvider
from sms_service.services import FailureKind, SMSClient
from sms_service.services.outcomes import GenericFailure, ValidationFailure
from sms_service.services.sms_providers import ProviderResponse, SslSMSProvider
from sms_service.services.validation import validate
from sms_service.services import exceptions


class RejectingProvider(StubProvider):
    def parse_response(self, raw):
        self.parsed.append(raw)
        return ProviderResponse(success=False, response="rejected")


class ExplodingProvider(StubProvider):
    def parse_response(self, raw):
        if raw == "boom":
            raise RuntimeError("parser exploded")
        return super().parse_response(raw)


def test_send_single_recipient_success(provider):
    transport = DummyTransport(["OK-1"])
    client = SMSClient(provider, transport=transport)

    report = client.send("8801712345678", "Hello")

    assert report.as_dict() == {
        "summary": {"sent": 1, "failed": 0, "total": 1},
        "log": {
            "sent": {"8801712345678": {"success": True, "response": {"id": "OK-1"}}},
            "failed": {},
        },
    }
    assert len(transport.calls) == 1
    options = transport.calls[0]
    assert options.url == "http://gateway.test/send"
    assert options.method == "POST"
    assert options.timeout_seconds == 30
    assert options.field_count == 3


def test_send_rejected_without_fallback_fails_once():
    provider = RejectingProvider()
    transport = DummyTransport()
    client = SMSClient(provider, transport=transport)

    report = client.send(["8801712345678"], "Hello")

    assert report.as_dict() == {
        "summary": {"sent": 0, "failed": 1, "total": 1},
        "log": {
            "sent": {},
            "failed": {"8801712345678": {"success": False, "response": "rejected"}},
        },
    }
    failure = report.log.failed["8801712345678"]
    assert failure.kind is FailureKind.PROVIDER_REJECTION
    assert failure.code == 500
    assert len(transport.calls) == 1


def test_empty_mapping_fails_with_mapping_message():
    provider = StubProvider(mapping_overrides={"8801700000000": {}})
    client = SMSClient(provider, transport=DummyTransport())

    report = client.send(["8801700000000", "8801711111111"], "Hello")

    failure = report.log.failed["8801700000000"]
    assert isinstance(failure, GenericFailure)
    assert failure.kind is FailureKind.MAPPING_ERROR
    assert failure.code == 422
    assert failure.as_dict() == {"success": False, "response": "Failed to map the params."}
    assert "8801711111111" in report.log.sent


def test_validation_failure_reports_ordered_messages():
    provider = StubProvider(config={})
    transport = DummyTransport()
    client = SMSClient(provider, transport=transport)

    report = client.send("not-a-number", "")

    failure = report.log.failed["not-a-number"]
    assert isinstance(failure, ValidationFailure)
    assert failure.kind is FailureKind.VALIDATION_ERROR
    assert failure.code == 422
    expected = validate({"to": "not-a-number", "text": ""}, StubPayload).messages
    assert failure.response == expected
    assert len(expected) == 3
    assert expected[0] == "The api_key field is required."
    assert expected[1].startswith("The to field is invalid")
    assert expected[2].startswith("The text field is invalid")
    assert transport.calls == []


def test_config_values_win_over_mapped_values():
    provider = StubProvider(config={"api_key": "config-key"})
    transport = DummyTransport()
    client = SMSClient(provider, transport=transport)

    client.send("8801712345678", "Hello", {"api_key": "caller-key", "ref": "42"})

    body = parse_qs(transport.calls[0].body)
    assert body["api_key"] == ["config-key"]
    assert body["ref"] == ["42"]
    assert body["to"] == ["8801712345678"]


def test_transport_error_without_fallback_uses_default_code(provider, transport_error):
    transport = DummyTransport([transport_error()])
    client = SMSClient(provider, transport=transport)

    report = client.send("8801712345678", "Hello")

    failure = report.log.failed["8801712345678"]
    assert failure.kind is FailureKind.TRANSPORT_ERROR
    assert failure.code == 500
    assert failure.response == "HTTP Error # ConnectError | HTTP Error Message: connect fail"
    assert len(transport.calls) == 1


@pytest.mark.parametrize("code, expected", [(503, 503), (42, 500), (None, 500)])
def test_transport_error_code_normalization(provider, transport_error, code, expected):
    client = SMSClient(provider, transport=DummyTransport([transport_error("gateway down", code=code)]))

    report = client.send("8801712345678", "Hello")

    assert report.log.failed["8801712345678"].code == expected


def test_one_failure_does_not_stop_batch(provider, transport_error):
    transport = DummyTransport(["OK-1", transport_error(), "OK-3"])
    client = SMSClient(provider, transport=transport)
    recipients = ["8801711111111", "8801722222222", "8801733333333"]

    report = client.send(recipients, "Hello")

    assert report.summary.as_dict() == {"sent": 2, "failed": 1, "total": 3}
    assert list(report.log.sent) == ["8801711111111", "8801733333333"]
    assert list(report.log.failed) == ["8801722222222"]
    for recipient in recipients:
        assert (recipient in report.log.sent) != (recipient in report.log.failed)


def test_unexpected_provider_error_is_recorded():
    provider = ExplodingProvider()
    client = SMSClient(provider, transport=DummyTransport(["boom", "OK-2"]))

    report = client.send(["8801711111111", "8801722222222"], "Hello")

    failure = report.log.failed["8801711111111"]
    assert failure.kind is FailureKind.INTERNAL_ERROR
    assert failure.code == 500
    assert failure.response == "parser exploded"
    assert "8801722222222" in report.log.sent


def test_send_is_idempotent_for_deterministic_provider(provider):
    client = SMSClient(provider, transport=DummyTransport(default="OK"))
    recipients = ["8801711111111", "bad", "8801733333333"]

    first = client.send(recipients, "Hello").as_dict()
    second = client.send(recipients, "Hello").as_dict()

    assert first == second
    assert first["summary"] == {"sent": 2, "failed": 1, "total": 3}


def test_fallback_retry_succeeds_after_transport_error(provider, transport_error):
    transport = DummyTransport([transport_error(), "OK-retry"])
    client = SMSClient(provider, transport=transport)

    report = client.send_with_fallback("8801712345678", "Hello")

    assert report.as_dict() == {
        "summary": {"sent": 1, "failed": 0, "total": 1},
        "log": {
            "sent": {"8801712345678": {"success": True, "response": {"id": "OK-retry"}}},
            "failed": {},
        },
    }
    # The placeholder empty reply is parsed before the retry.
    assert provider.parsed == ["", "OK-retry"]
    assert transport.calls[0] == transport.calls[1]


def test_fallback_retry_after_rejection_fails_with_500():
    provider = RejectingProvider()
    transport = DummyTransport()
    client = SMSClient(provider, transport=transport)

    report = client.send_with_fallback("8801712345678", "Hello")

    failure = report.log.failed["8801712345678"]
    assert failure.kind is FailureKind.PROVIDER_REJECTION
    assert failure.code == 500
    assert failure.response == "rejected"
    assert report.summary.as_dict() == {"sent": 0, "failed": 1, "total": 1}
    assert len(transport.calls) == 2


def test_fallback_retry_transport_error_is_recorded(provider, transport_error):
    transport = DummyTransport(["NOPE", transport_error("second attempt timed out")])
    client = SMSClient(provider, transport=transport)

    report = client.send_with_fallback("8801712345678", "Hello")

    failure = report.log.failed["8801712345678"]
    assert failure.kind is FailureKind.TRANSPORT_ERROR
    assert failure.code == 500
    assert failure.response == "second attempt timed out"
    assert "8801712345678" not in report.log.sent


def test_fallback_does_not_retry_on_first_success(provider):
    transport = DummyTransport(["OK-1"])
    client = SMSClient(provider, transport=transport)

    report = client.send_with_fallback(["8801712345678"], "Hello")

    assert report.summary.sent == 1
    assert len(transport.calls) == 1


def test_fallback_does_not_retry_validation_failures():
    provider = StubProvider(config={})
    transport = DummyTransport()
    client = SMSClient(provider, transport=transport)

    report = client.send_with_fallback("8801712345678", "Hello")

    assert isinstance(report.log.failed["8801712345678"], ValidationFailure)
    assert transport.calls == []


def test_duplicate_recipients_collapse_to_one_entry(provider):
    client = SMSClient(provider, transport=DummyTransport(["NOPE", "OK-2"]))

    report = client.send(["8801712345678", "8801712345678"], "Hello")

    assert report.summary.as_dict() == {"sent": 1, "failed": 0, "total": 1}


def test_from_settings_builds_configured_provider(settings_env):
    settings_env(SMS_PROVIDER="SSL", SMS_PROVIDER_URL="http://ssl.test/pushapi", SMS_REQUEST_TIMEOUT="12")

    client = SMSClient.from_settings(transport=DummyTransport())

    assert isinstance(client.provider, SslSMSProvider)
    assert client.provider.get_url() == "http://ssl.test/pushapi"
    assert client.provider.get_config() == {"user": "test-user", "pass": "test-pass", "sid": "TESTSID"}
    assert client.timeout_seconds == 12


def test_from_settings_rejects_unknown_provider(settings_env):
    settings_env(SMS_PROVIDER="carrier-pigeon")

    with pytest.raises(exceptions.ConfigurationError):
        SMSClient.from_settings()


def test_fallback_both_transport_attempts_fail_keeps_retry_error(provider, transport_error):
    transport = DummyTransport([transport_error("first attempt refused"), transport_error("second attempt refused")])
    client = SMSClient(provider, transport=transport)

    report = client.send_with_fallback("8801712345678", "Hello")

    failure = report.log.failed["8801712345678"]
    assert failure.kind is FailureKind.TRANSPORT_ERROR
    assert failure.code == 500
    assert failure.response == "second attempt refused"
    assert report.summary.as_dict() == {"sent": 0, "failed": 1, "total": 1}
    assert len(transport.calls) == 2
