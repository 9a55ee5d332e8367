import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from minecraft_ondemand import preflight
from minecraft_ondemand.errors import CrossUnitOrderingViolation, LookupFailure


def test_ensure_published_returns_value(monkeypatch):
    calls = []

    def fake_read(name, region, client=None):
        calls.append((name, region))
        return "Z123EXAMPLE"

    monkeypatch.setattr(preflight, "read_parameter", fake_read)

    assert preflight.ensure_published("hostedZoneIdKey") == "Z123EXAMPLE"
    assert calls == [("hostedZoneIdKey", "us-east-1")]


def test_ensure_published_missing_is_ordering_violation(monkeypatch):
    def fake_read(name, region, client=None):
        raise LookupFailure(f"SSM parameter {name} not found in {region}")

    monkeypatch.setattr(preflight, "read_parameter", fake_read)

    with pytest.raises(CrossUnitOrderingViolation, match="Deploy the DNS stack"):
        preflight.ensure_published("missingKey", "us-east-1")


def test_main_prints_value(monkeypatch, capsys):
    monkeypatch.setattr(
        preflight, "read_parameter", lambda name, region, client=None: "Z123EXAMPLE"
    )

    exit_code = preflight.main(["-p", "hostedZoneIdKey", "-r", "us-east-1"])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "Z123EXAMPLE"


def test_main_missing_parameter_exits_non_zero(monkeypatch, caplog):
    def fake_read(name, region, client=None):
        raise LookupFailure(f"SSM parameter {name} not found in {region}")

    monkeypatch.setattr(preflight, "read_parameter", fake_read)

    exit_code = preflight.main(["--parameter-name", "missingKey"])

    assert exit_code == 1
    assert "missingKey" in caplog.text


def test_main_unreachable_store_names_parameter(monkeypatch, caplog):
    def fake_read(name, region, client=None):
        raise EndpointConnectionError(endpoint_url="https://ssm.us-east-1.amazonaws.com/")

    monkeypatch.setattr(preflight, "read_parameter", fake_read)

    exit_code = preflight.main(["-p", "hostedZoneIdKey", "-r", "us-east-1"])

    assert exit_code == 1
    assert "Could not read hostedZoneIdKey in us-east-1" in caplog.text


def test_main_access_denied_exits_non_zero(monkeypatch, caplog):
    def fake_read(name, region, client=None):
        raise ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "denied"}},
            "GetParameter",
        )

    monkeypatch.setattr(preflight, "read_parameter", fake_read)

    assert preflight.main(["-p", "hostedZoneIdKey"]) == 1
    assert "hostedZoneIdKey" in caplog.text
