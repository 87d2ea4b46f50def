import json
import logging

import pytest
from typer.testing import CliRunner

from cli.main import app
from core.models import (
    AuditReport,
    AwsIdentity,
    AwsIdentityError,
    ProviderError,
    RequiredTagSet,
    ResourceRecord,
)


runner = CliRunner()


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    # setup_logging aponta o handler para o stderr do CliRunner
    logging.getLogger().handlers.clear()


@pytest.fixture
def fake_identity(monkeypatch):
    import core.engine.identity_engine as identity

    calls = []

    def _identity(profile=None, region=None, config=None):
        calls.append({"profile": profile, "region": region, "config": config})
        return AwsIdentity(
            account="123456789012",
            arn="arn:aws:iam::123456789012:user/auditor",
            user_id="AIDA",
            region=region,
            profile=profile,
        )

    monkeypatch.setattr(identity, "get_current_aws_identity", _identity)
    return calls


@pytest.fixture
def fake_audit(monkeypatch, fake_identity):
    import importlib

    cmd = importlib.import_module("cli.commands.audit")
    calls = []

    def _audit_resources(services, required_tags, settings):
        calls.append({"services": list(services), "required_tags": required_tags, "settings": settings})
        record = ResourceRecord.build(
            service="EC2",
            resource_id="i-1234567890abcdef0",
            resource_type="Instance",
            tags={"Name": "webserver", "environment": "production"},
            required_tags=required_tags,
        )
        return AuditReport([record])

    monkeypatch.setattr(cmd, "audit_resources", _audit_resources)
    return calls


def test_cli_audit_json(fake_audit):
    res = runner.invoke(app, ["audit", "-t", "environment,project,owner", "-o", "json"])

    assert res.exit_code == 0, res.output
    payload = json.loads(res.stdout)
    assert payload["resources"][0]["missing_tags"] == ["project", "owner"]
    assert fake_audit[0]["required_tags"] == RequiredTagSet.from_list(["environment", "project", "owner"])
    assert fake_audit[0]["services"] == ["ec2", "s3", "rds", "lambda"]


def test_cli_audit_csv(fake_audit):
    res = runner.invoke(app, ["audit", "--required-tags", "environment,project", "-t", "owner", "--output", "csv"])

    assert res.exit_code == 0, res.output
    lines = res.stdout.splitlines()
    assert lines[0] == "Service,Resource ID,Resource Type,Tags,Missing Tags"
    assert lines[1] == 'EC2,i-1234567890abcdef0,Instance,"Name:webserver; environment:production","project; owner"'


def test_cli_audit_text_is_default(fake_audit):
    res = runner.invoke(app, ["audit", "-t", "environment"])

    assert res.exit_code == 0, res.output
    assert "Resource ID: i-1234567890abcdef0" in res.stdout
    assert "Missing Tags:" not in res.stdout


def test_cli_audit_services_option(fake_audit):
    res = runner.invoke(app, ["audit", "-t", "owner", "-s", "EC2,s3", "-s", "unknown"])

    assert res.exit_code == 0, res.output
    assert fake_audit[0]["services"] == ["EC2", "s3", "unknown"]


def test_cli_audit_rejects_unknown_output_before_auditing(fake_audit):
    res = runner.invoke(app, ["audit", "-t", "owner", "-o", "xml"])

    assert res.exit_code != 0
    assert fake_audit == []


def test_cli_audit_requires_required_tags(fake_audit):
    res = runner.invoke(app, ["audit"])

    assert res.exit_code != 0
    assert fake_audit == []


def test_cli_audit_error_exits_non_zero(monkeypatch, fake_identity):
    import importlib

    cmd = importlib.import_module("cli.commands.audit")

    def _fail(services, required_tags, settings):
        raise ProviderError("s3", "failed to list S3 buckets", RuntimeError("AccessDenied"))

    monkeypatch.setattr(cmd, "audit_resources", _fail)

    res = runner.invoke(app, ["audit", "-t", "owner", "-o", "json"])

    assert res.exit_code == 1
    assert "failed to list S3 buckets" in res.output
    assert '"resources"' not in res.output


def test_cli_audit_identity_failure_stops_before_audit(monkeypatch, fake_audit):
    import core.engine.identity_engine as identity

    def _no_creds(profile=None, region=None, config=None):
        raise AwsIdentityError("unable to resolve current AWS identity: no credentials")

    monkeypatch.setattr(identity, "get_current_aws_identity", _no_creds)

    res = runner.invoke(app, ["audit", "-t", "owner"])

    assert res.exit_code == 1
    assert fake_audit == []


def test_cli_audit_reads_config_file(fake_audit, tmp_path):
    cfg = tmp_path / "auditor.yaml"
    cfg.write_text("region: eu-west-1\nservices: [rds]\ntimeout: 30\n", encoding="utf-8")

    res = runner.invoke(app, ["audit", "-t", "owner", "--config", str(cfg)])

    assert res.exit_code == 0, res.output
    assert fake_audit[0]["services"] == ["rds"]
    assert fake_audit[0]["settings"].region == "eu-west-1"
    assert fake_audit[0]["settings"].timeout == 30.0


def test_cli_audit_bad_config_is_usage_error(fake_audit, tmp_path):
    cfg = tmp_path / "auditor.yaml"
    cfg.write_text("- not a mapping\n", encoding="utf-8")

    res = runner.invoke(app, ["audit", "-t", "owner", "--config", str(cfg)])

    assert res.exit_code != 0
    assert fake_audit == []


def test_cli_audit_identity_check_uses_client_timeouts(fake_identity, fake_audit, tmp_path):
    cfg = tmp_path / "auditor.yaml"
    cfg.write_text("connect_timeout: 2\nread_timeout: 4\n", encoding="utf-8")

    res = runner.invoke(app, ["audit", "-t", "owner", "--config", str(cfg), "--region", "us-east-1"])

    assert res.exit_code == 0, res.output
    config = fake_identity[0]["config"]
    assert config.connect_timeout == 2
    assert config.read_timeout == 4
    assert config.retries["total_max_attempts"] == 1
    assert fake_identity[0]["region"] == "us-east-1"


def test_cli_audit_only_unknown_services_needs_no_credentials(monkeypatch, tmp_path):
    for var in ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_SESSION_TOKEN", "AWS_PROFILE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "missing-config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "missing-credentials"))
    monkeypatch.setenv("AWS_EC2_METADATA_DISABLED", "true")

    res = runner.invoke(app, ["audit", "-t", "owner", "-s", "nope,other", "-o", "json", "--region", "us-east-1"])

    assert res.exit_code == 0, res.output
    payload = json.loads(res.stdout)
    assert payload["resources"] == []
    assert payload["summary"]["total_resources"] == 0


@pytest.mark.parametrize("value", ["0", "-5"])
def test_cli_audit_rejects_non_positive_timeout(fake_audit, value):
    res = runner.invoke(app, ["audit", "-t", "owner", "--timeout", value])

    assert res.exit_code != 0
    assert fake_audit == []
